# ============================================================================
# dye_profile/analysis/waterfall.py - 瀑布图数据
# ============================================================================

import logging
from dataclasses import dataclass
from typing import List

import numpy as np

from ..utils.file_utils import collect_profile_csvs
from .solvent_front import read_profile_csv

logger = logging.getLogger(__name__)

DOWNSAMPLE_FACTOR = 5


@dataclass
class WaterfallSeries:
    """一个 RPM 的降采样曲线：三个重复的平均值与标准差"""

    rpm: int
    distance: np.ndarray
    mean: np.ndarray
    std: np.ndarray


def load_series(path, rpm: int, downsample: int = DOWNSAMPLE_FACTOR) -> WaterfallSeries:
    distance, replicates = read_profile_csv(path)
    stacked = np.column_stack(replicates)

    step = max(1, int(downsample))
    distance = distance[::step]
    stacked = stacked[::step]

    logger.info(
        f"文件 {path} 距离范围: {distance.min():.2f} 到 {distance.max():.2f} "
        f"(降采样后 {len(distance)} 个点)"
    )
    return WaterfallSeries(
        rpm=rpm,
        distance=distance,
        mean=stacked.mean(axis=1),
        std=stacked.std(axis=1, ddof=1),
    )


def load_waterfall(folder, downsample: int = DOWNSAMPLE_FACTOR) -> List[WaterfallSeries]:
    """按 RPM 升序加载目录下所有曲线"""
    files = collect_profile_csvs(folder)
    if not files:
        raise FileNotFoundError(f"目录中没有可用的 CSV 文件: {folder}")
    return [load_series(path, rpm, downsample) for rpm, path in files]


def validate_axis(distance_lower: float, distance_upper: float, divisions: int):
    if distance_lower >= distance_upper:
        raise ValueError("距离下界必须小于上界")
    if divisions < 2:
        raise ValueError("刻度分段数至少为 2")
