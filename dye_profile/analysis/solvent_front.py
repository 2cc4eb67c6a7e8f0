# ============================================================================
# dye_profile/analysis/solvent_front.py - 溶剂前沿距离
# ============================================================================

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from ..utils.file_utils import collect_profile_csvs

logger = logging.getLogger(__name__)

REFERENCE_WINDOW = 10.0
FRONT_THRESHOLD = 0.05
CI_Z = 1.96


def read_profile_csv(path) -> Tuple[np.ndarray, List[np.ndarray]]:
    """读取曲线 CSV，返回 (距离, [R1, R2, R3])"""
    df = pd.read_csv(path)
    if df.shape[1] < 4:
        raise ValueError(f"CSV 列数不足 (需要距离 + 3 个重复): {path}")
    values = df.to_numpy(dtype=np.float64)
    return values[:, 0], [values[:, i] for i in range(1, 4)]


def confidence_interval(mean, std, n: int = 3, z: float = CI_Z):
    """均值的 95% 置信区间 mean ± z * std / sqrt(n)"""
    half = z * np.asarray(std) / math.sqrt(n)
    return mean - half, mean + half


def reference_intensity(distance: np.ndarray, intensity: np.ndarray,
                        window: float = REFERENCE_WINDOW) -> float:
    """距离最大端 ``window`` 范围内的平均强度"""
    mask = distance >= (np.max(distance) - window)
    return float(np.mean(intensity[mask]))


def find_solvent_front(distance: np.ndarray, intensity: np.ndarray,
                       threshold: float = FRONT_THRESHOLD,
                       window: float = REFERENCE_WINDOW) -> float:
    """从最后一行向前扫描，返回第一个强度不超过 参考强度 + threshold 的距离

    找不到时返回 0.0。
    """
    reference = reference_intensity(distance, intensity, window)
    for i in range(len(distance) - 1, -1, -1):
        if intensity[i] <= reference + threshold:
            return float(distance[i])
    return 0.0


@dataclass
class SolventFrontResult:
    """单个 RPM 的溶剂前沿结果"""

    rpm: int
    distances: Tuple[float, float, float]
    mean: float
    std: float

    @property
    def ci_lower(self) -> float:
        return confidence_interval(self.mean, self.std)[0]

    @property
    def ci_upper(self) -> float:
        return confidence_interval(self.mean, self.std)[1]


def solvent_front_for_file(path, rpm: int, threshold: float = FRONT_THRESHOLD,
                           window: float = REFERENCE_WINDOW) -> SolventFrontResult:
    distance, replicates = read_profile_csv(path)
    fronts = tuple(find_solvent_front(distance, r, threshold, window) for r in replicates)
    values = np.array(fronts)
    return SolventFrontResult(
        rpm=rpm,
        distances=fronts,
        mean=float(values.mean()),
        std=float(values.std(ddof=1)),
    )


def analyze_dataset(folder, max_rpm: Optional[int] = None,
                    threshold: float = FRONT_THRESHOLD,
                    window: float = REFERENCE_WINDOW) -> pd.DataFrame:
    """分析一个数据集目录中的所有曲线 CSV，按 RPM 升序返回结果表"""
    records = []
    for rpm, path in collect_profile_csvs(folder, max_rpm=max_rpm):
        result = solvent_front_for_file(path, rpm, threshold, window)
        records.append({
            "rpm": result.rpm,
            "front_r1": result.distances[0],
            "front_r2": result.distances[1],
            "front_r3": result.distances[2],
            "mean": result.mean,
            "std": result.std,
            "ci_lower": result.ci_lower,
            "ci_upper": result.ci_upper,
        })
        logger.debug(f"{Path(path).name}: 溶剂前沿 {result.distances}")

    columns = ["rpm", "front_r1", "front_r2", "front_r3", "mean", "std", "ci_lower", "ci_upper"]
    return pd.DataFrame(records, columns=columns)


def format_summary(results: Dict[str, pd.DataFrame]) -> str:
    """生成文本摘要"""
    lines = ["Solvent Front Distances:"]
    for name, df in results.items():
        lines.append("")
        lines.append(f"Dataset: {name}")
        for row in df.itertuples(index=False):
            lines.append(f"RPM {int(row.rpm)}: {row.mean:.2f} mm (Std: {row.std:.4f})")
    return "\n".join(lines)
