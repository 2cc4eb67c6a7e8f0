# ============================================================================
# 7. dye_profile/core/profiler.py - 通道比例分析
# ============================================================================

from dataclasses import dataclass
from typing import Iterator, List, Sequence

import numpy as np
import pandas as pd

from .channels import Channel

DISTANCE_COLUMN = "Distance (cm)"


@dataclass(frozen=True)
class ColumnProfileRow:
    """一列像素的统计结果"""

    distance: float
    replicates: tuple
    average: float


@dataclass
class ChannelProfile:
    """一个 RPM 组的逐列通道比例

    ``distance`` 与 ``average`` 长度都为 W，``replicates`` 为 3 个长度为 W 的数组。
    """

    channel: Channel
    distance: np.ndarray
    replicates: List[np.ndarray]
    average: np.ndarray

    @property
    def width(self) -> int:
        return len(self.distance)

    def columns(self) -> List[str]:
        name = self.channel.display_name
        reps = [f"{name} R{i}" for i in range(1, len(self.replicates) + 1)]
        return [DISTANCE_COLUMN] + reps + [f"Average {name}"]

    def rows(self) -> Iterator[ColumnProfileRow]:
        """按列顺序 (x = 0 ... W-1) 生成结果行"""
        for x in range(self.width):
            yield ColumnProfileRow(
                distance=float(self.distance[x]),
                replicates=tuple(float(r[x]) for r in self.replicates),
                average=float(self.average[x]),
            )

    def to_dataframe(self) -> pd.DataFrame:
        data = [self.distance] + list(self.replicates) + [self.average]
        return pd.DataFrame(dict(zip(self.columns(), data)), columns=self.columns())


def distance_axis(width: int, distance_upper: float, distance_lower: float) -> np.ndarray:
    """列号到物理距离的映射

    第 0 列对应上界；像素宽度为 (上界 - 下界) / W，所以最后一列是
    ``上界 - (W-1)/W * (上界 - 下界)``，并不等于下界。
    """
    pixel_width = (distance_upper - distance_lower) / width
    return distance_upper - np.arange(width, dtype=np.float64) * pixel_width


def channel_ratio(image: np.ndarray, channel: Channel) -> np.ndarray:
    """逐像素的通道比例 selected / (B + G + R)，总强度为 0 的像素记为 0"""
    samples = np.asarray(image, dtype=np.float32)
    blue = samples[:, :, 0]
    green = samples[:, :, 1]
    red = samples[:, :, 2]
    luminance = red + green + blue
    selected = samples[:, :, channel.index]

    ratio = np.zeros(luminance.shape, dtype=np.float32)
    np.divide(selected, luminance, out=ratio, where=luminance > 0)
    return ratio


def column_profile(image: np.ndarray, channel: Channel) -> np.ndarray:
    """每一列的平均通道比例，分母为行数 H（包括总强度为 0 的像素）"""
    ratio = channel_ratio(image, channel)
    height = ratio.shape[0]
    # 沿行逐行累加
    total = ratio.astype(np.float64).sum(axis=0)
    return total / height


class ChannelProfiler:
    """把对齐后的图像组转换为逐列的通道比例曲线"""

    def __init__(self, channel: Channel, distance_upper: float, distance_lower: float):
        self.channel = channel
        self.distance_upper = distance_upper
        self.distance_lower = distance_lower

    def profile(self, images: Sequence[np.ndarray]) -> ChannelProfile:
        if not images:
            raise ValueError("没有可分析的图像")

        width = images[0].shape[1]
        replicates = [column_profile(img, self.channel) for img in images]

        total = np.zeros(width, dtype=np.float64)
        for values in replicates:
            total += values
        average = total / len(replicates)

        return ChannelProfile(
            channel=self.channel,
            distance=distance_axis(width, self.distance_upper, self.distance_lower),
            replicates=replicates,
            average=average,
        )
