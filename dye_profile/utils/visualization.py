# ============================================================================
# 12. dye_profile/utils/visualization.py - 可视化工具
# ============================================================================

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pandas as pd  # noqa: E402

from ..analysis.waterfall import WaterfallSeries, validate_axis  # noqa: E402

logger = logging.getLogger(__name__)


def _ci_line(ax, x, mean, lower, upper, color, label):
    """带阴影置信区间的折线，阴影不进入图例"""
    ax.fill_between(x, lower, upper, color=color, alpha=0.3, linewidth=0, label="_nolegend_")
    ax.plot(x, mean, "o-", linewidth=2, color=color, markerfacecolor=color,
            markeredgecolor="black", label=label)


def plot_solvent_front(results: Dict[str, pd.DataFrame], output_path,
                       colors: Optional[Sequence[str]] = None) -> Path:
    """溶剂前沿距离 - RPM 曲线，每个数据集一条线"""
    fig, ax = plt.subplots(figsize=(10, 6))
    cycle = plt.rcParams["axes.prop_cycle"].by_key()["color"]

    for i, (name, df) in enumerate(results.items()):
        color = colors[i] if colors and i < len(colors) else cycle[i % len(cycle)]
        _ci_line(ax, df["rpm"], df["mean"], df["ci_lower"], df["ci_upper"], color, name)

    ax.set_xlabel("RPM", fontweight="bold")
    ax.set_ylabel("Solvent Front Distance (mm)", fontweight="bold")
    ax.legend(loc="best")

    output_path = Path(output_path)
    fig.savefig(output_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    logger.info(f"溶剂前沿图已保存: {output_path}")
    return output_path


def plot_difference(per_solvent: Dict[str, pd.DataFrame], ylabel: str, output_path,
                    colors: Optional[Sequence[str]] = None) -> Path:
    """每种溶剂一条带置信区间的 RPM 曲线"""
    fig, ax = plt.subplots(figsize=(6, 5))
    cycle = plt.rcParams["axes.prop_cycle"].by_key()["color"]

    for i, (solvent, df) in enumerate(per_solvent.items()):
        color = colors[i] if colors and i < len(colors) else cycle[i % len(cycle)]
        _ci_line(ax, df["RPM"], df["mean"], df["ci_lower"], df["ci_upper"], color, solvent)

    ax.set_xlabel("RPM", fontweight="bold")
    ax.set_ylabel(ylabel, fontweight="bold")
    ax.legend(loc="best")

    output_path = Path(output_path)
    fig.savefig(output_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    logger.info(f"图表已保存: {output_path}")
    return output_path


def plot_waterfall(series: List[WaterfallSeries], output_path,
                   distance_lower: float, distance_upper: float,
                   divisions: int = 7) -> Path:
    """3D 瀑布图：x = RPM，y = 距离，z = 平均强度，线段颜色表示标准差"""
    validate_axis(distance_lower, distance_upper, divisions)
    if not series:
        raise ValueError("没有可绘制的曲线")

    from mpl_toolkits.mplot3d.art3d import Line3DCollection, Poly3DCollection

    cmap = plt.get_cmap("turbo")
    min_std = min(float(np.min(s.std)) for s in series)
    max_std = max(float(np.max(s.std)) for s in series)
    min_intensity = min(float(np.min(s.mean)) for s in series)
    max_intensity = max(float(np.max(s.mean)) for s in series)
    std_range = max_std - min_std
    norm = plt.Normalize(min_std, max_std if std_range > 0 else min_std + 1)

    fig = plt.figure(figsize=(8, 6))
    fig.patch.set_facecolor("white")
    ax = fig.add_subplot(111, projection="3d")

    for s in series:
        x = np.full(len(s.distance), s.rpm, dtype=float)

        # 曲线下方填充到全局最小强度
        verts = [list(zip(x, s.distance, s.mean))
                 + [(s.rpm, s.distance[-1], min_intensity), (s.rpm, s.distance[0], min_intensity)]]
        ax.add_collection3d(Poly3DCollection(verts, facecolor=(0.9, 0.9, 0.9), edgecolor="none"))

        points = np.column_stack([x, s.distance, s.mean])
        segments = np.stack([points[:-1], points[1:]], axis=1)
        lines = Line3DCollection(segments, cmap=cmap, norm=norm, linewidth=2)
        lines.set_array(s.std[:-1])
        ax.add_collection3d(lines)

    mappable = plt.cm.ScalarMappable(norm=norm, cmap=cmap)
    mappable.set_array([])
    cbar = fig.colorbar(mappable, ax=ax, shrink=0.7)
    cbar.set_label("SDV Dye Intensity", fontweight="bold")

    rpm_values = [s.rpm for s in series]
    ax.set_xlabel("RPM", fontweight="bold")
    ax.set_ylabel("Distance From Bottom of Tube (mm)", fontweight="bold")
    ax.set_zlabel("Dye Intensity", fontweight="bold")
    ax.set_xticks(rpm_values)
    ticks = np.linspace(distance_lower, distance_upper, divisions)
    ax.set_yticks(ticks)
    ax.set_yticklabels([f"{t:.1f}" for t in ticks])

    if len(rpm_values) > 1:
        ax.set_xlim(min(rpm_values), max(rpm_values))
    ax.set_ylim(distance_upper, distance_lower)
    ax.set_zlim(min_intensity, np.ceil(max_intensity * 10) / 10)
    ax.view_init(elev=30, azim=60)

    output_path = Path(output_path)
    fig.savefig(output_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    logger.info(f"瀑布图已保存: {output_path}")
    return output_path
