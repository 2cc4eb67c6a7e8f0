#!/usr/bin/env python3
"""Compute solvent front distance vs RPM for one or more datasets of profile CSVs."""

import argparse
import logging
import sys
from pathlib import Path

from dye_profile.analysis.solvent_front import (
    FRONT_THRESHOLD,
    REFERENCE_WINDOW,
    analyze_dataset,
    format_summary,
)
from dye_profile.utils.logging import LogManager
from dye_profile.utils.visualization import plot_solvent_front


def _dataset_arg(value: str):
    """``NAME=FOLDER`` or just ``FOLDER`` (name taken from the folder)"""
    if "=" in value:
        name, folder = value.split("=", 1)
    else:
        folder = value
        name = Path(value).name
    return name, folder


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="溶剂前沿距离分析：读取各 RPM 的曲线 CSV，计算三个重复的前沿位置"
    )
    parser.add_argument("-d", "--dataset", action="append", required=True, type=_dataset_arg,
                        help="数据集，格式 NAME=FOLDER，可重复指定")
    parser.add_argument("-o", "--output", default="solvent_front", help="输出目录")
    parser.add_argument("--max-rpm", type=int, help="只分析不超过该 RPM 的文件")
    parser.add_argument("--color", action="append", help="每个数据集的颜色，按顺序对应")
    parser.add_argument("--threshold", type=float, default=FRONT_THRESHOLD,
                        help="相对参考强度的阈值 (默认: 0.05)")
    parser.add_argument("--window", type=float, default=REFERENCE_WINDOW,
                        help="参考强度的距离窗口 (默认: 10)")
    args = parser.parse_args(argv)

    output_dir = Path(args.output)
    output_dir.mkdir(parents=True, exist_ok=True)

    with LogManager("solvent_front") as log:
        results = {}
        try:
            for name, folder in args.dataset:
                df = analyze_dataset(folder, max_rpm=args.max_rpm,
                                     threshold=args.threshold, window=args.window)
                if df.empty:
                    log.logger.warning(f"数据集 {name} 中没有可用的 CSV: {folder}")
                    continue
                df.to_csv(output_dir / f"{name}_solvent_front.csv", index=False)
                results[name] = df
        except (FileNotFoundError, ValueError) as e:
            log.logger.error(f"分析失败: {e}")
            return 1

        if not results:
            log.logger.error("没有任何可分析的数据")
            return 1

        plot_solvent_front(results, output_dir / "solvent_front_vs_rpm.png", colors=args.color)
        print(format_summary(results))
    return 0


if __name__ == "__main__":
    logging.captureWarnings(True)
    sys.exit(main())
