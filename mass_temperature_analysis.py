#!/usr/bin/env python3
"""Residual solvent mass and temperature change vs RPM, per solvent."""

import argparse
import sys
from pathlib import Path

from dye_profile.analysis.mass_temperature import (
    load_table,
    mass_difference,
    split_by_solvent,
    temperature_difference,
)
from dye_profile.utils.logging import LogManager
from dye_profile.utils.visualization import plot_difference


def main(argv=None):
    parser = argparse.ArgumentParser(description="按溶剂统计残余质量与温度变化")
    parser.add_argument("-i", "--input", required=True, help="实验记录 CSV")
    parser.add_argument("-o", "--output", default="mass_temperature", help="输出目录")
    parser.add_argument("--color", action="append", help="每种溶剂的颜色，按出现顺序对应")
    args = parser.parse_args(argv)

    output_dir = Path(args.output)
    output_dir.mkdir(parents=True, exist_ok=True)

    with LogManager("mass_temperature") as log:
        try:
            table = load_table(args.input)
        except (FileNotFoundError, ValueError) as e:
            log.logger.error(f"读取表格失败: {e}")
            return 1

        mass = mass_difference(table)
        temperature = temperature_difference(table)
        mass.to_csv(output_dir / "mass_difference.csv", index=False)
        temperature.to_csv(output_dir / "temperature_difference.csv", index=False)

        plot_difference(split_by_solvent(mass), "Residual Solvent Mass (g)",
                        output_dir / "mass_difference.png", colors=args.color)
        plot_difference(split_by_solvent(temperature), "Average Temperature Difference (°C)",
                        output_dir / "temperature_difference.png", colors=args.color)
    return 0


if __name__ == "__main__":
    sys.exit(main())
