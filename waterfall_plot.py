#!/usr/bin/env python3
"""Render a 3D waterfall plot of averaged dye profiles across RPMs."""

import argparse
import sys

from dye_profile.analysis.waterfall import DOWNSAMPLE_FACTOR, load_waterfall, validate_axis
from dye_profile.utils.logging import LogManager
from dye_profile.utils.visualization import plot_waterfall


def main(argv=None):
    parser = argparse.ArgumentParser(description="绘制各 RPM 平均染料曲线的瀑布图")
    parser.add_argument("-i", "--input", required=True, help="曲线 CSV 所在目录")
    parser.add_argument("-o", "--output", default="waterfall.png", help="输出图片路径")
    parser.add_argument("--lower", type=float, default=24.0, help="距离下界 (默认: 24)")
    parser.add_argument("--upper", type=float, default=144.0, help="距离上界 (默认: 144)")
    parser.add_argument("--divisions", type=int, default=7, help="距离刻度数 (默认: 7)")
    parser.add_argument("--downsample", type=int, default=DOWNSAMPLE_FACTOR,
                        help="降采样间隔 (默认: 5)")
    args = parser.parse_args(argv)

    try:
        validate_axis(args.lower, args.upper, args.divisions)
    except ValueError as e:
        parser.error(str(e))

    with LogManager("waterfall") as log:
        try:
            series = load_waterfall(args.input, downsample=args.downsample)
        except (FileNotFoundError, ValueError) as e:
            log.logger.error(f"加载曲线失败: {e}")
            return 1
        plot_waterfall(series, args.output, args.lower, args.upper, args.divisions)
    return 0


if __name__ == "__main__":
    sys.exit(main())
