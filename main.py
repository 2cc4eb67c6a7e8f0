#!/usr/bin/env python3
"""
Dye Profile Analysis - 主入口
按 RPM 分组对齐三重复图像，输出逐列通道比例曲线
"""

import argparse
import logging
import math
import sys

from dye_profile.config.settings import ConfigManager
from dye_profile.core.channels import Channel
from dye_profile.core.validator import ReplicateValidationError
from dye_profile.pipeline import ProfilePipeline
from dye_profile.utils.logging import LogManager


def parse_arguments(argv=None):
    """解析命令行参数"""
    parser = argparse.ArgumentParser(
        description="Dye Profile Analysis - 离心管染料分布的逐列通道比例分析",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
使用示例:
  python main.py -n W -I images/ -o results/ --upper 14.4 --lower 2.4 -c R
  python main.py -n SF -I images/ -o results/ --upper 10 --lower 0 -c G --blur-radius 0
  python main.py --interactive                                   # 逐项输入参数
  python main.py --config config.yaml                            # 从配置文件读取

输入文件名需包含 <标识符>_<RPM>_R<重复编号>，例如 W_500_R1.tif
        """,
    )

    parser.add_argument("--identifier", "-n", dest="identifier", help="数据集标识符 (例如 W, SF)")
    parser.add_argument("--upper", dest="distance_upper", type=float,
                        help="距离上界 (所有图像左侧的距离)")
    parser.add_argument("--lower", dest="distance_lower", type=float,
                        help="距离下界 (所有图像右侧的距离)")
    parser.add_argument("--channel", "-c", dest="channel", type=str.upper,
                        choices=[c.tag for c in Channel], help="分析的通道 (R/G/B)")
    parser.add_argument("--blur-radius", dest="blur_radius", type=int,
                        help="高斯模糊半径 (默认: 10，0 表示不模糊)")
    parser.add_argument("--input-dir", "-I", dest="input_folder", help="输入图像目录")
    parser.add_argument("--output", "-o", dest="output_folder", help="输出目录")

    parser.add_argument("--config", type=str, help="配置文件路径 (YAML/JSON)")
    parser.add_argument("--interactive", action="store_true", help="交互式输入缺失的参数")
    parser.add_argument("--verbose", "-v", action="store_true", help="输出详细日志信息")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="日志级别")
    parser.add_argument("--log-dir", help="日志目录 (默认: logs)")
    parser.add_argument("--no-log-file", action="store_true", help="不写日志文件")

    return parser.parse_args(argv)


def _prompt(message, convert, check=None, input_func=input):
    """重复提示直到输入有效"""
    while True:
        raw = input_func(message).strip()
        try:
            value = convert(raw)
        except ValueError:
            print("错误: 输入格式无效，请重新输入。")
            continue
        if check is not None:
            error = check(value)
            if error:
                print(f"错误: {error}")
                continue
        return value


def _check_finite(value):
    return None if math.isfinite(value) else f"请输入有限数值 ({value})"


def prompt_missing(config_manager: ConfigManager, input_func=input):
    """交互式补全缺失的运行参数"""
    profile = config_manager.profile

    if profile.get("identifier") is None:
        profile["identifier"] = _prompt(
            "请输入数据集标识符 (例如 W, SF): ", str,
            lambda v: None if v else "标识符不能为空", input_func,
        )
    if profile.get("distance_upper") is None:
        profile["distance_upper"] = _prompt(
            "请输入距离上界 (图像左侧的距离): ", float, _check_finite, input_func,
        )
    if profile.get("distance_lower") is None:
        upper = float(profile["distance_upper"])

        def check_lower(value):
            return _check_finite(value) or (
                None if value < upper else f"下界必须小于上界 ({upper})"
            )

        profile["distance_lower"] = _prompt(
            "请输入距离下界 (图像右侧的距离): ", float, check_lower, input_func,
        )
    if profile.get("channel") is None:
        profile["channel"] = _prompt(
            "请选择分析通道 (R/G/B): ", Channel.from_tag, None, input_func,
        ).tag
    if profile.get("blur_radius") is None:
        profile["blur_radius"] = _prompt(
            "请输入高斯模糊半径 (整数，默认 10，0 表示不模糊): ", int,
            lambda v: None if v >= 0 else "请输入非负整数", input_func,
        )
    if profile.get("input_folder") is None:
        profile["input_folder"] = _prompt("请输入输入目录路径: ", str, None, input_func)
    if profile.get("output_folder") is None:
        profile["output_folder"] = _prompt("请输入输出目录路径: ", str, None, input_func)


def main(argv=None):
    """主函数 - 保持简洁，主要负责流程协调"""
    args = parse_arguments(argv)

    try:
        config_manager = ConfigManager(args.config)
        config_manager.update_from_args(args)
        if args.interactive:
            prompt_missing(config_manager)
        profile_config = config_manager.build_profile_config()
    except (FileNotFoundError, ValueError) as e:
        print(f"❌ 配置错误: {e}", file=sys.stderr)
        return 1

    with LogManager(profile_config.identifier, config=config_manager) as log:
        log.log_system_info()
        log.logger.info(f"运行配置: {profile_config.to_dict()}")
        try:
            pipeline = ProfilePipeline(profile_config, logger=log.logger)
            summary = pipeline.run()
        except ReplicateValidationError as e:
            log.logger.error(f"重复数验证失败，运行中止: {e}")
            return 1
        except KeyboardInterrupt:
            log.logger.info("用户中断程序执行")
            return 1
        except Exception as e:
            log.logger.error(f"程序执行失败: {e}")
            log.logger.debug("详细错误", exc_info=True)
            return 1

    print_completion_summary(summary)
    return 0


def print_completion_summary(summary):
    """显示完成摘要"""
    print("\n✅ 分析完成!")
    print(f"   找到 RPM: {len(summary.get('group_keys', []))} 个")
    print(f"   已处理: {summary.get('processed', [])}")
    if summary.get("skipped"):
        print(f"   已跳过: {summary['skipped']}")
    print(f"   处理时间: {summary.get('elapsed_time', 0):.2f} 秒")
    print(f"   输出目录: {summary.get('output_dir', 'N/A')}")


if __name__ == "__main__":
    logging.captureWarnings(True)
    sys.exit(main())
