# ============================================================================
# 8. dye_profile/pipeline.py - 分析管道
# ============================================================================

import logging
import time
from pathlib import Path
from typing import Dict, List, Optional

from tqdm import tqdm

from .config import ProfileConfig
from .core import (
    ChannelProfiler,
    ImageAligner,
    extract_group_keys,
    match_group_files,
    save_aligned_images,
    validate_replicates,
)
from .core.validator import EXPECTED_REPLICATES
from .utils import GroupValidator, list_filenames
from .utils.results import ResultManager


class ProfilePipeline:
    """分析管道 - 按 RPM 升序依次对齐图像并计算通道比例曲线

    每个 RPM 组的图像只在处理该组时保留在内存中；单个组失败不会
    中止整个运行，但重复数验证失败会在处理任何组之前中止运行。
    """

    def __init__(self, config: ProfileConfig, logger: Optional[logging.Logger] = None,
                 show_progress: bool = True):
        """初始化分析管道"""
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.show_progress = show_progress
        self.start_time = None

        self.aligner = ImageAligner(config.input_folder, config.blur_radius, logger=self.logger)
        self.profiler = ChannelProfiler(
            config.channel, config.distance_upper, config.distance_lower
        )
        self.result_manager = None

    def discover(self):
        """列出输入文件并提取 RPM，返回 (文件名列表, RPM 列表)"""
        filenames = list_filenames(self.config.input_folder)
        group_keys = extract_group_keys(filenames, self.config.identifier)
        self.logger.info(
            f"在 {self.config.input_folder} 中找到 {len(filenames)} 个文件，"
            f"{len(group_keys)} 个 RPM: {group_keys}"
        )
        return filenames, group_keys

    def validate(self, filenames: List[str], group_keys: List[int]):
        """重复数验证，失败时抛出 ``ReplicateValidationError``"""
        validate_replicates(filenames, group_keys, self.config.identifier, log=self.logger)

    def run(self) -> Dict:
        """运行完整的分析流程"""
        self.start_time = time.time()
        cfg = self.config

        filenames, group_keys = self.discover()
        summary = {
            "identifier": cfg.identifier,
            "group_keys": group_keys,
            "processed": [],
            "skipped": [],
            "csv_files": [],
            "output_dir": cfg.output_folder,
        }

        if not group_keys:
            self.logger.warning(f"没有找到匹配 {cfg.identifier}_<RPM>_R<n> 的文件")
            summary["elapsed_time"] = time.time() - self.start_time
            return summary

        self.validate(filenames, group_keys)

        self.result_manager = ResultManager(cfg.output_folder, logger=self.logger)

        for key in tqdm(group_keys, desc="Processing RPM", ncols=80,
                        disable=not self.show_progress):
            try:
                csv_path = self.process_group(filenames, key)
            except Exception as e:
                self.logger.error(f"处理失败: RPM {key}, 错误: {e}")
                csv_path = None

            if csv_path is None:
                summary["skipped"].append(key)
            else:
                summary["processed"].append(key)
                summary["csv_files"].append(str(csv_path))

        summary["elapsed_time"] = time.time() - self.start_time
        self.logger.info(
            f"运行完成: 处理 {len(summary['processed'])} 个 RPM，"
            f"跳过 {len(summary['skipped'])} 个，耗时 {summary['elapsed_time']:.2f}s"
        )
        return summary

    def process_group(self, filenames: List[str], group_key: int) -> Optional[Path]:
        """处理单个 RPM 组，返回写出的 CSV 路径；组被跳过时返回 None"""
        cfg = self.config
        self.logger.info(f"处理 RPM: {group_key}")

        names = match_group_files(filenames, cfg.identifier, group_key)
        group = self.aligner.load_group(cfg.identifier, group_key, names)
        if not group.is_complete:
            self.logger.error(
                f"错误: RPM {group_key} 的图像数量异常，期望 {EXPECTED_REPLICATES} 个，"
                f"实际读取 {len(group.images)} 个"
            )
            return None

        aligned = self.aligner.align(group)
        is_valid, error_msg = GroupValidator.validate_aligned(aligned.images)
        if not is_valid:
            self.logger.error(f"错误: RPM {group_key} 对齐失败: {error_msg}")
            return None

        save_aligned_images(aligned, self.result_manager.aligned_dir, log=self.logger)

        profile = self.profiler.profile(aligned.images)
        csv_path = self.result_manager.profile_csv_path(cfg.identifier, group_key, cfg.channel)
        saved = self.result_manager.save_profile_csv(profile, csv_path)
        if saved is not None:
            self.logger.info(
                f"已处理 RPM {group_key}，{cfg.channel.display_name} 数据保存到: {saved}"
            )
        return saved
