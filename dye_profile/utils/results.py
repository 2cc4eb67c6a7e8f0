# ============================================================================
# 11. dye_profile/utils/results.py - 结果管理
# ============================================================================

import logging
from pathlib import Path
from typing import Dict, Optional

from ..core.channels import Channel
from ..core.profiler import ChannelProfile

# 与流的默认输出一致：6 位有效数字，例如 10、0.333333
CSV_FLOAT_FORMAT = "%g"


class ResultManager:
    """统一的结果管理器"""

    def __init__(self, output_dir, logger: Optional[logging.Logger] = None):
        """初始化结果管理器"""
        self.output_dir = Path(output_dir)
        self.logger = logger or logging.getLogger(__name__)
        self.directories = self._create_directory_structure()

        self.logger.debug(f"结果管理器初始化完成，输出目录: {self.output_dir}")

    def _create_directory_structure(self) -> Dict[str, Path]:
        """创建输出目录结构"""
        directories = {
            "root": self.output_dir,
            "aligned": self.output_dir / "aligned_images",
        }

        for directory in directories.values():
            directory.mkdir(parents=True, exist_ok=True)

        return directories

    @property
    def aligned_dir(self) -> Path:
        return self.directories["aligned"]

    def profile_csv_path(self, identifier: str, group_key: int, channel: Channel) -> Path:
        """例如 ``W_500_Rness.csv``"""
        return self.output_dir / f"{identifier}_{group_key}_{channel.tag}ness.csv"

    def save_profile_csv(self, profile: ChannelProfile, csv_path) -> Optional[Path]:
        """把逐列结果写入 CSV；无法创建文件时记录错误并返回 None"""
        csv_path = Path(csv_path)
        try:
            f = open(csv_path, "w", encoding="utf-8", newline="")
        except OSError as e:
            self.logger.error(f"错误: 无法创建CSV文件: {csv_path} ({e})")
            return None

        with f:
            self.logger.info(f"写入CSV: {csv_path}")
            profile.to_dataframe().to_csv(
                f, index=False, lineterminator="\n", float_format=CSV_FLOAT_FORMAT
            )

        return csv_path
