# ============================================================================
# 6. dye_profile/core/aligner.py - 图像对齐
# ============================================================================

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..utils.image_io import blur_image, read_image, write_float_tiff
from .validator import EXPECTED_REPLICATES

logger = logging.getLogger(__name__)


@dataclass
class RunGroup:
    """一个 RPM 组的原始图像"""

    identifier: str
    group_key: int
    images: List[np.ndarray] = field(default_factory=list)
    filenames: List[str] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return len(self.images) == EXPECTED_REPLICATES


@dataclass
class AlignedGroup:
    """裁剪到相同宽高的图像组"""

    identifier: str
    group_key: int
    images: List[np.ndarray]
    filenames: List[str]

    @property
    def width(self) -> int:
        return self.images[0].shape[1]

    @property
    def height(self) -> int:
        return self.images[0].shape[0]


def common_size(images: Sequence[np.ndarray]) -> Tuple[int, int]:
    """返回组内最小的 (宽, 高)"""
    if not images:
        raise ValueError("图像列表为空，无法计算公共尺寸")
    width = min(img.shape[1] for img in images)
    height = min(img.shape[0] for img in images)
    return width, height


def align_images(images: Sequence[np.ndarray]) -> List[np.ndarray]:
    """把所有图像裁剪为左上角的 W×H 区域，W/H 为组内最小宽高

    返回新的视图，原图像不被修改。
    """
    width, height = common_size(images)
    return [img[:height, :width] for img in images]


class ImageAligner:
    """加载、模糊并对齐一个 RPM 组的图像"""

    def __init__(self, input_folder, blur_radius: int = 0,
                 logger: Optional[logging.Logger] = None):
        self.input_folder = Path(input_folder)
        self.blur_radius = blur_radius
        self.logger = logger or logging.getLogger(__name__)

    def load_group(self, identifier: str, group_key: int, filenames: Sequence[str]) -> RunGroup:
        """按顺序加载组内文件，无法读取的文件被跳过并记录错误"""
        group = RunGroup(identifier=identifier, group_key=group_key)
        for filename in filenames:
            self.logger.info(f"加载图像: {filename}")
            img = read_image(self.input_folder / filename)
            if img is None:
                self.logger.error(f"错误: 无法读取图像 {filename} (RPM {group_key})")
                continue
            self.logger.debug(f"原始图像尺寸: {img.shape[1]}x{img.shape[0]}")

            if self.blur_radius > 0:
                img = blur_image(img, self.blur_radius)

            group.images.append(img)
            group.filenames.append(filename)
        return group

    def align(self, group: RunGroup) -> AlignedGroup:
        """对齐完整的组；图像数量不是 3 时抛出 ``ValueError``"""
        if not group.is_complete:
            raise ValueError(
                f"RPM {group.group_key} 的图像数量异常: 期望 {EXPECTED_REPLICATES}，"
                f"实际 {len(group.images)}"
            )
        aligned = align_images(group.images)
        self.logger.info(
            f"RPM {group.group_key} 对齐后尺寸: {aligned[0].shape[1]}x{aligned[0].shape[0]}"
        )
        return AlignedGroup(
            identifier=group.identifier,
            group_key=group.group_key,
            images=aligned,
            filenames=list(group.filenames),
        )


def aligned_image_name(identifier: str, group_key: int, replicate: int, width: int, height: int) -> str:
    return f"{identifier}_{group_key}_R{replicate}_{width}x{height}_aligned.tif"


def save_aligned_images(group: AlignedGroup, output_dir,
                        log: Optional[logging.Logger] = None) -> List[Path]:
    """以浮点 TIFF 保存对齐后的图像，返回成功保存的路径

    单个文件保存失败只记录错误，不影响其余文件。
    """
    log = log or logger
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    saved = []
    for i, img in enumerate(group.images, start=1):
        name = aligned_image_name(group.identifier, group.group_key, i, group.width, group.height)
        path = output_dir / name
        log.debug(
            f"图像类型: {img.dtype}, 通道: {img.shape[2] if img.ndim == 3 else 1}, "
            f"最小/最大值: {img.min()}/{img.max()}"
        )
        if write_float_tiff(path, img):
            log.info(f"已保存对齐图像: {path}")
            saved.append(path)
        else:
            log.error(f"保存图像失败: {path} (RPM {group.group_key})")
    return saved
