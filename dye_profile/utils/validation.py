# ============================================================================
# 10. dye_profile/utils/validation.py - 数据验证
# ============================================================================

from typing import Optional, Tuple

import numpy as np


class ImageValidator:
    """图像验证工具"""

    @staticmethod
    def validate_image(img, min_size=(1, 1)) -> Tuple[bool, Optional[str]]:
        """验证解码后图像的有效性"""
        if img is None:
            return False, "无效的图像输入(None)"

        if not isinstance(img, np.ndarray):
            return False, f"图像必须是numpy数组，而非 {type(img)}"

        if img.ndim not in (2, 3):
            return False, f"不支持的图像维度: {img.shape}"

        h, w = img.shape[:2]
        if h < min_size[0] or w < min_size[1]:
            return False, f"图像尺寸过小: {(h, w)}，最小要求: {min_size}"

        # 检查通道数
        if img.ndim == 3 and img.shape[2] not in (1, 3, 4):
            return False, f"不支持的通道数: {img.shape[2]}"

        return True, None


class GroupValidator:
    """对齐后图像组的验证"""

    @staticmethod
    def validate_aligned(images) -> Tuple[bool, Optional[str]]:
        if len(images) == 0:
            return False, "图像组为空"

        shapes = {img.shape[:2] for img in images}
        if len(shapes) != 1:
            return False, f"对齐后的图像尺寸不一致: {sorted(shapes)}"

        h, w = shapes.pop()
        if h <= 0 or w <= 0:
            return False, f"对齐后的图像尺寸无效: {w}x{h}"

        for img in images:
            if img.ndim != 3 or img.shape[2] < 3:
                return False, f"图像必须至少包含 3 个通道: {img.shape}"

        return True, None
