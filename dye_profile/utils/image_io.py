# ============================================================================
# dye_profile/utils/image_io.py - 图像读写
# ============================================================================

import logging
from pathlib import Path
from typing import Optional, Union

import cv2
import numpy as np

from .validation import ImageValidator

logger = logging.getLogger(__name__)

# TIFF 不压缩，保证浮点样本值原样保存
TIFF_WRITE_PARAMS = [cv2.IMWRITE_TIFF_COMPRESSION, 1]


def read_image(path: Union[str, Path]) -> Optional[np.ndarray]:
    """读取图像并统一为 BGR 三通道样本

    无法读取或格式不支持时返回 ``None``，不抛出异常。
    """
    img = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    is_valid, error_msg = ImageValidator.validate_image(img)
    if not is_valid:
        logger.debug(f"图像验证失败 {path}: {error_msg}")
        return None
    return to_bgr_samples(img)


def to_bgr_samples(img: np.ndarray) -> np.ndarray:
    """灰度图扩展为三通道，带 alpha 的图像去掉 alpha"""
    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)
    if img.shape[2] == 1:
        return cv2.cvtColor(img[:, :, 0], cv2.COLOR_GRAY2BGR)
    if img.shape[2] == 4:
        return np.ascontiguousarray(img[:, :, :3])
    return img


def blur_image(img: np.ndarray, radius: int) -> np.ndarray:
    """高斯模糊，核尺寸为 ``2 * radius + 1``；半径为 0 时原样返回"""
    if radius <= 0:
        return img
    ksize = 2 * radius + 1
    return cv2.GaussianBlur(img, (ksize, ksize), 0)


def write_float_tiff(path: Union[str, Path], img: np.ndarray) -> bool:
    """以 float32 无压缩 TIFF 保存图像，成功返回 True"""
    try:
        return bool(cv2.imwrite(str(path), img.astype(np.float32), TIFF_WRITE_PARAMS))
    except cv2.error as e:
        logger.debug(f"cv2.imwrite 异常: {e}")
        return False
