"""
帧处理模块
负责校验输入栅格、统一几何尺寸以及从磁盘解码帧
"""
import os
from typing import Optional, Tuple

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from . import config
from .errors import DecodeFailure, GeometryMismatchUnrecoverable
from .logger import Logger


def as_frame(array) -> np.ndarray:
    """
    校验并规范化为 (H, W, C) 的 uint8 数组

    二维灰度数组以 (H, W, 1) 视图返回，不复制数据。

    Raises:
        DecodeFailure: 不是 8-bit 栅格图像
    """
    if not isinstance(array, np.ndarray):
        raise DecodeFailure(f"Frame must be a numpy array, got {type(array).__name__}")
    if array.dtype != np.uint8:
        raise DecodeFailure(f"Frame must be 8-bit (uint8), got {array.dtype}")
    if array.ndim == 2:
        array = array[:, :, np.newaxis]
    if array.ndim != 3 or array.shape[2] == 0:
        raise DecodeFailure(f"Frame must have shape (H, W) or (H, W, C), got {array.shape}")
    return array


def frame_size(frame: np.ndarray) -> Tuple[int, int]:
    """返回 (width, height)"""
    return frame.shape[1], frame.shape[0]


def resize_frame(frame: np.ndarray, width: int, height: int) -> np.ndarray:
    """
    将帧重采样到 (width, height)，使用 LANCZOS 滤波

    每个通道作为独立的 L 平面重采样；不把第 4 通道当作 alpha 预乘，
    与融合时所有通道一视同仁保持一致。

    Raises:
        GeometryMismatchUnrecoverable: 目标或源尺寸面积为 0
    """
    if width <= 0 or height <= 0:
        raise GeometryMismatchUnrecoverable(f"Cannot resample to zero-area geometry {width}x{height}")
    src_w, src_h = frame_size(frame)
    if src_w == 0 or src_h == 0:
        raise GeometryMismatchUnrecoverable(f"Cannot resample a zero-area frame ({src_w}x{src_h})")

    planes = [
        np.asarray(
            Image.fromarray(np.ascontiguousarray(frame[:, :, ch])).resize((width, height), Image.Resampling.LANCZOS)
        )
        for ch in range(frame.shape[2])
    ]
    return np.stack(planes, axis=2)


def subsample_factor(width: int, height: int, max_dimension: int = config.MAX_DECODE_DIMENSION) -> int:
    """
    计算解码降采样倍数 (2 的幂)

    只要任一边超过上限，就在保证半边长度除以倍数后仍不小于上限的前提下不断翻倍。
    """
    factor = 1
    if height > max_dimension or width > max_dimension:
        half_h = height // 2
        half_w = width // 2
        while (half_h // factor) >= max_dimension or (half_w // factor) >= max_dimension:
            factor *= 2
    return factor


def load_frame(path: str, max_dimension: Optional[int] = config.MAX_DECODE_DIMENSION, logger: Optional[Logger] = None) -> np.ndarray:
    """
    从磁盘解码一帧 (应用 EXIF 方向)，过大的图像按 2 的幂降采样

    Raises:
        DecodeFailure: 文件不存在或无法解码
    """
    name = os.path.basename(path)
    try:
        with Image.open(path) as img:
            img = ImageOps.exif_transpose(img)
            if img.mode not in ('L', 'RGB', 'RGBA'):
                img = img.convert('RGB')

            frame = as_frame(np.array(img))
    except (OSError, UnidentifiedImageError) as e:
        raise DecodeFailure(f"Failed to decode {name}: {e}") from e

    if max_dimension:
        width, height = frame_size(frame)
        factor = subsample_factor(width, height, max_dimension)
        if factor > 1:
            target = (width // factor, height // factor)
            if logger:
                logger.debug(f"  🔹 Subsampling {name} by {factor} to {target[0]}x{target[1]}")
            frame = resize_frame(frame, *target)

    if logger:
        logger.debug(f"  🔹 Loaded {name} ({frame.shape[1]}x{frame.shape[0]})")
    return frame
