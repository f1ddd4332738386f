"""
文件保存模块
将融合结果写入磁盘，生成输出文件名与批次目录
"""
import os
from datetime import datetime
from typing import Optional

import numpy as np
from PIL import Image

from . import config
from .logger import Logger


def _timestamp(now: Optional[datetime] = None) -> str:
    return (now or datetime.now()).strftime(config.TIMESTAMP_FORMAT)


def generate_output_filename(
    prefix: str = config.HDR_OUTPUT_PREFIX,
    now: Optional[datetime] = None,
    extension: str = config.DEFAULT_OUTPUT_FORMAT,
) -> str:
    """例如 HDR_Output_20250101_120000.jpg"""
    return f"{prefix}{_timestamp(now)}.{extension.lstrip('.')}"


def new_batch_id(now: Optional[datetime] = None) -> str:
    """生成新的批次标识 (时间戳)，由调用方显式传递给 batch_directory"""
    return _timestamp(now)


def batch_directory(root: str, batch_id: str) -> str:
    """返回 (并创建) 某个批次的输出目录"""
    path = os.path.join(root, f"HDR_{batch_id}")
    os.makedirs(path, exist_ok=True)
    return path


def _to_pil(img: np.ndarray, output_format: str) -> Image.Image:
    if img.ndim == 3 and img.shape[2] == 1:
        img = img[:, :, 0]
    elif img.ndim == 3 and img.shape[2] == 2:
        # 灰度 + alpha
        img = img[:, :, 0]
    pil_img = Image.fromarray(np.ascontiguousarray(img))
    if output_format == 'JPEG' and pil_img.mode == 'RGBA':
        pil_img = pil_img.convert('RGB')
    return pil_img


def save_image(img: np.ndarray, output_path: str, logger: Optional[Logger] = None, quality: int = config.FUSED_JPEG_QUALITY):
    """
    根据扩展名保存 uint8 图像 (jpg / png / tif)

    Args:
        img: (H, W) 或 (H, W, C) 的 uint8 图像
        output_path: 输出路径
        logger: 日志处理器
        quality: JPEG 质量
    """
    ext = os.path.splitext(output_path)[1].lower()
    formats = {
        '.jpg': 'JPEG',
        '.jpeg': 'JPEG',
        '.png': 'PNG',
        '.tif': 'TIFF',
        '.tiff': 'TIFF',
    }
    output_format = formats.get(ext)
    if output_format is None:
        raise ValueError(f"Unsupported output format: {ext or '(none)'}")

    parent = os.path.dirname(output_path)
    if parent:
        os.makedirs(parent, exist_ok=True)

    pil_img = _to_pil(img, output_format)
    if output_format == 'JPEG':
        pil_img.save(output_path, format=output_format, quality=quality)
    elif output_format == 'PNG':
        pil_img.save(output_path, format=output_format, optimize=True)
    else:
        pil_img.save(output_path, format=output_format)

    if logger:
        logger.info(f"  💾 Saved {os.path.basename(output_path)}")
    return output_path
