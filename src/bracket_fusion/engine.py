"""
融合引擎模块
以第一帧为参考统一几何尺寸，再按所选策略将整组包围曝光合成为一张图像
"""
import gc
from typing import List, Optional, Sequence, Union

import numpy as np

from .errors import ChannelMismatch, GeometryMismatchUnrecoverable, InsufficientFrames
from .frame import as_frame, frame_size, load_frame, resize_frame
from .logger import Logger, create_logger
from .strategies import FusionStrategy, get_fusion_strategy
from . import config

# ==========================================
#              核心融合函数
# ==========================================

def normalize_frames(frames: Sequence[np.ndarray], logger: Optional[Logger] = None) -> List[np.ndarray]:
    """
    以第一帧为参考，将所有帧统一到相同尺寸

    尺寸一致的帧原样使用 (不复制)，其余帧重采样为新数组。

    Raises:
        ChannelMismatch: 通道数与参考帧不一致
        GeometryMismatchUnrecoverable: 参考帧面积为 0
    """
    reference = frames[0]
    ref_w, ref_h = frame_size(reference)
    channels = reference.shape[2]
    if ref_w == 0 or ref_h == 0:
        raise GeometryMismatchUnrecoverable(f"Reference frame has zero area ({ref_w}x{ref_h})")

    normalized = []
    for i, frame in enumerate(frames):
        if frame.shape[2] != channels:
            raise ChannelMismatch(
                f"Frame {i} has {frame.shape[2]} channels, reference frame has {channels}"
            )
        w, h = frame_size(frame)
        if (w, h) != (ref_w, ref_h):
            if logger:
                logger.info(f"  🔹 Resizing frame {i} from {w}x{h} to {ref_w}x{ref_h}")
            frame = resize_frame(frame, ref_w, ref_h)
        normalized.append(frame)

    return normalized


def fuse_frames(
    frames: Sequence[np.ndarray],
    strategy: Union[str, FusionStrategy] = config.DEFAULT_FUSION_STRATEGY,
    logger: Optional[Logger] = None,
) -> np.ndarray:
    """
    将同一场景的多张不同曝光帧融合为一张图像

    frames 按拍摄顺序排列 (最暗的在前)，输出尺寸与 frames[0] 相同。
    至少需要 2 帧；单帧同样视为错误，不会原样返回。
    任何一帧出错都会使整个调用失败，不返回部分结果。

    Args:
        frames: uint8 帧序列，通道数必须一致，尺寸可以不同
        strategy: 融合策略名称或策略实例
        logger: 日志处理器

    Returns:
        np.ndarray: 新分配的 uint8 图像，所有权归调用方
    """
    logger = create_logger(logger) if logger is not None else None

    if len(frames) < 2:
        raise InsufficientFrames(len(frames))

    if isinstance(strategy, str):
        strategy_name = strategy
        strategy = get_fusion_strategy(strategy)
    else:
        strategy_name = type(strategy).__name__

    checked = [as_frame(frame) for frame in frames]
    ref_w, ref_h = frame_size(checked[0])
    if logger:
        logger.info(f"🧪 [Bracket Fusion] Fusing {len(checked)} frames at {ref_w}x{ref_h} ({strategy_name})")

    # --- Step 1: 几何归一化 ---
    normalized = normalize_frames(checked, logger=logger)
    del checked

    # --- Step 2: 按策略合成 ---
    try:
        fused = strategy.blend(normalized, logger=logger)
    finally:
        # 重采样副本不超出本次调用
        del normalized
        gc.collect()

    if logger:
        logger.success("  ✅ Fusion complete")
    return fused


def fuse_files(
    paths: Sequence[str],
    strategy: Union[str, FusionStrategy] = config.DEFAULT_FUSION_STRATEGY,
    max_dimension: Optional[int] = config.MAX_DECODE_DIMENSION,
    logger: Optional[Logger] = None,
) -> np.ndarray:
    """从磁盘按顺序解码每一帧后融合；任一帧解码失败即整体失败"""
    if len(paths) < 2:
        raise InsufficientFrames(len(paths))
    frames = [load_frame(path, max_dimension=max_dimension, logger=logger) for path in paths]
    return fuse_frames(frames, strategy=strategy, logger=logger)
