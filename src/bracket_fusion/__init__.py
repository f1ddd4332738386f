# __init__.py
"""
Bracket Fusion - 包围曝光规划与融合工具包
"""

from .config import FUSION_STRATEGIES, DEFAULT_FUSION_STRATEGY
from .errors import (
    FusionError,
    InvalidRange,
    InsufficientFrames,
    DecodeFailure,
    ChannelMismatch,
    GeometryMismatchUnrecoverable,
)
from .logger import Logger, create_logger
from .planner import ExposureRange, BracketRequest, plan_bracket, plan_request, plan_to_ev
from .strategies import get_fusion_strategy, flat_alpha_weights
from .engine import fuse_frames, fuse_files
from .file_io import save_image, new_batch_id, batch_directory

__all__ = [
    # 配置
    'FUSION_STRATEGIES',
    'DEFAULT_FUSION_STRATEGY',
    # 异常
    'FusionError',
    'InvalidRange',
    'InsufficientFrames',
    'DecodeFailure',
    'ChannelMismatch',
    'GeometryMismatchUnrecoverable',
    # 日志
    'Logger',
    'create_logger',
    # 规划
    'ExposureRange',
    'BracketRequest',
    'plan_bracket',
    'plan_request',
    'plan_to_ev',
    # 融合
    'get_fusion_strategy',
    'flat_alpha_weights',
    'fuse_frames',
    'fuse_files',
    # 文件IO
    'save_image',
    'new_batch_id',
    'batch_directory',
]
