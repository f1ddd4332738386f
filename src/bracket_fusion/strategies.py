"""
融合策略模块
使用策略模式实现不同的权重/合成算法，引擎只负责几何归一化
"""
from typing import List, Optional, Protocol

import numpy as np

from . import config, utils
from .logger import Logger


class FusionStrategy(Protocol):
    """融合策略接口"""

    def blend(self, frames: List[np.ndarray], logger: Optional[Logger] = None) -> np.ndarray:
        """
        合成已归一化 (同尺寸、同通道) 的帧

        Args:
            frames: 按拍摄顺序排列的 uint8 帧，frames[0] 为基准帧
            logger: 日志处理器

        Returns:
            np.ndarray: 新分配的 uint8 图像，尺寸与 frames[0] 相同
        """
        ...


def flat_alpha_weights(count: int) -> List[float]:
    """
    平面 Alpha 权重: 基准帧完全不透明，其余帧平分 0.5 的不透明度预算
    """
    if count <= 0:
        return []
    overlay = config.OVERLAY_OPACITY_BUDGET / (count - 1) if count > 1 else 0.0
    return [config.BASE_OPACITY] + [overlay] * (count - 1)


class FlatAlphaStrategy:
    """
    平面 Alpha 叠加 (行为基线)

    以第一帧 (最暗) 为不透明底图，之后的帧按顺序以统一 alpha 做 "over" 叠加。
    与内容无关，不是真正的多曝光融合；顺序决定结果。
    """

    def blend(self, frames: List[np.ndarray], logger: Optional[Logger] = None) -> np.ndarray:
        weights = flat_alpha_weights(len(frames))
        if logger:
            logger.info(f"  🔹 [Flat Alpha] Weights: {', '.join(f'{w:.4f}' for w in weights)}")

        canvas = frames[0].astype(np.float32)
        for i in range(1, len(frames)):
            utils.composite_over_inplace(canvas, frames[i], weights[i])
            if logger:
                logger.debug(f"  🔹 [Flat Alpha] Composited frame {i} at alpha {weights[i]:.4f}")

        return utils.to_uint8(canvas)


class WellExposednessStrategy:
    """按曝光良好度逐像素加权平均 (单尺度)"""

    def __init__(self, mean: float = config.WELL_EXPOSED_MEAN, sigma: float = config.WELL_EXPOSED_SIGMA):
        self.mean = mean
        self.sigma = sigma

    def weight_maps(self, frames: List[np.ndarray]) -> List[np.ndarray]:
        """每帧的逐像素权重，所有帧在同一像素上的权重之和为 1"""
        maps = []
        for frame in frames:
            lum = utils.frame_luminance(frame)
            w = np.exp(-0.5 * ((lum - self.mean) ** 2) / (self.sigma ** 2)).astype(np.float32) + 1e-12
            maps.append(w)
        total = np.sum(np.stack(maps, axis=0), axis=0)
        return [(w / total).astype(np.float32) for w in maps]

    def blend(self, frames: List[np.ndarray], logger: Optional[Logger] = None) -> np.ndarray:
        maps = self.weight_maps(frames)
        if logger:
            means = ', '.join(f'{m.mean():.3f}' for m in maps)
            logger.info(f"  🔹 [Well-Exposedness] Mean weights: {means}")

        acc = np.zeros(frames[0].shape, dtype=np.float32)
        for frame, w in zip(frames, maps):
            utils.accumulate_weighted_inplace(acc, frame, w)
        del maps

        return utils.to_uint8(acc)


# 策略注册表
FUSION_STRATEGIES = {
    'flat-alpha': FlatAlphaStrategy(),
    'well-exposedness': WellExposednessStrategy(),
}


def get_fusion_strategy(mode: str) -> FusionStrategy:
    """
    获取融合策略

    Raises:
        ValueError: 如果策略不存在
    """
    strategy = FUSION_STRATEGIES.get(mode)
    if strategy is None:
        raise ValueError(f"Unknown fusion strategy: {mode}")
    return strategy
