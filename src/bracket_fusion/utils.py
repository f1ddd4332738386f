import numpy as np
import colour
from numba import njit, prange

# =========================================================
# Numba 加速核函数 (In-Place / 无内存分配)
# =========================================================

@njit(parallel=True, fastmath=True, cache=True)
def composite_over_inplace(canvas, layer, alpha):
    """
    原位 "over" 叠加: canvas = layer * alpha + canvas * (1 - alpha)

    canvas 为不透明的 float32 累积画布，layer 为同尺寸 uint8 帧，
    每个像素使用同一个 alpha。
    """
    rows, cols, channels = canvas.shape
    inv_alpha = 1.0 - alpha

    for r in prange(rows):
        for c in range(cols):
            for ch in range(channels):
                canvas[r, c, ch] = layer[r, c, ch] * alpha + canvas[r, c, ch] * inv_alpha


@njit(parallel=True, fastmath=True, cache=True)
def accumulate_weighted_inplace(acc, layer, weights):
    """原位累加 acc += layer * weights (weights 为逐像素二维权重)"""
    rows, cols, channels = acc.shape

    for r in prange(rows):
        for c in range(cols):
            w = weights[r, c]
            for ch in range(channels):
                acc[r, c, ch] += layer[r, c, ch] * w


def to_uint8(canvas: np.ndarray) -> np.ndarray:
    """四舍五入并裁剪到 8-bit，返回新数组"""
    return np.clip(np.floor(canvas + 0.5), 0.0, 255.0).astype(np.uint8)

# =========================================================
# 辅助计算函数 (用于曝光良好度权重)
# =========================================================

def get_luminance_coeffs(colourspace_name: str = 'sRGB') -> np.ndarray:
    """从 colour 空间对象中提取 RGB -> Y (Luminance) 的系数"""
    # RGB_to_XYZ 矩阵的第二行就是 Y 通道的系数 [Lr, Lg, Lb]
    return np.asarray(colour.RGB_COLOURSPACES[colourspace_name].matrix_RGB_to_XYZ[1, :], dtype=np.float32)


def frame_luminance(frame: np.ndarray) -> np.ndarray:
    """
    计算帧的相对亮度 (0.0 - 1.0)，基于显示参考值，不做线性化。
    单通道帧直接使用该通道；多于 3 通道时忽略 alpha 等额外通道。
    """
    values = frame.astype(np.float32) / 255.0
    if values.shape[2] < 3:
        return values[:, :, 0]
    return np.dot(values[:, :, :3], get_luminance_coeffs())
