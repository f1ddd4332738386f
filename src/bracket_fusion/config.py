"""
Bracket Fusion 配置文件
包含包围曝光参数范围、融合策略定义、文件输出配置
"""
import os

# ==========================================
#           包围曝光规划配置
# ==========================================

# 拍摄张数范围 (奇数包含 0 EV，偶数不包含)
SHOT_COUNT_MIN = 3
SHOT_COUNT_MAX = 7
DEFAULT_SHOT_COUNT = 3

# 每档 EV 间距范围
EV_SPACING_MIN = 0.5
EV_SPACING_MAX = 2.0
DEFAULT_EV_SPACING = 1.0

# 常见设备的曝光补偿范围与步进 (1/3 EV)
DEFAULT_EXPOSURE_RANGE = (-6, 6)
DEFAULT_EXPOSURE_STEP = 1.0 / 3.0

# ==========================================
#           融合配置
# ==========================================

# 基准帧之外所有帧共享的不透明度预算
BASE_OPACITY = 1.0
OVERLAY_OPACITY_BUDGET = 0.5

# 融合策略选项
FUSION_STRATEGIES = [
    'flat-alpha',         # 平面 Alpha 叠加 (默认, 行为基线)
    'well-exposedness',   # 按曝光良好度逐像素加权
]
DEFAULT_FUSION_STRATEGY = 'flat-alpha'

# 曝光良好度权重参数
WELL_EXPOSED_MEAN = 0.5
WELL_EXPOSED_SIGMA = 0.2

# ==========================================
#           文件 IO 配置
# ==========================================

# 解码时最长边上限 (超过则按 2 的幂降采样)
MAX_DECODE_DIMENSION = 2048

# JPEG 质量
FUSED_JPEG_QUALITY = 100

# 文件名
HDR_OUTPUT_PREFIX = 'HDR_Output_'
TIMESTAMP_FORMAT = '%Y%m%d_%H%M%S'
DEFAULT_OUTPUT_FORMAT = 'jpg'

# 支持的输入格式 (小写)
SUPPORTED_IMAGE_EXTENSIONS = [
    '.jpg', '.jpeg', '.png', '.tif', '.tiff', '.bmp', '.webp'
]

# 批处理并发数
DEFAULT_JOBS = min(4, os.cpu_count() or 1)
