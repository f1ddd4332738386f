"""
融合流程的异常定义
规划器是全函数，不抛出异常；融合引擎遇错立即失败，不返回部分结果。
"""


class FusionError(ValueError):
    """所有包围曝光/融合错误的基类"""


class InvalidRange(FusionError):
    """曝光补偿范围非法 (lower > upper)。规划器本身不会抛出，保留给调用方校验。"""

    def __init__(self, lower: int, upper: int):
        super().__init__(f"Invalid exposure range: lower ({lower}) > upper ({upper})")
        self.lower = lower
        self.upper = upper

    def __reduce__(self):
        return self.__class__, (self.lower, self.upper)


class InsufficientFrames(FusionError):
    """融合至少需要 2 帧"""

    def __init__(self, count: int):
        super().__init__(f"Need at least 2 frames to fuse, received {count}")
        self.count = count

    def __reduce__(self):
        return self.__class__, (self.count,)


class DecodeFailure(FusionError):
    """输入帧无法解码或不是 8-bit 栅格图像"""


class ChannelMismatch(DecodeFailure):
    """输入帧的通道数与参考帧不一致"""


class GeometryMismatchUnrecoverable(FusionError):
    """无法将帧重采样到参考尺寸 (例如参考帧面积为 0)"""
