"""
包围曝光规划模块
根据拍摄张数、EV 间距以及设备的曝光补偿范围/步进，计算需要请求的曝光补偿索引
"""
import math
from typing import List, NamedTuple

from . import config
from .errors import InvalidRange


class ExposureRange(NamedTuple):
    """设备支持的曝光补偿索引范围 (闭区间)"""
    lower: int
    upper: int

    def contains(self, index: int) -> bool:
        return self.lower <= index <= self.upper

    def validate(self) -> "ExposureRange":
        if self.lower > self.upper:
            raise InvalidRange(self.lower, self.upper)
        return self


class BracketRequest(NamedTuple):
    """调用方请求的包围曝光参数"""
    shot_count: int
    ev_spacing: float

    def validate(self) -> "BracketRequest":
        if not config.SHOT_COUNT_MIN <= self.shot_count <= config.SHOT_COUNT_MAX:
            raise ValueError(
                f"shot_count must be in [{config.SHOT_COUNT_MIN}, {config.SHOT_COUNT_MAX}], got {self.shot_count}"
            )
        if not config.EV_SPACING_MIN <= self.ev_spacing <= config.EV_SPACING_MAX:
            raise ValueError(
                f"ev_spacing must be in [{config.EV_SPACING_MIN}, {config.EV_SPACING_MAX}], got {self.ev_spacing}"
            )
        return self


def _round_half_away(value: float) -> int:
    # Python 的 round() 是银行家舍入，这里需要 0.5 远离零
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def index_step_for(ev_spacing: float, step: float) -> int:
    """每档 EV 对应的设备曝光补偿索引数"""
    return _round_half_away(ev_spacing / step)


def is_compensation_supported(exposure_range: ExposureRange, step: float) -> bool:
    """设备是否支持曝光补偿 (范围为 [0, 0] 或步进非正视为不支持)"""
    return step > 0 and not (exposure_range.lower == 0 and exposure_range.upper == 0)


def plan_bracket(shot_count: int, ev_spacing: float, exposure_range: ExposureRange, step: float) -> List[int]:
    """
    计算包围曝光的曝光补偿索引

    奇数张包含 0 EV；偶数张不包含，改为以半档为起点对称分布。
    超出设备范围的候选值 (包括 0) 直接丢弃，不报错。结果升序排列，不去重：
    index_step 太小时偶数分支会产生重复的 0。

    Args:
        shot_count: 拍摄张数
        ev_spacing: 每档 EV 间距
        exposure_range: 设备曝光补偿索引范围
        step: 设备每个索引对应的 EV

    Returns:
        List[int]: 升序的曝光补偿索引，长度 <= shot_count，可能为空
    """
    exposure_range = ExposureRange(*exposure_range)
    include_zero = shot_count % 2 == 1
    max_steps = (shot_count - 1) // 2 if include_zero else shot_count // 2
    index_step = index_step_for(ev_spacing, step)

    indices = []
    if include_zero:
        if exposure_range.contains(0):
            indices.append(0)
        for i in range(1, max_steps + 1):
            positive = i * index_step
            negative = -i * index_step
            if exposure_range.contains(positive):
                indices.append(positive)
            if exposure_range.contains(negative):
                indices.append(negative)
    else:
        # 整数除法向零取整 (index_step 可能为负)
        half = int(index_step / 2)
        for i in range(1, max_steps + 1):
            positive = (2 * i - 1) * half
            negative = -(2 * i - 1) * half
            if exposure_range.contains(positive):
                indices.append(positive)
            if exposure_range.contains(negative):
                indices.append(negative)

    return sorted(indices)


def plan_request(request: BracketRequest, exposure_range: ExposureRange, step: float) -> List[int]:
    """以 BracketRequest 形式调用 plan_bracket (不做范围校验，需要时先调用 request.validate())"""
    return plan_bracket(request.shot_count, request.ev_spacing, exposure_range, step)


def plan_to_ev(plan: List[int], step: float) -> List[float]:
    """将曝光补偿索引换算为 EV 偏移"""
    return [index * step for index in plan]
