from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from .channels import mix_down
from .pcm import quantize
from .resample import round_half_up

# 低于该平均幅度时使用线性刻度，便于小音量也能看到变化
LINEAR_THRESHOLD = 1251
LINEAR_SCALE = 1250
LOG_REFERENCE = 10000


def average_power(frame: Sequence[Sequence[float] | np.ndarray]) -> float:
    """声道平均后量化为 16 位，返回平均绝对幅度"""
    mono = mix_down(frame)
    if len(mono) == 0:
        return 0.0
    pcm = quantize(mono, 16).astype(np.int64)
    return float(np.abs(pcm).sum()) / len(pcm)


def level_from_power(power: float) -> int:
    if power < LINEAR_THRESHOLD:
        level = round_half_up(power / LINEAR_SCALE * 10)
    else:
        level = round_half_up(max(0.0, min(100.0, (1 + math.log10(power / LOG_REFERENCE)) * 100)))
    return max(0, min(100, level))


def volume_level(frame: Sequence[Sequence[float] | np.ndarray]) -> int:
    """计算一个分析窗口的音量等级 0~100

    Raises:
        InvalidArgument: 各声道长度不一致
    """
    return level_from_power(average_power(frame))
