"""PCM 量化：归一化浮点样本与 8/16 位整数之间的转换"""
from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from .exceptions import UnsupportedBitDepth

SUPPORTED_BIT_DEPTHS = (8, 16)

INT16_NEGATIVE_SCALE = 32768.0
INT16_POSITIVE_SCALE = 32767.0
INT8_NEGATIVE_SCALE = 128.0
INT8_POSITIVE_SCALE = 127.0
INT8_OFFSET = 128


def _clamp(sample: float) -> float:
    if math.isnan(sample):
        return 0.0
    return max(-1.0, min(1.0, sample))


def float_to_int8(sample: float) -> int:
    """将 [-1, 1] 样本映射到无符号偏移的 8 位值 [0, 255]

    负数乘 128，正数乘 127，再整体平移 128。
    """
    s = _clamp(float(sample))
    value = s * INT8_NEGATIVE_SCALE if s < 0 else s * INT8_POSITIVE_SCALE
    return int(value + INT8_OFFSET)


def float_to_int16(sample: float) -> int:
    """将 [-1, 1] 样本映射到有符号 16 位 [-32768, 32767]"""
    s = _clamp(float(sample))
    return int(s * INT16_NEGATIVE_SCALE if s < 0 else s * INT16_POSITIVE_SCALE)


def int8_to_float(value: int) -> float:
    centered = int(value) - INT8_OFFSET
    if centered < 0:
        return centered / INT8_NEGATIVE_SCALE
    return centered / INT8_POSITIVE_SCALE


def int16_to_float(value: int) -> float:
    value = int(value)
    if value < 0:
        return value / INT16_NEGATIVE_SCALE
    return value / INT16_POSITIVE_SCALE


def check_bit_depth(bit_depth: int) -> int:
    if bit_depth not in SUPPORTED_BIT_DEPTHS:
        raise UnsupportedBitDepth(bit_depth)
    return int(bit_depth)


def quantize(samples: Sequence[float] | np.ndarray, bit_depth: int = 16) -> np.ndarray:
    """批量量化：8 位返回 uint8，16 位返回 int16

    与标量版本逐样本一致（钳位后向零截断）。
    """
    bit_depth = check_bit_depth(bit_depth)
    s = np.nan_to_num(np.asarray(samples, dtype=np.float64), nan=0.0)
    s = np.clip(s, -1.0, 1.0)

    if bit_depth == 8:
        scaled = np.where(s < 0, s * INT8_NEGATIVE_SCALE, s * INT8_POSITIVE_SCALE)
        return np.trunc(scaled + INT8_OFFSET).astype(np.uint8)

    scaled = np.where(s < 0, s * INT16_NEGATIVE_SCALE, s * INT16_POSITIVE_SCALE)
    return np.trunc(scaled).astype(np.int16)


def dequantize(values: np.ndarray, bit_depth: int = 16) -> np.ndarray:
    """quantize 的逆运算，返回 float32"""
    bit_depth = check_bit_depth(bit_depth)
    v = np.asarray(values).astype(np.float64)

    if bit_depth == 8:
        v = v - INT8_OFFSET
        out = np.where(v < 0, v / INT8_NEGATIVE_SCALE, v / INT8_POSITIVE_SCALE)
    else:
        out = np.where(v < 0, v / INT16_NEGATIVE_SCALE, v / INT16_POSITIVE_SCALE)
    return out.astype(np.float32)


def _int16_dtype(little_endian: bool) -> str:
    return "<i2" if little_endian else ">i2"


def encode_pcm(
    samples: Sequence[float] | np.ndarray,
    bit_depth: int = 16,
    *,
    little_endian: bool = True,
) -> bytes:
    """量化并序列化为 PCM 字节流（8 位无字节序）"""
    quantized = quantize(samples, bit_depth)
    if bit_depth == 8:
        return quantized.tobytes()
    return quantized.astype(_int16_dtype(little_endian)).tobytes()


def decode_pcm(payload: bytes, bit_depth: int = 16, *, little_endian: bool = True) -> np.ndarray:
    """将 PCM 字节流还原为 float32 样本"""
    bit_depth = check_bit_depth(bit_depth)
    if bit_depth == 8:
        values = np.frombuffer(payload, dtype=np.uint8)
    else:
        values = np.frombuffer(payload, dtype=_int16_dtype(little_endian))
    return dequantize(values, bit_depth)
