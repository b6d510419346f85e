"""采样率转换"""
from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from .exceptions import InvalidArgument
from .logging_config import get_logger

logger = get_logger("resample")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def output_length(input_length: int, input_rate: float, output_rate: float) -> int:
    return round_half_up(input_length * output_rate / input_rate)


def _check_rates(input_rate: float, output_rate: float) -> None:
    if input_rate <= 1 or output_rate <= 1:
        raise InvalidArgument(
            f"invalid sample rate: input={input_rate}, output={output_rate}"
        )


def resample(
    input: Sequence[float] | np.ndarray | None,
    input_rate: float,
    output_rate: float = 16000,
) -> np.ndarray:
    """线性插值重采样（单声道）

    输出长度为 round(len * output_rate / input_rate)。输出第 n 个点映射到输入位置
    f * n（f = (len - 1) / (outlen - 1)），取相邻两点按相似三角形插值；下标越界时
    钳位到最后一个样本。输出第 0 点直接取输入第 0 点。

    采样率相同时原样返回输入对象。

    Raises:
        InvalidArgument: 输入为 None 或任一采样率 <= 1
    """
    if input is None:
        raise InvalidArgument("input buffer is empty")
    _check_rates(input_rate, output_rate)

    if input_rate == output_rate:
        return input

    source = np.asarray(input, dtype=np.float64).reshape(-1)
    length = len(source)
    out_length = output_length(length, input_rate, output_rate)

    if out_length <= 0 or length == 0:
        return np.zeros(0, dtype=np.float32)
    if out_length == 1:
        return source[:1].astype(np.float32)

    ratio = (length - 1) / (out_length - 1)
    fn = ratio * np.arange(1, out_length, dtype=np.float64)
    ceil = np.ceil(fn).astype(np.int64)
    floor = np.floor(fn).astype(np.int64)

    # 下标溢出
    ceil = np.where((ceil >= length) & (floor < length), floor, ceil)
    both_over = floor >= length
    ceil[both_over] = length - 1
    floor[both_over] = length - 1

    output = np.empty(out_length, dtype=np.float64)
    output[0] = source[0]
    output[1:] = source[floor] + (fn - floor) * (source[ceil] - source[floor])

    logger.debug("resampled %d -> %d samples (%s Hz -> %s Hz)", length, out_length, input_rate, output_rate)
    return output.astype(np.float32)


def resample_channels(
    channels: Sequence[Sequence[float] | np.ndarray],
    input_rate: float,
    output_rate: float = 16000,
) -> list[np.ndarray]:
    return [resample(channel, input_rate, output_rate) for channel in channels]


def decimate(data: bytes | Sequence[int] | np.ndarray, input_rate: float, output_rate: float = 16000):
    """按间隔抽取样本的简易降采样，不做插值

    输出长度 floor(len / rate)；rate = input_rate / output_rate，小于 1 时按步长 1 取值。
    bytes 输入返回 bytes，其余返回 ndarray。

    Raises:
        InvalidArgument: 任一采样率 <= 1
    """
    _check_rates(input_rate, output_rate)
    rate = input_rate / output_rate
    if rate == 1:
        return data

    as_bytes = isinstance(data, (bytes, bytearray))
    source = np.frombuffer(bytes(data), dtype=np.uint8) if as_bytes else np.asarray(data)

    step = max(rate, 1.0)
    length = int(math.floor(len(source) / rate))
    indices = np.floor(np.arange(length, dtype=np.float64) * step).astype(np.int64)
    # 上采样时下标会超出输入，超出部分补零
    valid = indices < len(source)
    result = np.zeros(length, dtype=source.dtype)
    result[valid] = source[indices[valid]]

    return result.tobytes() if as_bytes else result
