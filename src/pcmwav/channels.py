"""多声道交错 / 解交错"""
from __future__ import annotations

from typing import Sequence

import numpy as np

from .exceptions import InvalidArgument


def interleave(channels: Sequence[Sequence[float] | np.ndarray]) -> np.ndarray:
    """将多个单声道缓冲区合并为交错缓冲区 [c0_0, c1_0, c0_1, c1_1, ...]

    帧长取最长声道，较短声道末尾补零。只有一个声道时原样返回。
    """
    if len(channels) == 0:
        raise InvalidArgument("at least one channel is required")
    if len(channels) == 1:
        only = channels[0]
        if isinstance(only, np.ndarray):
            return only
        return np.asarray(only, dtype=np.float32)

    arrays = [np.asarray(channel, dtype=np.float32).reshape(-1) for channel in channels]
    frame_length = max(len(a) for a in arrays)

    merged = np.zeros((frame_length, len(arrays)), dtype=np.float32)
    for index, array in enumerate(arrays):
        merged[: len(array), index] = array
    return merged.reshape(-1)


def deinterleave(data: Sequence[float] | np.ndarray, channel_count: int) -> list[np.ndarray]:
    """interleave 的逆运算，返回每个声道一个连续数组"""
    if data is None:
        raise InvalidArgument("input buffer is empty")
    if channel_count < 1:
        raise InvalidArgument(f"invalid channel count: {channel_count}")

    array = np.asarray(data).reshape(-1)
    if channel_count == 1:
        return [array]
    if len(array) % channel_count != 0:
        raise InvalidArgument(
            f"buffer length {len(array)} is not divisible by channel count {channel_count}"
        )

    frames = array.reshape(-1, channel_count)
    return [np.ascontiguousarray(frames[:, i]) for i in range(channel_count)]


def mix_down(channels: Sequence[Sequence[float] | np.ndarray]) -> np.ndarray:
    """逐样本取各声道算术平均，要求声道等长"""
    if len(channels) == 0:
        return np.zeros(0, dtype=np.float32)

    arrays = [np.asarray(channel, dtype=np.float64).reshape(-1) for channel in channels]
    lengths = {len(a) for a in arrays}
    if len(lengths) != 1:
        raise InvalidArgument(f"channels must have equal length, got {sorted(lengths)}")

    return np.mean(np.stack(arrays), axis=0).astype(np.float32)
