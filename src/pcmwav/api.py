"""供采集层调用的公开操作

每个导出函数都是所传缓冲区的纯函数，不保留会话状态。
"""
from __future__ import annotations

from typing import Sequence

import numpy as np

from .buffer import RecordingSession, concat
from .resample import resample
from .volume import volume_level as _volume_level
from .wav import (
    PcmDecoder,
    WavSource,
    decode,
    encode,
    encode_channels,
    merge_containers,
    split_container,
)

ChunkList = Sequence[Sequence[float] | np.ndarray]


def accumulate(session: RecordingSession, channel_id: int, chunk: Sequence[float] | np.ndarray) -> bool:
    return session.accumulate(channel_id, chunk)


def _prepare_channels(
    buffers: Sequence[ChunkList],
    sample_rate: int,
    output_rate: int | None,
) -> tuple[list[np.ndarray], int]:
    rate = sample_rate if output_rate is None else output_rate
    channels = [resample(concat(chunks), sample_rate, rate) for chunks in buffers]
    return channels, rate


def export_single_wav(
    buffers: Sequence[ChunkList],
    sample_rate: int,
    output_rate: int | None = None,
    bit_depth: int = 16,
    *,
    little_endian: bool = True,
) -> bytes:
    """将每个声道的分块列表导出为一个多声道 WAV

    Args:
        buffers: 每个声道一组分块（RecordingSession.buffers()）
        sample_rate: 采集采样率
        output_rate: 输出采样率，None 表示不转换
        bit_depth: 输出位深（8 或 16）
    """
    channels, rate = _prepare_channels(buffers, sample_rate, output_rate)
    return encode_channels(channels, rate, bit_depth, little_endian=little_endian)


def export_per_channel_wav(
    buffers: Sequence[ChunkList],
    sample_rate: int,
    output_rate: int | None = None,
    bit_depth: int = 16,
    *,
    little_endian: bool = True,
) -> list[bytes]:
    """每个声道单独导出为一个单声道 WAV"""
    channels, rate = _prepare_channels(buffers, sample_rate, output_rate)
    return [encode(channel, 1, rate, bit_depth, little_endian=little_endian) for channel in channels]


def export_session(session: RecordingSession, *, per_channel: bool = False) -> bytes | list[bytes]:
    """按会话配置导出（输出采样率、位深、字节序均取自 session.config）"""
    config = session.config
    exporter = export_per_channel_wav if per_channel else export_single_wav
    return exporter(
        session.buffers(),
        config.sample_rate,
        config.output_sample_rate,
        config.bit_depth,
        little_endian=config.little_endian,
    )


def decode_wav(data: WavSource, decoder: PcmDecoder | None = None) -> tuple[list[np.ndarray], int]:
    if decoder is None:
        return decode(data)
    return decoder.decode(data)


def merge_wav(
    containers: Sequence[WavSource],
    output_rate: int = 16000,
    bit_depth: int = 16,
    decoder: PcmDecoder | None = None,
) -> bytes:
    return merge_containers(containers, output_rate, bit_depth, decoder=decoder)


def split_wav(data: WavSource, decoder: PcmDecoder | None = None) -> list[bytes]:
    return split_container(data, decoder=decoder)


def volume_level(frame: Sequence[Sequence[float] | np.ndarray]) -> int:
    return _volume_level(frame)
