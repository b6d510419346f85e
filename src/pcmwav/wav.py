"""WAV 容器编解码

头部固定为 44 字节的标准 PCM 布局；所有多字节整数按指定字节序写入，默认小端。
解码时遍历 RIFF 块列表，跳过 LIST 等未知块，并对头部做完整校验。
"""
from __future__ import annotations

import struct
from abc import ABC, abstractmethod
from typing import Sequence, Union

import numpy as np

from .channels import deinterleave, interleave
from .exceptions import CorruptContainer, InvalidArgument, PcmWavError
from .logging_config import get_logger
from .models import FMT_CHUNK_SIZE, PCM_FORMAT, WAV_HEADER_SIZE, WavContainer, WavHeader
from .pcm import check_bit_depth, decode_pcm, encode_pcm
from .resample import resample

logger = get_logger("wav")

WavSource = Union[bytes, bytearray, memoryview, WavContainer]

_MAX_UINT32 = 0xFFFFFFFF
_MAX_UINT16 = 0xFFFF


def _byte_order(little_endian: bool) -> str:
    return "<" if little_endian else ">"


def write_header(
    length: int,
    sample_rate: int = 16000,
    channel_count: int = 1,
    bit_depth: int = 16,
    *,
    little_endian: bool = True,
) -> bytes:
    """生成 44 字节 WAV 头部

    Args:
        length: PCM 数据长度（字节）
        sample_rate: 采样率
        channel_count: 声道数
        bit_depth: 位深（8 或 16）
        little_endian: 多字节整数是否按小端写入

    Raises:
        UnsupportedBitDepth: 位深不是 8 或 16
        InvalidArgument: 长度、采样率或声道数超出头部字段范围
    """
    bit_depth = check_bit_depth(bit_depth)
    if length < 0 or 36 + length > _MAX_UINT32:
        raise InvalidArgument(f"invalid data length: {length}")
    if not 1 <= channel_count <= _MAX_UINT16:
        raise InvalidArgument(f"invalid channel count: {channel_count}")
    if not 1 <= sample_rate <= _MAX_UINT32:
        raise InvalidArgument(f"invalid sample rate: {sample_rate}")

    header = WavHeader(
        sample_rate=int(sample_rate),
        channel_count=int(channel_count),
        bit_depth=bit_depth,
        data_length=int(length),
        little_endian=little_endian,
    )
    order = _byte_order(little_endian)
    return (
        b"RIFF"
        + struct.pack(order + "I", header.riff_size)
        + b"WAVE"
        + b"fmt "
        + struct.pack(
            order + "IHHIIHH",
            FMT_CHUNK_SIZE,
            PCM_FORMAT,
            header.channel_count,
            header.sample_rate,
            header.byte_rate,
            header.block_align,
            header.bit_depth,
        )
        + b"data"
        + struct.pack(order + "I", header.data_length)
    )


def encode(
    samples: Sequence[float] | np.ndarray,
    channel_count: int = 1,
    sample_rate: int = 16000,
    bit_depth: int = 16,
    *,
    little_endian: bool = True,
) -> bytes:
    """将交错的浮点样本量化并封装为 WAV 字节流

    Raises:
        UnsupportedBitDepth: 位深不是 8 或 16
        InvalidArgument: 样本为 None 或样本数不是声道数的整数倍
    """
    if samples is None:
        raise InvalidArgument("input buffer is empty")
    check_bit_depth(bit_depth)
    if channel_count < 1:
        raise InvalidArgument(f"invalid channel count: {channel_count}")

    data = np.asarray(samples, dtype=np.float32).reshape(-1)
    if len(data) % channel_count != 0:
        raise InvalidArgument(
            f"sample count {len(data)} is not divisible by channel count {channel_count}"
        )

    payload = encode_pcm(data, bit_depth, little_endian=little_endian)
    return encode_payload(
        payload,
        sample_rate=sample_rate,
        channel_count=channel_count,
        bit_depth=bit_depth,
        little_endian=little_endian,
    )


def encode_channels(
    buffers: Sequence[Sequence[float] | np.ndarray],
    sample_rate: int = 16000,
    bit_depth: int = 16,
    *,
    little_endian: bool = True,
) -> bytes:
    """每个声道一个缓冲区：先交错再编码"""
    merged = interleave(buffers)
    return encode(merged, len(buffers), sample_rate, bit_depth, little_endian=little_endian)


def encode_payload(
    payload: bytes,
    sample_rate: int = 16000,
    channel_count: int = 1,
    bit_depth: int = 16,
    *,
    little_endian: bool = True,
) -> bytes:
    """为已量化的 PCM 字节加上 WAV 头部"""
    container = WavContainer.from_payload(
        payload,
        sample_rate=sample_rate,
        channel_count=channel_count,
        bit_depth=bit_depth,
        little_endian=little_endian,
    )
    logger.debug(
        "encoded wav: %d bytes payload, %d ch, %d Hz, %d bit",
        len(payload),
        channel_count,
        sample_rate,
        bit_depth,
    )
    return container.to_bytes()


def _parse_chunks(raw: bytes, little_endian: bool) -> WavContainer:
    order = _byte_order(little_endian)

    fmt: tuple[int, int, int, int, int, int] | None = None
    payload: bytes | None = None
    offset = 12
    while offset + 8 <= len(raw):
        chunk_id = raw[offset:offset + 4]
        chunk_size = struct.unpack_from(order + "I", raw, offset + 4)[0]
        body = offset + 8

        if chunk_id == b"fmt ":
            if chunk_size < FMT_CHUNK_SIZE or body + chunk_size > len(raw):
                raise CorruptContainer(f"invalid fmt chunk size: {chunk_size}")
            fmt = struct.unpack_from(order + "HHIIHH", raw, body)
        elif chunk_id == b"data":
            if fmt is None:
                raise CorruptContainer("data chunk before fmt chunk")
            if body + chunk_size > len(raw):
                raise CorruptContainer(
                    f"data chunk truncated: declared {chunk_size}, available {len(raw) - body}"
                )
            payload = raw[body:body + chunk_size]
            break

        offset = body + chunk_size + (chunk_size & 1)

    if fmt is None:
        raise CorruptContainer("missing fmt chunk")
    if payload is None:
        raise CorruptContainer("missing data chunk")

    audio_format, channel_count, sample_rate, byte_rate, block_align, bit_depth = fmt
    if audio_format != PCM_FORMAT:
        raise CorruptContainer(f"unsupported audio format: {audio_format}")
    check_bit_depth(bit_depth)
    if channel_count < 1:
        raise CorruptContainer("wav has invalid channel count")
    if sample_rate < 1:
        raise CorruptContainer("wav has invalid sample rate")

    header = WavHeader(
        sample_rate=sample_rate,
        channel_count=channel_count,
        bit_depth=bit_depth,
        data_length=len(payload),
        little_endian=little_endian,
    )
    if block_align != header.block_align:
        raise CorruptContainer(f"block align mismatch: {block_align} != {header.block_align}")
    if byte_rate != header.byte_rate:
        raise CorruptContainer(f"byte rate mismatch: {byte_rate} != {header.byte_rate}")
    if len(payload) % header.block_align != 0:
        raise CorruptContainer(
            f"data length {len(payload)} is not a multiple of block align {header.block_align}"
        )

    return WavContainer(header=header, payload=payload)


def read_container(data: WavSource) -> WavContainer:
    """解析 WAV 字节流为 WavContainer

    先按小端遍历块列表；小端解析失败时再按大端尝试，两种都失败则报告小端的错误。

    Raises:
        CorruptContainer: 标记缺失、非 PCM、字段不一致或数据被截断
        UnsupportedBitDepth: 位深不是 8 或 16
    """
    if isinstance(data, WavContainer):
        return data
    if data is None:
        raise InvalidArgument("input buffer is empty")

    raw = bytes(data)
    if len(raw) < WAV_HEADER_SIZE:
        raise CorruptContainer(f"wav too short: {len(raw)} bytes")
    if raw[0:4] != b"RIFF":
        raise CorruptContainer("missing RIFF marker")
    if raw[8:12] != b"WAVE":
        raise CorruptContainer("missing WAVE marker")

    try:
        return _parse_chunks(raw, little_endian=True)
    except CorruptContainer as little_error:
        try:
            container = _parse_chunks(raw, little_endian=False)
        except PcmWavError:
            raise little_error from None
        logger.debug("little-endian parse failed (%s), read as big-endian", little_error)
        return container


def decode(data: WavSource) -> tuple[list[np.ndarray], int]:
    """解析 WAV 字节流，返回 (每个声道的 float32 缓冲区, 采样率)"""
    container = read_container(data)
    header = container.header
    samples = decode_pcm(container.payload, header.bit_depth, little_endian=header.little_endian)
    logger.debug(
        "decoded wav: %d frames, %d ch, %d Hz, %d bit",
        header.frame_count,
        header.channel_count,
        header.sample_rate,
        header.bit_depth,
    )
    return deinterleave(samples, header.channel_count), header.sample_rate


class PcmDecoder(ABC):
    """将容器字节解码为 PCM 样本的能力，由调用方构造并注入"""

    @abstractmethod
    def decode(self, data: WavSource) -> tuple[list[np.ndarray], int]:
        raise NotImplementedError


class WavDecoder(PcmDecoder):
    def decode(self, data: WavSource) -> tuple[list[np.ndarray], int]:
        return decode(data)


_DEFAULT_DECODER = WavDecoder()


def merge_containers(
    containers: Sequence[WavSource],
    output_sample_rate: int = 16000,
    bit_depth: int = 16,
    *,
    decoder: PcmDecoder | None = None,
    little_endian: bool = True,
) -> bytes:
    """合并多个 WAV：所有输入的所有声道重采样到同一采样率后依次排列

    输出声道数为各输入声道数之和。
    """
    check_bit_depth(bit_depth)
    if not containers:
        raise InvalidArgument("no containers to merge")
    decoder = decoder or _DEFAULT_DECODER

    channels: list[np.ndarray] = []
    for container in containers:
        buffers, sample_rate = decoder.decode(container)
        for buffer in buffers:
            channels.append(resample(buffer, sample_rate, output_sample_rate))

    logger.debug("merging %d container(s) into %d channel(s)", len(containers), len(channels))
    return encode_channels(channels, output_sample_rate, bit_depth, little_endian=little_endian)


def split_container(
    container: WavSource,
    *,
    decoder: PcmDecoder | None = None,
    bit_depth: int = 16,
    little_endian: bool = True,
) -> list[bytes]:
    """将多声道 WAV 拆分为单声道 WAV 列表，保持原采样率"""
    decoder = decoder or _DEFAULT_DECODER
    buffers, sample_rate = decoder.decode(container)
    return [
        encode(buffer, 1, sample_rate, bit_depth, little_endian=little_endian)
        for buffer in buffers
    ]
