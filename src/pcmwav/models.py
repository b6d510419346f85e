from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .exceptions import InvalidArgument
from .pcm import check_bit_depth

try:
    from enum import StrEnum  # type: ignore[attr-defined]
except ImportError:
    class StrEnum(str, Enum):
        """Python 3.10 fallback for enum.StrEnum."""

WAV_HEADER_SIZE = 44
FMT_CHUNK_SIZE = 16
PCM_FORMAT = 1


class SessionState(StrEnum):
    IDLE = "idle"
    CAPTURING = "capturing"
    PAUSED = "paused"
    STOPPED = "stopped"


@dataclass(frozen=True, slots=True)
class WavHeader:
    """44 字节标准 WAV 头部的字段；块大小均由 data_length 推导"""

    sample_rate: int
    channel_count: int
    bit_depth: int
    data_length: int
    little_endian: bool = True

    @property
    def bytes_per_sample(self) -> int:
        return self.bit_depth // 8

    @property
    def block_align(self) -> int:
        return self.channel_count * self.bytes_per_sample

    @property
    def byte_rate(self) -> int:
        return self.sample_rate * self.block_align

    @property
    def riff_size(self) -> int:
        return 36 + self.data_length

    @property
    def frame_count(self) -> int:
        if self.block_align == 0:
            return 0
        return self.data_length // self.block_align

    @property
    def duration(self) -> float:
        if self.sample_rate <= 0:
            return 0.0
        return self.frame_count / self.sample_rate


@dataclass(frozen=True, slots=True)
class WavContainer:
    header: WavHeader
    payload: bytes

    @classmethod
    def from_payload(
        cls,
        payload: bytes,
        *,
        sample_rate: int,
        channel_count: int,
        bit_depth: int,
        little_endian: bool = True,
    ) -> WavContainer:
        """payload 长度必须是 channel_count * bit_depth / 8 的整数倍

        Raises:
            UnsupportedBitDepth: 位深不是 8 或 16
            InvalidArgument: 声道数小于 1 或 payload 含不完整的帧
        """
        check_bit_depth(bit_depth)
        if channel_count < 1:
            raise InvalidArgument(f"invalid channel count: {channel_count}")
        header = WavHeader(
            sample_rate=sample_rate,
            channel_count=channel_count,
            bit_depth=bit_depth,
            data_length=len(payload),
            little_endian=little_endian,
        )
        if header.data_length % header.block_align != 0:
            raise InvalidArgument(
                f"payload length {header.data_length} is not a multiple of block align {header.block_align}"
            )
        return cls(header=header, payload=bytes(payload))

    def to_bytes(self) -> bytes:
        from .wav import write_header

        h = self.header
        return write_header(
            h.data_length,
            h.sample_rate,
            h.channel_count,
            h.bit_depth,
            little_endian=h.little_endian,
        ) + self.payload
