"""采集数据的累积：按到达顺序拼接分块，维护录音会话状态"""
from __future__ import annotations

import threading
from typing import Callable, Sequence

import numpy as np

from .config import RecorderConfig
from .exceptions import InvalidArgument
from .logging_config import get_logger
from .models import SessionState

logger = get_logger("buffer")

OnProgressListener = Callable[[list[np.ndarray], int], None]


def _as_float32(chunk: Sequence[float] | np.ndarray) -> np.ndarray:
    return np.asarray(chunk, dtype=np.float32).reshape(-1)


def concat(chunks: Sequence[Sequence[float] | np.ndarray]) -> np.ndarray:
    """按顺序拼接同一声道的分块

    没有分块时返回空数组；只有一个 float32 分块时直接返回该分块（不复制）。
    """
    if len(chunks) == 0:
        return np.zeros(0, dtype=np.float32)
    if len(chunks) == 1:
        only = chunks[0]
        if isinstance(only, np.ndarray) and only.dtype == np.float32 and only.ndim == 1:
            return only
        return _as_float32(only)
    return np.concatenate([_as_float32(chunk) for chunk in chunks])


def concat_bytes(chunks: Sequence[bytes]) -> bytes:
    if len(chunks) == 0:
        return b""
    if len(chunks) == 1:
        return bytes(chunks[0])
    return b"".join(chunks)


def calculate_audio_duration(sample_count: int, sample_rate: int) -> float:
    """单声道样本数对应的时长（秒）"""
    if sample_rate <= 0:
        return 0.0
    return sample_count / sample_rate


class RecordingSession:
    """录音会话：保存每个声道的分块列表和已采集样本数

    采集回调通常在音频线程中触发，分块列表由锁保护。暂停或停止状态下送入的
    分块会被丢弃。
    """

    def __init__(self, config: RecorderConfig | None = None) -> None:
        self.config = config or RecorderConfig()
        self.state = SessionState.IDLE
        self._buffers: list[list[np.ndarray]] = []
        self._sample_count = 0
        self._lock = threading.Lock()
        self._on_progress: OnProgressListener | None = None

    @property
    def sample_rate(self) -> int:
        return self.config.sample_rate

    @property
    def sample_count(self) -> int:
        return self._sample_count

    @property
    def duration(self) -> float:
        return calculate_audio_duration(self._sample_count, self.config.sample_rate)

    def set_on_progress(self, listener: OnProgressListener | None) -> None:
        self._on_progress = listener

    def start(self) -> None:
        self.reset()
        self.state = SessionState.CAPTURING
        logger.debug(
            "session started: %d channel(s) @ %d Hz",
            self.config.number_of_channels,
            self.config.sample_rate,
        )

    def pause(self) -> None:
        if self.state == SessionState.CAPTURING:
            self.state = SessionState.PAUSED

    def resume(self) -> None:
        if self.state == SessionState.PAUSED:
            self.state = SessionState.CAPTURING

    def stop(self) -> None:
        if self.state != SessionState.IDLE:
            self.state = SessionState.STOPPED
        logger.debug("session stopped after %d samples (%.3fs)", self._sample_count, self.duration)

    def reset(self) -> None:
        with self._lock:
            self._buffers = []
            self._sample_count = 0
        self.state = SessionState.IDLE

    def accumulate(self, channel_id: int, chunk: Sequence[float] | np.ndarray) -> bool:
        """向单个声道追加一个分块，返回是否被接收"""
        if channel_id < 0:
            raise InvalidArgument(f"invalid channel id: {channel_id}")
        if self.state != SessionState.CAPTURING:
            return False

        data = _as_float32(chunk).copy()
        with self._lock:
            while len(self._buffers) <= channel_id:
                self._buffers.append([])
            self._buffers[channel_id].append(data)
            if channel_id == 0:
                self._sample_count += len(data)
        return True

    def push_frame(self, chunks: Sequence[Sequence[float] | np.ndarray]) -> bool:
        """一次采集回调：每个声道一个分块"""
        if self.state != SessionState.CAPTURING:
            return False

        frame = [_as_float32(chunk).copy() for chunk in chunks]
        if self._on_progress is not None:
            self._on_progress(frame, self.config.sample_rate)

        with self._lock:
            if self.config.cache_data:
                while len(self._buffers) < len(frame):
                    self._buffers.append([])
                for index, data in enumerate(frame):
                    self._buffers[index].append(data)
            self._sample_count += len(frame[0]) if frame else 0
        return True

    def buffers(self) -> list[list[np.ndarray]]:
        with self._lock:
            return [list(channel) for channel in self._buffers]

    def channel_buffers(self) -> list[np.ndarray]:
        return [concat(channel) for channel in self.buffers()]
