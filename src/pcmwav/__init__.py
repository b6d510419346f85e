"""pcmwav: PCM quantization, resampling and WAV container tools."""

import os

from .api import (
    accumulate,
    decode_wav,
    export_per_channel_wav,
    export_session,
    export_single_wav,
    merge_wav,
    split_wav,
    volume_level,
)
from .buffer import RecordingSession
from .config import RecorderConfig
from .exceptions import ConfigError, CorruptContainer, InvalidArgument, PcmWavError, UnsupportedBitDepth
from .models import SessionState, WavContainer, WavHeader
from .wav import PcmDecoder, WavDecoder

__version__ = "0.3.0"

__all__ = [
    "ConfigError",
    "CorruptContainer",
    "InvalidArgument",
    "PcmDecoder",
    "PcmWavError",
    "RecorderConfig",
    "RecordingSession",
    "SessionState",
    "UnsupportedBitDepth",
    "WavContainer",
    "WavDecoder",
    "WavHeader",
    "accumulate",
    "decode_wav",
    "export_per_channel_wav",
    "export_session",
    "export_single_wav",
    "merge_wav",
    "split_wav",
    "volume_level",
]

# Initialize Sentry for error tracking
_sentry_dsn = os.environ.get("SENTRY_DSN")
if _sentry_dsn:
    try:
        import sentry_sdk
        sentry_sdk.init(dsn=_sentry_dsn, traces_sample_rate=0.0)
    except ImportError:
        pass  # Sentry SDK not installed
