"""pcmwav 异常层次结构

定义了项目中使用的所有自定义异常类型。量化与重采样函数对数值输入是全函数，
只会钳位不会抛出；这里的异常只覆盖参数、位深与容器格式错误。
"""
from __future__ import annotations


class PcmWavError(Exception):
    """pcmwav 基础异常类

    所有 pcmwav 自定义异常的基类。
    """
    pass


class InvalidArgument(PcmWavError):
    """参数错误

    包括：
    - 输入缓冲区为空（None）
    - 采样率小于等于 1
    - 需要等长时声道长度不一致
    - 声道数非法
    """
    pass


class UnsupportedBitDepth(PcmWavError):
    """位深错误（仅支持 8 位和 16 位 PCM）"""

    def __init__(self, bit_depth: object) -> None:
        super().__init__(f"bitDepth must be 8 or 16, got {bit_depth!r}")
        self.bit_depth = bit_depth


class CorruptContainer(PcmWavError):
    """WAV 容器损坏

    包括：
    - 缺少 RIFF/WAVE/fmt /data 标记
    - 非 PCM 编码
    - 数据长度与头部声明不一致
    """
    pass


class ConfigError(PcmWavError):
    """配置相关错误

    包括：
    - 配置文件格式错误
    - 配置值无效
    """
    pass
