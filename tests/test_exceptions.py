"""测试 pcmwav 异常层次结构"""
from __future__ import annotations

import pytest

from pcmwav.exceptions import (
    ConfigError,
    CorruptContainer,
    InvalidArgument,
    PcmWavError,
    UnsupportedBitDepth,
)


class TestExceptionHierarchy:
    """测试异常继承关系"""

    def test_all_exceptions_inherit_from_base(self) -> None:
        for exc_class in [ConfigError, CorruptContainer, InvalidArgument, UnsupportedBitDepth]:
            assert issubclass(exc_class, PcmWavError)
            assert issubclass(exc_class, Exception)

    def test_catch_base_exception(self) -> None:
        """测试可以用基类捕获所有自定义异常"""
        caught = []
        for exc in [InvalidArgument("bad"), CorruptContainer("bad"), UnsupportedBitDepth(24)]:
            try:
                raise exc
            except PcmWavError as e:
                caught.append(type(e))

        assert caught == [InvalidArgument, CorruptContainer, UnsupportedBitDepth]

    def test_unsupported_bit_depth_carries_value(self) -> None:
        with pytest.raises(UnsupportedBitDepth) as exc_info:
            raise UnsupportedBitDepth(24)

        assert exc_info.value.bit_depth == 24
        assert "8 or 16" in str(exc_info.value)
        assert "24" in str(exc_info.value)
