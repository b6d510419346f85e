"""测试 pcmwav 日志配置"""
from __future__ import annotations

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

from pcmwav.logging_config import (
    configure_from_env,
    default_log_file,
    get_logger,
    set_level,
    setup_logging,
)


class TestLoggingSetup:
    """测试日志系统配置"""

    def test_setup_logging_creates_logger(self, tmp_path: Path) -> None:
        logger = setup_logging(log_file=tmp_path / "test.log", console=False)

        assert logger.name == "pcmwav"
        assert logger.level == logging.INFO
        assert logger.propagate is False

    def test_setup_logging_writes_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "test.log"
        logger = setup_logging(log_file=log_file, console=False, force_reconfigure=True)
        logger.info("Test message")

        assert "Test message" in log_file.read_text()

    def test_setup_logging_idempotent(self, tmp_path: Path) -> None:
        """重复调用不会重复添加 handler"""
        logger1 = setup_logging(log_file=tmp_path / "test.log", console=False)
        logger2 = setup_logging(log_file=tmp_path / "test.log", console=False)

        assert logger1 is logger2
        assert len(logger2.handlers) == 1

    def test_rotation_config(self, tmp_path: Path) -> None:
        logger = setup_logging(
            log_file=tmp_path / "test.log",
            console=False,
            max_bytes=1024,
            backup_count=2,
            force_reconfigure=True,
        )
        handlers = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
        assert len(handlers) == 1
        assert handlers[0].maxBytes == 1024
        assert handlers[0].backupCount == 2

    def test_no_file_no_console_installs_null_handler(self) -> None:
        logger = setup_logging(console=False, file_logging=False, force_reconfigure=True)
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.NullHandler)

    def test_default_log_file_honours_xdg(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
        assert default_log_file() == tmp_path / "pcmwav" / "pcmwav.log"


class TestGetLogger:
    def test_get_logger_names(self) -> None:
        assert get_logger().name == "pcmwav"
        assert get_logger("wav").name == "pcmwav.wav"

    def test_child_logger_writes_through_root(self, tmp_path: Path) -> None:
        log_file = tmp_path / "test.log"
        setup_logging(level=logging.DEBUG, log_file=log_file, console=False, force_reconfigure=True)

        get_logger("resample").debug("Child debug message")

        content = log_file.read_text()
        assert "pcmwav.resample" in content
        assert "Child debug message" in content
        assert re.search(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", content)


class TestSetLevel:
    def test_set_level_with_int_and_string(self, tmp_path: Path) -> None:
        logger = setup_logging(log_file=tmp_path / "test.log", console=False, force_reconfigure=True)
        set_level(logging.WARNING)
        assert logger.level == logging.WARNING

        set_level("error")
        assert logger.level == logging.ERROR
        for handler in logger.handlers:
            assert handler.level == logging.ERROR


class TestConfigureFromEnv:
    """测试从环境变量配置"""

    def test_defaults_to_warning_without_file(self, monkeypatch) -> None:
        monkeypatch.delenv("PCMWAV_LOG_LEVEL", raising=False)
        monkeypatch.delenv("PCMWAV_LOG_FILE", raising=False)
        monkeypatch.delenv("PCMWAV_LOG_CONSOLE", raising=False)

        logger = configure_from_env(force_reconfigure=True)

        assert logger.level == logging.WARNING
        assert not any(isinstance(h, RotatingFileHandler) for h in logger.handlers)

    def test_custom_level_and_file(self, tmp_path: Path, monkeypatch) -> None:
        log_file = tmp_path / "custom.log"
        monkeypatch.setenv("PCMWAV_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("PCMWAV_LOG_FILE", str(log_file))
        monkeypatch.setenv("PCMWAV_LOG_CONSOLE", "0")

        logger = configure_from_env(force_reconfigure=True)
        logger.debug("env message")

        assert logger.level == logging.DEBUG
        assert "env message" in log_file.read_text()
        non_file = [
            h for h in logger.handlers
            if isinstance(h, logging.StreamHandler) and not isinstance(h, RotatingFileHandler)
        ]
        assert non_file == []
