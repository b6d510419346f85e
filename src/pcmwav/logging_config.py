"""pcmwav 日志配置

库内各模块只通过 get_logger() 取得 logger 并输出 DEBUG 信息，从不自行安装 handler；
由命令行入口或宿主应用调用 setup_logging() / configure_from_env() 完成配置。
"""
from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = "pcmwav"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def default_log_file() -> Path:
    """默认日志路径：$XDG_DATA_HOME/pcmwav/pcmwav.log"""
    data_home = os.environ.get("XDG_DATA_HOME")
    base = Path(data_home) if data_home else Path.home() / ".local" / "share"
    return base / "pcmwav" / "pcmwav.log"


def setup_logging(
    level: int = logging.INFO,
    log_file: str | Path | None = None,
    console: bool = True,
    max_bytes: int = 5 * 1024 * 1024,  # 5MB
    backup_count: int = 3,
    force_reconfigure: bool = False,
    file_logging: bool = True,
) -> logging.Logger:
    """配置 pcmwav 日志

    Args:
        level: 日志级别
        log_file: 日志文件路径（默认见 default_log_file()）
        console: 是否输出到 stderr
        max_bytes: 单个日志文件最大字节数
        backup_count: 轮转保留的文件数量
        force_reconfigure: 已配置时是否清除现有 handler 重新配置
        file_logging: 是否写日志文件

    Returns:
        "pcmwav" 根 logger
    """
    logger = logging.getLogger(LOGGER_NAME)

    if logger.handlers and not force_reconfigure:
        return logger

    if force_reconfigure:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    logger.setLevel(level)
    logger.propagate = False

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if file_logging:
        path = Path(log_file) if log_file is not None else default_log_file()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """获取 "pcmwav" 或 "pcmwav.<name>" logger"""
    if name is None:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def set_level(level: int | str) -> None:
    """设置日志级别（int 或 "DEBUG"/"INFO" 等字符串）"""
    logger = logging.getLogger(LOGGER_NAME)

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


def configure_from_env(*, force_reconfigure: bool = False) -> logging.Logger:
    """从环境变量配置日志

    - PCMWAV_LOG_LEVEL: DEBUG / INFO / WARNING / ERROR（默认 WARNING）
    - PCMWAV_LOG_FILE: 日志文件路径；未设置时不写文件
    - PCMWAV_LOG_CONSOLE: 是否输出到 stderr（1/0，默认 1）
    """
    level_str = os.environ.get("PCMWAV_LOG_LEVEL", "WARNING").upper()
    level = getattr(logging, level_str, logging.WARNING)

    log_file = os.environ.get("PCMWAV_LOG_FILE")
    console = os.environ.get("PCMWAV_LOG_CONSOLE", "1") == "1"

    return setup_logging(
        level=level,
        log_file=log_file,
        console=console,
        file_logging=bool(log_file),
        force_reconfigure=force_reconfigure,
    )
