from __future__ import annotations

import json
import shutil
from dataclasses import asdict, dataclass, fields
from datetime import datetime
from pathlib import Path
from typing import Any

from .exceptions import ConfigError
from .pcm import SUPPORTED_BIT_DEPTHS


@dataclass(slots=True)
class RecorderConfig:
    sample_rate: int = 16000
    number_of_channels: int = 1
    output_sample_rate: int = 16000
    bit_depth: int = 16
    little_endian: bool = True
    cache_data: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RecorderConfig:
        """从字典构造配置，忽略未知字段；验证失败抛出 ConfigError"""
        errors = ConfigValidator.validate(data)
        if errors:
            error_msg = "\n".join(f"  - {err}" for err in errors)
            raise ConfigError(f"配置验证失败:\n{error_msg}")
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class ConfigValidator:
    """配置验证器"""

    @staticmethod
    def validate(config: dict[str, Any]) -> list[str]:
        """验证配置，返回错误列表（空列表表示通过）"""
        errors = []

        for key in ("sample_rate", "output_sample_rate"):
            if key in config:
                rate = config[key]
                if not isinstance(rate, int) or isinstance(rate, bool):
                    errors.append(f"{key} 必须是整数")
                elif rate <= 1:
                    errors.append(f"{key} 必须大于 1")

        if "number_of_channels" in config:
            channels = config["number_of_channels"]
            if not isinstance(channels, int) or isinstance(channels, bool):
                errors.append("number_of_channels 必须是整数")
            elif channels < 1:
                errors.append("number_of_channels 必须大于等于 1")

        if "bit_depth" in config:
            if config["bit_depth"] not in SUPPORTED_BIT_DEPTHS or isinstance(config["bit_depth"], bool):
                errors.append("bit_depth 必须是 8 或 16")

        for key in ("little_endian", "cache_data"):
            if key in config and not isinstance(config[key], bool):
                errors.append(f"{key} 必须是布尔值")

        return errors


class ConfigManager:
    """JSON 配置文件管理"""

    @staticmethod
    def load(path: Path | str) -> dict[str, Any]:
        """加载配置文件；文件不存在时返回空字典

        Raises:
            ConfigError: 文件格式错误或验证失败
        """
        p = Path(path).expanduser()
        if not p.exists():
            return {}

        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigError(f"配置文件 JSON 格式错误: {e}") from e
        except OSError as e:
            raise ConfigError(f"读取配置文件失败: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"配置文件格式错误: {path}")

        errors = ConfigValidator.validate(data)
        if errors:
            error_msg = "\n".join(f"  - {err}" for err in errors)
            raise ConfigError(f"配置验证失败:\n{error_msg}")

        return data

    @staticmethod
    def load_recorder_config(path: Path | str) -> RecorderConfig:
        return RecorderConfig.from_dict(ConfigManager.load(path))

    @staticmethod
    def save(path: Path | str, config: dict[str, Any] | RecorderConfig) -> None:
        """保存配置文件，已存在时先备份

        Raises:
            ConfigError: 验证或写入失败
        """
        if isinstance(config, RecorderConfig):
            config = config.to_dict()
        p = Path(path).expanduser()

        errors = ConfigValidator.validate(config)
        if errors:
            error_msg = "\n".join(f"  - {err}" for err in errors)
            raise ConfigError(f"配置验证失败:\n{error_msg}")

        try:
            if p.exists():
                ConfigManager.backup(p)
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(json.dumps(config, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"保存配置文件失败: {e}") from e

    @staticmethod
    def backup(path: Path | str, max_backups: int = 5) -> Path | None:
        """备份配置文件，返回备份路径；文件不存在时返回 None"""
        p = Path(path).expanduser()
        if not p.exists():
            return None

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        backup_path = p.parent / f"{p.stem}.backup.{timestamp}{p.suffix}"
        shutil.copy2(p, backup_path)

        backups = sorted(
            p.parent.glob(f"{p.stem}.backup.*{p.suffix}"),
            key=lambda x: x.name,
            reverse=True,
        )
        for old in backups[max_backups:]:
            old.unlink(missing_ok=True)

        return backup_path
