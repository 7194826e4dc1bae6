"""Configuration file loading and management"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from xin.common.errors import ConfigError
from xin.common.types import InjectionMethod


@dataclass
class InjectionConfig:
    """Injection method settings"""
    method: InjectionMethod = InjectionMethod.XTEST


@dataclass
class ProtocolConfig:
    """Line protocol settings"""
    line_max: int = 64  # Bytes per line including terminator and NUL slot


@dataclass
class LayoutConfig:
    """Keyboard layout switch settings"""
    command: str = "setxkbmap"
    command_max: int = 128
    sentinel_keysym: str = "Super_L"


@dataclass
class LoggingConfig:
    """Logging configuration settings"""
    level: str = "WARNING"
    file: Optional[str] = None
    format: str = "%(asctime)s %(name)s %(levelname)s: %(message)s"


@dataclass
class Config:
    """Complete application configuration"""
    display: Optional[str] = None
    injection: InjectionConfig = field(default_factory=InjectionConfig)
    protocol: ProtocolConfig = field(default_factory=ProtocolConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader:
    """Loads and parses configuration from YAML files"""

    DEFAULT_CONFIG_PATHS = [
        "xin.yml",
        "~/.config/xin/config.yml",
        "/etc/xin/config.yml",
    ]

    @staticmethod
    def configFile_find() -> Optional[Path]:
        """
        Find configuration file in standard locations

        Returns:
            Path to config file, or None if not found
        """
        for config_path in ConfigLoader.DEFAULT_CONFIG_PATHS:
            path = Path(config_path).expanduser().resolve()
            if path.exists() and path.is_file():
                return path
        return None

    @staticmethod
    def yaml_load(file_path: Path) -> Dict[str, Any]:
        """
        Load YAML configuration file

        Args:
            file_path: Path to YAML file

        Returns:
            Parsed configuration dictionary (empty file yields {})

        Raises:
            FileNotFoundError: If file does not exist
            yaml.YAMLError: If file is not valid YAML
            ConfigError: If the document is not a mapping
        """
        with open(file_path, "r") as f:
            data = yaml.safe_load(f)

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {file_path} must contain a YAML dictionary")

        return data

    @staticmethod
    def config_parse(data: Dict[str, Any]) -> Config:
        """
        Parse configuration dictionary into Config object

        Every section is optional; missing keys keep their defaults.

        Args:
            data: Raw configuration dictionary

        Returns:
            Parsed Config object

        Raises:
            ConfigError: If a value has the wrong type or is out of range
        """
        config = Config()
        config.display = data.get("display")

        injection_data = data.get("injection") or {}
        method_name = injection_data.get("method", config.injection.method.value)
        try:
            config.injection.method = InjectionMethod(str(method_name).lower())
        except ValueError:
            raise ConfigError(
                f"Unknown injection method '{method_name}' (expected xtest or sendevent)"
            )

        protocol_data = data.get("protocol") or {}
        line_max = protocol_data.get("line_max", config.protocol.line_max)
        if not isinstance(line_max, int) or line_max < 4:
            raise ConfigError(f"protocol.line_max must be an integer >= 4, got {line_max!r}")
        config.protocol.line_max = line_max

        layout_data = data.get("layout") or {}
        config.layout = LayoutConfig(
            command=layout_data.get("command", config.layout.command),
            command_max=layout_data.get("command_max", config.layout.command_max),
            sentinel_keysym=layout_data.get("sentinel_keysym", config.layout.sentinel_keysym),
        )
        if not isinstance(config.layout.command_max, int) or config.layout.command_max <= 0:
            raise ConfigError("layout.command_max must be a positive integer")

        logging_data = data.get("logging") or {}
        config.logging = LoggingConfig(
            level=logging_data.get("level", config.logging.level),
            file=logging_data.get("file"),
            format=logging_data.get("format", config.logging.format),
        )

        return config

    @staticmethod
    def config_load(file_path: Optional[Path] = None) -> Config:
        """
        Load configuration from file

        Args:
            file_path: Optional path to config file. If None, searches standard
                locations and falls back to built-in defaults.

        Returns:
            Parsed Config object

        Raises:
            FileNotFoundError: If an explicit config file does not exist
            ConfigError: If config file is invalid
        """
        if file_path is None:
            file_path = ConfigLoader.configFile_find()
            if file_path is None:
                return Config()

        data = ConfigLoader.yaml_load(file_path)
        return ConfigLoader.config_parse(data)

    @staticmethod
    def configWithOverrides_load(
        file_path: Optional[Path] = None,
        **overrides: Any
    ) -> Config:
        """
        Load configuration and apply command-line overrides

        Args:
            file_path: Optional path to config file
            **overrides: display, method or log_level; None leaves config untouched

        Returns:
            Config object with overrides applied
        """
        config = ConfigLoader.config_load(file_path)

        if overrides.get("display") is not None:
            config.display = overrides["display"]
        if overrides.get("method") is not None:
            config.injection.method = overrides["method"]
        if overrides.get("log_level") is not None:
            config.logging.level = overrides["log_level"]

        return config
