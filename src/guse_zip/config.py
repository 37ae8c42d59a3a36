"""
Configuration management with YAML loading and environment variable support.
"""

import logging
import os
import zipfile
from dataclasses import dataclass, field
from pathlib import Path

import yaml

COMPRESSION_METHODS = {
    "stored": zipfile.ZIP_STORED,
    "deflated": zipfile.ZIP_DEFLATED,
}


@dataclass
class ArchiveConfig:
    compression: str = "deflated"  # "deflated" or "stored"
    compress_level: int | None = None

    @property
    def compression_method(self) -> int:
        """zipfile constant for the configured compression."""
        return COMPRESSION_METHODS[self.compression]


@dataclass
class OutputConfig:
    overwrite: bool = False


@dataclass
class LoggingConfig:
    level: str = "WARNING"
    rich_tracebacks: bool = False


@dataclass
class AppConfig:
    archive: ArchiveConfig = field(default_factory=ArchiveConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> "AppConfig":
        """Load configuration from YAML file."""
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "AppConfig":
        """Create config from dictionary."""
        config = cls()

        for attr in ["archive", "output", "logging"]:
            section = getattr(config, attr)
            for key, value in (data.get(attr) or {}).items():
                if hasattr(section, key):
                    setattr(section, key, value)

        if config.archive.compression not in COMPRESSION_METHODS:
            raise ValueError(
                f"Unknown compression '{config.archive.compression}' "
                f"(expected one of: {', '.join(COMPRESSION_METHODS)})"
            )

        config.logging.level = str(config.logging.level).upper()
        if not isinstance(logging.getLevelName(config.logging.level), int):
            raise ValueError(f"Unknown logging level '{config.logging.level}'")

        return config


def _get_default_config_dir() -> Path:
    """Get default config directory."""
    # Check environment variable first
    if config_dir := os.environ.get("GUSEZIP_CONFIG_DIR"):
        return Path(config_dir)

    # Check XDG config home
    if xdg_config := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_config) / "guse-zip"

    # Fall back to ~/.config
    return Path.home() / ".config" / "guse-zip"


def load_config(config_path: Path | None = None, config_dir: Path | None = None) -> AppConfig:
    """
    Load configuration.

    Args:
        config_path: Path to config file (default: searches standard locations)
        config_dir: Config directory to search instead of the default

    Returns:
        AppConfig, with defaults for anything not set
    """
    if config_path is None:
        if config_dir is None:
            config_dir = _get_default_config_dir()

        search_paths = [
            config_dir / "config.yaml",
            Path.cwd() / "gusezip.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = path
                break

    return AppConfig.from_yaml(config_path) if config_path else AppConfig()
