"""Configuration management for the Spot host service."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import yaml

from spothost.errors import ConfigError
from spothost.protocols import ConnectOptions


DEFAULT_REFRESH_RATE = 300.0  # seconds

DISPLAY_MODES = ("text", "qr")


@dataclass
class ChannelConfig:
    """Channel connection configuration."""

    server: str | None = None
    room_name: str | None = None


@dataclass
class JoinCodeConfig:
    """Join-code rotation configuration."""

    refresh_rate: float | None = DEFAULT_REFRESH_RATE  # None disables rotation
    display: str = "text"  # text | qr


@dataclass
class Config:
    """Service configuration."""

    log_level: str = "INFO"
    log_file: str | None = None
    log_levels: dict[str, str] = field(default_factory=dict)  # per-module overrides
    channel: ChannelConfig = field(default_factory=ChannelConfig)
    join_code: JoinCodeConfig = field(default_factory=JoinCodeConfig)

    def connect_options(self) -> ConnectOptions:
        """Build connect options for the service."""
        return ConnectOptions(
            join_code_refresh_rate=self.join_code.refresh_rate,
            server=self.channel.server,
            room_name=self.channel.room_name,
        )


def get_config_path(custom_path: Path | None = None) -> Path:
    """Get the configuration file path.

    Args:
        custom_path: Override path. If None, returns default.

    Returns:
        Path to config file.
    """
    if custom_path is not None:
        return custom_path
    return Path.home() / ".config" / "spothost" / "config.yaml"


def _default_file_reader(path: Path) -> dict[str, Any] | None:
    """Default file reader that loads YAML from disk."""
    if not path.exists():
        return None
    try:
        content = path.read_text()
        if not content.strip():
            return None
        return yaml.safe_load(content)
    except yaml.YAMLError:
        return None


def _parse_join_code(data: dict[str, Any]) -> JoinCodeConfig:
    refresh_rate = data.get("refresh_rate", JoinCodeConfig.refresh_rate)
    if refresh_rate is not None:
        try:
            refresh_rate = float(refresh_rate)
        except (TypeError, ValueError):
            raise ConfigError(f"join_code.refresh_rate must be a number: {refresh_rate!r}")
        if refresh_rate <= 0:
            raise ConfigError(f"join_code.refresh_rate must be positive: {refresh_rate}")

    display = data.get("display", JoinCodeConfig.display)
    if display not in DISPLAY_MODES:
        raise ConfigError(f"join_code.display must be one of {DISPLAY_MODES}: {display!r}")

    return JoinCodeConfig(refresh_rate=refresh_rate, display=display)


def load_config(
    path: Path | None = None,
    file_reader: Callable[[Path], dict[str, Any] | None] | None = None,
) -> Config:
    """Load configuration from file.

    Args:
        path: Path to config file. If None, uses default path.
        file_reader: Injectable file reader for testing.

    Returns:
        Config object with values from file or defaults.

    Raises:
        ConfigError: If a value is present but invalid.
    """
    config_path = get_config_path(path)
    reader = file_reader or _default_file_reader

    data = reader(config_path)

    if not isinstance(data, dict):
        return Config()

    channel_data = data.get("channel") or {}
    channel_config = ChannelConfig(
        server=channel_data.get("server", ChannelConfig.server),
        room_name=channel_data.get("room_name", ChannelConfig.room_name),
    )

    join_code_config = _parse_join_code(data.get("join_code") or {})

    log_levels = data.get("log_levels") or {}
    if not isinstance(log_levels, dict):
        raise ConfigError("log_levels must map logger names to levels")

    return Config(
        log_level=data.get("log_level", Config.log_level),
        log_file=data.get("log_file", Config.log_file),
        log_levels={str(k): str(v) for k, v in log_levels.items()},
        channel=channel_config,
        join_code=join_code_config,
    )
