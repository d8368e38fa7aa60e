from __future__ import annotations

import json
from pathlib import Path
from typing import Self

from pydantic import BaseModel, Field, ValidationError, model_validator

from spinlog.exception import ConfigError
from spinlog.utils.logging import logger

DEFAULT_MAX_ACTIVE_LOGS = 20
DEFAULT_MAX_COMPLETED_LOGS = 5
DEFAULT_RETENTION_TIME_MS = 3000
DEFAULT_REFRESH_RATE_MS = 16
DEFAULT_TRAILER = "Press Ctrl+C to exit | Tasks tracked in background"


class LogManagerConfig(BaseModel):
    """Store caps, retention and render cadence."""

    max_active_logs: int = Field(
        default=DEFAULT_MAX_ACTIVE_LOGS,
        description="Running entries kept before the oldest are evicted.",
    )
    max_completed_logs: int = Field(
        default=DEFAULT_MAX_COMPLETED_LOGS,
        description="Finished entries kept before the oldest are evicted.",
    )
    retention_time_ms: int = Field(
        default=DEFAULT_RETENTION_TIME_MS,
        description=(
            "Milliseconds a finished entry stays visible. "
            "0 keeps finished entries until they are evicted."
        ),
    )
    refresh_rate: int = Field(
        default=DEFAULT_REFRESH_RATE_MS,
        description="Milliseconds between render passes.",
    )

    @model_validator(mode="after")
    def _clamp_values(self) -> "LogManagerConfig":
        if self.max_active_logs < 0:
            self.max_active_logs = DEFAULT_MAX_ACTIVE_LOGS
        if self.max_completed_logs < 0:
            self.max_completed_logs = DEFAULT_MAX_COMPLETED_LOGS
        if self.retention_time_ms < 0:
            self.retention_time_ms = DEFAULT_RETENTION_TIME_MS
        if self.refresh_rate < 1:
            self.refresh_rate = DEFAULT_REFRESH_RATE_MS
        return self

    @property
    def keeps_finished_forever(self) -> bool:
        return self.retention_time_ms == 0

    @property
    def refresh_interval(self) -> float:
        """Render period in seconds."""
        return self.refresh_rate / 1000


class DisplayConfig(BaseModel):
    """Terminal region preferences."""

    trailer: str = Field(
        default=DEFAULT_TRAILER, description="Instruction line written after the task lines."
    )
    show_trailer: bool = Field(default=True, description="Whether to write the trailer line.")
    indent_width: int = Field(default=2, description="Spaces per hierarchy level.")

    @model_validator(mode="after")
    def _clamp_values(self) -> "DisplayConfig":
        if self.indent_width < 0:
            self.indent_width = 2
        return self

    @model_validator(mode="after")
    def validate_trailer(self) -> Self:
        if self.show_trailer and "\n" in self.trailer:
            raise ValueError("Trailer must be a single line")
        return self


class Config(BaseModel):
    """Main configuration structure."""

    manager: LogManagerConfig = Field(
        default_factory=LogManagerConfig, description="Store and render loop settings"
    )
    display: DisplayConfig = Field(
        default_factory=DisplayConfig, description="Terminal region settings"
    )


def get_share_dir() -> Path:
    """Get the per-user spinlog directory, creating it if needed."""
    share_dir = Path.home() / ".spinlog"
    share_dir.mkdir(parents=True, exist_ok=True)
    return share_dir


def get_config_file() -> Path:
    """Get the configuration file path."""
    return get_share_dir() / "config.json"


def get_default_config() -> Config:
    """Get the default configuration."""
    return Config()


def load_config(config_file: Path | None = None) -> Config:
    """
    Load configuration from config file.
    If the config file does not exist, create it with default configuration.

    Args:
        config_file (Path | None): Path to the configuration file. If None, use default path.

    Returns:
        Validated Config object.

    Raises:
        ConfigError: If the configuration file is invalid.
    """
    config_file = config_file or get_config_file()
    logger.debug("Loading config from file: {file}", file=config_file)

    if not config_file.exists():
        config = get_default_config()
        logger.debug("No config file found, creating default config: {config}", config=config)
        save_config(config, config_file)
        return config

    try:
        with open(config_file, encoding="utf-8") as f:
            data = json.load(f)
        return Config(**data)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in configuration file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration file: {e}") from e


def save_config(config: Config, config_file: Path | None = None):
    """
    Save configuration to config file.

    Args:
        config (Config): Config object to save.
        config_file (Path | None): Path to the configuration file. If None, use default path.
    """
    config_file = config_file or get_config_file()
    logger.debug("Saving config to file: {file}", file=config_file)
    with open(config_file, "w", encoding="utf-8") as f:
        f.write(config.model_dump_json(indent=2, exclude_none=True))
