"""Runtime settings for the Things3 MCP server."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from things_mcp.errors import ConfigurationError
from things_mcp.scripting.builder import DEFAULT_APPLICATION

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    """Server settings, loaded from an optional YAML file plus CLI overrides."""

    model_config = ConfigDict(extra="forbid")

    application: str = Field(default=DEFAULT_APPLICATION, min_length=1)
    osascript_path: str = Field(default="osascript", min_length=1)
    timeout_seconds: float = Field(default=30.0, gt=0)
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        """Accept log levels in any case."""
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level


def load_settings(path: str | Path | None = None, **overrides: Any) -> Settings:
    """Build Settings from a YAML file and keyword overrides.

    Args:
        path: Optional YAML file with top-level setting keys.
        **overrides: Values that win over the file; None values are ignored.

    Returns:
        Validated settings.

    Raises:
        ConfigurationError: If the file cannot be read or the values are invalid.
    """
    data: dict[str, Any] = {}
    if path is not None:
        config_path = Path(path)
        try:
            with open(config_path) as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"Cannot read config file {config_path}: {e}"
            ) from e
        if not isinstance(loaded, dict):
            raise ConfigurationError(
                f"Config file {config_path} must contain a mapping"
            )
        data.update(loaded)

    data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e
