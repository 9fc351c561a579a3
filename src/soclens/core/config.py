"""Configuration loading for SOC Lens.

Settings come from an optional YAML file and are validated against the
Settings model. CLI options override file values.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from soclens.aggregator.frameworks import FRAMEWORK_IDS
from soclens.core.errors import ConfigError
from soclens.filters.time_range import TIME_RANGES

DEFAULT_CONFIG_NAMES = ("soclens.yaml", "soclens.yml")


class Settings(BaseModel):
    """Runtime settings for the pipeline and the watch ticker."""

    time_range: str = Field(
        default="all",
        description="Default time-range selector",
    )

    frameworks: list[str] = Field(
        default_factory=lambda: list(FRAMEWORK_IDS),
        description="Frameworks reported by default",
    )

    search: str = Field(
        default="",
        description="Default free-text search term",
    )

    poll_interval_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Seconds between watch ticks",
    )

    map_text_levels: bool = Field(
        default=False,
        description="Map textual rule levels (alert, error, ...) to numbers",
    )

    model_config = {"extra": "forbid"}

    @field_validator("time_range")
    @classmethod
    def validate_time_range(cls, v: str) -> str:
        """Restrict to the fixed selector set."""
        if v not in TIME_RANGES:
            raise ValueError(f"time_range must be one of {list(TIME_RANGES)}")
        return v

    @field_validator("frameworks")
    @classmethod
    def validate_frameworks(cls, v: list[str]) -> list[str]:
        """Restrict to registered frameworks."""
        unknown = [f for f in v if f not in FRAMEWORK_IDS]
        if unknown:
            raise ValueError(f"unknown frameworks: {unknown}")
        return v


def load_config(path: Path | None = None) -> Settings:
    """Load settings from a YAML file.

    With no path, the current directory is searched for soclens.yaml;
    defaults apply when nothing is found.

    Args:
        path: Explicit configuration file

    Returns:
        Validated Settings

    Raises:
        ConfigError: If the file is missing, not YAML, or invalid
    """
    if path is None:
        for name in DEFAULT_CONFIG_NAMES:
            candidate = Path(name)
            if candidate.exists():
                path = candidate
                break
        else:
            return Settings()

    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}", path=str(path))

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML parse error: {e}", path=str(path))

    return settings_from_dict(data or {}, path=str(path))


def settings_from_dict(data: Any, path: str | None = None) -> Settings:
    """Validate a mapping into Settings."""
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping", path=path)

    try:
        return Settings(**data)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        raise ConfigError("Invalid configuration", path=path, errors=errors)
