"""Environment-based configuration using pydantic-settings.

ShellSettings loads from DONUT_* environment variables and an optional .env
file. load_settings() additionally merges a YAML config file underneath the
environment, so an exported variable always wins over the file.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .commands.types import AgentType
from .errors import ConfigError
from .paths import default_user_config_path

BORDER_STYLES = ("single", "double", "rounded", "heavy", "none")


class ShellSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="DONUT_", case_sensitive=False, extra="ignore"
    )

    # Logging
    log_level: str = Field(default="WARNING", description="Application log level")
    log_format: str = Field(default="text", description="Log format: json or text")
    log_file: Optional[str] = Field(default=None, description="Write logs here instead of stderr")

    # Shell
    prompt: str = Field(default="donut ❯ ")
    show_banner: bool = Field(default=True)
    default_agent: str = Field(
        default="STRATEGY_BUILDER", description="Agent that receives free-text input"
    )
    history_size: int = Field(default=1000, description="In-memory readline history length")

    # Menus
    menu_border: str = Field(default="rounded")
    menu_max_visible: Optional[int] = Field(default=None)
    color: bool = Field(default=True)

    @field_validator("log_format")
    def validate_log_format(cls, v):
        if v.lower() not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v.lower()

    @field_validator("default_agent")
    def validate_default_agent(cls, v):
        agents = [a.value for a in AgentType]
        if v.upper() not in agents:
            raise ValueError(f"default_agent must be one of: {', '.join(agents)}")
        return v.upper()

    @field_validator("menu_border")
    def validate_menu_border(cls, v):
        if v not in BORDER_STYLES:
            raise ValueError(f"menu_border must be one of: {', '.join(BORDER_STYLES)}")
        return v

    @field_validator("menu_max_visible")
    def validate_max_visible(cls, v):
        if v is not None and v < 1:
            raise ValueError("menu_max_visible must be at least 1")
        return v

    @field_validator("history_size")
    def validate_history_size(cls, v):
        if v < 0:
            raise ValueError("history_size cannot be negative")
        return v


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"{path} is not valid YAML ({e})") from e
    except OSError as e:
        raise ConfigError(f"cannot read {path} ({e.strerror})") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")
    return data


def resolve_config_path(path: Optional[Path] = None) -> Optional[Path]:
    """Pick the config file: explicit path -> $DONUT_CONFIG -> ~/.donut/donut.yaml."""
    if path is not None:
        return Path(path)
    env_path = os.getenv("DONUT_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    home_cfg = default_user_config_path()
    return home_cfg if home_cfg.exists() else None


def load_settings(path: Optional[Path] = None) -> ShellSettings:
    """Load settings with precedence: environment -> YAML file -> defaults."""
    cfg_path = resolve_config_path(path)
    file_data: Dict[str, Any] = {}
    if cfg_path is not None:
        if not cfg_path.exists():
            raise ConfigError(f"configuration file not found: {cfg_path}")
        file_data = _read_yaml(cfg_path)

    try:
        from_env = ShellSettings()
        merged = {**file_data, **from_env.model_dump(include=from_env.model_fields_set)}
        return ShellSettings(**merged)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ())) or "settings"
        raise ConfigError(f"{field}: {first.get('msg')}") from e
