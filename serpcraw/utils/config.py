"""
Configuration management for serpcraw.
Loads and validates settings from YAML files and environment variables.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, get_origin

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


class GeneralConfig(BaseModel):
    """General configuration."""

    project_name: str = "serpcraw"
    version: str = "0.1.0"
    log_level: str = "INFO"
    logs_dir: str = "logs"
    log_to_file: bool = False
    json_logs: bool = True


class FetcherConfig(BaseModel):
    """HTTP fetcher configuration.

    Retry applies to response status codes only; transport failures
    surface immediately.
    """

    model_config = ConfigDict(extra="forbid")

    max_attempts: int = Field(default=3, ge=1)
    retry_delay_seconds: float = Field(default=5.0, ge=0.0)
    retry_status_codes: list[int] = Field(default_factory=lambda: [400])
    retry_server_errors: bool = True  # retry every 5xx
    request_timeout: float = Field(default=30.0, gt=0.0)
    user_agent: str = (
        "Mozilla/5.0 (iPhone; CPU iPhone OS 16_6 like Mac OS X) "
        "AppleWebKit/605.1.15 (KHTML, like Gecko) Version/16.6 Mobile/15E148 Safari/604.1"
    )
    accept: str = "*/*"
    accept_encoding: str = "gzip, deflate, br"

    @field_validator("retry_status_codes")
    @classmethod
    def validate_status_codes(cls, v: list[int]) -> list[int]:
        """Reject values that are not HTTP status codes."""
        for code in v:
            if not 100 <= code <= 599:
                raise ValueError(f"Invalid HTTP status code: {code}")
        return v


class ParserConfig(BaseModel):
    """HTML parser configuration."""

    html_parser: str = "html.parser"
    config_path: str | None = None  # defaults to <config dir>/search_parsers.yaml


class Settings(BaseModel):
    """Main settings container."""

    general: GeneralConfig = Field(default_factory=GeneralConfig)
    fetcher: FetcherConfig = Field(default_factory=FetcherConfig)
    parser: ParserConfig = Field(default_factory=ParserConfig)


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries.

    Args:
        base: Base dictionary.
        override: Override dictionary.

    Returns:
        Merged dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _load_yaml_config(config_dir: Path) -> dict[str, Any]:
    """Load settings.yaml with the `settings` section of local.yaml applied.

    Args:
        config_dir: Configuration directory path.

    Returns:
        Merged configuration dictionary.
    """
    config: dict[str, Any] = {}

    base_path = config_dir / "settings.yaml"
    if base_path.exists():
        with open(base_path, encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}

    local_path = config_dir / "local.yaml"
    if local_path.exists():
        with open(local_path, encoding="utf-8") as f:
            local_overrides = yaml.safe_load(f) or {}
        if isinstance(local_overrides.get("settings"), dict):
            config = _deep_merge(config, local_overrides["settings"])

    return config


def _coerce_env_value(value: str) -> Any:
    """Convert an environment string to bool, int or float where it parses as one."""
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    try:
        return float(value) if "." in value else int(value)
    except ValueError:
        return value


def _is_list_field(key_path: list[str]) -> bool:
    """Check whether a settings key path points at a list-typed field."""
    annotation: Any = Settings
    for part in key_path:
        field = getattr(annotation, "model_fields", {}).get(part)
        if field is None:
            return False
        annotation = field.annotation
    return get_origin(annotation) is list


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides.

    Environment variables should be prefixed with SERPCRAW_ and use
    double underscores for nested keys.

    Example:
        SERPCRAW_FETCHER__MAX_ATTEMPTS=5
        SERPCRAW_FETCHER__RETRY_STATUS_CODES=400,503  (list fields split on commas)

    Args:
        config: Configuration dictionary.

    Returns:
        Configuration with environment overrides.
    """
    prefix = "SERPCRAW_"

    for key, value in os.environ.items():
        if not key.startswith(prefix) or key == "SERPCRAW_CONFIG_DIR":
            continue

        key_path = key[len(prefix) :].lower().split("__")

        current = config
        for part in key_path[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]

        if _is_list_field(key_path):
            items = [item.strip() for item in value.split(",") if item.strip()]
            current[key_path[-1]] = [_coerce_env_value(item) for item in items]
        else:
            current[key_path[-1]] = _coerce_env_value(value)

    return config


def get_config_dir() -> Path:
    """Get the configuration directory (SERPCRAW_CONFIG_DIR or ./config)."""
    return Path(os.environ.get("SERPCRAW_CONFIG_DIR", "config"))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get application settings.

    Settings are loaded from:
    1. Default values
    2. YAML configuration files
    3. Environment variables (highest priority)

    Returns:
        Settings instance.
    """
    config = _load_yaml_config(get_config_dir())
    config = _apply_env_overrides(config)
    return Settings(**config)


def get_project_root() -> Path:
    """Get the project root directory.

    Returns:
        Project root path.
    """
    # Assuming this file is at serpcraw/utils/config.py
    return Path(__file__).parent.parent.parent
