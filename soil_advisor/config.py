"""Configuration management for soil-advisor.

Provider defaults live in the packaged ``config/providers.yaml``; a handful of
environment variables override them at runtime.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from soil_advisor.logging_config import get_logger

logger = get_logger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


class ProviderConfig(BaseModel):
    """Configuration for an external soil data provider."""

    endpoint: str
    timeout_s: float = Field(10.0, gt=0)
    enabled: bool = True
    value_statistic: str = "mean"
    properties: list[str] = Field(default_factory=list)


class AppSettings(BaseModel):
    """Main application settings."""

    soilgrids: ProviderConfig


@lru_cache(maxsize=1)
def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_dir = Path(__file__).resolve().parent / "config"

    if not config_dir.exists():
        raise FileNotFoundError(f"Configuration directory not found: {config_dir}")

    return config_dir


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file."""
    config_file = get_config_dir() / filename

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    try:
        with open(config_file, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_file}: {e}") from e

    logger.debug(f"Loaded configuration from {config_file}")
    return data or {}


def _apply_env_overrides(soilgrids: dict[str, Any]) -> dict[str, Any]:
    """Overlay SOILGRIDS_* environment variables on the YAML values."""
    overridden = dict(soilgrids)

    endpoint = os.getenv("SOILGRIDS_ENDPOINT")
    if endpoint:
        overridden["endpoint"] = endpoint

    timeout = os.getenv("SOILGRIDS_TIMEOUT")
    if timeout:
        try:
            overridden["timeout_s"] = float(timeout)
        except ValueError as e:
            raise ValueError(
                f"Invalid SOILGRIDS_TIMEOUT {timeout!r}: expected a number of seconds"
            ) from e

    enabled = os.getenv("SOILGRIDS_ENABLED")
    if enabled is not None and enabled != "":
        overridden["enabled"] = enabled.strip().lower() in _TRUTHY

    return overridden


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Get application settings with environment override support.

    Loads ``.env`` (without overriding variables already set) on first use
    rather than at import time.
    """
    load_dotenv(override=False)

    providers = load_yaml_config("providers.yaml")
    settings = AppSettings(
        soilgrids=ProviderConfig(**_apply_env_overrides(providers["soilgrids"]))
    )
    logger.debug(f"Resolved settings: {settings.model_dump()}")
    return settings


def clear_settings_cache() -> None:
    """Clear settings cache to force reload from current environment."""
    get_settings.cache_clear()
