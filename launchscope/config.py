"""Configuration module for LaunchScope.

Loads environment-backed configuration with defaults suitable for running
against the public SpaceX and NASA services. Uses python-dotenv so a local
`.env` file can supply the NASA API key and tuning knobs.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import os

from dotenv import load_dotenv

# Load environment variables from a `.env` file if present.
load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)


class ConfigError(ValueError):
    """Raised when a setting is outside its accepted range."""


_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def _parse_flag(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(
        f"{name} must be one of {', '.join(_TRUE_VALUES + _FALSE_VALUES)}; got {raw!r}"
    )


def _env_flag(name: str, default: str) -> bool:
    return _parse_flag(name, os.getenv(name, default))


def _env_optional_flag(name: str, default: str) -> Optional[bool]:
    raw = os.getenv(name, default)
    if raw.strip().lower() in ("", "none", "unset"):
        return None
    return _parse_flag(name, raw)


@dataclass(frozen=True)
class Settings:
    """Container for tunable runtime parameters.

    Defaults are read from the environment when the instance is created, so
    tests can patch ``os.environ`` and build a fresh ``Settings()``.
    """

    debug: bool = field(default_factory=lambda: _env_flag("LAUNCHSCOPE_DEBUG", "0"))
    nasa_api_key: str = field(default_factory=lambda: os.getenv("NASA_API_KEY", "DEMO_KEY"))
    timeout_s: float = field(default_factory=lambda: float(os.getenv("LAUNCHSCOPE_TIMEOUT", "30")))
    max_retries: int = field(default_factory=lambda: int(os.getenv("LAUNCHSCOPE_RETRIES", "5")))
    base_delay_s: float = field(default_factory=lambda: float(os.getenv("LAUNCHSCOPE_BASE_DELAY", "0.2")))
    max_delay_s: float = field(default_factory=lambda: float(os.getenv("LAUNCHSCOPE_MAX_DELAY", "5")))
    spacex_api_root: str = field(default_factory=lambda: os.getenv("SPACEX_API_ROOT", "https://api.spacexdata.com"))
    eonet_api_root: str = field(default_factory=lambda: os.getenv("EONET_API_ROOT", "https://eonet.gsfc.nasa.gov"))
    neo_api_root: str = field(default_factory=lambda: os.getenv("NASA_API_ROOT", "https://api.nasa.gov"))
    upcoming_default: Optional[bool] = field(
        default_factory=lambda: _env_optional_flag("LAUNCHSCOPE_UPCOMING_DEFAULT", "0")
    )
    default_limit: int = field(default_factory=lambda: int(os.getenv("LAUNCHSCOPE_LIMIT", "200")))
    cost_workers: int = field(default_factory=lambda: int(os.getenv("LAUNCHSCOPE_COST_WORKERS", "8")))
    command_timeout_s: float = field(
        default_factory=lambda: float(os.getenv("LAUNCHSCOPE_COMMAND_TIMEOUT", "30"))
    )

    def validate(self) -> "Settings":
        if not self.nasa_api_key:
            raise ConfigError("NASA API key is required")
        if self.timeout_s < 1:
            raise ConfigError("timeout must be at least 1 second")
        if not 1 <= self.max_retries <= 10:
            raise ConfigError("retries must be between 1 and 10")
        if self.base_delay_s < 0.1:
            raise ConfigError("base delay must be at least 100ms")
        if self.max_delay_s < 1:
            raise ConfigError("max delay must be at least 1 second")
        if self.cost_workers < 1:
            raise ConfigError("cost workers must be at least 1")
        return self


def get_settings() -> Settings:
    """Factory returning a validated, immutable settings instance."""

    return Settings().validate()
