"""Configuration settings for the TAF verification service."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger("tafverify.config")


def _get_bool(env_var: str, default: bool = False) -> bool:
    """Parse an environment variable into a boolean with a default."""

    value = os.getenv(env_var)
    if value is None:
        return default

    return value.lower() in {"1", "true", "yes", "on"}


def _get_int(env_var: str, default: int) -> int:
    """Parse an environment variable into an integer, falling back on bad input."""

    value = os.getenv(env_var)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring non-integer value %r for %s", value, env_var)
        return default


@dataclass
class Settings:
    """Application configuration loaded from environment variables."""

    tafverify_env: str = os.getenv("TAFVERIFY_ENV", "local")
    log_level: str = os.getenv("TAFVERIFY_LOG_LEVEL", "INFO")

    # Optional JSON file extending the built-in station table
    station_registry_path: str | None = os.getenv("TAFVERIFY_STATION_REGISTRY") or None

    # Request limits for the HTTP layer
    max_bulletin_chars: int = _get_int("TAFVERIFY_MAX_BULLETIN_CHARS", 200_000)
    max_reports_per_request: int = _get_int("TAFVERIFY_MAX_REPORTS", 500)

    debug_endpoints: bool = _get_bool("TAFVERIFY_DEBUG_ENDPOINTS", default=False)


settings = Settings()

__all__ = ["settings", "Settings"]
