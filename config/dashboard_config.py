"""
Dashboard configuration.
Centralized configuration to allow easy changes for Docker/deployment.
"""
import logging
import os
from datetime import datetime, timezone
from typing import List, Optional

logger = logging.getLogger(__name__)


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid value %r for %s, using default %d", raw, name, default)
        return default


def _list_from_env(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


class DashboardConfig:
    """Dashboard configuration class with environment variable support."""

    SEASON_YEAR: Optional[int] = _int_from_env("SEASON_YEAR", 0) or None
    CACHE_TTL_SECONDS: int = _int_from_env("CACHE_TTL_SECONDS", 5 * 60)
    REFRESH_INTERVAL_SECONDS: int = _int_from_env("REFRESH_INTERVAL_SECONDS", 5 * 60)
    HTTP_TIMEOUT_SECONDS: int = _int_from_env("HTTP_TIMEOUT_SECONDS", 10)
    CORS_ORIGINS: List[str] = _list_from_env("CORS_ORIGINS", "*")

    @classmethod
    def get_season(cls) -> int:
        """
        Get the season to display.
        Falls back to the current calendar year when SEASON_YEAR is not set.
        """
        if cls.SEASON_YEAR:
            return cls.SEASON_YEAR
        return datetime.now(timezone.utc).year
