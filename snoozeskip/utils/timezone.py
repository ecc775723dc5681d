#!/usr/bin/env python3
"""Centralised timezone utilities."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..constants import FALLBACK_TIMEZONE

_LOGGER = logging.getLogger("timezone")


def _resolve_timezone_name() -> str:
    env_tz = os.getenv("SNOOZESKIP_TIMEZONE")
    if env_tz and env_tz.strip():
        return env_tz.strip()
    # Imported here: the config module depends on the schema, which depends on us
    from ..config import load_config
    try:
        settings = load_config()
    except Exception as exc:  # pragma: no cover
        _LOGGER.debug("Could not load config for timezone resolution: %s", exc)
        return FALLBACK_TIMEZONE
    return settings.timezone or FALLBACK_TIMEZONE


@lru_cache(maxsize=1)
def get_timezone_name() -> str:
    """Return the configured timezone name with caching."""
    return _resolve_timezone_name()


@lru_cache(maxsize=8)
def _zoneinfo_cached(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def get_local_timezone() -> ZoneInfo:
    """Return a ZoneInfo instance based on configuration/env settings."""
    tz_name = get_timezone_name()
    try:
        return _zoneinfo_cached(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        _LOGGER.warning(
            "Unknown timezone '%s' - falling back to '%s'",
            tz_name,
            FALLBACK_TIMEZONE,
        )
        try:
            return _zoneinfo_cached(FALLBACK_TIMEZONE)
        except ZoneInfoNotFoundError as exc:  # pragma: no cover
            raise RuntimeError("Fallback timezone is unavailable on this system") from exc


def invalidate_timezone_cache() -> None:
    """Clear cached timezone information (called on config change)."""
    get_timezone_name.cache_clear()
