"""
Pydantic models for SnoozeSkip configuration validation

This module provides type-safe schemas for the engine settings and for the
per-alarm preference file, preventing runtime errors from malformed files.
The decision engine itself assumes well-formed values; everything that is
persisted passes through these models first.
"""

import datetime
from enum import IntEnum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .constants import (DEFAULT_SKIP_HOUR, DEFAULT_SKIP_MINUTE,
                        DEFAULT_SKIP_SECOND, DEFAULT_SNOOZE_HOUR,
                        DEFAULT_SNOOZE_MINUTE, DEFAULT_SNOOZE_SECOND,
                        FALLBACK_TIMEZONE)
from .core.time_utils import TimeComponents


class ConfigValidationError(ValueError):
    """Raised when a settings or preference payload does not match its schema."""


class SkipActivationStatus(IntEnum):
    """Whether the user already decided about skipping the upcoming occurrence."""

    UNKNOWN = 0
    ACTIVATED = 1
    DEACTIVATED = 2


class AlarmPrefs(BaseModel):
    """Per-alarm snooze and skip preferences."""

    alarm_id: str = Field(min_length=1, description="Stable alarm identifier")

    snooze_hour: int = Field(default=DEFAULT_SNOOZE_HOUR, ge=0, le=23)
    snooze_minute: int = Field(default=DEFAULT_SNOOZE_MINUTE, ge=0, le=59)
    snooze_second: int = Field(default=DEFAULT_SNOOZE_SECOND, ge=0, le=59)

    skip_enabled: bool = Field(default=False, description="Whether the skip prompt is offered")
    skip_activation_status: SkipActivationStatus = Field(
        default=SkipActivationStatus.UNKNOWN,
        description="Decision recorded for the upcoming occurrence",
    )
    skip_hour: int = Field(default=DEFAULT_SKIP_HOUR, ge=0, le=23)
    skip_minute: int = Field(default=DEFAULT_SKIP_MINUTE, ge=0, le=59)
    skip_second: int = Field(default=DEFAULT_SKIP_SECOND, ge=0, le=59)

    skip_dates: List[datetime.date] = Field(
        default_factory=list,
        description="Calendar dates on which the alarm is skipped automatically",
    )

    model_config = {
        "str_strip_whitespace": True,
        "validate_assignment": True,
    }

    @field_validator('skip_dates')
    @classmethod
    def validate_skip_dates(cls, v: List[datetime.date]) -> List[datetime.date]:
        """Remove duplicates and sort."""
        return sorted(set(v))

    @property
    def snooze_offset(self) -> TimeComponents:
        return TimeComponents(self.snooze_hour, self.snooze_minute, self.snooze_second)

    @property
    def skip_threshold(self) -> TimeComponents:
        return TimeComponents(self.skip_hour, self.skip_minute, self.skip_second)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode='json')


class AlarmPrefsFile(BaseModel):
    """On-disk layout of the preference file."""

    alarms: Dict[str, AlarmPrefs] = Field(default_factory=dict)

    @field_validator('alarms')
    @classmethod
    def validate_alarm_keys(cls, v: Dict[str, AlarmPrefs]) -> Dict[str, AlarmPrefs]:
        """Keys must match the alarm id stored in each entry."""
        for key, prefs in v.items():
            if key != prefs.alarm_id:
                raise ValueError(f"Alarm key '{key}' does not match alarm_id '{prefs.alarm_id}'")
        return v


class EngineSettings(BaseModel):
    """Complete SnoozeSkip engine settings.

    Example:
        >>> settings = EngineSettings(**json.load(open("config/production.json")))
        >>> settings.default_snooze
        TimeComponents(hours=0, minutes=9, seconds=0)
    """

    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=False, description="Enable debug logging of engine decisions")
    log_level: str = Field(default="INFO", pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    timezone: str = Field(default=FALLBACK_TIMEZONE, description="Timezone for calendar arithmetic")

    default_snooze_hour: int = Field(default=DEFAULT_SNOOZE_HOUR, ge=0, le=23)
    default_snooze_minute: int = Field(default=DEFAULT_SNOOZE_MINUTE, ge=0, le=59)
    default_snooze_second: int = Field(default=DEFAULT_SNOOZE_SECOND, ge=0, le=59)

    prefs_file: str = Field(default="alarm_prefs.json", description="Preference file, relative to the config dir")

    # Runtime metadata (not saved to file)
    _runtime: Optional[Dict[str, Any]] = None

    model_config = {
        "extra": "allow",  # Allow extra fields for forward compatibility
        "str_strip_whitespace": True,
    }

    @field_validator('timezone')
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate timezone string."""
        try:
            ZoneInfo(v)
            return v
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Invalid timezone: {v}. Must be a valid IANA timezone (e.g., 'Europe/Vienna')")

    @property
    def default_snooze(self) -> TimeComponents:
        return TimeComponents(
            self.default_snooze_hour,
            self.default_snooze_minute,
            self.default_snooze_second,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, excluding private fields."""
        return self.model_dump(exclude={'_runtime'}, mode='json')


def validate_settings_dict(config_dict: Dict[str, Any]) -> EngineSettings:
    """Validate a settings dictionary against the schema.

    Raises:
        ConfigValidationError: If settings are invalid, with pydantic's messages
    """
    try:
        return EngineSettings(**config_dict)
    except ValidationError as e:
        raise ConfigValidationError(f"Settings validation failed: {e}") from e


def validate_prefs_dict(prefs_dict: Dict[str, Any]) -> AlarmPrefsFile:
    """Validate a raw preference file payload.

    Accepts both ``{"alarms": {...}}`` and the legacy flat ``{alarm_id: {...}}``
    layout; entries without an ``alarm_id`` inherit their key.
    """
    raw_alarms = prefs_dict.get("alarms", prefs_dict) if isinstance(prefs_dict, dict) else prefs_dict
    if not isinstance(raw_alarms, dict):
        raise ConfigValidationError("Preference payload must be a mapping of alarm ids")

    alarms: Dict[str, Any] = {}
    for key, entry in raw_alarms.items():
        if isinstance(entry, dict) and "alarm_id" not in entry:
            entry = {**entry, "alarm_id": key}
        alarms[key] = entry

    try:
        return AlarmPrefsFile(alarms=alarms)
    except ValidationError as e:
        raise ConfigValidationError(f"Alarm preference validation failed: {e}") from e
