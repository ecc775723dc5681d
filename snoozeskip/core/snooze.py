#!/usr/bin/env python3
"""
Snooze adjustment.

The host schedules a snoozed alarm with the platform default delay already
added to its fire date. Replacing that default with the user's own snooze
time is therefore a plain shift by the difference of the two.
"""

from __future__ import annotations

import datetime
import logging
from typing import Optional, TypeVar

from ..config import get_default_snooze
from ..config_schema import AlarmPrefs
from ..utils.logger import log_structured, setup_logger
from .lookup import PrefsLookup, resolve_prefs
from .occurrence import AlarmOccurrence
from .time_utils import TimeComponents, shift_absolute

logger = setup_logger(__name__)

O = TypeVar("O", bound=AlarmOccurrence)


def snooze_delta_seconds(config: AlarmPrefs, default_snooze: Optional[TimeComponents] = None) -> int:
    """Signed seconds between the configured snooze time and the platform default."""
    if default_snooze is None:
        default_snooze = get_default_snooze()
    return (config.snooze_offset - default_snooze).total_seconds()


def adjust_snooze_time(
    occurrence: O,
    config: Optional[AlarmPrefs],
    default_snooze: Optional[TimeComponents] = None,
) -> O:
    """Return ``occurrence`` with its fire date moved to the configured snooze time.

    Unconfigured alarms are returned unchanged. Negative deltas (a shorter
    snooze than the default) are applied as-is.
    """
    if config is None:
        return occurrence

    delta = snooze_delta_seconds(config, default_snooze)
    adjusted = occurrence.with_fire_date(shift_absolute(occurrence.fire_date, delta))
    log_structured(
        logger,
        logging.DEBUG,
        "Snooze fire date adjusted",
        alarm_id=config.alarm_id,
        delta_seconds=delta,
        fire_date=adjusted.fire_date.isoformat(),
    )
    return adjusted


def modified_snooze_date(
    alarm_id: str,
    original_date: datetime.datetime,
    lookup: PrefsLookup,
    default_snooze: Optional[TimeComponents] = None,
) -> Optional[datetime.datetime]:
    """Snooze fire date for ``alarm_id``, or ``None`` when the alarm has no preferences."""
    config = resolve_prefs(lookup, alarm_id)
    if config is None:
        return None
    return shift_absolute(original_date, snooze_delta_seconds(config, default_snooze))
