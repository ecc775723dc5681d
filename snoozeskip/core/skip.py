#!/usr/bin/env python3
"""
Skip evaluation.

An occurrence is skippable while the user has not yet decided about it and
its next fire time lies inside the window opened by the alarm's skip
threshold: ``now < fire < now + threshold``.
"""

from __future__ import annotations

import datetime
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from ..config_schema import AlarmPrefs, SkipActivationStatus
from .occurrence import AlarmOccurrence
from .time_utils import add_components, as_utc, now_local, to_local


def _skip_gate_open(config: Optional[AlarmPrefs]) -> bool:
    return (
        config is not None
        and config.skip_enabled
        and config.skip_activation_status == SkipActivationStatus.UNKNOWN
    )


def skip_threshold_window(
    config: AlarmPrefs,
    now: Optional[datetime.datetime] = None,
    tz: Optional[ZoneInfo] = None,
) -> Tuple[datetime.datetime, datetime.datetime]:
    """Return ``(now, now + skip threshold)`` using calendar arithmetic."""
    now = now or now_local(tz)
    return now, add_components(now, config.skip_threshold, tz)


def is_skippable_for_fire_date(
    config: Optional[AlarmPrefs],
    next_fire_date: Optional[datetime.datetime],
    now: Optional[datetime.datetime] = None,
    tz: Optional[ZoneInfo] = None,
) -> bool:
    """Skip decision for an already resolved next fire date."""
    if not _skip_gate_open(config) or next_fire_date is None:
        return False
    _, threshold = skip_threshold_window(config, now, tz)
    return as_utc(next_fire_date) < as_utc(threshold)


def is_skippable(
    occurrence: AlarmOccurrence,
    config: Optional[AlarmPrefs],
    now: Optional[datetime.datetime] = None,
    tz: Optional[ZoneInfo] = None,
) -> bool:
    """Whether the skip prompt may be shown for ``occurrence`` right now.

    False for unconfigured alarms, disabled skip, an already recorded
    decision, or an occurrence with no future fire time. An occurrence
    exactly at the threshold is not yet skippable.
    """
    if not _skip_gate_open(config):
        return False
    now = now or now_local(tz)
    return is_skippable_for_fire_date(config, occurrence.next_occurrence_after(now), now, tz)


def falls_on_skip_date(
    occurrence: AlarmOccurrence,
    config: Optional[AlarmPrefs],
    now: Optional[datetime.datetime] = None,
    tz: Optional[ZoneInfo] = None,
) -> bool:
    """Whether the next occurrence lands on one of the alarm's skip dates."""
    if config is None or not config.skip_dates:
        return False
    now = now or now_local(tz)
    fire = occurrence.next_occurrence_after(now)
    if fire is None:
        return False
    return to_local(fire, tz).date() in config.skip_dates
