#!/usr/bin/env python3
"""
Time helpers shared by the snooze adjuster, the skip evaluator and recurrence
resolution.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Optional
from zoneinfo import ZoneInfo

from ..utils.timezone import get_local_timezone


@dataclass(frozen=True)
class TimeComponents:
    """Hours/minutes/seconds duration as configured by the user."""

    hours: int = 0
    minutes: int = 0
    seconds: int = 0

    def __sub__(self, other: "TimeComponents") -> "TimeComponents":
        return TimeComponents(
            self.hours - other.hours,
            self.minutes - other.minutes,
            self.seconds - other.seconds,
        )

    def total_seconds(self) -> int:
        return self.hours * 3600 + self.minutes * 60 + self.seconds

    def to_timedelta(self) -> datetime.timedelta:
        return datetime.timedelta(hours=self.hours, minutes=self.minutes, seconds=self.seconds)


def now_local(tz: Optional[ZoneInfo] = None) -> datetime.datetime:
    """Current instant in ``tz`` (the configured local timezone by default)."""
    return datetime.datetime.now(tz=tz or get_local_timezone())


def to_local(instant: datetime.datetime, tz: Optional[ZoneInfo] = None) -> datetime.datetime:
    """Interpret ``instant`` in the local timezone; naive values are taken as local wall time."""
    tz = tz or get_local_timezone()
    if instant.tzinfo is None:
        return normalize_local(instant.replace(tzinfo=tz), tz)
    return instant.astimezone(tz)


def normalize_local(target: datetime.datetime, tz: ZoneInfo) -> datetime.datetime:
    """Adjust for DST gaps/overlaps by round-tripping through UTC."""
    if target.tzinfo is None:
        target = target.replace(tzinfo=tz)
    roundtrip = target.astimezone(datetime.timezone.utc).astimezone(tz)
    if (
        roundtrip.hour != target.hour
        or roundtrip.minute != target.minute
        or roundtrip.second != target.second
        or roundtrip.fold != target.fold
    ):
        return roundtrip
    return target


def add_components(
    instant: datetime.datetime,
    components: TimeComponents,
    tz: Optional[ZoneInfo] = None,
) -> datetime.datetime:
    """Add ``components`` to ``instant`` using local calendar arithmetic.

    The fields are added to the local wall-clock time (day and month rollover
    handled by the calendar), then the result is resolved against the
    timezone's DST rules. A result inside a spring-forward gap moves past the
    gap; a result inside a fall-back overlap takes the earlier reading unless
    that reading lies before ``instant`` (the start was already in the
    repeated hour), in which case the later one is used.
    """
    local = to_local(instant, tz)
    shifted = local + components.to_timedelta()
    result = normalize_local(shifted.replace(fold=0), local.tzinfo)
    if components.total_seconds() >= 0 and as_utc(result) < as_utc(local):
        result = normalize_local(shifted.replace(fold=1), local.tzinfo)
    return result


def shift_absolute(instant: datetime.datetime, seconds: float) -> datetime.datetime:
    """Shift ``instant`` by elapsed seconds, keeping its timezone."""
    if instant.tzinfo is None:
        return instant + datetime.timedelta(seconds=seconds)
    utc = instant.astimezone(datetime.timezone.utc) + datetime.timedelta(seconds=seconds)
    return utc.astimezone(instant.tzinfo)


def as_utc(instant: datetime.datetime) -> datetime.datetime:
    """UTC view of ``instant`` for ordering; same-zone comparisons ignore DST offsets."""
    if instant.tzinfo is None:
        instant = to_local(instant)
    return instant.astimezone(datetime.timezone.utc)
