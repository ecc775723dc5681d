#!/usr/bin/env python3
"""
Recurrence rules for scheduled alarm occurrences.

An occurrence keeps an anchor fire date; the rule decides on which local
calendar days the anchor's wall-clock time repeats.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple
from zoneinfo import ZoneInfo

from .time_utils import as_utc, normalize_local, to_local

# A weekly rule always matches within a week; one extra day covers "today, already passed"
_SEARCH_DAYS = 8


class RecurrenceKind(str, Enum):
    ONCE = "once"
    DAILY = "daily"
    WEEKLY = "weekly"


@dataclass(frozen=True)
class Recurrence:
    """Repeat rule. ``weekdays`` uses 0=Monday … 6=Sunday."""

    kind: RecurrenceKind = RecurrenceKind.ONCE
    weekdays: Tuple[int, ...] = ()

    @classmethod
    def once(cls) -> "Recurrence":
        return cls(RecurrenceKind.ONCE)

    @classmethod
    def daily(cls) -> "Recurrence":
        return cls(RecurrenceKind.DAILY)

    @classmethod
    def weekly(cls, weekdays: Iterable[int]) -> "Recurrence":
        days = tuple(sorted({int(day) for day in weekdays}))
        for day in days:
            if day < 0 or day > 6:
                raise ValueError(f"Invalid weekday value: {day}. Must be 0-6 (0=Monday, 6=Sunday)")
        return cls(RecurrenceKind.WEEKLY, days)

    @classmethod
    def from_value(cls, value: Any) -> "Recurrence":
        """Build a rule from ``None``, a kind name, a weekday list or a dict."""
        if value is None:
            return cls.once()
        if isinstance(value, Recurrence):
            return value
        if isinstance(value, str):
            kind = RecurrenceKind(value.strip().lower())
            if kind is RecurrenceKind.WEEKLY:
                raise ValueError("Weekly recurrence needs weekdays")
            return cls(kind)
        if isinstance(value, (list, tuple)):
            return cls.weekly(value) if value else cls.once()
        if isinstance(value, dict):
            kind = RecurrenceKind(str(value.get("kind", "once")).lower())
            if kind is RecurrenceKind.WEEKLY:
                return cls.weekly(value.get("weekdays") or ())
            return cls(kind)
        raise ValueError(f"Unsupported recurrence value: {value!r}")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind.value}
        if self.kind is RecurrenceKind.WEEKLY:
            data["weekdays"] = list(self.weekdays)
        return data

    def _matches(self, day: datetime.date, anchor_day: datetime.date) -> bool:
        if self.kind is RecurrenceKind.DAILY:
            return True
        weekdays = self.weekdays or (anchor_day.weekday(),)
        return day.weekday() in weekdays

    def next_fire_after(
        self,
        anchor: datetime.datetime,
        instant: datetime.datetime,
        tz: Optional[ZoneInfo] = None,
    ) -> Optional[datetime.datetime]:
        """Return the first fire instant strictly after ``instant``.

        ``None`` when a one-time anchor is not in the future.
        """
        if self.kind is RecurrenceKind.ONCE:
            return anchor if as_utc(anchor) > as_utc(instant) else None

        local_anchor = to_local(anchor, tz)
        zone = local_anchor.tzinfo
        local_instant = to_local(instant, zone)
        wall_time = local_anchor.timetz().replace(tzinfo=None, fold=0)

        after, not_before = as_utc(instant), as_utc(anchor)
        start = max(local_anchor.date(), local_instant.date())
        for offset in range(_SEARCH_DAYS):
            day = start + datetime.timedelta(days=offset)
            if not self._matches(day, local_anchor.date()):
                continue
            candidate = normalize_local(datetime.datetime.combine(day, wall_time, tzinfo=zone), zone)
            fire = as_utc(candidate)
            if fire > after and fire >= not_before:
                return candidate
        return None
