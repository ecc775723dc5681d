#!/usr/bin/env python3
"""
Next-skippable selection.

At most one skip prompt is shown per unlock, and it must concern the soonest
qualifying alarm: candidates are evaluated in fire-time order and the scan
stops at the first skippable one.
"""

from __future__ import annotations

import datetime
import logging
from typing import Iterable, List, Optional, Tuple
from zoneinfo import ZoneInfo

from ..utils.logger import log_structured, setup_logger
from .lookup import PrefsLookup, resolve_prefs
from .occurrence import AlarmOccurrence
from .skip import is_skippable_for_fire_date
from .time_utils import as_utc, now_local

logger = setup_logger(__name__)


def sort_by_next_fire(
    occurrences: Iterable[AlarmOccurrence],
    now: datetime.datetime,
) -> List[Tuple[datetime.datetime, AlarmOccurrence]]:
    """Pair alarm occurrences with their next fire time, earliest first.

    Non-alarm notifications, snoozed occurrences and occurrences without a
    future fire time are dropped. The sort is stable, so occurrences sharing
    a fire time keep their input order.
    """
    candidates: List[Tuple[datetime.datetime, AlarmOccurrence]] = []
    for occurrence in occurrences:
        if not occurrence.is_alarm or occurrence.is_from_snooze:
            continue
        fire = occurrence.next_occurrence_after(now)
        if fire is None:
            continue
        candidates.append((fire, occurrence))
    candidates.sort(key=lambda pair: as_utc(pair[0]))
    return candidates


def next_skippable(
    occurrences: Iterable[AlarmOccurrence],
    lookup: PrefsLookup,
    now: Optional[datetime.datetime] = None,
    tz: Optional[ZoneInfo] = None,
) -> Optional[AlarmOccurrence]:
    """Return the earliest occurrence the skip prompt may be shown for, if any."""
    now = now or now_local(tz)
    for fire, occurrence in sort_by_next_fire(occurrences, now):
        config = resolve_prefs(lookup, occurrence.alarm_id)
        if is_skippable_for_fire_date(config, fire, now, tz):
            log_structured(
                logger,
                logging.DEBUG,
                "Skip candidate selected",
                alarm_id=occurrence.alarm_id,
                fire_date=fire.isoformat(),
            )
            return occurrence
    logger.debug("No skippable alarm occurrence at %s", now.isoformat())
    return None
