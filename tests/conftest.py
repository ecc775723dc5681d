"""Shared pytest fixtures for the SnoozeSkip test suite."""

from __future__ import annotations

import datetime
import os
from typing import Any, Callable, Dict, Optional
from zoneinfo import ZoneInfo

import pytest

os.environ.setdefault("SNOOZESKIP_TIMEZONE", "Europe/Vienna")

from snoozeskip.config_schema import AlarmPrefs  # noqa: E402
from snoozeskip.constants import ALARM_CATEGORY_IDENTIFIER, ALARM_ID_KEY, SNOOZE_KEY  # noqa: E402
from snoozeskip.core.occurrence import (CalendarTrigger,  # noqa: E402
                                        LocalNotificationOccurrence,
                                        NotificationContent,
                                        NotificationRequestOccurrence)
from snoozeskip.core.recurrence import Recurrence  # noqa: E402
from snoozeskip.core.time_utils import TimeComponents  # noqa: E402
from snoozeskip.utils.timezone import invalidate_timezone_cache  # noqa: E402

TZ = ZoneInfo("Europe/Vienna")
DEFAULT_SNOOZE = TimeComponents(0, 9, 0)


@pytest.fixture(autouse=True)
def local_timezone(monkeypatch) -> ZoneInfo:
    """Pin the engine's local timezone for every test."""
    monkeypatch.setenv("SNOOZESKIP_TIMEZONE", "Europe/Vienna")
    invalidate_timezone_cache()
    yield TZ
    invalidate_timezone_cache()


@pytest.fixture
def at() -> Callable[..., datetime.datetime]:
    """Build a Vienna-local datetime: ``at(2025, 1, 6, 8, 0)``."""
    def _at(year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0) -> datetime.datetime:
        return datetime.datetime(year, month, day, hour, minute, second, tzinfo=TZ)
    return _at


@pytest.fixture
def make_prefs() -> Callable[..., AlarmPrefs]:
    """Skip-enabled preferences with a 30 minute threshold unless overridden."""
    def _make(alarm_id: str = "wake-up", **overrides: Any) -> AlarmPrefs:
        values: Dict[str, Any] = {
            "alarm_id": alarm_id,
            "skip_enabled": True,
            "skip_hour": 0,
            "skip_minute": 30,
            "skip_second": 0,
        }
        values.update(overrides)
        return AlarmPrefs(**values)
    return _make


@pytest.fixture
def local_notification() -> Callable[..., LocalNotificationOccurrence]:
    def _make(
        alarm_id: Optional[str],
        fire_date: datetime.datetime,
        recurrence: Recurrence = Recurrence.daily(),
        snoozed: bool = False,
    ) -> LocalNotificationOccurrence:
        user_info: Dict[str, Any] = {SNOOZE_KEY: snoozed}
        if alarm_id is not None:
            user_info[ALARM_ID_KEY] = alarm_id
        return LocalNotificationOccurrence(fire_date=fire_date, user_info=user_info, recurrence=recurrence)
    return _make


@pytest.fixture
def notification_request() -> Callable[..., NotificationRequestOccurrence]:
    def _make(
        alarm_id: str,
        trigger_date: datetime.datetime,
        recurrence: Recurrence = Recurrence.daily(),
        snoozed: bool = False,
        category: str = ALARM_CATEGORY_IDENTIFIER,
    ) -> NotificationRequestOccurrence:
        return NotificationRequestOccurrence(
            identifier=f"request-{alarm_id}",
            content=NotificationContent(
                category_identifier=category,
                user_info={ALARM_ID_KEY: alarm_id},
                is_from_snooze=snoozed,
            ),
            trigger=CalendarTrigger(trigger_date=trigger_date, recurrence=recurrence),
        )
    return _make
