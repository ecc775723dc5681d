#!/usr/bin/env python3
"""
Scheduled alarm occurrences as seen by the decision engine.

The host notification store reports occurrences in one of two shapes: the
legacy "local notification" (fire date plus a user-info payload) and the
newer "notification request" (content plus a calendar trigger). Both are
adapted to the ``AlarmOccurrence`` protocol so the snooze adjuster, the skip
evaluator and the selector are written once.
"""

from __future__ import annotations

import dataclasses
import datetime
from dataclasses import dataclass, field
from typing import (Any, Dict, Iterable, List, Mapping, Optional, Protocol,
                    runtime_checkable)

from ..constants import (ALARM_CATEGORY_IDENTIFIER, ALARM_ID_KEY,
                         SNOOZE_KEY)
from .recurrence import Recurrence


@runtime_checkable
class AlarmOccurrence(Protocol):
    """One upcoming firing of a recurring or one-time notification."""

    @property
    def alarm_id(self) -> Optional[str]: ...

    @property
    def is_alarm(self) -> bool: ...

    @property
    def is_from_snooze(self) -> bool: ...

    @property
    def fire_date(self) -> datetime.datetime: ...

    def next_occurrence_after(self, instant: datetime.datetime) -> Optional[datetime.datetime]: ...

    def with_fire_date(self, fire_date: datetime.datetime) -> "AlarmOccurrence": ...


@runtime_checkable
class OccurrenceSource(Protocol):
    """Host collaborator enumerating the currently scheduled occurrences."""

    def scheduled_occurrences(self) -> Iterable[AlarmOccurrence]: ...


def _parse_datetime(value: Any) -> datetime.datetime:
    if isinstance(value, datetime.datetime):
        return value
    if isinstance(value, str):
        return datetime.datetime.fromisoformat(value)
    raise ValueError(f"Expected an ISO 8601 datetime, got {value!r}")


@dataclass(frozen=True)
class LocalNotificationOccurrence:
    """Legacy notification: the alarm id and snooze flag live in ``user_info``."""

    fire_date: datetime.datetime
    user_info: Mapping[str, Any] = field(default_factory=dict)
    recurrence: Recurrence = field(default_factory=Recurrence.once)

    @property
    def alarm_id(self) -> Optional[str]:
        value = self.user_info.get(ALARM_ID_KEY)
        return str(value) if value else None

    @property
    def is_alarm(self) -> bool:
        return self.alarm_id is not None

    @property
    def is_from_snooze(self) -> bool:
        return bool(self.user_info.get(SNOOZE_KEY, False))

    def next_occurrence_after(self, instant: datetime.datetime) -> Optional[datetime.datetime]:
        return self.recurrence.next_fire_after(self.fire_date, instant)

    def with_fire_date(self, fire_date: datetime.datetime) -> "LocalNotificationOccurrence":
        return dataclasses.replace(self, fire_date=fire_date)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LocalNotificationOccurrence":
        return cls(
            fire_date=_parse_datetime(data["fire_date"]),
            user_info=dict(data.get("user_info") or {}),
            recurrence=Recurrence.from_value(data.get("recurrence")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": "local_notification",
            "fire_date": self.fire_date.isoformat(),
            "user_info": dict(self.user_info),
            "recurrence": self.recurrence.to_dict(),
        }


@dataclass(frozen=True)
class NotificationContent:
    category_identifier: str = ""
    user_info: Mapping[str, Any] = field(default_factory=dict)
    is_from_snooze: bool = False


@dataclass(frozen=True)
class CalendarTrigger:
    trigger_date: datetime.datetime
    recurrence: Recurrence = field(default_factory=Recurrence.once)

    def next_trigger_date_after(self, instant: datetime.datetime) -> Optional[datetime.datetime]:
        return self.recurrence.next_fire_after(self.trigger_date, instant)


@dataclass(frozen=True)
class NotificationRequestOccurrence:
    """Notification request: alarm metadata in ``content``, timing in ``trigger``."""

    identifier: str
    content: NotificationContent
    trigger: CalendarTrigger

    @property
    def alarm_id(self) -> Optional[str]:
        value = self.content.user_info.get(ALARM_ID_KEY)
        if value:
            return str(value)
        return self.identifier if self.is_alarm else None

    @property
    def is_alarm(self) -> bool:
        return self.content.category_identifier == ALARM_CATEGORY_IDENTIFIER

    @property
    def is_from_snooze(self) -> bool:
        return self.content.is_from_snooze

    @property
    def fire_date(self) -> datetime.datetime:
        return self.trigger.trigger_date

    def next_occurrence_after(self, instant: datetime.datetime) -> Optional[datetime.datetime]:
        return self.trigger.next_trigger_date_after(instant)

    def with_fire_date(self, fire_date: datetime.datetime) -> "NotificationRequestOccurrence":
        return dataclasses.replace(self, trigger=dataclasses.replace(self.trigger, trigger_date=fire_date))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NotificationRequestOccurrence":
        content = data.get("content") or {}
        trigger = data.get("trigger") or {}
        return cls(
            identifier=str(data.get("identifier", "")),
            content=NotificationContent(
                category_identifier=str(content.get("category_identifier", "")),
                user_info=dict(content.get("user_info") or {}),
                is_from_snooze=bool(content.get("is_from_snooze", False)),
            ),
            trigger=CalendarTrigger(
                trigger_date=_parse_datetime(trigger["trigger_date"]),
                recurrence=Recurrence.from_value(trigger.get("recurrence")),
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": "notification_request",
            "identifier": self.identifier,
            "content": {
                "category_identifier": self.content.category_identifier,
                "user_info": dict(self.content.user_info),
                "is_from_snooze": self.content.is_from_snooze,
            },
            "trigger": {
                "trigger_date": self.trigger.trigger_date.isoformat(),
                "recurrence": self.trigger.recurrence.to_dict(),
            },
        }


def occurrence_from_dict(data: Mapping[str, Any]) -> AlarmOccurrence:
    """Decode a host snapshot entry; ``kind`` selects the adapter."""
    kind = data.get("kind", "notification_request" if "trigger" in data else "local_notification")
    if kind == "local_notification":
        return LocalNotificationOccurrence.from_dict(data)
    if kind == "notification_request":
        return NotificationRequestOccurrence.from_dict(data)
    raise ValueError(f"Unknown occurrence kind: {kind!r}")


class StaticOccurrenceSource:
    """Occurrence source over an already materialized snapshot."""

    def __init__(self, occurrences: Iterable[AlarmOccurrence] = ()):
        self._occurrences: List[AlarmOccurrence] = list(occurrences)

    @classmethod
    def from_dicts(cls, entries: Iterable[Mapping[str, Any]]) -> "StaticOccurrenceSource":
        return cls(occurrence_from_dict(entry) for entry in entries)

    def scheduled_occurrences(self) -> List[AlarmOccurrence]:
        return list(self._occurrences)
