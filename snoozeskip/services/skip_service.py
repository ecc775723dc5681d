"""
Skip Service - Host-facing coordination of snooze and skip decisions
====================================================================

Fetches a fresh snapshot of occurrences and preferences per call, runs the
decision engine on it and records the user's answers back into the
preference store. Scheduling the adjusted snooze or showing the prompt stays
with the host.
"""

import datetime
from typing import Any, Callable, Dict, List, Optional
from zoneinfo import ZoneInfo

from . import BaseService, ServiceResult
from ..config_schema import SkipActivationStatus
from ..core.occurrence import AlarmOccurrence, OccurrenceSource
from ..core.selector import next_skippable, sort_by_next_fire
from ..core.skip import falls_on_skip_date
from ..core.snooze import adjust_snooze_time
from ..core.time_utils import TimeComponents, now_local
from ..prefs import AlarmPrefsStore


class SkipService(BaseService):
    """Service answering unlock and snooze events for the host."""

    def __init__(
        self,
        source: OccurrenceSource,
        store: AlarmPrefsStore,
        clock: Optional[Callable[[], datetime.datetime]] = None,
        tz: Optional[ZoneInfo] = None,
        default_snooze: Optional[TimeComponents] = None,
    ):
        super().__init__("skip")
        self.source = source
        self.store = store
        self.tz = tz
        self.default_snooze = default_snooze
        self._clock = clock

    def _now(self) -> datetime.datetime:
        return self._clock() if self._clock else now_local(self.tz)

    def on_device_unlock(self) -> ServiceResult:
        """Pick the alarm the skip prompt should ask about, if any."""
        try:
            now = self._now()
            occurrence = next_skippable(self.source.scheduled_occurrences(), self.store.get, now, self.tz)
            if occurrence is None:
                return self._success_result(message="No skippable alarm")

            next_fire = occurrence.next_occurrence_after(now)
            self.logger.info("Skip prompt candidate: %s at %s", occurrence.alarm_id, next_fire)
            return self._success_result(
                data={
                    "alarm_id": occurrence.alarm_id,
                    "next_fire_date": next_fire.isoformat() if next_fire else None,
                    "occurrence": occurrence,
                },
                message="Skippable alarm found",
            )
        except Exception as e:
            return self._handle_error(e, "on_device_unlock")

    def record_skip_decision(self, alarm_id: str, skip: bool) -> ServiceResult:
        """Store the user's answer to the skip prompt for the upcoming occurrence."""
        status = SkipActivationStatus.ACTIVATED if skip else SkipActivationStatus.DEACTIVATED
        return self._set_status(alarm_id, status, "record_skip_decision")

    def reset_skip_decision(self, alarm_id: str) -> ServiceResult:
        """Make the next occurrence eligible for the prompt again (after it fired)."""
        return self._set_status(alarm_id, SkipActivationStatus.UNKNOWN, "reset_skip_decision")

    def _set_status(self, alarm_id: str, status: SkipActivationStatus, operation: str) -> ServiceResult:
        try:
            if not self.store.set_skip_activation_status(alarm_id, status):
                return self._error_result(
                    f"No preferences configured for alarm '{alarm_id}'",
                    error_code="UNKNOWN_ALARM",
                )
            return self._success_result(
                data={"alarm_id": alarm_id, "skip_activation_status": status.name.lower()},
                message="Skip decision saved",
            )
        except Exception as e:
            return self._handle_error(e, operation)

    def snooze(self, occurrence: AlarmOccurrence) -> ServiceResult:
        """Apply the alarm's custom snooze time to a freshly snoozed occurrence."""
        try:
            prefs = self.store.get(occurrence.alarm_id) if occurrence.alarm_id else None
            adjusted = adjust_snooze_time(occurrence, prefs, self.default_snooze)
            return self._success_result(
                data={
                    "alarm_id": occurrence.alarm_id,
                    "fire_date": adjusted.fire_date.isoformat(),
                    "adjusted": prefs is not None,
                    "occurrence": adjusted,
                },
                message="Snooze time adjusted" if prefs is not None else "Default snooze time kept",
            )
        except Exception as e:
            return self._handle_error(e, "snooze")

    def alarms_on_skip_dates(self) -> ServiceResult:
        """List alarms whose next occurrence falls on one of their skip dates."""
        try:
            now = self._now()
            matches: List[Dict[str, Any]] = []
            for fire, occurrence in sort_by_next_fire(self.source.scheduled_occurrences(), now):
                prefs = self.store.get(occurrence.alarm_id) if occurrence.alarm_id else None
                if falls_on_skip_date(occurrence, prefs, now, self.tz):
                    matches.append({"alarm_id": occurrence.alarm_id, "next_fire_date": fire.isoformat()})
            return self._success_result(data=matches, message=f"{len(matches)} alarm(s) on skip dates")
        except Exception as e:
            return self._handle_error(e, "alarms_on_skip_dates")

    def health_check(self) -> ServiceResult:
        """Check that the preference store is readable."""
        try:
            base_health = super().health_check()
            if not base_health.success:
                return base_health

            configured = len(self.store.all())
            return self._success_result(
                data={
                    "service": "skip",
                    "status": "healthy",
                    "configured_alarms": configured,
                    "prefs_file": str(self.store.path),
                },
                message="Skip service health check completed",
            )
        except Exception as e:
            return self._handle_error(e, "health_check")
