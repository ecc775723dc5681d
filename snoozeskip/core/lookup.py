"""Alarm preference lookup accepted by the engine."""

from __future__ import annotations

from typing import Callable, Mapping, Optional, Union

from ..config_schema import AlarmPrefs

PrefsLookup = Union[Callable[[str], Optional[AlarmPrefs]], Mapping[str, AlarmPrefs]]


def resolve_prefs(lookup: PrefsLookup, alarm_id: Optional[str]) -> Optional[AlarmPrefs]:
    """Fetch preferences for ``alarm_id``; ``None`` when the alarm is unconfigured."""
    if not alarm_id:
        return None
    if isinstance(lookup, Mapping):
        return lookup.get(alarm_id)
    return lookup(alarm_id)
