"""
Per-alarm preference store

JSON-file backed, validated against ``AlarmPrefsFile`` on load and save, and
guarded by a re-entrant lock so unlock handling and preference edits from
different threads see consistent snapshots.
"""

import json
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from .config import get_prefs_path
from .config_schema import (AlarmPrefs, AlarmPrefsFile, ConfigValidationError,
                            SkipActivationStatus, validate_prefs_dict)

logger = logging.getLogger(__name__)


class AlarmPrefsStore:
    """Maps alarm ids to their snooze/skip preferences."""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else get_prefs_path()
        self._lock = threading.RLock()
        self._alarms: Optional[Dict[str, AlarmPrefs]] = None

    def _load(self) -> Dict[str, AlarmPrefs]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                raw = json.load(f)
            return dict(validate_prefs_dict(raw).alarms)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not read alarm preferences from %s: %s", self.path, e)
        except ConfigValidationError as e:
            logger.error("Alarm preferences in %s are invalid: %s", self.path, e)
        return {}

    def _ensure_loaded(self) -> Dict[str, AlarmPrefs]:
        if self._alarms is None:
            self._alarms = self._load()
        return self._alarms

    def reload(self) -> None:
        """Discard the in-memory copy; the next access re-reads the file."""
        with self._lock:
            self._alarms = None

    def get(self, alarm_id: str) -> Optional[AlarmPrefs]:
        """Preferences for ``alarm_id`` (a copy), or ``None`` if unconfigured."""
        with self._lock:
            prefs = self._ensure_loaded().get(alarm_id)
            return prefs.model_copy() if prefs is not None else None

    def all(self) -> List[AlarmPrefs]:
        with self._lock:
            return [prefs.model_copy() for prefs in self._ensure_loaded().values()]

    def save(self) -> bool:
        """Write the current preferences; False if the file could not be written."""
        with self._lock:
            payload = AlarmPrefsFile(alarms=self._ensure_loaded()).model_dump(mode='json')
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
                with open(tmp_path, 'w', encoding='utf-8') as f:
                    json.dump(payload, f, indent=2)
                tmp_path.replace(self.path)
            except OSError as e:
                logger.error("Could not save alarm preferences to %s: %s", self.path, e)
                return False
            return True

    @contextmanager
    def transaction(self) -> Iterator[Dict[str, AlarmPrefs]]:
        """Mutate preferences under the lock; saved when the block exits cleanly."""
        with self._lock:
            working = {key: prefs.model_copy() for key, prefs in self._ensure_loaded().items()}
            yield working
            self._alarms = dict(validate_prefs_dict(
                {key: prefs.to_dict() for key, prefs in working.items()}
            ).alarms)
            self.save()

    def upsert(self, prefs: AlarmPrefs) -> bool:
        with self.transaction() as alarms:
            alarms[prefs.alarm_id] = prefs.model_copy()
        logger.info("Alarm preferences saved for %s", prefs.alarm_id)
        return True

    def remove(self, alarm_id: str) -> bool:
        """Remove preferences; False if the alarm was not configured."""
        with self.transaction() as alarms:
            removed = alarms.pop(alarm_id, None)
        return removed is not None

    def set_skip_activation_status(self, alarm_id: str, status: SkipActivationStatus) -> bool:
        """Record the user's skip decision; False if the alarm is unconfigured."""
        with self.transaction() as alarms:
            prefs = alarms.get(alarm_id)
            if prefs is None:
                return False
            prefs.skip_activation_status = status
        logger.info("Skip activation status for %s set to %s", alarm_id, status.name)
        return True

    def reset_skip_activation_status(self, alarm_id: str) -> bool:
        return self.set_skip_activation_status(alarm_id, SkipActivationStatus.UNKNOWN)

    def __call__(self, alarm_id: str) -> Optional[AlarmPrefs]:
        return self.get(alarm_id)
