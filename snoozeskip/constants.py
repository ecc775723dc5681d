"""Central constants for SnoozeSkip.

Only put small, stable primitives here – avoid runtime/config dependent values.
"""

# Platform default snooze delay; fire dates of snoozed alarms already include it
DEFAULT_SNOOZE_HOUR: int = 0
DEFAULT_SNOOZE_MINUTE: int = 9
DEFAULT_SNOOZE_SECOND: int = 0

# How far ahead of the fire time the skip prompt opens by default
DEFAULT_SKIP_HOUR: int = 0
DEFAULT_SKIP_MINUTE: int = 30
DEFAULT_SKIP_SECOND: int = 0

# Keys used by the legacy notification payload (user info dictionary)
ALARM_ID_KEY = "alarmId"
SNOOZE_KEY = "isSnooze"

# Category identifier carried by alarm notification requests
ALARM_CATEGORY_IDENTIFIER = "Alarm"

FALLBACK_TIMEZONE = "Europe/Vienna"
