#!/usr/bin/env python3
"""
SnoozeSkip Runner - evaluates a host schedule snapshot from the command line
"""

import argparse
import datetime
import json
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from snoozeskip import get_app_info  # noqa: E402
from snoozeskip.core.occurrence import (StaticOccurrenceSource,  # noqa: E402
                                        occurrence_from_dict)
from snoozeskip.prefs import AlarmPrefsStore  # noqa: E402
from snoozeskip.services.skip_service import SkipService  # noqa: E402
from snoozeskip.utils.logger import setup_logger  # noqa: E402
from snoozeskip.utils.timezone import get_local_timezone  # noqa: E402


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Evaluate snooze and skip decisions for scheduled alarms")
    parser.add_argument("--version", action="version", version=get_app_info())
    parser.add_argument(
        "command",
        choices=["next-skippable", "snooze", "skip-dates"],
        help="Decision to compute",
    )
    parser.add_argument("--schedule", required=True, type=Path, help="JSON list of scheduled occurrences")
    parser.add_argument("--prefs", type=Path, help="Alarm preference file (defaults to the configured one)")
    parser.add_argument("--now", help="ISO 8601 instant to evaluate at (defaults to the current time)")
    parser.add_argument("--index", type=int, default=0, help="Occurrence to snooze (position in the schedule)")
    return parser.parse_args()


def _printable(data):
    if isinstance(data, dict):
        return {k: _printable(v) for k, v in data.items()}
    if isinstance(data, list):
        return [_printable(v) for v in data]
    if hasattr(data, "to_dict"):
        return data.to_dict()
    return data


def main() -> int:
    args = _parse_args()
    logger = setup_logger("runner")

    try:
        with open(args.schedule, 'r', encoding='utf-8') as f:
            entries = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Could not read schedule %s: %s", args.schedule, e)
        return 1

    tz = get_local_timezone()
    clock = None
    if args.now:
        try:
            fixed_now = datetime.datetime.fromisoformat(args.now)
        except ValueError as e:
            logger.error("Invalid --now value %r: %s", args.now, e)
            return 1
        if fixed_now.tzinfo is None:
            fixed_now = fixed_now.replace(tzinfo=tz)
        clock = lambda: fixed_now  # noqa: E731

    try:
        source = StaticOccurrenceSource(occurrence_from_dict(entry) for entry in entries)
    except (KeyError, ValueError) as e:
        logger.error("Invalid schedule entry: %s", e)
        return 1

    service = SkipService(source, AlarmPrefsStore(args.prefs), clock=clock, tz=tz)
    service.initialize()

    if args.command == "next-skippable":
        result = service.on_device_unlock()
    elif args.command == "skip-dates":
        result = service.alarms_on_skip_dates()
    else:
        occurrences = source.scheduled_occurrences()
        if not 0 <= args.index < len(occurrences):
            logger.error("No occurrence at index %d", args.index)
            return 1
        result = service.snooze(occurrences[args.index])

    print(json.dumps(_printable(result.to_dict()), indent=2))
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
