"""
SnoozeSkip Version Information
Central version management for the SnoozeSkip project.
"""

from typing import Dict, Optional, Union

# Semantic Versioning: MAJOR.MINOR.PATCH
VERSION = "1.2.0"

VERSION_INFO: Dict[str, Union[int, Optional[str]]] = {
    "major": 1,
    "minor": 2,
    "patch": 0,
    "pre_release": None,  # e.g., "alpha", "beta", "rc1"
}

APP_NAME = "SnoozeSkip"
APP_DESCRIPTION = "Custom snooze offsets and unlock-time skip prompts for recurring alarms"


def get_version() -> str:
    """Get the current version string.

    Returns:
        str: Version string in format MAJOR.MINOR.PATCH
    """
    if VERSION_INFO["pre_release"]:
        return f"{VERSION}-{VERSION_INFO['pre_release']}"
    return VERSION


def get_app_info() -> str:
    """Get application name and version, e.g. "SnoozeSkip v1.2.0"."""
    return f"{APP_NAME} v{get_version()}"
