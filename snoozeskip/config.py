"""
Centralized configuration management for SnoozeSkip
Handles environment-specific settings files and schema validation
"""

import copy
import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .config_schema import (ConfigValidationError, EngineSettings,
                            validate_settings_dict)
from .core.time_utils import TimeComponents

load_dotenv()

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manages settings loading and validation"""

    def __init__(self, base_path: Optional[str] = None):
        env_base = os.getenv("SNOOZESKIP_CONFIG_BASE")
        if base_path:
            self.base_path = Path(base_path)
        elif env_base:
            self.base_path = Path(env_base)
        else:
            self.base_path = Path(__file__).parent.parent
        self.config_dir = self.base_path / "config"
        self.environment = os.getenv("SNOOZESKIP_ENV", "development")
        self._lock = threading.RLock()
        self._cached: Optional[EngineSettings] = None

    def _read_json(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load %s: %s", path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: top-level value is not an object", path)
            return {}
        return data

    def load_config(self, config_name: Optional[str] = None, use_cache: bool = True) -> EngineSettings:
        """
        Load settings based on environment

        Args:
            config_name: Specific config file name (without .json)
                        If None, uses environment-based config
            use_cache: Return the previously loaded settings if available

        Returns:
            Validated settings; defaults if the files are invalid
        """
        with self._lock:
            if use_cache and config_name is None and self._cached is not None:
                return self._cached.model_copy()

            name = config_name or self.environment
            config_file = self.config_dir / f"{name}.json"
            default_config = self._read_json(self.config_dir / "default_config.json")
            env_config = self._read_json(config_file)

            # Environment overrides default
            merged = {**default_config, **env_config, "environment": self.environment}

            settings = self.validate_config(merged)
            settings._runtime = {
                "environment": self.environment,
                "config_file": str(config_file),
                "base_path": str(self.base_path),
            }
            if config_name is None:
                self._cached = settings
            return settings.model_copy()

    def validate_config(self, config: Dict[str, Any]) -> EngineSettings:
        """Validate settings, falling back to defaults when the schema rejects them."""
        try:
            settings = validate_settings_dict(copy.deepcopy(config))
            logger.debug("Configuration validated against schema")
            return settings
        except ConfigValidationError as e:
            logger.error("Configuration schema validation failed: %s", e)
            logger.warning("Falling back to default settings")
            return EngineSettings(environment=self.environment)

    def save_config(self, settings: EngineSettings, config_name: Optional[str] = None) -> bool:
        """
        Save settings to file

        Returns:
            True if saved successfully
        """
        config_file = self.config_dir / f"{config_name or self.environment}.json"
        try:
            config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(config_file, 'w', encoding='utf-8') as f:
                json.dump(settings.to_dict(), f, indent=2)
        except OSError as e:
            logger.error("Could not save %s: %s", config_file, e)
            return False
        self.invalidate()
        return True

    def invalidate(self) -> None:
        """Drop cached settings and everything derived from them."""
        from .utils.timezone import invalidate_timezone_cache

        with self._lock:
            self._cached = None
        invalidate_timezone_cache()

    def resolve_path(self, filename: str) -> Path:
        """Resolve a settings-relative path against the config dir."""
        path = Path(filename).expanduser()
        return path if path.is_absolute() else self.config_dir / path


# Global config manager instance
config_manager = ConfigManager()


def load_config() -> EngineSettings:
    """Load current environment settings."""
    return config_manager.load_config()


def get_default_snooze() -> TimeComponents:
    """Platform default snooze delay already contained in snoozed fire dates."""
    return load_config().default_snooze


def get_prefs_path() -> Path:
    """Location of the per-alarm preference file."""
    return config_manager.resolve_path(load_config().prefs_file)
