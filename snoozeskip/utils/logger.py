#!/usr/bin/env python3
"""
Centralized Logging System for SnoozeSkip
Console logging with colors in development, optional rotating file logs and
structured JSON output for hosts that ship logs to an aggregator.
"""

import copy
import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

IS_DEV_MODE = '--dev' in sys.argv or os.getenv('SNOOZESKIP_DEV') == '1'

ENABLE_JSON_LOGS = os.getenv('SNOOZESKIP_JSON_LOGS', '0') == '1'
ENABLE_FILE_LOGGING = os.getenv('SNOOZESKIP_FILE_LOG') == '1'
MAX_LOG_SIZE = 5 * 1024 * 1024
BACKUP_COUNT = 3

_env_level = os.getenv('SNOOZESKIP_LOG_LEVEL')


def _get_app_log_dir() -> Path:
    """Get application log directory path-agnostically"""
    env_log_dir = os.getenv('SNOOZESKIP_LOG_DIR')
    if env_log_dir:
        return Path(env_log_dir)
    return Path.home() / ".snoozeskip" / "logs"


LOG_DIR = _get_app_log_dir()


def _resolve_log_level() -> int:
    """Level from SNOOZESKIP_LOG_LEVEL, then --dev, then the engine settings."""
    if _env_level:
        return getattr(logging, _env_level.upper(), logging.INFO)
    if IS_DEV_MODE:
        return logging.DEBUG
    # Imported here: the config module is loaded through modules that log
    from ..config import load_config
    try:
        settings = load_config()
    except Exception as exc:  # pragma: no cover
        logging.getLogger(__name__).debug("Could not load config for log level: %s", exc)
        return logging.INFO
    if settings.debug:
        return logging.DEBUG
    return getattr(logging, settings.log_level, logging.INFO)

_RECORD_ATTRS = frozenset((
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'message', 'pathname', 'process', 'processName', 'relativeCreated',
    'thread', 'threadName', 'exc_info', 'exc_text', 'stack_info',
    'taskName', 'no_color',
))


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for console output."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m'
    }

    def format(self, record: logging.LogRecord) -> str:
        if getattr(record, 'no_color', False):
            return super().format(record)

        # Other handlers share the record, so color a copy
        colored = copy.copy(record)
        color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        colored.levelname = f"{color}{record.levelname}{self.COLORS['RESET']}"
        return super().format(colored)


class JSONFormatter(logging.Formatter):
    """Structured JSON formatter.

    Example output:
        {"level": "DEBUG", "logger": "snoozeskip.core.selector",
         "message": "Skip candidate selected", "alarm_id": "wake-up",
         "timestamp": "2025-11-04T06:30:00.123000+00:00"}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        if record.levelno >= logging.WARNING:
            log_data['source'] = f"{record.filename}:{record.lineno}"
            log_data['function'] = record.funcName

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        # Extra fields passed via logger.info("msg", extra={...})
        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS:
                continue
            try:
                json.dumps(value)
                log_data[key] = value
            except (TypeError, ValueError):
                log_data[key] = str(value)

        return json.dumps(log_data, ensure_ascii=True, sort_keys=True)


def _plain_formatter() -> logging.Formatter:
    return logging.Formatter(
        '%(asctime)s | %(name)s | %(levelname)s | %(filename)s:%(lineno)d | %(message)s'
    )


def setup_logger(name: str) -> logging.Logger:
    """
    Sets up a logger with appropriate handlers based on environment

    Args:
        name: Logger name (usually module name)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Prevent duplicate handlers if logger already exists
    if logger.handlers:
        return logger

    level = _resolve_log_level()
    logger.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    if ENABLE_JSON_LOGS:
        console_handler.setFormatter(JSONFormatter())
    elif IS_DEV_MODE:
        console_handler.setFormatter(ColoredFormatter('%(levelname)s | %(name)s | %(message)s'))
    else:
        console_handler.setFormatter(logging.Formatter('%(asctime)s | %(levelname)s | %(message)s'))
    logger.addHandler(console_handler)

    if ENABLE_FILE_LOGGING:
        try:
            LOG_DIR.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                LOG_DIR / "snoozeskip.log",
                maxBytes=MAX_LOG_SIZE,
                backupCount=BACKUP_COUNT,
                encoding='utf-8'
            )
        except OSError as exc:
            logger.warning("File logging disabled, %s is not writable: %s", LOG_DIR, exc)
        else:
            file_handler.setLevel(level)
            file_handler.setFormatter(JSONFormatter() if ENABLE_JSON_LOGS else _plain_formatter())
            logger.addHandler(file_handler)

    return logger


def log_structured(logger: logging.Logger, level: int, message: str, **context: Any) -> None:
    """Log a message with structured context fields.

    In JSON mode, context fields appear as separate JSON keys. Otherwise
    they're appended to the message as key=value pairs.

    Example:
        >>> log_structured(logger, logging.DEBUG, "Skip candidate selected",
        ...                alarm_id="wake-up", fire_date="2025-11-04T06:30:00+01:00")
    """
    if not logger.isEnabledFor(level):
        return
    if ENABLE_JSON_LOGS:
        logger.log(level, message, extra=context)
    elif context:
        context_str = " ".join(f"{k}={v}" for k, v in context.items())
        logger.log(level, f"{message} | {context_str}")
    else:
        logger.log(level, message)
