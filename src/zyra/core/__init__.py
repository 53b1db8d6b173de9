"""Shared platform primitives: settings, logging, errors, file store, timestamps."""

from __future__ import annotations

from .errors import (
    ConfigError,
    ErrorCategory,
    ErrorContext,
    NotFoundError,
    OrchestrationError,
    ScheduleError,
    StorageError,
    TriggerError,
    ValidationError,
    ZyraError,
)
from .json_store import JsonFileStore
from .logging import LogContext, configure_logging, get_logger
from .settings import ZyraSettings, get_settings
from .timestamps import from_iso8601, to_iso8601, utc_now

__all__ = [
    # Errors
    "ErrorCategory",
    "ErrorContext",
    "ZyraError",
    "ValidationError",
    "NotFoundError",
    "ConfigError",
    "OrchestrationError",
    "ScheduleError",
    "TriggerError",
    "StorageError",
    # Storage
    "JsonFileStore",
    # Logging
    "configure_logging",
    "get_logger",
    "LogContext",
    # Settings
    "ZyraSettings",
    "get_settings",
    # Timestamps
    "utc_now",
    "to_iso8601",
    "from_iso8601",
]
