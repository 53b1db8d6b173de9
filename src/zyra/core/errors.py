"""
Zyra error hierarchy.

Every error raised on purpose by zyra code derives from :class:`ZyraError`.
Each error carries a category (used for logging and HTTP mapping), a
structured context, and an optional chained cause.

Architecture:
    ::

        ZyraError
        ├── ValidationError      bad input (400)
        ├── NotFoundError        unknown schedule / execution / entry (404)
        ├── ConfigError          unusable setting (unknown timezone)
        ├── OrchestrationError
        │   ├── ScheduleError    cron expression cannot be evaluated
        │   └── TriggerError     trigger endpoint failed
        └── StorageError         JSON store read/write failed (500)

Usage:
    from zyra.core.errors import NotFoundError

    schedule = scheduler.get_schedule(schedule_id)
    if schedule is None:
        raise NotFoundError("Schedule not found").with_context(schedule_id=schedule_id)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    CONFIG = "CONFIG"
    ORCHESTRATION = "ORCHESTRATION"
    NETWORK = "NETWORK"
    STORAGE = "STORAGE"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """Structured metadata attached to an error."""

    workflow_id: str | None = None
    schedule_id: str | None = None
    execution_id: str | None = None
    path: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        result = {
            key: value
            for key, value in (
                ("workflow_id", self.workflow_id),
                ("schedule_id", self.schedule_id),
                ("execution_id", self.execution_id),
                ("path", self.path),
            )
            if value is not None
        }
        if self.metadata:
            result.update(self.metadata)
        return result


class ZyraError(Exception):
    """
    Base exception for all zyra errors.

    Subclasses set ``default_category``; callers may override it per
    instance. ``cause`` is chained as ``__cause__`` so tracebacks keep the
    original exception.

    Examples:
        >>> error = ZyraError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.with_context(schedule_id="schedule-1").context.schedule_id
        'schedule-1'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> ZyraError:
        """Add context to this error (fluent API)."""
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


class ValidationError(ZyraError):
    """Invalid input. Never retryable, the request must be fixed."""

    default_category = ErrorCategory.VALIDATION

    def __init__(self, message: str, *, field: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class NotFoundError(ZyraError):
    """Referenced schedule, execution or history entry does not exist."""

    default_category = ErrorCategory.NOT_FOUND


class ConfigError(ZyraError):
    """Configuration error."""

    default_category = ErrorCategory.CONFIG


class OrchestrationError(ZyraError):
    """Workflow or scheduler error."""

    default_category = ErrorCategory.ORCHESTRATION


class ScheduleError(OrchestrationError):
    """Schedule configuration or cron evaluation error."""

    pass


class TriggerError(OrchestrationError):
    """The execution endpoint rejected or never received a trigger."""

    default_category = ErrorCategory.NETWORK


class StorageError(ZyraError):
    """JSON file store read/write error."""

    default_category = ErrorCategory.STORAGE


__all__ = [
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
]
