"""
Structured logging for zyra.

structlog renders every record, including the ones uvicorn and httpx emit
through the standard library, so a server process writes one consistent
stream: colored console lines on a terminal, JSON lines elsewhere.

Example:
    >>> configure_logging(level="INFO", json_format=True)
    >>> log = get_logger(__name__)
    >>> with LogContext(schedule_id="schedule-1"):
    ...     log.info("schedule_fired", run_count=3)
    {"schedule_id": "schedule-1", "run_count": 3, "event": "schedule_fired",
     "level": "info", "logger": "zyra.scheduling.service", "timestamp": "..."}
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

# Noisy third-party loggers held at WARNING unless we run at DEBUG
_QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]


def configure_logging(level: str = "INFO", json_format: bool | None = None) -> None:
    """Route structlog and stdlib logging through one stderr handler.

    Args:
        level: Root log level name (DEBUG, INFO, WARNING, ERROR).
        json_format: JSON lines when True, console when False, and JSON
            whenever stderr is not a terminal when None.
    """
    if json_format is None:
        json_format = not sys.stderr.isatty()

    renderer: Processor
    if json_format:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info if json_format else structlog.dev.set_exc_info,
            renderer,
        ],
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level.upper())

    quiet_level = logging.DEBUG if level.upper() == "DEBUG" else logging.WARNING
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)


def get_logger(name: str | None = None) -> Any:
    """Return a structlog logger, usually ``get_logger(__name__)``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


class LogContext:
    """Bind keys to every log line emitted inside a ``with`` block.

    Used per request (``request_id``) and per scheduled run (``schedule_id``).
    """

    def __init__(self, **kwargs: Any):
        self._context = kwargs

    def __enter__(self) -> LogContext:
        bind_context(**self._context)
        return self

    def __exit__(self, *exc_info: Any) -> None:
        unbind_context(*self._context)


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "unbind_context",
    "LogContext",
]
