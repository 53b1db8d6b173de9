"""Test doubles and record factories shared across the suite."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from zyra.core.errors import TriggerError
from zyra.execution import ExecutionHistoryEntry
from zyra.scheduling import WorkflowSchedule


# ── Test doubles ─────────────────────────────────────────────────────────


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2025, 1, 1, 10, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class ManualTimers:
    """Timer registry stand-in that never starts threads.

    ``fire(key)`` behaves like an expiring timer: the entry is removed
    before the callback runs.
    """

    name = "manual"

    def __init__(self) -> None:
        self.armed: dict[str, tuple[float, Callable[[], Any]]] = {}

    def arm(self, key: str, delay_seconds: float, callback: Callable[[], Any]) -> None:
        self.armed[key] = (max(0.0, delay_seconds), callback)

    def cancel(self, key: str) -> bool:
        return self.armed.pop(key, None) is not None

    def cancel_all(self) -> int:
        count = len(self.armed)
        self.armed.clear()
        return count

    def is_armed(self, key: str) -> bool:
        return key in self.armed

    @property
    def active_count(self) -> int:
        return len(self.armed)

    def delay(self, key: str) -> float:
        return self.armed[key][0]

    def fire(self, key: str) -> None:
        _, callback = self.armed.pop(key)
        callback()

    def health(self) -> dict[str, Any]:
        return {"backend": self.name, "active_timers": self.active_count}


class RecordingTrigger:
    """Records fired schedules; optionally fails every call."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.fired: list[WorkflowSchedule] = []

    def trigger(self, schedule: WorkflowSchedule) -> None:
        self.fired.append(schedule)
        if self.fail:
            raise TriggerError("Failed to execute workflow: 503 Service Unavailable")


def make_entry(
    entry_id: str,
    *,
    workflow_id: str = "wf-1",
    workflow_name: str = "Nightly triage",
    project_path: str = "/srv/projects/api",
    status: str = "completed",
    duration: float | None = None,
    **extra: Any,
) -> ExecutionHistoryEntry:
    return ExecutionHistoryEntry(
        id=entry_id,
        workflow_id=workflow_id,
        workflow_name=workflow_name,
        project_path=project_path,
        status=status,
        start_time="2025-01-01T09:00:00.000Z",
        duration=duration,
        **extra,
    )


