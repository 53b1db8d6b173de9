"""Workflow scheduler service - main orchestrator.

Combines the schedule set (repository), one timer per schedule (timer
registry) and the execution trigger into a single service.

┌──────────────────────────────────────────────────────────────────────────────┐
│  WORKFLOW SCHEDULER                                                           │
│                                                                               │
│   create / update / delete ──► nextRun recomputed ──► save ──► _arm()         │
│                                                                               │
│   _arm(schedule)                                                              │
│      delay = nextRun - now   (≤ 0 fires immediately)                          │
│      timers.arm(id, delay, _fire)                                             │
│                                                                               │
│   _fire(id)                                                                   │
│      ├── lastRun = now, runCount += 1                                         │
│      ├── nextRun = calculate_next_run()                                       │
│      ├── once → enabled = False                                               │
│      ├── save()                                                               │
│      ├── trigger.trigger(schedule)   (failure logged, run still counted)      │
│      └── enabled and nextRun → _arm()                                         │
│                                                                               │
│   initialize_schedules()   recompute nextRun of every enabled schedule and    │
│                            arm it; runs missed while down are not backfilled  │
│   shutdown()               cancel every timer                                 │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from zyra.core.errors import ConfigError, TriggerError
from zyra.core.logging import LogContext, get_logger
from zyra.core.timestamps import epoch_ms, from_iso8601, random_suffix, to_iso8601, utc_now

from .models import ScheduleSpec, ScheduleUpdate, WorkflowSchedule
from .next_run import calculate_next_cron_run, calculate_next_run
from .repository import ScheduleRepository
from .timers import TimerRegistry
from .trigger import WorkflowTrigger

logger = get_logger(__name__)


@dataclass
class SchedulerStats:
    """Statistics for the scheduler service."""

    fired: int = 0
    trigger_failures: int = 0
    last_fire: datetime | None = None
    last_error: str | None = None


@dataclass
class SchedulerHealth:
    """Health status for the scheduler service."""

    healthy: bool
    schedules_total: int = 0
    schedules_enabled: int = 0
    timers: dict[str, Any] = field(default_factory=dict)
    stats: SchedulerStats = field(default_factory=SchedulerStats)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "healthy": self.healthy,
            "schedules_total": self.schedules_total,
            "schedules_enabled": self.schedules_enabled,
            "timers": self.timers,
            "stats": {
                "fired": self.stats.fired,
                "trigger_failures": self.stats.trigger_failures,
                "last_fire": to_iso8601(self.stats.last_fire),
                "last_error": self.stats.last_error,
            },
        }


class WorkflowScheduler:
    """Decides when each workflow should next run and triggers it.

    Example:
        >>> scheduler = WorkflowScheduler(
        ...     repository=ScheduleRepository("data/workflow-schedules.json"),
        ...     trigger=HttpWorkflowTrigger("http://localhost:3000/api/background-executions"),
        ... )
        >>> scheduler.initialize_schedules()
        >>> schedule = scheduler.create_schedule(
        ...     "wf-1", "Nightly triage", "/srv/projects/api",
        ...     ScheduleSpec(type="cron", cron="0 9 * * *"),
        ... )
        >>> # Later...
        >>> scheduler.shutdown()
    """

    def __init__(
        self,
        repository: ScheduleRepository,
        trigger: WorkflowTrigger,
        *,
        timers: TimerRegistry | None = None,
        timezone: str = "UTC",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the scheduler and load the persisted schedule set.

        Args:
            repository: Schedule persistence
            trigger: Starts an execution when a schedule fires
            timers: Timer registry (one timer per schedule)
            timezone: IANA zone for cron hour/minute and day arithmetic
            clock: Returns the current aware datetime (overridable in tests)

        Raises:
            ConfigError: ``timezone`` is not a known IANA zone.
        """
        self.repository = repository
        self.trigger = trigger
        self.timers = timers or TimerRegistry()
        try:
            self.tz = ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigError(f"Unknown timezone: {timezone}", cause=e) from e
        self._clock = clock
        self._lock = threading.RLock()
        self._stats = SchedulerStats()
        self._schedules: dict[str, WorkflowSchedule] = repository.load()

    # === Next-run computation ===

    def calculate_next_run(
        self, schedule: WorkflowSchedule, now: datetime | None = None
    ) -> datetime | None:
        """Next fire time of ``schedule`` (``None`` means it never fires)."""
        return calculate_next_run(schedule, now or self._clock(), tz=self.tz)

    def calculate_next_cron_run(self, cron_expression: str, from_: datetime) -> datetime | None:
        """Next fire time of a cron expression; minute/hour fields only."""
        return calculate_next_cron_run(cron_expression, from_.astimezone(self.tz))

    # === CRUD ===

    def create_schedule(
        self,
        workflow_id: str,
        workflow_name: str,
        project_path: str,
        schedule_spec: ScheduleSpec,
    ) -> WorkflowSchedule:
        """Create, persist and arm a new enabled schedule."""
        now = self._clock()
        now_iso = to_iso8601(now)
        schedule = WorkflowSchedule(
            id=f"schedule-{epoch_ms()}-{random_suffix(6)}",
            workflow_id=workflow_id,
            workflow_name=workflow_name,
            project_path=project_path,
            enabled=True,
            schedule=schedule_spec,
            run_count=0,
            created_at=now_iso,
            updated_at=now_iso,
        )
        schedule.next_run = to_iso8601(self.calculate_next_run(schedule, now))

        with self._lock:
            self._schedules[schedule.id] = schedule
            self._save()
            self._arm(schedule)

        logger.info(
            "schedule_created",
            schedule_id=schedule.id,
            workflow_id=workflow_id,
            schedule_type=schedule_spec.type,
            next_run=schedule.next_run,
        )
        return schedule.model_copy(deep=True)

    def update_schedule(
        self, schedule_id: str, updates: ScheduleUpdate
    ) -> WorkflowSchedule | None:
        """Apply a partial update; returns ``None`` for unknown ids.

        ``nextRun`` is recomputed only when the schedule spec changed.
        """
        with self._lock:
            current = self._schedules.get(schedule_id)
            if current is None:
                return None

            self.timers.cancel(schedule_id)

            changes = {name: getattr(updates, name) for name in updates.model_fields_set}
            updated = current.model_copy(update=changes, deep=True)
            updated.updated_at = to_iso8601(self._clock())

            if "schedule" in changes:
                updated.next_run = to_iso8601(self.calculate_next_run(updated))

            self._schedules[schedule_id] = updated
            self._save()

            if updated.enabled:
                self._arm(updated)

        logger.info(
            "schedule_updated",
            schedule_id=schedule_id,
            fields=sorted(changes),
            enabled=updated.enabled,
            next_run=updated.next_run,
        )
        return updated.model_copy(deep=True)

    def delete_schedule(self, schedule_id: str) -> bool:
        """Remove a schedule and its timer. Returns False for unknown ids."""
        with self._lock:
            self.timers.cancel(schedule_id)
            deleted = self._schedules.pop(schedule_id, None) is not None
            if deleted:
                self._save()

        if deleted:
            logger.info("schedule_deleted", schedule_id=schedule_id)
        return deleted

    def get_schedule(self, schedule_id: str) -> WorkflowSchedule | None:
        with self._lock:
            schedule = self._schedules.get(schedule_id)
            return schedule.model_copy(deep=True) if schedule else None

    def get_all_schedules(self) -> list[WorkflowSchedule]:
        with self._lock:
            return [s.model_copy(deep=True) for s in self._schedules.values()]

    def get_schedules_for_workflow(
        self, workflow_id: str, project_path: str
    ) -> list[WorkflowSchedule]:
        with self._lock:
            return [
                s.model_copy(deep=True)
                for s in self._schedules.values()
                if s.workflow_id == workflow_id and s.project_path == project_path
            ]

    # === Lifecycle ===

    def initialize_schedules(self) -> None:
        """Recompute and arm every enabled schedule (called at startup)."""
        logger.info("scheduler_initializing", path=str(self.repository.path))
        with self._lock:
            for schedule in self._schedules.values():
                if not schedule.enabled:
                    continue
                next_run = self.calculate_next_run(schedule)
                if next_run is not None:
                    schedule.next_run = to_iso8601(next_run)
                    self._arm(schedule)
            self._save()
        logger.info(
            "scheduler_initialized",
            schedules=len(self._schedules),
            armed=self.timers.active_count,
        )

    def shutdown(self) -> None:
        """Cancel every pending timer."""
        cancelled = self.timers.cancel_all()
        logger.info("scheduler_shutdown", cancelled_timers=cancelled)

    # === Firing ===

    def _arm(self, schedule: WorkflowSchedule) -> None:
        """Arm the timer for ``schedule`` (caller holds the lock)."""
        if not schedule.enabled or not schedule.next_run:
            return

        delay = (from_iso8601(schedule.next_run) - self._clock()).total_seconds()
        self.timers.arm(schedule.id, delay, lambda: self._fire(schedule.id))
        logger.debug("schedule_armed", schedule_id=schedule.id, delay_seconds=max(delay, 0.0))

    def _fire(self, schedule_id: str) -> None:
        """Run one scheduled execution of ``schedule_id``."""
        with self._lock:
            schedule = self._schedules.get(schedule_id)
            # a callback can outlive a delete or disable that raced it for the lock
            if schedule is None or not schedule.enabled:
                return

            now = self._clock()
            schedule.last_run = to_iso8601(now)
            schedule.run_count += 1
            schedule.next_run = to_iso8601(self.calculate_next_run(schedule, now))
            if schedule.schedule.type == "once":
                schedule.enabled = False

            self._save()
            self._stats.fired += 1
            self._stats.last_fire = now
            snapshot = schedule.model_copy(deep=True)

        with LogContext(schedule_id=schedule_id, workflow_id=snapshot.workflow_id):
            logger.info(
                "schedule_fired",
                workflow_name=snapshot.workflow_name,
                run_count=snapshot.run_count,
                next_run=snapshot.next_run,
            )
            try:
                self.trigger.trigger(snapshot)
            except TriggerError as e:
                self._stats.trigger_failures += 1
                self._stats.last_error = str(e)
                logger.error("schedule_trigger_failed", error=str(e))
            except Exception as e:
                self._stats.trigger_failures += 1
                self._stats.last_error = str(e)
                logger.exception("schedule_trigger_error")

        with self._lock:
            current = self._schedules.get(schedule_id)
            if current is not None and current.enabled and current.next_run:
                if not self.timers.is_armed(schedule_id):
                    self._arm(current)

    def _save(self) -> None:
        self.repository.save(self._schedules.values())

    # === Health & Stats ===

    def health(self) -> SchedulerHealth:
        with self._lock:
            total = len(self._schedules)
            enabled = sum(1 for s in self._schedules.values() if s.enabled)
        return SchedulerHealth(
            healthy=True,
            schedules_total=total,
            schedules_enabled=enabled,
            timers=self.timers.health(),
            stats=self._stats,
        )

    def get_stats(self) -> SchedulerStats:
        return self._stats
