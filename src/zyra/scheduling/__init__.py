"""Workflow scheduling.

┌──────────────────────────────────────────────────────────────────────────────┐
│  ZYRA SCHEDULER                                                               │
│                                                                               │
│  - interval / cron / once schedules                                           │
│  - one timer per schedule, re-armed after every fire                          │
│  - whole schedule set snapshotted to a JSON file after every change           │
│  - fired schedules POST to the background-executions endpoint                 │
│                                                                               │
│  Quick Start:                                                                 │
│      from zyra.scheduling import create_scheduler, ScheduleSpec               │
│                                                                               │
│      scheduler = create_scheduler(settings)                                   │
│      scheduler.initialize_schedules()                                         │
│      scheduler.create_schedule(                                               │
│          "wf-1", "Nightly triage", "/srv/projects/api",                       │
│          ScheduleSpec(type="interval", interval={"value": 30,                 │
│                                                  "unit": "minutes"}),         │
│      )                                                                        │
│      ...                                                                      │
│      scheduler.shutdown()                                                     │
│                                                                               │
│  Known limitation: cron expressions honor only the minute and hour fields.   │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

from zyra.core.settings import ZyraSettings

from .models import IntervalSpec, ScheduleSpec, ScheduleUpdate, WorkflowSchedule
from .next_run import calculate_next_cron_run, calculate_next_run
from .repository import ScheduleRepository
from .service import SchedulerHealth, SchedulerStats, WorkflowScheduler
from .timers import TimerRegistry
from .trigger import HttpWorkflowTrigger, WorkflowTrigger, trigger_payload

__all__ = [
    # Models
    "IntervalSpec",
    "ScheduleSpec",
    "ScheduleUpdate",
    "WorkflowSchedule",
    # Next-run
    "calculate_next_run",
    "calculate_next_cron_run",
    # Components
    "ScheduleRepository",
    "TimerRegistry",
    "WorkflowTrigger",
    "HttpWorkflowTrigger",
    "trigger_payload",
    # Service
    "WorkflowScheduler",
    "SchedulerHealth",
    "SchedulerStats",
    "create_scheduler",
]


def create_scheduler(
    settings: ZyraSettings,
    trigger: WorkflowTrigger | None = None,
) -> WorkflowScheduler:
    """Factory wiring a scheduler from settings.

    Args:
        settings: Runtime settings (schedules file, trigger URL, timezone)
        trigger: Override the HTTP trigger (tests, embedding)

    Returns:
        Configured WorkflowScheduler (timers not yet armed)
    """
    return WorkflowScheduler(
        repository=ScheduleRepository(settings.schedules_file),
        trigger=trigger
        or HttpWorkflowTrigger(settings.trigger_url, timeout=settings.trigger_timeout_seconds),
        timezone=settings.timezone,
    )
