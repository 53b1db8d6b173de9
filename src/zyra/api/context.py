"""Runtime context: the services one zyra process owns.

The API app factory and the CLI each build a :class:`ZyraRuntime` from
settings, start it, and shut it down on exit. Nothing is held in module
globals, so tests can build as many isolated runtimes as they like.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from zyra import __version__
from zyra.core.logging import get_logger
from zyra.core.settings import ZyraSettings
from zyra.execution import BackgroundExecutionManager, ExecutionHistoryManager
from zyra.scheduling import WorkflowScheduler, WorkflowTrigger, create_scheduler

logger = get_logger(__name__)


@dataclass
class ZyraRuntime:
    """Scheduler, execution tracker and history manager for one process."""

    settings: ZyraSettings
    scheduler: WorkflowScheduler
    executions: BackgroundExecutionManager
    history: ExecutionHistoryManager
    started: bool = field(default=False, init=False)

    @classmethod
    def from_settings(
        cls,
        settings: ZyraSettings,
        trigger: WorkflowTrigger | None = None,
    ) -> ZyraRuntime:
        return cls(
            settings=settings,
            scheduler=create_scheduler(settings, trigger=trigger),
            executions=BackgroundExecutionManager(retention=settings.execution_retention),
            history=ExecutionHistoryManager(settings.history_file, limit=settings.history_limit),
        )

    def start(self) -> None:
        """Arm schedule timers (when the scheduler is enabled)."""
        if self.started:
            return
        if self.settings.scheduler_enabled:
            self.scheduler.initialize_schedules()
        else:
            logger.info("scheduler_disabled")
        self.started = True

    def shutdown(self) -> None:
        self.scheduler.shutdown()
        self.started = False

    def health(self) -> dict[str, Any]:
        scheduler = self.scheduler.health()
        return {
            "status": "healthy" if scheduler.healthy else "degraded",
            "version": __version__,
            "scheduler": {
                "enabled": self.settings.scheduler_enabled,
                **scheduler.to_dict(),
            },
            "executions": self.executions.health(),
            "history": self.history.health(),
        }
