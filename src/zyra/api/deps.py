"""
FastAPI dependency injection: settings and runtime services.

Usage in routers::

    from zyra.api.deps import Scheduler

    @router.get("/workflow-schedules")
    def list_schedules(scheduler: Scheduler):
        ...
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from zyra.api.context import ZyraRuntime
from zyra.core.settings import ZyraSettings, get_settings
from zyra.execution import BackgroundExecutionManager, ExecutionHistoryManager
from zyra.scheduling import WorkflowScheduler


def get_runtime(request: Request) -> ZyraRuntime:
    """The runtime built by :func:`zyra.api.app.create_app`."""
    return request.app.state.runtime


def get_scheduler(runtime: Annotated[ZyraRuntime, Depends(get_runtime)]) -> WorkflowScheduler:
    return runtime.scheduler


def get_executions(
    runtime: Annotated[ZyraRuntime, Depends(get_runtime)],
) -> BackgroundExecutionManager:
    return runtime.executions


def get_history(
    runtime: Annotated[ZyraRuntime, Depends(get_runtime)],
) -> ExecutionHistoryManager:
    return runtime.history


# ── Convenience type aliases ─────────────────────────────────────────────

Settings = Annotated[ZyraSettings, Depends(get_settings)]
Runtime = Annotated[ZyraRuntime, Depends(get_runtime)]
Scheduler = Annotated[WorkflowScheduler, Depends(get_scheduler)]
Executions = Annotated[BackgroundExecutionManager, Depends(get_executions)]
History = Annotated[ExecutionHistoryManager, Depends(get_history)]
