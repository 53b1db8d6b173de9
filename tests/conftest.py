"""Shared pytest fixtures for zyra tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from tests.support import FrozenClock, ManualTimers, RecordingTrigger
from zyra.api.app import create_app
from zyra.api.context import ZyraRuntime
from zyra.core.settings import ZyraSettings
from zyra.execution import BackgroundExecutionManager, ExecutionHistoryManager
from zyra.scheduling import ScheduleRepository, WorkflowScheduler


# ── Fixtures ─────────────────────────────────────────────────────────────


@pytest.fixture
def settings(tmp_path) -> ZyraSettings:
    """Settings isolated to a temp directory."""
    return ZyraSettings(
        _env_file=None,
        data_dir=tmp_path / "data",
        history_dir=tmp_path / "history",
        trigger_url="http://zyra.test/api/background-executions",
    )


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def timers() -> ManualTimers:
    return ManualTimers()


@pytest.fixture
def trigger() -> RecordingTrigger:
    return RecordingTrigger()


@pytest.fixture
def schedules_path(tmp_path):
    return tmp_path / "data" / "workflow-schedules.json"


@pytest.fixture
def scheduler(schedules_path, trigger, timers, clock) -> WorkflowScheduler:
    return WorkflowScheduler(
        repository=ScheduleRepository(schedules_path),
        trigger=trigger,
        timers=timers,
        clock=clock,
    )


@pytest.fixture
def executions(clock) -> BackgroundExecutionManager:
    return BackgroundExecutionManager(clock=clock)


@pytest.fixture
def history(tmp_path) -> ExecutionHistoryManager:
    return ExecutionHistoryManager(tmp_path / "history" / "history.json")


@pytest.fixture
def runtime(settings, trigger) -> ZyraRuntime:
    return ZyraRuntime.from_settings(settings, trigger=trigger)


@pytest.fixture
def client(runtime):
    """TestClient with the lifespan running (timers armed, then cancelled)."""
    app = create_app(runtime=runtime)
    with TestClient(app) as c:
        yield c
