"""Tests for BackgroundExecutionManager."""

from __future__ import annotations

import re

import pytest

from zyra.core.errors import ValidationError
from zyra.execution import BackgroundExecutionManager

LOG_LINE = re.compile(r"^\[\d{2}:\d{2}:\d{2}\] (?P<text>.*)$")


def _create(manager, total_nodes=4, **kwargs):
    return manager.create_execution("wf-1", "Nightly triage", "/srv/projects/api", total_nodes, **kwargs)


def _log_text(line: str) -> str:
    match = LOG_LINE.match(line)
    assert match, line
    return match.group("text")


class TestLifecycle:
    def test_create(self, executions):
        execution_id = _create(executions, triggered_by="scheduler")
        execution = executions.get_execution(execution_id)

        assert re.fullmatch(r"bg_exec_\d+_[a-z0-9]{9}", execution_id)
        assert execution.status == "running"
        assert execution.progress == 0
        assert execution.completed_nodes == 0
        assert execution.logs == []
        assert execution.triggered_by == "scheduler"
        assert execution.start_time == "2025-01-01T10:00:00.000Z"

    def test_complete_node_updates_progress(self, executions):
        execution_id = _create(executions, total_nodes=4)
        for name in ("Planner", "Coder", "Reviewer"):
            executions.complete_node(execution_id, name)

        execution = executions.get_execution(execution_id)
        assert execution.progress == 75
        assert execution.completed_nodes == 3
        assert execution.current_node == "Reviewer"
        assert _log_text(execution.logs[-1]) == "✅ Completed: Reviewer"

    def test_complete_node_with_zero_total(self, executions):
        execution_id = _create(executions, total_nodes=0)
        executions.complete_node(execution_id, "Planner")
        assert executions.get_execution(execution_id).progress == 0

    def test_complete_execution(self, executions, clock):
        execution_id = _create(executions)
        clock.advance(seconds=90)
        executions.complete_execution(execution_id)

        execution = executions.get_execution(execution_id)
        assert execution.status == "completed"
        assert execution.progress == 100
        assert execution.end_time == "2025-01-01T10:01:30.000Z"
        assert _log_text(execution.logs[-1]) == "✅ Workflow completed successfully"

    def test_fail_execution(self, executions):
        execution_id = _create(executions)
        executions.fail_execution(execution_id, "agent crashed")

        execution = executions.get_execution(execution_id)
        assert execution.status == "failed"
        assert execution.error == "agent crashed"
        assert execution.end_time is not None
        assert _log_text(execution.logs[-1]) == "❌ Workflow failed: agent crashed"

    def test_cancel_execution(self, executions):
        execution_id = _create(executions)
        executions.cancel_execution(execution_id)

        execution = executions.get_execution(execution_id)
        assert execution.status == "cancelled"
        assert _log_text(execution.logs[-1]) == "🛑 Workflow cancelled"

    def test_add_log(self, executions):
        execution_id = _create(executions)
        executions.add_log(execution_id, "hello")
        assert _log_text(executions.get_execution(execution_id).logs[0]) == "hello"

    def test_unknown_ids_are_ignored(self, executions):
        executions.update_execution("nope", current_node="x")
        executions.add_log("nope", "x")
        executions.complete_node("nope", "x")
        executions.complete_execution("nope")
        executions.fail_execution("nope", "x")
        executions.cancel_execution("nope")
        assert executions.get_execution("nope") is None


class TestUpdateExecution:
    def test_completed_nodes_recomputes_progress_half_up(self, executions):
        execution_id = _create(executions, total_nodes=8)
        executions.update_execution(execution_id, completed_nodes=1)
        assert executions.get_execution(execution_id).progress == 13

    def test_other_fields_leave_progress(self, executions):
        execution_id = _create(executions, total_nodes=8)
        executions.update_execution(execution_id, current_node="Planner")
        execution = executions.get_execution(execution_id)
        assert execution.current_node == "Planner"
        assert execution.progress == 0

    def test_rejects_unknown_fields(self, executions):
        execution_id = _create(executions)
        with pytest.raises(ValidationError):
            executions.update_execution(execution_id, colour="blue")

    def test_rejects_id_change(self, executions):
        execution_id = _create(executions)
        with pytest.raises(ValidationError):
            executions.update_execution(execution_id, id="other")


class TestQueries:
    def test_running_filter(self, executions):
        running = _create(executions)
        done = _create(executions)
        executions.complete_execution(done)

        assert [e.id for e in executions.get_running_executions()] == [running]
        assert [e.id for e in executions.get_all_executions()] == [running, done]

    def test_get_returns_copy(self, executions):
        execution_id = _create(executions)
        executions.get_execution(execution_id).logs.append("tampered")
        assert executions.get_execution(execution_id).logs == []


class TestSubscriptions:
    def test_listener_receives_every_mutation(self, executions):
        execution_id = _create(executions)
        seen = []
        executions.subscribe(execution_id, lambda e: seen.append((e.status, e.completed_nodes)))

        executions.complete_node(execution_id, "Planner")
        executions.complete_execution(execution_id)

        assert seen == [("running", 1), ("completed", 1)]

    def test_unsubscribe(self, executions):
        execution_id = _create(executions)
        seen = []
        unsubscribe = executions.subscribe(execution_id, seen.append)

        unsubscribe()
        unsubscribe()
        executions.add_log(execution_id, "after")

        assert seen == []

    def test_raising_listener_does_not_block_others(self, executions):
        execution_id = _create(executions)
        seen = []

        def broken(_execution):
            raise RuntimeError("listener bug")

        executions.subscribe(execution_id, broken)
        executions.subscribe(execution_id, seen.append)
        executions.add_log(execution_id, "x")

        assert len(seen) == 1

    def test_listeners_are_per_execution(self, executions):
        a = _create(executions)
        b = _create(executions)
        seen = []
        executions.subscribe(a, seen.append)
        executions.add_log(b, "x")
        assert seen == []


class TestCleanup:
    def test_keeps_most_recent(self, clock):
        manager = BackgroundExecutionManager(retention=50, clock=clock)
        ids = []
        for _ in range(55):
            ids.append(_create(manager))
            clock.advance(seconds=1)
        unsubscribe_target = ids[0]
        manager.subscribe(unsubscribe_target, lambda e: None)

        removed = manager.cleanup()

        assert removed == 5
        remaining = {e.id for e in manager.get_all_executions()}
        assert remaining == set(ids[5:])
        assert manager.health()["subscribers"] == 0

    def test_under_limit_is_noop(self, executions):
        _create(executions)
        assert executions.cleanup() == 0
        assert len(executions.get_all_executions()) == 1

    def test_explicit_keep(self, executions, clock):
        for _ in range(3):
            _create(executions)
            clock.advance(seconds=1)
        assert executions.cleanup(keep=1) == 2

    def test_health(self, executions):
        done = _create(executions)
        _create(executions)
        executions.complete_execution(done)

        health = executions.health()
        assert health["total"] == 2
        assert health["by_status"] == {"running": 1, "completed": 1}
