"""
Tests for the zyra CLI.
"""

from __future__ import annotations

import json
import logging

import pytest
import structlog
from typer.testing import CliRunner

from tests.support import make_entry
from zyra import __version__
from zyra.cli import app
from zyra.scheduling import ScheduleSpec

runner = CliRunner()


@pytest.fixture(autouse=True)
def _restore_logging():
    """The root callback reconfigures logging for the whole process."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture
def workflow_file(tmp_path):
    def _write(nodes, edges):
        path = tmp_path / "workflow.json"
        path.write_text(json.dumps({"nodes": nodes, "edges": edges}), encoding="utf-8")
        return str(path)

    return _write


class TestRoot:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestWorkflowValidate:
    def test_valid(self, workflow_file):
        path = workflow_file(
            [{"id": "start"}, {"id": "a", "data": {"agent": {"name": "Planner"}}}],
            [{"source": "start", "target": "a"}],
        )
        result = runner.invoke(app, ["workflow", "validate", path])
        assert result.exit_code == 0
        assert "VALID" in result.output

    def test_invalid_exits_1(self, workflow_file):
        path = workflow_file([{"id": "a", "data": {"agent": {"name": "Planner"}}}], [])
        result = runner.invoke(app, ["workflow", "validate", path])
        assert result.exit_code == 1
        assert "INVALID" in result.output

    def test_unreadable_file(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{nope", encoding="utf-8")
        result = runner.invoke(app, ["workflow", "validate", str(path)])
        assert result.exit_code == 1


class TestHistory:
    def test_stats(self, history, tmp_path):
        history.add_execution(make_entry("a", workflow_name="Triage", duration=500))
        result = runner.invoke(
            app, ["history", "stats", "--history-dir", str(tmp_path / "history")]
        )
        assert result.exit_code == 0
        assert "Triage" in result.output

    def test_list_empty(self, tmp_path):
        result = runner.invoke(
            app, ["history", "list", "--history-dir", str(tmp_path / "history")]
        )
        assert result.exit_code == 0
        assert "No items" in result.output

    def test_clear_with_yes(self, history, tmp_path):
        history.add_execution(make_entry("a"))
        result = runner.invoke(
            app, ["history", "clear", "--yes", "--history-dir", str(tmp_path / "history")]
        )
        assert result.exit_code == 0
        assert history.load_history() == []

    def test_delete(self, history, tmp_path):
        history.add_execution(make_entry("a"))
        history.add_execution(make_entry("b"))
        result = runner.invoke(
            app, ["history", "delete", "a", "--history-dir", str(tmp_path / "history")]
        )
        assert result.exit_code == 0
        assert [e.id for e in history.load_history()] == ["b"]


class TestSchedule:
    def test_show_and_list(self, scheduler, tmp_path):
        schedule = scheduler.create_schedule(
            "wf-1", "Nightly", "/srv/api", ScheduleSpec(type="cron", cron="0 9 * * *")
        )
        data_dir = str(tmp_path / "data")

        shown = runner.invoke(app, ["schedule", "show", schedule.id, "--data-dir", data_dir])
        listed = runner.invoke(app, ["schedule", "list", "--data-dir", data_dir])

        assert shown.exit_code == 0
        assert "Nightly" in shown.output
        assert listed.exit_code == 0

    def test_show_unknown(self, tmp_path):
        result = runner.invoke(
            app, ["schedule", "show", "schedule-missing", "--data-dir", str(tmp_path / "data")]
        )
        assert result.exit_code == 1
