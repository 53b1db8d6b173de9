"""Tests for core primitives: JSON store, settings, errors, timestamps."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest
import structlog

from zyra.api.middleware.errors import status_for_category
from zyra.core.errors import (
    ConfigError,
    ErrorCategory,
    NotFoundError,
    ScheduleError,
    StorageError,
    TriggerError,
    ValidationError,
    ZyraError,
)
from zyra.core.json_store import JsonFileStore
from zyra.core.logging import LogContext
from zyra.core.settings import ZyraSettings
from zyra.core.timestamps import from_iso8601, random_suffix, to_iso8601


class TestJsonFileStore:
    def test_missing_file_reads_empty(self, tmp_path):
        assert JsonFileStore(tmp_path / "nope.json").read() == []

    def test_write_creates_directory(self, tmp_path):
        store = JsonFileStore(tmp_path / "nested" / "dir" / "records.json")
        store.write([{"id": "a"}])
        assert json.loads(store.path.read_text()) == [{"id": "a"}]

    def test_write_leaves_no_temp_files(self, tmp_path):
        store = JsonFileStore(tmp_path / "records.json")
        store.write([{"id": "a"}])
        store.write([{"id": "b"}])
        assert [p.name for p in tmp_path.iterdir()] == ["records.json"]

    def test_non_array_raises(self, tmp_path):
        path = tmp_path / "records.json"
        path.write_text('{"id": "a"}')
        with pytest.raises(StorageError):
            JsonFileStore(path).read()

    def test_bad_json_raises(self, tmp_path):
        path = tmp_path / "records.json"
        path.write_text("[1, 2")
        with pytest.raises(StorageError) as exc_info:
            JsonFileStore(path).read()
        assert exc_info.value.context.path == str(path)

    def test_expands_user(self):
        store = JsonFileStore("~/history.json")
        assert store.path == Path.home() / "history.json"


class TestSettings:
    def test_defaults(self):
        settings = ZyraSettings(_env_file=None)
        assert settings.port == 3000
        assert settings.api_prefix == "/api"
        assert settings.trigger_url == "http://localhost:3000/api/background-executions"
        assert settings.trigger_timeout_seconds == 30.0
        assert settings.history_limit == 100
        assert settings.execution_retention == 50
        assert settings.schedules_file == Path("data") / "workflow-schedules.json"
        assert settings.history_file == (
            Path.home() / ".claude" / "execution-history" / "history.json"
        )

    def test_env_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("ZYRA_PORT", "8080")
        monkeypatch.setenv("ZYRA_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("ZYRA_SCHEDULER_ENABLED", "false")

        settings = ZyraSettings(_env_file=None)

        assert settings.port == 8080
        assert settings.schedules_file == tmp_path / "workflow-schedules.json"
        assert settings.scheduler_enabled is False


class TestErrors:
    def test_categories(self):
        assert ValidationError("x").category == ErrorCategory.VALIDATION
        assert NotFoundError("x").category == ErrorCategory.NOT_FOUND
        assert ConfigError("x").category == ErrorCategory.CONFIG
        assert ScheduleError("x").category == ErrorCategory.ORCHESTRATION
        assert TriggerError("x").category == ErrorCategory.NETWORK
        assert StorageError("x").category == ErrorCategory.STORAGE

    def test_with_context_and_to_dict(self):
        cause = OSError("disk full")
        error = StorageError("write failed", cause=cause).with_context(
            path="/tmp/x.json", attempt=2
        )

        payload = error.to_dict()
        assert payload["error_type"] == "StorageError"
        assert payload["context"] == {"path": "/tmp/x.json", "attempt": 2}
        assert payload["cause"] == "disk full"
        assert error.__cause__ is cause

    def test_validation_error_field(self):
        assert ValidationError("bad", field="schedule.type").to_dict()["field"] == "schedule.type"

    def test_http_status_mapping(self):
        assert status_for_category(ValidationError("x").category) == 400
        assert status_for_category(NotFoundError("x").category) == 404
        assert status_for_category(TriggerError("x").category) == 500
        assert status_for_category(StorageError("x").category) == 500
        assert status_for_category(ZyraError("x").category) == 500


class TestTimestamps:
    def test_iso_format(self):
        dt = datetime(2025, 1, 1, 9, 0, 0, 123456, tzinfo=UTC)
        assert to_iso8601(dt) == "2025-01-01T09:00:00.123Z"

    def test_converts_offsets_to_utc(self):
        dt = datetime(2025, 1, 1, 4, 0, tzinfo=timezone(timedelta(hours=-5)))
        assert to_iso8601(dt) == "2025-01-01T09:00:00.000Z"

    def test_parse(self):
        assert from_iso8601("2025-01-01T09:00:00.000Z") == datetime(2025, 1, 1, 9, tzinfo=UTC)
        assert from_iso8601("2025-01-01T09:00:00") == datetime(2025, 1, 1, 9, tzinfo=UTC)
        assert from_iso8601(None) is None

    def test_parse_naive_in_given_zone(self):
        amsterdam = ZoneInfo("Europe/Amsterdam")
        assert from_iso8601("2025-06-01T09:00", amsterdam) == datetime(2025, 6, 1, 9, tzinfo=amsterdam)
        assert from_iso8601("2025-06-01T09:00Z", amsterdam) == datetime(2025, 6, 1, 9, tzinfo=UTC)

    def test_random_suffix(self):
        assert len(random_suffix()) == 9
        assert random_suffix(6).isalnum()


class TestLogContext:
    def test_binds_and_unbinds(self):
        with LogContext(schedule_id="schedule-1"):
            assert structlog.contextvars.get_contextvars()["schedule_id"] == "schedule-1"
        assert "schedule_id" not in structlog.contextvars.get_contextvars()
