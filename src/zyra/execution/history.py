"""Execution history manager.

Durable, capped log of finished workflow runs kept in a single JSON array
file (default ``~/.claude/execution-history/history.json``), ordered
most-recent-first.

Every operation reloads the file, so several processes may share it; within
one process each read-modify-write holds the store lock and writes are
atomic (see :class:`~zyra.core.json_store.JsonFileStore`).

Failure policy:
    - reading: a missing, unreadable or malformed file yields ``[]``
    - writing: errors propagate as :class:`~zyra.core.errors.StorageError`
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pydantic

from zyra.core.errors import StorageError
from zyra.core.json_store import JsonFileStore
from zyra.core.logging import get_logger

from .models import ExecutionHistoryEntry, ExecutionHistoryUpdate, ExecutionStatistics

logger = get_logger(__name__)


class ExecutionHistoryManager:
    """Append, query and summarize execution history entries.

    Example:
        >>> history = ExecutionHistoryManager("~/.claude/execution-history/history.json")
        >>> history.add_execution(entry)
        >>> history.get_recent_history(5)
        [ExecutionHistoryEntry(...), ...]
        >>> history.get_statistics().most_used_workflow
        'Nightly triage'
    """

    def __init__(self, path: str | Path, limit: int = 100):
        self.store = JsonFileStore(path)
        self.limit = limit

    @property
    def path(self) -> Path:
        return self.store.path

    # === Persistence ===

    def load_history(self) -> list[ExecutionHistoryEntry]:
        """All stored entries, most recent first. Never raises.

        An unreadable file yields ``[]``; individual records that fail
        validation are skipped and logged so the rest survive the next write.
        """
        with self.store.lock:
            try:
                self.store.ensure_dir()
                records = self.store.read()
            except (OSError, StorageError) as e:
                logger.warning("history_load_failed", path=str(self.path), error=str(e))
                return []

        entries: list[ExecutionHistoryEntry] = []
        for record in records:
            try:
                entries.append(ExecutionHistoryEntry.model_validate(record))
            except pydantic.ValidationError as e:
                logger.warning(
                    "history_record_skipped",
                    execution_id=record.get("id") if isinstance(record, dict) else None,
                    error=str(e),
                )
        return entries

    def save_history(self, entries: list[ExecutionHistoryEntry]) -> None:
        """Replace the stored history.

        Raises:
            StorageError: The file could not be written.
        """
        with self.store.lock:
            self.store.write([e.to_wire() for e in entries])

    # === Mutations ===

    def add_execution(self, entry: ExecutionHistoryEntry | Mapping[str, Any]) -> ExecutionHistoryEntry:
        """Prepend ``entry`` and truncate to the history limit."""
        if not isinstance(entry, ExecutionHistoryEntry):
            entry = ExecutionHistoryEntry.model_validate(entry)

        with self.store.lock:
            history = self.load_history()
            history.insert(0, entry)
            del history[self.limit:]
            self.save_history(history)

        logger.info(
            "history_entry_added",
            execution_id=entry.id,
            workflow_id=entry.workflow_id,
            status=entry.status,
        )
        return entry

    def update_execution(
        self, execution_id: str, updates: ExecutionHistoryUpdate | Mapping[str, Any]
    ) -> ExecutionHistoryEntry | None:
        """Merge ``updates`` into the matching entry; ``None`` if there is none."""
        if not isinstance(updates, ExecutionHistoryUpdate):
            updates = ExecutionHistoryUpdate.model_validate(updates)
        changes = {name: getattr(updates, name) for name in updates.model_fields_set}

        with self.store.lock:
            history = self.load_history()
            for index, entry in enumerate(history):
                if entry.id == execution_id:
                    history[index] = entry.model_copy(update=changes, deep=True)
                    self.save_history(history)
                    logger.info(
                        "history_entry_updated",
                        execution_id=execution_id,
                        fields=sorted(changes),
                    )
                    return history[index]
        return None

    def delete_execution(self, execution_id: str) -> bool:
        """Remove one entry. The file is rewritten either way."""
        with self.store.lock:
            history = self.load_history()
            remaining = [e for e in history if e.id != execution_id]
            self.save_history(remaining)
        deleted = len(remaining) != len(history)
        logger.info("history_entry_deleted", execution_id=execution_id, deleted=deleted)
        return deleted

    def clear_history(self) -> None:
        self.save_history([])
        logger.info("history_cleared", path=str(self.path))

    # === Queries ===

    def get_workflow_history(self, workflow_id: str) -> list[ExecutionHistoryEntry]:
        return [e for e in self.load_history() if e.workflow_id == workflow_id]

    def get_project_history(self, project_path: str) -> list[ExecutionHistoryEntry]:
        return [e for e in self.load_history() if e.project_path == project_path]

    def get_recent_history(self, limit: int = 10) -> list[ExecutionHistoryEntry]:
        return self.load_history()[:limit]

    def get_statistics(self) -> ExecutionStatistics:
        """Totals, success/failure counts, mean duration and busiest workflow.

        Only entries with a non-zero duration count toward the average. Ties
        for the most used workflow go to the name seen first, i.e. the one
        with the most recent entry.
        """
        history = self.load_history()
        durations = [e.duration for e in history if e.duration]
        # most_common() keeps first-seen order among equal counts
        counts = Counter(e.workflow_name for e in history)

        return ExecutionStatistics(
            total_executions=len(history),
            successful_executions=sum(1 for e in history if e.status == "completed"),
            failed_executions=sum(1 for e in history if e.status == "failed"),
            average_duration=sum(durations) / len(durations) if durations else 0,
            most_used_workflow=counts.most_common(1)[0][0] if counts else None,
        )

    def health(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "exists": self.store.exists(),
            "limit": self.limit,
        }
