"""Schedule repository - persistence of the schedule set.

The whole set of schedules is kept in memory by the scheduler and
snapshotted to ``<data_dir>/workflow-schedules.json`` after every change.

┌──────────────────────────────────────────────────────────────────────┐
│  ScheduleRepository                                                  │
│                                                                      │
│   load()  → dict[id, WorkflowSchedule]   (errors logged, → {})       │
│   save(schedules)                        (errors logged, swallowed)  │
│                                                                      │
│  Records that fail validation are skipped individually so one bad   │
│  entry cannot hide every other schedule.                             │
└──────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from zyra.core.errors import StorageError
from zyra.core.json_store import JsonFileStore
from zyra.core.logging import get_logger

from .models import WorkflowSchedule

logger = get_logger(__name__)


class ScheduleRepository:
    """Load and snapshot the schedule set.

    Example:
        >>> repo = ScheduleRepository(Path("data/workflow-schedules.json"))
        >>> schedules = repo.load()
        >>> repo.save(schedules.values())
    """

    def __init__(self, path: str | Path):
        self.store = JsonFileStore(path)

    @property
    def path(self) -> Path:
        return self.store.path

    def load(self) -> dict[str, WorkflowSchedule]:
        """Read all schedules keyed by id; an unreadable file yields ``{}``."""
        self.store.ensure_dir()
        try:
            records = self.store.read()
        except StorageError as e:
            logger.error("schedules_load_failed", path=str(self.path), error=str(e))
            return {}

        schedules: dict[str, WorkflowSchedule] = {}
        for record in records:
            try:
                schedule = WorkflowSchedule.model_validate(record)
            except PydanticValidationError as e:
                logger.warning(
                    "schedule_record_skipped",
                    schedule_id=record.get("id") if isinstance(record, dict) else None,
                    error=str(e),
                )
                continue
            schedules[schedule.id] = schedule

        logger.debug("schedules_loaded", path=str(self.path), count=len(schedules))
        return schedules

    def save(self, schedules: Iterable[WorkflowSchedule]) -> bool:
        """Overwrite the file with ``schedules``. Returns False if the write failed."""
        records = [schedule.to_wire() for schedule in schedules]
        try:
            with self.store.lock:
                self.store.write(records)
        except StorageError as e:
            logger.error("schedules_save_failed", path=str(self.path), error=str(e))
            return False
        return True
