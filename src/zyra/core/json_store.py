"""Single-file JSON array store.

Both the schedule set and the execution history are persisted as one JSON
array per file. Every write replaces the whole file. Writes go to a
temporary file in the same directory followed by ``os.replace`` so readers
never observe a partially written file, and the store's lock lets callers
make read-modify-write cycles atomic within the process.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any

from zyra.core.errors import StorageError
from zyra.core.logging import get_logger

logger = get_logger(__name__)


class JsonFileStore:
    """Read and atomically rewrite a JSON array file.

    Example:
        >>> store = JsonFileStore(Path("data/workflow-schedules.json"))
        >>> with store.lock:
        ...     records = store.read()
        ...     records.append({"id": "schedule-1"})
        ...     store.write(records)
    """

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()
        self.lock = threading.RLock()

    def ensure_dir(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> list[dict[str, Any]]:
        """Return the stored array; an absent file reads as ``[]``.

        Raises:
            StorageError: The file exists but cannot be read or is not a JSON array.
        """
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to read {self.path}", cause=e).with_context(
                path=str(self.path)
            ) from e
        if not isinstance(data, list):
            raise StorageError(f"Expected a JSON array in {self.path}").with_context(
                path=str(self.path)
            )
        return data

    def write(self, records: list[dict[str, Any]]) -> None:
        """Replace the file contents with ``records``.

        Raises:
            StorageError: The directory or file cannot be written.
        """
        payload = json.dumps(records, indent=2, ensure_ascii=False)
        try:
            self.ensure_dir()
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {self.path}", cause=e).with_context(
                path=str(self.path)
            ) from e

        logger.debug("json_store_written", path=str(self.path), records=len(records))
