"""Background execution tracker.

In-memory status board for workflow runs that continue after the user
leaves the page. Each mutation notifies the execution's subscribers
synchronously.

Lifecycle::

    create_execution() ──► running ──┬── complete_execution() ──► completed
                                     ├── fail_execution()     ──► failed
                                     └── cancel_execution()   ──► cancelled

Cancel only flips the status; the work itself is not interrupted.
Nothing here is persisted, a restart forgets every execution.
"""

from __future__ import annotations

import math
import threading
from collections import Counter
from collections.abc import Callable
from datetime import datetime
from typing import Any

from zyra.core.errors import ValidationError
from zyra.core.logging import get_logger
from zyra.core.timestamps import epoch_ms, from_iso8601, random_suffix, to_iso8601, utc_now

from .models import BackgroundExecution

logger = get_logger(__name__)

ExecutionListener = Callable[[BackgroundExecution], None]


def _percent(completed: int, total: int) -> int:
    """Half-up rounded percentage, clamped to 0..100; 0 when ``total`` is 0."""
    if total <= 0:
        return 0
    return max(0, min(100, math.floor(completed / total * 100 + 0.5)))


class BackgroundExecutionManager:
    """Tracks running and recently finished executions.

    Example:
        >>> manager = BackgroundExecutionManager()
        >>> execution_id = manager.create_execution("wf-1", "Triage", "/srv/api", total_nodes=4)
        >>> manager.complete_node(execution_id, "Planner")
        >>> manager.get_execution(execution_id).progress
        25
    """

    def __init__(
        self,
        retention: int = 50,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.retention = retention
        self._clock = clock
        self._lock = threading.RLock()
        self._executions: dict[str, BackgroundExecution] = {}
        self._listeners: dict[str, list[ExecutionListener]] = {}

    # === Mutations ===

    def create_execution(
        self,
        workflow_id: str,
        workflow_name: str,
        project_path: str,
        total_nodes: int = 0,
        triggered_by: str | None = None,
    ) -> str:
        """Register a new running execution and return its id."""
        execution_id = f"bg_exec_{epoch_ms()}_{random_suffix(9)}"
        execution = BackgroundExecution(
            id=execution_id,
            workflow_id=workflow_id,
            workflow_name=workflow_name,
            project_path=project_path,
            status="running",
            start_time=to_iso8601(self._clock()),
            total_nodes=total_nodes,
            triggered_by=triggered_by,
        )
        with self._lock:
            self._executions[execution_id] = execution

        logger.info(
            "execution_created",
            execution_id=execution_id,
            workflow_id=workflow_id,
            total_nodes=total_nodes,
            triggered_by=triggered_by,
        )
        self._notify(execution_id)
        return execution_id

    def update_execution(self, execution_id: str, **updates: Any) -> None:
        """Merge field updates (snake_case names) into an execution.

        Progress is recomputed when ``completed_nodes`` is among the updates
        and ``total_nodes`` is positive.

        Raises:
            ValidationError: An update names a field executions do not have.
        """
        rejected = sorted(
            name for name in updates if name == "id" or name not in BackgroundExecution.model_fields
        )
        if rejected:
            raise ValidationError(
                f"Cannot update execution fields: {', '.join(rejected)}"
            ).with_context(execution_id=execution_id)

        with self._lock:
            execution = self._executions.get(execution_id)
            if execution is None:
                return
            for name, value in updates.items():
                setattr(execution, name, value)
            if "completed_nodes" in updates and execution.total_nodes > 0:
                execution.progress = _percent(execution.completed_nodes, execution.total_nodes)

        self._notify(execution_id)

    def add_log(self, execution_id: str, line: str) -> None:
        """Append a ``[HH:MM:SS] line`` entry to the execution log."""
        with self._lock:
            execution = self._executions.get(execution_id)
            if execution is None:
                return
            self._append_log(execution, line)
        self._notify(execution_id)

    def complete_node(self, execution_id: str, node_name: str) -> None:
        with self._lock:
            execution = self._executions.get(execution_id)
            if execution is None:
                return
            execution.completed_nodes += 1
            execution.current_node = node_name
            execution.progress = _percent(execution.completed_nodes, execution.total_nodes)
            self._append_log(execution, f"✅ Completed: {node_name}")
        self._notify(execution_id)

    def complete_execution(self, execution_id: str) -> None:
        self._finish(execution_id, "completed", "✅ Workflow completed successfully")

    def fail_execution(self, execution_id: str, error: str) -> None:
        self._finish(execution_id, "failed", f"❌ Workflow failed: {error}", error=error)

    def cancel_execution(self, execution_id: str) -> None:
        """Mark an execution cancelled. In-flight work keeps running."""
        self._finish(execution_id, "cancelled", "🛑 Workflow cancelled")

    def _finish(
        self,
        execution_id: str,
        status: str,
        log_line: str,
        error: str | None = None,
    ) -> None:
        with self._lock:
            execution = self._executions.get(execution_id)
            if execution is None:
                return
            execution.status = status
            execution.end_time = to_iso8601(self._clock())
            if status == "completed":
                execution.progress = 100
            if error is not None:
                execution.error = error
            self._append_log(execution, log_line)

        logger.info("execution_finished", execution_id=execution_id, status=status, error=error)
        self._notify(execution_id)

    def _append_log(self, execution: BackgroundExecution, line: str) -> None:
        stamp = self._clock().astimezone().strftime("%H:%M:%S")
        execution.logs.append(f"[{stamp}] {line}")

    # === Queries ===

    def get_execution(self, execution_id: str) -> BackgroundExecution | None:
        with self._lock:
            execution = self._executions.get(execution_id)
            return execution.model_copy(deep=True) if execution else None

    def get_all_executions(self) -> list[BackgroundExecution]:
        with self._lock:
            return [e.model_copy(deep=True) for e in self._executions.values()]

    def get_running_executions(self) -> list[BackgroundExecution]:
        with self._lock:
            return [
                e.model_copy(deep=True)
                for e in self._executions.values()
                if e.status == "running"
            ]

    # === Subscriptions ===

    def subscribe(
        self, execution_id: str, callback: ExecutionListener
    ) -> Callable[[], None]:
        """Register ``callback`` for updates of one execution.

        Returns:
            A function that removes the subscription (idempotent).
        """
        with self._lock:
            self._listeners.setdefault(execution_id, []).append(callback)

        def unsubscribe() -> None:
            with self._lock:
                listeners = self._listeners.get(execution_id)
                if listeners and callback in listeners:
                    listeners.remove(callback)

        return unsubscribe

    def _notify(self, execution_id: str) -> None:
        with self._lock:
            execution = self._executions.get(execution_id)
            listeners = list(self._listeners.get(execution_id, ()))
            if execution is None or not listeners:
                return
            snapshot = execution.model_copy(deep=True)

        for callback in listeners:
            try:
                callback(snapshot)
            except Exception as e:
                logger.warning(
                    "execution_listener_error",
                    execution_id=execution_id,
                    error=str(e),
                )

    # === Housekeeping ===

    def cleanup(self, keep: int | None = None) -> int:
        """Drop all but the ``keep`` most recently started executions.

        Listeners of removed executions are dropped too.

        Returns:
            Number of executions removed.
        """
        keep = self.retention if keep is None else keep
        with self._lock:
            if len(self._executions) <= keep:
                return 0
            ordered = sorted(
                self._executions.values(),
                key=lambda e: from_iso8601(e.start_time),
                reverse=True,
            )
            removed = [e.id for e in ordered[keep:]]
            for execution_id in removed:
                del self._executions[execution_id]
                self._listeners.pop(execution_id, None)

        logger.info("executions_cleaned_up", removed=len(removed), kept=keep)
        return len(removed)

    def health(self) -> dict[str, Any]:
        with self._lock:
            by_status = Counter(e.status for e in self._executions.values())
            subscribers = sum(len(v) for v in self._listeners.values())
            total = len(self._executions)
        return {
            "total": total,
            "by_status": dict(by_status),
            "subscribers": subscribers,
            "retention": self.retention,
        }
