"""Workflow triggers - how a fired schedule starts an execution.

The scheduler only decides *when*; a trigger decides *how*. The default
``HttpWorkflowTrigger`` POSTs to the background-executions endpoint::

    POST http://localhost:3000/api/background-executions
    {"projectPath": "...", "workflowId": "...", "workflowName": "...",
     "triggeredBy": "scheduler"}
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import httpx

from zyra.core.errors import TriggerError
from zyra.core.logging import get_logger

from .models import WorkflowSchedule

logger = get_logger(__name__)


@runtime_checkable
class WorkflowTrigger(Protocol):
    """Starts an execution for a fired schedule.

    Implementations raise :class:`~zyra.core.errors.TriggerError` when the
    execution could not be started.

    Example (custom trigger):
        >>> class RecordingTrigger:
        ...     def __init__(self):
        ...         self.fired = []
        ...
        ...     def trigger(self, schedule):
        ...         self.fired.append(schedule.id)
    """

    def trigger(self, schedule: WorkflowSchedule) -> None:
        ...


def trigger_payload(schedule: WorkflowSchedule) -> dict[str, Any]:
    return {
        "projectPath": schedule.project_path,
        "workflowId": schedule.workflow_id,
        "workflowName": schedule.workflow_name,
        "triggeredBy": "scheduler",
    }


class HttpWorkflowTrigger:
    """POST the trigger payload to an HTTP endpoint.

    Args:
        url: Endpoint that creates a background execution.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._transport = transport

    def trigger(self, schedule: WorkflowSchedule) -> None:
        payload = trigger_payload(schedule)
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(self.url, json=payload)
        except httpx.HTTPError as e:
            raise TriggerError(f"Trigger request failed: {e}", cause=e).with_context(
                schedule_id=schedule.id, workflow_id=schedule.workflow_id
            ) from e

        if response.is_error:
            raise TriggerError(
                f"Failed to execute workflow: {response.status_code} {response.reason_phrase}"
            ).with_context(schedule_id=schedule.id, workflow_id=schedule.workflow_id)

        logger.debug(
            "trigger_sent",
            schedule_id=schedule.id,
            url=self.url,
            status=response.status_code,
        )
