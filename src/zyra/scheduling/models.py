"""Schedule records.

A ``WorkflowSchedule`` is persisted as one element of the schedules JSON
array, with camelCase keys::

    {
      "id": "schedule-1735722000000-k3x9qa",
      "workflowId": "wf-1",
      "workflowName": "Nightly triage",
      "projectPath": "/srv/projects/api",
      "enabled": true,
      "schedule": {"type": "cron", "cron": "0 9 * * *"},
      "lastRun": "2025-01-01T09:00:00.000Z",
      "nextRun": "2025-01-02T09:00:00.000Z",
      "runCount": 1,
      "createdAt": "...",
      "updatedAt": "..."
    }
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, model_validator

from zyra.core.errors import ValidationError
from zyra.core.models import CamelModel

ScheduleType = Literal["interval", "cron", "once"]
IntervalUnit = Literal["minutes", "hours", "days"]


class IntervalSpec(CamelModel):
    """Run every ``value`` ``unit``."""

    value: int = Field(ge=1)
    unit: IntervalUnit


class ScheduleSpec(CamelModel):
    """When a workflow should run.

    Only the sub-spec matching ``type`` is consulted; the others are kept
    as given.
    """

    type: ScheduleType
    interval: IntervalSpec | None = None
    cron: str | None = None
    once: str | None = None

    def require_config(self) -> None:
        """Raise if the sub-spec required by ``type`` is missing."""
        if self.type == "interval" and self.interval is None:
            raise ValidationError(
                "interval config required for interval schedule type", field="interval"
            )
        if self.type == "cron" and not self.cron:
            raise ValidationError(
                "cron expression required for cron schedule type", field="cron"
            )
        if self.type == "once" and not self.once:
            raise ValidationError(
                "date/time required for once schedule type", field="once"
            )


class WorkflowSchedule(CamelModel):
    """A schedule bound to one workflow of one project."""

    id: str
    workflow_id: str
    workflow_name: str
    project_path: str
    enabled: bool = True
    schedule: ScheduleSpec
    last_run: str | None = None
    next_run: str | None = None
    run_count: int = 0
    created_at: str
    updated_at: str


class ScheduleUpdate(CamelModel):
    """Partial update; only fields explicitly set are applied."""

    workflow_id: str | None = None
    workflow_name: str | None = None
    project_path: str | None = None
    enabled: bool | None = None
    schedule: ScheduleSpec | None = None

    @model_validator(mode="after")
    def _no_explicit_nulls(self) -> ScheduleUpdate:
        for name in self.model_fields_set:
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self
