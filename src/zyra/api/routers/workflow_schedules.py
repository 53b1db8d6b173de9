"""
Workflow schedule router. CRUD for schedules, addressed by query string.

GET    /workflow-schedules[?id= | ?workflowId=&projectPath=]
POST   /workflow-schedules
PATCH  /workflow-schedules?id=
DELETE /workflow-schedules?id=
"""

from __future__ import annotations

from typing import Any

import pydantic
from fastapi import APIRouter, Query

from zyra.api.deps import Scheduler
from zyra.core.errors import NotFoundError, ValidationError
from zyra.core.models import CamelModel
from zyra.scheduling import ScheduleSpec, ScheduleUpdate

router = APIRouter(prefix="/workflow-schedules")

SCHEDULE_TYPES = ("interval", "cron", "once")


class CreateScheduleBody(CamelModel):
    """Request body for creating a schedule; presence is checked by the route."""

    workflow_id: str | None = None
    workflow_name: str | None = None
    project_path: str | None = None
    schedule: dict[str, Any] | None = None


def _parse_spec(raw: dict[str, Any]) -> ScheduleSpec:
    if raw.get("type") not in SCHEDULE_TYPES:
        raise ValidationError(
            "Invalid schedule type. Must be: interval, cron, or once", field="schedule.type"
        )
    try:
        spec = ScheduleSpec.model_validate(raw)
    except pydantic.ValidationError as e:
        raise ValidationError("Invalid schedule configuration", field="schedule", cause=e) from e
    spec.require_config()
    return spec


def _require_id(schedule_id: str | None) -> str:
    if not schedule_id:
        raise ValidationError("Schedule ID is required", field="id")
    return schedule_id


@router.get("")
def list_schedules(
    scheduler: Scheduler,
    schedule_id: str | None = Query(None, alias="id"),
    workflow_id: str | None = Query(None, alias="workflowId"),
    project_path: str | None = Query(None, alias="projectPath"),
) -> dict[str, Any]:
    """Return one schedule by id, the schedules of a workflow, or all of them.

    The workflow filter applies only when both ``workflowId`` and
    ``projectPath`` are given.
    """
    if schedule_id:
        schedule = scheduler.get_schedule(schedule_id)
        if schedule is None:
            raise NotFoundError("Schedule not found").with_context(schedule_id=schedule_id)
        return {"schedule": schedule.to_wire()}

    if workflow_id and project_path:
        schedules = scheduler.get_schedules_for_workflow(workflow_id, project_path)
    else:
        schedules = scheduler.get_all_schedules()
    return {"schedules": [s.to_wire() for s in schedules]}


@router.post("", status_code=201)
def create_schedule(body: CreateScheduleBody, scheduler: Scheduler) -> dict[str, Any]:
    """Create an enabled schedule and arm its timer.

    Example:
        POST /api/workflow-schedules
        {
            "workflowId": "wf-1",
            "workflowName": "Nightly triage",
            "projectPath": "/srv/projects/api",
            "schedule": {"type": "cron", "cron": "0 9 * * *"}
        }

        Response (201):
        {"schedule": {"id": "schedule-1735722000000-k3x9qa", "nextRun": "...", ...}}
    """
    if not (body.workflow_id and body.workflow_name and body.project_path and body.schedule):
        raise ValidationError(
            "Missing required fields: workflowId, workflowName, projectPath, schedule"
        )

    spec = _parse_spec(body.schedule)
    schedule = scheduler.create_schedule(
        body.workflow_id, body.workflow_name, body.project_path, spec
    )
    return {"schedule": schedule.to_wire()}


@router.patch("")
def update_schedule(
    updates: ScheduleUpdate,
    scheduler: Scheduler,
    schedule_id: str | None = Query(None, alias="id"),
) -> dict[str, Any]:
    """Apply a partial update; ``nextRun`` is recomputed only when ``schedule`` changes."""
    schedule_id = _require_id(schedule_id)
    if updates.schedule is not None:
        updates.schedule.require_config()

    schedule = scheduler.update_schedule(schedule_id, updates)
    if schedule is None:
        raise NotFoundError("Schedule not found").with_context(schedule_id=schedule_id)
    return {"schedule": schedule.to_wire()}


@router.delete("")
def delete_schedule(
    scheduler: Scheduler,
    schedule_id: str | None = Query(None, alias="id"),
) -> dict[str, Any]:
    schedule_id = _require_id(schedule_id)
    if not scheduler.delete_schedule(schedule_id):
        raise NotFoundError("Schedule not found").with_context(schedule_id=schedule_id)
    return {"success": True}
