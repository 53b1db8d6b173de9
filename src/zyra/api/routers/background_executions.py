"""
Background execution router: live execution status board.

GET    /background-executions[?id= | ?status=running]
POST   /background-executions            (target of the scheduler trigger)
DELETE /background-executions?id=        (cancel)
POST   /background-executions/cleanup
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query
from pydantic import Field

from zyra.api.deps import Executions
from zyra.core.errors import NotFoundError, ValidationError
from zyra.core.models import CamelModel

router = APIRouter(prefix="/background-executions")


class StartExecutionBody(CamelModel):
    """Request body for registering a new background execution."""

    workflow_id: str
    workflow_name: str
    project_path: str
    total_nodes: int = Field(default=0, ge=0)
    triggered_by: str | None = None


@router.get("")
def list_executions(
    executions: Executions,
    execution_id: str | None = Query(None, alias="id"),
    status: str | None = Query(None),
) -> dict[str, Any]:
    """Return one execution by id, the running ones, or all of them."""
    if execution_id:
        execution = executions.get_execution(execution_id)
        if execution is None:
            raise NotFoundError("Execution not found").with_context(execution_id=execution_id)
        return {"execution": execution.to_wire()}

    if status == "running":
        items = executions.get_running_executions()
    else:
        items = executions.get_all_executions()
    return {"executions": [e.to_wire() for e in items]}


@router.post("", status_code=201)
def start_execution(body: StartExecutionBody, executions: Executions) -> dict[str, Any]:
    """Register a running execution.

    Example:
        POST /api/background-executions
        {"workflowId": "wf-1", "workflowName": "Nightly triage",
         "projectPath": "/srv/projects/api", "triggeredBy": "scheduler"}

        Response (201):
        {"execution": {"id": "bg_exec_1735722000000_k3x9qa7zp", "status": "running", ...}}
    """
    execution_id = executions.create_execution(
        body.workflow_id,
        body.workflow_name,
        body.project_path,
        total_nodes=body.total_nodes,
        triggered_by=body.triggered_by,
    )
    return {"execution": executions.get_execution(execution_id).to_wire()}


@router.delete("")
def cancel_execution(
    executions: Executions,
    execution_id: str | None = Query(None, alias="id"),
) -> dict[str, Any]:
    """Mark an execution cancelled. Unknown ids are accepted silently."""
    if not execution_id:
        raise ValidationError("Execution ID is required", field="id")
    executions.cancel_execution(execution_id)
    return {"success": True}


@router.post("/cleanup")
def cleanup_executions(executions: Executions) -> dict[str, Any]:
    removed = executions.cleanup()
    return {"removed": removed, "remaining": len(executions.get_all_executions())}
