"""
Execution history router.

GET    /execution-history[?workflowId= | ?projectPath= | ?limit=]
POST   /execution-history
PATCH  /execution-history?id=
DELETE /execution-history[?id=]          (without id: clear everything)
GET    /execution-history/statistics
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query

from zyra.api.deps import History
from zyra.core.errors import NotFoundError, ValidationError
from zyra.execution import ExecutionHistoryEntry, ExecutionHistoryUpdate

router = APIRouter(prefix="/execution-history")


@router.get("")
def list_history(
    history: History,
    workflow_id: str | None = Query(None, alias="workflowId"),
    project_path: str | None = Query(None, alias="projectPath"),
    limit: int | None = Query(None, ge=0),
) -> dict[str, Any]:
    """Filters are exclusive and checked in order: workflow, project, limit."""
    if workflow_id:
        entries = history.get_workflow_history(workflow_id)
    elif project_path:
        entries = history.get_project_history(project_path)
    elif limit is not None:
        entries = history.get_recent_history(limit)
    else:
        entries = history.load_history()
    return {"history": [e.to_wire() for e in entries]}


@router.get("/statistics")
def history_statistics(history: History) -> dict[str, Any]:
    """Totals, success/failure counts, average duration (ms) and busiest workflow.

    Example:
        GET /api/execution-history/statistics

        Response:
        {
            "statistics": {
                "totalExecutions": 12,
                "successfulExecutions": 10,
                "failedExecutions": 2,
                "averageDuration": 48250.5,
                "mostUsedWorkflow": "Nightly triage"
            }
        }
    """
    return {"statistics": history.get_statistics().to_wire()}


@router.post("", status_code=201)
def add_history_entry(entry: ExecutionHistoryEntry, history: History) -> dict[str, Any]:
    return {"entry": history.add_execution(entry).to_wire()}


@router.patch("")
def update_history_entry(
    updates: ExecutionHistoryUpdate,
    history: History,
    execution_id: str | None = Query(None, alias="id"),
) -> dict[str, Any]:
    if not execution_id:
        raise ValidationError("Execution ID is required", field="id")
    if history.update_execution(execution_id, updates) is None:
        raise NotFoundError("Execution not found").with_context(execution_id=execution_id)
    return {"success": True}


@router.delete("")
def delete_history(
    history: History,
    execution_id: str | None = Query(None, alias="id"),
) -> dict[str, Any]:
    if execution_id:
        history.delete_execution(execution_id)
        return {"message": "Execution deleted successfully"}
    history.clear_history()
    return {"message": "All history cleared successfully"}
