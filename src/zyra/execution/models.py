"""Execution records: live background executions and durable history entries."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import ConfigDict, Field, field_validator

from zyra.core.models import CamelModel

ExecutionStatus = Literal["running", "completed", "failed", "cancelled"]


class BackgroundExecution(CamelModel):
    """Live status of one workflow run. Held in memory only."""

    id: str
    workflow_id: str
    workflow_name: str
    project_path: str
    status: ExecutionStatus = "running"
    start_time: str
    end_time: str | None = None
    current_node: str | None = None
    progress: int = Field(default=0, ge=0, le=100)
    total_nodes: int = Field(default=0, ge=0)
    completed_nodes: int = Field(default=0, ge=0)
    logs: list[str] = Field(default_factory=list)
    error: str | None = None
    triggered_by: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status != "running"


class NodeResult(CamelModel):
    """Outcome of a single node within a finished execution."""

    node_id: str
    node_name: str
    node_type: Literal["agent", "service"]
    status: Literal["success", "failure"]
    output: Any = ""
    timestamp: str


class ExecutionMetadata(CamelModel):
    model_config = ConfigDict(extra="allow")

    triggered_by: str | None = None
    execution_count: int | None = None


class ExecutionHistoryEntry(CamelModel):
    """Durable record of a workflow run, stored most-recent-first."""

    id: str
    workflow_id: str
    workflow_name: str
    project_path: str
    status: ExecutionStatus
    start_time: str
    end_time: str | None = None
    duration: float | None = Field(default=None, description="Milliseconds")
    node_results: list[NodeResult] = Field(default_factory=list)
    error: str | None = None
    metadata: ExecutionMetadata | None = None


class ExecutionHistoryUpdate(CamelModel):
    """Partial update merged into an existing history entry.

    Only fields explicitly present are applied; ``id`` cannot be changed.
    """

    workflow_id: str | None = None
    workflow_name: str | None = None
    project_path: str | None = None
    status: ExecutionStatus | None = None
    start_time: str | None = None
    end_time: str | None = None
    duration: float | None = None
    node_results: list[NodeResult] | None = None
    error: str | None = None
    metadata: ExecutionMetadata | None = None

    @field_validator("workflow_id", "workflow_name", "project_path", "status", "start_time")
    @classmethod
    def _required_fields_not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("must not be null")
        return value


class ExecutionStatistics(CamelModel):
    """Aggregate counters over the stored history."""

    total_executions: int = 0
    successful_executions: int = 0
    failed_executions: int = 0
    average_duration: float = 0
    most_used_workflow: str | None = None
