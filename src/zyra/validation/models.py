"""Workflow graph and validation result models.

Nodes and edges mirror the canvas JSON; unknown keys (positions, styling)
are kept but ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

START_NODE_ID = "start"


class WorkflowNode(BaseModel):
    """A canvas node: the ``start`` node, an agent node or a service node."""

    model_config = ConfigDict(extra="allow")

    id: str
    type: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)

    @field_validator("data", mode="before")
    @classmethod
    def _null_data_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def label(self) -> str:
        """Agent name, else service name, else the node id."""
        agent = self.data.get("agent")
        if isinstance(agent, dict) and agent.get("name"):
            return str(agent["name"])
        if self.data.get("serviceName"):
            return str(self.data["serviceName"])
        return self.id

    @property
    def has_agent(self) -> bool:
        return self.type == "agentNode" or bool(self.data.get("agent"))


class WorkflowEdge(BaseModel):
    """A directed canvas edge, optionally carrying a branch condition."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    source: str
    target: str
    data: dict[str, Any] | None = None

    @property
    def condition(self) -> Any:
        return (self.data or {}).get("condition")


@dataclass(frozen=True)
class ValidationIssue:
    """A single validation finding.

    Attributes:
        type: ``error`` (blocks execution) or ``warning`` (informational).
        message: Human-readable description.
        node_id: Offending node, if any.
        edge_id: Offending edge, if any.
    """

    type: Literal["error", "warning"]
    message: str
    node_id: str | None = None
    edge_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"type": self.type, "message": self.message}
        if self.node_id is not None:
            result["nodeId"] = self.node_id
        if self.edge_id is not None:
            result["edgeId"] = self.edge_id
        return result

    def __str__(self) -> str:
        location = f" [{self.node_id}]" if self.node_id else ""
        return f"{self.type.upper()}{location}: {self.message}"


@dataclass
class ValidationResult:
    """Outcome of validating a workflow graph. Never persisted."""

    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        """True if there are no errors; warnings never block execution."""
        return not self.errors

    def summary(self) -> str:
        status = "VALID" if self.valid else "INVALID"
        return f"{status} | {len(self.errors)} errors | {len(self.warnings)} warnings"

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": [issue.to_dict() for issue in self.errors],
            "warnings": [issue.to_dict() for issue in self.warnings],
        }
