"""Static validation of workflow graphs."""

from __future__ import annotations

from .models import START_NODE_ID, ValidationIssue, ValidationResult, WorkflowEdge, WorkflowNode
from .validator import EMPTY_WORKFLOW_MESSAGE, WorkflowValidator

__all__ = [
    "START_NODE_ID",
    "EMPTY_WORKFLOW_MESSAGE",
    "ValidationIssue",
    "ValidationResult",
    "WorkflowEdge",
    "WorkflowNode",
    "WorkflowValidator",
]
