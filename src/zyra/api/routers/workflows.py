"""
Workflow router: pre-flight validation of a canvas graph.

POST /workflows/validate
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, Field

from zyra.validation import WorkflowEdge, WorkflowNode, WorkflowValidator

router = APIRouter(prefix="/workflows")


class ValidateWorkflowBody(BaseModel):
    """Request body: the graph as drawn on the canvas."""

    nodes: list[WorkflowNode] = Field(default_factory=list)
    edges: list[WorkflowEdge] = Field(default_factory=list)


@router.post("/validate")
def validate_workflow(body: ValidateWorkflowBody) -> dict[str, Any]:
    """Validate a workflow graph without running it.

    ``valid`` is false only for errors; warnings are informational.
    ``reachable`` lists node ids reachable from ``start``, ``unreachable``
    the remaining node ids in input order.

    Example:
        POST /api/workflows/validate
        {"nodes": [{"id": "start"}, {"id": "a", "type": "agentNode"}],
         "edges": [{"id": "e1", "source": "start", "target": "a"}]}

        Response:
        {
            "validation": {"valid": true, "errors": [], "warnings": [...]},
            "reachable": ["a", "start"],
            "unreachable": []
        }
    """
    result = WorkflowValidator.validate(body.nodes, body.edges)
    reachable = WorkflowValidator.get_reachable_nodes(body.nodes, body.edges)
    unreachable = WorkflowValidator.find_unreachable_nodes(body.nodes, body.edges)
    return {
        "validation": result.to_dict(),
        "reachable": sorted(reachable),
        "unreachable": [node.id for node in unreachable],
    }
