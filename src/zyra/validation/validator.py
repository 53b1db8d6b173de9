"""Workflow Validator: static analysis of a node/edge graph before execution.

Architecture::

    WorkflowValidator.validate(nodes, edges)
    │
    ├── malformed node or edge → error each, entry dropped
    ├── empty graph → empty-workflow error, stop
    ├── _check_start_node          error
    ├── _check_disconnected_nodes  warning per node
    ├── _check_start_outgoing      error
    ├── _check_cycles              warning
    ├── _check_dead_ends           warning (workflow endpoints)
    ├── _check_unconditioned_fanout  warning per node
    └── _check_agents              warning
    │
    ▼
    ValidationResult(errors, warnings); valid == no errors

Only the empty graph, a missing start node and a start node without
outgoing edges are errors. Cycles are tolerated (warning only).

Example::

    from zyra.validation import WorkflowValidator

    result = WorkflowValidator.validate(nodes, edges)
    if not result.valid:
        for issue in result.errors:
            print(issue.message)
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

import pydantic

from zyra.core.logging import get_logger

from .models import (
    START_NODE_ID,
    ValidationIssue,
    ValidationResult,
    WorkflowEdge,
    WorkflowNode,
)

logger = get_logger(__name__)

NodeLike = WorkflowNode | Mapping[str, Any]
EdgeLike = WorkflowEdge | Mapping[str, Any]


# ---------------------------------------------------------------------------
# Graph view
# ---------------------------------------------------------------------------

@dataclass
class _Graph:
    nodes: list[WorkflowNode]
    edges: list[WorkflowEdge]

    def outgoing(self, node_id: str) -> list[WorkflowEdge]:
        return [e for e in self.edges if e.source == node_id]

    def adjacency(self) -> dict[str, list[str]]:
        adjacency: dict[str, list[str]] = {}
        for edge in self.edges:
            adjacency.setdefault(edge.source, []).append(edge.target)
        return adjacency

    def has_start(self) -> bool:
        return any(n.id == START_NODE_ID for n in self.nodes)


def _describe(error: pydantic.ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first['msg']}" if location else first["msg"]


def _raw_id(raw: Any) -> str | None:
    value = raw.get("id") if isinstance(raw, Mapping) else None
    return value if isinstance(value, str) else None


def _coerce(
    nodes: Iterable[NodeLike], edges: Iterable[EdgeLike]
) -> tuple[_Graph, list[ValidationIssue]]:
    """Build the graph view; malformed entries are dropped and reported."""
    graph = _Graph(nodes=[], edges=[])
    malformed: list[ValidationIssue] = []

    for index, raw in enumerate(nodes):
        try:
            node = raw if isinstance(raw, WorkflowNode) else WorkflowNode.model_validate(raw)
        except pydantic.ValidationError as e:
            malformed.append(
                ValidationIssue(
                    "error", f"Node #{index} is malformed ({_describe(e)}).", node_id=_raw_id(raw)
                )
            )
            continue
        graph.nodes.append(node)

    for index, raw in enumerate(edges):
        try:
            edge = raw if isinstance(raw, WorkflowEdge) else WorkflowEdge.model_validate(raw)
        except pydantic.ValidationError as e:
            malformed.append(
                ValidationIssue(
                    "error", f"Edge #{index} is malformed ({_describe(e)}).", edge_id=_raw_id(raw)
                )
            )
            continue
        graph.edges.append(edge)

    return graph, malformed


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

Rule = Callable[[_Graph], list[ValidationIssue]]


def _check_start_node(graph: _Graph) -> list[ValidationIssue]:
    if graph.has_start():
        return []
    return [ValidationIssue("error", "Workflow must have a start node.")]


def _check_disconnected_nodes(graph: _Graph) -> list[ValidationIssue]:
    connected: set[str] = set()
    for edge in graph.edges:
        connected.add(edge.source)
        connected.add(edge.target)

    return [
        ValidationIssue(
            "warning",
            f'Node "{node.label}" is not connected to any other nodes.',
            node_id=node.id,
        )
        for node in graph.nodes
        if node.id != START_NODE_ID and node.id not in connected
    ]


def _check_start_outgoing(graph: _Graph) -> list[ValidationIssue]:
    if graph.has_start() and not graph.outgoing(START_NODE_ID):
        return [
            ValidationIssue(
                "error",
                "Start node must have at least one outgoing connection.",
                node_id=START_NODE_ID,
            )
        ]
    return []


def _has_cycle(graph: _Graph) -> bool:
    """Depth-first search with a recursion-stack set, rooted at every node in order."""
    adjacency = graph.adjacency()
    visited: set[str] = set()
    on_stack: set[str] = set()

    for node in graph.nodes:
        if node.id in visited:
            continue

        visited.add(node.id)
        on_stack.add(node.id)
        stack = [(node.id, iter(adjacency.get(node.id, ())))]

        while stack:
            current, targets = stack[-1]
            for target in targets:
                if target not in visited:
                    visited.add(target)
                    on_stack.add(target)
                    stack.append((target, iter(adjacency.get(target, ()))))
                    break
                if target in on_stack:
                    return True
            else:
                on_stack.discard(current)
                stack.pop()

    return False


def _check_cycles(graph: _Graph) -> list[ValidationIssue]:
    if _has_cycle(graph):
        return [
            ValidationIssue(
                "warning",
                "Workflow contains circular dependencies. This may cause infinite loops.",
            )
        ]
    return []


def _check_dead_ends(graph: _Graph) -> list[ValidationIssue]:
    sources = {e.source for e in graph.edges}
    dead_ends = [n for n in graph.nodes if n.id != START_NODE_ID and n.id not in sources]
    if not dead_ends:
        return []
    return [
        ValidationIssue(
            "warning",
            f"{len(dead_ends)} node(s) have no outgoing connections. "
            "These are workflow endpoints.",
        )
    ]


def _check_unconditioned_fanout(graph: _Graph) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for node in graph.nodes:
        outgoing = graph.outgoing(node.id)
        if len(outgoing) > 1 and any(not e.condition for e in outgoing):
            issues.append(
                ValidationIssue(
                    "warning",
                    f'Node "{node.label}" has multiple outgoing edges without conditions. '
                    "All edges will execute.",
                    node_id=node.id,
                )
            )
    return issues


def _check_agents(graph: _Graph) -> list[ValidationIssue]:
    if any(n.has_agent for n in graph.nodes):
        return []
    return [
        ValidationIssue(
            "warning",
            "Workflow contains no agents. Consider adding agents to perform tasks.",
        )
    ]


# Order matters: results keep rule order within errors and warnings.
_RULES: list[tuple[str, Rule]] = [
    ("check_start_node", _check_start_node),
    ("check_disconnected_nodes", _check_disconnected_nodes),
    ("check_start_outgoing", _check_start_outgoing),
    ("check_cycles", _check_cycles),
    ("check_dead_ends", _check_dead_ends),
    ("check_unconditioned_fanout", _check_unconditioned_fanout),
    ("check_agents", _check_agents),
]

EMPTY_WORKFLOW_MESSAGE = "Workflow is empty. Add at least one agent or service."


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

class WorkflowValidator:
    """Pre-flight checks for a workflow graph. Never raises on malformed nodes or edges."""

    @staticmethod
    def validate(nodes: Iterable[NodeLike], edges: Iterable[EdgeLike]) -> ValidationResult:
        """Classify graph defects into errors (blocking) and warnings."""
        graph, malformed = _coerce(nodes, edges)
        result = ValidationResult(errors=malformed)

        if not graph.nodes:
            result.errors.append(ValidationIssue("error", EMPTY_WORKFLOW_MESSAGE))
            return result

        for rule_name, rule in _RULES:
            try:
                issues = rule(graph)
            except Exception:
                logger.warning("validation_rule_failed", rule=rule_name, exc_info=True)
                issues = [
                    ValidationIssue("warning", f"Validation rule '{rule_name}' raised an exception.")
                ]
            for issue in issues:
                (result.errors if issue.type == "error" else result.warnings).append(issue)

        logger.debug(
            "workflow_validated",
            nodes=len(graph.nodes),
            edges=len(graph.edges),
            summary=result.summary(),
        )
        return result

    @staticmethod
    def get_reachable_nodes(nodes: Iterable[NodeLike], edges: Iterable[EdgeLike]) -> set[str]:
        """Ids reachable from ``start`` by breadth-first search (``start`` included)."""
        adjacency = _coerce(nodes, edges)[0].adjacency()
        reachable: set[str] = set()
        queue = deque([START_NODE_ID])

        while queue:
            current = queue.popleft()
            if current in reachable:
                continue
            reachable.add(current)
            queue.extend(t for t in adjacency.get(current, ()) if t not in reachable)

        return reachable

    @staticmethod
    def find_unreachable_nodes(
        nodes: Iterable[NodeLike], edges: Iterable[EdgeLike]
    ) -> list[WorkflowNode]:
        """Nodes not reachable from ``start``, in input order."""
        graph, _ = _coerce(nodes, edges)
        reachable = WorkflowValidator.get_reachable_nodes(graph.nodes, graph.edges)
        return [n for n in graph.nodes if n.id not in reachable]
