"""
CLI ``zyra workflow``: offline workflow graph checks.
"""

from __future__ import annotations

import json
from pathlib import Path

import pydantic
import typer

from zyra.cli.utils import console, fail, print_json
from zyra.validation import WorkflowEdge, WorkflowNode, WorkflowValidator

app = typer.Typer(no_args_is_help=True)


@app.command("validate")
def validate_workflow(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Workflow JSON file"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Validate a workflow file (``{"nodes": [...], "edges": [...]}``).

    Exits with code 1 when the workflow has errors; warnings never fail.
    """
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
        nodes = [WorkflowNode.model_validate(n) for n in document.get("nodes", [])]
        edges = [WorkflowEdge.model_validate(e) for e in document.get("edges", [])]
    except (ValueError, AttributeError, pydantic.ValidationError) as e:
        fail(f"Cannot read workflow from {path}: {e}")

    result = WorkflowValidator.validate(nodes, edges)
    unreachable = WorkflowValidator.find_unreachable_nodes(nodes, edges)

    if json_out:
        print_json({**result.to_dict(), "unreachable": [n.id for n in unreachable]})
    else:
        color = "green" if result.valid else "red"
        console.print(f"[bold {color}]{result.summary()}[/bold {color}]")
        for issue in result.errors:
            console.print(f"  [red]✗[/red] {issue}")
        for issue in result.warnings:
            console.print(f"  [yellow]![/yellow] {issue}")
        if unreachable:
            names = ", ".join(n.label for n in unreachable)
            console.print(f"  [dim]Unreachable from start: {names}[/dim]")

    if not result.valid:
        raise typer.Exit(code=1)
