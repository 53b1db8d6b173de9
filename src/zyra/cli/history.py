"""
CLI ``zyra history``: inspect and prune the execution history file.
"""

from __future__ import annotations

from pathlib import Path

import typer

from zyra.cli.utils import console, load_settings, print_dict, print_json, print_table
from zyra.execution import ExecutionHistoryManager

app = typer.Typer(no_args_is_help=True)

_COLUMNS = ["id", "workflowName", "status", "startTime", "duration", "error"]


def _manager(history_dir: Path | None) -> ExecutionHistoryManager:
    settings = load_settings(history_dir=history_dir)
    return ExecutionHistoryManager(settings.history_file, limit=settings.history_limit)


@app.command("list")
def list_history(
    workflow_id: str | None = typer.Option(None, "--workflow-id", "-w"),
    project_path: str | None = typer.Option(None, "--project-path", "-p"),
    limit: int = typer.Option(10, "--limit", "-n", min=0),
    history_dir: Path | None = typer.Option(None, "--history-dir"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List recent executions, most recent first."""
    manager = _manager(history_dir)
    if workflow_id:
        entries = manager.get_workflow_history(workflow_id)[:limit]
    elif project_path:
        entries = manager.get_project_history(project_path)[:limit]
    else:
        entries = manager.get_recent_history(limit)

    rows = [e.to_wire() for e in entries]
    if json_out:
        print_json(rows)
    else:
        print_table(rows, columns=_COLUMNS, title="Execution History")


@app.command("stats")
def history_stats(
    history_dir: Path | None = typer.Option(None, "--history-dir"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Show aggregate execution statistics."""
    stats = _manager(history_dir).get_statistics().to_wire()
    if json_out:
        print_json(stats)
    else:
        print_dict(stats, title="Execution Statistics")


@app.command("delete")
def delete_entry(
    execution_id: str = typer.Argument(..., help="Execution ID"),
    history_dir: Path | None = typer.Option(None, "--history-dir"),
) -> None:
    """Delete a single history entry."""
    if _manager(history_dir).delete_execution(execution_id):
        console.print(f"[green]Deleted[/green] {execution_id}")
    else:
        console.print(f"[dim]No entry {execution_id}[/dim]")


@app.command("clear")
def clear_history(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    history_dir: Path | None = typer.Option(None, "--history-dir"),
) -> None:
    """Delete every history entry."""
    manager = _manager(history_dir)
    if not yes:
        typer.confirm(f"Clear all history in {manager.path}?", abort=True)
    manager.clear_history()
    console.print("[green]All history cleared[/green]")
