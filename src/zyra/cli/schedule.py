"""
CLI ``zyra schedule``: read-only view of the schedules file.

Schedules are changed through the API so the running server's timers stay
in sync with the file.
"""

from __future__ import annotations

from pathlib import Path

import typer

from zyra.cli.utils import fail, load_settings, print_dict, print_json, print_table
from zyra.scheduling import ScheduleRepository

app = typer.Typer(no_args_is_help=True)

_COLUMNS = ["id", "workflowName", "enabled", "type", "nextRun", "lastRun", "runCount"]


def _load(data_dir: Path | None) -> ScheduleRepository:
    return ScheduleRepository(load_settings(data_dir=data_dir).schedules_file)


@app.command("list")
def list_schedules(
    workflow_id: str | None = typer.Option(None, "--workflow-id", "-w"),
    data_dir: Path | None = typer.Option(None, "--data-dir"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List stored schedules."""
    schedules = [
        s for s in _load(data_dir).load().values()
        if workflow_id is None or s.workflow_id == workflow_id
    ]
    rows = [s.to_wire() for s in schedules]
    if json_out:
        print_json(rows)
        return
    for row in rows:
        row["type"] = row["schedule"]["type"]
    print_table(rows, columns=_COLUMNS, title="Schedules")


@app.command("show")
def show_schedule(
    schedule_id: str = typer.Argument(..., help="Schedule ID"),
    data_dir: Path | None = typer.Option(None, "--data-dir"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Show one schedule."""
    schedule = _load(data_dir).load().get(schedule_id)
    if schedule is None:
        fail(f"Schedule not found: {schedule_id}")
    if json_out:
        print_json(schedule.to_wire())
    else:
        print_dict(schedule.to_wire(), title=f"Schedule: {schedule_id}")
