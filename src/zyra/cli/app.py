"""
Root Typer application for the zyra CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from zyra import __version__
from zyra.core.logging import configure_logging

app = Typer(
    name="zyra",
    help="zyra: workflow scheduler, execution tracker and history.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"zyra {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str = typer.Option("WARNING", "--log-level", envvar="ZYRA_LOG_LEVEL"),
    log_json: bool = typer.Option(False, "--log-json", help="Emit JSON log lines"),
) -> None:
    """zyra CLI: serve the API, validate workflows, inspect schedules and history."""
    configure_logging(level=log_level, json_format=log_json)


# ── Sub-command registration ─────────────────────────────────────────────

from zyra.cli.history import app as history_app  # noqa: E402
from zyra.cli.schedule import app as schedule_app  # noqa: E402
from zyra.cli.serve import app as serve_app  # noqa: E402
from zyra.cli.workflow import app as workflow_app  # noqa: E402

app.add_typer(serve_app, name="serve", help="Start the API server.")
app.add_typer(workflow_app, name="workflow", help="Workflow graph checks.")
app.add_typer(schedule_app, name="schedule", help="Schedule inspection.")
app.add_typer(history_app, name="history", help="Execution history.")
