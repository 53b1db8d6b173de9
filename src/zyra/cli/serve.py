"""
CLI ``zyra serve``: start the API server (and the scheduler with it).
"""

from __future__ import annotations

import typer
import uvicorn

from zyra.cli.utils import console, load_settings
from zyra.core.logging import configure_logging

app = typer.Typer(no_args_is_help=True)


@app.command("start")
def start(
    host: str | None = typer.Option(None, "--host", "-h", help="Bind address (default: ZYRA_HOST)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port (default: ZYRA_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on changes"),
) -> None:
    """Start the zyra REST API server.

    Runs a single worker: schedule timers live in the server process, so
    several workers would fire every schedule several times.
    """
    settings = load_settings()
    host = host or settings.host
    port = port or settings.port
    configure_logging(level=settings.log_level, json_format=settings.log_json)

    console.print(f"[bold green]Starting zyra API[/bold green] on {host}:{port}")
    uvicorn.run(
        "zyra.api:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        workers=1,
        log_config=None,
        log_level=settings.log_level.lower(),
    )
