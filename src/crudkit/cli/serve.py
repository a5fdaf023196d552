"""
CLI: ``crudkit serve`` — start the address-book API server.
"""

from __future__ import annotations

import typer
import uvicorn

from crudkit.api.deps import get_settings
from crudkit.cli.utils import console
from crudkit.core.logging import configure_logging

app = typer.Typer(no_args_is_help=True)


@app.command("start")
def start(
    host: str | None = typer.Option(None, "--host", "-h", help="Bind address (default: settings)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port (default: settings)"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on changes"),
    workers: int = typer.Option(1, "--workers", "-w", help="Number of workers"),
    log_level: str = typer.Option("info", "--log-level"),
) -> None:
    """Start the address-book REST API server."""
    settings = get_settings()
    host = host or settings.host
    port = port or settings.port

    configure_logging(level=log_level.upper(), json_format=settings.json_logs, service="crudkit")
    console.print(f"[bold green]Starting crudkit address book[/bold green] on {host}:{port}")
    uvicorn.run(
        "crudkit.addressbook:create_addressbook_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_level=log_level,
    )
