"""
Root Typer application for the crudkit CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

app = Typer(
    name="crudkit",
    help="crudkit — generic CRUD services and REST endpoints.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from crudkit import __version__

        typer.echo(f"crudkit {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """crudkit CLI — serve and administer the address-book sample."""


# ── Sub-command registration ─────────────────────────────────────────────

from crudkit.cli.db import app as db_app  # noqa: E402
from crudkit.cli.serve import app as serve_app  # noqa: E402

app.add_typer(db_app, name="db", help="Database operations.")
app.add_typer(serve_app, name="serve", help="API server.")


if __name__ == "__main__":
    app()
