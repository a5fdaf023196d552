"""
CLI: ``crudkit db`` — address-book database commands.
"""

from __future__ import annotations

import typer

from crudkit.cli.utils import console, err_console, print_rows
from crudkit.core.errors import CrudError

app = typer.Typer(no_args_is_help=True)


def _settings(database: str | None):
    from crudkit.api.settings import CrudAPISettings

    return CrudAPISettings(database_url=database) if database else CrudAPISettings()


@app.command()
def init(
    database: str | None = typer.Option(None, "--database", "-d", help="SQLAlchemy URL (default: settings)"),
) -> None:
    """Create the address-book tables."""
    from crudkit.addressbook.app import init_schema
    from crudkit.core.orm import create_crud_engine

    settings = _settings(database)
    engine = create_crud_engine(settings.database_url)
    try:
        tables = init_schema(engine)
    finally:
        engine.dispose()
    console.print(f"[green]Initialised[/green] {', '.join(tables)} in {settings.database_url}")


@app.command()
def tables(
    database: str | None = typer.Option(None, "--database", "-d", help="SQLAlchemy URL (default: settings)"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Show row counts of the address-book tables."""
    from crudkit.addressbook.app import build_addressbook

    book = build_addressbook(_settings(database))
    try:
        rows = [
            {"table": service.entity_name, "rows": service.count()}
            for service in (book.contacts, book.tags)
        ]
    except CrudError as exc:
        err_console.print(f"[bold red]Error[/bold red] ({exc.category.value}): {exc.message}")
        raise typer.Exit(code=1) from exc
    finally:
        book.engine.dispose()
    print_rows(rows, title="Table Counts", as_json=json_out)
