"""
CLI utility helpers — consoles and output formatting.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from rich.console import Console
from rich.table import Table

console = Console()
err_console = Console(stderr=True)


def print_rows(rows: list[Mapping[str, Any]], *, title: str = "", as_json: bool = False) -> None:
    """Render a list of flat mappings as a table (or JSON)."""
    if as_json:
        console.print_json(json.dumps(list(rows), default=str))
        return
    if not rows:
        console.print("[dim]No items.[/dim]")
        return

    table = Table(title=title or None, show_lines=False)
    columns = list(rows[0].keys())
    for column in columns:
        table.add_column(column, overflow="fold")
    for row in rows:
        table.add_row(*(str(row.get(column, "")) for column in columns))
    console.print(table)
