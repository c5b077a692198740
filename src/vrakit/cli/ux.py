"""
CLI output helpers built on rich.

Respects NO_COLOR and FORCE_COLOR. Messages and tables go to stdout; errors
go to stderr so ``--output json`` stays machine readable.
"""

from __future__ import annotations

import json
import os
from contextlib import contextmanager
from typing import Any, Iterator

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.theme import Theme

VRAKIT_THEME = Theme(
    {
        "info": "#88C0D0",
        "success": "#A3BE8C",
        "warning": "#EBCB8B",
        "error": "#BF616A bold",
        "muted": "#D8DEE9",
    }
)

console = Console(
    theme=VRAKIT_THEME,
    force_terminal=os.environ.get("FORCE_COLOR") is not None,
    no_color=os.environ.get("NO_COLOR") is not None,
)

err_console = Console(
    theme=VRAKIT_THEME,
    stderr=True,
    no_color=os.environ.get("NO_COLOR") is not None,
)


@contextmanager
def spinner(message: str) -> Iterator[None]:
    """Show a transient spinner while awaiting the service."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=err_console,
        transient=True,
    ) as progress:
        progress.add_task(description=message, total=None)
        yield


def success(message: str) -> None:
    console.print(f"[success]✓ {message}[/success]")


def error(message: str) -> None:
    err_console.print(f"[error]✗ {message}[/error]")


def warning(message: str) -> None:
    err_console.print(f"[warning]⚠ {message}[/warning]")


def print_table(
    title: str,
    columns: list[str],
    rows: list[list[str]],
    show_header: bool = True,
) -> None:
    """Print a formatted table."""
    table = Table(title=title, show_header=show_header)

    for col in columns:
        table.add_column(col)

    for row in rows:
        table.add_row(*row)

    console.print(table)


def print_key_value(items: dict[str, Any], title: str | None = None) -> None:
    if title:
        console.print(f"\n[bold]{title}[/bold]")

    for key, value in items.items():
        console.print(f"  [cyan]{key}:[/cyan] {value}")


def print_json(data: Any) -> None:
    """Write ``data`` to stdout as indented JSON, without markup."""
    console.print_json(json.dumps(data, default=str))
