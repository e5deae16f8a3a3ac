#!/usr/bin/env python3
"""
Command-line client for a running Canvas Notes server.

    python notes_cli.py notes list
    python notes_cli.py notes create "Groceries" -c "Milk"
    python notes_cli.py notes edit 3 --title "Groceries (Sat)"
    python notes_cli.py notes move 3 --x 420 --y 120
    python notes_cli.py notes delete 3
    python notes_cli.py health ping
    python notes_cli.py health status
"""

import sys
from pathlib import Path

import structlog
import typer
from rich.console import Console

project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from canvasnotes.backend.core.logging import setup_logging
from canvasnotes.cli.commands import health_app, notes_app

app = typer.Typer(
    name="notes",
    help="List, create, edit, move and delete notes on a running server.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
app.add_typer(notes_app, name="notes")
app.add_typer(health_app, name="health")

console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="INFO level logging"),
    debug: bool = typer.Option(False, "--debug", "-d", help="DEBUG level logging"),
) -> None:
    """List, create, edit, move and delete notes on a running server."""
    if not (project_root / ".project_root").exists():
        console.print("[red]Error: .project_root not found. Run from project root.[/red]")
        raise typer.Exit(1)

    setup_logging(level="DEBUG" if debug else "INFO" if verbose else "WARNING", format_type="console")
    structlog.contextvars.bind_contextvars(source="cli")


if __name__ == "__main__":
    app()
