"""
Note Commands.

Commands for listing and editing notes on a running backend.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import httpx
import typer
from rich.console import Console
from rich.table import Table

from canvasnotes.backend.core.exceptions import ApplicationError, ValidationError
from canvasnotes.backend.schemas.note import NoteResponse
from canvasnotes.canvas.client import NotesClient

app = typer.Typer(help="Note commands")
console = Console()

T = TypeVar("T")


def _run(call: Callable[[NotesClient], Awaitable[T]]) -> T:
    """Run one client call, turning failures into a readable exit."""

    async def runner() -> T:
        async with NotesClient() as client:
            return await call(client)

    try:
        return asyncio.run(runner())
    except httpx.ConnectError:
        console.print("[red]Error: Cannot connect to backend[/red]")
        console.print("[dim]Is the server running? Start with: python cli.py --service server[/dim]")
        raise typer.Exit(1)
    except httpx.HTTPError as e:
        console.print(f"[red]Error: Request failed: {e}[/red]")
        raise typer.Exit(1)
    except ValidationError as e:
        console.print(f"[red]Invalid input: {e.message}[/red]")
        for error in e.details.get("validation_errors", []):
            console.print(f"[dim]  {error['field']}: {error['message']}[/dim]")
        raise typer.Exit(1)
    except ApplicationError as e:
        console.print(f"[red]Error ({e.code}): {e.message}[/red]")
        raise typer.Exit(1)


def _display_note(note: NoteResponse) -> None:
    console.print(
        f"[cyan]#{note.id}[/cyan] [bold]{note.title}[/bold] "
        f"at ({note.position_x}, {note.position_y}) size {note.width}x{note.height}"
    )
    if note.content:
        console.print(f"[dim]{note.content}[/dim]")


@app.command("list")
def list_notes() -> None:
    """
    List all notes, most recently updated first.

    Examples:
        notes_cli.py notes list
    """
    notes = _run(lambda client: client.get_notes())

    if not notes:
        console.print("[dim]No notes yet.[/dim]")
        return

    table = Table(title="Notes", show_header=True)
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Title", style="bold")
    table.add_column("Position")
    table.add_column("Size")
    table.add_column("Updated")

    for note in notes:
        table.add_row(
            str(note.id),
            note.title,
            f"{note.position_x}, {note.position_y}",
            f"{note.width}x{note.height}",
            note.updated_at.strftime("%Y-%m-%d %H:%M:%S"),
        )

    console.print(table)


@app.command()
def create(
    title: str = typer.Argument(..., help="Note title"),
    content: str | None = typer.Option(None, "--content", "-c", help="Note body"),
    x: int | None = typer.Option(None, "--x", help="Left edge in pixels"),
    y: int | None = typer.Option(None, "--y", help="Top edge in pixels"),
    width: int | None = typer.Option(None, "--width", "-w", help="Width in pixels"),
    height: int | None = typer.Option(None, "--height", "-h", help="Height in pixels"),
) -> None:
    """
    Create a note. Omitted options take their defaults.

    Examples:
        notes_cli.py notes create "Groceries" -c "Milk, eggs"
        notes_cli.py notes create "Ideas" --x 400 --y 120
    """
    fields: dict[str, Any] = {
        "content": content,
        "position_x": x,
        "position_y": y,
        "width": width,
        "height": height,
    }
    note = _run(lambda client: client.create_note(title, **fields))
    console.print("[green]✓ Note created[/green]")
    _display_note(note)


@app.command()
def edit(
    note_id: int = typer.Argument(..., help="Note to edit"),
    title: str | None = typer.Option(None, "--title", "-t", help="New title"),
    content: str | None = typer.Option(None, "--content", "-c", help="New body"),
) -> None:
    """
    Change a note's title or content. Omitted options stay unchanged.

    Examples:
        notes_cli.py notes edit 3 --title "Groceries (Sat)"
    """
    note = _run(lambda client: client.update_note(note_id, title=title, content=content))
    console.print("[green]✓ Note updated[/green]")
    _display_note(note)


@app.command()
def move(
    note_id: int = typer.Argument(..., help="Note to move"),
    x: int = typer.Option(..., "--x", help="New left edge in pixels"),
    y: int = typer.Option(..., "--y", help="New top edge in pixels"),
    width: int | None = typer.Option(None, "--width", "-w", help="New width in pixels"),
    height: int | None = typer.Option(None, "--height", "-h", help="New height in pixels"),
) -> None:
    """
    Move (and optionally resize) a note.

    Examples:
        notes_cli.py notes move 3 --x 420 --y 120
        notes_cli.py notes move 3 --x -50 --y 0 -w 400 -h 250
    """
    note = _run(
        lambda client: client.update_note_position(note_id, x, y, width=width, height=height)
    )
    console.print("[green]✓ Note moved[/green]")
    _display_note(note)


@app.command()
def delete(
    note_id: int = typer.Argument(..., help="Note to delete"),
) -> None:
    """
    Delete a note. Succeeds even if the note is already gone.

    Examples:
        notes_cli.py notes delete 3
    """
    _run(lambda client: client.delete_note(note_id))
    console.print(f"[green]✓ Note {note_id} deleted[/green]")
