"""
Health Check Commands.

Commands for checking backend health and status.
"""

import asyncio

import httpx
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from canvasnotes.canvas.client import NotesClient

app = typer.Typer(help="Health check commands")
console = Console()


@app.command()
def status() -> None:
    """
    Check backend readiness, including the database (requires running server).

    Examples:
        notes_cli.py health status
    """
    asyncio.run(_status())


async def _status() -> None:
    """Async implementation of status command."""
    async with NotesClient() as client:
        try:
            response = await client.request("GET", "/health/ready")
        except httpx.HTTPError:
            console.print("[red]Error: Cannot connect to backend[/red]")
            console.print("[dim]Is the server running? Start with: python cli.py --service server[/dim]")
            raise typer.Exit(1)

    data = response.json()
    # 503 bodies wrap the report in FastAPI's "detail" field
    report = data.get("detail", data) if response.status_code == 503 else data
    _display_health(report)

    if response.status_code != 200:
        raise typer.Exit(1)


def _display_health(data: dict) -> None:
    """Display readiness results."""
    status = data.get("status", "unknown")
    status_color = "green" if status == "healthy" else "red"

    table = Table(title="Health Status", show_header=True)
    table.add_column("Component", style="cyan")
    table.add_column("Status")
    table.add_column("Details")

    for component, check_data in data.get("checks", {}).items():
        check_status = check_data.get("status", "unknown")
        color = "green" if check_status == "healthy" else "red" if check_status == "unhealthy" else "yellow"

        details = []
        if "latency_ms" in check_data:
            details.append(f"latency: {check_data['latency_ms']}ms")
        if "error" in check_data:
            details.append(f"error: {check_data['error']}")

        table.add_row(
            component,
            f"[{color}]{check_status}[/{color}]",
            ", ".join(details) if details else "-",
        )

    console.print(Panel(f"[{status_color}]{status.upper()}[/{status_color}]", title="Backend Status"))
    console.print(table)


@app.command()
def ping() -> None:
    """
    Simple ping to check if the note procedures are reachable.

    Examples:
        notes_cli.py health ping
    """
    asyncio.run(_ping())


async def _ping() -> None:
    """Async implementation of ping command."""
    async with NotesClient() as client:
        try:
            health = await client.healthcheck()
        except httpx.HTTPError:
            console.print("[red]✗ Backend is not reachable[/red]")
            raise typer.Exit(1)

    console.print(f"[green]✓ Backend is reachable[/green] [dim]({health.status} at {health.timestamp.isoformat()})[/dim]")
