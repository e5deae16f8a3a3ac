#!/usr/bin/env python3
"""
Canvas Notes service runner.

Runs the notes API and the maintenance tasks around it. Note commands that
talk to a running server live in notes_cli.py.

Usage:
    python cli.py                                   # project info
    python cli.py --service server --reload
    python cli.py --service server --action status
    python cli.py --service health
    python cli.py --service migrate --migrate-action upgrade
"""

import os
import signal
import subprocess
import sys
import time
from pathlib import Path

import click
import structlog

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from canvasnotes.backend.core.logging import get_logger, setup_logging

ALEMBIC_INI = PROJECT_ROOT / "canvasnotes" / "backend" / "migrations" / "alembic.ini"

# alembic arguments per --migrate-action; {revision} is filled from --revision
MIGRATE_COMMANDS = {
    "upgrade": ["upgrade", "{revision}"],
    "downgrade": ["downgrade", "{revision}"],
    "current": ["current"],
    "history": ["history", "--verbose"],
    "autogenerate": ["revision", "--autogenerate", "-m", "{message}"],
}

SERVICES = {
    "server": "Notes API (uvicorn)",
    "health": "Load config, database URL, app and models",
    "config": "Print the merged YAML settings",
    "migrate": "Alembic migrations for the notes table",
    "info": "Show this overview",
}


def _fail(message: str) -> None:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


def _app_config():
    from canvasnotes.backend.core.config import get_app_config

    return get_app_config()


def _find_process_on_port(port: int) -> list[int]:
    """PIDs listening on a TCP port, via lsof."""
    result = subprocess.run(["lsof", "-ti", f":{port}"], capture_output=True, text=True)
    return [int(pid) for pid in result.stdout.split() if pid.strip()]


def _format_pids(pids: list[int]) -> str:
    return ", ".join(str(pid) for pid in pids)


def server_status(port: int) -> None:
    pids = _find_process_on_port(port)
    if pids:
        click.echo(f"Server is running on port {port} (PID: {_format_pids(pids)}).")
    else:
        click.echo(f"Server is not running on port {port}.")


def server_stop(logger, port: int) -> None:
    pids = _find_process_on_port(port)
    if not pids:
        click.echo(f"No server running on port {port}.")
        return

    for pid in pids:
        os.kill(pid, signal.SIGINT)
        logger.info("Sent SIGINT to server", extra={"pid": pid, "port": port})
    click.echo(f"Server on port {port} stopped (PID: {_format_pids(pids)}).")


def server_start(logger, host: str | None, port: int | None, reload: bool) -> None:
    """Run uvicorn in the foreground until interrupted."""
    server = _app_config().application.server
    host = host or server.host
    port = port or server.port

    cmd = [
        sys.executable, "-m", "uvicorn", "canvasnotes.backend.main:app",
        "--host", host,
        "--port", str(port),
    ]
    if reload:
        cmd.append("--reload")

    logger.info("Starting server", extra={"host": host, "port": port, "reload": reload})
    click.echo(f"Serving notes at http://{host}:{port} (Ctrl+C to stop)\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server exited with an error", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def _check_config() -> str:
    return f"App: {_app_config().application.name}"


def _check_database_url() -> str:
    from canvasnotes.backend.core.config import get_database_url

    # Drop credentials from PostgreSQL URLs
    return get_database_url().split("@")[-1]


def _check_app() -> str:
    from canvasnotes.backend.main import get_app

    return f"Title: {get_app().title}"


def _check_models() -> str:
    from canvasnotes.backend.models.note import Note

    return f"Table: {Note.__tablename__}"


HEALTH_CHECKS = [
    ("YAML configuration", _check_config),
    ("Database URL", _check_database_url),
    ("FastAPI application", _check_app),
    ("Database models", _check_models),
]


def check_health(logger) -> None:
    """Import-level health: everything the server needs at startup."""
    click.echo("Health Check Results:")
    click.echo("-" * 50)

    failed = 0
    for name, check in HEALTH_CHECKS:
        try:
            detail = check()
        except Exception as e:
            failed += 1
            logger.error("Health check failed", extra={"check": name, "error": str(e)})
            click.echo(f"  {click.style('✗ FAIL', fg='red')}  {name} ({e})")
        else:
            click.echo(f"  {click.style('✓ PASS', fg='green')}  {name} ({detail})")

    click.echo("-" * 50)
    if failed:
        click.echo(click.style(f"\n{failed} check(s) failed.", fg="yellow"))
        sys.exit(1)
    click.echo(click.style("\nAll checks passed!", fg="green"))


def _echo_tree(values: dict, indent: int = 2) -> None:
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{' ' * indent}{key}:")
            _echo_tree(value, indent + 2)
        else:
            click.echo(f"{' ' * indent}{key}: {value}")


def show_config() -> None:
    config = _app_config()
    for title, section in (
        ("Application Settings", config.application),
        ("Database Settings", config.database),
        ("Logging Settings", config.logging),
    ):
        click.echo(f"{title}:")
        _echo_tree(section.model_dump())
        click.echo()


def show_info() -> None:
    application = _app_config().application
    click.echo(f"Name: {application.name}")
    click.echo(f"Version: {application.version}")
    click.echo(f"Description: {application.description}")

    click.echo("\nServices (--service):")
    for name, summary in SERVICES.items():
        click.echo(f"  {name:<10} {summary}")

    click.echo("\nServer actions (--action): start (default), stop, restart, status")
    click.echo("\nNote commands (need a running server):")
    click.echo("  python notes_cli.py notes list")
    click.echo("  python notes_cli.py notes move 3 --x 420 --y 120")


def run_migrations(logger, action: str, revision: str, message: str | None) -> None:
    if not ALEMBIC_INI.exists():
        _fail(f"{ALEMBIC_INI.relative_to(PROJECT_ROOT)} not found.")
    if action == "autogenerate" and not message:
        _fail("--message/-m required for autogenerate.")

    args = [arg.format(revision=revision, message=message) for arg in MIGRATE_COMMANDS[action]]
    cmd = [sys.executable, "-m", "alembic", "-c", str(ALEMBIC_INI), *args]

    logger.info("Running migrations", extra={"action": action, "revision": revision})
    result = subprocess.run(cmd, cwd=PROJECT_ROOT)
    if result.returncode != 0:
        logger.error("Migration failed", extra={"exit_code": result.returncode})
        sys.exit(result.returncode)


@click.command()
@click.option("--service", "-s", type=click.Choice(list(SERVICES)), default="info",
              help="What to run.")
@click.option("--action", "-a", type=click.Choice(["start", "stop", "restart", "status"]),
              default="start", help="Server lifecycle action.")
@click.option("--verbose", "-v", is_flag=True, help="INFO level logging.")
@click.option("--debug", "-d", is_flag=True, help="DEBUG level logging.")
@click.option("--host", default=None, help="Server host (default from application.yaml).")
@click.option("--port", default=None, type=int, help="Server port (default from application.yaml).")
@click.option("--reload", is_flag=True, help="Auto-reload the server on code changes.")
@click.option("--migrate-action", type=click.Choice(list(MIGRATE_COMMANDS)), default="current",
              help="Alembic action.")
@click.option("--revision", default="head", help="Target revision for upgrade/downgrade.")
@click.option("-m", "--message", default=None, help="Revision message for autogenerate.")
def main(
    service: str,
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
    migrate_action: str,
    revision: str,
    message: str | None,
) -> None:
    """
    Run and maintain the Canvas Notes backend.

    \b
    Examples:
        python cli.py --service server --action restart --port 8099
        python cli.py --service migrate --migrate-action autogenerate -m "add color"
    """
    if not (PROJECT_ROOT / ".project_root").exists():
        _fail(".project_root not found. Run from project root.")

    level = "DEBUG" if debug else "INFO" if verbose else "WARNING"
    setup_logging(level=level, format_type="console")
    structlog.contextvars.bind_contextvars(source="cli")
    logger = get_logger(__name__)

    if service == "server":
        server_port = port if port is not None else _app_config().application.server.port
        if action == "status":
            server_status(server_port)
            return
        if action in ("stop", "restart"):
            server_stop(logger, server_port)
            if action == "stop":
                return
            time.sleep(2)
        server_start(logger, host, port, reload)
    elif service == "health":
        check_health(logger)
    elif service == "config":
        show_config()
    elif service == "migrate":
        run_migrations(logger, migrate_action, revision, message)
    else:
        show_info()


if __name__ == "__main__":
    main()
