"""Unit tests for the service CLI (cli.py)."""

from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

import cli

runner = CliRunner()


@pytest.fixture(autouse=True)
def _no_logging_setup():
    """Keep the CLI from reconfiguring the root logger."""
    with patch("cli.setup_logging"):
        yield


class TestInfo:
    """Tests for --service info."""

    def test_is_default_service(self) -> None:
        result = runner.invoke(cli.main, [])

        assert result.exit_code == 0
        assert "Name: Canvas Notes" in result.output
        assert "notes_cli.py notes list" in result.output


class TestConfig:
    """Tests for --service config."""

    def test_shows_every_section(self) -> None:
        result = runner.invoke(cli.main, ["--service", "config"])

        assert result.exit_code == 0
        assert "Application Settings" in result.output
        assert "Database Settings" in result.output
        assert "Logging Settings" in result.output
        assert "driver: sqlite+aiosqlite" in result.output


class TestHealth:
    """Tests for --service health."""

    def test_all_checks_pass(self) -> None:
        result = runner.invoke(cli.main, ["--service", "health"])

        assert result.exit_code == 0
        assert "All checks passed" in result.output
        assert "Table: notes" in result.output


class TestServerLifecycle:
    """Tests for --action on the server service."""

    def test_status_running(self) -> None:
        with patch("cli._find_process_on_port", return_value=[4321]):
            result = runner.invoke(
                cli.main, ["--service", "server", "--action", "status", "--port", "2022"]
            )

        assert result.exit_code == 0
        assert "running on port 2022 (PID: 4321)" in result.output

    def test_status_not_running(self) -> None:
        with patch("cli._find_process_on_port", return_value=[]):
            result = runner.invoke(cli.main, ["--service", "server", "--action", "status"])

        assert "is not running" in result.output

    def test_stop_without_process(self) -> None:
        with patch("cli._find_process_on_port", return_value=[]), \
             patch("cli.os.kill") as mock_kill:
            result = runner.invoke(
                cli.main, ["--service", "server", "--action", "stop", "--port", "2022"]
            )

        assert "No server running on port 2022" in result.output
        mock_kill.assert_not_called()

    def test_start_runs_uvicorn(self) -> None:
        with patch("cli.subprocess.run") as mock_run:
            result = runner.invoke(
                cli.main, ["--service", "server", "--host", "0.0.0.0", "--port", "9000"]
            )

        assert result.exit_code == 0
        cmd = mock_run.call_args.args[0]
        assert "canvasnotes.backend.main:app" in cmd
        assert cmd[cmd.index("--host") + 1] == "0.0.0.0"
        assert cmd[cmd.index("--port") + 1] == "9000"


class TestMigrate:
    """Tests for --service migrate."""

    def test_upgrade_invokes_alembic(self) -> None:
        with patch("cli.subprocess.run", return_value=MagicMock(returncode=0)) as mock_run:
            result = runner.invoke(
                cli.main, ["--service", "migrate", "--migrate-action", "upgrade"]
            )

        assert result.exit_code == 0
        cmd = mock_run.call_args.args[0]
        assert cmd[1:3] == ["-m", "alembic"]
        assert cmd[-2:] == ["upgrade", "head"]

    def test_autogenerate_requires_message(self) -> None:
        result = runner.invoke(
            cli.main, ["--service", "migrate", "--migrate-action", "autogenerate"]
        )

        assert result.exit_code == 1
        assert "--message/-m required" in result.output
