"""
Unit Test Fixtures.

Fixtures for unit tests - external dependencies are mocked.
Tests that need real SQL use the in-memory db_session from the root
conftest instead of these mocks.
"""

from datetime import datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from canvasnotes.backend.schemas.note import NoteResponse


# =============================================================================
# Database Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for unit tests.

    Usage:
        def test_service(mock_db_session: AsyncMock):
            service = NoteService(mock_db_session)
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    return session


# =============================================================================
# Note Fixtures
# =============================================================================


def make_note(**overrides: Any) -> NoteResponse:
    """Build a NoteResponse with sensible defaults."""
    values: dict[str, Any] = {
        "id": 1,
        "title": "Groceries",
        "content": "Milk, eggs",
        "position_x": 40,
        "position_y": 60,
        "width": 300,
        "height": 200,
        "created_at": datetime(2026, 10, 19, 9, 0, 0),
        "updated_at": datetime(2026, 10, 19, 9, 0, 0),
    }
    values.update(overrides)
    return NoteResponse(**values)


@pytest.fixture
def note_factory():
    """Provide make_note for building NoteResponse objects."""
    return make_note


@pytest.fixture
def mock_notes_client() -> AsyncMock:
    """
    Mock NotesClient for board tests.

    Usage:
        def test_board(mock_notes_client):
            mock_notes_client.get_notes.return_value = [note_factory()]
            board = CanvasBoard(mock_notes_client)
    """
    client = AsyncMock()
    client.get_notes = AsyncMock(return_value=[])
    client.create_note = AsyncMock()
    client.update_note = AsyncMock()
    client.update_note_position = AsyncMock()
    client.delete_note = AsyncMock()
    return client


# =============================================================================
# Logging Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_logger() -> MagicMock:
    """
    Mock logger for testing logging calls.

    Usage:
        def test_logging(mock_logger):
            with patch("module.logger", mock_logger):
                ...
                mock_logger.info.assert_called_once()
    """
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    logger.exception = MagicMock()
    return logger
