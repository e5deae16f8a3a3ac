"""
Integration Tests for the Database handle.

Covers the connect/dispose lifecycle and the commit-or-rollback
behaviour of Database.session() against real SQLite.
"""

import pytest
from sqlalchemy import func, select

from canvasnotes.backend.core.database import Database
from canvasnotes.backend.models.note import Note
from canvasnotes.backend.repositories.note import NoteRepository


def note_values(title: str = "A") -> dict:
    return {
        "title": title,
        "content": "",
        "position_x": 0,
        "position_y": 0,
        "width": 300,
        "height": 200,
    }


async def count_notes(database: Database) -> int:
    async with database.session() as session:
        return await session.scalar(select(func.count()).select_from(Note))


class TestLifecycle:
    """Tests for connect and dispose."""

    @pytest.mark.asyncio
    async def test_not_connected_until_connect(self):
        database = Database("sqlite+aiosqlite:///:memory:")

        assert database.is_connected is False
        with pytest.raises(RuntimeError, match="not connected"):
            database.engine

    @pytest.mark.asyncio
    async def test_connect_is_idempotent(self, database: Database):
        engine = database.engine

        await database.connect()

        assert database.engine is engine

    @pytest.mark.asyncio
    async def test_dispose_disconnects(self):
        database = Database("sqlite+aiosqlite:///:memory:")
        await database.connect()

        await database.dispose()
        await database.dispose()

        assert database.is_connected is False

    @pytest.mark.asyncio
    async def test_session_requires_connection(self):
        database = Database("sqlite+aiosqlite:///:memory:")

        with pytest.raises(RuntimeError):
            async with database.session():
                pass

    @pytest.mark.asyncio
    async def test_file_database_creates_parent_directory(self, tmp_path):
        path = tmp_path / "data" / "notes.db"
        database = Database(f"sqlite+aiosqlite:///{path}")

        await database.connect(create_tables=True)
        await database.ping()
        await database.dispose()

        assert path.exists()


class TestSession:
    """Tests for Database.session()."""

    @pytest.mark.asyncio
    async def test_commits_on_success(self, database: Database):
        async with database.session() as session:
            await NoteRepository(session).create(**note_values())

        assert await count_notes(database) == 1

    @pytest.mark.asyncio
    async def test_rolls_back_on_error(self, database: Database):
        with pytest.raises(ValueError):
            async with database.session() as session:
                await NoteRepository(session).create(**note_values())
                raise ValueError("abort")

        assert await count_notes(database) == 0

    @pytest.mark.asyncio
    async def test_ping(self, database: Database):
        await database.ping()


class TestIdsAcrossSessions:
    """Id allocation survives commits and deletes."""

    @pytest.mark.asyncio
    async def test_deleted_id_not_reused(self, database: Database):
        async with database.session() as session:
            repo = NoteRepository(session)
            await repo.create(**note_values("A"))
            second = await repo.create(**note_values("B"))

        async with database.session() as session:
            await NoteRepository(session).delete_if_exists(second.id)

        async with database.session() as session:
            third = await NoteRepository(session).create(**note_values("C"))

        assert third.id == 3
