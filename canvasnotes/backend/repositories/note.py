"""
Note Repository.

Data access layer for notes. Handles all database operations
for the Note model.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from canvasnotes.backend.models.note import Note
from canvasnotes.backend.repositories.base import BaseRepository


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Inherits standard CRUD operations from BaseRepository
    and adds note-specific queries.
    """

    model = Note

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_all_by_recency(self) -> list[Note]:
        """
        Get every note, most recently updated first.

        Notes sharing an updated_at value come out newest id first.

        Returns:
            List of all persisted notes
        """
        result = await self.session.execute(
            select(Note).order_by(Note.updated_at.desc(), Note.id.desc())
        )
        return list(result.scalars().all())
