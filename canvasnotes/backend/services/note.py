"""
Note Service.

Business logic layer for notes. Applies defaults, trims text fields,
enforces the non-empty title rule and the partial-update contract on top
of NoteRepository.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from canvasnotes.backend.models.note import Note
from canvasnotes.backend.repositories.note import NoteRepository
from canvasnotes.backend.schemas.note import (
    DEFAULT_CONTENT,
    DEFAULT_NOTE_HEIGHT,
    DEFAULT_NOTE_WIDTH,
    DEFAULT_POSITION_X,
    DEFAULT_POSITION_Y,
    DeleteResult,
    NoteCreate,
    NoteDelete,
    NotePositionUpdate,
    NoteUpdate,
)
from canvasnotes.backend.services.base import BaseService

NOTE_DEFAULTS: dict[str, Any] = {
    "content": DEFAULT_CONTENT,
    "position_x": DEFAULT_POSITION_X,
    "position_y": DEFAULT_POSITION_Y,
    "width": DEFAULT_NOTE_WIDTH,
    "height": DEFAULT_NOTE_HEIGHT,
}


class NoteService(BaseService):
    """
    Service for note business logic.

    Every mutation returns the canonical post-mutation record so callers
    can reconcile their local state from the response alone.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = NoteRepository(session)

    async def create_note(self, data: NoteCreate) -> Note:
        """
        Create a new note.

        Omitted optional fields take the values in NOTE_DEFAULTS.

        Args:
            data: Note creation data

        Returns:
            Created note

        Raises:
            ValidationError: If the title is blank after trimming
        """
        values = {**NOTE_DEFAULTS, **data.model_dump(exclude_unset=True)}
        values["title"] = self._require_text("title", values["title"])
        values["content"] = values["content"].strip()

        self._log_operation("Creating note", title=values["title"])

        note = await self._execute_db_operation(
            "create_note",
            self.repo.create(**values),
        )

        self._log_debug("Note created", note_id=note.id)
        return note

    async def list_notes(self) -> list[Note]:
        """Return every note, most recently updated first."""
        return await self._execute_db_operation(
            "list_notes",
            self.repo.get_all_by_recency(),
        )

    async def update_note(self, data: NoteUpdate) -> Note:
        """
        Update the fields present in ``data``.

        Fields left out of the request are untouched. updated_at is
        refreshed even if nothing else changes.

        Args:
            data: Update data; only explicitly set fields are applied

        Returns:
            Updated note

        Raises:
            ValidationError: If a supplied title is blank after trimming
            NotFoundError: If the note does not exist
        """
        changes = data.model_dump(exclude_unset=True, exclude={"id"})

        if "title" in changes:
            changes["title"] = self._require_text("title", changes["title"])
        if "content" in changes:
            changes["content"] = changes["content"].strip()

        self._log_operation(
            "Updating note",
            note_id=data.id,
            fields=sorted(changes),
        )

        return await self._execute_db_operation(
            "update_note",
            self.repo.update(data.id, **changes),
        )

    async def update_note_position(self, data: NotePositionUpdate) -> Note:
        """
        Move (and optionally resize) a note.

        Args:
            data: Absolute position, plus width/height if resizing

        Returns:
            Updated note

        Raises:
            NotFoundError: If the note does not exist
        """
        changes = data.model_dump(exclude_unset=True, exclude={"id"})

        self._log_debug(
            "Moving note",
            note_id=data.id,
            position_x=data.position_x,
            position_y=data.position_y,
        )

        return await self._execute_db_operation(
            "update_note_position",
            self.repo.update(data.id, **changes),
        )

    async def delete_note(self, data: NoteDelete) -> DeleteResult:
        """
        Delete a note. Deleting a missing note also succeeds.

        Args:
            data: Identifies the note to delete

        Returns:
            DeleteResult, always successful
        """
        removed = await self._execute_db_operation(
            "delete_note",
            self.repo.delete_if_exists(data.id),
        )

        self._log_operation("Deleted note", note_id=data.id, removed=removed)
        return DeleteResult()
