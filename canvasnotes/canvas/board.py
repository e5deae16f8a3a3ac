"""
Canvas Board.

Local view state of the note canvas: the list of notes shown, which note
is being edited, and the drag-and-drop state machine.

Drag lifecycle:
    IDLE --drag_start--> DRAGGING --drop--> IDLE (position committed)
                                  --drag_end--> IDLE (nothing committed)

A drop updates the local note before the backend answers. If the
backend call fails the local change stays in place and the failure is
only logged; the next load() shows the stored position again.
"""

from enum import Enum
from typing import Any

import httpx

from canvasnotes.backend.core.exceptions import ApplicationError
from canvasnotes.backend.core.logging import get_logger, log_with_source
from canvasnotes.backend.schemas.note import NoteResponse
from canvasnotes.canvas.client import NotesClient
from canvasnotes.canvas.geometry import CanvasRect, drop_position

logger = get_logger(__name__)

DRAGGING_Z_INDEX = 50
RESTING_Z_INDEX = 10

# Failures an intent absorbs: error envelopes and unreachable backend
INTENT_ERRORS = (ApplicationError, httpx.HTTPError)


class DragState(str, Enum):
    """Drag-and-drop state of the board."""

    IDLE = "idle"
    DRAGGING = "dragging"


class CanvasBoard:
    """
    Local note list plus drag/edit state, backed by a NotesClient.

    Every intent awaits its procedure call. Failed intents are logged
    and abandoned; they never raise to the caller.

    Usage:
        board = CanvasBoard(NotesClient())
        await board.load()
        if board.drag_start(note.id):
            await board.drop(420, 310, CanvasRect(left=20, top=60))
    """

    def __init__(self, client: NotesClient) -> None:
        self.client = client
        self.notes: list[NoteResponse] = []
        self.drag_state = DragState.IDLE
        self.dragged_note_id: int | None = None
        self.editing_note_id: int | None = None
        self.is_submitting = False

    # Lookup

    def get(self, note_id: int) -> NoteResponse | None:
        for note in self.notes:
            if note.id == note_id:
                return note
        return None

    def _replace(self, note: NoteResponse) -> None:
        self.notes = [note if existing.id == note.id else existing for existing in self.notes]

    def _fail(self, message: str, error: Exception, **context: Any) -> None:
        log_with_source(
            logger,
            "canvas",
            "error",
            message,
            error=str(error),
            error_type=type(error).__name__,
            **context,
        )

    # Presentation

    @property
    def show_drop_affordance(self) -> bool:
        """True while a drag is in progress and the canvas accepts drops."""
        return self.drag_state is DragState.DRAGGING

    def z_index(self, note_id: int) -> int:
        if self.drag_state is DragState.DRAGGING and note_id == self.dragged_note_id:
            return DRAGGING_Z_INDEX
        return RESTING_Z_INDEX

    # Edit mode

    def begin_edit(self, note_id: int) -> bool:
        """Put a note in text-edit mode. Refused while dragging."""
        if self.drag_state is DragState.DRAGGING or self.get(note_id) is None:
            return False
        self.editing_note_id = note_id
        return True

    def end_edit(self) -> None:
        self.editing_note_id = None

    # Drag and drop

    def drag_start(self, note_id: int) -> bool:
        """
        Start dragging a note.

        Returns:
            False if a drag is already running, the note is being edited,
            or the note is not on the board
        """
        if self.drag_state is not DragState.IDLE:
            return False
        if note_id == self.editing_note_id or self.get(note_id) is None:
            return False

        self.drag_state = DragState.DRAGGING
        self.dragged_note_id = note_id
        log_with_source(logger, "canvas", "debug", "Drag started", note_id=note_id)
        return True

    def drag_over(self) -> bool:
        """Accept the canvas as drop target. No state change."""
        return self.drag_state is DragState.DRAGGING

    def drag_end(self) -> None:
        """Abandon the drag without committing anything."""
        self.drag_state = DragState.IDLE
        self.dragged_note_id = None

    async def drop(
        self,
        client_x: float,
        client_y: float,
        canvas: CanvasRect,
    ) -> NoteResponse | None:
        """
        Drop the dragged note at a pointer position.

        Returns:
            The stored note on success, None if nothing was being dragged
            or the backend call failed
        """
        if self.drag_state is not DragState.DRAGGING or self.dragged_note_id is None:
            return None

        note_id = self.dragged_note_id
        point = drop_position(client_x, client_y, canvas)

        local = self.get(note_id)
        if local is not None:
            self._replace(local.model_copy(update={"position_x": point.x, "position_y": point.y}))

        self.drag_end()

        try:
            stored = await self.client.update_note_position(note_id, point.x, point.y)
        except INTENT_ERRORS as e:
            self._fail("Note move failed", e, note_id=note_id, x=point.x, y=point.y)
            return None

        self._replace(stored)
        log_with_source(
            logger,
            "canvas",
            "info",
            "Note moved",
            note_id=note_id,
            x=stored.position_x,
            y=stored.position_y,
        )
        return stored

    # Note intents

    async def load(self) -> list[NoteResponse]:
        """Replace the local list with the backend's, most recent first."""
        try:
            self.notes = await self.client.get_notes()
        except INTENT_ERRORS as e:
            self._fail("Loading notes failed", e)
        return self.notes

    async def create(self, title: str, **fields: Any) -> NoteResponse | None:
        """Create a note and append it to the local list."""
        self.is_submitting = True
        try:
            note = await self.client.create_note(title, **fields)
        except INTENT_ERRORS as e:
            self._fail("Note creation failed", e)
            return None
        finally:
            self.is_submitting = False

        self.notes = [*self.notes, note]
        return note

    async def update(self, note_id: int, **fields: Any) -> NoteResponse | None:
        """Update a note and replace the local copy with the stored one."""
        try:
            note = await self.client.update_note(note_id, **fields)
        except INTENT_ERRORS as e:
            self._fail("Note update failed", e, note_id=note_id)
            return None

        self._replace(note)
        if self.editing_note_id == note_id:
            self.end_edit()
        return note

    async def delete(self, note_id: int) -> bool:
        """Delete a note and drop it from the local list."""
        try:
            await self.client.delete_note(note_id)
        except INTENT_ERRORS as e:
            self._fail("Note deletion failed", e, note_id=note_id)
            return False

        self.notes = [note for note in self.notes if note.id != note_id]
        if self.editing_note_id == note_id:
            self.end_edit()
        return True
