"""
Note Schemas.

Pydantic schemas for the note procedures' inputs and outputs.

Input schemas are strict: integers must be JSON integers and strings must
be strings. Optional fields may be omitted but never sent as null;
"omitted" is the only way to leave a field unchanged.
"""

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CONTENT = ""
DEFAULT_POSITION_X = 0
DEFAULT_POSITION_Y = 0
DEFAULT_NOTE_WIDTH = 300
DEFAULT_NOTE_HEIGHT = 200

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

# Range of the 32-bit INTEGER columns
Int32 = Annotated[int, Field(ge=INT32_MIN, le=INT32_MAX)]


class _NoteInput(BaseModel):
    """Shared config for procedure inputs."""

    model_config = ConfigDict(strict=True)

    @field_validator("*", mode="before")
    @classmethod
    def _reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("Field may be omitted but not null")
        return value


class NoteCreate(_NoteInput):
    """Input for createNote."""

    title: str = Field(
        ...,
        description="Note title, non-empty after trimming",
        examples=["Groceries"],
    )
    content: str | None = Field(
        default=None,
        description="Note body, defaults to an empty string",
        examples=["Milk, eggs, coffee"],
    )
    position_x: Int32 | None = Field(default=None, description="Left edge in canvas pixels")
    position_y: Int32 | None = Field(default=None, description="Top edge in canvas pixels")
    width: Int32 | None = Field(default=None, description="Width in pixels")
    height: Int32 | None = Field(default=None, description="Height in pixels")


class NoteUpdate(_NoteInput):
    """
    Input for updateNote.

    Every field except id is optional. Only fields present in the request
    (model_fields_set) are written.
    """

    id: Int32 = Field(..., description="Note to update")
    title: str | None = Field(default=None, description="New title")
    content: str | None = Field(default=None, description="New content")
    position_x: Int32 | None = None
    position_y: Int32 | None = None
    width: Int32 | None = None
    height: Int32 | None = None


class NotePositionUpdate(_NoteInput):
    """
    Input for updateNotePosition, the drag-and-drop fast path.

    The full resulting coordinate pair is always sent, never a delta.
    """

    id: Int32
    position_x: Int32
    position_y: Int32
    width: Int32 | None = None
    height: Int32 | None = None


class NoteDelete(_NoteInput):
    """Input for deleteNote."""

    id: Int32


class NoteResponse(BaseModel):
    """Canonical note record returned by every note procedure."""

    id: int = Field(description="Note identifier")
    title: str
    content: str
    position_x: int
    position_y: int
    width: int
    height: int
    created_at: datetime = Field(description="Creation timestamp (UTC)")
    updated_at: datetime = Field(description="Last mutation timestamp (UTC)")

    model_config = ConfigDict(from_attributes=True)


class DeleteResult(BaseModel):
    """Result of deleteNote. Always successful."""

    success: Literal[True] = True


class HealthStatus(BaseModel):
    """Result of the healthcheck procedure."""

    status: str = "ok"
    timestamp: datetime
