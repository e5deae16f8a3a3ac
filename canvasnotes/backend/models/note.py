"""
Note Model.

Database model for notes placed on the canvas.
"""

from sqlalchemy import Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from canvasnotes.backend.models.base import Base, IntegerIdMixin, TimestampMixin


class Note(IntegerIdMixin, TimestampMixin, Base):
    """
    Note database model.

    A titled text note with a position and size on the canvas, in pixels.
    Columns carry no defaults; NoteService fills in omitted values.
    """

    __tablename__ = "notes"
    # AUTOINCREMENT keeps SQLite from handing out the id of a deleted row again
    __table_args__ = (
        Index("ix_notes_updated_at", "updated_at"),
        {"sqlite_autoincrement": True},
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    position_x: Mapped[int] = mapped_column(Integer, nullable=False)
    position_y: Mapped[int] = mapped_column(Integer, nullable=False)
    width: Mapped[int] = mapped_column(Integer, nullable=False)
    height: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<Note(id={self.id}, title={self.title!r}, "
            f"position=({self.position_x}, {self.position_y}))>"
        )
