"""
Canvas Geometry.

Translates pointer coordinates into note positions. A dropped note is
centred under the pointer, using the default note size, and never placed
left of or above the canvas origin.
"""

import math
from dataclasses import dataclass

from canvasnotes.backend.schemas.note import DEFAULT_NOTE_HEIGHT, DEFAULT_NOTE_WIDTH

DROP_OFFSET_X = DEFAULT_NOTE_WIDTH // 2
DROP_OFFSET_Y = DEFAULT_NOTE_HEIGHT // 2


@dataclass(frozen=True)
class Point:
    """A position in canvas pixels."""

    x: int
    y: int


@dataclass(frozen=True)
class CanvasRect:
    """Bounding box of the canvas surface in viewport (client) coordinates."""

    left: float = 0.0
    top: float = 0.0
    width: float = 0.0
    height: float = 0.0


def clamp_position(x: float, y: float) -> Point:
    """Floor both coordinates to whole pixels and clamp them to >= 0."""
    return Point(x=max(0, math.floor(x)), y=max(0, math.floor(y)))


def drop_position(
    client_x: float,
    client_y: float,
    canvas: CanvasRect,
    offset_x: int = DROP_OFFSET_X,
    offset_y: int = DROP_OFFSET_Y,
) -> Point:
    """
    Compute where a note dropped at a pointer position should land.

    Args:
        client_x: Pointer x in viewport coordinates
        client_y: Pointer y in viewport coordinates
        canvas: Canvas bounding box in the same coordinates
        offset_x: Horizontal distance from the note's left edge to the pointer
        offset_y: Vertical distance from the note's top edge to the pointer

    Returns:
        Top-left corner of the note in canvas pixels

    Example:
        >>> drop_position(100, 110, CanvasRect(left=0, top=0))
        Point(x=0, y=10)
    """
    relative_x = client_x - canvas.left
    relative_y = client_y - canvas.top
    return clamp_position(relative_x - offset_x, relative_y - offset_y)
