"""
Unit Tests for Note Schemas.

Tests input shape rules: required fields, strict types, omitted versus
null, and the presence tracking partial updates rely on.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from canvasnotes.backend.core.utils import utc_now
from canvasnotes.backend.models.note import Note
from canvasnotes.backend.schemas.note import (
    INT32_MAX,
    INT32_MIN,
    DeleteResult,
    NoteCreate,
    NoteDelete,
    NotePositionUpdate,
    NoteResponse,
    NoteUpdate,
)


class TestNoteCreate:
    """Tests for createNote input."""

    def test_title_only(self):
        data = NoteCreate(title="A")

        assert data.model_fields_set == {"title"}
        assert data.model_dump(exclude_unset=True) == {"title": "A"}

    def test_title_is_required(self):
        with pytest.raises(PydanticValidationError):
            NoteCreate.model_validate({"content": "no title"})

    @pytest.mark.parametrize("value", ["10", 10.5])
    def test_position_must_be_integer(self, value):
        with pytest.raises(PydanticValidationError):
            NoteCreate.model_validate({"title": "A", "position_x": value})

    def test_title_must_be_string(self):
        with pytest.raises(PydanticValidationError):
            NoteCreate.model_validate({"title": 5})

    def test_explicit_null_rejected(self):
        with pytest.raises(PydanticValidationError):
            NoteCreate.model_validate({"title": "A", "content": None})

    def test_negative_positions_accepted(self):
        """Clamping happens on the canvas side, not in the schema."""
        data = NoteCreate.model_validate({"title": "A", "position_x": -5, "position_y": -1})

        assert data.position_x == -5

    @pytest.mark.parametrize("field", ["position_x", "position_y", "width", "height"])
    @pytest.mark.parametrize("value", [INT32_MAX + 1, INT32_MIN - 1, 2**63])
    def test_integer_outside_column_range_rejected(self, field, value):
        with pytest.raises(PydanticValidationError):
            NoteCreate.model_validate({"title": "A", field: value})

    def test_integer_range_is_inclusive(self):
        data = NoteCreate.model_validate(
            {"title": "A", "position_x": INT32_MIN, "position_y": INT32_MAX}
        )

        assert (data.position_x, data.position_y) == (INT32_MIN, INT32_MAX)


class TestNoteUpdate:
    """Tests for updateNote input."""

    def test_id_is_required(self):
        with pytest.raises(PydanticValidationError):
            NoteUpdate.model_validate({"title": "B"})

    def test_only_supplied_fields_are_set(self):
        data = NoteUpdate.model_validate({"id": 1, "title": "B"})

        assert data.model_dump(exclude_unset=True, exclude={"id"}) == {"title": "B"}

    def test_id_only(self):
        data = NoteUpdate.model_validate({"id": 1})

        assert data.model_dump(exclude_unset=True, exclude={"id"}) == {}

    def test_null_title_rejected(self):
        with pytest.raises(PydanticValidationError):
            NoteUpdate.model_validate({"id": 1, "title": None})

    def test_string_id_rejected(self):
        with pytest.raises(PydanticValidationError):
            NoteUpdate.model_validate({"id": "1"})

    @pytest.mark.parametrize("payload", [{"id": 2**31}, {"id": 1, "width": 2**40}])
    def test_integer_outside_column_range_rejected(self, payload):
        with pytest.raises(PydanticValidationError):
            NoteUpdate.model_validate(payload)


class TestNotePositionUpdate:
    """Tests for updateNotePosition input."""

    def test_both_coordinates_required(self):
        with pytest.raises(PydanticValidationError):
            NotePositionUpdate.model_validate({"id": 1, "position_x": 10})

    def test_size_optional(self):
        data = NotePositionUpdate.model_validate({"id": 1, "position_x": 0, "position_y": 10})

        assert data.model_dump(exclude_unset=True, exclude={"id"}) == {
            "position_x": 0,
            "position_y": 10,
        }

    def test_size_included_when_given(self):
        data = NotePositionUpdate.model_validate(
            {"id": 1, "position_x": 0, "position_y": 10, "width": 320, "height": 240}
        )

        assert data.width == 320
        assert data.height == 240

    def test_coordinate_outside_column_range_rejected(self):
        with pytest.raises(PydanticValidationError):
            NotePositionUpdate.model_validate({"id": 1, "position_x": 2**64, "position_y": 1})


class TestNoteDelete:
    """Tests for deleteNote input."""

    def test_requires_id(self):
        with pytest.raises(PydanticValidationError):
            NoteDelete.model_validate({})

    def test_accepts_integer_id(self):
        assert NoteDelete.model_validate({"id": 999}).id == 999

    def test_id_outside_column_range_rejected(self):
        with pytest.raises(PydanticValidationError):
            NoteDelete.model_validate({"id": -(2**31) - 1})


class TestOutputs:
    """Tests for procedure outputs."""

    def test_note_response_from_model(self):
        now = utc_now()
        note = Note(
            id=3,
            title="A",
            content="",
            position_x=0,
            position_y=10,
            width=300,
            height=200,
            created_at=now,
            updated_at=now,
        )

        response = NoteResponse.model_validate(note)

        assert response.id == 3
        assert response.position_y == 10
        assert response.created_at == response.updated_at == now

    def test_delete_result_always_successful(self):
        assert DeleteResult().model_dump() == {"success": True}
