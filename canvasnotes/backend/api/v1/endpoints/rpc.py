"""
Note Procedures.

RPC-style endpoints for the note canvas. Each procedure lives at
``/rpc/<procedureName>``: queries are GET, mutations are POST with the
procedure input as the JSON body. Inputs are validated by pydantic before
the service runs; every mutation answers with the full canonical record.
"""

from fastapi import APIRouter

from canvasnotes.backend.core.dependencies import NoteServiceDep, RequestId
from canvasnotes.backend.core.utils import utc_now
from canvasnotes.backend.schemas.base import ApiResponse, ResponseMetadata
from canvasnotes.backend.schemas.note import (
    DeleteResult,
    HealthStatus,
    NoteCreate,
    NoteDelete,
    NotePositionUpdate,
    NoteResponse,
    NoteUpdate,
)

router = APIRouter()


def _metadata(request_id: str) -> ResponseMetadata:
    return ResponseMetadata(request_id=request_id)


@router.get(
    "/healthcheck",
    response_model=ApiResponse[HealthStatus],
    summary="Healthcheck",
)
async def healthcheck(request_id: RequestId) -> ApiResponse[HealthStatus]:
    """Report that the procedure endpoint is up."""
    return ApiResponse(
        data=HealthStatus(status="ok", timestamp=utc_now()),
        metadata=_metadata(request_id),
    )


@router.post(
    "/createNote",
    response_model=ApiResponse[NoteResponse],
    summary="Create a note",
    description="Create a note. Omitted content, position and size take their defaults.",
)
async def create_note(
    data: NoteCreate,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    note = await service.create_note(data)
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=_metadata(request_id),
    )


@router.get(
    "/getNotes",
    response_model=ApiResponse[list[NoteResponse]],
    summary="List notes",
    description="All notes, most recently updated first.",
)
async def get_notes(
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[list[NoteResponse]]:
    notes = await service.list_notes()
    return ApiResponse(
        data=[NoteResponse.model_validate(note) for note in notes],
        metadata=_metadata(request_id),
    )


@router.post(
    "/updateNote",
    response_model=ApiResponse[NoteResponse],
    summary="Update a note",
    description="Update the supplied fields of a note. Omitted fields are left unchanged.",
)
async def update_note(
    data: NoteUpdate,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    note = await service.update_note(data)
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=_metadata(request_id),
    )


@router.post(
    "/updateNotePosition",
    response_model=ApiResponse[NoteResponse],
    summary="Move a note",
    description="Set a note's absolute position, and optionally its size.",
)
async def update_note_position(
    data: NotePositionUpdate,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    note = await service.update_note_position(data)
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=_metadata(request_id),
    )


@router.post(
    "/deleteNote",
    response_model=ApiResponse[DeleteResult],
    summary="Delete a note",
    description="Delete a note. Succeeds whether or not the note exists.",
)
async def delete_note(
    data: NoteDelete,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[DeleteResult]:
    result = await service.delete_note(data)
    return ApiResponse(data=result, metadata=_metadata(request_id))
