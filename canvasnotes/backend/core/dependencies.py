"""
FastAPI Dependencies.

Shared dependencies for request handling.
"""

import uuid
from typing import Annotated

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from canvasnotes.backend.core.database import get_db_session
from canvasnotes.backend.services.note import NoteService

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_request_id(
    request: Request,
    x_request_id: str | None = Header(None),
) -> str:
    """
    Return the request ID assigned by RequestContextMiddleware.

    Falls back to the X-Request-ID header, then to a fresh UUID.
    """
    return getattr(request.state, "request_id", None) or x_request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


async def get_note_service(db: DbSession) -> NoteService:
    """Provide a NoteService bound to the request's session."""
    return NoteService(db)


NoteServiceDep = Annotated[NoteService, Depends(get_note_service)]
