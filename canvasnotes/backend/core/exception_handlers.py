"""
Exception handlers producing the ErrorResponse envelope.

    422 VAL_REQUEST_INVALID   malformed input, rejected before any procedure runs
    400 VAL_VALIDATION_ERROR  business rule on the input (blank title)
    404 RES_NOT_FOUND         update of a note that does not exist
    503 SYS_DATABASE_ERROR    the note store failed
    500 SYS_INTERNAL_ERROR    anything else; details are only logged
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from canvasnotes.backend.core.exceptions import ApplicationError
from canvasnotes.backend.core.logging import get_logger
from canvasnotes.backend.schemas.base import ErrorDetail, ErrorResponse, ResponseMetadata

logger = get_logger(__name__)

REQUEST_INVALID_CODE = "VAL_REQUEST_INVALID"


def _get_request_id(request: Request) -> str | None:
    """request.state wins; the raw header covers requests the middleware never saw."""
    return getattr(request.state, "request_id", None) or request.headers.get("x-request-id")


def _request_context(request: Request) -> dict[str, Any]:
    return {
        "path": request.url.path,
        "method": request.method,
        "request_id": _get_request_id(request),
    }


def _envelope(request: Request, status_code: int, error: ErrorDetail) -> JSONResponse:
    body = ErrorResponse(error=error, metadata=ResponseMetadata(request_id=_get_request_id(request)))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    context = {**_request_context(request), "code": exc.code, "status": exc.status_code}
    if exc.status_code >= 500:
        logger.error(exc.message, extra=context)
    else:
        logger.warning(exc.message, extra=context)

    return _envelope(
        request,
        exc.status_code,
        ErrorDetail(code=exc.code, message=exc.message, details=getattr(exc, "details", None) or None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report each pydantic error with its dotted location, e.g. "body.position_x"."""
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())),
            "message": err.get("msg", "Validation error"),
            "type": err.get("type", "unknown"),
        }
        for err in exc.errors()
    ]
    logger.warning(
        "Request validation failed",
        extra={**_request_context(request), "fields": [e["field"] for e in errors]},
    )

    return _envelope(
        request,
        422,
        ErrorDetail(
            code=REQUEST_INVALID_CODE,
            message="Request validation failed",
            details={"validation_errors": errors},
        ),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled exception",
        extra={**_request_context(request), "exception_type": type(exc).__name__},
    )
    return _envelope(
        request,
        500,
        ErrorDetail(code="SYS_INTERNAL_ERROR", message="An unexpected error occurred"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
