"""
Request context middleware.

Tags every request with a request id and the calling frontend, times it,
and exposes both through request.state and structlog contextvars so
handlers and log records can use them.
"""

import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from canvasnotes.backend.core.logging import get_logger
from canvasnotes.backend.core.utils import utc_now

logger = get_logger(__name__)

# Subset of logging.VALID_SOURCES; anything else is reported as "unknown"
KNOWN_FRONTENDS = {"web", "cli", "canvas", "api", "internal"}


def _elapsed_ms(start_time) -> int:
    return int((utc_now() - start_time).total_seconds() * 1000)


def _frontend(request: Request) -> str:
    frontend = request.headers.get("X-Frontend-ID", "").lower()
    return frontend if frontend in KNOWN_FRONTENDS else "unknown"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Sets request.state.request_id, .frontend and .start_time.

    X-Request-ID is echoed back (or generated), and X-Response-Time
    reports the handler time in milliseconds.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        frontend = _frontend(request)
        start_time = utc_now()

        request.state.request_id = request_id
        request.state.frontend = frontend
        request.state.start_time = start_time

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            frontend=frontend,
            method=request.method,
            path=request.url.path,
        )
        logger.debug(
            "Request started",
            extra={"client_host": request.client.host if request.client else None},
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "Request failed with exception",
                extra={"duration_ms": _elapsed_ms(start_time), "error_type": type(exc).__name__},
            )
            raise
        else:
            duration_ms = _elapsed_ms(start_time)
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms}ms"
            logger.debug(
                "Request completed",
                extra={"status_code": response.status_code, "duration_ms": duration_ms},
            )
            return response
        finally:
            structlog.contextvars.clear_contextvars()
