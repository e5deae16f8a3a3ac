"""
Application exceptions.

Each class carries the error code and HTTP status it is reported with.
The backend raises them; NotesClient re-raises them when it decodes an
error envelope, so callers on both sides handle the same types.
"""

from typing import Any


class ApplicationError(Exception):
    """Base exception for all application errors."""

    code = "SYS_INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        if code is not None:
            self.code = code
        super().__init__(message)


class NotFoundError(ApplicationError):
    """The requested note does not exist."""

    code = "RES_NOT_FOUND"
    status_code = 404

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message)


class ValidationError(ApplicationError):
    """A business rule on otherwise well-formed input failed (e.g. blank title)."""

    code = "VAL_VALIDATION_ERROR"
    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        details: dict[str, Any] | None = None,
        code: str | None = None,
    ) -> None:
        self.details = details or {}
        super().__init__(message, code=code)


class DatabaseError(ApplicationError):
    """The note store could not complete an operation."""

    code = "SYS_DATABASE_ERROR"
    status_code = 503

    def __init__(self, message: str = "Database error") -> None:
        super().__init__(message)
