"""
Base service.

A service is bound to one AsyncSession for the length of a request and
turns repository calls into business operations. Store failures surface
as DatabaseError; NotFoundError and ValidationError pass through as-is.
"""

from collections.abc import Awaitable
from typing import Any, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from canvasnotes.backend.core.exceptions import DatabaseError, ValidationError
from canvasnotes.backend.core.logging import get_logger

T = TypeVar("T")


class BaseService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._logger = get_logger(self.__class__.__module__)

    @property
    def session(self) -> AsyncSession:
        return self._session

    async def _execute_db_operation(self, operation: str, coro: Awaitable[T]) -> T:
        """
        Await a repository call, wrapping SQLAlchemy failures.

        Raises:
            DatabaseError: The store rejected or failed the operation
        """
        try:
            return await coro
        except SQLAlchemyError as e:
            self._logger.error("Database error", extra={"operation": operation, "error": str(e)})
            raise DatabaseError(f"Database operation failed: {operation}") from e

    def _require_text(self, field_name: str, value: str) -> str:
        """Return value trimmed; ValidationError if nothing is left."""
        trimmed = value.strip()
        if not trimmed:
            raise ValidationError(
                f"{field_name} must not be empty",
                details={field_name: "Minimum length is 1 after trimming"},
            )
        return trimmed

    def _log_operation(self, operation: str, **context: Any) -> None:
        self._logger.info(operation, extra={"service": self.__class__.__name__, **context})

    def _log_debug(self, message: str, **context: Any) -> None:
        self._logger.debug(message, extra={"service": self.__class__.__name__, **context})
