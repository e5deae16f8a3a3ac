"""
Base Repository.

Base class for all repositories with the shared CRUD operations.
Owns timestamp bookkeeping for models using TimestampMixin.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from canvasnotes.backend.core.exceptions import NotFoundError
from canvasnotes.backend.core.logging import get_logger
from canvasnotes.backend.core.utils import utc_now, utc_now_after
from canvasnotes.backend.models.base import Base, TimestampMixin

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common CRUD operations.

    Subclasses should set the model class:

        class NoteRepository(BaseRepository[Note]):
            model = Note
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @property
    def _is_timestamped(self) -> bool:
        return issubclass(self.model, TimestampMixin)

    async def get_by_id(self, id: int) -> ModelType:
        """
        Get a single record by ID.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id_or_none(id)

        if instance is None:
            raise NotFoundError(f"{self.model.__name__} with id {id} not found")

        return instance

    async def get_by_id_or_none(self, id: int) -> ModelType | None:
        """Get a single record by ID, returning None if not found."""
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def create(self, **kwargs: Any) -> ModelType:
        """
        Create a new record.

        Timestamped models get created_at == updated_at from a single
        clock read.
        """
        if self._is_timestamped:
            now = utc_now()
            kwargs.setdefault("created_at", now)
            kwargs.setdefault("updated_at", now)

        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(self, id: int, **kwargs: Any) -> ModelType:
        """
        Update an existing record.

        Only the given columns are assigned. Timestamped models always
        get a fresh updated_at, even when kwargs is empty.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id(id)

        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)

        if self._is_timestamped:
            instance.updated_at = utc_now_after(instance.updated_at)

        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete_if_exists(self, id: int) -> bool:
        """
        Delete a record by ID if it exists.

        Returns:
            True if a row was removed, False if there was nothing to delete
        """
        result = await self.session.execute(
            delete(self.model).where(self.model.id == id)
        )
        await self.session.flush()
        return (result.rowcount or 0) > 0

