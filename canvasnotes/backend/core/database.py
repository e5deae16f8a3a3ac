"""
Database Connection.

SQLAlchemy async engine and session management.

The storage handle is an explicit ``Database`` object with a
connect/dispose lifecycle. The FastAPI lifespan creates one, stores it on
``app.state.database`` and disposes it on shutdown; request handlers get
sessions through the ``get_db_session`` dependency.

Usage:
    database = Database.from_config()
    await database.connect()
    async with database.session() as session:
        ...
    await database.dispose()
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import Request
from sqlalchemy import make_url, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from canvasnotes.backend.core.logging import get_logger
from canvasnotes.backend.models.base import Base

logger = get_logger(__name__)


class Database:
    """Owns the async engine and session factory for one process."""

    def __init__(self, url: str, **engine_options: Any) -> None:
        self.url = url
        self._engine_options = engine_options
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @classmethod
    def from_config(cls) -> "Database":
        """Build a Database from database.yaml and config/.env."""
        from canvasnotes.backend.core.config import get_app_config, get_database_url

        db_config = get_app_config().database
        url = get_database_url()

        if db_config.is_sqlite:
            options: dict[str, Any] = {
                "echo": db_config.echo,
                "connect_args": {"check_same_thread": False},
            }
            if url.endswith(":memory:"):
                options["poolclass"] = StaticPool
            return cls(url, **options)

        return cls(
            url,
            pool_size=db_config.pool_size,
            max_overflow=db_config.max_overflow,
            pool_timeout=db_config.pool_timeout,
            pool_recycle=db_config.pool_recycle,
            echo=db_config.echo,
        )

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not connected")
        return self._engine

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    async def connect(self, create_tables: bool = False) -> None:
        """Create the engine and session factory. Safe to call twice."""
        if self._engine is not None:
            return

        url = make_url(self.url)
        if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

        self._engine = create_async_engine(self.url, **self._engine_options)
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        if create_tables:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

        logger.info(
            "Database connected",
            extra={"dialect": self._engine.dialect.name, "create_tables": create_tables},
        )

    async def dispose(self) -> None:
        """Release all pooled connections."""
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Database disposed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide a transactional session.

        Commits when the block exits cleanly, rolls back on any exception.
        """
        if self._session_factory is None:
            raise RuntimeError("Database is not connected")

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def ping(self) -> None:
        """Run a trivial query; raises if the database is unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))


def get_database(request: Request) -> Database:
    """Return the Database attached to the running application."""
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database has not been initialised for this application")
    return database


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session.

    Usage in endpoints:
        @router.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with get_database(request).session() as session:
        yield session
