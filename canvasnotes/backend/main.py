"""
Canvas Notes API application.

    uvicorn canvasnotes.backend.main:app

The app is built lazily on first access to `app`, so importing this module
never reads configuration.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from canvasnotes.backend.api import health
from canvasnotes.backend.api.v1 import router as api_v1_router
from canvasnotes.backend.core.config import get_app_config
from canvasnotes.backend.core.database import Database
from canvasnotes.backend.core.exception_handlers import register_exception_handlers
from canvasnotes.backend.core.logging import get_logger, setup_logging
from canvasnotes.backend.core.middleware import RequestContextMiddleware

logger = get_logger(__name__)

_app: FastAPI | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Connect the note store for the life of the app.

    A Database passed to create_app() is connected but never disposed
    here; its owner does that. Otherwise one is built from database.yaml
    and disposed on shutdown.
    """
    config = get_app_config()
    setup_logging(level=config.logging.level)

    database: Database | None = app.state.database
    owns_database = database is None
    if owns_database:
        database = app.state.database = Database.from_config()
    await database.connect(create_tables=config.database.create_tables)

    logger.info(
        "Application starting",
        extra={"app_name": config.application.name, "env": config.application.environment},
    )
    try:
        yield
    finally:
        if owns_database:
            await database.dispose()
            app.state.database = None
        logger.info("Application shutting down")


def create_app(database: Database | None = None) -> FastAPI:
    settings = get_app_config().application

    app = FastAPI(
        title=settings.name,
        description=settings.description,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.database = database

    app.add_middleware(RequestContextMiddleware)
    if settings.cors.origins:
        # Browser canvas served from another origin (e.g. the Vite dev server)
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors.origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    register_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(api_v1_router, prefix=settings.api_prefix)
    return app


def get_app() -> FastAPI:
    global _app
    if _app is None:
        _app = create_app()
    return _app


def __getattr__(name: str) -> FastAPI:
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
