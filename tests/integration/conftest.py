"""
Integration fixtures: the FastAPI app driven in-process over ASGITransport.

`client` shares the rolled-back `db_session` from the root conftest.
`live_app` and the clients built on it run against a real connected
Database, so every request commits as it would in production.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import StaticPool

from canvasnotes.backend.core.database import Database, get_db_session
from canvasnotes.backend.main import create_app
from canvasnotes.canvas.client import NotesClient

RPC_PATH = "/api/v1/rpc"
BASE_URL = "http://test"


def _http_client(app: FastAPI) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url=BASE_URL)


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app = create_app()
    app.dependency_overrides[get_db_session] = override_get_db_session
    async with _http_client(app) as test_client:
        yield test_client


@pytest.fixture
async def client_no_db() -> AsyncGenerator[AsyncClient, None]:
    """App with no Database attached: health checks and the healthcheck procedure."""
    async with _http_client(create_app()) as test_client:
        yield test_client


@pytest.fixture
async def database() -> AsyncGenerator[Database, None]:
    db = Database(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await db.connect(create_tables=True)
    yield db
    await db.dispose()


@pytest.fixture
def live_app(database: Database) -> FastAPI:
    return create_app(database=database)


@pytest.fixture
async def live_client(live_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with _http_client(live_app) as test_client:
        yield test_client


@pytest.fixture
async def notes_client(live_app: FastAPI) -> AsyncGenerator[NotesClient, None]:
    async with NotesClient(
        base_url=BASE_URL,
        timeout=5,
        rpc_path=RPC_PATH,
        transport=ASGITransport(app=live_app),
    ) as client:
        yield client


class ApiAssertions:
    """Checks on the {success, data, error, metadata} envelope."""

    @staticmethod
    def assert_success(response: Any, expected_status: int = 200) -> dict[str, Any]:
        assert response.status_code == expected_status, response.text
        body = response.json()
        assert body["success"] is True, body
        return body

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        assert response.status_code == expected_status, response.text
        body = response.json()
        assert body["success"] is False, body
        assert body["error"] is not None, body
        if expected_code:
            assert body["error"]["code"] == expected_code, body["error"]
        return body

    @staticmethod
    def assert_validation_error(response: Any, field: str | None = None) -> dict[str, Any]:
        """422 VAL_REQUEST_INVALID, optionally naming `field` in one of the errors."""
        body = ApiAssertions.assert_error(response, 422, "VAL_REQUEST_INVALID")
        if field:
            fields = [e["field"] for e in body["error"]["details"]["validation_errors"]]
            assert any(field in f for f in fields), f"no error for {field!r} in {fields}"
        return body


@pytest.fixture
def api() -> ApiAssertions:
    return ApiAssertions()
