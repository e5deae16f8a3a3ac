"""
Note Procedure Client.

Async HTTP client for the note procedures exposed under
``/api/v1/rpc/<procedureName>``. Successful envelopes are decoded into
schema objects; error envelopes are raised again as the same exceptions
the backend raised.

All requests include X-Frontend-ID: canvas header for log routing.
"""

from typing import Any

import httpx

from canvasnotes.backend.core.config import get_app_config, get_server_base_url
from canvasnotes.backend.core.exceptions import (
    ApplicationError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from canvasnotes.backend.core.logging import get_logger, log_with_source
from canvasnotes.backend.schemas.note import DeleteResult, HealthStatus, NoteResponse

logger = get_logger(__name__)

DEFAULT_RPC_PATH = "/api/v1/rpc"


def _get_client_config() -> tuple[str, float, str]:
    """Load base URL, timeout and procedure prefix from application.yaml."""
    base_url, timeout = get_server_base_url()
    rpc_path = f"{get_app_config().application.api_prefix}/rpc"
    return base_url, timeout, rpc_path


def _raise_for_error(response: httpx.Response) -> None:
    """Turn an error envelope back into the matching ApplicationError."""
    try:
        error = response.json().get("error") or {}
    except ValueError:
        error = {}

    code = error.get("code", "SYS_INTERNAL_ERROR")
    message = error.get("message", f"Unexpected response status {response.status_code}")

    if code == "RES_NOT_FOUND":
        raise NotFoundError(message)
    if code.startswith("VAL_"):
        raise ValidationError(message, details=error.get("details"), code=code)
    if code == "SYS_DATABASE_ERROR":
        raise DatabaseError(message)
    raise ApplicationError(message, code=code)


class NotesClient:
    """
    RPC client for the note procedures.

    Usage:
        client = NotesClient()
        note = await client.create_note("Groceries", content="Milk")
        notes = await client.get_notes()
        await client.close()

    Raises:
        NotFoundError, ValidationError, DatabaseError, ApplicationError:
            When the backend answers with an error envelope
        httpx.HTTPError: When the backend cannot be reached
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        rpc_path: str | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Backend base URL. If None, reads from config/settings/application.yaml.
            timeout: Request timeout in seconds. If None, reads from config/settings/application.yaml.
            transport: Optional httpx transport, e.g. ASGITransport for an in-process app.
            rpc_path: Procedure prefix. If None, derived from api_prefix in application.yaml.
        """
        if base_url is None or timeout is None or rpc_path is None:
            config_base_url, config_timeout, config_rpc_path = _get_client_config()
        else:
            config_base_url, config_timeout, config_rpc_path = base_url, timeout, rpc_path

        self.base_url = (base_url or config_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else config_timeout
        self.rpc_path = (rpc_path or config_rpc_path).rstrip("/")
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "NotesClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                headers={"X-Frontend-ID": "canvas"},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Make an HTTP request to the backend.

        Args:
            method: HTTP method (GET, POST)
            path: Path relative to the base URL
            **kwargs: Additional arguments for httpx

        Raises:
            httpx.HTTPError: On transport failure
        """
        client = await self._get_client()

        log_with_source(logger, "canvas", "debug", "API request", method=method, path=path)

        try:
            response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            log_with_source(
                logger,
                "canvas",
                "error",
                "API request failed",
                method=method,
                path=path,
                error=str(e),
            )
            raise

        log_with_source(
            logger,
            "canvas",
            "debug",
            "API response",
            method=method,
            path=path,
            status_code=response.status_code,
        )
        return response

    async def _call(self, procedure: str, payload: dict[str, Any] | None = None) -> Any:
        """Invoke a procedure: GET for queries (no payload), POST for mutations."""
        path = f"{self.rpc_path}/{procedure}"
        if payload is None:
            response = await self.request("GET", path)
        else:
            response = await self.request("POST", path, json=payload)

        if response.status_code >= 400:
            _raise_for_error(response)
        return response.json()["data"]

    async def ping(self) -> bool:
        """Return True if the liveness endpoint answers 200."""
        response = await self.request("GET", "/health")
        return response.status_code == 200

    async def healthcheck(self) -> HealthStatus:
        return HealthStatus.model_validate(await self._call("healthcheck"))

    async def create_note(self, title: str, **fields: Any) -> NoteResponse:
        """
        Create a note.

        Args:
            title: Note title
            **fields: Any of content, position_x, position_y, width, height.
                Fields passed as None are omitted so the backend applies defaults.
        """
        payload = {"title": title, **_present(fields)}
        return NoteResponse.model_validate(await self._call("createNote", payload))

    async def get_notes(self) -> list[NoteResponse]:
        """All notes, most recently updated first."""
        return [NoteResponse.model_validate(item) for item in await self._call("getNotes")]

    async def update_note(self, note_id: int, **fields: Any) -> NoteResponse:
        """
        Update the given fields of a note.

        Fields passed as None are omitted and stay unchanged on the backend.
        """
        payload = {"id": note_id, **_present(fields)}
        return NoteResponse.model_validate(await self._call("updateNote", payload))

    async def update_note_position(
        self,
        note_id: int,
        position_x: int,
        position_y: int,
        width: int | None = None,
        height: int | None = None,
    ) -> NoteResponse:
        payload = {
            "id": note_id,
            "position_x": position_x,
            "position_y": position_y,
            **_present({"width": width, "height": height}),
        }
        return NoteResponse.model_validate(await self._call("updateNotePosition", payload))

    async def delete_note(self, note_id: int) -> DeleteResult:
        return DeleteResult.model_validate(await self._call("deleteNote", {"id": note_id}))


def _present(fields: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in fields.items() if value is not None}
