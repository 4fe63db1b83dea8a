"""HTTP client for the Freedcamp REST API.

Freedcamp takes request bodies as form fields: the payload is JSON-encoded
into a single ``data`` field and the auth fields ride alongside it. Replies
are JSON envelopes ``{"http_code": ..., "msg": ..., "data": {...}}`` whose
``http_code`` can report an error even when the HTTP status is 200, so both
have to be checked.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Self

import httpx

from ..utils.errors import UpstreamResponseError
from .auth import AuthMaterial
from .config import DEFAULT_API_URL

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0  # seconds


@dataclass
class UpstreamReply:
    """A parsed Freedcamp reply.

    Attributes:
        status_code: HTTP status of the reply
        payload: Parsed JSON body, or None when a failed reply had no JSON body
        error: Failure message, None when the call succeeded
    """

    status_code: int
    payload: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def data(self) -> Any:
        """The envelope's ``data`` member."""
        if isinstance(self.payload, dict):
            return self.payload.get("data")
        return None


def _embedded_error_code(payload: Any) -> int | None:
    """Return the envelope's ``http_code`` as an int, if there is one."""
    if not isinstance(payload, dict):
        return None
    try:
        return int(payload.get("http_code"))
    except (TypeError, ValueError):
        return None


def _error_message(payload: Any, response: httpx.Response) -> str:
    if isinstance(payload, dict) and payload.get("msg"):
        return str(payload["msg"])
    return response.reason_phrase or f"HTTP {response.status_code}"


class FreedcampClient:
    """Async client for Freedcamp API calls.

    Usage:
        async with FreedcampClient() as client:
            reply = await client.send("POST", "tasks", auth, body={"title": "..."})
            if not reply.ok:
                print(reply.error)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: Freedcamp API root, e.g. https://freedcamp.com/api/v1
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used to stub Freedcamp in tests)
        """
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def send(
        self,
        method: str,
        path: str,
        auth: AuthMaterial,
        body: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> UpstreamReply:
        """Make one Freedcamp API call.

        Args:
            method: HTTP method
            path: Path below the API root, e.g. "tasks/123/edit"
            auth: Auth material for this call
            body: Payload to JSON-encode into the ``data`` form field
            params: Extra query parameters

        Returns:
            UpstreamReply, failed when the HTTP status or the embedded
            ``http_code`` signals an error

        Raises:
            httpx.RequestError: On network failures
            UpstreamResponseError: When a successful reply is not JSON
        """
        query = dict(params or {})
        form: dict[str, str] | None = None

        if body is not None:
            form = {"data": json.dumps(body), **auth.as_params()}
        elif method.upper() in ("GET", "DELETE"):
            # A bodyless request cannot carry form fields, so auth goes in the query
            query.update(auth.as_params())
        else:
            form = auth.as_params()

        logger.info(f"Making {method} request to Freedcamp API: {self.url(path)}")

        client = await self._get_client()
        response = await client.request(
            method,
            self.url(path),
            params=query or None,
            data=form,
        )
        return self._parse(response)

    def _parse(self, response: httpx.Response) -> UpstreamReply:
        try:
            payload = response.json()
        except ValueError:
            if response.is_success:
                raise UpstreamResponseError(response.status_code, response.text) from None
            logger.warning(f"Freedcamp returned HTTP {response.status_code} with a non-JSON body")
            return UpstreamReply(
                status_code=response.status_code,
                error=_error_message(None, response),
            )

        logger.debug(f"Freedcamp API response: {payload}")

        embedded = _embedded_error_code(payload)
        if not response.is_success or (embedded is not None and embedded >= 400):
            error = _error_message(payload, response)
            logger.warning(
                f"Freedcamp call failed (HTTP {response.status_code}, "
                f"http_code {embedded}): {error}"
            )
            return UpstreamReply(status_code=response.status_code, payload=payload, error=error)

        return UpstreamReply(status_code=response.status_code, payload=payload)
