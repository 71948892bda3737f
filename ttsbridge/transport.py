"""HTTP transport used by the TTS adapters.

Adapters never talk to the network directly. They receive an object that
implements the Transport protocol, which keeps them testable with canned
responses and lets a host application supply its own HTTP stack.
"""

import asyncio
import enum
import functools
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Protocol, runtime_checkable

import requests

from ttsbridge.base import TransportError

logger = logging.getLogger(__name__)


class ResponseType(enum.Enum):
    """How the transport should decode a response body."""

    JSON = 1
    TEXT = 2
    BINARY = 3


@dataclass(frozen=True)
class Body:
    """Request body tagged with how it must be encoded on the wire."""

    kind: str
    payload: Any

    @classmethod
    def json(cls, value: Any) -> "Body":
        """Serialize a structured value as a JSON request body."""
        return cls("json", value)

    @classmethod
    def text(cls, value: str) -> "Body":
        """Send a string as-is, UTF-8 encoded."""
        return cls("text", value)

    @classmethod
    def binary(cls, value: bytes) -> "Body":
        """Send raw bytes."""
        return cls("binary", value)

    def encode(self) -> bytes:
        if self.kind == "json":
            return json.dumps(self.payload, ensure_ascii=False).encode("utf-8")
        if self.kind == "text":
            return self.payload.encode("utf-8")
        return bytes(self.payload)


@dataclass(frozen=True)
class TransportResponse:
    """
    Result of a single HTTP exchange.

    Attributes:
        ok: True when the status is in the 2xx range
        status: HTTP status code
        data: Response body, decoded according to the requested ResponseType
        headers: Response headers
    """

    ok: bool
    status: int
    data: Any
    headers: Mapping[str, str] = field(default_factory=dict)


@runtime_checkable
class Transport(Protocol):
    """
    Protocol for the HTTP capability injected into adapters.

    Implementations report HTTP failure statuses through ``ok``/``status``
    instead of raising; only network-level failures raise.
    """

    async def fetch(
        self,
        url: str,
        *,
        method: str = "POST",
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[Body] = None,
        response_type: ResponseType = ResponseType.BINARY
    ) -> TransportResponse:
        """
        Perform one HTTP request.

        Args:
            url: Request URL
            method: HTTP method
            headers: Request headers
            body: Request body, or None for an empty body
            response_type: How to decode the response body

        Returns:
            TransportResponse with ok flag, status code and body

        Raises:
            TransportError: If the request could not be completed
        """
        ...


class RequestsTransport:
    """
    Transport backed by a requests Session.

    requests is blocking, so each call runs in the event loop's default
    executor.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = 30.0
    ):
        """
        Initialize the transport.

        Args:
            session: Session to reuse for connection pooling (created if None)
            timeout: Per-request timeout in seconds, None to wait forever
        """
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.timeout = timeout

    def close(self) -> None:
        """Close the session if this transport created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    async def fetch(
        self,
        url: str,
        *,
        method: str = "POST",
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[Body] = None,
        response_type: ResponseType = ResponseType.BINARY
    ) -> TransportResponse:
        loop = asyncio.get_running_loop()
        send = functools.partial(
            self._send, url, method, dict(headers or {}), body, response_type
        )
        return await loop.run_in_executor(None, send)

    def _send(
        self,
        url: str,
        method: str,
        headers: dict,
        body: Optional[Body],
        response_type: ResponseType
    ) -> TransportResponse:
        """Blocking request; runs in executor."""
        data = body.encode() if body is not None else None
        try:
            response = self.session.request(
                method, url, headers=headers, data=data, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        logger.debug("%s %s -> %s (%d bytes)", method, url, response.status_code, len(response.content))
        return TransportResponse(
            ok=response.ok,
            status=response.status_code,
            data=self._read(response, response_type),
            headers=dict(response.headers),
        )

    @staticmethod
    def _read(response: requests.Response, response_type: ResponseType) -> Any:
        if response_type is ResponseType.BINARY:
            return response.content
        if response_type is ResponseType.TEXT:
            return response.text
        try:
            return response.json()
        except ValueError:
            # Error pages are rarely JSON; hand back the text instead
            return response.text
