"""HTTP client for the chat backend.

Talks to two endpoints:

- ``GET /api/health``: best-effort connectivity check, collapsed to online/offline.
- ``POST /api/chat``: returns the assistant reply as a raw streamed text body
  with no framing; the concatenation of all chunks is the full reply.

The response body is consumed as raw bytes and decoded with a stateful
incremental decoder, so multi-byte characters split across transport chunks
come out intact.
"""

import asyncio
import codecs
import logging
from collections.abc import AsyncIterable, AsyncIterator
from contextlib import asynccontextmanager

import httpx

from src.client.errors import BackendUnreachableError, RequestFailedError, StreamReadError
from src.models.schemas import BackendStatus, ChatRequest

logger = logging.getLogger(__name__)

HEALTH_PATH = "/api/health"
CHAT_PATH = "/api/chat"
DEFAULT_ERROR_DETAIL = "Failed to get response from API"


async def decode_text_stream(
    chunks: AsyncIterable[bytes],
    encoding: str = "utf-8",
) -> AsyncIterator[str]:
    """Decode a byte stream into text chunks, carrying partial characters over.

    Invalid byte sequences are replaced rather than raised.

    Args:
        chunks: Raw byte chunks in receipt order.
        encoding: Text encoding of the stream.

    Yields:
        Non-empty decoded text chunks in receipt order.
    """
    decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
    async for chunk in chunks:
        text = decoder.decode(chunk)
        if text:
            yield text

    tail = decoder.decode(b"", final=True)
    if tail:
        yield tail


class ChatStream:
    """An open, successful chat response whose body has not been read yet."""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    @property
    def status_code(self) -> int:
        return self._response.status_code

    async def __aiter__(self) -> AsyncIterator[str]:
        try:
            async for text in decode_text_stream(self._response.aiter_bytes()):
                yield text
        except (httpx.TransportError, httpx.StreamError) as e:
            raise StreamReadError(f"Stream interrupted: {e}") from e


class BackendClient:
    """Async client for the chat backend.

    A fresh ``httpx.AsyncClient`` is opened per call, so the client holds no
    connection state between turns.
    """

    def __init__(
        self,
        base_url: str,
        request_timeout: float = 120.0,
        health_timeout: float = 3.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the backend client.

        Args:
            base_url: Backend base URL without trailing slash.
            request_timeout: Timeout for chat requests in seconds.
            health_timeout: Overall deadline for the health check in seconds.
            transport: Optional transport override (used by tests).
        """
        self._base_url = base_url.rstrip("/")
        self._request_timeout = request_timeout
        self._health_timeout = health_timeout
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    def _http_client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout,
            transport=self._transport,
        )

    async def check_health(self) -> BackendStatus:
        """Check the backend health endpoint.

        The whole exchange (connect, headers and body) must finish within
        the health timeout. Any network error, timeout or non-success status
        is reported as offline; the cause is only logged.

        Returns:
            BackendStatus.ONLINE or BackendStatus.OFFLINE.
        """
        try:
            async with asyncio.timeout(self._health_timeout):
                async with self._http_client(self._health_timeout) as client:
                    response = await client.get(HEALTH_PATH)
        except TimeoutError:
            logger.warning(f"Backend health check timed out after {self._health_timeout}s")
            return BackendStatus.OFFLINE
        except httpx.HTTPError as e:
            logger.warning(f"Backend health check failed: {e!r}")
            return BackendStatus.OFFLINE

        if not response.is_success:
            logger.warning(f"Backend health check returned HTTP {response.status_code}")
            return BackendStatus.OFFLINE

        logger.info(f"Backend at {self._base_url} is online")
        return BackendStatus.ONLINE

    @asynccontextmanager
    async def open_chat(self, request: ChatRequest) -> AsyncIterator[ChatStream]:
        """Send a chat request and yield the open response stream.

        The context is only entered once the backend has answered with a
        success status, so callers can create UI state for the reply inside it.

        Args:
            request: The chat payload.

        Yields:
            ChatStream over the decoded reply text.

        Raises:
            BackendUnreachableError: If no connection could be established.
            RequestFailedError: If the backend answered with a non-success status.
            StreamReadError: If reading the body fails midway.
        """
        logger.info(f"Sending chat request to {self._base_url}{CHAT_PATH} (model={request.model})")

        async with self._http_client(self._request_timeout) as client:
            try:
                async with client.stream(
                    "POST",
                    CHAT_PATH,
                    json=request.model_dump(),
                ) as response:
                    if not response.is_success:
                        detail = await self._read_error_detail(response)
                        logger.warning(f"Chat request failed with HTTP {response.status_code}")
                        raise RequestFailedError(detail, status_code=response.status_code)
                    yield ChatStream(response)
            except (httpx.ConnectError, httpx.ConnectTimeout) as e:
                raise BackendUnreachableError(self._base_url, str(e)) from e
            except httpx.TransportError as e:
                raise RequestFailedError(str(e) or DEFAULT_ERROR_DETAIL) from e

    async def _read_error_detail(self, response: httpx.Response) -> str:
        """Read a failed response body as the error detail."""
        try:
            await response.aread()
        except httpx.HTTPError as e:
            logger.warning(f"Could not read error body: {e!r}")
            return DEFAULT_ERROR_DETAIL
        return response.text or DEFAULT_ERROR_DETAIL
