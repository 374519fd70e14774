"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - settings: ClientSettings pointing at a fixed test backend
    - session: Fresh ChatSession
    - session_config: SessionConfig with an API key filled in
    - make_controller: Build a ChatController over any httpx transport
    - fake_backend_app: FastAPI app implementing the backend contract
    - chunked_response: Build a response whose body arrives in given chunks

Implements async fixtures with proper cleanup, scoped appropriately for performance.
"""

import asyncio
from collections.abc import AsyncIterator, Callable, Sequence

import httpx
import pytest
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response, StreamingResponse

from src.client.backend import BackendClient
from src.client.config import ClientSettings, SessionConfig
from src.client.controller import ChatController
from src.client.session import ChatSession

TEST_BASE_URL = "http://backend.test"


@pytest.fixture
def settings() -> ClientSettings:
    """Return settings with an explicit backend URL.

    Returns:
        ClientSettings independent of the surrounding environment.
    """
    return ClientSettings(
        api_base_url=TEST_BASE_URL,
        local_backend_url="http://localhost:8000",
        health_timeout=3.0,
        request_timeout=5.0,
        backend_start_command="uv run uvicorn api.app:app --reload",
        default_model="gpt-4.1-mini",
        default_developer_message="You are a helpful AI assistant.",
    )


@pytest.fixture
def session() -> ChatSession:
    return ChatSession()


@pytest.fixture
def session_config() -> SessionConfig:
    """Return a session config with a credential entered."""
    return SessionConfig(api_key="sk-test-key")


@pytest.fixture
def make_controller(
    session: ChatSession,
    session_config: SessionConfig,
    settings: ClientSettings,
) -> Callable[[httpx.AsyncBaseTransport], ChatController]:
    """Return a factory building a controller over the given transport."""

    def factory(transport: httpx.AsyncBaseTransport) -> ChatController:
        backend = BackendClient(
            TEST_BASE_URL,
            request_timeout=settings.request_timeout,
            health_timeout=settings.health_timeout,
            transport=transport,
        )
        return ChatController(session, session_config, backend, settings)

    return factory


def build_chunked_response(
    chunks: Sequence[bytes],
    status_code: int = 200,
    gate: asyncio.Event | None = None,
) -> httpx.Response:
    """Build a response whose body is delivered exactly as the given chunks.

    Args:
        chunks: Raw body chunks in delivery order.
        status_code: HTTP status of the response.
        gate: Optional event awaited before the first chunk is delivered.
    """

    async def body() -> AsyncIterator[bytes]:
        if gate is not None:
            await gate.wait()
        for chunk in chunks:
            yield chunk

    return httpx.Response(
        status_code,
        headers={"content-type": "text/plain; charset=utf-8"},
        content=body(),
    )


@pytest.fixture
def chunked_response() -> Callable[..., httpx.Response]:
    """Return the chunked response builder."""
    return build_chunked_response


@pytest.fixture
def fake_backend_app() -> FastAPI:
    """Create a FastAPI app implementing the backend contract.

    The chat endpoint streams back ``"Echo: <user_message>"`` in small pieces,
    rejects the API key ``"sk-invalid"`` with 401, and records every payload
    on ``app.state.requests``.
    """
    application = FastAPI()
    application.state.requests = []
    application.state.healthy = True

    @application.get("/api/health")
    async def health() -> PlainTextResponse:
        if application.state.healthy:
            return PlainTextResponse("ok")
        return PlainTextResponse("maintenance", status_code=503)

    @application.post("/api/chat")
    async def chat(request: Request) -> Response:
        payload = await request.json()
        application.state.requests.append(payload)

        if payload.get("api_key") == "sk-invalid":
            return PlainTextResponse("Invalid API key", status_code=401)

        reply = f"Echo: {payload['user_message']}"

        async def generate() -> AsyncIterator[str]:
            for start in range(0, len(reply), 4):
                yield reply[start : start + 4]

        return StreamingResponse(generate(), media_type="text/plain; charset=utf-8")

    return application


@pytest.fixture
def asgi_transport(fake_backend_app: FastAPI) -> httpx.ASGITransport:
    """Transport routing requests into the fake backend app."""
    return httpx.ASGITransport(app=fake_backend_app)
