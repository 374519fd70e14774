"""Client configuration with environment variable loading.

Two layers of configuration:

- ``ClientSettings``: process-wide values read from the environment (backend
  location, timeouts, UI defaults).
- ``SessionConfig``: the values a user types into the page (API key, model,
  developer message). Lives only in memory for the lifetime of one page.
"""

import os
from typing import Literal
from urllib.parse import urlsplit

from dotenv import load_dotenv
from pydantic import BaseModel, Field, SecretStr, field_validator

# Load environment variables from .env file
load_dotenv()

ModelName = Literal["gpt-4.1-mini", "gpt-4", "gpt-3.5-turbo"]

AVAILABLE_MODELS: tuple[str, ...] = ("gpt-4.1-mini", "gpt-4", "gpt-3.5-turbo")
LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})
SAME_ORIGIN_LOCATION = "/api"


class ClientSettings(BaseModel):
    """Process-wide settings for the chat client.

    Attributes:
        api_base_url: Explicit backend base URL (None to derive from the page host).
        local_backend_url: Backend used when the page is served from a local host.
        health_timeout: Connectivity check timeout in seconds.
        request_timeout: Chat request timeout in seconds.
        backend_start_command: Hint shown when the backend cannot be reached.
        default_model: Model preselected on a fresh page.
        default_developer_message: Developer message prefilled on a fresh page.
    """

    api_base_url: str | None = Field(
        default_factory=lambda: os.getenv("API_BASE_URL") or None,
        description="Backend base URL (None to derive from the page host)",
    )
    local_backend_url: str = Field(
        default_factory=lambda: os.getenv("LOCAL_BACKEND_URL", "http://localhost:8000"),
        description="Backend URL used during local development",
    )
    health_timeout: float = Field(
        default_factory=lambda: float(os.getenv("HEALTH_TIMEOUT", "3.0")),
        gt=0.0,
        description="Connectivity check timeout in seconds",
    )
    request_timeout: float = Field(
        default_factory=lambda: float(os.getenv("REQUEST_TIMEOUT", "120.0")),
        gt=0.0,
        description="Chat request timeout in seconds",
    )
    backend_start_command: str = Field(
        default_factory=lambda: os.getenv(
            "BACKEND_START_COMMAND", "uv run uvicorn api.app:app --reload"
        ),
        description="Command suggested when the backend is unreachable",
    )
    default_model: ModelName = Field(
        default_factory=lambda: os.getenv("DEFAULT_MODEL", "gpt-4.1-mini"),
        validate_default=True,
        description="Model preselected on a fresh page",
    )
    default_developer_message: str = Field(
        default_factory=lambda: os.getenv(
            "DEFAULT_DEVELOPER_MESSAGE", "You are a helpful AI assistant."
        ),
        description="Developer message prefilled on a fresh page",
    )

    @field_validator("api_base_url", "local_backend_url")
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str | None:
        """Normalize base URLs so endpoint paths can be appended directly."""
        if v is None:
            return None
        v = v.strip().rstrip("/")
        return v or None


class SessionConfig(BaseModel):
    """Values entered by the user on the chat page.

    Mutated only by direct user input. The API key is a ``SecretStr`` so it
    never shows up in reprs or logs.
    """

    api_key: SecretStr = SecretStr("")
    model: ModelName = "gpt-4.1-mini"
    developer_message: str = "You are a helpful AI assistant."

    model_config = {"validate_assignment": True}

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> "SessionConfig":
        """Create a fresh session config prefilled from settings defaults."""
        return cls(
            model=settings.default_model,
            developer_message=settings.default_developer_message,
        )

    def has_api_key(self) -> bool:
        return bool(self.api_key.get_secret_value().strip())


def is_local_host(hostname: str | None) -> bool:
    """Check whether a hostname refers to the local development machine."""
    return (hostname or "").lower() in LOCAL_HOSTS


def resolve_base_url(settings: ClientSettings, page_url: str | None) -> str:
    """Resolve the backend base URL for a page.

    Resolution order: explicit ``API_BASE_URL``; else the local backend when
    the page is served from a local host; else the page's own origin.

    Args:
        settings: Client settings.
        page_url: URL the browser used to load the page (None if unknown).

    Returns:
        Base URL without a trailing slash.
    """
    if settings.api_base_url:
        return settings.api_base_url

    parts = urlsplit(page_url or "")
    if not parts.hostname or is_local_host(parts.hostname):
        return settings.local_backend_url

    return f"{parts.scheme}://{parts.netloc}"


def describe_backend_location(settings: ClientSettings, page_url: str | None) -> str:
    """Human-readable backend location for error messages.

    Same-origin deployments are described by their relative API path.
    """
    if settings.api_base_url:
        return settings.api_base_url
    hostname = urlsplit(page_url or "").hostname
    if not hostname or is_local_host(hostname):
        return settings.local_backend_url
    return SAME_ORIGIN_LOCATION


def get_client_settings() -> ClientSettings:
    """Create client settings from environment.

    Returns:
        Configured ClientSettings instance.
    """
    return ClientSettings()
