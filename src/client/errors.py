"""Errors raised while submitting a chat turn.

All of them are caught by ``ChatController.submit`` and turned into a single
visible error string.
"""


class ChatClientError(Exception):
    """Base class for chat client failures."""

    pass


class MissingInputError(ChatClientError):
    """Raised when a required field (API key, message) is empty."""

    pass


class RequestFailedError(ChatClientError):
    """Raised when the backend answers with a non-success status.

    The message is the response body text, which the backend already makes
    human-readable.
    """

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        super().__init__(detail)
        self.status_code = status_code


class BackendUnreachableError(ChatClientError):
    """Raised when the backend cannot be reached at all."""

    def __init__(self, base_url: str, reason: str = "") -> None:
        message = f"Cannot reach backend at {base_url}"
        super().__init__(f"{message}: {reason}" if reason else message)
        self.base_url = base_url


class StreamReadError(ChatClientError):
    """Raised when reading the streamed response body fails."""

    pass
