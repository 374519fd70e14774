"""Chat session controller.

Runs the connectivity check and one request/response cycle per submission,
reconciling the streamed reply into the ``ChatSession``.

Submission sequence:

1. Validate the API key and message (no state change besides the error).
2. Append the user turn and clear the input.
3. Open the chat stream; only on a success status append the assistant
   placeholder.
4. Append each decoded chunk to the placeholder through its handle.
5. On any failure remove the placeholder and show one error message. The user
   turn is kept so the message can be retried without retyping.
6. Always clear the submitting flag last.
"""

import asyncio
import logging
from collections.abc import Callable

from src.client.backend import BackendClient
from src.client.config import ClientSettings, SessionConfig
from src.client.errors import BackendUnreachableError, ChatClientError, MissingInputError
from src.client.session import ChatSession
from src.models.schemas import BackendStatus, ChatRequest

logger = logging.getLogger(__name__)

GENERIC_ERROR = "An error occurred"
MISSING_API_KEY = "Please enter your OpenAI API key"
MISSING_MESSAGE = "Please enter a message"


class ChatController:
    """Drives a ``ChatSession`` from user actions and backend responses."""

    def __init__(
        self,
        session: ChatSession,
        config: SessionConfig,
        backend: BackendClient,
        settings: ClientSettings,
        backend_location: str | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            session: State container owned by this controller.
            config: User-entered configuration, read at submit time.
            backend: Client for the chat backend.
            settings: Process-wide settings (start-command hint).
            backend_location: Location named in connection errors.
                Defaults to the backend base URL.
        """
        self.session = session
        self.config = config
        self._backend = backend
        self._settings = settings
        self._backend_location = backend_location or backend.base_url
        self._task: asyncio.Task | None = None

    async def check_backend(self) -> BackendStatus:
        """Check backend connectivity once and record the result."""
        self.session.set_backend_status(BackendStatus.CHECKING)
        status = await self._backend.check_health()
        self.session.set_backend_status(status)
        return status

    def validate(self, message: str) -> str:
        """Check the submission preconditions.

        Returns:
            The trimmed message.

        Raises:
            MissingInputError: If the API key or the message is empty.
        """
        if not self.config.has_api_key():
            raise MissingInputError(MISSING_API_KEY)
        text = (message or "").strip()
        if not text:
            raise MissingInputError(MISSING_MESSAGE)
        return text

    def can_submit(self, message: str) -> bool:
        """Whether the send affordance should be enabled."""
        return (
            not self.session.is_submitting
            and self.config.has_api_key()
            and bool((message or "").strip())
        )

    async def submit(
        self,
        message: str,
        on_accepted: Callable[[], None] | None = None,
    ) -> bool:
        """Submit one conversation turn and stream the reply into the session.

        Args:
            message: Raw text from the input field.
            on_accepted: Called once the message passed validation and the
                user turn was appended (the page clears its input here).

        Returns:
            True if the reply streamed to completion.
        """
        if self.session.is_submitting:
            logger.debug("Ignoring submit while a request is in flight")
            return False

        try:
            text = self.validate(message)
        except MissingInputError as e:
            self.session.set_error(str(e))
            return False

        self.session.begin_submission()
        self._task = asyncio.current_task()
        placeholder_id: str | None = None
        try:
            self.session.append_user_turn(text)
            if on_accepted is not None:
                on_accepted()

            request = ChatRequest(
                developer_message=self.config.developer_message,
                user_message=text,
                model=self.config.model,
                api_key=self.config.api_key.get_secret_value(),
            )

            async with self._backend.open_chat(request) as stream:
                placeholder_id = self.session.append_assistant_placeholder()
                async for chunk in stream:
                    self.session.append_chunk(placeholder_id, chunk)

            self.session.finalize_turn(placeholder_id)
            logger.info("Chat reply streamed to completion")
            return True

        except asyncio.CancelledError:
            logger.info("Chat submission cancelled")
            if placeholder_id is not None:
                self.session.remove_turn(placeholder_id)
            raise

        except Exception as e:
            if placeholder_id is not None:
                self.session.remove_turn(placeholder_id)
            self.session.set_error(self._describe_error(e))
            return False

        finally:
            self._task = None
            self.session.end_submission()

    def _describe_error(self, error: Exception) -> str:
        """Turn a failure into the single visible error string."""
        if isinstance(error, BackendUnreachableError):
            logger.warning(f"Backend unreachable: {error}")
            return (
                "Cannot connect to backend API. Please ensure the backend is running at "
                f"{self._backend_location}. If running locally, start the backend with: "
                f"{self._settings.backend_start_command}"
            )
        if isinstance(error, ChatClientError):
            logger.warning(f"Chat request failed: {error}")
        else:
            logger.exception("Unexpected error during chat submission")
        return str(error) or GENERIC_ERROR

    def clear(self) -> None:
        """Clear the conversation and any visible error."""
        self.session.clear()

    def cancel(self) -> None:
        """Cancel the submission in flight, if any."""
        if self._task is not None and not self._task.done():
            logger.info("Cancelling in-flight chat submission")
            self._task.cancel()
