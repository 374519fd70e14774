"""Observable chat session state.

``ChatSession`` owns the turn sequence and the transport flags of one page.
All changes go through its transition methods, and every transition notifies
subscribers so the rendering surface can redraw instead of polling.
"""

import logging
from collections.abc import Callable

from src.models.schemas import BackendStatus, ConversationTurn, Role, TransportState

logger = logging.getLogger(__name__)

Listener = Callable[[], None]

BUSY_STATES = frozenset({TransportState.SENDING, TransportState.STREAMING})


class ChatSession:
    """Manages chat state for a single page."""

    def __init__(self) -> None:
        self.turns: list[ConversationTurn] = []
        self.error: str | None = None
        self.backend_status: BackendStatus | None = None
        self.transport_state: TransportState = TransportState.IDLE
        self._active_turn_id: str | None = None
        self._listeners: list[Listener] = []

    # --- observation ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener.

        Returns:
            A callable that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    @property
    def active_turn(self) -> ConversationTurn | None:
        """The in-progress assistant turn, if any."""
        if self._active_turn_id is None:
            return None
        return self._find(self._active_turn_id)

    @property
    def is_submitting(self) -> bool:
        """Whether a request is being sent or its reply streamed."""
        return self.transport_state in BUSY_STATES

    @property
    def show_thinking(self) -> bool:
        """Whether the transient thinking placeholder should be displayed."""
        return self.is_submitting and self.active_turn is None

    def _find(self, turn_id: str) -> ConversationTurn | None:
        for turn in self.turns:
            if turn.turn_id == turn_id:
                return turn
        return None

    # --- transitions ---

    def append_user_turn(self, content: str) -> ConversationTurn:
        turn = ConversationTurn(role=Role.USER, content=content)
        self.turns.append(turn)
        self._notify()
        return turn

    def append_assistant_placeholder(self) -> str:
        """Append an empty in-progress assistant turn.

        Returns:
            Handle of the new turn, used for every later update.

        Raises:
            RuntimeError: If another assistant turn is still in progress.
        """
        if self.active_turn is not None:
            raise RuntimeError("An assistant turn is already in progress")

        turn = ConversationTurn(role=Role.ASSISTANT)
        self.turns.append(turn)
        self._active_turn_id = turn.turn_id
        self.transport_state = TransportState.STREAMING
        self._notify()
        return turn.turn_id

    def append_chunk(self, turn_id: str, chunk: str) -> bool:
        """Append streamed text to the in-progress assistant turn.

        Updates addressed to anything other than the in-progress turn (for
        example after the conversation was cleared mid-stream) are dropped.

        Returns:
            True if the chunk was applied.
        """
        if turn_id != self._active_turn_id:
            logger.debug(f"Dropping chunk for inactive turn {turn_id}")
            return False

        turn = self._find(turn_id)
        if turn is None or turn.role is not Role.ASSISTANT:
            logger.debug(f"Dropping chunk for missing turn {turn_id}")
            return False

        turn.content += chunk
        self._notify()
        return True

    def finalize_turn(self, turn_id: str) -> None:
        """Mark the in-progress assistant turn as complete."""
        if turn_id == self._active_turn_id:
            self._active_turn_id = None
            self._notify()

    def remove_turn(self, turn_id: str) -> None:
        """Remove a turn entirely (used to roll back a failed reply)."""
        if turn_id == self._active_turn_id:
            self._active_turn_id = None
        self.turns = [turn for turn in self.turns if turn.turn_id != turn_id]
        self._notify()

    def set_error(self, message: str) -> None:
        self.error = message
        self.transport_state = TransportState.ERROR
        self._notify()

    def clear_error(self) -> None:
        self.error = None
        if self.transport_state is TransportState.ERROR:
            self.transport_state = TransportState.IDLE
        self._notify()

    def set_backend_status(self, status: BackendStatus) -> None:
        self.backend_status = status
        # A submission in flight or a visible error owns the transport state.
        if not self.is_submitting and self.transport_state is not TransportState.ERROR:
            self.transport_state = {
                BackendStatus.CHECKING: TransportState.AWAITING_CONNECTIVITY_CHECK,
                BackendStatus.ONLINE: TransportState.CONNECTIVITY_ONLINE,
                BackendStatus.OFFLINE: TransportState.CONNECTIVITY_OFFLINE,
            }[status]
        self._notify()

    def begin_submission(self) -> None:
        self.error = None
        self.transport_state = TransportState.SENDING
        self._notify()

    def end_submission(self) -> None:
        if self.transport_state in BUSY_STATES:
            self.transport_state = TransportState.IDLE
        self._notify()

    def clear(self) -> None:
        """Reset the conversation and error; configuration is untouched."""
        self.turns = []
        self.error = None
        self._active_turn_id = None
        if self.transport_state is TransportState.ERROR:
            self.transport_state = TransportState.IDLE
        self._notify()
