"""Pure projection helpers for the chat page.

Everything here maps session state to display values without touching
NiceGUI, so the rendering rules can be tested on their own.
"""

from src.models.schemas import BackendStatus, ConversationTurn, Role, TransportState

EMPTY_STATE_TEXT = "Start a conversation by typing a message below!"
THINKING_TEXT = "Thinking..."
PENDING_CONTENT = "..."
OFFLINE_WARNING = "Backend API appears to be offline. Make sure the backend is running."


def role_label(role: Role) -> str:
    return "You" if role is Role.USER else "Assistant"


def role_icon(role: Role) -> str:
    return "person" if role is Role.USER else "smart_toy"


def bubble_class(role: Role) -> str:
    return "message-user" if role is Role.USER else "message-assistant"


def row_alignment(role: Role) -> str:
    return "justify-end" if role is Role.USER else "justify-start"


def turn_text(turn: ConversationTurn, is_active: bool) -> str:
    """Text to display for a turn.

    An in-progress assistant turn with no content yet shows a pending marker.
    """
    if not turn.content and is_active:
        return PENDING_CONTENT
    return turn.content


def offline_warning(status: BackendStatus | None, local_host: bool, start_command: str) -> str | None:
    """Banner text when the backend health check reported offline.

    The start command is only suggested when the page runs on a local host.
    """
    if status is not BackendStatus.OFFLINE:
        return None
    if local_host:
        return f"{OFFLINE_WARNING} Start it with: {start_command}"
    return OFFLINE_WARNING


def input_locked(state: TransportState) -> bool:
    """Whether the message input is disabled while a request is sent or streamed."""
    return state in (TransportState.SENDING, TransportState.STREAMING)


def send_icon(state: TransportState) -> str:
    return "hourglass_empty" if input_locked(state) else "send"


def error_text(state: TransportState, error: str | None) -> str | None:
    """Error banner text; only shown while the session is in the error state."""
    if state is not TransportState.ERROR:
        return None
    return error
