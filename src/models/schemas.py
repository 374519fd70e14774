import uuid
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class Role(str, Enum):
    """Who produced a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"


class BackendStatus(str, Enum):
    """Outcome of the startup connectivity check."""

    CHECKING = "checking"
    ONLINE = "online"
    OFFLINE = "offline"


class TransportState(str, Enum):
    """Transport phase driving which UI affordances are enabled."""

    IDLE = "idle"
    AWAITING_CONNECTIVITY_CHECK = "awaiting_connectivity_check"
    CONNECTIVITY_ONLINE = "connectivity_online"
    CONNECTIVITY_OFFLINE = "connectivity_offline"
    SENDING = "sending"
    STREAMING = "streaming"
    ERROR = "error"


class ConversationTurn(BaseModel):
    """A single message in the displayed conversation.

    Attributes:
        turn_id: Opaque handle used to address the turn after creation.
        role: The speaker (user or assistant).
        content: The message text.
        time: Display timestamp.
    """

    turn_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    role: Role
    content: str = ""
    time: str = Field(default_factory=lambda: datetime.now().strftime("%I:%M %p"))


class ChatRequest(BaseModel):
    """Request payload for the backend chat endpoint.

    Field names are fixed by the backend contract.

    Attributes:
        developer_message: System instruction for the model.
        user_message: The latest user message (prior turns are not replayed).
        model: Model identifier.
        api_key: Provider credential, forwarded as-is.
    """

    developer_message: str
    user_message: str = Field(..., min_length=1)
    model: str
    api_key: str = Field(..., min_length=1)

    @field_validator("user_message", mode="before")
    @classmethod
    def strip_message(cls, v: str) -> str:
        """Strip whitespace from message before validation."""
        if isinstance(v, str):
            return v.strip()
        return v
