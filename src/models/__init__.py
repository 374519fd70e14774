"""Pydantic models for conversation state and the backend contract.

Provides type safety and validation for everything the client holds or sends.

Models:
    - Role: Speaker of a turn
    - ConversationTurn: Individual message in the conversation
    - ChatRequest: Outgoing chat request payload
    - BackendStatus: Connectivity check outcome
    - TransportState: Current transport phase
"""

from src.models.schemas import (
    BackendStatus,
    ChatRequest,
    ConversationTurn,
    Role,
    TransportState,
)

__all__ = ["BackendStatus", "ChatRequest", "ConversationTurn", "Role", "TransportState"]
