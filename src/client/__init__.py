"""Chat client core: backend access, session state and turn submission.

Responsibilities:
    - Connectivity check against the backend health endpoint
    - One streamed request/response cycle per submitted turn
    - Incremental decoding of the streamed reply
    - Observable session state with explicit transitions

Contains no UI code; the NiceGUI page subscribes to the session.
"""

from src.client.backend import BackendClient
from src.client.config import ClientSettings, SessionConfig, get_client_settings
from src.client.controller import ChatController
from src.client.session import ChatSession

__all__ = [
    "BackendClient",
    "ChatController",
    "ChatSession",
    "ClientSettings",
    "SessionConfig",
    "get_client_settings",
]
