"""AI Chat - browser chat client for a streaming completion backend.

Combines NiceGUI for the web interface, HTTPX for streamed HTTP,
and Pydantic for configuration and payload validation.

Components:
    - client: backend HTTP client, session state and the chat controller
    - ui: web interface for chat interactions
    - models: conversation and request schemas
"""

__version__ = "0.1.0"
