"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Settings form (API key, model, developer message)
    - Chat message display with streaming updates
    - Offline and error banners

Contains no business logic. Delegates all operations to the chat controller
and redraws whenever the session changes.
"""
