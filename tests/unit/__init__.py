"""Unit tests for individual components in isolation.

Ensures fast execution with minimal dependencies.

Coverage:
    - client/: configuration, session state, backend client, controller
    - ui/: projection helpers for the chat page

Uses httpx.MockTransport in place of a network so chunk boundaries are exact.
Leverages pytest-check for multiple assertions per test.
"""
