"""Test package for the chat client.

Provides test coverage for all components with unit tests
for isolated logic and integration tests for workflows.

Structure:
    - unit/: Individual function and class tests
    - integration/: Controller and backend client against a backend app

Uses pytest with pytest-asyncio for coroutines and pytest-check for soft assertions.
"""
