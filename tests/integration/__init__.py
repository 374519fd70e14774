"""Integration tests for components working together as a system.

Coverage:
    - Connectivity check against a backend health endpoint
    - Full submit flow from user turn to streamed assistant reply
    - Backend rejections and unreachable backends

Uses a FastAPI app implementing the backend contract, reached through
httpx ASGITransport. No network or API keys required.
"""
