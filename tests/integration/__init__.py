"""Integration tests for components working together as a system.

Coverage:
    - Relay endpoint through the real FastAPI app
    - Chat controller driving the app against a fake upstream

The app is reached through httpx.ASGITransport and the upstream through
httpx.MockTransport.
"""
