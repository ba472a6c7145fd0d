"""FastAPI endpoints for the chat relay.

Streams upstream answers as newline-delimited JSON with async request handling.

Endpoints:
    - GET /health: Service health status
    - POST /api/chat: Relay a question and stream the answer
"""

from src.api.app import app, create_app

__all__ = ["app", "create_app"]
