"""Collection Chat Relay - streaming chat against a hosted conversational API.

Combines FastAPI for the streaming relay route, httpx for upstream and
client transport, NiceGUI for the chat page, and Pydantic for data validation.

Components:
    - api: HTTP endpoints and NDJSON streaming responses
    - relay: Upstream configuration, call and re-framing
    - streaming: Incremental line parser shared by relay and client
    - chat: Stream reducer, conversation store and turn controller
    - models: Request, error and stream chunk schemas
    - ui: Web interface for chat interactions
"""

__version__ = "0.1.0"
