"""Pydantic models for the relay API and the upstream stream.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - ChatRequest: Incoming relay request payload
    - ErrorResponse: Body of a failed relay request
    - StreamChunk: Tagged union of upstream stream records
"""

from src.models.chunks import (
    AnswerChunk,
    FinalChunk,
    FinalPayload,
    SessionChunk,
    StatusChunk,
    StreamChunk,
    StreamStatus,
    TokenChunk,
    UnrecognizedChunk,
    decode_chunk,
)
from src.models.schemas import ChatRequest, ErrorResponse

__all__ = [
    "AnswerChunk",
    "ChatRequest",
    "ErrorResponse",
    "FinalChunk",
    "FinalPayload",
    "SessionChunk",
    "StatusChunk",
    "StreamChunk",
    "StreamStatus",
    "TokenChunk",
    "UnrecognizedChunk",
    "decode_chunk",
]
