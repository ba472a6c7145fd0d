"""Stream chunk variants emitted by the conversational API.

Upstream sends loosely typed JSON objects. Each recognized shape is modeled
as its own variant and ``decode_chunk`` tries them in a fixed precedence,
falling through to ``UnrecognizedChunk``.
"""

import logging
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class StreamStatus(str, Enum):
    """Control signals carried by ``{"status": ...}`` chunks."""

    COMPLETE = "complete"
    PROCESSING = "processing"


class _Chunk(BaseModel):
    model_config = ConfigDict(frozen=True)


class TokenChunk(_Chunk):
    """One increment of assistant text."""

    kind: Literal["token"] = "token"
    token: str


class AnswerChunk(_Chunk):
    """A complete, non-incremental answer."""

    kind: Literal["answer"] = "answer"
    answer: str


class FinalPayload(_Chunk):
    session_id: str | None = None
    answer: str | None = None


class FinalChunk(_Chunk):
    """End-of-turn metadata."""

    kind: Literal["final"] = "final"
    final: FinalPayload


class SessionChunk(_Chunk):
    """Session id announcement."""

    kind: Literal["session_id"] = "session_id"
    session_id: str


class StatusChunk(_Chunk):
    """Control signal without payload."""

    kind: Literal["status"] = "status"
    status: StreamStatus


class UnrecognizedChunk(_Chunk):
    """Any record that matches no known shape."""

    kind: Literal["unrecognized"] = "unrecognized"
    payload: Any = None


StreamChunk = Annotated[
    TokenChunk | AnswerChunk | FinalChunk | SessionChunk | StatusChunk | UnrecognizedChunk,
    Field(discriminator="kind"),
]

# Precedence order: the first key present with a valid value wins.
_VARIANTS: tuple[tuple[str, type[_Chunk]], ...] = (
    ("token", TokenChunk),
    ("answer", AnswerChunk),
    ("final", FinalChunk),
    ("session_id", SessionChunk),
    ("status", StatusChunk),
)


def decode_chunk(record: Any) -> StreamChunk:
    """Match a parsed JSON record against the known chunk shapes.

    A key only counts when its value is not null, false or an empty
    string. A key whose value does not validate falls through to the next
    shape.

    Args:
        record: Any value produced by the line parser.

    Returns:
        The first matching variant, or ``UnrecognizedChunk``.
    """
    if not isinstance(record, dict):
        return UnrecognizedChunk(payload=record)

    for key, variant in _VARIANTS:
        value = record.get(key)
        if value is None or value is False or value == "":
            continue
        try:
            return variant.model_validate({key: value})
        except ValidationError:
            logger.debug(f"Field {key!r} present but invalid: {value!r}")

    return UnrecognizedChunk(payload=record)
