"""Fold stream chunks into the assistant message of one turn."""

from pydantic import BaseModel, ConfigDict

from src.models.chunks import (
    AnswerChunk,
    FinalChunk,
    SessionChunk,
    StatusChunk,
    StreamChunk,
    StreamStatus,
    TokenChunk,
)

APOLOGY_MESSAGE = "Sorry, I encountered an error. Please try again."


class TurnState(BaseModel):
    """Assembled response of the turn in flight.

    Attributes:
        content: Assistant text accumulated so far.
        is_streaming: Whether more text is expected.
        is_complete: Whether the turn has ended.
        session_id: Upstream session id known for the conversation.
    """

    model_config = ConfigDict(frozen=True)

    content: str = ""
    is_streaming: bool = True
    is_complete: bool = False
    session_id: str | None = None


def reduce_turn(state: TurnState, chunk: StreamChunk) -> TurnState:
    """Apply one chunk to the turn state.

    Tokens append. A direct answer replaces the content and ends the turn.
    ``final`` only captures the session id, its answer is used solely when
    nothing has been streamed yet. Status chunks toggle the flags and are
    idempotent. Anything else leaves the state as is.

    Args:
        state: Current turn state.
        chunk: Decoded stream chunk.

    Returns:
        The next turn state.
    """
    if isinstance(chunk, TokenChunk):
        return state.model_copy(
            update={
                "content": state.content + chunk.token,
                "is_streaming": True,
                "is_complete": False,
            }
        )

    if isinstance(chunk, AnswerChunk):
        return state.model_copy(
            update={"content": chunk.answer, "is_streaming": False, "is_complete": True}
        )

    if isinstance(chunk, FinalChunk):
        update: dict[str, str] = {}
        if chunk.final.session_id:
            update["session_id"] = chunk.final.session_id
        if chunk.final.answer and not state.content:
            update["content"] = chunk.final.answer
        return state.model_copy(update=update) if update else state

    if isinstance(chunk, SessionChunk):
        return state.model_copy(update={"session_id": chunk.session_id})

    if isinstance(chunk, StatusChunk):
        if chunk.status is StreamStatus.COMPLETE:
            return state.model_copy(update={"is_streaming": False, "is_complete": True})
        return state.model_copy(update={"is_streaming": True})

    return state


def finish_turn(state: TurnState) -> TurnState:
    """Mark the turn complete once the stream has ended."""
    return state.model_copy(update={"is_streaming": False, "is_complete": True})


def fail_turn(state: TurnState) -> TurnState:
    """Replace the content with the apology and end the turn."""
    return state.model_copy(
        update={"content": APOLOGY_MESSAGE, "is_streaming": False, "is_complete": True}
    )
