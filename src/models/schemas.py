from pydantic import BaseModel, Field, field_validator


class ChatRequest(BaseModel):
    """Request payload for the chat relay endpoint.

    Attributes:
        question: User's question.
        collection_name: Knowledge collection the question is asked against.
        session_id: Upstream session for conversation continuity.
    """

    question: str = Field(..., min_length=1)
    collection_name: str = Field(..., min_length=1)
    session_id: str | None = None

    @field_validator("question", "collection_name", mode="before")
    @classmethod
    def strip_text(cls, v: str) -> str:
        """Strip whitespace before validation."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("session_id", mode="before")
    @classmethod
    def blank_session_is_none(cls, v: str | None) -> str | None:
        """Treat an empty session id as absent."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def upstream_payload(self) -> dict[str, str]:
        """Body forwarded upstream; ``session_id`` only when known."""
        return self.model_dump(exclude_none=True)


class ErrorResponse(BaseModel):
    """Body returned when the upstream call cannot be started.

    Attributes:
        error: Fixed summary of the failure.
        details: Underlying cause.
    """

    error: str
    details: str
