"""Chat client configuration with environment variable loading."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

load_dotenv()


class ClientConfig(BaseModel):
    """Configuration for the chat client talking to the relay.

    Attributes:
        api_base_url: Base URL of the relay API.
        collection_name: Collection every question is asked against.
        timeout: Seconds before an idle relay connection is abandoned.
    """

    model_config = ConfigDict(validate_default=True)

    api_base_url: str = Field(
        default_factory=lambda: os.getenv("API_BASE_URL", "http://localhost:8000"),
        description="Relay API base URL",
    )
    collection_name: str = Field(
        default_factory=lambda: os.getenv("COLLECTION_NAME", "39"),
        min_length=1,
        description="Knowledge collection to query",
    )
    timeout: float = Field(
        default_factory=lambda: float(os.getenv("CLIENT_TIMEOUT", "120")),
        gt=0.0,
        description="Relay request timeout in seconds",
    )

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")

    @field_validator("collection_name", mode="before")
    @classmethod
    def strip_collection_name(cls, v: str) -> str:
        """Strip whitespace before the length check."""
        if isinstance(v, str):
            return v.strip()
        return v


def get_client_config() -> ClientConfig:
    """Create client configuration from environment."""
    return ClientConfig()
