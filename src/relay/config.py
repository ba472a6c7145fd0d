"""Relay configuration with environment variable loading.

Pydantic-based configuration for the upstream conversational API.
Loaded once at startup and passed to the relay.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Load environment variables from .env file
load_dotenv()


class RelayConfig(BaseModel):
    """Configuration for the upstream stream relay.

    Attributes:
        upstream_url: Conversational query endpoint.
        bearer_token: Credential sent as ``Authorization: Bearer``.
        connect_timeout: Seconds allowed to establish the upstream connection.
        read_timeout: Seconds allowed between two reads of the upstream body.
    """

    model_config = ConfigDict(validate_default=True)

    upstream_url: str = Field(
        default_factory=lambda: os.getenv("UPSTREAM_API_URL", ""),
        description="Upstream conversational query endpoint",
    )
    bearer_token: str = Field(
        default_factory=lambda: os.getenv("UPSTREAM_BEARER_TOKEN", ""),
        description="Bearer token for the upstream API",
        repr=False,
    )
    connect_timeout: float = Field(
        default_factory=lambda: float(os.getenv("UPSTREAM_CONNECT_TIMEOUT", "10")),
        gt=0.0,
        description="Connect timeout in seconds",
    )
    read_timeout: float = Field(
        default_factory=lambda: float(os.getenv("UPSTREAM_READ_TIMEOUT", "120")),
        gt=0.0,
        description="Read timeout in seconds; ends the stream with an error",
    )

    @field_validator("upstream_url")
    @classmethod
    def validate_upstream_url(cls, v: str) -> str:
        """Validate that an http(s) endpoint is configured."""
        v = v.strip()
        if not v:
            raise ValueError("UPSTREAM_API_URL is required. Set it in .env")
        if not v.startswith(("http://", "https://")):
            raise ValueError("UPSTREAM_API_URL must be an http(s) URL")
        return v

    @field_validator("bearer_token")
    @classmethod
    def validate_bearer_token(cls, v: str) -> str:
        """Validate that the bearer token is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError("UPSTREAM_BEARER_TOKEN is required. Set it in .env")
        return v.strip()


def get_relay_config() -> RelayConfig:
    """Create relay configuration from environment.

    Returns:
        Configured RelayConfig instance.

    Raises:
        ValueError: If the endpoint or token is missing.
    """
    return RelayConfig()
