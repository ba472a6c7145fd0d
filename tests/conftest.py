"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - relay_config: Valid relay configuration pointing at a fake upstream
    - upstream_requests: Requests captured by the fake upstream
    - make_upstream: Factory for a fake upstream streaming given byte chunks
    - make_app: Factory for the FastAPI app wired to a fake upstream
    - async_client: HTTPX client for API testing

The fake upstream is an ``httpx.MockTransport``, the app is reached through
``httpx.ASGITransport``. No network access is needed.
"""

from collections.abc import AsyncGenerator, Callable, Sequence

import httpx
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.api.app import create_app
from src.relay.config import RelayConfig
from src.relay.upstream import UpstreamRelay

UPSTREAM_URL = "https://upstream.test/api/query/conversational"
UPSTREAM_TOKEN = "test-bearer-token"

UpstreamFactory = Callable[..., httpx.MockTransport]


def byte_stream(
    chunks: Sequence[bytes], error: Exception | None = None
) -> Callable[[], AsyncGenerator[bytes]]:
    """Build an async byte stream, optionally breaking after the last chunk."""

    async def _stream() -> AsyncGenerator[bytes]:
        for chunk in chunks:
            yield chunk
        if error is not None:
            raise error

    return _stream


@pytest.fixture
def relay_config() -> RelayConfig:
    """Return a relay configuration for the fake upstream."""
    return RelayConfig(
        upstream_url=UPSTREAM_URL,
        bearer_token=UPSTREAM_TOKEN,
        connect_timeout=1.0,
        read_timeout=1.0,
    )


@pytest.fixture
def upstream_requests() -> list[httpx.Request]:
    """Collect requests received by the fake upstream."""
    return []


@pytest.fixture
def make_upstream(upstream_requests: list[httpx.Request]) -> UpstreamFactory:
    """Return a factory for fake upstream transports.

    Args:
        upstream_requests: List every received request is appended to.

    Returns:
        Factory taking the body chunks, an optional status code and an
        optional error raised after the last chunk.
    """

    def _factory(
        chunks: Sequence[bytes] = (),
        status_code: int = 200,
        error: Exception | None = None,
    ) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            upstream_requests.append(request)
            return httpx.Response(status_code, content=byte_stream(chunks, error)())

        return httpx.MockTransport(handler)

    return _factory


@pytest.fixture
def make_app(relay_config: RelayConfig) -> Callable[[httpx.AsyncBaseTransport], FastAPI]:
    """Return a factory building the app around a given upstream transport."""

    def _factory(upstream: httpx.AsyncBaseTransport) -> FastAPI:
        return create_app(relay=UpstreamRelay(relay_config, transport=upstream))

    return _factory


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for the default app.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=create_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
