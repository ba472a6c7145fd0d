"""Unit tests for UpstreamRelay.

Uses ``httpx.MockTransport`` as the conversational API.
"""

import json

import httpx
import pytest
import pytest_check as check

from src.models.schemas import ChatRequest
from src.relay.config import RelayConfig
from src.relay.errors import UpstreamError, UpstreamStatusError, UpstreamStreamError
from src.relay.upstream import UpstreamRelay
from tests.conftest import UPSTREAM_TOKEN, UPSTREAM_URL, UpstreamFactory

REQUEST = ChatRequest(question="What is the warranty?", collection_name="39")


async def collect(relay: UpstreamRelay, request: ChatRequest = REQUEST) -> list[object]:
    return [record async for record in await relay.open_stream(request)]


class TestUpstreamRequest:
    """Tests for the outbound request."""

    async def test_sends_bearer_token_and_body(
        self,
        relay_config: RelayConfig,
        make_upstream: UpstreamFactory,
        upstream_requests: list[httpx.Request],
    ) -> None:
        """Upstream receives the configured credential and the same JSON body."""
        relay = UpstreamRelay(relay_config, transport=make_upstream([b'{"token": "a"}\n']))

        await collect(relay)
        (request,) = upstream_requests

        check.equal(request.method, "POST")
        check.equal(str(request.url), UPSTREAM_URL)
        check.equal(request.headers["authorization"], f"Bearer {UPSTREAM_TOKEN}")
        check.equal(request.headers["content-type"], "application/json")
        check.equal(
            json.loads(request.content),
            {"question": "What is the warranty?", "collection_name": "39"},
        )

    async def test_forwards_session_id_when_known(
        self,
        relay_config: RelayConfig,
        make_upstream: UpstreamFactory,
        upstream_requests: list[httpx.Request],
    ) -> None:
        relay = UpstreamRelay(relay_config, transport=make_upstream())
        request = ChatRequest(question="Q", collection_name="39", session_id="s-1")

        await collect(relay, request)

        assert json.loads(upstream_requests[0].content)["session_id"] == "s-1"

    async def test_one_upstream_call_per_request(
        self,
        relay_config: RelayConfig,
        make_upstream: UpstreamFactory,
        upstream_requests: list[httpx.Request],
    ) -> None:
        relay = UpstreamRelay(relay_config, transport=make_upstream([b'{"token": "a"}\n']))

        await collect(relay)

        assert len(upstream_requests) == 1


class TestUpstreamRelaying:
    """Tests for re-framing the upstream body."""

    async def test_records_in_order(
        self, relay_config: RelayConfig, make_upstream: UpstreamFactory
    ) -> None:
        chunks = [
            b'data: {"session_id": "s"}\n{"tok',
            b'en": "Hel"}\n{"token": "lo"}\n',
            b'{"status": "complete"}',
        ]
        relay = UpstreamRelay(relay_config, transport=make_upstream(chunks))

        records = await collect(relay)

        assert records == [
            {"session_id": "s"},
            {"token": "Hel"},
            {"token": "lo"},
            {"status": "complete"},
        ]

    async def test_malformed_lines_are_dropped(
        self, relay_config: RelayConfig, make_upstream: UpstreamFactory
    ) -> None:
        relay = UpstreamRelay(
            relay_config,
            transport=make_upstream([b'{"token": "a"}\n<html>\n{"token": "b"}\n']),
        )

        assert await collect(relay) == [{"token": "a"}, {"token": "b"}]


class TestUpstreamFailures:
    """Tests for request-level and mid-stream failures."""

    async def test_non_success_status_fails_fast(
        self, relay_config: RelayConfig, make_upstream: UpstreamFactory
    ) -> None:
        relay = UpstreamRelay(
            relay_config, transport=make_upstream([b"token expired"], status_code=401)
        )

        with pytest.raises(UpstreamStatusError) as exc_info:
            await relay.open_stream(REQUEST)

        check.equal(exc_info.value.status_code, 401)
        check.equal(exc_info.value.body, "token expired")
        check.equal(str(exc_info.value), "API responded with status: 401")

    async def test_unreadable_error_body_still_fails_fast(
        self, relay_config: RelayConfig, make_upstream: UpstreamFactory
    ) -> None:
        """A broken error body keeps the status and leaves the body empty."""
        relay = UpstreamRelay(
            relay_config,
            transport=make_upstream(status_code=502, error=httpx.ReadError("connection reset")),
        )

        with pytest.raises(UpstreamStatusError) as exc_info:
            await relay.open_stream(REQUEST)

        check.equal(exc_info.value.status_code, 502)
        check.equal(exc_info.value.body, "")

    async def test_no_content_fails_fast(
        self, relay_config: RelayConfig, make_upstream: UpstreamFactory
    ) -> None:
        relay = UpstreamRelay(relay_config, transport=make_upstream(status_code=204))

        with pytest.raises(UpstreamError, match="No response body"):
            await relay.open_stream(REQUEST)

    async def test_connection_failure_fails_fast(self, relay_config: RelayConfig) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        relay = UpstreamRelay(relay_config, transport=httpx.MockTransport(refuse))

        with pytest.raises(UpstreamError, match="connection refused"):
            await relay.open_stream(REQUEST)

    async def test_mid_stream_failure_raises_after_partial_records(
        self, relay_config: RelayConfig, make_upstream: UpstreamFactory
    ) -> None:
        """Records before the break are delivered, then the stream errors."""
        relay = UpstreamRelay(
            relay_config,
            transport=make_upstream(
                [b'{"token": "a"}\n{"token": "b"}\n{"tok'],
                error=httpx.ReadError("connection reset"),
            ),
        )
        received = []

        with pytest.raises(UpstreamStreamError, match="connection reset"):
            async for record in await relay.open_stream(REQUEST):
                received.append(record)

        assert received == [{"token": "a"}, {"token": "b"}]

    async def test_read_timeout_terminates_stream(
        self, relay_config: RelayConfig, make_upstream: UpstreamFactory
    ) -> None:
        relay = UpstreamRelay(
            relay_config,
            transport=make_upstream([b'{"token": "a"}\n'], error=httpx.ReadTimeout("timed out")),
        )

        with pytest.raises(UpstreamStreamError, match="timed out"):
            await collect(relay)


class TestUpstreamLifecycle:
    async def test_aclose_closes_client(self, relay_config: RelayConfig) -> None:
        relay = UpstreamRelay(relay_config)

        await relay.aclose()

        assert relay._client.is_closed
