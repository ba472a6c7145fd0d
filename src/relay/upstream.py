"""Upstream stream relay.

Opens one streaming POST per inbound request against the conversational
API and re-emits its body as normalized records.

Lifecycle:

1. **Start** - the request is sent and headers are awaited. A non-success
   status, an empty (204) response, or a connection failure raises an
   ``UpstreamError`` before any record is relayed, so the caller can still
   answer with a plain error response.

2. **Relay** - body bytes go through the shared ``aiter_records`` parser
   and every parsed record is yielded as soon as its line completes. Nothing
   beyond the parser's partial-line buffer is held in memory.

3. **Close** - the upstream response is closed whether iteration finishes,
   fails, or is abandoned by a disconnecting client. A transport error or
   read timeout at this stage surfaces as ``UpstreamStreamError``.
"""

import logging
from collections.abc import AsyncGenerator
from typing import Any

import httpx

from src.models.schemas import ChatRequest
from src.relay.config import RelayConfig
from src.relay.errors import UpstreamError, UpstreamStatusError, UpstreamStreamError
from src.streaming.line_parser import aiter_records

logger = logging.getLogger(__name__)


class UpstreamRelay:
    """Relay between the chat endpoint and the conversational API.

    Holds one pooled ``httpx.AsyncClient`` for the lifetime of the app.
    """

    def __init__(
        self,
        config: RelayConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the relay.

        Args:
            config: Validated relay configuration.
            transport: Optional transport override (used by tests).
        """
        self._config = config
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(config.read_timeout, connect=config.connect_timeout),
            transport=transport,
        )

    @property
    def config(self) -> RelayConfig:
        return self._config

    def _build_request(self, request: ChatRequest) -> httpx.Request:
        payload = request.upstream_payload()
        logger.info(
            f"Forwarding question to upstream (collection={request.collection_name}, "
            f"session={request.session_id or '-'})"
        )
        return self._client.build_request(
            "POST",
            self._config.upstream_url,
            json=payload,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self._config.bearer_token}",
            },
        )

    async def open_stream(self, request: ChatRequest) -> AsyncGenerator[Any]:
        """Start the upstream call and return the record stream.

        Args:
            request: Validated inbound chat request.

        Returns:
            Async generator of parsed records, in upstream order.

        Raises:
            UpstreamStatusError: Upstream returned a non-success status.
            UpstreamError: No connection could be made or no body was sent.
        """
        try:
            response = await self._client.send(self._build_request(request), stream=True)
        except httpx.HTTPError as e:
            logger.error(f"Upstream request failed: {e}")
            raise UpstreamError(str(e) or type(e).__name__) from e

        logger.info(f"Upstream response status: {response.status_code}")

        if not response.is_success:
            body = ""
            try:
                body = (await response.aread()).decode("utf-8", errors="replace")
            except httpx.HTTPError as e:
                logger.warning(f"Could not read upstream error body: {e!r}")
            finally:
                await response.aclose()
            logger.error(f"Upstream error response ({response.status_code}): {body}")
            raise UpstreamStatusError(response.status_code, body)

        if response.status_code == httpx.codes.NO_CONTENT:
            await response.aclose()
            raise UpstreamError("No response body received from API")

        return self._relay(response)

    async def _relay(self, response: httpx.Response) -> AsyncGenerator[Any]:
        """Yield records from an open upstream response."""
        count = 0
        try:
            async for record in aiter_records(response.aiter_bytes()):
                count += 1
                yield record
        except httpx.HTTPError as e:
            logger.error(f"Upstream stream failed after {count} records: {e!r}")
            raise UpstreamStreamError(str(e) or type(e).__name__) from e
        finally:
            await response.aclose()
        logger.info(f"Upstream stream finished ({count} records)")

    async def aclose(self) -> None:
        """Release pooled upstream connections."""
        await self._client.aclose()
