"""Chat relay endpoint.

Forwards a question to the conversational API and streams its answer back
as newline-delimited JSON.
"""

import json
import logging
from collections.abc import AsyncGenerator
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from src.models.schemas import ChatRequest, ErrorResponse
from src.relay.upstream import UpstreamRelay

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])

NDJSON_MEDIA_TYPE = "application/x-ndjson"


def get_relay(request: Request) -> UpstreamRelay:
    """Return the relay created at application startup."""
    return request.app.state.relay


def encode_record(record: Any) -> bytes:
    """Serialize one record as a compact JSON line."""
    return (json.dumps(record, ensure_ascii=False, separators=(",", ":")) + "\n").encode("utf-8")


async def _ndjson(records: AsyncGenerator[Any]) -> AsyncGenerator[bytes]:
    async for record in records:
        yield encode_record(record)


@router.post(
    "/chat",
    responses={
        200: {"content": {NDJSON_MEDIA_TYPE: {}}, "description": "One JSON object per line"},
        500: {"model": ErrorResponse, "description": "Upstream request failed"},
    },
)
async def chat(
    request: ChatRequest,
    relay: UpstreamRelay = Depends(get_relay),
) -> StreamingResponse:
    """Relay a question and stream the upstream answer.

    The upstream call is started before the response begins, so a failing
    upstream produces a 500 error body instead of an empty stream.

    Args:
        request: Validated chat request.
        relay: The application's upstream relay.

    Returns:
        StreamingResponse emitting one normalized JSON object per line.

    Raises:
        UpstreamError: Mapped to a 500 response by the app's handler.
    """
    records = await relay.open_stream(request)

    return StreamingResponse(
        _ndjson(records),
        media_type=NDJSON_MEDIA_TYPE,
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
        },
    )
