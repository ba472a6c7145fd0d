"""End-to-end tests: chat controller -> relay app -> fake upstream.

The controller's RelayClient reaches the FastAPI app through
ASGITransport; the app's relay reaches a MockTransport upstream.
"""

import json
from collections.abc import Callable

import httpx
import pytest_check as check
from fastapi import FastAPI
from httpx import ASGITransport

from src.chat.client import ChatController, RelayClient
from src.chat.config import ClientConfig
from src.chat.reducer import APOLOGY_MESSAGE
from tests.conftest import UpstreamFactory

AppFactory = Callable[[httpx.AsyncBaseTransport], FastAPI]


def controller_for(app: FastAPI) -> ChatController:
    config = ClientConfig(api_base_url="http://test", collection_name="39", timeout=5.0)
    return ChatController(RelayClient(config, transport=ASGITransport(app=app)))


class TestEndToEnd:
    async def test_streamed_answer_assembled(
        self, make_app: AppFactory, make_upstream: UpstreamFactory
    ) -> None:
        upstream = make_upstream(
            [
                b'data: {"session_id": "abc"}\ndata: {"tok',
                b'en": "Hel"}\ndata: {"token": "lo"}\n{"final": {"answer": "Hel',
                b'lo (final)"}}\ndata: {"status": "complete"}\n',
            ]
        )
        controller = controller_for(make_app(upstream))

        await controller.send("Say hello")
        conversation = controller.store.active
        assistant = conversation.messages[-1]

        check.equal(assistant.content, "Hello")
        check.is_true(assistant.is_complete)
        check.is_false(assistant.is_streaming)
        check.equal(conversation.session_id, "abc")

    async def test_direct_answer(
        self, make_app: AppFactory, make_upstream: UpstreamFactory
    ) -> None:
        controller = controller_for(make_app(make_upstream([b'{"answer": "Full answer"}\n'])))

        await controller.send("Q")

        assert controller.store.active.messages[-1].content == "Full answer"

    async def test_session_echoed_upstream_on_next_turn(
        self,
        make_app: AppFactory,
        make_upstream: UpstreamFactory,
        upstream_requests: list[httpx.Request],
    ) -> None:
        upstream = make_upstream([b'{"final": {"session_id": "abc"}}\n{"answer": "A"}\n'])
        controller = controller_for(make_app(upstream))

        await controller.send("first")
        await controller.send("second")

        check.is_not_in("session_id", json.loads(upstream_requests[0].content))
        check.equal(json.loads(upstream_requests[1].content)["session_id"], "abc")

    async def test_upstream_failure_shows_apology(
        self, make_app: AppFactory, make_upstream: UpstreamFactory
    ) -> None:
        controller = controller_for(make_app(make_upstream([b"boom"], status_code=502)))

        await controller.send("Q")
        assistant = controller.store.active.messages[-1]

        check.equal(assistant.content, APOLOGY_MESSAGE)
        check.is_true(assistant.is_complete)
        check.is_false(assistant.is_streaming)
