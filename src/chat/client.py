"""Chat client: consumes the relay stream and drives conversation turns."""

import logging
from collections.abc import AsyncGenerator, Callable

import httpx
from pydantic import ValidationError

from src.chat.config import ClientConfig, get_client_config
from src.chat.reducer import TurnState, fail_turn, finish_turn, reduce_turn
from src.chat.store import ConversationStore, apply_turn_state, begin_turn, initial_store
from src.models.chunks import StreamChunk, decode_chunk
from src.models.schemas import ChatRequest
from src.streaming.line_parser import aiter_records

logger = logging.getLogger(__name__)


class RelayClient:
    """Streams decoded chunks from the relay's ``/api/chat`` endpoint."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or get_client_config()
        self._transport = transport

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def stream(
        self,
        question: str,
        collection_name: str,
        session_id: str | None = None,
    ) -> AsyncGenerator[StreamChunk]:
        """Post a question and yield chunks as their lines arrive.

        Args:
            question: The user's question.
            collection_name: Collection to query.
            session_id: Session id captured earlier in the conversation.

        Yields:
            Decoded stream chunks in arrival order.

        Raises:
            httpx.HTTPStatusError: The relay rejected the request.
            httpx.HTTPError: The connection failed or broke mid-stream.
        """
        request = ChatRequest(
            question=question, collection_name=collection_name, session_id=session_id
        )
        async with httpx.AsyncClient(
            base_url=self._config.api_base_url,
            timeout=self._config.timeout,
            transport=self._transport,
        ) as client:
            async with client.stream(
                "POST",
                "/api/chat",
                json=request.upstream_payload(),
            ) as response:
                response.raise_for_status()
                async for record in aiter_records(response.aiter_bytes()):
                    yield decode_chunk(record)


class ChatController:
    """Owns the conversation store and runs one turn at a time.

    Attributes:
        store: Current conversation store; replaced on every update.
        is_busy: Whether a turn is in flight.
    """

    def __init__(
        self,
        client: RelayClient | None = None,
        store: ConversationStore | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._client = client or RelayClient()
        self.store = store or initial_store()
        self.on_change = on_change
        self.is_busy = False

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def update(self, store: ConversationStore) -> None:
        """Replace the store and notify the view."""
        self.store = store
        self._notify()

    async def send(self, question: str) -> bool:
        """Ask a question in the active conversation.

        Each chunk is reduced into the turn state and written to the store
        immediately. Network, relay or request validation failures replace
        the answer with an apology.

        Args:
            question: The user's question.

        Returns:
            False when the question was empty or a turn was already running.
        """
        question = question.strip()
        conversation = self.store.active
        if not question or self.is_busy or conversation is None:
            return False

        self.is_busy = True
        store, message_id = begin_turn(self.store, question)
        self.update(store)

        state = TurnState(session_id=conversation.session_id)
        try:
            async for chunk in self._client.stream(
                question, self._client.config.collection_name, state.session_id
            ):
                next_state = reduce_turn(state, chunk)
                if next_state is state:
                    continue
                state = next_state
                self.update(apply_turn_state(self.store, conversation.id, message_id, state))
            state = finish_turn(state)
        except (httpx.HTTPError, ValidationError) as e:
            logger.error(f"Error sending message: {e!r}")
            state = fail_turn(state)
        finally:
            self.is_busy = False

        self.update(apply_turn_state(self.store, conversation.id, message_id, state))
        return True
