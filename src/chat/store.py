"""In-memory conversation store.

Every operation is a pure function: it takes a ``ConversationStore`` and
returns a new one, leaving the input untouched. Conversations and messages
that an operation does not target are carried over as the same objects.
"""

import uuid
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.chat.reducer import TurnState

DEFAULT_CONVERSATION_ID = "default"
DEFAULT_TITLE = "New Conversation"


def _new_id() -> str:
    return uuid.uuid4().hex


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Reaction(str, Enum):
    LIKE = "like"
    DISLIKE = "dislike"


class Message(BaseModel):
    """A single chat message.

    Attributes:
        id: Unique message identifier.
        role: Speaker of the message.
        content: Message text.
        timestamp: Creation time.
        is_streaming: Whether text is still arriving.
        is_complete: Whether the message is final.
        reaction: Optional user feedback.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    role: MessageRole
    content: str = ""
    timestamp: datetime = Field(default_factory=datetime.now)
    is_streaming: bool = False
    is_complete: bool = True
    reaction: Reaction | None = None


class Conversation(BaseModel):
    """A conversation and the upstream session it is bound to.

    Attributes:
        id: Unique conversation identifier.
        title: Display title.
        messages: Messages in display order.
        last_activity: Time of the last new turn.
        session_id: Upstream session id, once upstream has announced one.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    title: str = DEFAULT_TITLE
    messages: tuple[Message, ...] = ()
    last_activity: datetime = Field(default_factory=datetime.now)
    session_id: str | None = None


class ConversationStore(BaseModel):
    """All conversations of the client plus the active one."""

    model_config = ConfigDict(frozen=True)

    conversations: tuple[Conversation, ...]
    active_id: str

    @property
    def active(self) -> Conversation | None:
        return self.find(self.active_id)

    def find(self, conversation_id: str) -> Conversation | None:
        for conversation in self.conversations:
            if conversation.id == conversation_id:
                return conversation
        return None


def initial_store() -> ConversationStore:
    """Create a store holding one empty default conversation."""
    return ConversationStore(
        conversations=(Conversation(id=DEFAULT_CONVERSATION_ID),),
        active_id=DEFAULT_CONVERSATION_ID,
    )


def update_conversation(
    store: ConversationStore,
    conversation_id: str,
    change: Callable[[Conversation], Conversation],
) -> ConversationStore:
    """Replace one conversation with ``change(conversation)``.

    Unknown ids leave the store unchanged.
    """
    if store.find(conversation_id) is None:
        return store
    conversations = tuple(
        change(conv) if conv.id == conversation_id else conv for conv in store.conversations
    )
    return store.model_copy(update={"conversations": conversations})


def update_message(
    store: ConversationStore,
    conversation_id: str,
    message_id: str,
    change: Callable[[Message], Message],
) -> ConversationStore:
    """Replace one message of one conversation with ``change(message)``."""

    def _change(conv: Conversation) -> Conversation:
        messages = tuple(
            change(msg) if msg.id == message_id else msg for msg in conv.messages
        )
        return conv.model_copy(update={"messages": messages})

    return update_conversation(store, conversation_id, _change)


def begin_turn(store: ConversationStore, question: str) -> tuple[ConversationStore, str]:
    """Append the user's question and an empty streaming assistant message.

    Args:
        store: Current store.
        question: The user's question.

    Returns:
        The new store and the id of the assistant placeholder.
    """
    user_message = Message(role=MessageRole.USER, content=question)
    assistant_message = Message(
        role=MessageRole.ASSISTANT, is_streaming=True, is_complete=False
    )

    def _append(conv: Conversation) -> Conversation:
        return conv.model_copy(
            update={
                "messages": (*conv.messages, user_message, assistant_message),
                "last_activity": datetime.now(),
            }
        )

    return update_conversation(store, store.active_id, _append), assistant_message.id


def apply_turn_state(
    store: ConversationStore,
    conversation_id: str,
    message_id: str,
    state: TurnState,
) -> ConversationStore:
    """Write a turn state into its assistant message and conversation session."""
    store = update_message(
        store,
        conversation_id,
        message_id,
        lambda msg: msg.model_copy(
            update={
                "content": state.content,
                "is_streaming": state.is_streaming,
                "is_complete": state.is_complete,
            }
        ),
    )
    if state.session_id is None:
        return store
    return update_conversation(
        store,
        conversation_id,
        lambda conv: conv.model_copy(update={"session_id": state.session_id}),
    )


def new_conversation(store: ConversationStore) -> ConversationStore:
    """Prepend a fresh conversation (no session) and make it active."""
    conversation = Conversation()
    return ConversationStore(
        conversations=(conversation, *store.conversations),
        active_id=conversation.id,
    )


def select_conversation(store: ConversationStore, conversation_id: str) -> ConversationStore:
    """Make another existing conversation active."""
    if store.find(conversation_id) is None:
        return store
    return store.model_copy(update={"active_id": conversation_id})


def clear_conversation(store: ConversationStore) -> ConversationStore:
    """Drop the active conversation's messages and forget its session."""
    return update_conversation(
        store,
        store.active_id,
        lambda conv: conv.model_copy(update={"messages": (), "session_id": None}),
    )


def delete_message(store: ConversationStore, message_id: str) -> ConversationStore:
    """Remove one message from the active conversation."""
    return update_conversation(
        store,
        store.active_id,
        lambda conv: conv.model_copy(
            update={"messages": tuple(m for m in conv.messages if m.id != message_id)}
        ),
    )


def react_to_message(
    store: ConversationStore, message_id: str, reaction: Reaction
) -> ConversationStore:
    """Record like/dislike feedback on a message of the active conversation."""
    return update_message(
        store,
        store.active_id,
        message_id,
        lambda msg: msg.model_copy(update={"reaction": reaction}),
    )


def export_conversation(store: ConversationStore) -> dict[str, Any] | None:
    """Serialize the active conversation for download.

    Returns:
        JSON-ready dict with title, messages and export time, or None when
        there is no active conversation.
    """
    conversation = store.active
    if conversation is None:
        return None
    return {
        "title": conversation.title,
        "messages": [
            {
                "role": msg.role.value,
                "content": msg.content,
                "timestamp": msg.timestamp.isoformat(),
            }
            for msg in conversation.messages
        ],
        "exported_at": datetime.now().isoformat(),
    }


def export_filename(conversation: Conversation) -> str:
    """File name used when downloading a conversation."""
    return f"conversation-{'-'.join(conversation.title.split())}.json"
