"""Client-side chat logic, independent of any UI binding.

Responsibilities:
    - Streaming questions to the relay and decoding its records
    - Folding stream chunks into the assistant message of a turn
    - Pure state transitions over the in-memory conversation store
"""

from src.chat.client import ChatController, RelayClient
from src.chat.config import ClientConfig, get_client_config
from src.chat.reducer import APOLOGY_MESSAGE, TurnState, fail_turn, finish_turn, reduce_turn

__all__ = [
    "APOLOGY_MESSAGE",
    "ChatController",
    "ClientConfig",
    "RelayClient",
    "TurnState",
    "fail_turn",
    "finish_turn",
    "get_client_config",
    "reduce_turn",
]
