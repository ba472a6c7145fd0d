"""Server-side relay to the hosted conversational API.

Responsibilities:
    - Configuration of the upstream endpoint and credential
    - One streaming upstream call per inbound request
    - Re-framing of the upstream body into normalized NDJSON records
    - Request-level and mid-stream failure signalling
"""

from src.relay.config import RelayConfig, get_relay_config
from src.relay.errors import UpstreamError, UpstreamStatusError, UpstreamStreamError
from src.relay.upstream import UpstreamRelay

__all__ = [
    "RelayConfig",
    "UpstreamError",
    "UpstreamRelay",
    "UpstreamStatusError",
    "UpstreamStreamError",
    "get_relay_config",
]
