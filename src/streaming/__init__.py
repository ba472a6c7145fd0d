"""Incremental framing for newline-delimited JSON streams.

Shared by the server-side relay and the chat client.

Responsibilities:
    - Multi-byte-safe decoding of arbitrary byte chunks
    - Line buffering across chunk boundaries
    - Optional SSE-style ``data: `` prefix stripping
    - Per-line JSON parsing with local recovery
"""

from src.streaming.line_parser import DATA_PREFIX, IncrementalLineParser, aiter_records

__all__ = ["DATA_PREFIX", "IncrementalLineParser", "aiter_records"]
