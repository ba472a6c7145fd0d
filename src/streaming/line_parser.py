"""Incremental NDJSON line parser.

Accumulates decoded text, splits it on newlines and parses every complete
line as JSON. Upstream may interleave ``data: `` prefixed lines with plain
JSON lines and may split a record (or a multi-byte character) across chunk
boundaries; neither affects the parsed output.
"""

import codecs
import json
import logging
from collections.abc import AsyncGenerator, AsyncIterable
from typing import Any

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "


class IncrementalLineParser:
    """Stateful parser fed with raw byte chunks.

    Attributes:
        buffer: Trailing text not yet terminated by a newline.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self.buffer = ""

    def feed(self, data: bytes) -> list[Any]:
        """Consume one chunk of bytes.

        Args:
            data: Raw bytes in any split, including mid-character.

        Returns:
            Records parsed from the lines completed by this chunk, in order.
        """
        self.buffer += self._decoder.decode(data)
        *lines, self.buffer = self.buffer.split("\n")

        records = []
        for line in lines:
            payload = _strip_line(line)
            if not payload:
                continue
            try:
                records.append(json.loads(payload))
            except json.JSONDecodeError as e:
                logger.warning(f"Dropping unparseable line {line!r}: {e}")
        return records

    def flush(self) -> list[Any]:
        """Parse whatever remains once the input has ended.

        A trailing fragment that is not valid JSON is discarded. The parser
        is reset and may be reused afterwards.

        Returns:
            Zero or one record recovered from the trailing fragment.
        """
        remainder = self.buffer + self._decoder.decode(b"", final=True)
        self.buffer = ""
        self._decoder.reset()

        records = []
        for line in remainder.split("\n"):
            payload = _strip_line(line)
            if not payload:
                continue
            try:
                records.append(json.loads(payload))
            except json.JSONDecodeError:
                logger.debug(f"Discarding trailing fragment {line!r}")
        return records


def _strip_line(line: str) -> str:
    """Trim a line and remove a single leading ``data: `` prefix."""
    text = line.strip()
    if text.startswith(DATA_PREFIX):
        text = text[len(DATA_PREFIX):]
    return text


async def aiter_records(
    chunks: AsyncIterable[bytes],
    parser: IncrementalLineParser | None = None,
) -> AsyncGenerator[Any]:
    """Yield parsed records from an async byte stream as they complete.

    Args:
        chunks: Async iterable of raw byte chunks.
        parser: Optional parser instance (a fresh one is used otherwise).

    Yields:
        Each parsed JSON value, immediately after its line completes.
    """
    parser = parser or IncrementalLineParser()
    async for chunk in chunks:
        for record in parser.feed(chunk):
            yield record
    for record in parser.flush():
        yield record
