"""Newline-delimited JSON decoding for streamed responses."""

import json
import logging
from typing import Any, AsyncIterable, AsyncIterator

from agentflow_client.errors import FrameDecodeError

logger = logging.getLogger(__name__)


class NdjsonDecoder:
    """Incremental decoder turning byte chunks into JSON records.

    Bytes are buffered until a newline arrives, so a record split across
    several reads is decoded once complete. Whitespace-only lines are skipped.
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    @property
    def pending(self) -> bytes:
        """Bytes received after the last newline."""
        return bytes(self._buffer)

    def feed(self, chunk: bytes) -> list[Any]:
        """Add a chunk and return the records completed by it.

        Args:
            chunk: Raw bytes from the stream

        Returns:
            list: Parsed records, in stream order

        Raises:
            FrameDecodeError: If a complete line is not valid JSON
        """
        self._buffer.extend(chunk)
        *lines, remainder = self._buffer.split(b"\n")
        self._buffer = bytearray(remainder)
        return [self._decode_line(line) for line in lines if line.strip()]

    @staticmethod
    def _decode_line(line: bytes) -> Any:
        try:
            text = line.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FrameDecodeError(f"Stream frame is not valid UTF-8: {e}", line=repr(line)) from e
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise FrameDecodeError(f"Malformed stream frame: {e}", line=text) from e


async def iter_ndjson(chunks: AsyncIterable[bytes]) -> AsyncIterator[Any]:
    """Lazily decode an async byte stream into JSON records.

    A trailing fragment without a terminating newline is discarded.

    Args:
        chunks: Async iterable of raw byte chunks

    Yields:
        Parsed JSON records, one per line
    """
    decoder = NdjsonDecoder()
    async for chunk in chunks:
        for record in decoder.feed(chunk):
            yield record

    if decoder.pending.strip():
        logger.debug(f"Discarding unterminated stream fragment ({len(decoder.pending)} bytes)")
