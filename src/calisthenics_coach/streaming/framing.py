"""Incremental line framing for byte streams.

Network reads do not arrive aligned to line boundaries: one read may carry
half a JSON object, the next the rest of it plus two more lines. ``LineFramer``
holds the trailing partial line between reads and only ever hands out
complete lines. Splitting happens on raw bytes, so a multi-byte UTF-8
character cut in two by the transport is decoded only once it is whole.
"""

from collections.abc import AsyncIterable, AsyncIterator


class LineFramer:
    """Turn arbitrarily fragmented byte chunks into complete text lines."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding
        self._buffer = bytearray()

    @property
    def pending(self) -> bytes:
        """Bytes received after the last newline."""
        return bytes(self._buffer)

    def feed(self, data: bytes) -> list[str]:
        """Add a chunk and return every line it completed, without terminators."""
        if not data:
            return []
        self._buffer.extend(data)
        *complete, rest = self._buffer.split(b"\n")
        self._buffer = bytearray(rest)
        return [self._decode(raw) for raw in complete]

    def flush(self) -> list[str]:
        """Return the unterminated remainder (if any) as a final line."""
        if not self._buffer:
            return []
        raw = bytes(self._buffer)
        self._buffer.clear()
        return [self._decode(raw)]

    def _decode(self, raw: bytes) -> str:
        if raw.endswith(b"\r"):
            raw = raw[:-1]
        return raw.decode(self.encoding, errors="replace")


async def iter_lines(chunks: AsyncIterable[bytes], encoding: str = "utf-8") -> AsyncIterator[str]:
    """Yield complete lines from an async byte stream, flushing the tail at EOF."""
    framer = LineFramer(encoding)
    async for chunk in chunks:
        for line in framer.feed(chunk):
            yield line
    for line in framer.flush():
        yield line
