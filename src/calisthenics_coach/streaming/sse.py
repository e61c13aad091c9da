"""Server-sent event framing: ``data: <json>`` followed by a blank line."""

import json
import logging
from collections.abc import AsyncIterable, AsyncIterator
from typing import Any

from .framing import LineFramer

logger = logging.getLogger(__name__)

DATA_PREFIX = "data:"

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def format_event(payload: dict[str, Any]) -> str:
    return f"data: {json.dumps(payload)}\n\n"


class EventDecoder:
    """Incremental event-stream decoder.

    Each ``data:`` line is parsed as JSON as soon as it is complete, so
    back-to-back data lines are separate events. Blank lines, comments,
    ``event:``/``id:`` fields and data that is not a JSON object are skipped.
    """

    def __init__(self):
        self._framer = LineFramer()

    def feed(self, chunk: bytes) -> list[dict[str, Any]]:
        return self._decode_lines(self._framer.feed(chunk))

    def flush(self) -> list[dict[str, Any]]:
        return self._decode_lines(self._framer.flush())

    def _decode_lines(self, lines: list[str]) -> list[dict[str, Any]]:
        events = []
        for line in lines:
            event = self._decode_line(line)
            if event is not None:
                events.append(event)
        return events

    def _decode_line(self, line: str) -> dict[str, Any] | None:
        if not line.startswith(DATA_PREFIX):
            return None
        data = line[len(DATA_PREFIX):]
        if data.startswith(" "):
            data = data[1:]
        try:
            payload = json.loads(data)
        except json.JSONDecodeError:
            logger.debug("Skipping unparseable event data: %r", data[:200])
            return None
        if not isinstance(payload, dict):
            return None
        return payload


async def iter_events(chunks: AsyncIterable[bytes]) -> AsyncIterator[dict[str, Any]]:
    """Yield decoded JSON payloads from an async stream of event-stream bytes."""
    decoder = EventDecoder()
    async for chunk in chunks:
        for event in decoder.feed(chunk):
            yield event
    for event in decoder.flush():
        yield event
