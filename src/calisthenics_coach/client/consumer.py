"""Consume the relay's event stream on the client side."""

import logging
from collections.abc import AsyncIterable, Callable
from contextlib import aclosing
from dataclasses import dataclass, field
from typing import Any, Optional

from ..streaming.sse import iter_events

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Sorry, I encountered an error. Please make sure the backend is running and try again."

# Called with (delta, accumulated text so far).
DeltaHandler = Callable[[str, str], None]


@dataclass
class StreamResult:
    """Outcome of one streamed generation as seen by the client."""
    text: str = ""
    done: bool = False
    error: Optional[str] = None
    payload: dict[str, Any] = field(default_factory=dict)  # terminal event fields, e.g. workoutId

    @property
    def ok(self) -> bool:
        return self.done and self.error is None

    @property
    def display_text(self) -> str:
        """What to show the user: the generated text, or a fallback on failure."""
        return self.text if self.ok else FALLBACK_MESSAGE


async def consume_event_stream(
    chunks: AsyncIterable[bytes],
    on_delta: Optional[DeltaHandler] = None,
) -> StreamResult:
    """Apply ``{"chunk"}`` events as they arrive until ``done`` or ``error``.

    Unparseable event data is skipped. A stream that ends with neither a
    ``done`` nor an ``error`` event is reported as an error.
    """
    result = StreamResult()
    async with aclosing(iter_events(chunks)) as events:
        async for event in events:
            delta = event.get("chunk")
            if isinstance(delta, str) and delta:
                result.text += delta
                if on_delta is not None:
                    on_delta(delta, result.text)
            if event.get("error"):
                result.error = str(event["error"])
                logger.warning("Stream reported error: %s", result.error)
                return result
            if event.get("done"):
                result.done = True
                result.payload = {k: v for k, v in event.items() if k not in ("done", "chunk")}
                return result

    result.error = "stream ended before completion"
    return result
