"""Relay a runtime delta stream to a client as server-sent events."""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import aclosing
from typing import Any, Optional

from .sse import format_event

logger = logging.getLogger(__name__)

Finalizer = Callable[[str], Awaitable[dict[str, Any]]]
DisconnectProbe = Callable[[], Awaitable[bool]]


async def relay_events(
    open_stream: Callable[[], AsyncIterator[str]],
    finalize: Finalizer,
    is_disconnected: Optional[DisconnectProbe] = None,
    label: str = "relay",
) -> AsyncIterator[str]:
    """Forward each delta as a ``{"chunk"}`` event, then persist and report.

    ``open_stream`` is called inside the relay, so a failure while assembling
    the prompt or opening the runtime request is reported like any other.
    ``finalize`` receives the full text once the runtime signals completion;
    its return value is merged into the terminal ``{"done": true}`` event.
    On failure a single ``{"error"}`` event ends the stream and ``finalize``
    is never called. The client is probed before each delta is forwarded: if
    it goes away mid-stream the upstream iterator is closed and nothing is
    persisted. A client lost after the last delta still gets its complete
    text persisted.

    One frame is produced per delta and the next delta is not requested until
    the frame has been consumed, so a slow client slows the upstream read
    instead of growing a buffer.
    """
    parts: list[str] = []
    try:
        async with aclosing(open_stream()) as deltas:
            async for delta in deltas:
                if is_disconnected is not None and await is_disconnected():
                    logger.info("[%s] client disconnected after %d deltas; aborting", label, len(parts))
                    return
                if not parts:
                    logger.info("[%s] first delta", label)
                parts.append(delta)
                yield format_event({"chunk": delta})
        result = await finalize("".join(parts))
    except Exception as e:
        logger.exception("[%s] stream failed after %d deltas", label, len(parts))
        yield format_event({"error": str(e) or type(e).__name__})
        return

    logger.info("[%s] done: %d deltas, %d chars", label, len(parts), sum(len(p) for p in parts))
    yield format_event({"done": True, **result})
