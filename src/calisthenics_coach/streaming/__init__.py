"""Incremental stream framing and relaying."""

from .framing import LineFramer, iter_lines
from .relay import relay_events
from .sse import SSE_HEADERS, EventDecoder, format_event, iter_events

__all__ = [
    "LineFramer",
    "iter_lines",
    "relay_events",
    "SSE_HEADERS",
    "EventDecoder",
    "format_event",
    "iter_events",
]
