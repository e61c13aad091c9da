"""Client for the coaching backend's buffered and streaming endpoints."""

from .api import CoachAPIClient
from .consumer import FALLBACK_MESSAGE, StreamResult, consume_event_stream
from .errors import APIError

__all__ = [
    "CoachAPIClient",
    "FALLBACK_MESSAGE",
    "StreamResult",
    "consume_event_stream",
    "APIError",
]
