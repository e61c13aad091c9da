"""LLM abstraction layer."""

from .base import BaseLLMClient
from .errors import GenerationError, LLMError, StreamAbortedError
from .ollama import OllamaClient
from .types import ChatMessage, DeltaChunk, GenerationConfig, GenerationRequest

__all__ = [
    "BaseLLMClient",
    "OllamaClient",
    "ChatMessage",
    "DeltaChunk",
    "GenerationConfig",
    "GenerationRequest",
    "LLMError",
    "GenerationError",
    "StreamAbortedError",
]
