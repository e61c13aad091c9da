"""Errors raised by LLM clients."""


class LLMError(Exception):
    """Base class for runtime client failures."""


class GenerationError(LLMError):
    """A generation call failed: transport error, error status, or malformed response."""


class StreamAbortedError(GenerationError):
    """The streaming transport failed or closed before the terminal marker arrived."""
