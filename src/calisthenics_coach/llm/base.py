"""Abstract base class for LLM clients."""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Callable, Sequence
from contextlib import aclosing
from typing import Optional

from .types import ChatMessage, GenerationConfig

DeltaCallback = Callable[[str], None]


class BaseLLMClient(ABC):
    """Abstract interface for LLM backends.

    The ``iter_*`` methods are the streaming primitives: async iterators over
    text deltas that raise if the stream ends without a terminal marker.
    Closing one early must release the upstream request.
    """

    model: str

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system: str = "",
        config: GenerationConfig | None = None,
    ) -> str:
        """Generate a complete response from the LLM.

        Args:
            prompt: The user prompt.
            system: Optional system prompt.
            config: Optional sampling overrides.

        Returns:
            The generated text response.
        """
        ...

    @abstractmethod
    def iter_generate(
        self,
        prompt: str,
        system: str = "",
        config: GenerationConfig | None = None,
    ) -> AsyncIterator[str]:
        """Yield text deltas of a streamed generation, in arrival order."""
        ...

    @abstractmethod
    async def chat(
        self,
        messages: Sequence[ChatMessage],
        system: str = "",
        config: GenerationConfig | None = None,
    ) -> str:
        """Generate a complete reply to an ordered list of role-tagged messages."""
        ...

    @abstractmethod
    def iter_chat(
        self,
        messages: Sequence[ChatMessage],
        system: str = "",
        config: GenerationConfig | None = None,
    ) -> AsyncIterator[str]:
        """Yield text deltas of a streamed chat reply, in arrival order."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Return whether the runtime is reachable and serves the configured model."""
        ...

    async def pull_model(self, model_name: Optional[str] = None) -> bool:
        return False

    async def close(self):
        pass

    async def stream_generate(
        self,
        prompt: str,
        system: str = "",
        on_delta: Optional[DeltaCallback] = None,
        config: GenerationConfig | None = None,
    ) -> str:
        """Stream a generation, calling ``on_delta`` per delta; return the full text."""
        return await _collect(self.iter_generate(prompt, system, config), on_delta)

    async def stream_chat(
        self,
        messages: Sequence[ChatMessage],
        system: str = "",
        on_delta: Optional[DeltaCallback] = None,
        config: GenerationConfig | None = None,
    ) -> str:
        """Stream a chat reply, calling ``on_delta`` per delta; return the full text."""
        return await _collect(self.iter_chat(messages, system, config), on_delta)


async def _collect(deltas: AsyncIterator[str], on_delta: Optional[DeltaCallback]) -> str:
    parts: list[str] = []
    async with aclosing(deltas) as stream:
        async for delta in stream:
            if on_delta is not None:
                on_delta(delta)
            parts.append(delta)
    return "".join(parts)
