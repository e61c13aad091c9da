"""Types for the LLM abstraction layer."""

from dataclasses import dataclass, field, replace
from typing import Any, Optional


@dataclass
class ChatMessage:
    """A message in a chat conversation."""
    role: str  # "system", "user", or "assistant"
    content: str

    def to_payload(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class GenerationConfig:
    """Sampling options sent to the runtime under ``options``.

    Unset fields fall back to the client's defaults when merged.
    """
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None

    def merged(self, overrides: Optional["GenerationConfig"]) -> "GenerationConfig":
        """Return a copy with the overrides' set fields applied on top of this config."""
        if overrides is None:
            return self
        changes = overrides.to_options()
        return replace(self, **changes)

    def to_options(self) -> dict[str, Any]:
        options = {"temperature": self.temperature, "top_p": self.top_p, "top_k": self.top_k}
        return {k: v for k, v in options.items() if v is not None}


@dataclass(frozen=True)
class GenerationRequest:
    """One runtime call. Exactly one of ``prompt`` or ``messages`` is set."""
    model: str
    prompt: Optional[str] = None
    messages: tuple[ChatMessage, ...] = field(default_factory=tuple)
    system: str = ""
    options: GenerationConfig = field(default_factory=GenerationConfig)
    stream: bool = False

    @property
    def is_chat(self) -> bool:
        return self.prompt is None

    def to_payload(self) -> dict[str, Any]:
        """Build the JSON body for /api/generate or /api/chat."""
        payload: dict[str, Any] = {"model": self.model, "stream": self.stream}
        if self.is_chat:
            messages = list(self.messages)
            if self.system:
                messages.insert(0, ChatMessage(role="system", content=self.system))
            payload["messages"] = [m.to_payload() for m in messages]
        else:
            payload["prompt"] = build_full_prompt(self.system, self.prompt or "")
        payload["options"] = self.options.to_options()
        return payload


@dataclass(frozen=True)
class DeltaChunk:
    """A decoded line of the runtime's streaming response."""
    text: str = ""
    done: bool = False
    error: Optional[str] = None


def build_full_prompt(system: str, prompt: str) -> str:
    """Prefix the system instructions to a single-prompt generation."""
    if not system:
        return prompt
    return f"{system}\n\n{prompt}"


def decode_generate_line(obj: dict) -> DeltaChunk:
    """Decode one /api/generate stream object: ``{"response": str, "done": bool}``."""
    return DeltaChunk(
        text=obj.get("response") or "",
        done=bool(obj.get("done")),
        error=obj.get("error"),
    )


def decode_chat_line(obj: dict) -> DeltaChunk:
    """Decode one /api/chat stream object: ``{"message": {"content": str}, "done": bool}``."""
    message = obj.get("message")
    text = ""
    if isinstance(message, dict):
        text = message.get("content") or ""
    return DeltaChunk(text=text, done=bool(obj.get("done")), error=obj.get("error"))
