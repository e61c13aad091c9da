"""Ollama LLM client implementation."""

import json
import logging
from collections.abc import AsyncIterator, Callable, Sequence
from contextlib import aclosing
from typing import Any, Optional

import httpx

from ..streaming.framing import iter_lines
from .base import BaseLLMClient
from .errors import GenerationError, StreamAbortedError
from .types import (
    ChatMessage,
    DeltaChunk,
    GenerationConfig,
    GenerationRequest,
    decode_chat_line,
    decode_generate_line,
)

logger = logging.getLogger(__name__)

LineDecoder = Callable[[dict], DeltaChunk]

DEFAULT_OPTIONS = GenerationConfig(temperature=0.7, top_p=0.9, top_k=40)


class OllamaClient(BaseLLMClient):
    """LLM client that talks to an Ollama instance."""

    def __init__(
        self,
        base_url: str,
        model: str,
        defaults: GenerationConfig | None = None,
        connect_timeout: float = 5.0,
        request_timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.defaults = defaults or DEFAULT_OPTIONS
        self.connect_timeout = connect_timeout
        self.request_timeout = request_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings, transport: httpx.AsyncBaseTransport | None = None) -> "OllamaClient":
        return cls(
            base_url=settings.ollama_url,
            model=settings.model_name,
            defaults=GenerationConfig(
                temperature=settings.temperature,
                top_p=settings.top_p,
                top_k=settings.top_k,
            ),
            connect_timeout=settings.connect_timeout,
            request_timeout=settings.request_timeout,
            transport=transport,
        )

    @property
    def generate_url(self) -> str:
        return f"{self.base_url}/api/generate"

    @property
    def chat_url(self) -> str:
        return f"{self.base_url}/api/chat"

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(transport=self._transport)
        return self._client

    def _timeout(self, stream: bool) -> httpx.Timeout:
        # Streaming reads are bounded only by transport liveness.
        read = None if stream else self.request_timeout
        return httpx.Timeout(read, connect=self.connect_timeout)

    def _request(
        self,
        prompt: Optional[str] = None,
        messages: Sequence[ChatMessage] = (),
        system: str = "",
        config: GenerationConfig | None = None,
        stream: bool = False,
    ) -> GenerationRequest:
        return GenerationRequest(
            model=self.model,
            prompt=prompt,
            messages=tuple(messages),
            system=system,
            options=self.defaults.merged(config),
            stream=stream,
        )

    async def _post(self, url: str, request: GenerationRequest) -> dict[str, Any]:
        client = await self._get_client()
        logger.info("Ollama %s (model=%s, stream=false)", url.rsplit("/", 1)[-1], request.model)
        try:
            response = await client.post(url, json=request.to_payload(), timeout=self._timeout(False))
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise GenerationError(
                f"Failed to generate response: Ollama {e.response.status_code}: {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise GenerationError(f"Failed to generate response: {type(e).__name__}: {e}") from e
        except ValueError as e:
            raise GenerationError(f"Failed to generate response: malformed JSON from Ollama: {e}") from e
        if not isinstance(data, dict):
            raise GenerationError("Failed to generate response: unexpected response body from Ollama")
        if data.get("error"):
            raise GenerationError(f"Failed to generate response: {data['error']}")
        return data

    async def generate(
        self,
        prompt: str,
        system: str = "",
        config: GenerationConfig | None = None,
    ) -> str:
        data = await self._post(self.generate_url, self._request(prompt=prompt, system=system, config=config))
        if not isinstance(data.get("response"), str):
            raise GenerationError("Failed to generate response: Ollama reply has no 'response' field")
        return data["response"]

    async def chat(
        self,
        messages: Sequence[ChatMessage],
        system: str = "",
        config: GenerationConfig | None = None,
    ) -> str:
        data = await self._post(self.chat_url, self._request(messages=messages, system=system, config=config))
        message = data.get("message")
        if not isinstance(message, dict) or not isinstance(message.get("content"), str):
            raise GenerationError("Failed to generate chat response: Ollama reply has no 'message.content' field")
        return message["content"]

    async def _stream(self, url: str, request: GenerationRequest, decode: LineDecoder) -> AsyncIterator[str]:
        """Open a streaming request and yield deltas until the terminal marker.

        Lines that are not JSON objects are skipped. Ending the body, or a
        transport error, before ``done`` raises ``StreamAbortedError``.
        """
        client = await self._get_client()
        name = url.rsplit("/", 1)[-1]
        logger.info("Ollama %s (model=%s, stream=true)", name, request.model)
        try:
            async with client.stream("POST", url, json=request.to_payload(), timeout=self._timeout(True)) as response:
                if response.is_error:
                    body = (await response.aread()).decode("utf-8", errors="replace")
                    raise GenerationError(f"Failed to stream response: Ollama {response.status_code}: {body}")

                delta_count = 0
                async with aclosing(iter_lines(response.aiter_bytes())) as lines:
                    async for line in lines:
                        if not line.strip():
                            continue
                        try:
                            obj = json.loads(line)
                        except json.JSONDecodeError:
                            logger.debug("Skipping non-JSON stream line: %r", line[:200])
                            continue
                        if not isinstance(obj, dict):
                            continue

                        chunk = decode(obj)
                        if chunk.error:
                            raise GenerationError(f"Failed to stream response: {chunk.error}")
                        if chunk.text:
                            delta_count += 1
                            yield chunk.text
                        if chunk.done:
                            logger.info("Ollama %s stream done after %d deltas", name, delta_count)
                            return
        except httpx.HTTPError as e:
            raise StreamAbortedError(f"Failed to stream response: {type(e).__name__}: {e}") from e

        raise StreamAbortedError("Failed to stream response: stream closed before completion")

    def iter_generate(
        self,
        prompt: str,
        system: str = "",
        config: GenerationConfig | None = None,
    ) -> AsyncIterator[str]:
        request = self._request(prompt=prompt, system=system, config=config, stream=True)
        return self._stream(self.generate_url, request, decode_generate_line)

    def iter_chat(
        self,
        messages: Sequence[ChatMessage],
        system: str = "",
        config: GenerationConfig | None = None,
    ) -> AsyncIterator[str]:
        request = self._request(messages=messages, system=system, config=config, stream=True)
        return self._stream(self.chat_url, request, decode_chat_line)

    async def list_models(self) -> list[str]:
        client = await self._get_client()
        response = await client.get(f"{self.base_url}/api/tags", timeout=self._timeout(False))
        response.raise_for_status()
        models = response.json().get("models") or []
        return [m.get("name") for m in models if isinstance(m, dict)]

    async def health_check(self) -> bool:
        try:
            names = await self.list_models()
        except Exception as e:
            logger.error("Ollama health check failed: %s", e)
            return False
        if self.model not in names:
            logger.warning("Model %s not found. Available models: %s", self.model, names)
            return False
        return True

    async def pull_model(self, model_name: Optional[str] = None) -> bool:
        name = model_name or self.model
        client = await self._get_client()
        logger.info("Pulling model: %s...", name)
        try:
            response = await client.post(
                f"{self.base_url}/api/pull",
                json={"name": name, "stream": False},
                timeout=httpx.Timeout(None, connect=self.connect_timeout),
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Failed to pull model %s: %s", name, e)
            return False
        logger.info("Model %s pulled successfully", name)
        return True

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None
