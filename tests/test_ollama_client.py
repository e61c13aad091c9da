"""Tests for the Ollama runtime client."""

import httpx
import pytest

from conftest import BASE_URL, MODEL, StubRuntime, generate_body, ndjson

from calisthenics_coach.config import AppSettings
from calisthenics_coach.llm import (
    ChatMessage,
    GenerationConfig,
    GenerationError,
    OllamaClient,
    StreamAbortedError,
)


async def _collect(deltas) -> list[str]:
    return [d async for d in deltas]


class TestUnaryCalls:
    """Buffered generate and chat calls."""

    @pytest.mark.asyncio
    async def test_generate_returns_response_text(self, runtime: StubRuntime, ollama: OllamaClient) -> None:
        """The system prompt is prefixed to the prompt and sampling options are merged."""
        runtime.unary_json = {"model": MODEL, "response": "Day 1: Push-ups 3x10", "done": True}

        text = await ollama.generate("Make a plan", "You are Atlas.", GenerationConfig(temperature=0.8))

        assert text == "Day 1: Push-ups 3x10"
        call = runtime.calls[0]
        assert call["path"] == "/api/generate"
        assert call["body"]["model"] == MODEL
        assert call["body"]["stream"] is False
        assert call["body"]["prompt"] == "You are Atlas.\n\nMake a plan"
        assert call["body"]["options"] == {"temperature": 0.8, "top_p": 0.9, "top_k": 40}

    @pytest.mark.asyncio
    async def test_generate_without_system_prompt(self, runtime: StubRuntime, ollama: OllamaClient) -> None:
        runtime.unary_json = {"response": "ok", "done": True}
        await ollama.generate("just this")
        assert runtime.calls[0]["body"]["prompt"] == "just this"

    @pytest.mark.asyncio
    async def test_chat_prepends_system_message(self, runtime: StubRuntime, ollama: OllamaClient) -> None:
        """Chat sends the system prompt as the first message, then the history in order."""
        runtime.unary_json = {"message": {"role": "assistant", "content": "Keep your core tight."}, "done": True}
        history = [
            ChatMessage(role="user", content="How do I do a plank?"),
            ChatMessage(role="assistant", content="Forearms down."),
            ChatMessage(role="user", content="Anything else?"),
        ]

        reply = await ollama.chat(history, "You are Atlas.")

        assert reply == "Keep your core tight."
        call = runtime.calls[0]
        assert call["path"] == "/api/chat"
        assert call["body"]["messages"] == [
            {"role": "system", "content": "You are Atlas."},
            {"role": "user", "content": "How do I do a plank?"},
            {"role": "assistant", "content": "Forearms down."},
            {"role": "user", "content": "Anything else?"},
        ]

    @pytest.mark.asyncio
    async def test_missing_response_field(self, runtime: StubRuntime, ollama: OllamaClient) -> None:
        runtime.unary_json = {"done": True}
        with pytest.raises(GenerationError):
            await ollama.generate("hi")

    @pytest.mark.asyncio
    async def test_missing_message_content(self, runtime: StubRuntime, ollama: OllamaClient) -> None:
        runtime.unary_json = {"message": {"role": "assistant"}, "done": True}
        with pytest.raises(GenerationError):
            await ollama.chat([ChatMessage(role="user", content="hi")])

    @pytest.mark.asyncio
    async def test_error_status(self, runtime: StubRuntime, ollama: OllamaClient) -> None:
        runtime.unary_status = 500
        runtime.unary_json = {"error": "model runner crashed"}
        with pytest.raises(GenerationError, match="500"):
            await ollama.generate("hi")

    @pytest.mark.asyncio
    async def test_error_field_in_body(self, runtime: StubRuntime, ollama: OllamaClient) -> None:
        runtime.unary_json = {"error": "model 'llama3.1:8b' not found"}
        with pytest.raises(GenerationError, match="not found"):
            await ollama.generate("hi")

    @pytest.mark.asyncio
    async def test_connection_refused(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused")

        client = OllamaClient(BASE_URL, MODEL, transport=httpx.MockTransport(refuse))
        with pytest.raises(GenerationError, match="ConnectError"):
            await client.generate("hi")

    @pytest.mark.asyncio
    async def test_malformed_json_body(self) -> None:
        client = OllamaClient(BASE_URL, MODEL, transport=httpx.MockTransport(lambda r: httpx.Response(200, text="<html>")))
        with pytest.raises(GenerationError, match="malformed JSON"):
            await client.generate("hi")


class TestStreaming:
    """Streaming primitives over fragmented NDJSON."""

    @pytest.mark.asyncio
    async def test_scenario_deltas_in_order(self, runtime: StubRuntime, ollama: OllamaClient) -> None:
        """Two deltas then the terminal marker yield exactly those two deltas."""
        runtime.script_generate(["Day 1: ", "Push-ups 3x10"])

        deltas = await _collect(ollama.iter_generate("plan", "sys"))

        assert deltas == ["Day 1: ", "Push-ups 3x10"]
        assert runtime.calls[0]["body"]["stream"] is True

    @pytest.mark.asyncio
    async def test_every_chunk_size(self, runtime: StubRuntime, ollama: OllamaClient) -> None:
        """Fragmenting the body at any chunk size yields the same deltas."""
        deltas = ["Warm-up: ", "arm circles ", "💪 ", "Squats 3x15"]
        body = generate_body(deltas)
        for size in range(1, len(body) + 1):
            runtime.script_generate(deltas, chunk_size=size)
            assert await _collect(ollama.iter_generate("plan")) == deltas, f"chunk size {size}"

    @pytest.mark.asyncio
    async def test_chat_stream(self, runtime: StubRuntime, ollama: OllamaClient) -> None:
        runtime.script_chat(["Great ", "question!"], chunk_size=7)

        deltas = await _collect(ollama.iter_chat([ChatMessage(role="user", content="hi")], "sys"))

        assert deltas == ["Great ", "question!"]
        assert runtime.calls[0]["path"] == "/api/chat"
        assert runtime.calls[0]["body"]["messages"][0] == {"role": "system", "content": "sys"}

    @pytest.mark.asyncio
    async def test_noise_lines_are_skipped(self, runtime: StubRuntime, ollama: OllamaClient) -> None:
        """Blank lines, non-JSON lines and non-object JSON are ignored."""
        runtime.stream_chunks = [
            b"\n",
            b"garbage that is not json\n",
            b"[1, 2, 3]\n",
            ndjson({"response": "Plank 3x30s", "done": False}),
            b"\r\n",
            ndjson({"response": "", "done": True}),
        ]
        assert await _collect(ollama.iter_generate("plan")) == ["Plank 3x30s"]

    @pytest.mark.asyncio
    async def test_terminal_line_without_newline(self, runtime: StubRuntime, ollama: OllamaClient) -> None:
        """A final object without a trailing newline still counts."""
        runtime.stream_chunks = [ndjson({"response": "a", "done": False}), b'{"response": "b", "done": true}']
        assert await _collect(ollama.iter_generate("plan")) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_missing_terminal_marker(self, runtime: StubRuntime, ollama: OllamaClient) -> None:
        """A body that ends before done raises after yielding what arrived."""
        runtime.script_generate(["partial plan"], done=False)
        seen: list[str] = []

        with pytest.raises(StreamAbortedError):
            async for delta in ollama.iter_generate("plan"):
                seen.append(delta)

        assert seen == ["partial plan"]

    @pytest.mark.asyncio
    async def test_transport_error_mid_stream(self, runtime: StubRuntime, ollama: OllamaClient) -> None:
        runtime.script_generate(["Day 1: ", "Push-ups", " 3x10"], chunk_size=20)
        runtime.fail_after = 2
        with pytest.raises(StreamAbortedError, match="ReadError"):
            await _collect(ollama.iter_generate("plan"))

    @pytest.mark.asyncio
    async def test_error_line(self, runtime: StubRuntime, ollama: OllamaClient) -> None:
        runtime.stream_chunks = [ndjson({"response": "Day", "done": False}, {"error": "out of memory"})]
        with pytest.raises(GenerationError, match="out of memory"):
            await _collect(ollama.iter_generate("plan"))

    @pytest.mark.asyncio
    async def test_error_status(self) -> None:
        transport = httpx.MockTransport(lambda r: httpx.Response(404, json={"error": "model not found"}))
        client = OllamaClient(BASE_URL, MODEL, transport=transport)
        with pytest.raises(GenerationError, match="404"):
            await _collect(client.iter_generate("plan"))

    @pytest.mark.asyncio
    async def test_early_close(self, runtime: StubRuntime, ollama: OllamaClient) -> None:
        """Closing the iterator after the first delta stops the stream quietly."""
        runtime.script_generate(["one", "two", "three"])
        deltas = ollama.iter_generate("plan")

        assert await deltas.__anext__() == "one"
        await deltas.aclose()

        with pytest.raises(StopAsyncIteration):
            await deltas.__anext__()

    @pytest.mark.asyncio
    async def test_stream_generate_callback(self, runtime: StubRuntime, ollama: OllamaClient) -> None:
        """The callback sees each delta in order and the full text is returned."""
        runtime.script_generate(["Day 1: ", "Push-ups 3x10"], chunk_size=5)
        seen: list[str] = []

        text = await ollama.stream_generate("plan", "sys", on_delta=seen.append)

        assert seen == ["Day 1: ", "Push-ups 3x10"]
        assert text == "Day 1: Push-ups 3x10"

    @pytest.mark.asyncio
    async def test_stream_chat_callback(self, runtime: StubRuntime, ollama: OllamaClient) -> None:
        runtime.script_chat(["Rest ", "48h."])
        seen: list[str] = []

        text = await ollama.stream_chat([ChatMessage(role="user", content="Rest?")], on_delta=seen.append)

        assert text == "Rest 48h."
        assert seen == ["Rest ", "48h."]


class TestRuntimeManagement:
    """Health checks, model pulls and construction from settings."""

    @pytest.mark.asyncio
    async def test_health_check_ok(self, ollama: OllamaClient) -> None:
        assert await ollama.health_check() is True

    @pytest.mark.asyncio
    async def test_health_check_model_missing(self) -> None:
        runtime = StubRuntime(models=["mistral:7b"])
        client = OllamaClient(BASE_URL, MODEL, transport=runtime.transport)
        assert await client.health_check() is False

    @pytest.mark.asyncio
    async def test_health_check_unreachable(self, runtime: StubRuntime, ollama: OllamaClient) -> None:
        runtime.tags_error = True
        assert await ollama.health_check() is False

    @pytest.mark.asyncio
    async def test_list_models(self, ollama: OllamaClient) -> None:
        assert await ollama.list_models() == [MODEL]

    @pytest.mark.asyncio
    async def test_pull_model(self) -> None:
        runtime = StubRuntime(models=[])
        client = OllamaClient(BASE_URL, MODEL, transport=runtime.transport)

        assert await client.health_check() is False
        assert await client.pull_model() is True
        assert await client.health_check() is True

    @pytest.mark.asyncio
    async def test_pull_model_failure(self) -> None:
        client = OllamaClient(BASE_URL, MODEL, transport=httpx.MockTransport(lambda r: httpx.Response(500)))
        assert await client.pull_model("llama3.1:8b") is False

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, ollama: OllamaClient) -> None:
        await ollama.list_models()
        await ollama.close()
        await ollama.close()

    def test_from_settings(self) -> None:
        settings = AppSettings(
            ollama_url="http://gpu-box:11434",
            model_name="qwen2.5:7b",
            temperature=0.5,
            top_p=0.8,
            top_k=20,
        )
        client = OllamaClient.from_settings(settings)
        assert client.generate_url == "http://gpu-box:11434/api/generate"
        assert client.chat_url == "http://gpu-box:11434/api/chat"
        assert client.model == "qwen2.5:7b"
        assert client.defaults.to_options() == {"temperature": 0.5, "top_p": 0.8, "top_k": 20}


class TestGenerationConfig:
    """Sampling option merging."""

    def test_overrides_only_set_fields(self) -> None:
        merged = GenerationConfig(0.7, 0.9, 40).merged(GenerationConfig(temperature=0.6))
        assert merged == GenerationConfig(0.6, 0.9, 40)

    def test_no_overrides(self) -> None:
        base = GenerationConfig(0.7, 0.9, 40)
        assert base.merged(None) is base

    def test_unset_fields_dropped_from_options(self) -> None:
        assert GenerationConfig(top_k=10).to_options() == {"top_k": 10}
