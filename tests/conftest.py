"""Shared fixtures: a scripted Ollama runtime served through httpx.MockTransport."""

import json
from collections.abc import AsyncIterator, Callable
from typing import Any, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from calisthenics_coach.app import create_app
from calisthenics_coach.config import AppSettings
from calisthenics_coach.llm.ollama import OllamaClient
from calisthenics_coach.store.memory import InMemoryStore

MODEL = "llama3.1:8b"
BASE_URL = "http://ollama.test"


def ndjson(*objects: Any) -> bytes:
    return b"".join(json.dumps(o).encode() + b"\n" for o in objects)


def generate_body(deltas: list[str], done: bool = True) -> bytes:
    lines = [{"model": MODEL, "response": d, "done": False} for d in deltas]
    if done:
        lines.append({"model": MODEL, "response": "", "done": True})
    return ndjson(*lines)


def chat_body(deltas: list[str], done: bool = True) -> bytes:
    lines = [{"model": MODEL, "message": {"role": "assistant", "content": d}, "done": False} for d in deltas]
    if done:
        lines.append({"model": MODEL, "message": {"role": "assistant", "content": ""}, "done": True})
    return ndjson(*lines)


def fragment(data: bytes, size: int) -> list[bytes]:
    return [data[i:i + size] for i in range(0, len(data), size)]


def parse_events(text: str) -> list[dict]:
    """Parse a complete event-stream body into its JSON payloads."""
    return [json.loads(line[len("data: "):]) for line in text.splitlines() if line.startswith("data: ")]


class StubRuntime:
    """Scripted stand-in for the Ollama HTTP API.

    Streaming requests are answered with ``stream_chunks`` (raw bytes, so
    tests control fragmentation). Unary requests are answered with
    ``unary_json``. Every generation request is recorded in ``calls``.
    """

    def __init__(self, models: Optional[list[str]] = None):
        self.models = [MODEL] if models is None else models
        self.calls: list[dict] = []
        self.stream_chunks: list[bytes] = []
        self.unary_json: Any = {"model": MODEL, "response": "", "done": True}
        self.unary_status = 200
        self.fail_after: Optional[int] = None  # raise ReadError before this chunk index
        self.on_chunk: Optional[Callable[[int], None]] = None
        self.tags_error = False

    def script_generate(self, deltas: list[str], chunk_size: Optional[int] = None, done: bool = True):
        body = generate_body(deltas, done)
        self.stream_chunks = fragment(body, chunk_size) if chunk_size else [body]

    def script_chat(self, deltas: list[str], chunk_size: Optional[int] = None, done: bool = True):
        body = chat_body(deltas, done)
        self.stream_chunks = fragment(body, chunk_size) if chunk_size else [body]

    async def _body(self) -> AsyncIterator[bytes]:
        for i, chunk in enumerate(self.stream_chunks):
            if self.fail_after is not None and i == self.fail_after:
                raise httpx.ReadError("connection reset by peer")
            if self.on_chunk is not None:
                self.on_chunk(i)
            yield chunk

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/api/tags":
            if self.tags_error:
                raise httpx.ConnectError("connection refused")
            return httpx.Response(200, json={"models": [{"name": n, "size": 1} for n in self.models]})
        if path == "/api/pull":
            body = json.loads(request.content)
            self.models.append(body["name"])
            return httpx.Response(200, json={"status": "success"})

        body = json.loads(request.content)
        self.calls.append({"path": path, "body": body})
        if body.get("stream"):
            return httpx.Response(200, content=self._body(), headers={"content-type": "application/x-ndjson"})
        return httpx.Response(self.unary_status, json=self.unary_json)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def runtime() -> StubRuntime:
    return StubRuntime()


@pytest.fixture
def ollama(runtime: StubRuntime) -> OllamaClient:
    return OllamaClient(BASE_URL, MODEL, transport=runtime.transport)


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(ollama_url=BASE_URL, model_name=MODEL)


@pytest.fixture
def workouts() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def conversations() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def app(settings, ollama, workouts, conversations):
    return create_app(settings, ollama, workouts, conversations)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
