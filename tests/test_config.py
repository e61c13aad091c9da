"""Tests for settings and application startup."""

from fastapi.testclient import TestClient

from conftest import BASE_URL, MODEL, StubRuntime

from calisthenics_coach.app import create_app
from calisthenics_coach.config import AppSettings, normalize_ollama_url
from calisthenics_coach.llm.ollama import OllamaClient


class TestSettings:
    def test_defaults(self, monkeypatch) -> None:
        for name in ("APP_PORT", "OLLAMA_URL", "OLLAMA_MODEL", "OLLAMA_REQUEST_TIMEOUT", "CORS_ORIGINS"):
            monkeypatch.delenv(name, raising=False)

        settings = AppSettings.from_env()

        assert settings.port == 3000
        assert settings.ollama_url == "http://localhost:11434"
        assert settings.model_name == "llama3.1:8b"
        assert settings.request_timeout is None
        assert settings.cors_origin_list == ["*"]

    def test_environment_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("APP_PORT", "8080")
        monkeypatch.setenv("OLLAMA_URL", "http://gpu-box:11434/api/generate")
        monkeypatch.setenv("OLLAMA_MODEL", "mistral:7b")
        monkeypatch.setenv("OLLAMA_REQUEST_TIMEOUT", "120")
        monkeypatch.setenv("OLLAMA_AUTO_PULL", "yes")
        monkeypatch.setenv("CORS_ORIGINS", "http://localhost:8081, exp://192.168.1.20:8081")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = AppSettings.from_env()

        assert settings.port == 8080
        assert settings.ollama_url == "http://gpu-box:11434"
        assert settings.model_name == "mistral:7b"
        assert settings.request_timeout == 120.0
        assert settings.auto_pull_model is True
        assert settings.cors_origin_list == ["http://localhost:8081", "exp://192.168.1.20:8081"]
        assert settings.log_level == "DEBUG"

    def test_normalize_ollama_url(self) -> None:
        assert normalize_ollama_url("http://localhost:11434/") == "http://localhost:11434"
        assert normalize_ollama_url("http://localhost:11434/api/chat") == "http://localhost:11434"


class TestStartup:
    """Runtime connectivity check in the application lifespan."""

    def test_auto_pull_missing_model(self) -> None:
        runtime = StubRuntime(models=[])
        settings = AppSettings(ollama_url=BASE_URL, model_name=MODEL, auto_pull_model=True)
        app = create_app(settings, OllamaClient(BASE_URL, MODEL, transport=runtime.transport))

        with TestClient(app) as client:
            assert runtime.models == [MODEL]
            assert client.get("/health").json()["ollama"] == "connected"

    def test_starts_without_runtime(self) -> None:
        """The server still comes up when the runtime is unreachable."""
        runtime = StubRuntime()
        runtime.tags_error = True
        settings = AppSettings(ollama_url=BASE_URL, model_name=MODEL)
        app = create_app(settings, OllamaClient(BASE_URL, MODEL, transport=runtime.transport))

        with TestClient(app) as client:
            assert client.get("/health").json()["ollama"] == "disconnected"
