"""Application configuration."""

import os
from dataclasses import dataclass
from typing import Optional

import dotenv

dotenv.load_dotenv()


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    return float(value)


def _bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y"}


def normalize_ollama_url(url: str) -> str:
    """Reduce an endpoint URL (http://host:11434/api/generate) to its base URL."""
    url = url.rstrip("/")
    if "/api/" in url:
        url = url.rsplit("/api/", 1)[0]
    return url


@dataclass
class AppSettings:
    """Main application settings with environment variable overrides."""

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Ollama
    ollama_url: str = "http://localhost:11434"
    model_name: str = "llama3.1:8b"
    temperature: float = 0.7
    top_p: float = 0.9
    top_k: int = 40
    connect_timeout: float = 5.0
    request_timeout: Optional[float] = None  # None: no read timeout
    auto_pull_model: bool = False

    # HTTP
    cors_origins: str = "*"
    log_level: str = "INFO"

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @classmethod
    def from_env(cls) -> "AppSettings":
        return cls(
            host=os.getenv("APP_HOST", cls.host),
            port=int(os.getenv("APP_PORT", cls.port)),
            ollama_url=normalize_ollama_url(os.getenv("OLLAMA_URL", cls.ollama_url)),
            model_name=os.getenv("OLLAMA_MODEL", cls.model_name),
            temperature=float(os.getenv("OLLAMA_TEMPERATURE", cls.temperature)),
            top_p=float(os.getenv("OLLAMA_TOP_P", cls.top_p)),
            top_k=int(os.getenv("OLLAMA_TOP_K", cls.top_k)),
            connect_timeout=float(os.getenv("OLLAMA_CONNECT_TIMEOUT", cls.connect_timeout)),
            request_timeout=_optional_float(os.getenv("OLLAMA_REQUEST_TIMEOUT")),
            auto_pull_model=_bool(os.getenv("OLLAMA_AUTO_PULL"), cls.auto_pull_model),
            cors_origins=os.getenv("CORS_ORIGINS", cls.cors_origins),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
        )


settings = AppSettings.from_env()
