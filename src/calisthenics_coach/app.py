"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import AppSettings, settings as default_settings
from .llm.base import BaseLLMClient
from .llm.ollama import OllamaClient
from .routes import chat, coaching, health, workouts
from .store.base import BaseStore
from .store.memory import InMemoryStore
from .store.types import Conversation, WorkoutPlan

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(level)


async def _check_ollama_connectivity(llm: BaseLLMClient, settings: AppSettings) -> bool:
    """Check the runtime at startup, optionally pulling a missing model."""
    logger.info("Ollama URL: %s", settings.ollama_url)
    logger.info("Model: %s", llm.model)
    if await llm.health_check():
        logger.info("Ollama connected successfully")
        return True
    if settings.auto_pull_model and await llm.pull_model():
        return await llm.health_check()
    logger.warning("Ollama not available - start Ollama and ensure %s is pulled", llm.model)
    return False


def create_app(
    settings: Optional[AppSettings] = None,
    llm_client: Optional[BaseLLMClient] = None,
    workouts_store: Optional[BaseStore[WorkoutPlan]] = None,
    conversations_store: Optional[BaseStore[Conversation]] = None,
) -> FastAPI:
    """Build the application with its runtime client and stores.

    Anything not supplied is built from ``settings``: an ``OllamaClient`` and
    fresh in-memory stores.
    """
    settings = settings or default_settings
    llm = llm_client or OllamaClient.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await _check_ollama_connectivity(llm, settings)
        yield
        await llm.close()
        logger.info("Ollama client closed")

    app = FastAPI(title="Calisthenics Coach", lifespan=lifespan)
    app.state.settings = settings
    app.state.llm_client = llm
    app.state.workouts = workouts_store if workouts_store is not None else InMemoryStore()
    app.state.conversations = conversations_store if conversations_store is not None else InMemoryStore()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(workouts.router)
    app.include_router(chat.router)
    app.include_router(coaching.router)
    return app


configure_logging(default_settings.log_level)
app = create_app()
