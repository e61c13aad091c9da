"""Shared route dependencies and responses."""

import uuid

from fastapi import Request
from fastapi.responses import JSONResponse

from ..llm.base import BaseLLMClient
from ..store.base import BaseStore
from ..store.types import Conversation, WorkoutPlan


def get_llm_client(request: Request) -> BaseLLMClient:
    """Get the runtime client from app state. Set by ``create_app``."""
    return request.app.state.llm_client


def get_workout_store(request: Request) -> BaseStore[WorkoutPlan]:
    return request.app.state.workouts


def get_conversation_store(request: Request) -> BaseStore[Conversation]:
    return request.app.state.conversations


def new_workout_id() -> str:
    return uuid.uuid4().hex


def new_conversation_id() -> str:
    return f"conv_{uuid.uuid4().hex[:12]}"


def error_response(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})
