"""Health endpoint."""

from fastapi import APIRouter, Depends

from ..llm.base import BaseLLMClient
from .deps import get_llm_client

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(llm: BaseLLMClient = Depends(get_llm_client)):
    """Report whether the runtime is reachable and serves the configured model."""
    healthy = await llm.health_check()
    return {
        "status": "ok",
        "ollama": "connected" if healthy else "disconnected",
        "model": llm.model,
    }
