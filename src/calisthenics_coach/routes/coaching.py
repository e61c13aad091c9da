"""Exercise form coaching and progress analysis endpoints."""

import logging

from fastapi import APIRouter, Depends

from ..llm.base import BaseLLMClient
from ..llm.types import GenerationConfig
from ..prompts import COACH_SYSTEM_PROMPT, render_form_prompt, render_progress_prompt
from .deps import error_response, get_llm_client
from .schemas import FormCoachingRequest, ProgressRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["coaching"])

ANALYSIS_OPTIONS = GenerationConfig(temperature=0.6)


@router.post("/exercise/form")
async def exercise_form(body: FormCoachingRequest, llm: BaseLLMClient = Depends(get_llm_client)):
    error = body.validation_error()
    if error:
        return error_response(400, error)

    try:
        guidance = await llm.generate(render_form_prompt(body.exercise_name), COACH_SYSTEM_PROMPT, ANALYSIS_OPTIONS)
    except Exception as e:
        logger.exception("Form coaching error")
        return error_response(500, str(e))

    return {"success": True, "exercise": body.exercise_name, "guidance": guidance}


@router.post("/progress/analyze")
async def analyze_progress(body: ProgressRequest, llm: BaseLLMClient = Depends(get_llm_client)):
    prompt = render_progress_prompt(body.workout_history, body.current_stats)
    try:
        analysis = await llm.generate(prompt, COACH_SYSTEM_PROMPT, ANALYSIS_OPTIONS)
    except Exception as e:
        logger.exception("Progress analysis error")
        return error_response(500, str(e))

    return {"success": True, "analysis": analysis}
