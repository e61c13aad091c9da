"""Workout plan generation and retrieval endpoints."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from ..llm.base import BaseLLMClient
from ..llm.types import GenerationConfig
from ..prompts import COACH_SYSTEM_PROMPT, render_workout_prompt
from ..store.base import BaseStore
from ..store.types import WorkoutPlan
from ..streaming.relay import relay_events
from ..streaming.sse import SSE_HEADERS
from .deps import error_response, get_llm_client, get_workout_store, new_workout_id
from .schemas import WorkoutRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["workouts"])

WORKOUT_OPTIONS = GenerationConfig(temperature=0.8)


def _prompt_for(body: WorkoutRequest) -> str:
    return render_workout_prompt(
        fitness_level=body.fitness_level,
        goals=body.goals,
        equipment=body.equipment,
        days_per_week=body.days_per_week,
        duration=body.duration,
        limitations=body.limitations,
    )


def _save_plan(store: BaseStore[WorkoutPlan], body: WorkoutRequest, text: str) -> WorkoutPlan:
    plan = WorkoutPlan(id=new_workout_id(), owner_id=body.user_id, plan=text, params=body.params())
    store.set(plan.id, plan)
    logger.info("Stored workout %s for user %s (%d chars)", plan.id, plan.owner_id, len(text))
    return plan


@router.post("/workout/generate")
async def generate_workout(
    body: WorkoutRequest,
    llm: BaseLLMClient = Depends(get_llm_client),
    workouts: BaseStore[WorkoutPlan] = Depends(get_workout_store),
):
    error = body.validation_error()
    if error:
        return error_response(400, error)

    try:
        text = await llm.generate(_prompt_for(body), COACH_SYSTEM_PROMPT, WORKOUT_OPTIONS)
    except Exception as e:
        logger.exception("Workout generation error")
        return error_response(500, str(e))

    plan = _save_plan(workouts, body, text)
    return {"success": True, "workoutId": plan.id, "plan": plan.plan}


@router.post("/workout/generate-stream")
async def generate_workout_stream(
    body: WorkoutRequest,
    request: Request,
    llm: BaseLLMClient = Depends(get_llm_client),
    workouts: BaseStore[WorkoutPlan] = Depends(get_workout_store),
):
    """Stream a workout plan as server-sent events.

    Emits ``{"chunk"}`` per delta, then ``{"done": true, "workoutId"}`` once
    the plan is stored, or a single ``{"error"}``.
    """
    error = body.validation_error()
    if error:
        return error_response(400, error)

    async def finalize(text: str) -> dict:
        return {"workoutId": _save_plan(workouts, body, text).id}

    events = relay_events(
        lambda: llm.iter_generate(_prompt_for(body), COACH_SYSTEM_PROMPT, WORKOUT_OPTIONS),
        finalize,
        is_disconnected=request.is_disconnected,
        label="workout",
    )
    return StreamingResponse(events, media_type="text/event-stream", headers=SSE_HEADERS)


@router.get("/workouts/{user_id}")
async def list_workouts(user_id: str, workouts: BaseStore[WorkoutPlan] = Depends(get_workout_store)):
    return {"success": True, "workouts": [w.to_dict() for w in workouts.list_by_owner(user_id)]}


@router.get("/workout/{workout_id}")
async def get_workout(workout_id: str, workouts: BaseStore[WorkoutPlan] = Depends(get_workout_store)):
    workout = workouts.get(workout_id)
    if workout is None:
        return error_response(404, "Workout not found")
    return {"success": True, "workout": workout.to_dict()}
