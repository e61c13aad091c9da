"""Prompt templates and the assembler that fills them."""

from .assembler import (
    fill_template,
    render_form_prompt,
    render_progress_prompt,
    render_value,
    render_workout_prompt,
)
from .templates import (
    COACH_SYSTEM_PROMPT,
    FORM_COACHING_PROMPT,
    PROGRESS_ANALYSIS_PROMPT,
    WORKOUT_GENERATOR_PROMPT,
)

__all__ = [
    "fill_template",
    "render_form_prompt",
    "render_progress_prompt",
    "render_value",
    "render_workout_prompt",
    "COACH_SYSTEM_PROMPT",
    "FORM_COACHING_PROMPT",
    "PROGRESS_ANALYSIS_PROMPT",
    "WORKOUT_GENERATOR_PROMPT",
]
