"""Fill prompt templates with user-supplied fields."""

import json
import re
from collections.abc import Mapping
from typing import Any

from .templates import FORM_COACHING_PROMPT, PROGRESS_ANALYSIS_PROMPT, WORKOUT_GENERATOR_PROMPT

PLACEHOLDER_PATTERN = re.compile(r"\{(\w+)\}")
MISSING_VALUE = "None"


def render_value(value: Any) -> str:
    """Stringify a substitution value; lists become comma-joined text."""
    if value is None:
        return MISSING_VALUE
    if isinstance(value, (list, tuple)):
        value = ", ".join(str(v) for v in value)
    text = str(value)
    return text if text else MISSING_VALUE


def fill_template(template: str, values: Mapping[str, Any]) -> str:
    """Replace every ``{name}`` placeholder in ``template``.

    Placeholders without a value (absent, ``None`` or empty) are rendered as
    ``"None"`` instead of raising.
    """
    return PLACEHOLDER_PATTERN.sub(lambda m: render_value(values.get(m.group(1))), template)


def render_workout_prompt(
    fitness_level: str,
    goals: str,
    equipment: list[str],
    days_per_week: Any,
    duration: Any,
    limitations: str | None = None,
) -> str:
    return fill_template(
        WORKOUT_GENERATOR_PROMPT,
        {
            "fitness_level": fitness_level,
            "goals": goals,
            "equipment": equipment,
            "days_per_week": days_per_week,
            "duration": duration,
            "limitations": limitations,
        },
    )


def render_form_prompt(exercise_name: str) -> str:
    return fill_template(FORM_COACHING_PROMPT, {"exercise_name": exercise_name})


def render_progress_prompt(workout_history: Any, current_stats: Any) -> str:
    # Structured data is embedded as indented JSON.
    return fill_template(
        PROGRESS_ANALYSIS_PROMPT,
        {
            "workout_history": json.dumps(workout_history, indent=2, default=str),
            "current_stats": json.dumps(current_stats, indent=2, default=str),
        },
    )
