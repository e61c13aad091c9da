"""Request bodies, using the mobile client's camelCase field names."""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..store.types import WorkoutParams


class _Body(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class WorkoutRequest(_Body):
    """Form fields for a workout plan."""

    user_id: Optional[str] = Field(None, alias="userId")
    fitness_level: Optional[str] = Field(None, alias="fitnessLevel")
    goals: Optional[str] = None
    equipment: list[str] = Field(default_factory=list)
    days_per_week: Optional[Union[str, int]] = Field(None, alias="daysPerWeek")
    duration: Optional[Union[str, int]] = None
    limitations: Optional[str] = None

    def validation_error(self) -> Optional[str]:
        if not self.goals or not self.goals.strip():
            return "Missing required field: goals"
        if not [e for e in self.equipment if e and e.strip()]:
            return "Missing required field: equipment"
        return None

    def params(self) -> WorkoutParams:
        return WorkoutParams(
            fitness_level=self.fitness_level or "",
            goals=self.goals or "",
            equipment=tuple(self.equipment),
            days_per_week="" if self.days_per_week is None else str(self.days_per_week),
            duration="" if self.duration is None else str(self.duration),
        )


class ChatRequest(_Body):
    user_id: Optional[str] = Field(None, alias="userId")
    message: Optional[str] = None
    conversation_id: Optional[str] = Field(None, alias="conversationId")

    def validation_error(self) -> Optional[str]:
        if not self.message or not self.message.strip():
            return "Missing required field: message"
        return None


class FormCoachingRequest(_Body):
    exercise_name: Optional[str] = Field(None, alias="exerciseName")

    def validation_error(self) -> Optional[str]:
        if not self.exercise_name or not self.exercise_name.strip():
            return "Missing required field: exerciseName"
        return None


class ProgressRequest(_Body):
    user_id: Optional[str] = Field(None, alias="userId")
    workout_history: Any = Field(None, alias="workoutHistory")
    current_stats: Any = Field(None, alias="currentStats")
