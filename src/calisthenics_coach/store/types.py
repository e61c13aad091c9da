"""Records kept by the store."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Message:
    """A message in a stored conversation."""
    role: str  # "system", "user", or "assistant"
    content: str
    timestamp: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {"role": self.role, "content": self.content, "timestamp": self.timestamp.isoformat()}


@dataclass(frozen=True)
class Conversation:
    """A chat transcript. Replaced as a whole after each completed exchange."""
    id: str
    owner_id: Optional[str]
    messages: tuple[Message, ...] = ()
    created_at: datetime = field(default_factory=utcnow)

    def with_exchange(self, user: Message, assistant: Message) -> "Conversation":
        """Return a copy with one user message and its assistant reply appended."""
        return Conversation(
            id=self.id,
            owner_id=self.owner_id,
            messages=self.messages + (user, assistant),
            created_at=self.created_at,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.owner_id,
            "messages": [m.to_dict() for m in self.messages],
            "createdAt": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class WorkoutParams:
    """The form fields a workout plan was generated from."""
    fitness_level: str
    goals: str
    equipment: tuple[str, ...]
    days_per_week: str
    duration: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "fitnessLevel": self.fitness_level,
            "goals": self.goals,
            "equipment": list(self.equipment),
            "daysPerWeek": self.days_per_week,
            "duration": self.duration,
        }


@dataclass(frozen=True)
class WorkoutPlan:
    """A completed, generated workout plan."""
    id: str
    owner_id: Optional[str]
    plan: str
    params: WorkoutParams
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.owner_id,
            "plan": self.plan,
            "createdAt": self.created_at.isoformat(),
            "params": self.params.to_dict(),
        }
