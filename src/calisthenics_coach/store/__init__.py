"""Conversation and workout storage."""

from .base import BaseStore
from .memory import InMemoryStore
from .types import Conversation, Message, WorkoutParams, WorkoutPlan

__all__ = [
    "BaseStore",
    "InMemoryStore",
    "Conversation",
    "Message",
    "WorkoutParams",
    "WorkoutPlan",
]
