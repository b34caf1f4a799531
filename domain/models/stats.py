"""
Cumulative user statistics update produced by a session commit.

The delta is an explicit output of the commit so the store can apply it in
the same transaction as the session and record writes.
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class StatsDelta(BaseModel):
    """Increment to apply to a user's cumulative and monthly statistics."""

    user_id: str
    workouts: int = Field(default=1)
    volume: float = Field(default=0.0)
    sets: int = Field(default=0)
    exercises: int = Field(default=0)
    training_hours: float = Field(default=0.0)
    personal_records: int = Field(default=0)
    last_workout_at: datetime
    year: int
    month: int = Field(..., ge=1, le=12)
    exercise_keys: List[str] = Field(
        default_factory=list, description="Distinct exercises touched by the session"
    )

    model_config = {"frozen": True}
