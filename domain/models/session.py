"""
Session aggregate: a template snapshot plus what was performed against it.

A session is either scheduled (no completion time, empty performance) or
completed (completion time and non-empty performance). The transition
happens exactly once; see CompleteSessionUseCase.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from domain.models.performance import ExercisePerformance
from domain.models.records import PersonalRecord
from domain.models.template import TemplateSnapshot
from domain.models.timestamps import ensure_utc


class SessionStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"


class SessionMetrics(BaseModel):
    """
    Metrics derived from a session's performance. Never hand-edited.

    `adherence_score` is the fraction of planned sets completed (0-1).
    """

    total_volume: float = Field(default=0.0)
    total_sets: int = Field(default=0)
    total_exercises: int = Field(default=0)
    completed_sets: int = Field(default=0)
    skipped_sets: int = Field(default=0)
    average_rpe: Optional[float] = Field(default=None)
    max_rpe: Optional[float] = Field(default=None)
    adherence_score: float = Field(default=0.0)
    exercise_volumes: Dict[str, float] = Field(
        default_factory=dict, description="Volume per exercise slot id"
    )
    personal_records: List[PersonalRecord] = Field(default_factory=list)
    volume_records: List[PersonalRecord] = Field(default_factory=list)

    def with_records(self, records: List[PersonalRecord]) -> "SessionMetrics":
        """Return a copy carrying the records detected for this session."""
        return self.model_copy(
            update={
                "personal_records": list(records),
                "volume_records": [r for r in records if r.kind.is_volume],
            }
        )

    model_config = {"frozen": True}


class EnvironmentContext(BaseModel):
    """Optional training conditions and subjective readiness ratings."""

    location: Optional[str] = None
    equipment: List[str] = Field(default_factory=list)
    weather: Optional[str] = None
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    crowd_level: Optional[Literal["empty", "light", "moderate", "busy", "packed"]] = None
    energy_level: Optional[int] = Field(default=None, ge=1, le=10)
    sleep_quality: Optional[int] = Field(default=None, ge=1, le=10)
    stress_level: Optional[int] = Field(default=None, ge=1, le=10)

    model_config = {"frozen": True}


class Session(BaseModel):
    """
    A workout session owned by one user and one template snapshot.

    `performance` maps exercise slot ids (ExerciseSpec.id) to what was
    performed. Slots not present in the snapshot may only hold ad hoc sets.

    Examples:
        >>> session = Session(
        ...     id="sess-1",
        ...     user_id="user-1",
        ...     template_snapshot=snapshot,
        ...     scheduled_at=datetime(2024, 1, 15, 9, 0),
        ... )
        >>> session.status
        <SessionStatus.SCHEDULED: 'scheduled'>
    """

    id: Optional[str] = Field(default=None, description="None for unsaved sessions")
    user_id: str = Field(..., min_length=1)
    template_id: Optional[str] = Field(default=None)
    template_snapshot: TemplateSnapshot
    performance: Dict[str, ExercisePerformance] = Field(default_factory=dict)
    metrics: Optional[SessionMetrics] = Field(
        default=None, description="Derived metrics; recomputed server-side on commit"
    )
    environment: Optional[EnvironmentContext] = Field(default=None)

    scheduled_at: Optional[datetime] = Field(default=None)
    started_at: Optional[datetime] = Field(default=None)
    completed_at: Optional[datetime] = Field(default=None)
    duration_seconds: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = Field(default=None)

    @field_validator("scheduled_at", "started_at", "completed_at")
    @classmethod
    def normalize_timestamps(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Store every moment as aware UTC; naive values are read as UTC."""
        return ensure_utc(v)

    @property
    def status(self) -> SessionStatus:
        if self.completed_at is not None:
            return SessionStatus.COMPLETED
        return SessionStatus.SCHEDULED

    @property
    def is_completed(self) -> bool:
        return self.status == SessionStatus.COMPLETED

    @property
    def weight_unit(self) -> str:
        return self.template_snapshot.weight_unit

    def iter_sets(self):
        """Yield (exercise_id, PerformedSet) pairs in performance order."""
        for exercise_id, exercise_perf in self.performance.items():
            for performed in exercise_perf.sets:
                yield exercise_id, performed

    def exercise_name(self, exercise_id: str) -> str:
        """Display name for a slot, resolved from the embedded snapshot."""
        spec = self.template_snapshot.get_exercise(exercise_id)
        if spec is not None:
            return spec.name
        perf = self.performance.get(exercise_id)
        if perf is None:
            return exercise_id
        return self.template_snapshot.exercise_name(perf.exercise_key) or perf.exercise_key

    def complete(
        self,
        performance: Dict[str, ExercisePerformance],
        completed_at: datetime,
        *,
        metrics: Optional[SessionMetrics] = None,
        environment: Optional[EnvironmentContext] = None,
        duration_seconds: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> "Session":
        """
        Return a completed copy of this scheduled session.

        Environment, duration and notes keep their current values when not
        given. The snapshot is carried over unchanged.

        Raises:
            ValueError: If the session is already completed
        """
        if self.is_completed:
            raise ValueError(f"Session {self.id} is already completed")
        return self.model_copy(
            update={
                "performance": dict(performance),
                "completed_at": ensure_utc(completed_at),
                "metrics": metrics,
                "environment": environment if environment is not None else self.environment,
                "duration_seconds": (
                    duration_seconds if duration_seconds is not None else self.duration_seconds
                ),
                "notes": notes if notes is not None else self.notes,
            }
        )
