"""
Performance value objects: what the user actually did in a session.

Structural typing is enforced here; semantic checks (non-negative numbers,
RPE range, completed/skipped exclusivity) are left to the session validator
so that a rejection can name the offending set.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from domain.models.template import SetType


class SetStatus(str, Enum):
    """Outcome of a performed set derived from its completed/skipped flags."""

    COMPLETED = "completed"
    SKIPPED = "skipped"
    PENDING = "pending"
    CONFLICTING = "conflicting"


class FailurePoint(str, Enum):
    FORM = "form"
    STRENGTH = "strength"
    ENDURANCE = "endurance"
    TIME = "time"


class TechniqueQuality(str, Enum):
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class PerformedSet(BaseModel):
    """
    One logged attempt against a planned SetSpec, or an ad hoc set.

    `set_id` references a SetSpec of the same exercise slot unless
    `is_ad_hoc` is True. A set that is neither completed nor skipped is
    pending and never contributes to metrics.
    """

    set_id: str = Field(..., min_length=1)
    set_type: SetType = Field(default=SetType.STANDARD)
    is_ad_hoc: bool = Field(default=False, description="Added during the session, not planned")

    actual_reps: Optional[int] = Field(default=None)
    actual_weight: Optional[float] = Field(default=None)
    actual_duration: Optional[float] = Field(default=None, description="Seconds")
    actual_distance: Optional[float] = Field(default=None)
    actual_rpe: Optional[float] = Field(default=None, description="Rated perceived exertion (1-10)")
    rest_time: Optional[int] = Field(default=None, description="Rest taken after the set in seconds")

    completed: bool = Field(default=False)
    skipped: bool = Field(default=False)

    notes: Optional[str] = Field(default=None)
    failure_point: Optional[FailurePoint] = Field(default=None)
    technique: Optional[TechniqueQuality] = Field(default=None)
    assistance_used: Optional[bool] = Field(default=None)

    @property
    def status(self) -> SetStatus:
        if self.completed and self.skipped:
            return SetStatus.CONFLICTING
        if self.completed:
            return SetStatus.COMPLETED
        if self.skipped:
            return SetStatus.SKIPPED
        return SetStatus.PENDING

    @property
    def is_pending(self) -> bool:
        return self.status == SetStatus.PENDING

    @property
    def has_load(self) -> bool:
        """True when the set carries both reps and weight."""
        return self.actual_reps is not None and self.actual_weight is not None

    model_config = {"frozen": True}


class ExercisePerformance(BaseModel):
    """
    Performance for one exercise slot within a session.

    `total_volume` and `average_rpe` are derived by the metrics calculator;
    values supplied by a client are overwritten on commit.
    """

    exercise_key: str = Field(..., min_length=1, description="Catalog exercise identifier")
    sets: List[PerformedSet] = Field(default_factory=list)
    exercise_notes: Optional[str] = Field(default=None)
    performance_rating: Optional[int] = Field(default=None, ge=1, le=5)
    difficulty_rating: Optional[int] = Field(default=None, ge=1, le=5)

    total_volume: float = Field(default=0.0)
    average_rpe: Optional[float] = Field(default=None)

    @property
    def completed_sets(self) -> List[PerformedSet]:
        return [s for s in self.sets if s.status == SetStatus.COMPLETED]

    @property
    def attempted(self) -> bool:
        """True when at least one set was completed or skipped."""
        return any(s.completed or s.skipped for s in self.sets)

    model_config = {"frozen": True}
