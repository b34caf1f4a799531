"""
Analytics query and result models.

Every view is a read-only reduction over the completed-session log (or the
record log, for personal records). Missing numeric values are excluded from
averages, so averages are Optional.
"""

from datetime import date, datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from domain.models.records import PersonalRecord
from domain.models.timestamps import ensure_utc


class AnalyticsView(str, Enum):
    EXERCISE_FREQUENCY = "exercise_frequency"
    MUSCLE_GROUP_VOLUME = "muscle_group_volume"
    EXERCISE_PROGRESSION = "exercise_progression"
    WORKOUT_FREQUENCY = "workout_frequency"
    PERSONAL_RECORDS = "personal_records"
    TEMPLATE_PERFORMANCE = "template_performance"
    OVERVIEW = "overview"


# Default lookback per view, None means all history
DEFAULT_LOOKBACK_DAYS: Dict[AnalyticsView, Optional[int]] = {
    AnalyticsView.EXERCISE_FREQUENCY: 30,
    AnalyticsView.MUSCLE_GROUP_VOLUME: 30,
    AnalyticsView.EXERCISE_PROGRESSION: 90,
    AnalyticsView.WORKOUT_FREQUENCY: 90,
    AnalyticsView.PERSONAL_RECORDS: None,
    AnalyticsView.TEMPLATE_PERFORMANCE: None,
    AnalyticsView.OVERVIEW: 30,
}

# Views that read the whole log and ignore any window
UNWINDOWED_VIEWS = frozenset(
    view for view, days in DEFAULT_LOOKBACK_DAYS.items() if days is None
)


class AnalyticsWindow(BaseModel):
    """
    Inclusive time window for an analytics query.

    A missing start falls back to the view's default lookback from `end`
    (or from "now" when `end` is missing too). A view without a default
    lookback covers all history.
    """

    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @field_validator("start", "end")
    @classmethod
    def normalize_bounds(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    @model_validator(mode="after")
    def validate_order(self) -> "AnalyticsWindow":
        if self.start and self.end and self.start > self.end:
            raise ValueError("Window start must not be after window end")
        return self

    def resolve(
        self, now: datetime, default_days: Optional[int]
    ) -> Tuple[Optional[datetime], Optional[datetime]]:
        end = self.end or now
        start = self.start
        if start is None and default_days is not None:
            start = end - timedelta(days=default_days)
        return start, end

    def contains(self, moment: datetime, now: datetime, default_days: Optional[int]) -> bool:
        start, end = self.resolve(now, default_days)
        if start is not None and moment < start:
            return False
        return end is None or moment <= end

    model_config = {"frozen": True}


class ExerciseFrequencyRow(BaseModel):
    exercise_key: str
    exercise_name: str
    session_count: int
    total_volume: float
    average_rpe: Optional[float] = None


class MuscleGroupVolumeRow(BaseModel):
    day: date
    muscle_group: str
    volume: float
    exercise_count: int


class ProgressionPoint(BaseModel):
    day: date
    max_weight: Optional[float] = None
    max_reps: Optional[int] = None
    total_volume: float = 0.0
    average_rpe: Optional[float] = None
    set_count: int = 0
    session_count: int = 0


class WeekdayFrequencyRow(BaseModel):
    day_of_week: int = Field(..., ge=0, le=6, description="0 = Monday")
    day_name: str
    workout_count: int
    average_volume: Optional[float] = None
    average_duration: Optional[float] = None


class WeeklyTrendRow(BaseModel):
    iso_week: str = Field(..., description="ISO week label, e.g. 2026-W06")
    week_start: date
    workout_count: int
    total_volume: float
    average_duration: Optional[float] = None


class WorkoutFrequency(BaseModel):
    by_weekday: List[WeekdayFrequencyRow] = Field(default_factory=list)
    by_week: List[WeeklyTrendRow] = Field(default_factory=list)


class TemplateSummary(BaseModel):
    """Live template metadata used for the template performance view."""

    template_id: str
    name: str
    workout_type: Optional[str] = None
    difficulty: Optional[str] = None


class TemplatePerformanceRow(BaseModel):
    template_id: str
    template_name: str
    workout_type: Optional[str] = None
    difficulty: Optional[str] = None
    usage_count: int = 0
    average_volume: Optional[float] = None
    average_duration: Optional[float] = None
    last_used_at: Optional[datetime] = None


class RecentSessionRow(BaseModel):
    session_id: Optional[str] = None
    template_name: str = ""
    completed_at: datetime
    total_volume: float = 0.0
    total_sets: int = 0
    duration_seconds: Optional[int] = None


class MuscleGroupTotalRow(BaseModel):
    muscle_group: str
    total_volume: float
    session_count: int


class AnalyticsOverview(BaseModel):
    """Dashboard summary: newest sessions, top exercises and muscle group totals."""

    recent_sessions: List[RecentSessionRow] = Field(default_factory=list)
    exercise_frequency: List[ExerciseFrequencyRow] = Field(default_factory=list)
    muscle_groups: List[MuscleGroupTotalRow] = Field(default_factory=list)


AnalyticsData = Union[
    List[ExerciseFrequencyRow],
    List[MuscleGroupVolumeRow],
    List[ProgressionPoint],
    WorkoutFrequency,
    List[PersonalRecord],
    List[TemplatePerformanceRow],
    AnalyticsOverview,
]


class AnalyticsReport(BaseModel):
    """Result of one analytics query."""

    user_id: str
    view: AnalyticsView
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None
    data: AnalyticsData
