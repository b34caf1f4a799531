"""
Domain models for the workout performance engine.

This package contains pure domain models that are independent of
infrastructure concerns (database, transport, external services).

These models represent the core business concepts:
- TemplateSnapshot: Immutable copy of a workout plan taken at session start
- PerformedSet / ExercisePerformance: What the user actually did
- Session: The committed unit (snapshot + performance + derived metrics)
- PersonalRecord / PriorBests: Best-ever values per exercise and kind
- StatsDelta: Cumulative statistics update emitted by a commit
- Analytics*: Query window and view result rows

Usage:
    >>> from domain.models import TemplateSnapshot, ExerciseSpec, SetSpec

    >>> snapshot = TemplateSnapshot(
    ...     name="Push Day",
    ...     exercises=[
    ...         ExerciseSpec(
    ...             id="exercise-1",
    ...             exercise_key="bench_press",
    ...             name="Bench Press",
    ...             sets=[SetSpec(id="set-1", target_reps=8, target_weight=50)],
    ...         )
    ...     ],
    ... )

    >>> # Serialize to JSON
    >>> json_str = snapshot.model_dump_json(indent=2)
"""

from domain.models.analytics import (
    DEFAULT_LOOKBACK_DAYS,
    UNWINDOWED_VIEWS,
    AnalyticsOverview,
    AnalyticsReport,
    AnalyticsView,
    AnalyticsWindow,
    ExerciseFrequencyRow,
    MuscleGroupTotalRow,
    MuscleGroupVolumeRow,
    ProgressionPoint,
    RecentSessionRow,
    TemplatePerformanceRow,
    TemplateSummary,
    WeekdayFrequencyRow,
    WeeklyTrendRow,
    WorkoutFrequency,
)
from domain.models.load import WeightUnit, convert_weight
from domain.models.performance import (
    ExercisePerformance,
    FailurePoint,
    PerformedSet,
    SetStatus,
    TechniqueQuality,
)
from domain.models.records import (
    RECORD_KIND_ORDER,
    PersonalRecord,
    PriorBests,
    RecordKind,
    record_key,
)
from domain.models.session import (
    EnvironmentContext,
    Session,
    SessionMetrics,
    SessionStatus,
)
from domain.models.stats import StatsDelta
from domain.models.template import (
    ExerciseSpec,
    RepRange,
    SetSpec,
    SetType,
    TemplateSnapshot,
)
from domain.models.timestamps import ensure_utc

__all__ = [
    # Template
    "TemplateSnapshot",
    "ExerciseSpec",
    "SetSpec",
    "RepRange",
    # Performance
    "PerformedSet",
    "ExercisePerformance",
    # Session
    "Session",
    "SessionMetrics",
    "EnvironmentContext",
    "StatsDelta",
    # Records
    "PersonalRecord",
    "PriorBests",
    "record_key",
    "RECORD_KIND_ORDER",
    # Analytics
    "AnalyticsView",
    "AnalyticsWindow",
    "AnalyticsReport",
    "AnalyticsOverview",
    "RecentSessionRow",
    "MuscleGroupTotalRow",
    "DEFAULT_LOOKBACK_DAYS",
    "UNWINDOWED_VIEWS",
    "ExerciseFrequencyRow",
    "MuscleGroupVolumeRow",
    "ProgressionPoint",
    "WeekdayFrequencyRow",
    "WeeklyTrendRow",
    "WorkoutFrequency",
    "TemplateSummary",
    "TemplatePerformanceRow",
    # Units
    "WeightUnit",
    "convert_weight",
    "ensure_utc",
    # Enums
    "SetType",
    "SetStatus",
    "FailurePoint",
    "TechniqueQuality",
    "SessionStatus",
    "RecordKind",
]
