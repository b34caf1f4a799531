"""
Domain layer for the workout performance engine.

This package contains pure domain models that are independent of
infrastructure concerns (database, API, external services).
"""

from domain.models import (
    ExercisePerformance,
    PerformedSet,
    PersonalRecord,
    PriorBests,
    Session,
    SessionMetrics,
    TemplateSnapshot,
)

__all__ = [
    "ExercisePerformance",
    "PerformedSet",
    "PersonalRecord",
    "PriorBests",
    "Session",
    "SessionMetrics",
    "TemplateSnapshot",
]
