"""
Fake Repository Implementations and Builders for Testing.

This package provides in-memory fake implementations of repository
interfaces for fast, isolated testing. No database or external
dependencies required.

Features:
- All fakes implement the same Protocol interfaces as real implementations
- Supports seeding with test data
- Supports reset() for test isolation
- Builder functions for templates, sets, sessions and records

Usage:
    from tests.fakes import FakeSessionRepository, make_snapshot, make_set

    snapshot = make_snapshot(sets=3, target_reps=8, target_weight=50)
    session_repo = FakeSessionRepository()
"""
from datetime import datetime, timezone
from typing import Dict, List, Optional

from domain.models import (
    ExercisePerformance,
    ExerciseSpec,
    PerformedSet,
    PersonalRecord,
    RecordKind,
    Session,
    SetSpec,
    TemplateSnapshot,
)
from tests.fakes.record_repository import FakePersonalRecordRepository
from tests.fakes.session_repository import FakeSessionRepository
from tests.fakes.template_repository import FakeTemplateRepository


USER_ID = "user-1"
COMPLETED_AT = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)


# =============================================================================
# Builder Functions
# =============================================================================


def make_exercise(
    exercise_id: str = "exercise-1",
    exercise_key: str = "bench_press",
    name: str = "Bench Press",
    *,
    sets: int = 3,
    target_reps: Optional[int] = 8,
    target_weight: Optional[float] = 50,
    muscles: Optional[List[str]] = None,
) -> ExerciseSpec:
    """Build an exercise slot with `sets` identical planned sets set-1..set-N."""
    return ExerciseSpec(
        id=exercise_id,
        exercise_key=exercise_key,
        name=name,
        muscles=muscles if muscles is not None else ["chest", "triceps"],
        sets=[
            SetSpec(id=f"set-{i + 1}", target_reps=target_reps, target_weight=target_weight)
            for i in range(sets)
        ],
    )


def make_snapshot(
    *exercises: ExerciseSpec,
    template_id: str = "tpl-1",
    name: str = "Push Day",
    weight_unit: str = "kg",
    **exercise_kwargs,
) -> TemplateSnapshot:
    """
    Build a template snapshot.

    With no exercises given, a single Bench Press slot is built from
    `exercise_kwargs` (see make_exercise).
    """
    if not exercises:
        exercises = (make_exercise(**exercise_kwargs),)
    return TemplateSnapshot(
        template_id=template_id,
        name=name,
        weight_unit=weight_unit,
        exercises=list(exercises),
    )


def make_set(
    set_id: str = "set-1",
    reps: Optional[int] = 8,
    weight: Optional[float] = 50,
    *,
    completed: bool = True,
    skipped: bool = False,
    rpe: Optional[float] = None,
    **kwargs,
) -> PerformedSet:
    """Build a performed set; completed by default."""
    return PerformedSet(
        set_id=set_id,
        actual_reps=reps,
        actual_weight=weight,
        actual_rpe=rpe,
        completed=completed,
        skipped=skipped,
        **kwargs,
    )


def make_performance(
    *sets: PerformedSet,
    exercise_key: str = "bench_press",
) -> ExercisePerformance:
    return ExercisePerformance(exercise_key=exercise_key, sets=list(sets))


def make_session(
    performance: Optional[Dict[str, ExercisePerformance]] = None,
    *,
    snapshot: Optional[TemplateSnapshot] = None,
    session_id: Optional[str] = "sess-1",
    user_id: str = USER_ID,
    completed_at: Optional[datetime] = COMPLETED_AT,
    duration_seconds: Optional[int] = None,
    **kwargs,
) -> Session:
    """Build a session; completed at COMPLETED_AT unless completed_at=None."""
    snapshot = snapshot or make_snapshot()
    return Session(
        id=session_id,
        user_id=user_id,
        template_id=snapshot.template_id,
        template_snapshot=snapshot,
        performance=performance or {},
        completed_at=completed_at,
        duration_seconds=duration_seconds,
        **kwargs,
    )


def make_record(
    kind: RecordKind,
    value: float,
    qualifier: Optional[float] = None,
    *,
    exercise_key: str = "bench_press",
    user_id: str = USER_ID,
    unit: str = "kg",
    session_id: str = "old-session",
    achieved_at: datetime = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc),
) -> PersonalRecord:
    return PersonalRecord(
        user_id=user_id,
        exercise_key=exercise_key,
        kind=kind,
        qualifier=qualifier,
        value=value,
        unit=unit,
        session_id=session_id,
        achieved_at=achieved_at,
    )


def create_repos() -> tuple:
    """
    Create wired fakes sharing one record store.

    Returns:
        (session_repo, record_repo, template_repo)
    """
    record_repo = FakePersonalRecordRepository()
    session_repo = FakeSessionRepository(record_repo)
    template_repo = FakeTemplateRepository()
    return session_repo, record_repo, template_repo


__all__ = [
    # Fakes
    "FakeSessionRepository",
    "FakePersonalRecordRepository",
    "FakeTemplateRepository",
    "create_repos",
    # Builders
    "USER_ID",
    "COMPLETED_AT",
    "make_exercise",
    "make_snapshot",
    "make_set",
    "make_performance",
    "make_session",
    "make_record",
]
