"""
Session metrics calculation.

Turns a template snapshot and a performance map into SessionMetrics. The
calculation is a pure function of its inputs: no I/O and no clock reads,
so identical inputs always give identical metrics.

Counting rules:
- Completed and skipped sets count toward total_sets; pending sets (neither
  flag) are ignored entirely.
- Volume comes only from completed sets carrying reps and weight.
- Adherence is the share of planned SetSpecs completed. Ad hoc sets are in
  neither the numerator nor the denominator.
"""
import logging
import math
from typing import Dict, List, Mapping, Optional, Set, Tuple

from application.exceptions import ComputationInvariantViolation
from backend.core.volume import mean, set_volume, total_volume
from domain.models import (
    ExercisePerformance,
    PerformedSet,
    SessionMetrics,
    TemplateSnapshot,
)

logger = logging.getLogger(__name__)


def average_rpe(sets: List[PerformedSet]) -> Optional[float]:
    """Mean RPE over completed sets that report one; None if none do."""
    return mean(s.actual_rpe for s in sets if s.completed)


def derive_exercise_performance(exercise_perf: ExercisePerformance) -> ExercisePerformance:
    """
    Return a copy of an exercise's performance with derived fields recomputed.

    Client-supplied total_volume and average_rpe are discarded.
    """
    return exercise_perf.model_copy(
        update={
            "total_volume": total_volume(exercise_perf.sets),
            "average_rpe": average_rpe(exercise_perf.sets),
        }
    )


def derive_performance(
    performance: Mapping[str, ExercisePerformance],
) -> Dict[str, ExercisePerformance]:
    """Recompute derived fields for every exercise slot, preserving order."""
    return {
        exercise_id: derive_exercise_performance(exercise_perf)
        for exercise_id, exercise_perf in performance.items()
    }


def _planned_set_ids(template: TemplateSnapshot) -> Set[Tuple[str, str]]:
    return {(exercise.id, spec.id) for exercise in template.exercises for spec in exercise.sets}


def calculate_adherence(
    template: TemplateSnapshot,
    performance: Mapping[str, ExercisePerformance],
) -> float:
    """
    Fraction of planned sets completed, clamped to [0, 1].

    A planned set logged more than once counts once. An empty template has
    an adherence of 0.0.
    """
    planned = _planned_set_ids(template)
    if not planned:
        return 0.0

    completed_planned: Set[Tuple[str, str]] = set()
    for exercise_id, exercise_perf in performance.items():
        for performed in exercise_perf.sets:
            if performed.is_ad_hoc or not performed.completed:
                continue
            key = (exercise_id, performed.set_id)
            if key in planned:
                completed_planned.add(key)

    score = len(completed_planned) / len(planned)
    return min(1.0, max(0.0, score))


def compute_metrics(
    template: TemplateSnapshot,
    performance: Mapping[str, ExercisePerformance],
) -> SessionMetrics:
    """
    Compute session metrics from a template snapshot and performance map.

    Args:
        template: Snapshot the session was performed against
        performance: Exercise slot id -> ExercisePerformance

    Returns:
        SessionMetrics with empty record lists; records are attached at
        commit time once detected.

    Raises:
        ComputationInvariantViolation: If a derived total is negative
    """
    volume = 0.0
    total_sets = 0
    completed_sets = 0
    skipped_sets = 0
    total_exercises = 0
    exercise_volumes: Dict[str, float] = {}
    rpes: List[float] = []

    for exercise_id, exercise_perf in performance.items():
        attempted = False
        for performed in exercise_perf.sets:
            if performed.completed:
                completed_sets += 1
            elif performed.skipped:
                skipped_sets += 1
            else:
                continue
            attempted = True
            total_sets += 1
            if performed.completed and performed.actual_rpe is not None:
                rpes.append(performed.actual_rpe)

        exercise_volume = total_volume(exercise_perf.sets)
        exercise_volumes[exercise_id] = exercise_volume
        volume += exercise_volume
        if attempted:
            total_exercises += 1

    metrics = SessionMetrics(
        total_volume=volume,
        total_sets=total_sets,
        total_exercises=total_exercises,
        completed_sets=completed_sets,
        skipped_sets=skipped_sets,
        average_rpe=mean(rpes),
        max_rpe=max(rpes) if rpes else None,
        adherence_score=calculate_adherence(template, performance),
        exercise_volumes=exercise_volumes,
    )
    _check_invariants(metrics)
    return metrics


def _check_invariants(metrics: SessionMetrics) -> None:
    volumes = [metrics.total_volume, *metrics.exercise_volumes.values()]
    if any(not math.isfinite(v) or v < 0 for v in volumes):
        logger.error(f"Invalid volume computed: {metrics.total_volume}")
        raise ComputationInvariantViolation(
            f"Computed volume is negative or not finite ({metrics.total_volume})"
        )
    if metrics.completed_sets + metrics.skipped_sets != metrics.total_sets:
        raise ComputationInvariantViolation(
            "Completed and skipped sets do not add up to total sets"
        )
    if not 0.0 <= metrics.adherence_score <= 1.0:
        raise ComputationInvariantViolation(
            f"Adherence score out of range: {metrics.adherence_score}"
        )


__all__ = [
    "average_rpe",
    "calculate_adherence",
    "compute_metrics",
    "derive_exercise_performance",
    "derive_performance",
    "set_volume",
]
