"""
Personal record detection.

Given a completed session and the user's prior bests, determines which
values are new personal records. Record kinds per exercise:
- weight_at_reps: heaviest weight lifted for a given rep count
- reps_at_weight: most reps performed at a given weight (bodyweight = 0)
- set_volume: largest single-set volume (reps x weight)
- session_volume: largest volume for the exercise within one session
- estimated_1rm: best estimated 1RM, ranking efforts across rep counts

Rules:
- A record requires a strict improvement over the prior best of the same
  key. Ties never emit. With no prior best any positive value qualifies.
- Within a session only the best candidate per key is emitted; the first
  set in performance order wins a tie.
- Kinds are independent: one set may set several records at once.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from backend.core.volume import estimated_1rm, set_volume, total_volume
from domain.models import (
    RECORD_KIND_ORDER,
    PerformedSet,
    PersonalRecord,
    PriorBests,
    RecordKind,
    Session,
    record_key,
)
from domain.models.records import RecordKey

logger = logging.getLogger(__name__)


@dataclass
class RecordCandidate:
    """Best value of one record key within a session."""

    exercise_key: str
    kind: RecordKind
    qualifier: Optional[float]
    value: float
    set_id: Optional[str] = None


@dataclass
class BestComparison:
    """A session's best value for a key compared to the prior best."""

    exercise_key: str
    exercise_name: str
    kind: RecordKind
    qualifier: Optional[float]
    value: float
    previous_best: Optional[float]
    improvement: Optional[float]
    improvement_percent: Optional[float]
    is_record: bool


def _set_candidates(
    exercise_key: str, performed: PerformedSet, formula: str
) -> List[RecordCandidate]:
    """Candidate values produced by one completed set."""
    candidates: List[RecordCandidate] = []
    reps = performed.actual_reps
    if reps is None or reps <= 0:
        return candidates

    weight = performed.actual_weight
    if weight is not None:
        candidates.append(
            RecordCandidate(exercise_key, RecordKind.WEIGHT_AT_REPS, reps, weight, performed.set_id)
        )
    candidates.append(
        RecordCandidate(
            exercise_key, RecordKind.REPS_AT_WEIGHT, weight or 0.0, reps, performed.set_id
        )
    )

    volume = set_volume(performed)
    if volume > 0:
        candidates.append(
            RecordCandidate(exercise_key, RecordKind.SET_VOLUME, None, volume, performed.set_id)
        )

    one_rm = estimated_1rm(performed, formula)
    if one_rm is not None:
        candidates.append(
            RecordCandidate(exercise_key, RecordKind.ESTIMATED_1RM, None, one_rm, performed.set_id)
        )
    return candidates


def _group_by_exercise(session: Session) -> Dict[str, List[PerformedSet]]:
    """Completed sets per exercise key, slots sharing a key merged in order."""
    grouped: Dict[str, List[PerformedSet]] = {}
    for exercise_perf in session.performance.values():
        sets = grouped.setdefault(exercise_perf.exercise_key, [])
        sets.extend(exercise_perf.completed_sets)
    return grouped


def session_bests(
    session: Session, formula: str = "brzycki"
) -> Dict[str, Dict[RecordKey, RecordCandidate]]:
    """
    Best-of-session candidate per record key, grouped by exercise key.

    Exercise keys appear in first-performance order.
    """
    bests: Dict[str, Dict[RecordKey, RecordCandidate]] = {}
    for exercise_key, sets in _group_by_exercise(session).items():
        per_key: Dict[RecordKey, RecordCandidate] = {}
        for performed in sets:
            for candidate in _set_candidates(exercise_key, performed, formula):
                key = record_key(exercise_key, candidate.kind, candidate.qualifier)
                current = per_key.get(key)
                if current is None or candidate.value > current.value:
                    per_key[key] = candidate

        # Evaluated once per exercise from the merged session total
        exercise_volume = total_volume(sets)
        if exercise_volume > 0:
            candidate = RecordCandidate(exercise_key, RecordKind.SESSION_VOLUME, None, exercise_volume)
            per_key[record_key(exercise_key, RecordKind.SESSION_VOLUME)] = candidate

        bests[exercise_key] = per_key
    return bests


def _sort_key(candidate: RecordCandidate) -> Tuple[int, float]:
    qualifier = candidate.qualifier if candidate.qualifier is not None else 0.0
    return RECORD_KIND_ORDER.index(candidate.kind), qualifier


def _is_improvement(value: float, previous_best: Optional[float]) -> bool:
    if previous_best is None:
        return value > 0
    return value > previous_best


def _exercise_names(session: Session) -> Dict[str, str]:
    names: Dict[str, str] = {}
    for exercise_id, exercise_perf in session.performance.items():
        names.setdefault(exercise_perf.exercise_key, session.exercise_name(exercise_id))
    return names


def detect_records(
    user_id: str,
    session: Session,
    prior_bests: PriorBests,
    formula: str = "brzycki",
) -> List[PersonalRecord]:
    """
    Detect personal records newly set by a completed session.

    Args:
        user_id: Owner of the session and the prior bests
        session: Validated, completed session
        prior_bests: User's best values before this session
        formula: 1RM estimation formula ("brzycki" or "epley")

    Returns:
        New records ordered by exercise (first appearance), kind and
        qualifier. Possibly empty.

    Raises:
        ValueError: If the session has no id or completion time
    """
    if session.id is None or session.completed_at is None:
        raise ValueError("Records can only be detected for a saved, completed session")

    unit = session.weight_unit
    names = _exercise_names(session)
    records: List[PersonalRecord] = []

    for exercise_key, per_key in session_bests(session, formula).items():
        for candidate in sorted(per_key.values(), key=_sort_key):
            previous = prior_bests.get_in(unit, exercise_key, candidate.kind, candidate.qualifier)
            if not _is_improvement(candidate.value, previous):
                continue
            records.append(
                PersonalRecord(
                    user_id=user_id,
                    exercise_key=exercise_key,
                    exercise_name=names.get(exercise_key, exercise_key),
                    kind=candidate.kind,
                    qualifier=candidate.qualifier,
                    value=candidate.value,
                    previous_best=previous,
                    unit=unit,
                    session_id=session.id,
                    set_id=candidate.set_id,
                    achieved_at=session.completed_at,
                )
            )

    logger.info(
        "Detected %d personal record(s) for user %s in session %s",
        len(records),
        user_id,
        session.id,
    )
    return records


def compare_to_bests(
    session: Session,
    prior_bests: PriorBests,
    formula: str = "brzycki",
) -> List[BestComparison]:
    """
    Compare every session-best value to the prior best for display.

    Unlike detect_records, keys that did not improve are included too.
    improvement_percent is None when there is no positive prior best.
    """
    unit = session.weight_unit
    names = _exercise_names(session)
    comparisons: List[BestComparison] = []

    for exercise_key, per_key in session_bests(session, formula).items():
        for candidate in sorted(per_key.values(), key=_sort_key):
            previous = prior_bests.get_in(unit, exercise_key, candidate.kind, candidate.qualifier)
            improvement = None
            percent = None
            if previous is not None:
                improvement = round(candidate.value - previous, 2)
                if previous > 0:
                    percent = round((candidate.value - previous) / previous * 100, 1)
            comparisons.append(
                BestComparison(
                    exercise_key=exercise_key,
                    exercise_name=names.get(exercise_key, exercise_key),
                    kind=candidate.kind,
                    qualifier=candidate.qualifier,
                    value=candidate.value,
                    previous_best=previous,
                    improvement=improvement,
                    improvement_percent=percent,
                    is_record=_is_improvement(candidate.value, previous),
                )
            )
    return comparisons
