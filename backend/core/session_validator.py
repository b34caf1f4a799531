"""
Session validator for ensuring a session is internally consistent before commit.

Validates a candidate session against:
- Lifecycle shape (completed sessions carry a completion time and performance)
- Set references (planned SetSpec or explicitly ad hoc)
- Completed/skipped exclusivity
- Pending sets in a completed session
- Numeric ranges (finite non-negative values, RPE within 1-10)
- Client-supplied metrics against a fresh recomputation

Checks run in that order and the first failure wins. A rejection never
carries a partially accepted session.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Optional

from application.exceptions import SessionValidationError
from backend.core.metrics_calculator import compute_metrics
from domain.models import PerformedSet, Session, SessionMetrics, SetStatus

logger = logging.getLogger(__name__)

RPE_MIN = 1.0
RPE_MAX = 10.0
VOLUME_TOLERANCE = 1e-6

# Fields that must never be negative, with the label used in error messages
NON_NEGATIVE_FIELDS = (
    ("actual_reps", "reps"),
    ("actual_weight", "weight"),
    ("actual_duration", "duration"),
    ("actual_distance", "distance"),
    ("rest_time", "rest time"),
)

# Metric counters compared exactly against the recomputation
EXACT_METRIC_FIELDS = (
    "total_sets",
    "total_exercises",
    "completed_sets",
    "skipped_sets",
)


@dataclass
class SessionValidationResult:
    """Result of session validation."""

    is_valid: bool
    error: Optional[SessionValidationError] = None

    @property
    def reason(self) -> Optional[str]:
        return self.error.reason if self.error else None

    @property
    def offending_set_id(self) -> Optional[str]:
        return self.error.offending_set_id if self.error else None

    def raise_for_error(self) -> None:
        """Raise the captured SessionValidationError, if any."""
        if self.error is not None:
            raise self.error


class SessionValidator:
    """
    Validates candidate sessions.

    Checks:
    0. Lifecycle - completed/scheduled shape matches the timestamps
    a. References - every set targets a SetSpec of its exercise or is ad hoc
    b. Exclusivity - no set is both completed and skipped
    c. Pending - no pending set in a completed session
    d. Ranges - numeric fields are finite and non-negative, RPE within [1, 10]
    e. Metrics - client-supplied metrics match a recomputation
    """

    def __init__(self):
        self._checks: List[Callable[[Session], Optional[SessionValidationError]]] = [
            self._validate_lifecycle,
            self._validate_references,
            self._validate_exclusivity,
            self._validate_no_pending,
            self._validate_ranges,
            self._validate_metrics,
        ]

    def validate(self, session: Session) -> SessionValidationResult:
        """
        Validate a candidate session.

        Args:
            session: Session to validate

        Returns:
            SessionValidationResult carrying the first failure, if any

        Raises:
            ComputationInvariantViolation: If recomputing submitted metrics
                yields an impossible value
        """
        for check in self._checks:
            error = check(session)
            if error is not None:
                logger.info(
                    "Session %s rejected (%s): %s",
                    session.id,
                    error.check,
                    error.reason,
                )
                return SessionValidationResult(is_valid=False, error=error)
        return SessionValidationResult(is_valid=True)

    def _validate_lifecycle(self, session: Session) -> Optional[SessionValidationError]:
        if session.is_completed and not session.performance:
            return SessionValidationError(
                "Completed session has no performance data", check="lifecycle"
            )
        if not session.is_completed and session.performance:
            return SessionValidationError(
                "Scheduled session must not carry performance data", check="lifecycle"
            )
        return None

    def _validate_references(self, session: Session) -> Optional[SessionValidationError]:
        for exercise_id, performed in session.iter_sets():
            if performed.is_ad_hoc:
                continue
            spec = session.template_snapshot.get_exercise(exercise_id)
            if spec is None:
                return SessionValidationError(
                    f"Set '{performed.set_id}' belongs to exercise '{exercise_id}' "
                    "which is not in the template and is not marked ad hoc",
                    performed.set_id,
                    exercise_id=exercise_id,
                    check="reference",
                )
            if performed.set_id not in spec.set_ids:
                return SessionValidationError(
                    f"Set '{performed.set_id}' does not match a planned set of "
                    f"'{spec.name}' and is not marked ad hoc",
                    performed.set_id,
                    exercise_id=exercise_id,
                    check="reference",
                )
        return None

    def _validate_exclusivity(self, session: Session) -> Optional[SessionValidationError]:
        for exercise_id, performed in session.iter_sets():
            if performed.status == SetStatus.CONFLICTING:
                return SessionValidationError(
                    f"Set '{performed.set_id}' is both completed and skipped",
                    performed.set_id,
                    exercise_id=exercise_id,
                    check="exclusivity",
                )
        return None

    def _validate_no_pending(self, session: Session) -> Optional[SessionValidationError]:
        if not session.is_completed:
            return None
        for exercise_id, performed in session.iter_sets():
            if performed.is_pending:
                return SessionValidationError(
                    f"Set '{performed.set_id}' is neither completed nor skipped "
                    "in a completed session",
                    performed.set_id,
                    exercise_id=exercise_id,
                    check="pending",
                )
        return None

    def _validate_ranges(self, session: Session) -> Optional[SessionValidationError]:
        for exercise_id, performed in session.iter_sets():
            message = _range_violation(performed)
            if message:
                return SessionValidationError(
                    f"Set '{performed.set_id}': {message}",
                    performed.set_id,
                    exercise_id=exercise_id,
                    check="range",
                )
        return None

    def _validate_metrics(self, session: Session) -> Optional[SessionValidationError]:
        claimed = session.metrics
        if claimed is None:
            return None

        # ComputationInvariantViolation propagates to the caller
        expected = compute_metrics(session.template_snapshot, session.performance)

        mismatch = _metrics_mismatch(claimed, expected)
        if mismatch:
            return SessionValidationError(
                f"Submitted metrics do not match recomputation: {mismatch}",
                check="metrics",
            )
        return None


def _range_violation(performed: PerformedSet) -> Optional[str]:
    for attr, label in NON_NEGATIVE_FIELDS:
        value = getattr(performed, attr)
        if value is None:
            continue
        if not math.isfinite(value):
            return f"{label} must be a finite number (got {value})"
        if value < 0:
            return f"{label} must not be negative (got {value})"
    rpe = performed.actual_rpe
    if rpe is not None and not RPE_MIN <= rpe <= RPE_MAX:
        return f"RPE must be between {RPE_MIN:g} and {RPE_MAX:g} (got {rpe})"
    return None


def _metrics_mismatch(claimed: SessionMetrics, expected: SessionMetrics) -> Optional[str]:
    if not math.isclose(claimed.total_volume, expected.total_volume, abs_tol=VOLUME_TOLERANCE):
        return f"total_volume {claimed.total_volume} != {expected.total_volume}"
    for name in EXACT_METRIC_FIELDS:
        got = getattr(claimed, name)
        want = getattr(expected, name)
        if got != want:
            return f"{name} {got} != {want}"
    return None


def validate_session(session: Session) -> SessionValidationResult:
    """Validate a session with the default validator."""
    return SessionValidator().validate(session)
