"""
CompleteSession Use Case.

Commits a scheduled session as completed. The commit is one unit per user:

1. Load the session and reject re-completion
2. Validate the candidate session (no side effects on rejection)
3. Recompute metrics server-side
4. Read prior bests and detect new personal records
5. Persist session, records and stats delta in one repository call

Commits for the same user are serialized in-process by UserLockRegistry.
Across processes the repository rejects records computed against stale
bests (StaleBestsError); the commit is then retried from step 1 with
exponential backoff.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, Iterator, List, Mapping, Optional

from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from application.exceptions import (
    ComputationInvariantViolation,
    ConflictError,
    NotFoundError,
    StaleBestsError,
)
from application.ports import PersonalRecordRepository, SessionCommit, SessionRepository
from backend.core.metrics_calculator import derive_performance
from backend.engine import WorkoutEngine
from backend.observability import report_exception
from domain.models import (
    EnvironmentContext,
    ExercisePerformance,
    PersonalRecord,
    Session,
    SessionMetrics,
    StatsDelta,
    ensure_utc,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserLockRegistry:
    """One lock per user, created on first use."""

    def __init__(self) -> None:
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def lock_for(self, user_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[user_id] = lock
            return lock

    @contextmanager
    def hold(self, user_id: str) -> Iterator[None]:
        lock = self.lock_for(user_id)
        with lock:
            yield


@dataclass
class CompleteSessionResult:
    """Result of the CompleteSession use case execution."""

    session: Session
    records: List[PersonalRecord] = field(default_factory=list)
    stats_delta: Optional[StatsDelta] = None
    attempts: int = 1

    @property
    def metrics(self) -> Optional[SessionMetrics]:
        return self.session.metrics


def build_stats_delta(session: Session, records: List[PersonalRecord]) -> StatsDelta:
    """Cumulative stats increment for a completed session with computed metrics."""
    metrics = session.metrics or SessionMetrics()
    completed_at = session.completed_at
    exercise_keys = []
    for exercise_perf in session.performance.values():
        if exercise_perf.attempted and exercise_perf.exercise_key not in exercise_keys:
            exercise_keys.append(exercise_perf.exercise_key)

    return StatsDelta(
        user_id=session.user_id,
        volume=metrics.total_volume,
        sets=metrics.total_sets,
        exercises=metrics.total_exercises,
        training_hours=round((session.duration_seconds or 0) / 3600, 4),
        personal_records=len(records),
        last_workout_at=completed_at,
        year=completed_at.year,
        month=completed_at.month,
        exercise_keys=exercise_keys,
    )


class CompleteSessionUseCase:
    """
    Use case for completing a session.

    Dependencies are injected via constructor for testability.

    Usage:
        >>> use_case = CompleteSessionUseCase(session_repo, record_repo, engine)
        >>> result = use_case.execute(
        ...     session_id="sess-1",
        ...     user_id="user-1",
        ...     performance={"exercise-1": ExercisePerformance(...)},
        ... )
        >>> [r.kind for r in result.records]
        [<RecordKind.WEIGHT_AT_REPS: 'weight_at_reps'>]
    """

    def __init__(
        self,
        session_repo: SessionRepository,
        record_repo: PersonalRecordRepository,
        engine: Optional[WorkoutEngine] = None,
        *,
        locks: Optional[UserLockRegistry] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """
        Initialize the use case with required dependencies.

        Args:
            session_repo: Repository for sessions and the atomic commit
            record_repo: Repository for the personal record log
            engine: Engine bound to the application settings
            locks: Per-user lock registry shared by all commits in-process
            clock: Source of the completion time when none is given
        """
        self._session_repo = session_repo
        self._record_repo = record_repo
        self._engine = engine or WorkoutEngine()
        self._locks = locks or UserLockRegistry()
        self._clock = clock

    def execute(
        self,
        session_id: str,
        user_id: str,
        performance: Mapping[str, ExercisePerformance],
        *,
        completed_at: Optional[datetime] = None,
        duration_seconds: Optional[int] = None,
        environment: Optional[EnvironmentContext] = None,
        notes: Optional[str] = None,
        submitted_metrics: Optional[SessionMetrics] = None,
    ) -> CompleteSessionResult:
        """
        Execute the completion workflow.

        Args:
            session_id: Scheduled session to complete
            user_id: Owner of the session
            performance: Exercise slot id -> what was performed
            completed_at: Completion time (defaults to now)
            duration_seconds: Session length; derived from started_at if omitted
            environment: Optional training conditions
            notes: Optional session notes
            submitted_metrics: Client-computed metrics, checked against a
                recomputation and never persisted as-is

        Returns:
            CompleteSessionResult with the stored session, its new records
            and the applied stats delta

        Raises:
            NotFoundError: If the session does not exist for this user
            ConflictError: If the session is already completed, or bests
                kept changing for every attempt (StaleBestsError)
            SessionValidationError: If the session is inconsistent
            ComputationInvariantViolation: If a derived value is invalid
        """
        completed_at = ensure_utc(completed_at or self._clock())
        settings = self._engine.settings

        with self._locks.hold(user_id):
            retrying = Retrying(
                retry=retry_if_exception_type(StaleBestsError),
                stop=stop_after_attempt(settings.commit_max_attempts),
                wait=wait_exponential(
                    multiplier=settings.commit_retry_min_wait_seconds,
                    min=settings.commit_retry_min_wait_seconds,
                    max=settings.commit_retry_max_wait_seconds,
                ),
                before_sleep=before_sleep_log(logger, logging.WARNING),
                reraise=True,
            )
            for attempt in retrying:
                with attempt:
                    result = self._commit_once(
                        session_id,
                        user_id,
                        dict(performance),
                        completed_at=completed_at,
                        duration_seconds=duration_seconds,
                        environment=environment,
                        notes=notes,
                        submitted_metrics=submitted_metrics,
                    )
                    result.attempts = attempt.retry_state.attempt_number

        logger.info(
            "Session %s completed for user %s: volume=%.1f, %d record(s), attempts=%d",
            session_id,
            user_id,
            result.session.metrics.total_volume,
            len(result.records),
            result.attempts,
        )
        return result

    def _commit_once(
        self,
        session_id: str,
        user_id: str,
        performance: Dict[str, ExercisePerformance],
        *,
        completed_at: datetime,
        duration_seconds: Optional[int],
        environment: Optional[EnvironmentContext],
        notes: Optional[str],
        submitted_metrics: Optional[SessionMetrics],
    ) -> CompleteSessionResult:
        session = self._session_repo.get(session_id)
        if session is None or session.user_id != user_id:
            raise NotFoundError("Session", session_id)
        if session.is_completed:
            raise ConflictError(f"Session {session_id} is already completed")

        if duration_seconds is None and session.started_at is not None:
            duration_seconds = max(0, int((completed_at - session.started_at).total_seconds()))

        candidate = session.complete(
            performance,
            completed_at,
            metrics=submitted_metrics,
            environment=environment,
            duration_seconds=duration_seconds,
            notes=notes,
        )
        try:
            self._engine.validate_session(candidate).raise_for_error()
            metrics = self._engine.compute_metrics(candidate.template_snapshot, candidate.performance)
        except ComputationInvariantViolation as e:
            logger.exception(f"Metrics invariant violated for session {session_id}: {e}")
            report_exception(e, user_id=user_id, session_id=session_id)
            raise

        exercise_keys = sorted({p.exercise_key for p in performance.values()})
        prior_bests = self._record_repo.get_prior_bests(
            user_id, exercise_keys, candidate.weight_unit
        )
        records = self._engine.detect_records(user_id, candidate, prior_bests)

        completed = candidate.model_copy(
            update={
                "performance": derive_performance(candidate.performance),
                "metrics": metrics.with_records(records),
            }
        )
        stats_delta = build_stats_delta(completed, records)

        stored = self._session_repo.commit_completion(
            SessionCommit(session=completed, records=records, stats_delta=stats_delta)
        )
        return CompleteSessionResult(session=stored, records=records, stats_delta=stats_delta)
