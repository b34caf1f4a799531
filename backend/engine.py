"""
Workout performance engine.

Library entry points invoked by collaborators (use cases, transports):
- compute_metrics: template snapshot + performance -> SessionMetrics
- validate_session: accept/reject a candidate session
- detect_records: new personal records for a completed session
- aggregate: one of the analytics views

The 1RM formula and analytics lookbacks default to the configured settings.

Usage:
    from backend.engine import WorkoutEngine

    engine = WorkoutEngine()
    metrics = engine.compute_metrics(snapshot, performance)
    engine.validate_session(session).raise_for_error()
    records = engine.detect_records("user-1", session, prior_bests)
"""

import logging
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional

from backend.core import analytics_aggregator, metrics_calculator, record_detector
from backend.core.record_detector import BestComparison
from backend.core.session_validator import SessionValidationResult, SessionValidator
from backend.settings import Settings, get_settings
from domain.models import (
    AnalyticsReport,
    AnalyticsWindow,
    ExercisePerformance,
    PersonalRecord,
    PriorBests,
    Session,
    SessionMetrics,
    TemplateSnapshot,
    TemplateSummary,
)

logger = logging.getLogger(__name__)


class WorkoutEngine:
    """Pure computations of the engine bound to one configuration."""

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()
        self._validator = SessionValidator()

    @property
    def settings(self) -> Settings:
        return self._settings

    def compute_metrics(
        self,
        template: TemplateSnapshot,
        performance: Mapping[str, ExercisePerformance],
    ) -> SessionMetrics:
        return metrics_calculator.compute_metrics(template, performance)

    def validate_session(self, session: Session) -> SessionValidationResult:
        return self._validator.validate(session)

    def detect_records(
        self,
        user_id: str,
        session: Session,
        prior_bests: PriorBests,
    ) -> List[PersonalRecord]:
        return record_detector.detect_records(
            user_id, session, prior_bests, formula=self._settings.one_rm_formula
        )

    def compare_to_bests(self, session: Session, prior_bests: PriorBests) -> List[BestComparison]:
        return record_detector.compare_to_bests(
            session, prior_bests, formula=self._settings.one_rm_formula
        )

    def aggregate(
        self,
        user_id: str,
        view: Any,
        *,
        now: datetime,
        sessions: Iterable[Session] = (),
        records: Iterable[PersonalRecord] = (),
        templates: Iterable[TemplateSummary] = (),
        window: Optional[AnalyticsWindow] = None,
        exercise_key: Optional[str] = None,
        muscle_group: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> AnalyticsReport:
        if limit is None:
            limit = self._settings.exercise_frequency_limit
        return analytics_aggregator.aggregate(
            user_id,
            view,
            now=now,
            sessions=sessions,
            records=records,
            templates=templates,
            window=window,
            exercise_key=exercise_key,
            muscle_group=muscle_group,
            limit=limit,
            lookback_days=self._settings.analytics_lookback_days,
        )
