"""
GetAnalytics Use Case.

Loads the part of a user's log a view needs and reduces it with the
analytics aggregator. Read-only: it takes no locks and tolerates a log that
is slightly behind concurrent commits.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from pydantic import ValidationError

from application.exceptions import AnalyticsQueryError
from application.ports import (
    PersonalRecordRepository,
    SessionRepository,
    TemplateRepository,
)
from backend.core.analytics_aggregator import parse_view
from backend.engine import WorkoutEngine
from domain.models import AnalyticsReport, AnalyticsView, AnalyticsWindow, ensure_utc

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GetAnalyticsUseCase:
    """
    Use case for analytics queries.

    Usage:
        >>> use_case = GetAnalyticsUseCase(session_repo, record_repo, template_repo)
        >>> report = use_case.execute("user-1", "exercise_frequency")
        >>> report.data[0].exercise_name
        'Bench Press'
    """

    def __init__(
        self,
        session_repo: SessionRepository,
        record_repo: PersonalRecordRepository,
        template_repo: TemplateRepository,
        engine: Optional[WorkoutEngine] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._session_repo = session_repo
        self._record_repo = record_repo
        self._template_repo = template_repo
        self._engine = engine or WorkoutEngine()
        self._clock = clock

    def execute(
        self,
        user_id: str,
        view: Any,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        exercise_key: Optional[str] = None,
        muscle_group: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> AnalyticsReport:
        """
        Compute one analytics view.

        Args:
            user_id: User whose log is aggregated
            view: AnalyticsView or its string value
            start: Window start (defaults to the view's lookback)
            end: Window end (defaults to now)
            exercise_key: Exercise for progression, filter for records
            muscle_group: Filter for muscle group volume
            limit: Row limit for exercise frequency

        Returns:
            AnalyticsReport for the view

        Raises:
            AnalyticsQueryError: If the view or window is invalid, or a
                required parameter is missing
        """
        if not user_id:
            raise AnalyticsQueryError("user_id is required")
        view = parse_view(view)
        now = ensure_utc(self._clock())

        try:
            window = AnalyticsWindow(start=start, end=end)
        except ValidationError as e:
            raise AnalyticsQueryError(f"Invalid analytics window: {e}") from e

        sessions = []
        records = []
        templates = []
        if view == AnalyticsView.PERSONAL_RECORDS:
            records = self._record_repo.list_records(user_id, exercise_key=exercise_key)
        elif view == AnalyticsView.TEMPLATE_PERFORMANCE:
            sessions = self._session_repo.list_completed(user_id)
            templates = self._template_repo.list_templates(user_id)
        else:
            lookback = self._engine.settings.analytics_lookback_days.get(view)
            query_start, query_end = window.resolve(now, lookback)
            sessions = self._session_repo.list_completed(
                user_id, start=query_start, end=query_end
            )

        logger.info(
            "Analytics %s for user %s over %d session(s), %d record(s)",
            view.value,
            user_id,
            len(sessions),
            len(records),
        )
        return self._engine.aggregate(
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
        )
