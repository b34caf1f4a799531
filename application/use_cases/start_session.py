"""
StartSession Use Case.

Creates a scheduled session from a live template. The template is copied
into an immutable snapshot, so later edits to the template never reach the
session.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from application.exceptions import NotFoundError
from application.ports import SessionRepository, TemplateRepository
from domain.models import EnvironmentContext, Session, TemplateSnapshot

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class StartSessionResult:
    """Result of the StartSession use case execution."""

    session: Session

    @property
    def session_id(self) -> Optional[str]:
        return self.session.id


class StartSessionUseCase:
    """
    Use case for scheduling a session against a template.

    Usage:
        >>> use_case = StartSessionUseCase(template_repo, session_repo)
        >>> result = use_case.execute(user_id="user-1", template_id="tpl-1")
        >>> result.session.template_snapshot.name
        'Push Day'
    """

    def __init__(
        self,
        template_repo: TemplateRepository,
        session_repo: SessionRepository,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._template_repo = template_repo
        self._session_repo = session_repo
        self._clock = clock

    def execute(
        self,
        user_id: str,
        template_id: str,
        *,
        scheduled_at: Optional[datetime] = None,
        started_at: Optional[datetime] = None,
        environment: Optional[EnvironmentContext] = None,
    ) -> StartSessionResult:
        """
        Snapshot a template into a new scheduled session.

        Args:
            user_id: Owner of the session
            template_id: Live template to snapshot
            scheduled_at: Planned time (defaults to now)
            started_at: Actual start time, if the user starts right away
            environment: Optional training conditions

        Returns:
            StartSessionResult with the stored session

        Raises:
            NotFoundError: If the template does not exist for this user
        """
        template = self._template_repo.get_template(user_id, template_id)
        if template is None:
            raise NotFoundError("Template", template_id)

        snapshot = TemplateSnapshot.capture({**template, "template_id": template_id})
        session = Session(
            user_id=user_id,
            template_id=template_id,
            template_snapshot=snapshot,
            scheduled_at=scheduled_at or self._clock(),
            started_at=started_at,
            environment=environment,
        )
        stored = self._session_repo.create_scheduled(session)
        logger.info(
            "Scheduled session %s for user %s from template %s (%d planned sets)",
            stored.id,
            user_id,
            template_id,
            snapshot.planned_set_count,
        )
        return StartSessionResult(session=stored)
