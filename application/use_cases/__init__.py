"""
Application Use Cases for the workout performance engine.

This package contains application-level use cases that orchestrate the
engine and coordinate between ports/adapters.

Architecture follows Clean Architecture / Hexagonal pattern:
- Use cases orchestrate domain objects and repository ports
- Dependencies are injected via constructors for testability
- Use cases return domain models and raise application exceptions

Usage:
    from application.use_cases import (
        StartSessionUseCase,
        CompleteSessionUseCase,
        GetAnalyticsUseCase,
    )

    # Snapshot a template into a scheduled session
    start = StartSessionUseCase(template_repo, session_repo)
    session = start.execute(user_id="user-123", template_id="tpl-1").session

    # Complete it (metrics, records and stats in one commit)
    complete = CompleteSessionUseCase(session_repo, record_repo, engine)
    result = complete.execute(
        session_id=session.id,
        user_id="user-123",
        performance=performance,
    )

    # Query analytics
    analytics = GetAnalyticsUseCase(session_repo, record_repo, template_repo, engine)
    report = analytics.execute("user-123", "workout_frequency")
"""

from application.use_cases.complete_session import (
    CompleteSessionResult,
    CompleteSessionUseCase,
    UserLockRegistry,
    build_stats_delta,
)
from application.use_cases.get_analytics import GetAnalyticsUseCase
from application.use_cases.start_session import StartSessionResult, StartSessionUseCase

__all__ = [
    # StartSession
    "StartSessionUseCase",
    "StartSessionResult",
    # CompleteSession
    "CompleteSessionUseCase",
    "CompleteSessionResult",
    "UserLockRegistry",
    "build_stats_delta",
    # GetAnalytics
    "GetAnalyticsUseCase",
]
