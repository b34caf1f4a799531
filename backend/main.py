"""
Service factory for the workout performance engine.

This module wires settings, observability, the Supabase adapters and the
use cases together. The factory pattern allows for:
- Easy testing with custom settings and an injected client
- Multiple service containers with different configurations

Usage:
    from backend.main import create_services
    from backend.settings import Settings

    # Default services (uses get_settings() and get_supabase_client())
    services = create_services()

    # Test services with custom settings and a mock client
    test_settings = Settings(environment="test", _env_file=None)
    services = create_services(settings=test_settings, client=mock_client)
"""

import logging
from dataclasses import dataclass
from typing import Optional

from supabase import Client

from application.use_cases import (
    CompleteSessionUseCase,
    GetAnalyticsUseCase,
    StartSessionUseCase,
    UserLockRegistry,
)
from backend.engine import WorkoutEngine
from backend.observability import configure_logging, init_sentry
from backend.settings import Settings, get_settings
from infrastructure.db import (
    SupabasePersonalRecordRepository,
    SupabaseSessionRepository,
    SupabaseTemplateRepository,
    get_supabase_client,
)

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Use cases bound to one configuration and one store."""

    settings: Settings
    engine: WorkoutEngine
    start_session: StartSessionUseCase
    complete_session: CompleteSessionUseCase
    get_analytics: GetAnalyticsUseCase


def create_services(
    settings: Optional[Settings] = None,
    client: Optional[Client] = None,
) -> Services:
    """
    Create the engine's use cases backed by Supabase.

    Args:
        settings: Optional Settings instance. If not provided, uses get_settings()
                  which loads from environment variables.
        client: Optional Supabase client. If not provided, uses
                get_supabase_client().

    Returns:
        Services container

    Raises:
        RuntimeError: If Supabase is not configured and no client is given
    """
    if settings is None:
        settings = get_settings()

    configure_logging(settings)
    init_sentry(settings)

    if client is None:
        client = get_supabase_client()
    if client is None:
        raise RuntimeError("Supabase credentials not configured")

    session_repo = SupabaseSessionRepository(client)
    record_repo = SupabasePersonalRecordRepository(client)
    template_repo = SupabaseTemplateRepository(client)
    engine = WorkoutEngine(settings)

    services = Services(
        settings=settings,
        engine=engine,
        start_session=StartSessionUseCase(template_repo, session_repo),
        complete_session=CompleteSessionUseCase(
            session_repo, record_repo, engine, locks=UserLockRegistry()
        ),
        get_analytics=GetAnalyticsUseCase(session_repo, record_repo, template_repo, engine),
    )
    logger.info(
        "Workout engine services created (environment=%s, 1RM formula=%s)",
        settings.environment,
        settings.one_rm_formula,
    )
    return services
