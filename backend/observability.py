"""
Logging and error reporting setup.

Usage:
    from backend.observability import configure_logging, init_sentry
    from backend.settings import get_settings

    settings = get_settings()
    configure_logging(settings)
    init_sentry(settings)
"""

import logging
from typing import Optional

import sentry_sdk

from backend.settings import Settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: Settings) -> None:
    """Set the root log level and format from settings."""
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    logging.getLogger().setLevel(settings.log_level)


def init_sentry(settings: Settings) -> bool:
    """
    Initialize Sentry SDK if DSN is configured.

    Returns:
        True when Sentry was initialized
    """
    if not settings.sentry_dsn:
        return False
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        traces_sample_rate=0.1,  # 10% of transactions for performance monitoring
        profiles_sample_rate=0.1,
        enable_tracing=True,
    )
    logger.info("Sentry initialized for workout engine")
    return True


def report_exception(exc: BaseException, *, user_id: Optional[str] = None, **context) -> None:
    """
    Report an unexpected exception to Sentry with engine context.

    Does nothing when Sentry is not initialized.
    """
    with sentry_sdk.new_scope() as scope:
        if user_id:
            scope.set_user({"id": user_id})
        for key, value in context.items():
            scope.set_extra(key, value)
        sentry_sdk.capture_exception(exc)
