"""
Infrastructure Database Layer.

This package provides Supabase-backed implementations of the repository
interfaces defined in application.ports. These implementations are
injected into the use cases for clean separation of concerns and
testability.

Usage:
    from infrastructure.db import (
        get_supabase_client,
        SupabaseSessionRepository,
        SupabasePersonalRecordRepository,
        SupabaseTemplateRepository,
    )

    client = get_supabase_client()

    session_repo = SupabaseSessionRepository(client)
    record_repo = SupabasePersonalRecordRepository(client)
    template_repo = SupabaseTemplateRepository(client)
"""

from infrastructure.db.client import get_supabase_client
from infrastructure.db.session_repository import SupabaseSessionRepository
from infrastructure.db.record_repository import SupabasePersonalRecordRepository
from infrastructure.db.template_repository import SupabaseTemplateRepository

__all__ = [
    "get_supabase_client",

    # Session persistence and atomic completion
    "SupabaseSessionRepository",

    # Personal record log
    "SupabasePersonalRecordRepository",

    # Live templates
    "SupabaseTemplateRepository",
]
