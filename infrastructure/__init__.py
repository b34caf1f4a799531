"""
Infrastructure Layer for the workout performance engine.

This package contains concrete implementations of repository interfaces:
- db/: Supabase database implementations
"""

# Re-export database repositories for convenient access
from infrastructure.db import (
    get_supabase_client,
    SupabaseSessionRepository,
    SupabasePersonalRecordRepository,
    SupabaseTemplateRepository,
)

__all__ = [
    "get_supabase_client",
    "SupabaseSessionRepository",
    "SupabasePersonalRecordRepository",
    "SupabaseTemplateRepository",
]
