"""
Supabase client provider.
"""
import logging
from functools import lru_cache
from typing import Optional

from supabase import Client, create_client

from backend.settings import get_settings

logger = logging.getLogger(__name__)


@lru_cache
def get_supabase_client() -> Optional[Client]:
    """
    Get Supabase client instance (cached).

    Creates a Supabase client using credentials from settings.
    Returns None if credentials are not configured.

    Returns:
        Client: Supabase client instance, or None if not configured
    """
    settings = get_settings()

    if not settings.supabase_url or not settings.supabase_key:
        logger.warning("Supabase credentials not configured. Session storage is disabled.")
        return None

    return create_client(settings.supabase_url, settings.supabase_key)
