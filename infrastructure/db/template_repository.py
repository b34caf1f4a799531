"""
Supabase implementation of TemplateRepository.

Live templates are stored in the workout_templates table with their
exercises in a JSONB column.
"""

import logging
from typing import Any, Dict, List, Optional

from supabase import Client

from domain.models import TemplateSummary

logger = logging.getLogger(__name__)

TABLE = "workout_templates"


class SupabaseTemplateRepository:
    """
    Supabase implementation of TemplateRepository protocol.

    The client is injected via constructor for testability.
    """

    def __init__(self, client: Client):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected)
        """
        self._client = client

    def get_template(self, user_id: str, template_id: str) -> Optional[Dict[str, Any]]:
        """Get a live template in snapshot shape, or None if not found."""
        result = (
            self._client.table(TABLE)
            .select("*")
            .eq("id", template_id)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not result.data:
            return None

        row = result.data[0]
        return {
            "template_id": row["id"],
            "name": row.get("name") or "",
            "workout_type": row.get("workout_type"),
            "difficulty": row.get("difficulty"),
            "weight_unit": row.get("weight_unit") or "kg",
            "exercises": row.get("exercises") or [],
        }

    def list_templates(self, user_id: str) -> List[TemplateSummary]:
        """List a user's templates ordered by name."""
        result = (
            self._client.table(TABLE)
            .select("id, name, workout_type, difficulty")
            .eq("user_id", user_id)
            .order("name")
            .execute()
        )
        return [
            TemplateSummary(
                template_id=row["id"],
                name=row.get("name") or "",
                workout_type=row.get("workout_type"),
                difficulty=row.get("difficulty"),
            )
            for row in result.data or []
        ]
