"""
Supabase Personal Record Repository Implementation.

Reads the append-only personal_records table. Rows are inserted only by the
commit_workout_session procedure (see SupabaseSessionRepository).
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from supabase import Client

from domain.models import PersonalRecord, PriorBests, WeightUnit

logger = logging.getLogger(__name__)

TABLE = "personal_records"


def row_to_record(row: Dict[str, Any]) -> PersonalRecord:
    """Convert a personal_records row to a PersonalRecord."""
    return PersonalRecord.model_validate(
        {
            "user_id": row["user_id"],
            "exercise_key": row["exercise_key"],
            "exercise_name": row.get("exercise_name") or "",
            "kind": row["kind"],
            "qualifier": row.get("qualifier"),
            "value": row["value"],
            "previous_best": row.get("previous_best"),
            "unit": row.get("unit") or "kg",
            "session_id": row["session_id"],
            "set_id": row.get("set_id"),
            "achieved_at": row["achieved_at"],
        }
    )


class SupabasePersonalRecordRepository:
    """
    Supabase implementation of PersonalRecordRepository.

    The client is injected via constructor for testability.
    """

    def __init__(self, client: Client):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected)
        """
        self._client = client

    def get_prior_bests(
        self,
        user_id: str,
        exercise_keys: Iterable[str],
        unit: WeightUnit = "kg",
    ) -> PriorBests:
        """Fold the user's records for the given exercises into best values."""
        keys = sorted(set(exercise_keys))
        if not keys:
            return PriorBests(unit=unit)

        result = (
            self._client.table(TABLE)
            .select("*")
            .eq("user_id", user_id)
            .in_("exercise_key", keys)
            .execute()
        )
        records = [row_to_record(row) for row in result.data or []]
        logger.debug(f"Loaded {len(records)} record(s) for {len(keys)} exercise(s)")
        return PriorBests.from_records(records, unit)

    def list_records(
        self,
        user_id: str,
        *,
        exercise_key: Optional[str] = None,
    ) -> List[PersonalRecord]:
        """List a user's record log, oldest first."""
        query = self._client.table(TABLE).select("*").eq("user_id", user_id)
        if exercise_key:
            query = query.eq("exercise_key", exercise_key)
        result = query.order("achieved_at").execute()
        return [row_to_record(row) for row in result.data or []]
