"""
Personal Record Repository Interface (Port).

Records are append-only: they are inserted by the session commit and only
read through this interface.
"""
from typing import Iterable, List, Optional, Protocol

from domain.models import PersonalRecord, PriorBests, WeightUnit


class PersonalRecordRepository(Protocol):
    """Abstract interface for reading a user's personal record log."""

    def get_prior_bests(
        self,
        user_id: str,
        exercise_keys: Iterable[str],
        unit: WeightUnit = "kg",
    ) -> PriorBests:
        """
        Get the user's current best per (exercise, kind, qualifier).

        Args:
            user_id: User ID
            exercise_keys: Exercises to load bests for
            unit: Weight unit the bests are expressed in

        Returns:
            PriorBests for the requested exercises (empty if none)
        """
        ...

    def list_records(
        self,
        user_id: str,
        *,
        exercise_key: Optional[str] = None,
    ) -> List[PersonalRecord]:
        """
        List a user's record log.

        Args:
            user_id: User ID
            exercise_key: Optional exercise filter

        Returns:
            Records in insertion order
        """
        ...
