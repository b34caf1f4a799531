"""
Session Repository Interface (Port).

This module defines the abstract interface for workout session persistence.
The completion commit is a single call so that implementations can make the
session write, the record inserts and the stats update one atomic unit.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Protocol

from domain.models import PersonalRecord, Session, StatsDelta


@dataclass
class SessionCommit:
    """Everything written when a session is completed."""
    session: Session
    records: List[PersonalRecord] = field(default_factory=list)
    stats_delta: Optional[StatsDelta] = None


class SessionRepository(Protocol):
    """
    Abstract interface for session persistence.

    Sessions are returned as typed `Session` projections of the stored
    documents, never as raw JSON.
    """

    def get(self, session_id: str) -> Optional[Session]:
        """
        Get a session by ID.

        Args:
            session_id: Session ID

        Returns:
            The session, or None if not found
        """
        ...

    def create_scheduled(self, session: Session) -> Session:
        """
        Persist a new scheduled session.

        Args:
            session: Scheduled session (id may be None)

        Returns:
            The stored session with its assigned ID
        """
        ...

    def list_completed(
        self,
        user_id: str,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Session]:
        """
        List a user's completed sessions, oldest first.

        Args:
            user_id: User ID
            start: Only sessions completed at or after this time
            end: Only sessions completed at or before this time

        Returns:
            Completed sessions in the window
        """
        ...

    def commit_completion(self, commit: SessionCommit) -> Session:
        """
        Atomically store a completed session, its new records and the
        user's stats delta.

        Either everything is written or nothing is.

        Args:
            commit: Completed session with its records and stats delta

        Returns:
            The stored completed session

        Raises:
            NotFoundError: If the session does not exist
            ConflictError: If the session is already completed
            StaleBestsError: If a record's previous_best no longer matches
                the stored best for its key
        """
        ...
