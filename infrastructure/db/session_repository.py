"""
Supabase Session Repository Implementation.

This module implements the SessionRepository protocol using Supabase.
Sessions live in the workout_sessions table; the snapshot, performance,
metrics and environment are stored in the performance_data JSONB column and
projected into typed Session models on read.

The completion commit calls the commit_workout_session stored procedure so
that the session update, the personal record inserts and the user stats
upsert happen in a single transaction. The procedure re-checks each
record's previous_best against the stored best under a row lock.
"""
import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from supabase import Client

from application.exceptions import (
    ConflictError,
    NotFoundError,
    SessionCommitError,
    StaleBestsError,
)
from application.ports import SessionCommit
from domain.models import Session, SessionStatus

logger = logging.getLogger(__name__)

TABLE = "workout_sessions"
COMMIT_RPC = "commit_workout_session"

# Error markers raised by the commit procedure
ERR_NOT_FOUND = "session_not_found"
ERR_ALREADY_COMPLETED = "session_already_completed"
ERR_STALE_BESTS = "stale_personal_best"

# Session fields kept inside the performance_data document
DOCUMENT_FIELDS = ("template_snapshot", "performance", "metrics", "environment")


def session_to_row(session: Session) -> Dict[str, Any]:
    """Convert a Session to a workout_sessions row."""
    data = session.model_dump(mode="json")
    row = {
        "user_id": session.user_id,
        "template_id": session.template_id,
        "status": session.status.value,
        "scheduled_at": data["scheduled_at"],
        "started_at": data["started_at"],
        "completed_at": data["completed_at"],
        "duration_seconds": session.duration_seconds,
        "notes": session.notes,
        "performance_data": {name: data[name] for name in DOCUMENT_FIELDS},
    }
    if session.id is not None:
        row["id"] = session.id
    return row


def row_to_session(row: Dict[str, Any]) -> Session:
    """Project a workout_sessions row into a typed Session."""
    document = row.get("performance_data") or {}
    if isinstance(document, str):
        document = json.loads(document)
    return Session.model_validate(
        {
            "id": row.get("id"),
            "user_id": row["user_id"],
            "template_id": row.get("template_id"),
            "scheduled_at": row.get("scheduled_at"),
            "started_at": row.get("started_at"),
            "completed_at": row.get("completed_at"),
            "duration_seconds": row.get("duration_seconds"),
            "notes": row.get("notes"),
            **{name: document.get(name) for name in DOCUMENT_FIELDS if document.get(name) is not None},
        }
    )


class SupabaseSessionRepository:
    """
    Supabase implementation of SessionRepository.

    The client is injected via constructor for testability.
    """

    def __init__(self, client: Client):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected)
        """
        self._client = client

    def get(self, session_id: str) -> Optional[Session]:
        """Get a session by ID."""
        result = (
            self._client.table(TABLE)
            .select("*")
            .eq("id", session_id)
            .limit(1)
            .execute()
        )
        if not result.data:
            return None
        return row_to_session(result.data[0])

    def create_scheduled(self, session: Session) -> Session:
        """Persist a new scheduled session and return it with its ID."""
        result = self._client.table(TABLE).insert(session_to_row(session)).execute()
        if not result.data:
            raise SessionCommitError("Insert returned no data")
        return row_to_session(result.data[0])

    def list_completed(
        self,
        user_id: str,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Session]:
        """List a user's completed sessions in a window, oldest first."""
        query = (
            self._client.table(TABLE)
            .select("*")
            .eq("user_id", user_id)
            .eq("status", SessionStatus.COMPLETED.value)
        )
        if start is not None:
            query = query.gte("completed_at", start.isoformat())
        if end is not None:
            query = query.lte("completed_at", end.isoformat())
        result = query.order("completed_at").execute()

        sessions = []
        for row in result.data or []:
            try:
                sessions.append(row_to_session(row))
            except ValueError as e:
                # Malformed legacy documents are skipped
                logger.warning(f"Skipping unreadable session {row.get('id')}: {e}")
        return sessions

    def commit_completion(self, commit: SessionCommit) -> Session:
        """
        Atomically store a completed session with its records and stats delta.

        Raises:
            NotFoundError: If the session does not exist
            ConflictError: If the session is already completed
            StaleBestsError: If prior bests changed since detection
            SessionCommitError: If the RPC call fails otherwise
        """
        session = commit.session
        params = {
            "p_session_id": session.id,
            "p_session": json.dumps(session_to_row(session)),
            "p_records": json.dumps([r.model_dump(mode="json") for r in commit.records]),
            "p_stats": json.dumps(
                commit.stats_delta.model_dump(mode="json") if commit.stats_delta else None
            ),
        }
        try:
            response = self._client.rpc(COMMIT_RPC, params).execute()
        except Exception as e:
            raise _map_commit_error(e, session.id) from e

        if not response.data:
            raise SessionCommitError("RPC returned no data")
        row = response.data[0] if isinstance(response.data, list) else response.data
        return row_to_session(row)


def _map_commit_error(error: Exception, session_id: Optional[str]) -> Exception:
    message = str(getattr(error, "message", None) or error)
    if ERR_STALE_BESTS in message:
        logger.info(f"Commit of session {session_id} lost a race on prior bests")
        return StaleBestsError(f"Prior bests changed while committing session {session_id}")
    if ERR_ALREADY_COMPLETED in message:
        return ConflictError(f"Session {session_id} is already completed")
    if ERR_NOT_FOUND in message:
        return NotFoundError("Session", session_id or "")
    logger.exception(f"Atomic session commit failed: {error}")
    return SessionCommitError(f"Atomic session commit failed: {error}")
