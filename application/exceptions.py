"""
Application-layer exceptions.

These exceptions are used across the core engine, use cases and
infrastructure layers:

- SessionValidationError: malformed or inconsistent session. Recoverable,
  reported to the caller, no side effects.
- AnalyticsQueryError: analytics request with missing or invalid parameters.
- NotFoundError: referenced template, session or exercise is absent.
- ConflictError: session already completed, or a concurrent commit won the
  race. The caller should reload state and retry.
- SessionCommitError: the store failed to apply a commit; nothing was written.
- ComputationInvariantViolation: a derived value broke an invariant (e.g.
  negative volume). A programming defect, never silently corrected.
"""

from typing import Optional


class EngineError(Exception):
    """Base class for errors raised by the workout performance engine."""

    pass


class SessionValidationError(EngineError):
    """
    A candidate session failed validation.

    Attributes:
        reason: Human-readable description of the failed check
        offending_set_id: Set that failed the check, when set-specific
        exercise_id: Exercise slot holding the offending set
        check: Short name of the check that failed
    """

    def __init__(
        self,
        reason: str,
        offending_set_id: Optional[str] = None,
        *,
        exercise_id: Optional[str] = None,
        check: Optional[str] = None,
    ):
        super().__init__(reason)
        self.reason = reason
        self.offending_set_id = offending_set_id
        self.exercise_id = exercise_id
        self.check = check

    def to_dict(self) -> dict:
        return {
            "reason": self.reason,
            "offending_set_id": self.offending_set_id,
            "exercise_id": self.exercise_id,
            "check": self.check,
        }


class AnalyticsQueryError(EngineError, ValueError):
    """An analytics query is missing a required parameter or names an unknown view."""

    pass


class NotFoundError(EngineError):
    """A referenced template, session or exercise does not exist."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(f"{resource} not found: {resource_id}")
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(EngineError):
    """The requested state transition conflicts with the stored state."""

    pass


class StaleBestsError(ConflictError):
    """
    Prior bests changed between read and commit.

    Raised by the store when a record's previous_best no longer matches the
    stored best for its key. The commit is retried with fresh bests.
    """

    pass


class ComputationInvariantViolation(EngineError):
    """A computed value violates an engine invariant."""

    pass


class SessionCommitError(EngineError):
    """The store failed to commit a completed session. Nothing was written."""

    pass
