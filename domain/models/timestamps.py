"""
Timestamp normalization.

Every stored or compared moment is timezone-aware UTC. Naive datetimes are
read as UTC so a naive and an aware value can always be ordered.
"""

from datetime import datetime, timezone
from typing import Optional


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Return `value` as an aware UTC datetime; None passes through."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
