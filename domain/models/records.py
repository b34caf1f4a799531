"""
Personal record value objects.

Records are append-only facts derived from the committed session log. A
record is only ever superseded by a later record of strictly greater value
for the same (user, exercise, kind, qualifier) key.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from domain.models.load import WeightUnit, convert_weight
from domain.models.timestamps import ensure_utc


class RecordKind(str, Enum):
    """Dimension a personal record is measured in."""

    WEIGHT_AT_REPS = "weight_at_reps"  # qualifier: rep count
    REPS_AT_WEIGHT = "reps_at_weight"  # qualifier: weight
    SET_VOLUME = "set_volume"
    SESSION_VOLUME = "session_volume"
    ESTIMATED_1RM = "estimated_1rm"

    @property
    def is_volume(self) -> bool:
        return self in (RecordKind.SET_VOLUME, RecordKind.SESSION_VOLUME)

    @property
    def is_weight(self) -> bool:
        """True when the record value scales with the weight unit."""
        return self != RecordKind.REPS_AT_WEIGHT


# Detection and listing order for kinds of the same exercise
RECORD_KIND_ORDER: Tuple[RecordKind, ...] = (
    RecordKind.WEIGHT_AT_REPS,
    RecordKind.REPS_AT_WEIGHT,
    RecordKind.SET_VOLUME,
    RecordKind.SESSION_VOLUME,
    RecordKind.ESTIMATED_1RM,
)

RecordKey = Tuple[str, RecordKind, Optional[float]]


def normalize_qualifier(kind: RecordKind, qualifier: Optional[float]) -> Optional[float]:
    """
    Canonical qualifier used in record keys.

    Rep counts are whole numbers and weights are rounded to 2 decimals so
    that 82.5 and 82.50000001 land on the same key.
    """
    if qualifier is None:
        return None
    if kind == RecordKind.WEIGHT_AT_REPS:
        return float(int(qualifier))
    return round(float(qualifier), 2)


def record_key(
    exercise_key: str, kind: RecordKind, qualifier: Optional[float] = None
) -> RecordKey:
    return (exercise_key, kind, normalize_qualifier(kind, qualifier))


class PersonalRecord(BaseModel):
    """
    A new personal record set in a session.

    Examples:
        >>> PersonalRecord(
        ...     user_id="user-1",
        ...     exercise_key="bench_press",
        ...     exercise_name="Bench Press",
        ...     kind=RecordKind.WEIGHT_AT_REPS,
        ...     qualifier=8,
        ...     value=55,
        ...     previous_best=52.5,
        ...     session_id="sess-1",
        ...     achieved_at=datetime(2024, 1, 15, 10, 30),
        ... )
    """

    user_id: str
    exercise_key: str
    exercise_name: str = Field(default="")
    kind: RecordKind
    qualifier: Optional[float] = Field(
        default=None,
        description="Rep count for weight_at_reps, weight for reps_at_weight",
    )
    value: float = Field(..., description="Qualifying value")
    previous_best: Optional[float] = Field(default=None)
    unit: WeightUnit = Field(default="kg")
    session_id: str
    set_id: Optional[str] = Field(default=None, description="Set that produced the value")
    achieved_at: datetime

    @field_validator("achieved_at")
    @classmethod
    def normalize_achieved_at(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @property
    def key(self) -> RecordKey:
        return record_key(self.exercise_key, self.kind, self.qualifier)

    model_config = {"frozen": True}


@dataclass(frozen=True)
class PriorBests:
    """
    Best-ever values per (exercise, kind, qualifier) key, in one weight unit.

    Supplied by the storage layer before record detection. Values never
    decrease: `with_records()` only raises a best.
    """

    unit: WeightUnit = "kg"
    values: Dict[RecordKey, float] = field(default_factory=dict)

    @classmethod
    def from_records(
        cls, records: Iterable[PersonalRecord], unit: WeightUnit = "kg"
    ) -> "PriorBests":
        """Fold a record log into the best value per key."""
        return cls(unit=unit).with_records(records)

    def get(
        self, exercise_key: str, kind: RecordKind, qualifier: Optional[float] = None
    ) -> Optional[float]:
        return self.values.get(record_key(exercise_key, kind, qualifier))

    def get_in(
        self,
        unit: WeightUnit,
        exercise_key: str,
        kind: RecordKind,
        qualifier: Optional[float] = None,
    ) -> Optional[float]:
        """
        Prior best expressed in `unit`.

        For reps_at_weight the qualifier is a weight in `unit` and is
        converted into this object's unit before the lookup.
        """
        if kind == RecordKind.REPS_AT_WEIGHT and qualifier is not None:
            qualifier = convert_weight(qualifier, unit, self.unit)
        value = self.get(exercise_key, kind, qualifier)
        if value is None or not kind.is_weight:
            return value
        return convert_weight(value, self.unit, unit)

    def with_records(self, records: Iterable[PersonalRecord]) -> "PriorBests":
        """Return a copy advanced by `records`, converted into this unit."""
        values = dict(self.values)
        for record in records:
            value = record.value
            qualifier = record.qualifier
            if record.kind.is_weight:
                value = convert_weight(value, record.unit, self.unit)
            elif qualifier is not None:
                qualifier = convert_weight(qualifier, record.unit, self.unit)
            key = record_key(record.exercise_key, record.kind, qualifier)
            if key not in values or value > values[key]:
                values[key] = value
        return PriorBests(unit=self.unit, values=values)

    def exercise_keys(self) -> List[str]:
        return sorted({key[0] for key in self.values})
