"""
Template snapshot value objects.

A TemplateSnapshot is the immutable copy of a workout template taken when a
session starts. Sessions only ever reference their own snapshot, so edits to
the live template never reach in-progress or historical sessions.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Set, Union

from pydantic import BaseModel, Field, model_validator

from domain.models.load import WeightUnit


class SetType(str, Enum):
    """Kind of set, as planned in a template or logged during a session."""

    STANDARD = "standard"
    WARMUP = "warmup"
    DROP = "drop"
    FAILURE = "failure"
    AMRAP = "amrap"
    TIMED = "timed"


class RepRange(BaseModel):
    """Inclusive target rep range, e.g. 8-12."""

    min: int = Field(..., ge=0, description="Lower bound of the rep target")
    max: int = Field(..., ge=0, description="Upper bound of the rep target")

    @model_validator(mode="after")
    def validate_bounds(self) -> "RepRange":
        """Ensure min does not exceed max."""
        if self.min > self.max:
            raise ValueError(f"Rep range min ({self.min}) exceeds max ({self.max})")
        return self

    def __str__(self) -> str:
        return f"{self.min}-{self.max}"

    model_config = {"frozen": True}


class SetSpec(BaseModel):
    """
    Planned targets for one set of an exercise.

    Examples:
        >>> SetSpec(id="set-1", target_reps=8, target_weight=50)
        >>> SetSpec(id="set-2", target_reps=RepRange(min=8, max=12))
    """

    id: str = Field(..., min_length=1, description="Set identifier, unique within its exercise")
    set_type: SetType = Field(default=SetType.STANDARD)
    target_reps: Optional[Union[int, RepRange]] = Field(
        default=None, description="Fixed rep target or a {min, max} range"
    )
    target_weight: Optional[float] = Field(default=None, ge=0)
    target_duration: Optional[float] = Field(
        default=None, ge=0, description="Target duration in seconds"
    )
    target_distance: Optional[float] = Field(default=None, ge=0)
    rest_time: Optional[int] = Field(
        default=None, ge=0, description="Target rest after the set in seconds"
    )

    model_config = {"frozen": True, "allow_inf_nan": False}


class ExerciseSpec(BaseModel):
    """An exercise slot in a template with its ordered set targets."""

    id: str = Field(..., min_length=1, description="Slot identifier within the template")
    exercise_key: str = Field(..., min_length=1, description="Catalog exercise identifier")
    name: str = Field(..., min_length=1, description="Display name at snapshot time")
    muscles: List[str] = Field(default_factory=list)
    equipment: List[str] = Field(default_factory=list)
    sets: List[SetSpec] = Field(default_factory=list)
    rest_between_sets: Optional[int] = Field(default=None, ge=0)

    @property
    def set_ids(self) -> Set[str]:
        return {s.id for s in self.sets}

    model_config = {"frozen": True}


class TemplateSnapshot(BaseModel):
    """
    Immutable copy of a workout template at the moment a session starts.

    Use `TemplateSnapshot.capture()` to build one from live template data;
    it deep-copies its input, so the caller may keep mutating the original.

    Examples:
        >>> snapshot = TemplateSnapshot(
        ...     template_id="tpl-1",
        ...     name="Push Day",
        ...     exercises=[
        ...         ExerciseSpec(
        ...             id="exercise-1",
        ...             exercise_key="bench_press",
        ...             name="Bench Press",
        ...             muscles=["chest", "triceps"],
        ...             sets=[SetSpec(id="set-1", target_reps=8, target_weight=50)],
        ...         )
        ...     ],
        ... )
        >>> snapshot.planned_set_count
        1
    """

    template_id: Optional[str] = Field(default=None)
    name: str = Field(default="", description="Template name at snapshot time")
    workout_type: Optional[str] = Field(default=None)
    difficulty: Optional[str] = Field(default=None)
    weight_unit: WeightUnit = Field(default="kg")
    exercises: List[ExerciseSpec] = Field(default_factory=list)

    @classmethod
    def capture(cls, template: Union["TemplateSnapshot", Dict[str, Any]]) -> "TemplateSnapshot":
        """
        Take a snapshot of live template data.

        Args:
            template: Live template as a model or a raw dict (e.g. a DB row's
                workout data)

        Returns:
            New snapshot sharing no mutable state with the input.
        """
        if isinstance(template, TemplateSnapshot):
            return template.model_copy(deep=True)
        return cls.model_validate(template).model_copy(deep=True)

    @property
    def planned_set_count(self) -> int:
        """Total number of SetSpecs across all exercises."""
        return sum(len(ex.sets) for ex in self.exercises)

    def get_exercise(self, exercise_id: str) -> Optional[ExerciseSpec]:
        """Look up an exercise slot by its id."""
        for exercise in self.exercises:
            if exercise.id == exercise_id:
                return exercise
        return None

    def exercise_name(self, exercise_key: str) -> Optional[str]:
        """Display name recorded in this snapshot for a catalog exercise key."""
        for exercise in self.exercises:
            if exercise.exercise_key == exercise_key:
                return exercise.name
        return None

    def muscles_for(self, exercise_id: str) -> List[str]:
        exercise = self.get_exercise(exercise_id)
        return list(exercise.muscles) if exercise else []

    model_config = {"frozen": True}
