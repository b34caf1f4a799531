"""
Unit and volume math.

Pure numeric helpers shared by the metrics calculator, the record detector
and the analytics aggregator:
- Per-set and total volume (reps x weight)
- Estimated 1RM using Brzycki and Epley formulas, used to rank efforts
  performed at different rep counts
"""
from typing import Iterable, Optional

from domain.models import PerformedSet


SUPPORTED_1RM_FORMULAS = ("brzycki", "epley")


# =============================================================================
# Volume
# =============================================================================


def set_volume(performed: PerformedSet) -> float:
    """
    Volume contributed by one performed set.

    Only completed sets carrying both reps and weight contribute; duration
    or distance based sets contribute 0.

    Args:
        performed: The performed set

    Returns:
        actual_reps * actual_weight, or 0.0
    """
    if not performed.completed or not performed.has_load:
        return 0.0
    return float(performed.actual_reps) * float(performed.actual_weight)


def total_volume(sets: Iterable[PerformedSet]) -> float:
    """Sum of set volumes."""
    return sum(set_volume(s) for s in sets)


def mean(values: Iterable[Optional[float]]) -> Optional[float]:
    """
    Mean of the present values.

    None entries are excluded rather than counted as zero.

    Returns:
        The mean, or None if no value is present
    """
    present = [v for v in values if v is not None]
    if not present:
        return None
    return sum(present) / len(present)


# =============================================================================
# 1RM Calculation Formulas
# =============================================================================


def calculate_1rm_brzycki(weight: float, reps: int) -> float:
    """
    Calculate estimated 1RM using Brzycki formula.

    Formula: 1RM = weight * (36 / (37 - reps))

    Most accurate for rep ranges 1-10. Less reliable above 10 reps.

    Args:
        weight: Weight lifted
        reps: Number of reps completed

    Returns:
        Estimated 1RM
    """
    if reps <= 0:
        return 0.0
    if reps == 1:
        return float(weight)
    if reps >= 37:
        # Formula breaks down at 37+ reps
        return float(weight) * 2.5

    return weight * (36.0 / (37.0 - reps))


def calculate_1rm_epley(weight: float, reps: int) -> float:
    """
    Calculate estimated 1RM using Epley formula.

    Formula: 1RM = weight * (1 + reps/30)

    Works well across all rep ranges but may overestimate at high reps.

    Args:
        weight: Weight lifted
        reps: Number of reps completed

    Returns:
        Estimated 1RM
    """
    if reps <= 0:
        return 0.0
    if reps == 1:
        return float(weight)

    return weight * (1.0 + reps / 30.0)


def calculate_1rm(
    weight: float,
    reps: int,
    formula: str = "brzycki",
) -> float:
    """
    Calculate estimated 1RM using the specified formula.

    Args:
        weight: Weight lifted
        reps: Number of reps completed
        formula: Formula to use ("brzycki" or "epley")

    Returns:
        Estimated 1RM, rounded to 1 decimal place

    Raises:
        ValueError: If the formula is not supported
    """
    if formula == "epley":
        result = calculate_1rm_epley(weight, reps)
    elif formula == "brzycki":
        result = calculate_1rm_brzycki(weight, reps)
    else:
        raise ValueError(
            f"Unknown 1RM formula '{formula}'. Must be one of: {SUPPORTED_1RM_FORMULAS}"
        )

    return round(result, 1)


def estimated_1rm(performed: PerformedSet, formula: str = "brzycki") -> Optional[float]:
    """
    Normalized strength score for a completed set.

    Returns:
        Estimated 1RM, or None when the set is not completed or lacks a
        positive weight and rep count
    """
    if not performed.completed or not performed.has_load:
        return None
    if performed.actual_weight <= 0 or performed.actual_reps <= 0:
        return None
    return calculate_1rm(performed.actual_weight, performed.actual_reps, formula)
