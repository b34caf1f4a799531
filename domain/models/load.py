"""
Load units and conversion.

Weights are stored in the unit the user logged them in (the session's
template snapshot carries it); conversion is only needed when comparing
values recorded in different units.
"""

from typing import Literal


WeightUnit = Literal["kg", "lb"]

# Conversion constant
LB_TO_KG = 0.45359237
KG_TO_LB = 2.20462262


def convert_weight(value: float, from_unit: str, to_unit: str) -> float:
    """
    Convert a weight (or a weight-scaled value such as volume) between units.

    Args:
        value: Value expressed in `from_unit`
        from_unit: "kg" or "lb"
        to_unit: "kg" or "lb"

    Returns:
        Value expressed in `to_unit`; unchanged when the units match.
    """
    if from_unit == to_unit:
        return value
    if from_unit == "lb" and to_unit == "kg":
        return value * LB_TO_KG
    if from_unit == "kg" and to_unit == "lb":
        return value * KG_TO_LB
    raise ValueError(f"Unsupported weight units: {from_unit!r} -> {to_unit!r}")
