"""
DOTS relative-strength score.

  DOTS = 500 / denom × total_kg
  denom = c0·bw⁴ + c1·bw³ + c2·bw² + c3·bw + c4      (bw in kg)

Only the male coefficient set is defined.  Female coefficients are not
implemented; every gender value is scored with the male set.
"""

from __future__ import annotations

from .config import DOTS_MALE_COEFFICIENTS, DOTS_NUMERATOR, LBS_TO_KG, UNITS


def _dots_denominator(body_weight_kg: float) -> float:
    c0, c1, c2, c3, c4 = DOTS_MALE_COEFFICIENTS
    bw = body_weight_kg
    return c0 * bw**4 + c1 * bw**3 + c2 * bw**2 + c3 * bw + c4


def calculate_dots(
    body_weight: float,
    total_lifted: float,
    unit: str,
    gender: str = "male",
) -> float:
    """
    Compute the DOTS score.

    Args:
        body_weight: Lifter bodyweight in ``unit``
        total_lifted: Sum of best lifts in ``unit``
        unit: "lbs" or "kg"; pounds are converted to kg before scoring
        gender: Accepted for the interface; the male coefficients are used
            for every value

    Returns:
        DOTS score.  Non-positive bodyweight is not guarded and yields a
        meaningless number; callers validate it.

    Raises:
        ValueError: If unit is not "lbs" or "kg"
    """
    if unit not in UNITS:
        raise ValueError(f"Invalid unit: {unit!r}. Must be 'lbs' or 'kg'.")

    if unit == "lbs":
        body_weight = body_weight * LBS_TO_KG
        total_lifted = total_lifted * LBS_TO_KG

    return (DOTS_NUMERATOR / _dots_denominator(body_weight)) * total_lifted
