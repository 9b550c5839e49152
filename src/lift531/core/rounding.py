"""
Weight rounding and plate loading.

Every prescribed weight is rounded through round_weight(); the plate
calculator turns a rounded total into per-side plates for a given bar.
"""

from __future__ import annotations

import math

from .models import PlateBreakdown, PlateCount


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +infinity."""
    return math.floor(value + 0.5)


def round_weight(weight: float, increment: float) -> float:
    """
    Round a weight to the nearest multiple of increment.

    Halves round up (182.5 → 185 at increment 5).  The caller guarantees
    increment > 0.

    Args:
        weight: Raw weight
        increment: Rounding increment (e.g. 5, 2.5, 1)

    Returns:
        Rounded weight
    """
    return round_half_up(weight / increment) * increment


def calculate_plates(
    total_weight: float,
    bar_weight: float,
    available_plates: list[float],
) -> PlateBreakdown:
    """
    Compute the plates to load on each side of the bar.

    Greedy largest-first: each denomination takes as many plates as fit in
    what is left per side before moving to the next smaller one.  This is
    exact for standard plate sets but not guaranteed minimal for arbitrary
    denominations.

    Args:
        total_weight: Target total including the bar
        bar_weight: Empty bar weight
        available_plates: Plate denominations in any order

    Returns:
        PlateBreakdown with plates descending by weight and the per-side
        remainder rounded to 2 decimal places.  A total at or below the bar
        weight yields no plates and no remainder.
    """
    per_side = (total_weight - bar_weight) / 2
    if per_side <= 0:
        return PlateBreakdown(plates=[], remainder=0)

    plates: list[PlateCount] = []
    remaining = per_side
    for plate in sorted(available_plates, reverse=True):
        count = math.floor(remaining / plate)
        if count > 0:
            plates.append(PlateCount(weight=plate, count=count))
            remaining -= count * plate

    return PlateBreakdown(plates=plates, remainder=round_half_up(remaining * 100) / 100)


def format_weight(weight: float) -> str:
    """Render a weight without a trailing .0 (100.0 → "100", 102.5 → "102.5")."""
    if float(weight).is_integer():
        return str(int(weight))
    return f"{weight:.2f}".rstrip("0").rstrip(".")
