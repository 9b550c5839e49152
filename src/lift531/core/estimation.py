"""
Epley-based performance estimation.

  estimate_1rm   — 1RM from a (weight, reps) pair:  w × (1 + r / 30)
  estimate_reps  — inverse: reps expected at w for a known 1RM
  reps_to_beat   — break-even reps at w against a target estimate

Degenerate inputs (empty fields, zero or negative numbers) return sentinel
values instead of raising, because they are routine during data entry.
"""

from __future__ import annotations

import math

from .config import EPLEY_DIVISOR, REPS_TO_BEAT_EPSILON
from .models import PRRecord
from .rounding import round_half_up


def estimate_1rm(weight: float, reps: int) -> float:
    """
    Estimate one-rep max with the Epley formula.

    Returns:
        0 for reps ≤ 0 (no estimate), the weight itself for a single,
        otherwise the Epley estimate rounded half-up to a whole number
    """
    if reps <= 0:
        return 0
    if reps == 1:
        return weight
    return round_half_up(weight * (1 + reps / EPLEY_DIVISOR))


def estimate_reps(weight: float, one_rep_max: float) -> int:
    """
    Reps expected at a weight for a given 1RM (inverse Epley).

    Floors the result, so estimate_1rm(weight, estimate_reps(...)) never
    exceeds one_rep_max.  At or above the max, a single is the answer.
    """
    if weight <= 0 or one_rep_max <= 0:
        return 0
    if weight >= one_rep_max:
        return 1
    return math.floor(EPLEY_DIVISOR * (one_rep_max / weight - 1))


def reps_to_beat(weight: float, target_1rm: float) -> int:
    """
    Break-even reps at weight against a target estimated max.

    At or above the target a single is returned.  Below it, the result is
    the ceiling of the exact Epley break-even count, nudged by a small
    epsilon so that a whole-number break-even moves up one rep.  The
    unrounded Epley value at the returned reps is above the target, but
    estimate_1rm rounds half-up, so the reported estimate may only equal
    it: reps_to_beat(200, 233) is 5 and estimate_1rm(200, 5) is 233.
    A non-positive weight below the target returns 0.
    """
    if weight >= target_1rm:
        return 1
    if weight <= 0:
        return 0
    return math.ceil(EPLEY_DIVISOR * (target_1rm / weight - 1) + REPS_TO_BEAT_EPSILON)


def best_pr(pr_history: list[PRRecord], lift_id: str) -> PRRecord | None:
    """
    Return the PR record with the highest estimated 1RM for a lift.

    The earliest record wins a tie.  None if the lift has no records.
    """
    best: PRRecord | None = None
    for record in pr_history:
        if record.lift_id != lift_id:
            continue
        if best is None or record.estimated_1rm > best.estimated_1rm:
            best = record
    return best


def is_new_record(pr_history: list[PRRecord], lift_id: str, estimated_1rm: float) -> bool:
    """True if estimated_1rm strictly beats every previous record for the lift."""
    best = best_pr(pr_history, lift_id)
    return best is None or estimated_1rm > best.estimated_1rm
