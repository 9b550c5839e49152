"""
5/3/1 set calculator.

Training max, the fixed week and warm-up schemes, and the main-set
generators.  Every weight is produced by calculate_weight() so rounding is
identical wherever a set is shown.

Week scheme (percent of TM × reps, last set AMRAP on weeks 1-3):

  Week 1 :  65×5   75×5   85×5+
  Week 2 :  70×3   80×3   90×3+
  Week 3 :  75×5   85×3   95×1+
  Week 4 :  40×5   50×5   60×5     (deload)
"""

from __future__ import annotations

from .config import FIVE_BY_531_REPS, FIVE_BY_531_SET_COUNT, JOKER_STEP_PERCENTAGE
from .models import PrescribedSet, SchemeEntry
from .rounding import round_weight

WEEK_SCHEMES: dict[int, tuple[SchemeEntry, ...]] = {
    1: (
        SchemeEntry(65, 5),
        SchemeEntry(75, 5),
        SchemeEntry(85, 5, is_amrap=True),
    ),
    2: (
        SchemeEntry(70, 3),
        SchemeEntry(80, 3),
        SchemeEntry(90, 3, is_amrap=True),
    ),
    3: (
        SchemeEntry(75, 5),
        SchemeEntry(85, 3),
        SchemeEntry(95, 1, is_amrap=True),
    ),
    4: (
        SchemeEntry(40, 5),
        SchemeEntry(50, 5),
        SchemeEntry(60, 5),
    ),
}

WARMUP_SETS: tuple[SchemeEntry, ...] = (
    SchemeEntry(40, 5),
    SchemeEntry(50, 5),
    SchemeEntry(60, 3),
)

DELOAD_WEEK = 4


def get_week_scheme(week: int) -> tuple[SchemeEntry, ...]:
    """
    Return the three work-set entries for a week.

    Raises:
        ValueError: If week is not 1, 2, 3 or 4
    """
    if week not in WEEK_SCHEMES:
        raise ValueError(f"Invalid week: {week!r}. Must be 1, 2, 3 or 4.")
    return WEEK_SCHEMES[week]


def calculate_tm(one_rep_max: float, tm_percentage: float) -> float:
    """
    Training max as a fraction of the one-rep max.

    TM = 1RM × tm_percentage / 100.  Not rounded; rounding happens when a
    set weight is calculated.
    """
    return one_rep_max * (tm_percentage / 100)


def calculate_weight(training_max: float, percentage: float, rounding_increment: float) -> float:
    """Weight for a percentage of the training max, rounded to the increment."""
    weight = training_max * (percentage / 100)
    return round_weight(weight, rounding_increment)


def generate_working_sets(
    training_max: float,
    week: int,
    rounding_increment: float,
    show_warmups: bool = False,
) -> list[PrescribedSet]:
    """
    Generate the main sets for a lift on a given week.

    Args:
        training_max: Training max for the lift
        week: Week number (1-4)
        rounding_increment: Rounding increment
        show_warmups: Prepend the three warm-up sets

    Returns:
        Warm-up sets (if enabled) followed by the three work sets, each
        group numbered from 1

    Raises:
        ValueError: If week is not 1-4
    """
    scheme = get_week_scheme(week)
    sets: list[PrescribedSet] = []

    if show_warmups:
        for i, entry in enumerate(WARMUP_SETS, 1):
            sets.append(
                PrescribedSet(
                    type="warmup",
                    set_number=i,
                    weight=calculate_weight(training_max, entry.percentage, rounding_increment),
                    reps=entry.reps,
                    percentage=entry.percentage,
                    is_amrap=False,
                )
            )

    for i, entry in enumerate(scheme, 1):
        sets.append(
            PrescribedSet(
                type="work",
                set_number=i,
                weight=calculate_weight(training_max, entry.percentage, rounding_increment),
                reps=entry.reps,
                percentage=entry.percentage,
                is_amrap=entry.is_amrap,
            )
        )

    return sets


def generate_5x531_sets(
    training_max: float,
    week: int,
    rounding_increment: float,
) -> list[PrescribedSet]:
    """
    Generate main sets for the 5×5/3/1 template.

    Five sets at the week's top percentage.  Sets 1-4 use the week's filler
    reps (5/3/1/5 for weeks 1-4); set 5 uses the top set's own reps and is
    the only one that can be AMRAP.
    """
    top = get_week_scheme(week)[-1]
    weight = calculate_weight(training_max, top.percentage, rounding_increment)
    filler_reps = FIVE_BY_531_REPS[week]

    sets: list[PrescribedSet] = []
    for i in range(1, FIVE_BY_531_SET_COUNT + 1):
        last = i == FIVE_BY_531_SET_COUNT
        sets.append(
            PrescribedSet(
                type="work",
                set_number=i,
                weight=weight,
                reps=top.reps if last else filler_reps,
                percentage=top.percentage,
                is_amrap=last and top.is_amrap,
            )
        )
    return sets


def generate_joker_sets(
    training_max: float,
    week: int,
    count: int,
    rounding_increment: float,
    step: int = JOKER_STEP_PERCENTAGE,
) -> list[PrescribedSet]:
    """
    Generate joker sets to take after the AMRAP top set.

    Joker n is done at top percentage + n × step for the top set's reps.
    Jokers are never AMRAP.

    Raises:
        ValueError: On deload week (there is no top set to build on) or
            when count is negative
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    top = get_week_scheme(week)[-1]
    if not top.is_amrap:
        raise ValueError("Joker sets are not programmed on the deload week")

    sets: list[PrescribedSet] = []
    for i in range(1, count + 1):
        pct = top.percentage + i * step
        sets.append(
            PrescribedSet(
                type="joker",
                set_number=i,
                weight=calculate_weight(training_max, pct, rounding_increment),
                reps=top.reps,
                percentage=pct,
                is_amrap=False,
            )
        )
    return sets
