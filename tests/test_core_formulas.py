"""
Formula-focused unit tests for the 5/3/1 calculator.

Values are hand-computed from the formulas so the tests double as a
reference for the expected numbers:

- TM = 1RM × tm% / 100
- set weight = round_half_up(TM × pct / 100 / increment) × increment
- Epley: 1RM = w × (1 + r / 30)
"""

import math

import pytest

from lift531.core.calculator import (
    WARMUP_SETS,
    WEEK_SCHEMES,
    calculate_tm,
    calculate_weight,
    generate_5x531_sets,
    generate_joker_sets,
    generate_working_sets,
    get_week_scheme,
)
from lift531.core.config import LBS_TO_KG
from lift531.core.dots import _dots_denominator, calculate_dots
from lift531.core.estimation import (
    best_pr,
    estimate_1rm,
    estimate_reps,
    is_new_record,
    reps_to_beat,
)
from lift531.core.models import PRRecord
from lift531.core.rounding import calculate_plates, format_weight, round_half_up, round_weight
from lift531.core.supplemental import generate_supplemental_sets


STANDARD_PLATES = [45, 25, 10, 5, 2.5]


def _pr(lift_id: str, weight: float, reps: int, e1rm: float, date: str = "2026-01-05") -> PRRecord:
    return PRRecord(
        lift_id=lift_id,
        date=date,
        weight=weight,
        reps=reps,
        estimated_1rm=e1rm,
        week=1,
    )


# ---------------------------------------------------------------------------
# Training max
# ---------------------------------------------------------------------------


class TestTrainingMax:
    """TM = 1RM × (tm% / 100), unrounded."""

    @pytest.mark.parametrize("orm,pct", [(200, 85), (315, 90), (137.5, 80), (405, 95)])
    def test_matches_formula(self, orm, pct):
        assert calculate_tm(orm, pct) == orm * (pct / 100)

    def test_not_rounded(self):
        # 225 × 0.85 = 191.25
        assert calculate_tm(225, 85) == pytest.approx(191.25)

    def test_zero_max_gives_zero_tm(self):
        assert calculate_tm(0, 85) == 0


# ---------------------------------------------------------------------------
# Rounding
# ---------------------------------------------------------------------------


class TestRounding:
    """round_weight rounds to the nearest multiple, halves upward."""

    def test_rounds_up_above_half(self):
        assert round_weight(183, 5) == 185

    def test_rounds_down_below_half(self):
        assert round_weight(182, 5) == 180

    def test_half_rounds_up(self):
        # 182.5 / 5 = 36.5 → 37 → 185
        assert round_weight(182.5, 5) == 185

    def test_small_increment(self):
        # 101.3 / 2.5 = 40.52 → 41 → 102.5
        assert round_weight(101.3, 2.5) == 102.5

    def test_exact_multiple_unchanged(self):
        assert round_weight(170, 5) == 170

    def test_round_half_up_on_negatives(self):
        assert round_half_up(-2.5) == -2
        assert round_half_up(2.5) == 3

    def test_calculate_weight(self):
        # 200 × 0.85 = 170
        assert calculate_weight(200, 85, 5) == 170

    def test_calculate_weight_rounds_through_increment(self):
        # 255 × 0.65 = 165.75 → 165
        assert calculate_weight(255, 65, 5) == 165


class TestFormatWeight:
    def test_whole_number_has_no_decimal(self):
        assert format_weight(100.0) == "100"

    def test_fraction_kept(self):
        assert format_weight(102.5) == "102.5"

    def test_trailing_zero_stripped(self):
        assert format_weight(1.25) == "1.25"
        assert format_weight(0.5) == "0.5"


# ---------------------------------------------------------------------------
# Week schemes and main sets
# ---------------------------------------------------------------------------


class TestWeekSchemes:
    def test_each_week_has_three_entries(self):
        for week in (1, 2, 3, 4):
            assert len(get_week_scheme(week)) == 3

    def test_only_top_set_is_amrap_on_weeks_1_to_3(self):
        for week in (1, 2, 3):
            scheme = WEEK_SCHEMES[week]
            assert [e.is_amrap for e in scheme] == [False, False, True]

    def test_deload_has_no_amrap(self):
        assert not any(e.is_amrap for e in get_week_scheme(4))

    def test_week_3_top_set(self):
        top = get_week_scheme(3)[-1]
        assert (top.percentage, top.reps) == (95, 1)

    @pytest.mark.parametrize("week", [0, 5, -1, 10])
    def test_invalid_week_raises(self, week):
        with pytest.raises(ValueError):
            get_week_scheme(week)

    def test_warmups_are_never_amrap(self):
        assert [(e.percentage, e.reps) for e in WARMUP_SETS] == [(40, 5), (50, 5), (60, 3)]
        assert not any(e.is_amrap for e in WARMUP_SETS)


class TestWorkingSets:
    def test_week_1_without_warmups(self):
        sets = generate_working_sets(200, 1, 5, False)
        assert len(sets) == 3
        assert [s.weight for s in sets] == [130, 150, 170]
        last = sets[-1]
        assert last.weight == 170
        assert last.reps == 5
        assert last.is_amrap

    def test_week_1_with_warmups(self):
        sets = generate_working_sets(200, 1, 5, True)
        assert len(sets) == 6
        first = sets[0]
        assert first.type == "warmup"
        assert first.weight == 80
        assert first.reps == 5
        assert [s.weight for s in sets[:3]] == [80, 100, 120]

    def test_set_numbers_restart_per_group(self):
        sets = generate_working_sets(200, 1, 5, True)
        assert [s.set_number for s in sets] == [1, 2, 3, 1, 2, 3]
        assert [s.type for s in sets] == ["warmup"] * 3 + ["work"] * 3

    def test_week_4_has_no_amrap(self):
        sets = generate_working_sets(200, 4, 5, True)
        assert not any(s.is_amrap for s in sets)
        assert [s.weight for s in sets[3:]] == [80, 100, 120]

    def test_week_2_weights(self):
        # 70/80/90 % of 200
        sets = generate_working_sets(200, 2, 5)
        assert [s.weight for s in sets] == [140, 160, 180]
        assert [s.reps for s in sets] == [3, 3, 3]

    def test_invalid_week_raises(self):
        with pytest.raises(ValueError):
            generate_working_sets(200, 5, 5)

    def test_idempotent(self):
        assert generate_working_sets(315, 3, 5, True) == generate_working_sets(315, 3, 5, True)

    def test_weights_monotonic_in_training_max(self):
        for week in (1, 2, 3, 4):
            lower = generate_working_sets(200, week, 5, True)
            higher = generate_working_sets(260, week, 5, True)
            for lo, hi in zip(lower, higher):
                assert hi.weight >= lo.weight

    def test_results_are_fresh_objects(self):
        a = generate_working_sets(200, 1, 5)
        b = generate_working_sets(200, 1, 5)
        a[0].weight = 999
        assert b[0].weight == 130


class TestFiveByFiveThreeOne:
    def test_week_2(self):
        sets = generate_5x531_sets(200, 2, 5)
        assert len(sets) == 5
        assert all(s.weight == 180 for s in sets)
        assert all(s.reps == 3 for s in sets)
        assert [s.is_amrap for s in sets] == [False, False, False, False, True]

    def test_week_3_filler_reps(self):
        sets = generate_5x531_sets(200, 3, 5)
        assert [s.reps for s in sets] == [1, 1, 1, 1, 1]
        assert sets[-1].is_amrap

    def test_week_1_filler_reps(self):
        sets = generate_5x531_sets(200, 1, 5)
        assert [s.reps for s in sets] == [5, 5, 5, 5, 5]
        assert all(s.weight == 170 for s in sets)

    def test_deload_week_has_no_amrap(self):
        sets = generate_5x531_sets(200, 4, 5)
        assert all(s.weight == 120 for s in sets)
        assert not any(s.is_amrap for s in sets)

    def test_all_work_sets_numbered(self):
        sets = generate_5x531_sets(200, 1, 5)
        assert [s.set_number for s in sets] == [1, 2, 3, 4, 5]
        assert all(s.type == "work" for s in sets)


class TestJokerSets:
    def test_week_1_jokers_step_above_top_set(self):
        # top 85 % → 90 %, 95 % of 200
        sets = generate_joker_sets(200, 1, 2, 5)
        assert [s.percentage for s in sets] == [90, 95]
        assert [s.weight for s in sets] == [180, 190]
        assert all(s.reps == 5 for s in sets)

    def test_jokers_never_amrap(self):
        sets = generate_joker_sets(200, 3, 3, 5)
        assert not any(s.is_amrap for s in sets)
        assert all(s.type == "joker" for s in sets)
        assert all(s.reps == 1 for s in sets)

    def test_custom_step(self):
        sets = generate_joker_sets(200, 2, 2, 5, step=10)
        assert [s.percentage for s in sets] == [100, 110]

    def test_zero_count(self):
        assert generate_joker_sets(200, 1, 0, 5) == []

    def test_deload_raises(self):
        with pytest.raises(ValueError):
            generate_joker_sets(200, 4, 2, 5)

    def test_negative_count_raises(self):
        with pytest.raises(ValueError):
            generate_joker_sets(200, 1, -1, 5)


# ---------------------------------------------------------------------------
# Supplemental
# ---------------------------------------------------------------------------


class TestSupplemental:
    def test_classic_has_none(self):
        assert generate_supplemental_sets("classic", 200, 1, 50, 5) is None

    def test_5x531_has_none(self):
        assert generate_supplemental_sets("5x531", 200, 1, 50, 5) is None

    def test_unknown_template_returns_none(self):
        assert generate_supplemental_sets("nonexistent", 200, 1, 50, 5) is None

    def test_bbb(self):
        plan = generate_supplemental_sets("bbb", 200, 1, 50, 5)
        assert plan is not None
        assert plan.template_name == "BBB"
        assert plan.sets == 5
        assert plan.reps == 10
        assert plan.weight == 100
        assert plan.percentage == 50
        assert plan.display == "5×10 @ 100"

    def test_bbb_uses_caller_percentage(self):
        plan = generate_supplemental_sets("bbb", 200, 1, 60, 5)
        assert plan.weight == 120
        assert plan.percentage == 60

    def test_fsl_uses_first_set_percentage(self):
        plan = generate_supplemental_sets("fsl", 200, 1, 50, 5)
        assert plan.weight == 130
        assert plan.percentage == 65
        assert (plan.sets, plan.reps) == (5, 5)

    def test_ssl_uses_second_set_percentage(self):
        plan = generate_supplemental_sets("ssl", 200, 1, 50, 5)
        assert plan.weight == 150
        assert plan.percentage == 75

    def test_fsl_follows_week(self):
        # week 3 first set is 75 %
        plan = generate_supplemental_sets("fsl", 200, 3, 50, 5)
        assert plan.weight == 150

    def test_fractional_weight_display(self):
        plan = generate_supplemental_sets("bbb", 95, 1, 50, 2.5)
        # 47.5 exactly on the increment
        assert plan.weight == 47.5
        assert plan.display == "5×10 @ 47.5"

    def test_idempotent(self):
        assert generate_supplemental_sets("bbb", 200, 1, 50, 5) == generate_supplemental_sets(
            "bbb", 200, 1, 50, 5
        )


# ---------------------------------------------------------------------------
# Plates
# ---------------------------------------------------------------------------


class TestPlates:
    def test_empty_bar(self):
        result = calculate_plates(45, 45, STANDARD_PLATES)
        assert result.plates == []
        assert result.remainder == 0

    def test_below_bar_weight(self):
        result = calculate_plates(30, 45, STANDARD_PLATES)
        assert result.plates == []
        assert result.remainder == 0

    def test_two_plates_per_side_unsorted_input(self):
        result = calculate_plates(225, 45, [10, 45, 25, 5, 2.5])
        assert [(p.weight, p.count) for p in result.plates] == [(45, 2)]
        assert result.remainder == 0

    def test_mixed_plates(self):
        # 275 → 115 per side → 45×2 + 25
        result = calculate_plates(275, 45, STANDARD_PLATES)
        assert [(p.weight, p.count) for p in result.plates] == [(45, 2), (25, 1)]
        assert result.remainder == 0

    def test_remainder_when_not_loadable(self):
        # 231 → 93 per side → 45×2 + 2.5, 0.5 left
        result = calculate_plates(231, 45, STANDARD_PLATES)
        assert [(p.weight, p.count) for p in result.plates] == [(45, 2), (2.5, 1)]
        assert result.remainder == 0.5

    def test_plates_descending(self):
        result = calculate_plates(180, 20, [1.25, 25, 5, 20, 2.5, 10, 15])
        weights = [p.weight for p in result.plates]
        assert weights == sorted(weights, reverse=True)


# ---------------------------------------------------------------------------
# Estimation
# ---------------------------------------------------------------------------


class TestEstimate1RM:
    def test_zero_reps(self):
        assert estimate_1rm(200, 0) == 0

    def test_negative_reps(self):
        assert estimate_1rm(200, -3) == 0

    def test_single_is_weight(self):
        assert estimate_1rm(200, 1) == 200
        assert estimate_1rm(102.5, 1) == 102.5

    def test_epley_rounded(self):
        # 200 × (1 + 5/30) = 233.33 → 233
        assert estimate_1rm(200, 5) == 233

    def test_epley_rounds_half_up(self):
        # 150 × (1 + 3/30) = 165
        assert estimate_1rm(150, 3) == 165
        # 225 × (1 + 8/30) = 285
        assert estimate_1rm(225, 8) == 285


class TestEstimateReps:
    def test_zero_weight(self):
        assert estimate_reps(0, 200) == 0

    def test_zero_max(self):
        assert estimate_reps(100, 0) == 0

    def test_at_max(self):
        assert estimate_reps(200, 200) == 1

    def test_above_max(self):
        assert estimate_reps(220, 200) == 1

    def test_floors_inverse_epley(self):
        # 30 × (200/150 − 1) = 9.99… → 9
        assert estimate_reps(150, 200) == 9

    def test_half_max(self):
        assert estimate_reps(100, 200) == 30


class TestRepsToBeat:
    def test_at_target_returns_single(self):
        assert reps_to_beat(240, 240) == 1

    def test_above_target_returns_single(self):
        assert reps_to_beat(250, 240) == 1

    def test_exact_tie_rounds_up(self):
        # 30 × (240/200 − 1) = 6 exactly; 6 reps only ties
        assert reps_to_beat(200, 240) == 7

    def test_fractional(self):
        # 30 × (150/100 − 1) = 15 → 16
        assert reps_to_beat(100, 150) == 16
        # 30 × (233/200 − 1) = 4.95 → 5; estimate_1rm(200, 5) rounds to 233, a tie
        assert reps_to_beat(200, 233) == 5
        assert estimate_1rm(200, 5) == 233

    def test_zero_weight_returns_zero(self):
        assert reps_to_beat(0, 200) == 0


BOUNDARY_WEIGHTS = [45, 95, 135, 155, 185, 225, 275, 315, 395]


def _targets(weight: int) -> range:
    """Whole-number maxes from 10 % to 60 % above the weight."""
    return range(math.ceil(weight * 1.1), int(weight * 1.6) + 1)


class TestEstimationBoundaries:
    """Round trips between the Epley estimate and its inverses over typical loads."""

    @pytest.mark.parametrize("weight", BOUNDARY_WEIGHTS)
    def test_estimate_reps_never_overshoots(self, weight):
        for one_rep_max in _targets(weight):
            reps = estimate_reps(weight, one_rep_max)
            assert estimate_1rm(weight, reps) <= one_rep_max, (weight, one_rep_max)

    @pytest.mark.parametrize("weight", BOUNDARY_WEIGHTS)
    def test_one_more_rep_reaches_max(self, weight):
        for one_rep_max in _targets(weight):
            reps = estimate_reps(weight, one_rep_max)
            assert estimate_1rm(weight, reps + 1) >= one_rep_max, (weight, one_rep_max)

    @pytest.mark.parametrize("weight", BOUNDARY_WEIGHTS)
    def test_reps_to_beat_exceeds_unrounded(self, weight):
        for target in _targets(weight):
            reps = reps_to_beat(weight, target)
            assert weight * (1 + reps / 30) > target, (weight, target)

    @pytest.mark.parametrize("weight", BOUNDARY_WEIGHTS)
    def test_reps_to_beat_reaches_target_after_rounding(self, weight):
        # Rounding can turn a beat into a tie, never into a miss
        for target in _targets(weight):
            reps = reps_to_beat(weight, target)
            assert estimate_1rm(weight, reps) >= target, (weight, target)

    def test_single_rep_is_not_epley(self):
        # 45 → 46 needs 1 rep, but a single reports the weight itself
        assert reps_to_beat(45, 46) == 1
        assert estimate_1rm(45, 1) == 45


class TestPRTracking:
    def test_best_pr_empty(self):
        assert best_pr([], "squat") is None

    def test_best_pr_picks_highest_estimate(self):
        history = [
            _pr("squat", 255, 5, 298),
            _pr("squat", 270, 3, 297),
            _pr("squat", 245, 10, 327),
            _pr("bench", 200, 10, 267),
        ]
        assert best_pr(history, "squat").estimated_1rm == 327

    def test_best_pr_filters_lift(self):
        history = [_pr("bench", 200, 10, 267)]
        assert best_pr(history, "squat") is None

    def test_earliest_wins_tie(self):
        first = _pr("bench", 200, 5, 233, "2026-01-05")
        second = _pr("bench", 200, 5, 233, "2026-02-05")
        assert best_pr([first, second], "bench") is first

    def test_new_record_without_history(self):
        assert is_new_record([], "ohp", 100)

    def test_new_record_must_beat_strictly(self):
        history = [_pr("ohp", 100, 5, 117)]
        assert not is_new_record(history, "ohp", 117)
        assert is_new_record(history, "ohp", 118)


# ---------------------------------------------------------------------------
# DOTS
# ---------------------------------------------------------------------------


class TestDots:
    def test_kg_formula(self):
        bw, total = 90, 600
        assert calculate_dots(bw, total, "kg") == pytest.approx(500 / _dots_denominator(bw) * total)

    def test_lbs_converted_to_kg(self):
        kg = calculate_dots(90, 600, "kg")
        lbs = calculate_dots(90 / LBS_TO_KG, 600 / LBS_TO_KG, "lbs")
        assert lbs == pytest.approx(kg)

    def test_denominator_polynomial(self):
        # bw = 0 leaves only the constant term
        assert _dots_denominator(0) == pytest.approx(-1511.14028827)

    def test_any_gender_uses_same_coefficients(self):
        assert calculate_dots(80, 500, "kg", "female") == calculate_dots(80, 500, "kg", "male")

    def test_zero_total(self):
        assert calculate_dots(80, 0, "kg") == 0

    def test_invalid_unit_raises(self):
        with pytest.raises(ValueError):
            calculate_dots(80, 500, "stone")
