"""
Tests for lift days, history rules and cycle progression.

States use tm_percentage=100 so a lift's training max equals its 1RM and
set weights can be read straight off the week scheme.
"""

import pytest

from lift531.core.calculator import calculate_tm
from lift531.core.models import (
    AccessoryExercise,
    AccessoryTemplate,
    AppState,
    LiftSettings,
    Settings,
)
from lift531.core.progression import (
    advance_cycle,
    build_pr_record,
    build_workout_record,
    cycle_increment,
    get_joker_sets,
    get_lift_day,
    get_week,
    tm_change_record,
)


def _state(unit: str = "lbs", show_warmups: bool = False, **lifts: LiftSettings) -> AppState:
    settings = Settings(tm_percentage=100, unit=unit, rounding_increment=5, show_warmups=show_warmups)
    base = {
        "squat": LiftSettings(one_rep_max=300),
        "bench": LiftSettings(one_rep_max=200),
        "deadlift": LiftSettings(one_rep_max=400),
        "ohp": LiftSettings(one_rep_max=100),
    }
    base.update(lifts)
    return AppState(settings=settings, lifts=base, is_onboarded=True)


class TestLiftDay:
    def test_classic_day(self):
        day = get_lift_day(_state(), "bench", 1)
        assert day.training_max == 200
        assert [s.weight for s in day.main_sets] == [130, 150, 170]
        assert day.supplemental is None
        assert day.amrap_set is day.main_sets[-1]
        assert day.unit == "lbs"

    def test_warmups_follow_setting(self):
        day = get_lift_day(_state(show_warmups=True), "bench", 1)
        assert len(day.warmup_sets) == 3
        assert len(day.work_sets) == 3

    def test_tm_uses_settings_percentage(self):
        state = _state()
        state.settings = Settings(tm_percentage=85)
        day = get_lift_day(state, "squat", 1)
        assert day.training_max == calculate_tm(300, 85)

    def test_bbb_supplemental(self):
        day = get_lift_day(_state(bench=LiftSettings(one_rep_max=200, template="bbb")), "bench", 1)
        assert day.supplemental.weight == 100
        assert day.supplemental.display == "5×10 @ 100"

    def test_supplemental_from_other_lift(self):
        state = _state(bench=LiftSettings(one_rep_max=200, template="bbb", supplemental_lift_id="ohp"))
        day = get_lift_day(state, "bench", 1)
        # 50 % of the OHP training max
        assert day.supplemental.weight == 50
        assert day.supplemental_lift_id == "ohp"
        # main sets still from bench
        assert day.main_sets[-1].weight == 170

    def test_5x531_replaces_main_sets(self):
        state = _state(show_warmups=True, bench=LiftSettings(one_rep_max=200, template="5x531"))
        day = get_lift_day(state, "bench", 2)
        assert len(day.main_sets) == 5
        assert day.warmup_sets == []
        assert all(s.weight == 180 for s in day.main_sets)
        assert day.supplemental is None

    def test_deload_has_no_amrap(self):
        assert get_lift_day(_state(), "squat", 4).amrap_set is None

    def test_unknown_lift_raises(self):
        with pytest.raises(ValueError):
            get_lift_day(_state(), "curl", 1)

    def test_invalid_week_raises(self):
        with pytest.raises(ValueError):
            get_lift_day(_state(), "squat", 5)

    def test_week_in_program_order(self):
        days = get_week(_state(), 1)
        assert [d.lift_id for d in days] == ["squat", "bench", "deadlift", "ohp"]

    def test_jokers_from_training_max(self):
        sets = get_joker_sets(_state(), "bench", 1, 2)
        assert [s.weight for s in sets] == [180, 190]


class TestTMHistoryRule:
    def test_onboarding_not_recorded(self):
        assert tm_change_record("squat", 0, 300, 85, "2026-01-05") is None

    def test_unchanged_not_recorded(self):
        assert tm_change_record("squat", 300, 300, 85, "2026-01-05") is None

    def test_change_recorded(self):
        record = tm_change_record("squat", 300, 310, 85, "2026-01-05")
        assert record is not None
        assert record.one_rep_max == 310
        assert record.training_max == calculate_tm(310, 85)
        assert not record.is_cycle_increment

    def test_decrease_recorded(self):
        assert tm_change_record("bench", 200, 190, 90, "2026-01-05") is not None


class TestPRRecord:
    def test_estimate_attached(self):
        record = build_pr_record("bench", 200, 5, 1, "2026-01-05")
        assert record.estimated_1rm == 233
        assert record.week == 1

    def test_no_reps_raises(self):
        with pytest.raises(ValueError):
            build_pr_record("bench", 200, 0, 1, "2026-01-05")

    def test_bad_date_raises(self):
        with pytest.raises(ValueError):
            build_pr_record("bench", 200, 5, 1, "05/01/2026")


class TestCycle:
    @pytest.mark.parametrize(
        "lift_id,unit,expected",
        [
            ("bench", "lbs", 5),
            ("ohp", "lbs", 5),
            ("squat", "lbs", 10),
            ("deadlift", "lbs", 10),
            ("bench", "kg", 2.5),
            ("squat", "kg", 5),
        ],
    )
    def test_increments(self, lift_id, unit, expected):
        assert cycle_increment(lift_id, unit) == expected

    def test_invalid_unit_raises(self):
        with pytest.raises(ValueError):
            cycle_increment("squat", "stone")

    def test_advance_cycle(self):
        state = _state(ohp=LiftSettings(one_rep_max=0))
        new_lifts, records = advance_cycle(state, "2026-02-02")

        assert new_lifts["squat"].one_rep_max == 310
        assert new_lifts["bench"].one_rep_max == 205
        assert new_lifts["deadlift"].one_rep_max == 410
        assert new_lifts["ohp"].one_rep_max == 0

        assert [r.lift_id for r in records] == ["squat", "bench", "deadlift"]
        assert all(r.is_cycle_increment for r in records)
        assert all(r.date == "2026-02-02" for r in records)

    def test_advance_cycle_keeps_templates(self):
        state = _state(bench=LiftSettings(one_rep_max=200, template="fsl"))
        new_lifts, _ = advance_cycle(state, "2026-02-02")
        assert new_lifts["bench"].template == "fsl"

    def test_advance_cycle_leaves_input_untouched(self):
        state = _state()
        advance_cycle(state, "2026-02-02")
        assert state.lifts["squat"].one_rep_max == 300


class TestWorkoutRecord:
    def test_all_sets_completed_by_default(self):
        day = get_lift_day(_state(), "squat", 1)
        workout = build_workout_record(day, "2026-01-05")
        assert len(workout.main_sets) == 3
        assert all(s.completed for s in workout.main_sets)
        assert workout.amrap_reps is None

    def test_amrap_reps_mark_top_set_done(self):
        day = get_lift_day(_state(), "squat", 1)
        workout = build_workout_record(day, "2026-01-05", completed_sets=[1, 2], amrap_reps=8)
        assert [s.completed for s in workout.main_sets] == [True, True, True]
        assert workout.main_sets[-1].actual_reps == 8
        assert workout.main_sets[0].actual_reps is None
        assert workout.amrap_reps == 8

    def test_partial_completion(self):
        day = get_lift_day(_state(), "squat", 1)
        workout = build_workout_record(day, "2026-01-05", completed_sets=[1])
        assert [s.completed for s in workout.main_sets] == [True, False, False]

    def test_out_of_range_set_raises(self):
        day = get_lift_day(_state(), "squat", 1)
        with pytest.raises(ValueError, match="out of range"):
            build_workout_record(day, "2026-01-05", completed_sets=[4])

    def test_warmups_not_logged(self):
        day = get_lift_day(_state(show_warmups=True), "squat", 1)
        workout = build_workout_record(day, "2026-01-05")
        assert len(workout.main_sets) == 3

    def test_supplemental_and_jokers(self):
        state = _state(squat=LiftSettings(one_rep_max=300, template="bbb"))
        day = get_lift_day(state, "squat", 1)
        jokers = get_joker_sets(state, "squat", 1, 2)
        workout = build_workout_record(
            day, "2026-01-05", supplemental_done=3, joker_sets=jokers, rpe=8, note="felt good"
        )
        assert workout.supplemental.completed_sets == 3
        assert workout.supplemental.sets == 5
        assert len(workout.joker_sets) == 2
        assert all(j.completed for j in workout.joker_sets)
        assert workout.rpe == 8
        assert workout.note == "felt good"

    def test_too_many_supplemental_sets_raises(self):
        state = _state(squat=LiftSettings(one_rep_max=300, template="bbb"))
        day = get_lift_day(state, "squat", 1)
        with pytest.raises(ValueError):
            build_workout_record(day, "2026-01-05", supplemental_done=6)

    def test_invalid_rpe_raises(self):
        day = get_lift_day(_state(), "squat", 1)
        with pytest.raises(ValueError):
            build_workout_record(day, "2026-01-05", rpe=11)


def _accessory_state() -> AppState:
    state = _state()
    return AppState(
        settings=state.settings,
        lifts={**state.lifts, "bench": LiftSettings(one_rep_max=200, accessory_template_id="push")},
        is_onboarded=True,
        accessory_templates=[
            AccessoryTemplate(
                id="push",
                name="Push day",
                exercises=[AccessoryExercise("Dips", 3, 10), AccessoryExercise("Push-up", 2, 20)],
            )
        ],
    )


class TestAccessories:
    def test_lift_day_carries_template(self):
        day = get_lift_day(_accessory_state(), "bench", 1)
        assert day.accessories.name == "Push day"
        assert [e.name for e in day.accessories.exercises] == ["Dips", "Push-up"]

    def test_unassigned_lift_has_none(self):
        assert get_lift_day(_accessory_state(), "squat", 1).accessories is None

    def test_deload_week_keeps_accessories(self):
        assert get_lift_day(_accessory_state(), "bench", 4).accessories is not None

    def test_completion_recorded_per_exercise(self):
        day = get_lift_day(_accessory_state(), "bench", 1)
        workout = build_workout_record(day, "2026-01-05", accessories_done=[3, 1])
        assert [(a.name, a.sets, a.reps, a.completed_sets) for a in workout.accessories] == [
            ("Dips", 3, 10, 3),
            ("Push-up", 2, 20, 1),
        ]

    def test_nothing_done_by_default(self):
        day = get_lift_day(_accessory_state(), "bench", 1)
        workout = build_workout_record(day, "2026-01-05")
        assert [a.completed_sets for a in workout.accessories] == [0, 0]

    def test_no_template_no_accessories(self):
        day = get_lift_day(_accessory_state(), "squat", 1)
        assert build_workout_record(day, "2026-01-05").accessories == []

    def test_count_mismatch_raises(self):
        day = get_lift_day(_accessory_state(), "bench", 1)
        with pytest.raises(ValueError, match="Expected 2 accessory counts"):
            build_workout_record(day, "2026-01-05", accessories_done=[3])

    def test_too_many_sets_raises(self):
        day = get_lift_day(_accessory_state(), "bench", 1)
        with pytest.raises(ValueError, match="Dips"):
            build_workout_record(day, "2026-01-05", accessories_done=[4, 0])

    def test_cycle_keeps_assignment(self):
        new_lifts, _ = advance_cycle(_accessory_state(), "2026-02-02")
        assert new_lifts["bench"].accessory_template_id == "push"
        assert new_lifts["bench"].one_rep_max == 205

    def test_unknown_assignment_rejected(self):
        with pytest.raises(ValueError, match="unknown accessory template"):
            _state(bench=LiftSettings(one_rep_max=200, accessory_template_id="push"))
