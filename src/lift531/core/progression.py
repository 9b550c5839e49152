"""
Lift-level progression rules.

Composes the calculators into a full day for a lift and decides what goes
into the append-only histories:

- get_lift_day: TM → main sets (template-aware) → supplemental plan → accessories
- tm_change_record: TM history entry for a 1RM edit, if one is due
- build_pr_record: PR entry for submitted AMRAP reps
- advance_cycle: end-of-cycle 1RM increments
- build_workout_record: snapshot of a finished session

All functions take explicit state and return new values; nothing here
reads or writes files.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .calculator import (
    calculate_tm,
    generate_5x531_sets,
    generate_joker_sets,
    generate_working_sets,
)
from .config import CYCLE_INCREMENTS, LIFT_IDS, UPPER_BODY_LIFTS
from .estimation import estimate_1rm
from .models import (
    AccessoryLog,
    AccessoryTemplate,
    AppState,
    LiftSettings,
    LoggedSet,
    PrescribedSet,
    PRRecord,
    SupplementalLog,
    SupplementalPlan,
    TMHistoryRecord,
    WorkoutRecord,
)
from .supplemental import generate_supplemental_sets
from .templates.registry import TEMPLATE_REGISTRY


@dataclass
class LiftDay:
    """Everything prescribed for one lift on one week."""

    lift_id: str
    week: int
    one_rep_max: float
    training_max: float
    unit: str
    template: str
    main_sets: list[PrescribedSet]
    supplemental: SupplementalPlan | None
    supplemental_lift_id: str  # lift whose TM the supplemental work uses
    accessories: AccessoryTemplate | None = None

    @property
    def work_sets(self) -> list[PrescribedSet]:
        return [s for s in self.main_sets if s.type == "work"]

    @property
    def warmup_sets(self) -> list[PrescribedSet]:
        return [s for s in self.main_sets if s.type == "warmup"]

    @property
    def amrap_set(self) -> PrescribedSet | None:
        for s in self.main_sets:
            if s.is_amrap:
                return s
        return None


def _lift(state: AppState, lift_id: str) -> LiftSettings:
    if lift_id not in state.lifts:
        raise ValueError(f"Unknown lift '{lift_id}'. Valid IDs: {', '.join(LIFT_IDS)}")
    return state.lifts[lift_id]


def get_lift_day(state: AppState, lift_id: str, week: int) -> LiftDay:
    """
    Build the full prescription for a lift on a week.

    Templates that modify the main sets (5×5/3/1) replace the normal three
    work sets and skip warm-ups.  When the lift names a supplemental lift
    override, supplemental weights come from that lift's training max.

    Raises:
        ValueError: Unknown lift id or week outside 1-4
    """
    lift = _lift(state, lift_id)
    settings = state.settings
    tm = calculate_tm(lift.one_rep_max, settings.tm_percentage)

    template = TEMPLATE_REGISTRY.get(lift.template)
    if template is not None and template.modifies_main_sets:
        main_sets = generate_5x531_sets(tm, week, settings.rounding_increment)
    else:
        main_sets = generate_working_sets(
            tm, week, settings.rounding_increment, settings.show_warmups
        )

    sup_lift_id = lift.supplemental_lift_id or lift_id
    sup_tm = calculate_tm(_lift(state, sup_lift_id).one_rep_max, settings.tm_percentage)
    supplemental = generate_supplemental_sets(
        lift.template,
        sup_tm,
        week,
        lift.supplemental_percentage,
        settings.rounding_increment,
    )

    return LiftDay(
        lift_id=lift_id,
        week=week,
        one_rep_max=lift.one_rep_max,
        training_max=tm,
        unit=settings.unit,
        template=lift.template,
        main_sets=main_sets,
        supplemental=supplemental,
        supplemental_lift_id=sup_lift_id,
        accessories=(
            state.get_accessory_template(lift.accessory_template_id)
            if lift.accessory_template_id is not None
            else None
        ),
    )


def get_week(state: AppState, week: int) -> list[LiftDay]:
    """Lift days for all four lifts in program order."""
    return [get_lift_day(state, lift_id, week) for lift_id in LIFT_IDS]


def get_joker_sets(state: AppState, lift_id: str, week: int, count: int) -> list[PrescribedSet]:
    """Joker sets for a lift, built on its current training max."""
    lift = _lift(state, lift_id)
    tm = calculate_tm(lift.one_rep_max, state.settings.tm_percentage)
    return generate_joker_sets(tm, week, count, state.settings.rounding_increment)


def tm_change_record(
    lift_id: str,
    old_one_rep_max: float,
    new_one_rep_max: float,
    tm_percentage: float,
    date: str,
    is_cycle_increment: bool = False,
) -> TMHistoryRecord | None:
    """
    TM history entry for a 1RM change.

    Returns None when the lift was not initialised yet (onboarding) or the
    value did not change.
    """
    if old_one_rep_max <= 0 or new_one_rep_max == old_one_rep_max:
        return None
    return TMHistoryRecord(
        lift_id=lift_id,
        date=date,
        one_rep_max=new_one_rep_max,
        training_max=calculate_tm(new_one_rep_max, tm_percentage),
        is_cycle_increment=is_cycle_increment,
    )


def build_pr_record(lift_id: str, weight: float, reps: int, week: int, date: str) -> PRRecord:
    """
    PR entry for AMRAP reps submitted at a weight.

    Raises:
        ValueError: If reps ≤ 0 (nothing was submitted)
    """
    if reps <= 0:
        raise ValueError(f"reps must be positive, got {reps}")
    return PRRecord(
        lift_id=lift_id,
        date=date,
        weight=weight,
        reps=reps,
        estimated_1rm=estimate_1rm(weight, reps),
        week=week,
    )


def cycle_increment(lift_id: str, unit: str) -> float:
    """1RM increase at the end of a cycle: small for upper body, large for lower."""
    if unit not in CYCLE_INCREMENTS:
        raise ValueError(f"Invalid unit: {unit!r}. Must be 'lbs' or 'kg'.")
    kind = "upper" if lift_id in UPPER_BODY_LIFTS else "lower"
    return CYCLE_INCREMENTS[unit][kind]


def advance_cycle(state: AppState, date: str) -> tuple[dict[str, LiftSettings], list[TMHistoryRecord]]:
    """
    Raise every initialised 1RM by its cycle increment.

    Returns:
        (new lifts mapping, TM history records flagged as cycle increments).
        Uninitialised lifts are carried over untouched.
    """
    new_lifts: dict[str, LiftSettings] = {}
    records: list[TMHistoryRecord] = []

    for lift_id, lift in state.lifts.items():
        if not lift.is_initialized:
            new_lifts[lift_id] = replace(lift)
            continue
        new_orm = lift.one_rep_max + cycle_increment(lift_id, state.settings.unit)
        new_lifts[lift_id] = replace(lift, one_rep_max=new_orm)
        record = tm_change_record(
            lift_id,
            lift.one_rep_max,
            new_orm,
            state.settings.tm_percentage,
            date,
            is_cycle_increment=True,
        )
        if record is not None:
            records.append(record)

    return new_lifts, records


def _logged(s: PrescribedSet, completed: bool, actual_reps: int | None = None) -> LoggedSet:
    return LoggedSet(
        weight=s.weight,
        target_reps=s.reps,
        percentage=s.percentage,
        is_amrap=s.is_amrap,
        completed=completed,
        actual_reps=actual_reps if s.is_amrap else None,
    )


def build_workout_record(
    day: LiftDay,
    date: str,
    completed_sets: list[int] | None = None,
    amrap_reps: int | None = None,
    supplemental_done: int = 0,
    joker_sets: list[PrescribedSet] | None = None,
    accessories_done: list[int] | None = None,
    rpe: int | None = None,
    note: str | None = None,
) -> WorkoutRecord:
    """
    Snapshot a finished session.

    Args:
        day: The prescription that was trained
        date: ISO date of the session
        completed_sets: 1-based numbers of the completed work sets; None
            means all of them
        amrap_reps: Reps done on the AMRAP set (marks it completed)
        supplemental_done: Number of supplemental sets completed
        joker_sets: Joker sets that were done
        accessories_done: Completed sets per accessory exercise, in template
            order; None means none were done
        rpe: Session RPE 1-10
        note: Free-text note

    Raises:
        ValueError: If a set number is out of range, or accessory counts
            don't match the lift's accessory template
    """
    work = day.work_sets
    if completed_sets is None:
        done = {s.set_number for s in work}
    else:
        done = set(completed_sets)
        out_of_range = done - {s.set_number for s in work}
        if out_of_range:
            raise ValueError(
                f"Set numbers {sorted(out_of_range)} out of range (1–{len(work)})"
            )

    main: list[LoggedSet] = []
    for s in work:
        completed = s.set_number in done or (s.is_amrap and amrap_reps is not None)
        main.append(_logged(s, completed, amrap_reps))

    supplemental: SupplementalLog | None = None
    if day.supplemental is not None:
        supplemental = SupplementalLog(
            sets=day.supplemental.sets,
            reps=day.supplemental.reps,
            weight=day.supplemental.weight,
            completed_sets=supplemental_done,
        )

    exercises = day.accessories.exercises if day.accessories is not None else []
    if accessories_done is None:
        accessories_done = [0] * len(exercises)
    elif len(accessories_done) != len(exercises):
        raise ValueError(
            f"Expected {len(exercises)} accessory counts, got {len(accessories_done)}"
        )
    accessories = [
        AccessoryLog(name=e.name, sets=e.sets, reps=e.reps, completed_sets=done_sets)
        for e, done_sets in zip(exercises, accessories_done)
    ]

    return WorkoutRecord(
        lift_id=day.lift_id,
        week=day.week,
        date=date,
        one_rep_max=day.one_rep_max,
        training_max=day.training_max,
        main_sets=main,
        supplemental=supplemental,
        joker_sets=[_logged(j, True) for j in joker_sets or []],
        accessories=accessories,
        rpe=rpe,
        note=note,
    )
