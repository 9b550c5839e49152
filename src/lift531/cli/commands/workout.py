"""Training commands: set-week, week, show, log-amrap, joker, log-workout, next-cycle."""

import json
from dataclasses import asdict, replace
from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional

import typer

from ...core.config import LIFT_IDS, LIFT_NAMES
from ...core.estimation import best_pr, is_new_record, reps_to_beat
from ...core.models import AppState
from ...core.progression import (
    LiftDay,
    advance_cycle,
    build_pr_record,
    build_workout_record,
    get_joker_sets,
    get_lift_day,
    get_week,
)
from ...core.rounding import format_weight
from ...io.serializers import (
    ValidationError,
    accessory_template_to_dict,
    parse_counts,
    parse_set_numbers,
)
from ...io.state_store import StateStore
from .. import views
from ..app import LIFT_HELP, DataDirOption, JsonOption, WeekOption, app, get_store

DEFAULT_JOKER_COUNT = 2

DateOption = Annotated[
    Optional[str],
    typer.Option("--date", "-d", help="Date (YYYY-MM-DD, default: today)"),
]


def _load(data_dir: Optional[Path]) -> tuple[StateStore, AppState]:
    """Load store and state, exiting with an error message on failure."""
    store = get_store(data_dir)
    try:
        state = store.load_state()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    return store, state


def _check_lift_id(lift_id: str) -> None:
    if lift_id not in LIFT_IDS:
        views.print_error(f"Unknown lift '{lift_id}'. Valid IDs: {', '.join(LIFT_IDS)}")
        raise typer.Exit(1)


def _lift_day_to_dict(day: LiftDay) -> dict:
    return {
        "lift_id": day.lift_id,
        "week": day.week,
        "one_rep_max": day.one_rep_max,
        "training_max": day.training_max,
        "unit": day.unit,
        "template": day.template,
        "main_sets": [asdict(s) for s in day.main_sets],
        "supplemental": asdict(day.supplemental) if day.supplemental is not None else None,
        "supplemental_lift_id": day.supplemental_lift_id,
        "accessories": (
            accessory_template_to_dict(day.accessories) if day.accessories is not None else None
        ),
    }


def _today() -> str:
    return datetime.now().strftime("%Y-%m-%d")


@app.command("set-week")
def set_week(
    week: Annotated[int, typer.Argument(min=1, max=4, help="Cycle week 1-4")],
    data_dir: DataDirOption = None,
) -> None:
    """
    Set the current week of the cycle.
    """
    store = get_store(data_dir)
    try:
        store.set_current_week(week)
    except (FileNotFoundError, ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    views.print_success(f"Current week set to {week}.")


@app.command()
def week(
    data_dir: DataDirOption = None,
    week_num: WeekOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show all four lifts for a week.
    """
    _, state = _load(data_dir)
    w = week_num or state.current_week
    days = get_week(state, w)

    if json_out:
        print(json.dumps([_lift_day_to_dict(d) for d in days], indent=2))
        return

    for day in days:
        views.print_lift_day(day)


@app.command()
def show(
    lift_id: Annotated[str, typer.Argument(help=LIFT_HELP)],
    data_dir: DataDirOption = None,
    week_num: WeekOption = None,
    plates: Annotated[
        bool,
        typer.Option("--plates", help="Add per-side plate loading to each set"),
    ] = False,
    json_out: JsonOption = False,
) -> None:
    """
    Show one lift's sets, supplemental work and (optionally) plates.
    """
    _check_lift_id(lift_id)
    store, state = _load(data_dir)
    w = week_num or state.current_week
    day = get_lift_day(state, lift_id, w)

    if json_out:
        print(json.dumps(_lift_day_to_dict(day), indent=2))
        return

    if plates:
        views.print_lift_day(day, state.settings.bar_weight, state.settings.available_plates)
    else:
        views.print_lift_day(day)

    amrap = day.amrap_set
    try:
        best = best_pr(store.load_pr_history(), lift_id)
    except ValidationError as e:
        views.print_warning(str(e))
        return
    if amrap is not None and amrap.weight > 0 and best is not None:
        target = reps_to_beat(amrap.weight, best.estimated_1rm)
        views.print_info(
            f"  Best est. 1RM {format_weight(best.estimated_1rm)} {day.unit}: "
            f"{target} reps at {format_weight(amrap.weight)} beats it."
        )


@app.command("log-amrap")
def log_amrap(
    lift_id: Annotated[str, typer.Argument(help=LIFT_HELP)],
    reps: Annotated[int, typer.Argument(help="Reps done on the AMRAP set")],
    data_dir: DataDirOption = None,
    week_num: WeekOption = None,
    weight: Annotated[
        Optional[float],
        typer.Option("--weight", help="Weight used (default: prescribed AMRAP weight)"),
    ] = None,
    date: DateOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Record AMRAP reps as a PR entry.

    Reports the estimated 1RM and whether it beats the best so far.
    """
    _check_lift_id(lift_id)
    store, state = _load(data_dir)
    w = week_num or state.current_week

    if weight is None:
        amrap = get_lift_day(state, lift_id, w).amrap_set
        if amrap is None:
            views.print_error(f"Week {w} has no AMRAP set. Pass --weight to log anyway.")
            raise typer.Exit(1)
        weight = amrap.weight

    try:
        history = store.load_pr_history()
        record = build_pr_record(lift_id, weight, reps, w, date or _today())
        new_best = is_new_record(history, lift_id, record.estimated_1rm)
        store.append_pr(record)
    except (FileNotFoundError, ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps({**asdict(record), "is_new_record": new_best}, indent=2))
        return

    unit = state.settings.unit
    views.print_success(
        f"Logged {LIFT_NAMES[lift_id]}: {format_weight(weight)} {unit} × {reps} "
        f"(est. 1RM {format_weight(record.estimated_1rm)} {unit})"
    )
    if new_best:
        views.console.print("[bold green]New record![/bold green]")


@app.command()
def joker(
    lift_id: Annotated[str, typer.Argument(help=LIFT_HELP)],
    data_dir: DataDirOption = None,
    week_num: WeekOption = None,
    count: Annotated[
        int,
        typer.Option("--count", "-n", min=0, help="Number of joker sets"),
    ] = DEFAULT_JOKER_COUNT,
    json_out: JsonOption = False,
) -> None:
    """
    Show joker sets to take after a strong top set.
    """
    _check_lift_id(lift_id)
    _, state = _load(data_dir)
    w = week_num or state.current_week

    try:
        sets = get_joker_sets(state, lift_id, w, count)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps([asdict(s) for s in sets], indent=2))
        return

    views.console.print(
        views.format_sets_table(sets, state.settings.unit, f"{LIFT_NAMES[lift_id]} jokers, week {w}")
    )


@app.command("log-workout")
def log_workout(
    lift_id: Annotated[str, typer.Argument(help=LIFT_HELP)],
    data_dir: DataDirOption = None,
    week_num: WeekOption = None,
    sets: Annotated[
        Optional[str],
        typer.Option("--sets", "-s", help="Completed work sets, e.g. '1,2,3' or '1-2' (default: all)"),
    ] = None,
    amrap_reps: Annotated[
        Optional[int],
        typer.Option("--amrap-reps", "-a", min=1, help="Reps done on the AMRAP set (also logs a PR)"),
    ] = None,
    supplemental_done: Annotated[
        Optional[int],
        typer.Option("--supplemental", min=0, help="Supplemental sets completed (default: all)"),
    ] = None,
    jokers: Annotated[
        int,
        typer.Option("--jokers", min=0, help="Joker sets done"),
    ] = 0,
    accessories_done: Annotated[
        Optional[str],
        typer.Option(
            "--accessories",
            help="Accessory sets completed per exercise, e.g. '3,3,2' (default: all)",
        ),
    ] = None,
    rpe: Annotated[
        Optional[int],
        typer.Option("--rpe", min=1, max=10, help="Session RPE 1-10"),
    ] = None,
    note: Annotated[
        Optional[str],
        typer.Option("--note", help="Free-text note"),
    ] = None,
    date: DateOption = None,
) -> None:
    """
    Record a finished workout.

    The prescription for the week is captured alongside what was completed.
    """
    _check_lift_id(lift_id)
    store, state = _load(data_dir)
    w = week_num or state.current_week
    day = get_lift_day(state, lift_id, w)
    session_date = date or _today()

    if not state.lifts[lift_id].is_initialized:
        views.print_error(f"No 1RM set for {LIFT_NAMES[lift_id]}. Use 'set-max' first.")
        raise typer.Exit(1)

    if amrap_reps is not None and day.amrap_set is None:
        views.print_error(f"Week {w} has no AMRAP set.")
        raise typer.Exit(1)

    if day.supplemental is None:
        if supplemental_done is not None:
            views.print_error(f"{LIFT_NAMES[lift_id]} template has no supplemental work.")
            raise typer.Exit(1)
        supplemental_done = 0
    elif supplemental_done is None:
        supplemental_done = day.supplemental.sets

    if day.accessories is None and accessories_done is not None:
        views.print_error(
            f"{LIFT_NAMES[lift_id]} has no accessory template. Use 'set-template --accessories'."
        )
        raise typer.Exit(1)

    try:
        completed = parse_set_numbers(sets) if sets is not None else None
        joker_sets = get_joker_sets(state, lift_id, w, jokers) if jokers else []
        if accessories_done is not None:
            accessory_counts = parse_counts(accessories_done)
        elif day.accessories is not None:
            accessory_counts = [e.sets for e in day.accessories.exercises]
        else:
            accessory_counts = None
        workout = build_workout_record(
            day,
            session_date,
            completed_sets=completed,
            amrap_reps=amrap_reps,
            supplemental_done=supplemental_done,
            joker_sets=joker_sets,
            accessories_done=accessory_counts,
            rpe=rpe,
            note=note,
        )
        pr = None
        new_best = False
        if amrap_reps is not None:
            history = store.load_pr_history()
            pr = build_pr_record(lift_id, day.amrap_set.weight, amrap_reps, w, session_date)  # type: ignore[union-attr]
            new_best = is_new_record(history, lift_id, pr.estimated_1rm)
        store.append_workout(workout)
        if pr is not None:
            store.append_pr(pr)
    except (FileNotFoundError, ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    done = sum(1 for s in workout.main_sets if s.completed)
    views.print_success(
        f"Logged {LIFT_NAMES[lift_id]} week {w}: {done}/{len(workout.main_sets)} work sets"
    )
    if pr is not None:
        views.print_info(
            f"AMRAP {format_weight(pr.weight)} × {pr.reps}: "
            f"est. 1RM {format_weight(pr.estimated_1rm)} {state.settings.unit}"
        )
        if new_best:
            views.console.print("[bold green]New record![/bold green]")


@app.command("next-cycle")
def next_cycle(
    data_dir: DataDirOption = None,
    date: DateOption = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation"),
    ] = False,
) -> None:
    """
    Start the next cycle.

    Raises every 1RM by its cycle increment (+5 lbs upper body, +10 lbs
    lower body; 2.5 / 5 kg) and resets to week 1.
    """
    store, state = _load(data_dir)

    if not yes and not views.confirm_action("Increase all 1RMs and start a new cycle?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    new_lifts, records = advance_cycle(state, date or _today())
    new_state = replace(state, lifts=new_lifts, current_week=1)
    try:
        store.save_state(new_state)
        for record in records:
            store.append_tm_record(record)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    unit = state.settings.unit
    for record in records:
        old = state.lifts[record.lift_id].one_rep_max
        views.console.print(
            f"  {LIFT_NAMES[record.lift_id]}: {format_weight(old)} → "
            f"{format_weight(record.one_rep_max)} {unit}"
        )
    views.print_success("New cycle started at week 1.")
