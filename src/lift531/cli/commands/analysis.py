"""Analysis commands: prs, tm-history, history, estimate, plates, dots."""

import json
from dataclasses import asdict
from typing import Annotated, Optional

import typer

from ...core.config import LIFT_IDS, LIFT_NAMES
from ...core.dots import calculate_dots
from ...core.estimation import best_pr, estimate_1rm, estimate_reps, reps_to_beat
from ...core.rounding import calculate_plates, format_weight
from ...io.serializers import ValidationError, parse_plates, pr_record_to_dict, tm_record_to_dict, workout_to_dict
from .. import views
from ..app import DataDirOption, JsonOption, app, get_store

LiftFilterOption = Annotated[
    Optional[str],
    typer.Option("--lift", "-l", help="Only show this lift"),
]


def _check_lift_filter(lift_id: str | None) -> None:
    if lift_id is not None and lift_id not in LIFT_IDS:
        views.print_error(f"Unknown lift '{lift_id}'. Valid IDs: {', '.join(LIFT_IDS)}")
        raise typer.Exit(1)


@app.command()
def prs(
    data_dir: DataDirOption = None,
    lift_id: LiftFilterOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show logged AMRAP sets and the best estimated 1RM per lift.
    """
    _check_lift_filter(lift_id)
    store = get_store(data_dir)
    try:
        state = store.load_state()
        records = store.load_pr_history()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if lift_id is not None:
        records = [r for r in records if r.lift_id == lift_id]

    if json_out:
        print(json.dumps([pr_record_to_dict(r) for r in records], indent=2))
        return

    views.print_pr_history(records, state.settings.unit)

    for lid in LIFT_IDS:
        best = best_pr(records, lid)
        if best is not None:
            views.console.print(
                f"  Best {LIFT_NAMES[lid]}: {format_weight(best.estimated_1rm)} "
                f"{state.settings.unit} ({format_weight(best.weight)} × {best.reps}, {best.date})"
            )


@app.command("tm-history")
def tm_history(
    data_dir: DataDirOption = None,
    lift_id: LiftFilterOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show training max changes over time.
    """
    _check_lift_filter(lift_id)
    store = get_store(data_dir)
    try:
        state = store.load_state()
        records = store.load_tm_history()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if lift_id is not None:
        records = [r for r in records if r.lift_id == lift_id]

    if json_out:
        print(json.dumps([tm_record_to_dict(r) for r in records], indent=2))
        return

    views.print_tm_history(records, state.settings.unit)


@app.command()
def history(
    data_dir: DataDirOption = None,
    lift_id: LiftFilterOption = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-n", min=1, help="Only show the most recent N workouts"),
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show finished workouts.
    """
    _check_lift_filter(lift_id)
    store = get_store(data_dir)
    try:
        state = store.load_state()
        workouts = store.load_workouts()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if lift_id is not None:
        workouts = [w for w in workouts if w.lift_id == lift_id]
    if limit is not None:
        workouts = workouts[-limit:]

    if json_out:
        print(json.dumps([workout_to_dict(w) for w in workouts], indent=2))
        return

    views.print_workouts(workouts, state.settings.unit)
    for w in workouts:
        if w.note:
            views.console.print(f"  [dim]{w.date} {LIFT_NAMES[w.lift_id]}:[/dim] {w.note}")


@app.command()
def estimate(
    weight: Annotated[float, typer.Argument(help="Weight lifted")],
    reps: Annotated[int, typer.Argument(help="Reps completed")],
    data_dir: DataDirOption = None,
    lift_id: Annotated[
        Optional[str],
        typer.Option("--lift", "-l", help="Compare against this lift's best PR"),
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    Estimate a 1RM from a set (Epley).

    With --lift, also reports the reps needed at this weight to beat the
    lift's best estimated 1RM.
    """
    _check_lift_filter(lift_id)
    e1rm = estimate_1rm(weight, reps)
    result: dict = {"weight": weight, "reps": reps, "estimated_1rm": e1rm}

    if lift_id is not None:
        store = get_store(data_dir)
        try:
            best = best_pr(store.load_pr_history(), lift_id)
        except ValidationError as e:
            views.print_error(str(e))
            raise typer.Exit(1)
        if best is not None:
            result["best_1rm"] = best.estimated_1rm
            result["reps_to_beat"] = reps_to_beat(weight, best.estimated_1rm)
            result["reps_at_best"] = estimate_reps(weight, best.estimated_1rm)

    if json_out:
        print(json.dumps(result, indent=2))
        return

    views.console.print(
        f"{format_weight(weight)} × {reps} → est. 1RM [bold]{format_weight(e1rm)}[/bold]"
    )
    if "best_1rm" in result:
        views.console.print(
            f"Best {LIFT_NAMES[lift_id]}: {format_weight(result['best_1rm'])}  |  "
            f"{result['reps_to_beat']} reps at {format_weight(weight)} beats it"
        )
    elif lift_id is not None:
        views.print_info(f"No PRs logged for {LIFT_NAMES[lift_id]} yet.")


@app.command()
def plates(
    weight: Annotated[float, typer.Argument(help="Total barbell weight")],
    data_dir: DataDirOption = None,
    bar_weight: Annotated[
        Optional[float],
        typer.Option("--bar", "-b", help="Bar weight (default: from settings)"),
    ] = None,
    available: Annotated[
        Optional[str],
        typer.Option("--plates", help="Available plates, comma-separated (default: from settings)"),
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show which plates to load on each side.
    """
    try:
        if bar_weight is None or available is None:
            current = get_store(data_dir).load_state().settings
            bar = current.bar_weight if bar_weight is None else bar_weight
            plate_list = current.available_plates if available is None else parse_plates(available)
        else:
            bar = bar_weight
            plate_list = parse_plates(available)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    breakdown = calculate_plates(weight, bar, plate_list)

    if json_out:
        print(json.dumps(asdict(breakdown), indent=2))
        return

    views.console.print(
        f"{format_weight(weight)} on a {format_weight(bar)} bar: "
        f"{views.format_plates(breakdown)} per side"
    )


@app.command()
def dots(
    bodyweight: Annotated[
        float,
        typer.Option("--bodyweight", "-b", help="Bodyweight in the configured unit"),
    ],
    data_dir: DataDirOption = None,
    total: Annotated[
        Optional[float],
        typer.Option("--total", "-t", help="Powerlifting total (default: squat + bench + deadlift 1RMs)"),
    ] = None,
    unit: Annotated[
        Optional[str],
        typer.Option("--unit", "-u", help="lbs or kg (default: from settings)"),
    ] = None,
    gender: Annotated[
        str,
        typer.Option("--gender", "-g", help="male or female"),
    ] = "male",
    json_out: JsonOption = False,
) -> None:
    """
    Compute a DOTS score.
    """
    if total is None or unit is None:
        try:
            state = get_store(data_dir).load_state()
        except (FileNotFoundError, ValidationError) as e:
            views.print_error(str(e))
            raise typer.Exit(1)
        if unit is None:
            unit = state.settings.unit
        if total is None:
            total = sum(state.lifts[lid].one_rep_max for lid in ("squat", "bench", "deadlift"))

    try:
        score = calculate_dots(bodyweight, total, unit, gender)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps({"bodyweight": bodyweight, "total": total, "unit": unit, "dots": score}, indent=2))
        return

    views.console.print(
        f"Total {format_weight(total)} {unit} at {format_weight(bodyweight)} {unit} bodyweight: "
        f"DOTS [bold]{score:.2f}[/bold]"
    )
