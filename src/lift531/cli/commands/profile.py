"""Profile management commands: init, set-max, templates, accessories, settings, reset."""

import json
from dataclasses import replace
from typing import Annotated, Optional

import typer

from ...core.config import LIFT_IDS, LIFT_NAMES, TM_PERCENTAGE_MAX, TM_PERCENTAGE_MIN, UNITS
from ...core.config_loader import load_default_settings
from ...core.models import AccessoryTemplate, AppState, LiftSettings
from ...core.rounding import format_weight, round_weight
from ...core.templates.registry import TEMPLATE_REGISTRY
from ...io.serializers import (
    ValidationError,
    accessory_template_to_dict,
    parse_accessory_exercise,
    parse_plates,
    settings_to_dict,
)
from .. import views
from ..app import LIFT_HELP, DataDirOption, JsonOption, app, get_store


def _check_tm_percentage(tm_percentage: float) -> None:
    if not TM_PERCENTAGE_MIN <= tm_percentage <= TM_PERCENTAGE_MAX:
        views.print_error(
            f"TM percentage must be between {TM_PERCENTAGE_MIN} and {TM_PERCENTAGE_MAX}"
        )
        raise typer.Exit(1)


def _check_lift_id(lift_id: str) -> None:
    if lift_id not in LIFT_IDS:
        views.print_error(f"Unknown lift '{lift_id}'. Valid IDs: {', '.join(LIFT_IDS)}")
        raise typer.Exit(1)


@app.command()
def init(
    data_dir: DataDirOption = None,
    squat: Annotated[
        float,
        typer.Option("--squat", help="Squat 1RM (0 = set later)"),
    ] = 0,
    bench: Annotated[
        float,
        typer.Option("--bench", help="Bench press 1RM (0 = set later)"),
    ] = 0,
    deadlift: Annotated[
        float,
        typer.Option("--deadlift", help="Deadlift 1RM (0 = set later)"),
    ] = 0,
    ohp: Annotated[
        float,
        typer.Option("--ohp", help="Overhead press 1RM (0 = set later)"),
    ] = 0,
    unit: Annotated[
        Optional[str],
        typer.Option("--unit", "-u", help="Weight unit: lbs or kg"),
    ] = None,
    tm_percentage: Annotated[
        Optional[float],
        typer.Option("--tm-percentage", "-t", help="Training max as % of 1RM (80-95)"),
    ] = None,
    rounding: Annotated[
        Optional[float],
        typer.Option("--rounding", "-r", help="Round weights to this increment"),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite existing data without prompting"),
    ] = False,
) -> None:
    """
    Set up lifts and settings.

    Starting values come from ~/.lift531/config.yaml when present, then from
    the options given here.  Existing history is kept; only the state file
    is rewritten.
    """
    store = get_store(data_dir)

    if store.exists() and not force:
        if not views.confirm_action(f"Data already exists in {store.data_dir}. Overwrite settings?"):
            views.print_info("Cancelled.")
            raise typer.Exit(0)

    settings = load_default_settings()
    changes: dict = {}
    if unit is not None:
        if unit not in UNITS:
            views.print_error("Unit must be 'lbs' or 'kg'")
            raise typer.Exit(1)
        changes["unit"] = unit
    if tm_percentage is not None:
        _check_tm_percentage(tm_percentage)
        changes["tm_percentage"] = tm_percentage
    if rounding is not None:
        changes["rounding_increment"] = rounding

    maxes = {"squat": squat, "bench": bench, "deadlift": deadlift, "ohp": ohp}
    if any(v < 0 for v in maxes.values()):
        views.print_error("1RM values must be non-negative")
        raise typer.Exit(1)

    try:
        settings = replace(settings, **changes)
        state = AppState(
            settings=settings,
            lifts={lift_id: LiftSettings(one_rep_max=orm) for lift_id, orm in maxes.items()},
            is_onboarded=True,
        )
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    store.init(state)

    views.print_success(f"Initialized lift531 in {store.data_dir}")
    views.console.print(
        f"  Unit: {settings.unit}  |  TM: {format_weight(settings.tm_percentage)}%  |  "
        f"Rounding: {format_weight(settings.rounding_increment)}"
    )
    for lift_id, orm in maxes.items():
        value = f"{format_weight(orm)} {settings.unit}" if orm > 0 else "[dim]not set[/dim]"
        views.console.print(f"  {LIFT_NAMES[lift_id]}: {value}")


@app.command("set-max")
def set_max(
    lift_id: Annotated[str, typer.Argument(help=LIFT_HELP)],
    one_rep_max: Annotated[float, typer.Argument(help="New 1RM")],
    data_dir: DataDirOption = None,
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Date of the change (YYYY-MM-DD, default: today)"),
    ] = None,
) -> None:
    """
    Update a lift's 1RM.

    A training max history entry is recorded when the lift already had a
    1RM and the value changed.
    """
    _check_lift_id(lift_id)
    if one_rep_max <= 0:
        views.print_error("1RM must be positive")
        raise typer.Exit(1)

    store = get_store(data_dir)
    try:
        record = store.update_lift(lift_id, one_rep_max, date)
        state = store.load_state()
    except (FileNotFoundError, ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    unit = state.settings.unit
    views.print_success(f"{LIFT_NAMES[lift_id]} 1RM set to {format_weight(one_rep_max)} {unit}")
    if record is not None:
        views.print_info(
            f"Training max now {format_weight(round_weight(record.training_max, 0.1))} {unit} "
            f"(recorded in TM history)"
        )


@app.command("set-template")
def set_template(
    lift_id: Annotated[str, typer.Argument(help=LIFT_HELP)],
    template_id: Annotated[
        Optional[str],
        typer.Argument(help="Template ID (omit to list templates)"),
    ] = None,
    data_dir: DataDirOption = None,
    percentage: Annotated[
        Optional[float],
        typer.Option("--percentage", "-s", help="Supplemental percentage of TM (fixed templates)"),
    ] = None,
    supplemental_lift: Annotated[
        Optional[str],
        typer.Option(
            "--supplemental-lift",
            "-l",
            help="Compute supplemental work from another lift's TM ('same' to clear)",
        ),
    ] = None,
    accessories: Annotated[
        Optional[str],
        typer.Option(
            "--accessories",
            "-a",
            help="Accessory template ID to assign ('none' to clear)",
        ),
    ] = None,
) -> None:
    """
    Choose a lift's assistance template.

    Without a template ID, lists the available templates.
    """
    _check_lift_id(lift_id)

    if all(v is None for v in (template_id, percentage, supplemental_lift, accessories)):
        views.console.print("[bold]Available templates:[/bold]")
        for t in TEMPLATE_REGISTRY.values():
            views.console.print(f"  [cyan]{t.id:8}[/cyan] {t.name}: {t.description}")
        return

    changes: dict = {}
    if template_id is not None:
        template = TEMPLATE_REGISTRY.get(template_id)
        if template is None:
            views.print_error(
                f"Unknown template '{template_id}'. Available: {', '.join(TEMPLATE_REGISTRY)}"
            )
            raise typer.Exit(1)
        changes["template"] = template_id
        if percentage is None and template.default_percentage is not None:
            changes["supplemental_percentage"] = template.default_percentage
    if percentage is not None:
        if not 0 < percentage <= 100:
            views.print_error("Supplemental percentage must be between 0 and 100")
            raise typer.Exit(1)
        changes["supplemental_percentage"] = percentage
    if supplemental_lift is not None:
        if supplemental_lift == "same" or supplemental_lift == lift_id:
            changes["supplemental_lift_id"] = None
        else:
            _check_lift_id(supplemental_lift)
            changes["supplemental_lift_id"] = supplemental_lift
    if accessories is not None:
        changes["accessory_template_id"] = None if accessories == "none" else accessories

    store = get_store(data_dir)
    try:
        updated = store.update_lift_settings(lift_id, **changes)
    except (FileNotFoundError, ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    template = TEMPLATE_REGISTRY[updated.template]
    msg = f"{LIFT_NAMES[lift_id]}: {template.name}"
    if template.has_supplemental and template.percentage_source == "fixed":
        msg += f" @ {format_weight(updated.supplemental_percentage)}%"
    if updated.supplemental_lift_id is not None:
        msg += f" (supplemental from {LIFT_NAMES[updated.supplemental_lift_id]})"
    if updated.accessory_template_id is not None:
        msg += f", accessories: {updated.accessory_template_id}"
    views.print_success(msg)


@app.command()
def accessories(
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    List accessory templates and the lifts they are assigned to.
    """
    store = get_store(data_dir)
    try:
        state = store.load_state()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        templates = [accessory_template_to_dict(t) for t in state.accessory_templates]
        print(json.dumps(templates, indent=2))
        return

    views.print_accessory_templates(state.accessory_templates, state.lifts)


@app.command("add-accessories")
def add_accessories(
    template_id: Annotated[str, typer.Argument(help="Accessory template ID, e.g. 'upper-a'")],
    exercises: Annotated[
        list[str],
        typer.Option(
            "--exercise",
            "-e",
            help="Exercise as NAME:SETSxREPS, e.g. 'Dips:3x10' (repeat for more)",
        ),
    ],
    data_dir: DataDirOption = None,
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="Display name (default: the ID)"),
    ] = None,
    lift: Annotated[
        Optional[str],
        typer.Option("--lift", "-l", help="Also assign the template to this lift"),
    ] = None,
) -> None:
    """
    Create or replace an accessory template.

    Accessory work is tracked by sets completed only; no weight is kept.
    """
    if lift is not None:
        _check_lift_id(lift)

    store = get_store(data_dir)
    try:
        template = AccessoryTemplate(
            id=template_id,
            name=name or template_id,
            exercises=[parse_accessory_exercise(e) for e in exercises],
        )
        replaced = store.save_accessory_template(template)
        if lift is not None:
            store.update_lift_settings(lift, accessory_template_id=template.id)
    except (FileNotFoundError, ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    verb = "Replaced" if replaced else "Added"
    views.print_success(
        f"{verb} accessory template '{template.id}' ({len(template.exercises)} exercises)"
    )
    if lift is not None:
        views.print_info(f"Assigned to {LIFT_NAMES[lift]}.")


@app.command("remove-accessories")
def remove_accessories(
    template_id: Annotated[str, typer.Argument(help="Accessory template ID")],
    data_dir: DataDirOption = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation"),
    ] = False,
) -> None:
    """
    Delete an accessory template; lifts using it are left without one.
    """
    store = get_store(data_dir)

    if not yes and not views.confirm_action(f"Delete accessory template '{template_id}'?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    try:
        cleared = store.delete_accessory_template(template_id)
    except (FileNotFoundError, ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Removed accessory template '{template_id}'.")
    if cleared:
        names = ", ".join(LIFT_NAMES[lift_id] for lift_id in cleared)
        views.print_info(f"Unassigned from: {names}")


@app.command()
def settings(
    data_dir: DataDirOption = None,
    unit: Annotated[
        Optional[str],
        typer.Option("--unit", "-u", help="Weight unit: lbs or kg"),
    ] = None,
    tm_percentage: Annotated[
        Optional[float],
        typer.Option("--tm-percentage", "-t", help="Training max as % of 1RM (80-95)"),
    ] = None,
    rounding: Annotated[
        Optional[float],
        typer.Option("--rounding", "-r", help="Round weights to this increment"),
    ] = None,
    warmups: Annotated[
        Optional[bool],
        typer.Option("--warmups/--no-warmups", help="Show warm-up sets"),
    ] = None,
    bar_weight: Annotated[
        Optional[float],
        typer.Option("--bar-weight", "-b", help="Barbell weight"),
    ] = None,
    plates: Annotated[
        Optional[str],
        typer.Option("--plates", help="Available plates, comma-separated (e.g. 45,25,10,5,2.5)"),
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show or update global settings.

    Without options, prints the current settings.
    """
    store = get_store(data_dir)

    changes: dict = {}
    if unit is not None:
        if unit not in UNITS:
            views.print_error("Unit must be 'lbs' or 'kg'")
            raise typer.Exit(1)
        changes["unit"] = unit
    if tm_percentage is not None:
        _check_tm_percentage(tm_percentage)
        changes["tm_percentage"] = tm_percentage
    if rounding is not None:
        changes["rounding_increment"] = rounding
    if warmups is not None:
        changes["show_warmups"] = warmups
    if bar_weight is not None:
        changes["bar_weight"] = bar_weight

    try:
        if plates is not None:
            changes["available_plates"] = parse_plates(plates)
        if changes:
            current = store.update_settings(**changes)
        else:
            current = store.load_state().settings
    except (FileNotFoundError, ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps(settings_to_dict(current), indent=2))
        return

    if changes:
        views.print_success("Settings updated.")
    views.console.print(f"  Unit:          {current.unit}")
    views.console.print(f"  TM percentage: {format_weight(current.tm_percentage)}%")
    views.console.print(f"  Rounding:      {format_weight(current.rounding_increment)}")
    views.console.print(f"  Warm-ups:      {'on' if current.show_warmups else 'off'}")
    views.console.print(f"  Bar weight:    {format_weight(current.bar_weight)}")
    views.console.print(
        f"  Plates:        {', '.join(format_weight(p) for p in current.available_plates)}"
    )


@app.command()
def reset(
    data_dir: DataDirOption = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation"),
    ] = False,
) -> None:
    """
    Delete all history and restore default settings.
    """
    store = get_store(data_dir)

    if not store.exists():
        views.print_error(f"No data found in {store.data_dir}")
        raise typer.Exit(1)

    if not yes and not views.confirm_action("Delete ALL lifts, PRs, TM history and workouts?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    store.reset(AppState(settings=load_default_settings()))
    views.print_success("All data reset. Run 'init' to set up your lifts again.")
