"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of prescriptions and history.
"""

from rich.console import Console
from rich.table import Table

from ..core.calculator import DELOAD_WEEK
from ..core.config import LIFT_NAMES
from ..core.models import (
    AccessoryTemplate,
    LiftSettings,
    PlateBreakdown,
    PrescribedSet,
    PRRecord,
    TMHistoryRecord,
    WorkoutRecord,
)
from ..core.progression import LiftDay
from ..core.rounding import calculate_plates, format_weight, round_weight
from ..core.templates.registry import TEMPLATE_REGISTRY

console = Console()


def _fmt_reps(s: PrescribedSet) -> str:
    return f"{s.reps}+" if s.is_amrap else str(s.reps)


def format_plates(breakdown: PlateBreakdown) -> str:
    """
    One-line per-side plate list, e.g. "45×2 + 10 + 2.5".

    A leftover that no plate covers is shown in brackets.
    """
    if not breakdown.plates:
        text = "bar only"
    else:
        parts = [
            format_weight(p.weight) if p.count == 1 else f"{format_weight(p.weight)}×{p.count}"
            for p in breakdown.plates
        ]
        text = " + ".join(parts)
    if breakdown.remainder > 0:
        text += f" [dim](+{format_weight(breakdown.remainder)} short)[/dim]"
    return text


def format_sets_table(
    sets: list[PrescribedSet],
    unit: str,
    title: str | None = None,
    bar_weight: float | None = None,
    available_plates: list[float] | None = None,
) -> Table:
    """
    Create a Rich table of prescribed sets.

    Args:
        sets: Sets to display
        unit: Weight unit label
        title: Optional table title
        bar_weight: When given with available_plates, adds a per-side
            plates column
        available_plates: Plate denominations for the plates column

    Returns:
        Rich Table object
    """
    show_plates = bar_weight is not None and available_plates is not None

    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Set", justify="right", style="dim")
    table.add_column("Type", style="magenta")
    table.add_column("%", justify="right")
    table.add_column(f"Weight ({unit})", justify="right", style="bold")
    table.add_column("Reps", justify="right")
    if show_plates:
        table.add_column("Plates / side")

    for s in sets:
        row = [
            str(s.set_number),
            s.type,
            format_weight(s.percentage),
            format_weight(s.weight),
            f"[bold green]{_fmt_reps(s)}[/bold green]" if s.is_amrap else _fmt_reps(s),
        ]
        if show_plates:
            row.append(format_plates(calculate_plates(s.weight, bar_weight, available_plates)))  # type: ignore[arg-type]
        table.add_row(*row)

    return table


def print_lift_day(
    day: LiftDay,
    bar_weight: float | None = None,
    available_plates: list[float] | None = None,
) -> None:
    """
    Print a lift's prescription for a week: TM header, main sets, supplemental
    and accessories.
    """
    template = TEMPLATE_REGISTRY.get(day.template)
    template_name = template.name if template is not None else day.template

    console.print()
    console.print(
        f"[bold cyan]{LIFT_NAMES[day.lift_id]}[/bold cyan] — week {day.week}"
        + (" [yellow](deload)[/yellow]" if day.week == DELOAD_WEEK else "")
    )
    console.print(
        f"  1RM: {format_weight(day.one_rep_max)} {day.unit}  |  "
        f"TM: {format_weight(round_weight(day.training_max, 0.1))} {day.unit}  |  "
        f"Template: {template_name}"
    )

    if day.one_rep_max <= 0:
        print_warning(f"No 1RM set for {LIFT_NAMES[day.lift_id]}. Use 'set-max'.")
        return

    console.print(format_sets_table(day.main_sets, day.unit, None, bar_weight, available_plates))

    if day.supplemental is not None and day.week != DELOAD_WEEK:
        sup = day.supplemental
        source = ""
        if day.supplemental_lift_id != day.lift_id:
            source = f" [dim](from {LIFT_NAMES[day.supplemental_lift_id]} TM)[/dim]"
        console.print(
            f"  [bold]Supplemental {sup.template_name}:[/bold] {sup.display} {day.unit}"
            f" ({format_weight(sup.percentage)}%){source}"
        )

    if day.accessories is not None:
        console.print(
            f"  [bold]Accessories ({day.accessories.name}):[/bold] "
            + ", ".join(f"{e.name} {e.sets}×{e.reps}" for e in day.accessories.exercises)
        )


def print_pr_history(records: list[PRRecord], unit: str) -> None:
    """
    Print PR history as a table.

    Args:
        records: PR records in append order
        unit: Weight unit label
    """
    if not records:
        console.print("[yellow]No PRs recorded yet.[/yellow]")
        return

    table = Table(title="AMRAP Records", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Lift")
    table.add_column("Week", justify="right")
    table.add_column(f"Weight ({unit})", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("Est. 1RM", justify="right", style="bold")

    for i, r in enumerate(records, 1):
        table.add_row(
            str(i),
            r.date,
            LIFT_NAMES[r.lift_id],
            str(r.week),
            format_weight(r.weight),
            str(r.reps),
            format_weight(r.estimated_1rm),
        )

    console.print(table)


def print_tm_history(records: list[TMHistoryRecord], unit: str) -> None:
    """Print training-max history as a table."""
    if not records:
        console.print("[yellow]No training max changes recorded yet.[/yellow]")
        return

    table = Table(title="Training Max History", show_header=True, header_style="bold")
    table.add_column("Date", style="cyan")
    table.add_column("Lift")
    table.add_column(f"1RM ({unit})", justify="right")
    table.add_column(f"TM ({unit})", justify="right", style="bold")
    table.add_column("Source")

    for r in records:
        table.add_row(
            r.date,
            LIFT_NAMES[r.lift_id],
            format_weight(r.one_rep_max),
            format_weight(round_weight(r.training_max, 0.1)),
            "cycle" if r.is_cycle_increment else "manual",
        )

    console.print(table)


def _accessory_summary(w: WorkoutRecord) -> str:
    if not w.accessories:
        return "-"
    done = sum(a.completed_sets for a in w.accessories)
    total = sum(a.sets for a in w.accessories)
    return f"{done}/{total}"


def print_workouts(workouts: list[WorkoutRecord], unit: str) -> None:
    """Print finished workouts as a table."""
    if not workouts:
        console.print("[yellow]No workouts recorded yet.[/yellow]")
        return

    table = Table(title="Workout History", show_header=True, header_style="bold")
    table.add_column("Date", style="cyan")
    table.add_column("Lift")
    table.add_column("Week", justify="right")
    table.add_column("Main", justify="right")
    table.add_column(f"Top set ({unit})")
    table.add_column("Suppl.", justify="right")
    table.add_column("Jokers", justify="right")
    table.add_column("Acc.", justify="right")
    table.add_column("RPE", justify="right")

    for w in workouts:
        done = sum(1 for s in w.main_sets if s.completed)
        top = w.main_sets[-1] if w.main_sets else None
        if top is None:
            top_str = "-"
        else:
            top_str = f"{format_weight(top.weight)} × {top.target_reps}{'+' if top.is_amrap else ''}"
            if w.amrap_reps is not None:
                top_str += f" → {w.amrap_reps}"
        sup = w.supplemental
        table.add_row(
            w.date,
            LIFT_NAMES[w.lift_id],
            str(w.week),
            f"{done}/{len(w.main_sets)}",
            top_str,
            f"{sup.completed_sets}/{sup.sets}" if sup is not None else "-",
            str(len(w.joker_sets)) if w.joker_sets else "-",
            _accessory_summary(w),
            str(w.rpe) if w.rpe is not None else "-",
        )

    console.print(table)


def print_accessory_templates(
    templates: list[AccessoryTemplate],
    lifts: dict[str, LiftSettings],
) -> None:
    """Print accessory templates with their exercises and assigned lifts."""
    if not templates:
        console.print("[yellow]No accessory templates yet. Use 'add-accessories'.[/yellow]")
        return

    table = Table(title="Accessory Templates", show_header=True, header_style="bold")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Exercises")
    table.add_column("Lifts")

    for t in templates:
        used_by = [
            LIFT_NAMES[lift_id]
            for lift_id, lift in lifts.items()
            if lift.accessory_template_id == t.id
        ]
        table.add_row(
            t.id,
            t.name,
            "\n".join(f"{e.name} {e.sets}×{e.reps}" for e in t.exercises),
            ", ".join(used_by) or "-",
        )

    console.print(table)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
