"""
JSON serialization for lift531 data models.

Handles conversion between dataclasses and JSON-compatible dicts.
"""

import json
import re
from datetime import datetime
from typing import Any

from ..core.config import LIFT_IDS, UNITS
from ..core.models import (
    AccessoryExercise,
    AccessoryLog,
    AccessoryTemplate,
    AppState,
    LiftSettings,
    LoggedSet,
    PRRecord,
    Settings,
    SupplementalLog,
    TMHistoryRecord,
    WorkoutRecord,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_date(date_str: str) -> str:
    """
    Validate and normalize date string to ISO format.

    Args:
        date_str: Date string to validate

    Returns:
        Normalized YYYY-MM-DD string

    Raises:
        ValidationError: If date format is invalid
    """
    if not isinstance(date_str, str) or not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValidationError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValidationError(f"Invalid date: {date_str}") from e

    return date_str


def validate_lift_id(lift_id: str) -> str:
    """
    Validate a lift id.

    Raises:
        ValidationError: If lift_id is not one of the four main lifts
    """
    if lift_id not in LIFT_IDS:
        raise ValidationError(f"Invalid lift: {lift_id!r}. Must be one of {LIFT_IDS}")
    return lift_id


def validate_week(week: Any) -> int:
    """
    Validate a cycle week number.

    Raises:
        ValidationError: If week is not 1-4
    """
    if week not in (1, 2, 3, 4):
        raise ValidationError(f"Invalid week: {week!r}. Must be 1, 2, 3 or 4")
    return int(week)


def validate_positive(value: int | float, name: str) -> int | float:
    """
    Validate that a value is positive.

    Args:
        value: Value to validate
        name: Name for error message

    Returns:
        The value if valid

    Raises:
        ValidationError: If value is not positive
    """
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


# ---------------------------------------------------------------------------
# Settings and state
# ---------------------------------------------------------------------------


def settings_to_dict(settings: Settings) -> dict[str, Any]:
    """Convert Settings to JSON-compatible dict."""
    return {
        "tm_percentage": settings.tm_percentage,
        "unit": settings.unit,
        "rounding_increment": settings.rounding_increment,
        "show_warmups": settings.show_warmups,
        "bar_weight": settings.bar_weight,
        "available_plates": list(settings.available_plates),
    }


def dict_to_settings(data: dict[str, Any]) -> Settings:
    """
    Convert dict to Settings.

    Missing keys fall back to the defaults so older files keep loading.

    Raises:
        ValidationError: If data is invalid
    """
    defaults = Settings()
    unit = data.get("unit", defaults.unit)
    if unit not in UNITS:
        raise ValidationError(f"Invalid unit: {unit!r}. Must be 'lbs' or 'kg'")
    validate_positive(data.get("rounding_increment", defaults.rounding_increment), "rounding_increment")
    validate_positive(data.get("tm_percentage", defaults.tm_percentage), "tm_percentage")

    return Settings(
        tm_percentage=float(data.get("tm_percentage", defaults.tm_percentage)),
        unit=unit,
        rounding_increment=float(data.get("rounding_increment", defaults.rounding_increment)),
        show_warmups=bool(data.get("show_warmups", defaults.show_warmups)),
        bar_weight=float(data.get("bar_weight", defaults.bar_weight)),
        available_plates=[
            float(p) for p in data.get("available_plates", defaults.available_plates)
        ],
    )


def lift_settings_to_dict(lift: LiftSettings) -> dict[str, Any]:
    """Convert LiftSettings to JSON-compatible dict."""
    return {
        "one_rep_max": lift.one_rep_max,
        "template": lift.template,
        "supplemental_percentage": lift.supplemental_percentage,
        "supplemental_lift_id": lift.supplemental_lift_id,
        "accessory_template_id": lift.accessory_template_id,
    }


def dict_to_lift_settings(data: dict[str, Any]) -> LiftSettings:
    """
    Convert dict to LiftSettings.

    Raises:
        ValidationError: If data is invalid
    """
    validate_non_negative(data.get("one_rep_max", 0), "one_rep_max")
    sup_lift = data.get("supplemental_lift_id")
    if sup_lift is not None:
        validate_lift_id(sup_lift)

    defaults = LiftSettings()
    return LiftSettings(
        one_rep_max=float(data.get("one_rep_max", 0)),
        template=str(data.get("template", defaults.template)),
        supplemental_percentage=float(
            data.get("supplemental_percentage", defaults.supplemental_percentage)
        ),
        supplemental_lift_id=sup_lift,
        accessory_template_id=data.get("accessory_template_id"),
    )


def accessory_template_to_dict(template: AccessoryTemplate) -> dict[str, Any]:
    """Convert AccessoryTemplate to JSON-compatible dict."""
    return {
        "id": template.id,
        "name": template.name,
        "exercises": [
            {"name": e.name, "sets": e.sets, "reps": e.reps} for e in template.exercises
        ],
    }


def dict_to_accessory_template(data: dict[str, Any]) -> AccessoryTemplate:
    """
    Convert dict to AccessoryTemplate.

    Raises:
        ValidationError: If data is invalid
    """
    try:
        return AccessoryTemplate(
            id=str(data["id"]),
            name=str(data.get("name", data["id"])),
            exercises=[
                AccessoryExercise(name=str(e["name"]), sets=int(e["sets"]), reps=int(e["reps"]))
                for e in data.get("exercises", [])
            ],
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


def app_state_to_dict(state: AppState) -> dict[str, Any]:
    """Convert AppState to JSON-compatible dict."""
    return {
        "settings": settings_to_dict(state.settings),
        "lifts": {lift_id: lift_settings_to_dict(l) for lift_id, l in state.lifts.items()},
        "current_week": state.current_week,
        "is_onboarded": state.is_onboarded,
        "accessory_templates": [accessory_template_to_dict(t) for t in state.accessory_templates],
    }


def dict_to_app_state(data: dict[str, Any]) -> AppState:
    """
    Convert dict to AppState.

    Raises:
        ValidationError: If data is invalid
    """
    raw_lifts = data.get("lifts") or {}
    for lift_id in raw_lifts:
        validate_lift_id(lift_id)

    return AppState(
        settings=dict_to_settings(data.get("settings") or {}),
        lifts={lift_id: dict_to_lift_settings(d) for lift_id, d in raw_lifts.items()},
        current_week=validate_week(data.get("current_week", 1)),
        is_onboarded=bool(data.get("is_onboarded", False)),
        accessory_templates=[
            dict_to_accessory_template(t) for t in data.get("accessory_templates") or []
        ],
    )


# ---------------------------------------------------------------------------
# History records
# ---------------------------------------------------------------------------


def pr_record_to_dict(record: PRRecord) -> dict[str, Any]:
    """Convert PRRecord to JSON-compatible dict."""
    return {
        "lift_id": record.lift_id,
        "date": record.date,
        "weight": record.weight,
        "reps": record.reps,
        "estimated_1rm": record.estimated_1rm,
        "week": record.week,
    }


def dict_to_pr_record(data: dict[str, Any]) -> PRRecord:
    """
    Convert dict to PRRecord.

    Raises:
        ValidationError: If data is invalid
    """
    validate_lift_id(data["lift_id"])
    validate_date(data["date"])
    validate_positive(data["reps"], "reps")
    validate_week(data["week"])

    return PRRecord(
        lift_id=data["lift_id"],
        date=data["date"],
        weight=float(data["weight"]),
        reps=int(data["reps"]),
        estimated_1rm=float(data["estimated_1rm"]),
        week=int(data["week"]),
    )


def tm_record_to_dict(record: TMHistoryRecord) -> dict[str, Any]:
    """Convert TMHistoryRecord to JSON-compatible dict."""
    d: dict[str, Any] = {
        "lift_id": record.lift_id,
        "date": record.date,
        "one_rep_max": record.one_rep_max,
        "training_max": record.training_max,
    }
    # Flag only written when set
    if record.is_cycle_increment:
        d["is_cycle_increment"] = True
    return d


def dict_to_tm_record(data: dict[str, Any]) -> TMHistoryRecord:
    """
    Convert dict to TMHistoryRecord.

    Raises:
        ValidationError: If data is invalid
    """
    validate_lift_id(data["lift_id"])
    validate_date(data["date"])
    validate_positive(data["one_rep_max"], "one_rep_max")

    return TMHistoryRecord(
        lift_id=data["lift_id"],
        date=data["date"],
        one_rep_max=float(data["one_rep_max"]),
        training_max=float(data["training_max"]),
        is_cycle_increment=bool(data.get("is_cycle_increment", False)),
    )


def _logged_set_to_dict(s: LoggedSet) -> dict[str, Any]:
    d: dict[str, Any] = {
        "weight": s.weight,
        "target_reps": s.target_reps,
        "percentage": s.percentage,
        "completed": s.completed,
    }
    if s.is_amrap:
        d["is_amrap"] = True
        d["actual_reps"] = s.actual_reps
    return d


def _dict_to_logged_set(data: dict[str, Any]) -> LoggedSet:
    validate_non_negative(data.get("target_reps", 0), "target_reps")
    actual = data.get("actual_reps")
    if actual is not None:
        validate_non_negative(actual, "actual_reps")

    return LoggedSet(
        weight=float(data["weight"]),
        target_reps=int(data["target_reps"]),
        percentage=float(data.get("percentage", 0)),
        is_amrap=bool(data.get("is_amrap", False)),
        completed=bool(data.get("completed", False)),
        actual_reps=int(actual) if actual is not None else None,
    )


def workout_to_dict(workout: WorkoutRecord) -> dict[str, Any]:
    """Convert WorkoutRecord to JSON-compatible dict."""
    d: dict[str, Any] = {
        "lift_id": workout.lift_id,
        "week": workout.week,
        "date": workout.date,
        "one_rep_max": workout.one_rep_max,
        "training_max": workout.training_max,
        "main_sets": [_logged_set_to_dict(s) for s in workout.main_sets],
        "rpe": workout.rpe,
        "note": workout.note,
    }
    if workout.supplemental is not None:
        d["supplemental"] = {
            "sets": workout.supplemental.sets,
            "reps": workout.supplemental.reps,
            "weight": workout.supplemental.weight,
            "completed_sets": workout.supplemental.completed_sets,
        }
    if workout.joker_sets:
        d["joker_sets"] = [_logged_set_to_dict(s) for s in workout.joker_sets]
    if workout.accessories:
        d["accessories"] = [
            {"name": a.name, "sets": a.sets, "reps": a.reps, "completed_sets": a.completed_sets}
            for a in workout.accessories
        ]
    return d


def dict_to_workout(data: dict[str, Any]) -> WorkoutRecord:
    """
    Convert dict to WorkoutRecord.

    Raises:
        ValidationError: If data is invalid
    """
    validate_lift_id(data["lift_id"])
    validate_week(data["week"])
    validate_date(data["date"])

    sup = data.get("supplemental")
    supplemental = None
    if sup:
        supplemental = SupplementalLog(
            sets=int(sup["sets"]),
            reps=int(sup["reps"]),
            weight=float(sup["weight"]),
            completed_sets=int(sup.get("completed_sets", 0)),
        )

    try:
        return WorkoutRecord(
            lift_id=data["lift_id"],
            week=int(data["week"]),
            date=data["date"],
            one_rep_max=float(data["one_rep_max"]),
            training_max=float(data["training_max"]),
            main_sets=[_dict_to_logged_set(s) for s in data.get("main_sets", [])],
            supplemental=supplemental,
            joker_sets=[_dict_to_logged_set(s) for s in data.get("joker_sets", [])],
            accessories=[
                AccessoryLog(
                    name=str(a["name"]),
                    sets=int(a["sets"]),
                    reps=int(a["reps"]),
                    completed_sets=int(a.get("completed_sets", 0)),
                )
                for a in data.get("accessories", [])
            ],
            rpe=data.get("rpe"),
            note=data.get("note"),
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


def to_json_line(data: dict[str, Any]) -> str:
    """
    Serialize a record dict to a single JSON line.

    Returns:
        JSON string (single line, no trailing newline)
    """
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


# ---------------------------------------------------------------------------
# CLI input parsing
# ---------------------------------------------------------------------------


def parse_set_numbers(text: str) -> list[int]:
    """
    Parse a list of 1-based set numbers.

    Accepts comma- or space-separated numbers and ranges:
        "1,2,3"   → [1, 2, 3]
        "1-3"     → [1, 2, 3]
        "1 3"     → [1, 3]

    Raises:
        ValidationError: If format is invalid
    """
    if not text or not text.strip():
        raise ValidationError("Set list cannot be empty")

    numbers: list[int] = []
    for part in re.split(r"[,\s]+", text.strip()):
        if not part:
            continue
        m = re.fullmatch(r"(\d+)-(\d+)", part)
        if m:
            lo, hi = int(m.group(1)), int(m.group(2))
            if lo < 1 or hi < lo:
                raise ValidationError(f"Invalid set range: '{part}'")
            numbers.extend(range(lo, hi + 1))
            continue
        if re.fullmatch(r"\d+", part) and int(part) >= 1:
            numbers.append(int(part))
            continue
        raise ValidationError(
            f"Invalid set number: '{part}'. Use numbers like 1,2,3 or a range like 1-3."
        )

    return sorted(set(numbers))


def parse_plates(text: str) -> list[float]:
    """
    Parse a comma-separated plate list ("45,25,10,5,2.5").

    Raises:
        ValidationError: If any entry is not a positive number
    """
    plates: list[float] = []
    for part in [p.strip() for p in text.split(",") if p.strip()]:
        try:
            value = float(part)
        except ValueError as e:
            raise ValidationError(f"Invalid plate weight: '{part}'") from e
        validate_positive(value, "plate weight")
        plates.append(value)
    if not plates:
        raise ValidationError("Plate list cannot be empty")
    return plates


def parse_accessory_exercise(text: str) -> AccessoryExercise:
    """
    Parse one accessory exercise written as NAME:SETSxREPS.

        "Dips:3x10"          → Dips, 3 sets of 10
        "Hanging leg raise:5x15"

    Raises:
        ValidationError: If format is invalid
    """
    name, sep, scheme = text.rpartition(":")
    m = re.fullmatch(r"\s*(\d+)\s*[x×]\s*(\d+)\s*", scheme)
    if not sep or not name.strip() or m is None:
        raise ValidationError(
            f"Invalid exercise: '{text}'. Use NAME:SETSxREPS, e.g. 'Dips:3x10'."
        )
    try:
        return AccessoryExercise(name=name.strip(), sets=int(m.group(1)), reps=int(m.group(2)))
    except ValueError as e:
        raise ValidationError(str(e)) from e


def parse_counts(text: str) -> list[int]:
    """
    Parse a comma-separated list of non-negative counts ("3,3,2").

    Raises:
        ValidationError: If any entry is not a whole number ≥ 0
    """
    counts: list[int] = []
    for part in [p.strip() for p in text.split(",")]:
        if not re.fullmatch(r"\d+", part):
            raise ValidationError(f"Invalid count: '{part}'. Use whole numbers like 3,3,2.")
        counts.append(int(part))
    return counts
