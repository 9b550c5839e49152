"""
Data models for lift531.

All core dataclasses representing prescriptions, settings, and history.
Generated records (sets, plans, plate breakdowns) are plain values built
fresh on every call; history records are append-only.
"""

import re
from dataclasses import dataclass, field
from typing import Literal

from .config import (
    DEFAULT_AVAILABLE_PLATES,
    DEFAULT_BAR_WEIGHT,
    DEFAULT_ROUNDING_INCREMENT,
    DEFAULT_SHOW_WARMUPS,
    DEFAULT_SUPPLEMENTAL_PERCENTAGE,
    DEFAULT_TEMPLATE,
    DEFAULT_TM_PERCENTAGE,
    DEFAULT_UNIT,
    LIFT_IDS,
    UNITS,
)

SetType = Literal["warmup", "work", "joker"]
Unit = Literal["lbs", "kg"]
PercentageSource = Literal["fixed", "first_set", "second_set"]


def _validate_date(date_str: str) -> None:
    """Validate date string is ISO format YYYY-MM-DD."""
    if not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValueError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    from datetime import datetime

    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValueError(f"Invalid date: {date_str}") from e


def _validate_lift_id(lift_id: str) -> None:
    if lift_id not in LIFT_IDS:
        raise ValueError(f"Unknown lift '{lift_id}'. Valid IDs: {', '.join(LIFT_IDS)}")


@dataclass(frozen=True)
class SchemeEntry:
    """One row of a week or warm-up scheme."""

    percentage: int
    reps: int
    is_amrap: bool = False


@dataclass
class PrescribedSet:
    """
    A single prescribed set.

    ``reps`` is always the minimum rep target; an open-ended top set is
    marked by ``is_amrap`` rather than by a special reps value.
    """

    type: SetType
    set_number: int  # 1-based within its group
    weight: float
    reps: int
    percentage: float
    is_amrap: bool = False


@dataclass
class SupplementalPlan:
    """Supplemental prescription for one lift on one week."""

    template_name: str
    sets: int
    reps: int
    weight: float
    percentage: float
    display: str


@dataclass
class PlateCount:
    """Number of plates of one denomination loaded per side."""

    weight: float
    count: int


@dataclass
class PlateBreakdown:
    """Per-side plate loading, largest plate first."""

    plates: list[PlateCount] = field(default_factory=list)
    remainder: float = 0  # leftover per side that no plate covers


@dataclass
class PRRecord:
    """An AMRAP result and its Epley estimate."""

    lift_id: str
    date: str  # ISO format: YYYY-MM-DD
    weight: float
    reps: int
    estimated_1rm: float
    week: int

    def __post_init__(self) -> None:
        """Validate PR data."""
        _validate_lift_id(self.lift_id)
        _validate_date(self.date)
        if self.reps <= 0:
            raise ValueError("reps must be positive")
        if self.week not in (1, 2, 3, 4):
            raise ValueError(f"week must be 1-4, got {self.week}")


@dataclass
class TMHistoryRecord:
    """A 1RM change and the training max it produced."""

    lift_id: str
    date: str  # ISO format: YYYY-MM-DD
    one_rep_max: float
    training_max: float
    is_cycle_increment: bool = False

    def __post_init__(self) -> None:
        """Validate TM history data."""
        _validate_lift_id(self.lift_id)
        _validate_date(self.date)
        if self.one_rep_max <= 0:
            raise ValueError("one_rep_max must be positive")


@dataclass
class Settings:
    """Global settings shared by all lifts."""

    tm_percentage: float = DEFAULT_TM_PERCENTAGE
    unit: Unit = DEFAULT_UNIT  # type: ignore[assignment]
    rounding_increment: float = DEFAULT_ROUNDING_INCREMENT
    show_warmups: bool = DEFAULT_SHOW_WARMUPS
    bar_weight: float = DEFAULT_BAR_WEIGHT
    available_plates: list[float] = field(
        default_factory=lambda: list(DEFAULT_AVAILABLE_PLATES)
    )

    def __post_init__(self) -> None:
        """Validate settings."""
        if self.unit not in UNITS:
            raise ValueError(f"Invalid unit: {self.unit!r}. Must be 'lbs' or 'kg'.")
        if self.rounding_increment <= 0:
            raise ValueError("rounding_increment must be positive")
        if self.tm_percentage <= 0:
            raise ValueError("tm_percentage must be positive")
        if self.bar_weight < 0:
            raise ValueError("bar_weight must be non-negative")
        if any(p <= 0 for p in self.available_plates):
            raise ValueError("available_plates must all be positive")


@dataclass
class LiftSettings:
    """
    Per-lift configuration.

    ``one_rep_max == 0`` means the lift has not been initialised yet.
    ``supplemental_lift_id`` computes supplemental work from another lift's
    training max (e.g. bench BBB done with overhead press).
    ``accessory_template_id`` names one of the user's accessory templates.
    """

    one_rep_max: float = 0
    template: str = DEFAULT_TEMPLATE
    supplemental_percentage: float = DEFAULT_SUPPLEMENTAL_PERCENTAGE
    supplemental_lift_id: str | None = None
    accessory_template_id: str | None = None

    def __post_init__(self) -> None:
        """Validate lift settings."""
        if self.one_rep_max < 0:
            raise ValueError("one_rep_max must be non-negative")
        if self.supplemental_lift_id is not None:
            _validate_lift_id(self.supplemental_lift_id)

    @property
    def is_initialized(self) -> bool:
        return self.one_rep_max > 0


@dataclass
class AccessoryExercise:
    """One assistance exercise: bodyweight or free-form, no load tracked."""

    name: str
    sets: int
    reps: int

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("exercise name cannot be empty")
        if self.sets < 1:
            raise ValueError(f"sets must be at least 1, got {self.sets}")
        if self.reps < 1:
            raise ValueError(f"reps must be at least 1, got {self.reps}")


@dataclass
class AccessoryTemplate:
    """
    A user-defined list of accessory exercises.

    Unlike the supplemental templates, these are created by the user and
    stored in state.json; a lift points at one by id.
    """

    id: str
    name: str
    exercises: list[AccessoryExercise] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not re.fullmatch(r"[a-z0-9][a-z0-9_-]*", self.id):
            raise ValueError(
                f"Invalid accessory template id: {self.id!r}. "
                "Use lowercase letters, digits, '-' and '_'."
            )
        if not self.exercises:
            raise ValueError("accessory template needs at least one exercise")


@dataclass
class AppState:
    """
    Complete persisted state minus the append-only history lists.
    """

    settings: Settings = field(default_factory=Settings)
    lifts: dict[str, LiftSettings] = field(
        default_factory=lambda: {lift_id: LiftSettings() for lift_id in LIFT_IDS}
    )
    current_week: int = 1
    is_onboarded: bool = False
    accessory_templates: list[AccessoryTemplate] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate state."""
        if self.current_week not in (1, 2, 3, 4):
            raise ValueError(f"current_week must be 1-4, got {self.current_week}")
        for lift_id in self.lifts:
            _validate_lift_id(lift_id)
        # Fill lifts that an older state file did not know about
        for lift_id in LIFT_IDS:
            self.lifts.setdefault(lift_id, LiftSettings())

        ids = [t.id for t in self.accessory_templates]
        if len(ids) != len(set(ids)):
            raise ValueError("accessory template ids must be unique")
        for lift_id, lift in self.lifts.items():
            if lift.accessory_template_id is not None and lift.accessory_template_id not in ids:
                raise ValueError(
                    f"{lift_id}: unknown accessory template '{lift.accessory_template_id}'"
                )

    def get_accessory_template(self, template_id: str) -> AccessoryTemplate | None:
        for t in self.accessory_templates:
            if t.id == template_id:
                return t
        return None


@dataclass
class LoggedSet:
    """A prescribed set as captured when a workout is finished."""

    weight: float
    target_reps: int
    percentage: float
    is_amrap: bool = False
    completed: bool = False
    actual_reps: int | None = None  # only recorded for AMRAP sets

    def __post_init__(self) -> None:
        if self.target_reps < 0:
            raise ValueError("target_reps must be non-negative")
        if self.actual_reps is not None and self.actual_reps < 0:
            raise ValueError("actual_reps must be non-negative")


@dataclass
class SupplementalLog:
    """Supplemental work as captured when a workout is finished."""

    sets: int
    reps: int
    weight: float
    completed_sets: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.completed_sets <= self.sets:
            raise ValueError(
                f"completed_sets must be between 0 and {self.sets}, got {self.completed_sets}"
            )


@dataclass
class AccessoryLog:
    """One accessory exercise as captured when a workout is finished."""

    name: str
    sets: int
    reps: int
    completed_sets: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.completed_sets <= self.sets:
            raise ValueError(
                f"{self.name}: completed_sets must be between 0 and {self.sets}, "
                f"got {self.completed_sets}"
            )


@dataclass
class WorkoutRecord:
    """
    A finished training session for one lift.

    Contains the prescription that was shown and what was actually done.
    """

    lift_id: str
    week: int
    date: str  # ISO format: YYYY-MM-DD
    one_rep_max: float
    training_max: float
    main_sets: list[LoggedSet] = field(default_factory=list)
    supplemental: SupplementalLog | None = None
    joker_sets: list[LoggedSet] = field(default_factory=list)
    accessories: list[AccessoryLog] = field(default_factory=list)
    rpe: int | None = None
    note: str | None = None

    def __post_init__(self) -> None:
        """Validate workout data."""
        _validate_lift_id(self.lift_id)
        _validate_date(self.date)
        if self.week not in (1, 2, 3, 4):
            raise ValueError(f"week must be 1-4, got {self.week}")
        if self.rpe is not None and not 1 <= self.rpe <= 10:
            raise ValueError(f"rpe must be between 1 and 10, got {self.rpe}")

    @property
    def amrap_reps(self) -> int | None:
        """Reps recorded on the AMRAP set, if any."""
        for s in self.main_sets:
            if s.is_amrap and s.actual_reps is not None:
                return s.actual_reps
        return None
