"""
File-based storage for settings, lifts and training history.

Layout inside the data directory:

  state.json             settings, per-lift settings, current week,
                         accessory templates
  pr_history.jsonl       one PRRecord per line, append-only
  tm_history.jsonl       one TMHistoryRecord per line, append-only
  workout_history.jsonl  one WorkoutRecord per line, append-only

History files are only ever appended to; a full reset is the one operation
that clears them.
"""

import json
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, TypeVar

from ..core.models import (
    AccessoryTemplate,
    AppState,
    LiftSettings,
    PRRecord,
    Settings,
    TMHistoryRecord,
    WorkoutRecord,
)
from ..core.progression import tm_change_record
from ..core.templates.registry import get_template
from .serializers import (
    ValidationError,
    app_state_to_dict,
    dict_to_app_state,
    dict_to_pr_record,
    dict_to_tm_record,
    dict_to_workout,
    pr_record_to_dict,
    tm_record_to_dict,
    to_json_line,
    workout_to_dict,
)

T = TypeVar("T")

STATE_FILE = "state.json"
PR_HISTORY_FILE = "pr_history.jsonl"
TM_HISTORY_FILE = "tm_history.jsonl"
WORKOUT_HISTORY_FILE = "workout_history.jsonl"


class StateStore:
    """
    Manages lift531 data stored under one directory.

    state.json is rewritten on every update; the three history files are
    JSONL and grow by appending one line per record.
    """

    def __init__(self, data_dir: str | Path):
        """
        Initialize the store.

        Args:
            data_dir: Directory holding the data files
        """
        self.data_dir = Path(data_dir)
        self.state_path = self.data_dir / STATE_FILE
        self.pr_history_path = self.data_dir / PR_HISTORY_FILE
        self.tm_history_path = self.data_dir / TM_HISTORY_FILE
        self.workout_history_path = self.data_dir / WORKOUT_HISTORY_FILE

    def exists(self) -> bool:
        """Check if the state file exists."""
        return self.state_path.exists()

    def init(self, state: AppState) -> None:
        """
        Write an initial state and create empty history files.

        Existing history files are left untouched.
        """
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.save_state(state)
        for path in (self.pr_history_path, self.tm_history_path, self.workout_history_path):
            if not path.exists():
                path.touch()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def load_state(self) -> AppState:
        """
        Load settings, lifts and current week.

        Raises:
            FileNotFoundError: If the state file doesn't exist
            ValidationError: If the file is invalid
        """
        if not self.state_path.exists():
            raise FileNotFoundError(
                f"State file not found: {self.state_path}. Run 'init' first."
            )
        try:
            with open(self.state_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return dict_to_app_state(data)
        except (json.JSONDecodeError, KeyError, TypeError, ValueError, ValidationError) as e:
            raise ValidationError(f"Error reading {self.state_path}: {e}") from e

    def save_state(self, state: AppState) -> None:
        """Write the full state to state.json."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        with open(self.state_path, "w", encoding="utf-8") as f:
            json.dump(app_state_to_dict(state), f, indent=2, ensure_ascii=False)

    def update_settings(self, **changes: Any) -> Settings:
        """
        Update global settings.

        Args:
            **changes: Settings fields to change

        Returns:
            The new Settings

        Raises:
            ValueError: If a field is unknown or a value is invalid
        """
        state = self.load_state()
        current = app_state_to_dict(state)["settings"]
        unknown = set(changes) - set(current)
        if unknown:
            raise ValueError(f"Unknown settings: {sorted(unknown)}")
        current.update(changes)
        state.settings = Settings(**current)
        self.save_state(state)
        return state.settings

    def update_lift(
        self,
        lift_id: str,
        one_rep_max: float,
        date: str | None = None,
    ) -> TMHistoryRecord | None:
        """
        Set a lift's 1RM.

        Appends a TM history record when the lift was already initialised
        and the value actually changed.

        Returns:
            The appended record, or None
        """
        state = self.load_state()
        _check_lift(state, lift_id)
        lift = state.lifts[lift_id]
        record = tm_change_record(
            lift_id,
            lift.one_rep_max,
            one_rep_max,
            state.settings.tm_percentage,
            date or _today(),
        )
        state.lifts[lift_id] = replace(lift, one_rep_max=one_rep_max)
        self.save_state(state)
        if record is not None:
            self.append_tm_record(record)
        return record

    def update_lift_settings(self, lift_id: str, **changes: Any) -> LiftSettings:
        """
        Update a lift's template choices.

        Accepts template, supplemental_percentage, supplemental_lift_id and
        accessory_template_id (None unassigns the accessory template).

        Raises:
            ValueError: If a field is unknown or a value is invalid
        """
        state = self.load_state()
        _check_lift(state, lift_id)
        current = state.lifts[lift_id]
        allowed = {
            "template",
            "supplemental_percentage",
            "supplemental_lift_id",
            "accessory_template_id",
        }
        unknown = set(changes) - allowed
        if unknown:
            raise ValueError(f"Unknown lift settings: {sorted(unknown)}")
        if "template" in changes:
            get_template(changes["template"])
        accessory_id = changes.get("accessory_template_id")
        if accessory_id is not None and state.get_accessory_template(accessory_id) is None:
            raise ValueError(f"Unknown accessory template '{accessory_id}'")
        updated = replace(current, **changes)
        state.lifts[lift_id] = updated
        self.save_state(state)
        return updated

    def set_current_week(self, week: int) -> None:
        """Persist the current cycle week."""
        if week not in (1, 2, 3, 4):
            raise ValueError(f"Invalid week: {week!r}. Must be 1, 2, 3 or 4.")
        state = self.load_state()
        state.current_week = week
        self.save_state(state)

    def save_accessory_template(self, template: AccessoryTemplate) -> bool:
        """
        Add an accessory template, or replace the one with the same id.

        Returns:
            True if an existing template was replaced
        """
        state = self.load_state()
        templates = [t for t in state.accessory_templates if t.id != template.id]
        replaced = len(templates) != len(state.accessory_templates)
        templates.append(template)
        state.accessory_templates = templates
        self.save_state(state)
        return replaced

    def delete_accessory_template(self, template_id: str) -> list[str]:
        """
        Delete an accessory template and unassign it from every lift.

        Returns:
            Ids of the lifts that were using it

        Raises:
            ValueError: If no template has that id
        """
        state = self.load_state()
        if state.get_accessory_template(template_id) is None:
            raise ValueError(f"Unknown accessory template '{template_id}'")
        state.accessory_templates = [t for t in state.accessory_templates if t.id != template_id]
        cleared = []
        for lift_id, lift in state.lifts.items():
            if lift.accessory_template_id == template_id:
                state.lifts[lift_id] = replace(lift, accessory_template_id=None)
                cleared.append(lift_id)
        self.save_state(state)
        return cleared

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def _load_jsonl(self, path: Path, parse: Callable[[dict], T]) -> list[T]:
        """Read one record per line; blank lines are skipped."""
        if not path.exists():
            return []

        records: list[T] = []
        with open(path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    records.append(parse(json.loads(line)))
                except (json.JSONDecodeError, ValidationError, KeyError, ValueError) as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {path}: {e}"
                    ) from e
        return records

    def _append_jsonl(self, path: Path, data: dict[str, Any]) -> None:
        if not self.exists():
            raise FileNotFoundError(
                f"State file not found: {self.state_path}. Run 'init' first."
            )
        with open(path, "a", encoding="utf-8") as f:
            f.write(to_json_line(data) + "\n")

    def load_pr_history(self) -> list[PRRecord]:
        """PR records in the order they were appended."""
        return self._load_jsonl(self.pr_history_path, dict_to_pr_record)

    def append_pr(self, record: PRRecord) -> None:
        """Append a PR record."""
        self._append_jsonl(self.pr_history_path, pr_record_to_dict(record))

    def load_tm_history(self) -> list[TMHistoryRecord]:
        """TM history records in the order they were appended."""
        return self._load_jsonl(self.tm_history_path, dict_to_tm_record)

    def append_tm_record(self, record: TMHistoryRecord) -> None:
        """Append a TM history record."""
        self._append_jsonl(self.tm_history_path, tm_record_to_dict(record))

    def load_workouts(self) -> list[WorkoutRecord]:
        """Workout records in the order they were appended."""
        return self._load_jsonl(self.workout_history_path, dict_to_workout)

    def append_workout(self, workout: WorkoutRecord) -> None:
        """Append a finished workout."""
        self._append_jsonl(self.workout_history_path, workout_to_dict(workout))

    def reset(self, state: AppState | None = None) -> None:
        """
        Clear all history and restore default state (dangerous - use with caution).
        """
        for path in (self.pr_history_path, self.tm_history_path, self.workout_history_path):
            if path.exists():
                path.write_text("")
        self.init(state if state is not None else AppState())


def _check_lift(state: AppState, lift_id: str) -> None:
    if lift_id not in state.lifts:
        raise ValueError(f"Unknown lift '{lift_id}'. Valid IDs: {', '.join(state.lifts)}")


def _today() -> str:
    return datetime.now().strftime("%Y-%m-%d")


def get_default_data_dir() -> Path:
    """
    Get the default data directory.

    Returns:
        ~/.lift531
    """
    return Path.home() / ".lift531"

