"""Shared Typer app object, shared option types, and store utility."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.config import LIFT_IDS
from ..io.state_store import StateStore, get_default_data_dir

# Shared --data-dir option type used across all commands
DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", "-p", help="Directory holding lift531 data files"),
]

# Shared --json option type
JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

# Shared --week option type (defaults to the stored current week)
WeekOption = Annotated[
    Optional[int],
    typer.Option("--week", "-w", min=1, max=4, help="Cycle week 1-4 (default: current week)"),
]

LIFT_HELP = f"Lift ID: {', '.join(LIFT_IDS)}"

app = typer.Typer(
    name="lift531",
    help="5/3/1 strength training calculator and progression tracker.",
    no_args_is_help=False,
    invoke_without_command=True,
)


def get_store(data_dir: Path | None) -> StateStore:
    """Get state store from path or default location."""
    if data_dir is None:
        data_dir = get_default_data_dir()
    return StateStore(data_dir)
