"""
CLI entry point using Typer.

Commands are registered on the shared app by importing the command modules:
- profile: init, set-max, set-template, settings, reset
- workout: set-week, week, show, log-amrap, joker, log-workout, next-cycle
- analysis: prs, tm-history, history, estimate, plates, dots
"""

import typer

from . import views
from .app import DataDirOption, app
from .commands import analysis, profile, workout  # noqa: F401
from .commands.workout import week


@app.callback(invoke_without_command=True)
def main_callback(ctx: typer.Context, data_dir: DataDirOption = None) -> None:
    """
    5/3/1 calculator. Run without a command to see the current week.
    """
    if ctx.invoked_subcommand is not None:
        return

    views.console.print("[bold cyan]lift531[/bold cyan] — 5/3/1 training calculator")
    ctx.invoke(week, data_dir=data_dir, week_num=None, json_out=False)


if __name__ == "__main__":
    app()
