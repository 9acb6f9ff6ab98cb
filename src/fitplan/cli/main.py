"""
CLI entry point using Typer.

Commands are registered on the shared app by importing the command modules:

- init / profile: body attributes and activity level
- log-weight / weights / delete-weight: weight history
- set-goal / goals / complete-goal / activate-goal / delete-goal: goals
- targets: BMR, TDEE, goal-adjusted calories and macros
- progress: expected vs. actual trajectory of the active goal
- volume / exercises: training volume of a mesocycle plan
"""

import typer

from . import views
from .app import app
from .commands import analysis, goals, nutrition, profile  # noqa: F401  (registers commands)


@app.callback(invoke_without_command=True)
def main_callback(ctx: typer.Context) -> None:
    """
    Calorie, macro and training-volume planner. Run without a command for a menu.
    """
    if ctx.invoked_subcommand is not None:
        return

    views.console.print()
    views.console.print("[bold cyan]fitplan[/bold cyan]: goal-driven nutrition and training planner")
    views.console.print()

    menu = {
        "1": (nutrition.targets, "Today's calorie and macro targets"),
        "2": (analysis.progress, "Goal progress"),
        "3": (profile.weights, "Weight history"),
        "4": (goals.list_goals, "All goals"),
        "5": (profile.show_profile, "Profile"),
        "6": (analysis.exercises, "Exercise library"),
        "0": (None, "Quit"),
    }

    for key, (_, desc) in menu.items():
        views.console.print(f"  \\[{key}] {desc}")

    views.console.print()
    choice = views.console.input("Choose [1]: ").strip() or "1"

    if choice not in menu:
        views.print_error(f"Unknown choice: {choice}")
        raise typer.Exit(1)

    command = menu[choice][0]
    if command is None:
        raise typer.Exit(0)
    ctx.invoke(command)


if __name__ == "__main__":
    app()
