"""Goal commands: set-goal, goals, complete-goal, activate-goal, delete-goal."""

import json
from typing import Annotated, Optional

import typer

from ...core.goals import GOAL_TYPES, GoalValidationError, goal_advisories
from ...core.models import GoalDraft
from ...io.serializers import ValidationError, goal_to_dict
from ...io.settings import load_settings
from .. import views
from ..app import DataDirOption, JsonOption, app, get_store, parse_date_option


@app.command("set-goal")
def set_goal(
    goal_type: Annotated[
        str,
        typer.Argument(help="fat_loss, maintenance or muscle_gain"),
    ],
    weeks: Annotated[
        Optional[int],
        typer.Option("--weeks", "-w", help="Goal duration in weeks (2-16)"),
    ] = None,
    rate_type: Annotated[
        Optional[str],
        typer.Option("--rate-type", "-r", help="Fat loss rate: absolute or percentage"),
    ] = None,
    rate_lbs: Annotated[
        Optional[float],
        typer.Option("--rate-lbs", help="Absolute fat loss rate in lbs/week"),
    ] = None,
    rate_percent: Annotated[
        Optional[float],
        typer.Option("--rate-percent", help="Fat loss rate in % bodyweight/week"),
    ] = None,
    surplus: Annotated[
        Optional[int],
        typer.Option("--surplus", help="Muscle gain calorie surplus (kcal/day)"),
    ] = None,
    start_date: Annotated[
        Optional[str],
        typer.Option("--start-date", help="Goal start date (YYYY-MM-DD, default: today)"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Set a new active goal. The previous active goal is superseded.

    The current logged weight becomes the goal's starting weight.
    """
    goal_type = goal_type.lower()
    if goal_type not in GOAL_TYPES:
        views.print_error(f"Unknown goal type: {goal_type}. Use one of: {', '.join(GOAL_TYPES)}")
        raise typer.Exit(1)

    settings = load_settings()["goals"]
    if weeks is None:
        weeks = int(settings["default_duration_weeks"])

    # Infer the rate type when only one rate value was given
    if goal_type == "fat_loss" and rate_type is None:
        if rate_lbs is not None and rate_percent is None:
            rate_type = "absolute"
        elif rate_percent is not None and rate_lbs is None:
            rate_type = "percentage"

    if goal_type == "muscle_gain" and surplus is None:
        surplus = settings.get("default_surplus_calories")

    draft = GoalDraft(
        goal_type=goal_type,  # type: ignore[arg-type]
        duration_weeks=weeks,
        rate_type=rate_type.lower() if rate_type else None,  # type: ignore[arg-type]
        target_rate_lbs=rate_lbs,
        target_rate_percent=rate_percent,
        surplus_calories=surplus,
    )

    store = get_store(data_dir)
    begin = parse_date_option(start_date)

    try:
        start_weight = store.current_weight()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if start_weight is None:
        views.print_error("No weight logged yet")
        views.print_info("Log your current weight with 'log-weight' before setting a goal.")
        raise typer.Exit(1)

    for advisory in goal_advisories(draft):
        views.print_warning(advisory)

    try:
        goal = store.add_goal(draft, start_weight, begin)
    except GoalValidationError as e:
        for error in e.errors:
            views.print_error(error)
        raise typer.Exit(1)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Goal {goal.goal_id} set: {views.describe_goal(goal)}")
    views.print_info(
        f"{goal.start_date} -> {goal.end_date}, starting at {goal.start_weight:.1f} lbs"
    )


@app.command("goals")
def list_goals(
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    List all goals, oldest first.
    """
    store = get_store(data_dir)

    try:
        goals = store.load_goals()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps([goal_to_dict(g) for g in goals], indent=2))
        return

    if not goals:
        views.print_info("No goals yet. Use 'set-goal' to create one.")
        return

    views.console.print(views.format_goals_table(goals))


@app.command("complete-goal")
def complete_goal(
    data_dir: DataDirOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
) -> None:
    """
    Mark the active goal as completed.
    """
    store = get_store(data_dir)

    try:
        current = store.active_goal()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if current is None:
        views.print_error("No active goal to complete")
        raise typer.Exit(1)

    if not force and not views.confirm_action(f"Complete goal {current.goal_id} ({views.describe_goal(current)})?"):
        views.print_info("Cancelled")
        raise typer.Exit(0)

    done = store.complete_active_goal()
    views.print_success(f"Goal {done.goal_id} completed")


@app.command("activate-goal")
def activate_goal(
    goal_id: Annotated[int, typer.Argument(help="Goal ID (see 'goals')")],
    data_dir: DataDirOption = None,
) -> None:
    """
    Make a stored goal the active one again.
    """
    store = get_store(data_dir)

    try:
        store.set_active(goal_id)
    except KeyError as e:
        views.print_error(str(e.args[0]))
        raise typer.Exit(1)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Goal {goal_id} is now active")


@app.command("delete-goal")
def delete_goal(
    goal_id: Annotated[int, typer.Argument(help="Goal ID (see 'goals')")],
    data_dir: DataDirOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
) -> None:
    """
    Delete a goal record.
    """
    store = get_store(data_dir)

    if not force and not views.confirm_action(f"Delete goal {goal_id}?"):
        views.print_info("Cancelled")
        raise typer.Exit(0)

    try:
        store.delete_goal(goal_id)
    except KeyError as e:
        views.print_error(str(e.args[0]))
        raise typer.Exit(1)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Deleted goal {goal_id}")
