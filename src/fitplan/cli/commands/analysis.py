"""Analysis commands: progress, volume, exercises."""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
import yaml

from ...core.config import MUSCLE_GROUPS
from ...core.exercises.loader import exercise_to_dict
from ...core.exercises.registry import EXERCISE_LIBRARY, exercises_for_muscle
from ...core.progress import project_goal_progress
from ...core.volume import plan_exercise_db, validate_mesocycle_plan, volume_report
from ...io.serializers import ValidationError, dict_to_mesocycle
from .. import views
from ..app import DataDirOption, JsonOption, app, get_store, parse_date_option


@app.command()
def progress(
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
    today: Annotated[
        Optional[str],
        typer.Option("--today", help="Evaluate progress as of this date (YYYY-MM-DD)", hidden=True),
    ] = None,
) -> None:
    """
    Show progress of the active goal with Sunday check-ins.
    """
    store = get_store(data_dir)
    ref_date = parse_date_option(today)

    try:
        goal = store.active_goal()
        weights = store.load_weights()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if goal is None:
        views.print_error("No active goal")
        views.print_info("Use 'set-goal' to create one.")
        raise typer.Exit(1)

    result = project_goal_progress(goal, weights, ref_date)

    if json_out:
        print(json.dumps({
            "goal_id": goal.goal_id,
            "goal_type": goal.goal_type,
            "start_date": goal.start_date.isoformat(),
            "end_date": goal.end_date.isoformat(),
            "start_weight": goal.start_weight,
            "days_elapsed": result.days_elapsed,
            "days_remaining": result.days_remaining,
            "total_days": result.total_days,
            "progress_percent": round(result.progress_percent, 1),
            "expected_weight_change": round(result.expected_weight_change, 2),
            "current_weight_change": (
                round(result.current_weight_change, 2)
                if result.current_weight_change is not None else None
            ),
            "on_track": result.on_track,
            "started_mid_week": result.started_mid_week,
            "notice": result.notice,
            "weekly_progress": [
                {
                    "week_number": w.week_number,
                    "week_label": w.week_label,
                    "check_in_date": w.check_in_date.isoformat(),
                    "expected_weight": w.expected_weight,
                    "actual_weight": w.actual_weight,
                    "variance": w.variance,
                    "is_current_week": w.is_current_week,
                }
                for w in result.weekly_progress
            ],
        }, indent=2))
        return

    views.print_progress(goal, result, ref_date)


@app.command()
def volume(
    plan_file: Annotated[Path, typer.Argument(help="Mesocycle plan YAML file")],
    json_out: JsonOption = False,
) -> None:
    """
    Show weekly sets per muscle group for a mesocycle plan.
    """
    try:
        with open(plan_file, "r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except OSError as e:
        views.print_error(f"Cannot read {plan_file}: {e}")
        raise typer.Exit(1)
    except yaml.YAMLError as e:
        views.print_error(f"Error parsing {plan_file}: {e}")
        raise typer.Exit(1)

    if not isinstance(raw, dict):
        views.print_error(f"{plan_file} must contain a mapping")
        raise typer.Exit(1)

    try:
        plan = dict_to_mesocycle(raw)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    problems = validate_mesocycle_plan(plan)
    db = plan_exercise_db(plan, EXERCISE_LIBRARY)
    unknown = sorted({ex for day in plan.days for ex in day.exercises if ex not in db})
    reports = volume_report(plan, db)

    if json_out:
        print(json.dumps({
            "name": plan.name,
            "weeks": plan.weeks,
            "days_per_week": plan.days_per_week,
            "specialization": list(plan.specialization),
            "problems": problems,
            "unknown_exercises": unknown,
            "volume": {
                r.muscle_group: {"sets": r.volume, "warning": r.warning, "specialized": r.specialized}
                for r in reports
            },
        }, indent=2))
        return

    for problem in problems:
        views.print_warning(problem)
    if unknown:
        views.print_warning(f"Unknown exercises ignored: {', '.join(unknown)}")

    views.console.print(views.format_volume_table(plan.name, reports))
    if plan.goal_statement:
        views.console.print(f"[dim]Goal: {plan.goal_statement}[/dim]")


@app.command()
def exercises(
    muscle: Annotated[
        Optional[str],
        typer.Option("--muscle", "-m", help="Only exercises that train this muscle group"),
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    List the exercise library.
    """
    if muscle is not None:
        group = muscle.upper()
        if group not in MUSCLE_GROUPS:
            views.print_error(
                f"Unknown muscle group: {muscle}. Use one of: {', '.join(MUSCLE_GROUPS)}"
            )
            raise typer.Exit(1)
        items = exercises_for_muscle(group)
    else:
        items = sorted(EXERCISE_LIBRARY.values(), key=lambda ex: ex.exercise_id)

    if json_out:
        print(json.dumps([exercise_to_dict(ex) for ex in items], indent=2))
        return

    if not items:
        views.print_info("No exercises found")
        return

    views.console.print(views.format_exercise_table(items))
