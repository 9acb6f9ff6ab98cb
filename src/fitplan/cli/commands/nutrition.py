"""Nutrition commands: targets."""

import json
from typing import Annotated, Optional

import typer

from ...core.targets import compute_nutrition_targets
from ...core.units import round_int
from ...io.serializers import ValidationError
from .. import views
from ..app import DataDirOption, JsonOption, app, get_store, parse_date_option


@app.command()
def targets(
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
    today: Annotated[
        Optional[str],
        typer.Option("--today", help="Reference date for age (YYYY-MM-DD)", hidden=True),
    ] = None,
) -> None:
    """
    Show BMR, TDEE, the goal-adjusted calorie target and macros.
    """
    store = get_store(data_dir)
    ref_date = parse_date_option(today)

    try:
        profile = store.load_profile()
        weights = store.load_weights()
        goal = store.active_goal()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if profile is None or not profile.is_complete:
        missing = profile.missing_fields() if profile is not None else ["profile"]
        views.print_error(f"Profile incomplete, missing: {', '.join(missing)}")
        views.print_info("Run 'init' to fill in the missing fields.")
        raise typer.Exit(1)

    result = compute_nutrition_targets(profile, weights, goal, ref_date)
    if result is None:
        views.print_error("No weight logged yet")
        views.print_info("Log your current weight with 'log-weight'.")
        raise typer.Exit(1)

    if json_out:
        energy, adj, macros = result.energy, result.adjustment, result.macros
        print(json.dumps({
            "current_weight_lbs": result.current_weight,
            "age": energy.age,
            "bmr": round_int(energy.bmr),
            "tdee": round_int(energy.tdee),
            "goal_id": goal.goal_id if goal is not None else None,
            "goal_type": goal.goal_type if goal is not None else None,
            "adjusted_calories": adj.adjusted_calories,
            "reason": adj.reason,
            "warnings": adj.warnings,
            "macros": {
                "protein_g": macros.protein_g,
                "fat_g": macros.fat_g,
                "carbs_g": macros.carbs_g,
                "protein_kcal": macros.protein_kcal,
                "fat_kcal": macros.fat_kcal,
                "carbs_kcal": macros.carbs_kcal,
                "total_kcal": macros.total_kcal,
            },
        }, indent=2))
        return

    views.print_targets(result, goal)
