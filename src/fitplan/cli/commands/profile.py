"""Profile and weight commands: init, profile, log-weight, weights, delete-weight."""

import json
from dataclasses import replace
from typing import Annotated, Optional

import typer

from ...core.models import Profile, WeightEntry
from ...core.weights import current_weight
from ...io.serializers import (
    ValidationError,
    profile_to_dict,
    validate_date,
    weight_entry_to_dict,
)
from .. import views
from ..app import DataDirOption, JsonOption, app, get_store, parse_date_option


@app.command()
def init(
    height_inches: Annotated[
        Optional[float],
        typer.Option("--height-in", help="Height in inches"),
    ] = None,
    sex: Annotated[
        Optional[str],
        typer.Option("--sex", "-s", help="Biological sex (male/female)"),
    ] = None,
    birth_date: Annotated[
        Optional[str],
        typer.Option("--birth-date", "-b", help="Birth date (YYYY-MM-DD)"),
    ] = None,
    activity: Annotated[
        Optional[str],
        typer.Option(
            "--activity",
            "-a",
            help="sedentary, lightly_active, moderately_active, very_active, extremely_active",
        ),
    ] = None,
    weight_lbs: Annotated[
        Optional[float],
        typer.Option("--weight", "-w", help="Log today's bodyweight in lbs"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Create or update the profile.

    Only the options given are changed; the rest of an existing profile is kept.
    """
    store = get_store(data_dir)
    store.init()

    try:
        existing = store.load_profile() or Profile()
        updates: dict = {}
        if height_inches is not None:
            updates["height_inches"] = height_inches
        if sex is not None:
            updates["biological_sex"] = sex.lower()
        if birth_date is not None:
            updates["birth_date"] = validate_date(birth_date)
        if activity is not None:
            updates["activity_level"] = activity.lower()
        profile = replace(existing, **updates)
    except (ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    store.save_profile(profile)
    views.print_success(f"Saved profile to {store.profile_path}")

    if weight_lbs is not None:
        if weight_lbs <= 0:
            views.print_error("Weight must be positive")
            raise typer.Exit(1)
        store.append_weight(WeightEntry(weight_lbs=weight_lbs, entry_date=parse_date_option(None)))
        views.print_success(f"Logged {weight_lbs:.1f} lbs")

    missing = profile.missing_fields()
    if missing:
        views.print_info(f"Still needed for calorie targets: {', '.join(missing)}")


@app.command("profile")
def show_profile(
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the profile and current weight.
    """
    store = get_store(data_dir)

    try:
        profile = store.load_profile()
        weights = store.load_weights()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if profile is None:
        views.print_error(f"Profile not found: {store.profile_path}")
        views.print_info("Run 'init' first to create a profile.")
        raise typer.Exit(1)

    weight = current_weight(weights)
    if json_out:
        print(json.dumps({
            **profile_to_dict(profile),
            "current_weight_lbs": weight,
            "is_complete": profile.is_complete,
        }, indent=2))
        return

    views.console.print(views.format_profile(profile, weight))


@app.command("log-weight")
def log_weight(
    weight_lbs: Annotated[float, typer.Argument(help="Bodyweight in lbs")],
    entry_date: Annotated[
        Optional[str],
        typer.Option("--date", help="Date of the weigh-in (YYYY-MM-DD, default: today)"),
    ] = None,
    note: Annotated[
        Optional[str],
        typer.Option("--note", "-n", help="Optional note"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Log a bodyweight. A second weigh-in on the same date replaces the first.
    """
    store = get_store(data_dir)
    day = parse_date_option(entry_date)

    try:
        entry = WeightEntry(weight_lbs=weight_lbs, entry_date=day, note=note)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    try:
        store.append_weight(entry)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Logged {weight_lbs:.1f} lbs on {day.isoformat()}")


@app.command()
def weights(
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show weight history.
    """
    store = get_store(data_dir)

    try:
        entries = store.load_weights()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps([weight_entry_to_dict(e) for e in entries], indent=2))
        return

    if not entries:
        views.print_info("No weights logged yet. Use 'log-weight' to add one.")
        return

    views.console.print(views.format_weights_table(entries))


@app.command("delete-weight")
def delete_weight(
    entry_date: Annotated[str, typer.Argument(help="Date of the entry to delete (YYYY-MM-DD)")],
    data_dir: DataDirOption = None,
) -> None:
    """
    Delete the weigh-in for a date.
    """
    store = get_store(data_dir)
    day = parse_date_option(entry_date)

    try:
        store.delete_weight(day)
    except KeyError as e:
        views.print_error(str(e.args[0]))
        raise typer.Exit(1)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Deleted weight entry for {day.isoformat()}")
