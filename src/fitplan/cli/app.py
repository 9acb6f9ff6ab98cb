"""Shared Typer app object, shared option types, and store utility."""

from datetime import date
from pathlib import Path
from typing import Annotated, Optional

import typer

from ..io.data_store import DataStore, get_default_store
from ..io.serializers import ValidationError, validate_date
from . import views

# Shared --data-dir option used across all commands
DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", "-d", help="Directory with profile, weights and goals"),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="fitplan",
    help="Goal-driven calorie, macro and training-volume planner.",
    no_args_is_help=False,
    invoke_without_command=True,
)


def get_store(data_dir: Path | None) -> DataStore:
    """Get data store from path or the configured default location."""
    if data_dir is None:
        return get_default_store()
    return DataStore(data_dir)


def parse_date_option(value: str | None) -> date:
    """Parse a YYYY-MM-DD option value (default: today); exit on bad input."""
    if value is None:
        return date.today()
    try:
        return validate_date(value)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
