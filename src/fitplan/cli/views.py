"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of profiles, targets, goal progress
and muscle volume.
"""

from datetime import date

from rich.console import Console
from rich.table import Table

from ..core.config import ACTIVITY_DESCRIPTIONS
from ..core.exercises.registry import format_muscle_group_name
from ..core.models import (
    AbsoluteRate,
    Exercise,
    FatLoss,
    Goal,
    GoalProgress,
    MuscleGain,
    MuscleGroupReport,
    NutritionTargets,
    Profile,
    WeightEntry,
)
from ..core.progress import next_check_in
from ..core.units import round_int

console = Console()

WARNING_STYLES = {
    "low": "red",
    "normal": "green",
    "high": "yellow",
    "none": "dim",
}

GOAL_LABELS = {
    "fat_loss": "Fat Loss",
    "maintenance": "Maintenance",
    "muscle_gain": "Muscle Gain",
}


def describe_goal(goal: Goal) -> str:
    """One-line description of a goal's operative parameter."""
    plan = goal.plan
    label = GOAL_LABELS[goal.goal_type]
    if isinstance(plan, FatLoss):
        if isinstance(plan.rate, AbsoluteRate):
            return f"{label}: {plan.rate.lbs_per_week} lbs/week"
        return f"{label}: {plan.rate.percent_per_week}% bodyweight/week"
    if isinstance(plan, MuscleGain):
        return f"{label}: +{plan.effective_surplus} kcal/day"
    return label


def format_profile(profile: Profile, weight: float | None) -> Table:
    """Two-column table of profile fields."""
    table = Table(title="Profile", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    def _val(v: object) -> str:
        return "[dim]not set[/dim]" if v is None else str(v)

    table.add_row("Height (in)", _val(profile.height_inches))
    table.add_row("Sex", _val(profile.biological_sex))
    table.add_row("Birth date", _val(profile.birth_date))
    activity = profile.activity_level
    table.add_row(
        "Activity",
        f"{activity} ({ACTIVITY_DESCRIPTIONS[activity]})" if activity else _val(None),
    )
    table.add_row("Current weight (lbs)", _val(weight))
    return table


def format_weights_table(entries: list[WeightEntry]) -> Table:
    table = Table(title="Weight History")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Weight (lbs)", justify="right")
    table.add_column("Change", justify="right")
    table.add_column("Note")

    previous: float | None = None
    for i, entry in enumerate(entries, 1):
        change = ""
        if previous is not None:
            delta = entry.weight_lbs - previous
            color = "green" if delta < 0 else "yellow" if delta > 0 else "dim"
            change = f"[{color}]{delta:+.1f}[/{color}]"
        table.add_row(str(i), entry.entry_date.isoformat(), f"{entry.weight_lbs:.1f}", change, entry.note or "")
        previous = entry.weight_lbs
    return table


def format_goals_table(goals: list[Goal]) -> Table:
    table = Table(title="Goals")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Goal")
    table.add_column("Start", style="cyan")
    table.add_column("End", style="cyan")
    table.add_column("Start weight", justify="right")
    table.add_column("Status")

    for goal in goals:
        if goal.is_active:
            status = "[bold green]active[/bold green]"
        elif goal.completed_at is not None:
            status = f"completed {goal.completed_at:%Y-%m-%d}"
        else:
            status = "[dim]superseded[/dim]"
        table.add_row(
            str(goal.goal_id),
            describe_goal(goal),
            goal.start_date.isoformat(),
            goal.end_date.isoformat(),
            f"{goal.start_weight:.1f}",
            status,
        )
    return table


def print_targets(targets: NutritionTargets, goal: Goal | None) -> None:
    """Print energy, adjusted calories, warnings and macros."""
    energy = targets.energy
    adj = targets.adjustment
    macros = targets.macros

    console.print()
    console.print(f"[bold]BMR:[/bold]  {round_int(energy.bmr)} kcal   (age {energy.age})")
    console.print(f"[bold]TDEE:[/bold] {round_int(energy.tdee)} kcal")
    if goal is not None:
        console.print(f"[bold]Goal:[/bold] {describe_goal(goal)}")
    console.print(f"[bold cyan]Daily target: {adj.adjusted_calories} kcal[/bold cyan]  ({adj.reason})")

    for warning in adj.warnings:
        print_warning(warning)

    table = Table(title="Macros")
    table.add_column("Macro", style="cyan")
    table.add_column("Grams", justify="right")
    table.add_column("kcal", justify="right")
    table.add_row("Protein", str(macros.protein_g), str(macros.protein_kcal))
    table.add_row("Fat", str(macros.fat_g), str(macros.fat_kcal))
    table.add_row("Carbs", str(macros.carbs_g), str(macros.carbs_kcal))
    table.add_row("[bold]Total[/bold]", "", f"[bold]{macros.total_kcal}[/bold]")
    console.print(table)


def _status_line(progress: GoalProgress) -> str:
    if progress.on_track is None:
        return "[dim]Need more data to assess progress[/dim]"
    if progress.on_track:
        return "[green]On track with your goal[/green]"
    return "[yellow]Progress needs attention[/yellow]"


def print_progress(goal: Goal, progress: GoalProgress, today: date | None = None) -> None:
    """Print goal progress summary and weekly check-ins."""
    console.print()
    console.print(f"[bold]{describe_goal(goal)}[/bold]  ({goal.start_date} -> {goal.end_date})")
    console.print(
        f"Day {progress.days_elapsed} of {progress.total_days} "
        f"({progress.progress_percent:.0f}%), {progress.days_remaining} days remaining"
    )
    console.print(f"Expected change: {progress.expected_weight_change:+.1f} lbs")
    if progress.current_weight_change is not None:
        console.print(f"Actual change:   {progress.current_weight_change:+.1f} lbs")
    console.print(_status_line(progress))

    if progress.notice:
        print_info(progress.notice)

    if progress.weekly_progress:
        table = Table(title="Weekly check-ins (Sundays)")
        table.add_column("Week", justify="right", style="dim")
        table.add_column("Sunday", style="cyan")
        table.add_column("Expected", justify="right")
        table.add_column("Actual", justify="right")
        table.add_column("Variance", justify="right")
        for week in progress.weekly_progress:
            label = f"[bold]{week.week_label}[/bold]" if week.is_current_week else week.week_label
            actual = f"{week.actual_weight:.1f}" if week.actual_weight is not None else "-"
            variance = f"{week.variance:+.1f}" if week.variance is not None else "-"
            table.add_row(str(week.week_number), label, f"{week.expected_weight:.1f}", actual, variance)
        console.print(table)

    console.print(f"[dim]Next check-in: {next_check_in(today):%a %b %d}[/dim]")


def format_volume_table(plan_name: str, reports: list[MuscleGroupReport]) -> Table:
    table = Table(title=f"Weekly volume: {plan_name}")
    table.add_column("Muscle group", style="cyan")
    table.add_column("Sets/week", justify="right")
    table.add_column("Status")

    for report in reports:
        style = WARNING_STYLES[report.warning]
        name = format_muscle_group_name(report.muscle_group)
        if report.specialized:
            name += " [bold magenta]*[/bold magenta]"
        table.add_row(name, f"{report.volume:g}", f"[{style}]{report.warning}[/{style}]")
    return table


def format_exercise_table(exercises: list[Exercise]) -> Table:
    table = Table(title="Exercise Library")
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Primary", style="cyan")
    table.add_column("Secondary")
    table.add_column("RIR/RPE", justify="center")
    for ex in exercises:
        table.add_row(
            ex.exercise_id,
            ex.name,
            format_muscle_group_name(ex.primary),
            ", ".join(format_muscle_group_name(g) for g in ex.secondary),
            "yes" if ex.use_rir_rpe else "no",
        )
    return table


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
