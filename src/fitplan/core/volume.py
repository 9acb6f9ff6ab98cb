"""
Weekly training volume per muscle group.

Each exercise in a day credits one set to its primary muscle group and half
a set to each secondary group.  A mesocycle's days describe one training
week that repeats, so the weekly volume is simply the sum over its days.

Volume warnings are advisory colouring for the planner; a plan with low or
high groups is still a valid plan.

    specialized:      < 3 low,  3-5 normal,  > 5 high
    not specialized:  < 2 low,  2-4 normal,  > 4 high
"""

from typing import Iterable, Mapping

from .config import (
    MAX_DAYS_PER_WEEK,
    MAX_MESOCYCLE_WEEKS,
    MAX_SPECIALIZED_GROUPS,
    MIN_DAYS_PER_WEEK,
    MIN_MESOCYCLE_WEEKS,
    MUSCLE_GROUPS,
    PRIMARY_SET_CREDIT,
    SECONDARY_SET_CREDIT,
    VOLUME_BANDS,
)
from .models import (
    Exercise,
    MesocyclePlan,
    MuscleGroup,
    MuscleGroupReport,
    VolumeWarning,
)

MuscleGroupVolume = dict[MuscleGroup, float]


def empty_volume() -> MuscleGroupVolume:
    """A volume map with every muscle group at zero."""
    return {group: 0.0 for group in MUSCLE_GROUPS}


def day_volume(
    exercise_ids: Iterable[str],
    exercise_db: Mapping[str, Exercise],
) -> MuscleGroupVolume:
    """
    Set credit per muscle group for one day's exercises.

    Exercise ids missing from ``exercise_db`` are skipped.
    """
    volume = empty_volume()
    for exercise_id in exercise_ids:
        exercise = exercise_db.get(exercise_id)
        if exercise is None:
            continue
        volume[exercise.primary] += PRIMARY_SET_CREDIT
        for group in exercise.secondary:
            volume[group] += SECONDARY_SET_CREDIT
    return volume


def plan_exercise_db(
    plan: MesocyclePlan,
    library: Mapping[str, Exercise] | None = None,
) -> dict[str, Exercise]:
    """Exercise lookup for a plan: inline plan exercises over the shared library."""
    lookup = dict(library or {})
    lookup.update(plan.exercise_db)
    return lookup


def aggregate_muscle_volume(
    plan: MesocyclePlan,
    exercise_db: Mapping[str, Exercise] | None = None,
) -> MuscleGroupVolume:
    """
    Weekly set volume per muscle group for a mesocycle.

    Sums every day of the plan once; ``plan.weeks`` is not a multiplier.

    Args:
        plan: Mesocycle plan
        exercise_db: Shared exercise library (plan-inline exercises win)

    Returns:
        Volume for every known muscle group (0.0 when untrained)
    """
    lookup = plan_exercise_db(plan, exercise_db)
    weekly = empty_volume()
    for day in plan.days:
        for group, sets in day_volume(day.exercises, lookup).items():
            weekly[group] += sets
    return weekly


def classify_volume(volume: float | None, is_specialized: bool) -> VolumeWarning:
    """
    Classify a weekly volume against the load thresholds.

    Args:
        volume: Weekly sets, or None when the group has no figure
        is_specialized: Whether the plan specializes this group

    Returns:
        "low", "normal", "high", or "none" when volume is None
    """
    if volume is None:
        return "none"
    low_below, high_above = VOLUME_BANDS[is_specialized]
    if volume < low_below:
        return "low"
    if volume <= high_above:
        return "normal"
    return "high"


def volume_report(
    plan: MesocyclePlan,
    exercise_db: Mapping[str, Exercise] | None = None,
) -> list[MuscleGroupReport]:
    """Per muscle group volume and warning, in MUSCLE_GROUPS order."""
    weekly = aggregate_muscle_volume(plan, exercise_db)
    return [
        MuscleGroupReport(
            muscle_group=group,
            volume=weekly[group],
            warning=classify_volume(weekly[group], plan.is_specialized(group)),
            specialized=plan.is_specialized(group),
        )
        for group in MUSCLE_GROUPS
    ]


def validate_mesocycle_plan(plan: MesocyclePlan) -> list[str]:
    """
    Form-level checks for a mesocycle plan.

    Returns:
        List of error messages (empty when the plan can be saved)
    """
    errors: list[str] = []

    if not plan.name or not plan.name.strip():
        errors.append("Mesocycle name is required")

    if plan.weeks < MIN_MESOCYCLE_WEEKS or plan.weeks > MAX_MESOCYCLE_WEEKS:
        errors.append(f"Weeks must be between {MIN_MESOCYCLE_WEEKS} and {MAX_MESOCYCLE_WEEKS}")

    if plan.days_per_week < MIN_DAYS_PER_WEEK or plan.days_per_week > MAX_DAYS_PER_WEEK:
        errors.append(
            f"Days per week must be between {MIN_DAYS_PER_WEEK} and {MAX_DAYS_PER_WEEK}"
        )

    if len(plan.specialization) > MAX_SPECIALIZED_GROUPS:
        errors.append(f"Maximum {MAX_SPECIALIZED_GROUPS} muscle groups can be specialized")

    for day in plan.days:
        if day.day > plan.days_per_week:
            errors.append(
                f"Day {day.day} is outside the {plan.days_per_week}-day training week"
            )

    return errors


def toggle_specialization(
    current: tuple[MuscleGroup, ...],
    group: MuscleGroup,
) -> tuple[MuscleGroup, ...]:
    """
    Toggle ``group`` in a specialization selection of at most two groups.

    Selecting a third group drops the oldest selection.
    """
    if group in current:
        return tuple(g for g in current if g != group)
    if len(current) < MAX_SPECIALIZED_GROUPS:
        return (*current, group)
    return (*current[1:], group)
