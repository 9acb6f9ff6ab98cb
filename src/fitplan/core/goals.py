"""
Goal validation and lifecycle.

A goal request arrives as a ``GoalDraft`` (flat, possibly inconsistent
fields).  ``validate_goal_parameters`` reports every problem as a
human-readable string; nothing is silently corrected.  Only a valid draft
is turned into a ``Goal``.

Lifecycle: a new goal is created active and supersedes (deactivates) the
previously active one; a goal can also be completed explicitly, which
deactivates it and stamps ``completed_at``.  At most one goal is active.
"""

from dataclasses import replace
from datetime import date, datetime
from typing import Sequence

from .config import (
    LARGE_SURPLUS_CALORIES,
    MAX_ABSOLUTE_RATE_LBS,
    MAX_GOAL_WEEKS,
    MAX_PERCENT_RATE,
    MAX_SURPLUS_CALORIES,
    MIN_GOAL_WEEKS,
    MIN_SURPLUS_CALORIES,
    SUSTAINABLE_ABSOLUTE_RATE_LBS,
    SUSTAINABLE_PERCENT_RATE,
)
from .models import (
    AbsoluteRate,
    FatLoss,
    Goal,
    GoalDraft,
    GoalPlan,
    GoalValidation,
    Maintenance,
    MuscleGain,
    PercentageRate,
)

GOAL_TYPES: tuple[str, ...] = ("fat_loss", "maintenance", "muscle_gain")


class GoalValidationError(ValueError):
    """Raised when a goal draft fails validation."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


def validate_goal_parameters(draft: GoalDraft) -> GoalValidation:
    """
    Check a goal request against duration and rate bounds.

    Rules:
      - duration within [2, 16] weeks
      - fat loss needs a rate type and a rate value
      - absolute rate in (0, 3.0] lbs/week, percentage in (0, 2.0] %/week
      - muscle-gain surplus, when given, in [100, 1000] kcal

    Args:
        draft: Goal request

    Returns:
        GoalValidation with every error found
    """
    errors: list[str] = []

    if draft.duration_weeks < MIN_GOAL_WEEKS or draft.duration_weeks > MAX_GOAL_WEEKS:
        errors.append(
            f"Goal duration must be between {MIN_GOAL_WEEKS} and {MAX_GOAL_WEEKS} weeks"
        )

    if draft.goal_type == "fat_loss":
        if not draft.rate_type or (not draft.target_rate_lbs and not draft.target_rate_percent):
            errors.append("Fat loss goals require a target rate")

        if draft.rate_type == "absolute":
            rate = draft.target_rate_lbs
            if not rate or rate <= 0 or rate > MAX_ABSOLUTE_RATE_LBS:
                errors.append(
                    f"Absolute rate must be between 0.1 and {MAX_ABSOLUTE_RATE_LBS} lbs per week"
                )
        elif draft.rate_type == "percentage":
            rate = draft.target_rate_percent
            if not rate or rate <= 0 or rate > MAX_PERCENT_RATE:
                errors.append(
                    f"Percentage rate must be between 0.1% and {MAX_PERCENT_RATE}% "
                    "of bodyweight per week"
                )
        elif draft.rate_type:
            errors.append(f"Unknown rate type: {draft.rate_type}")

    elif draft.goal_type == "muscle_gain":
        surplus = draft.surplus_calories
        if surplus and (surplus < MIN_SURPLUS_CALORIES or surplus > MAX_SURPLUS_CALORIES):
            errors.append(
                f"Calorie surplus should be between {MIN_SURPLUS_CALORIES} "
                f"and {MAX_SURPLUS_CALORIES} calories"
            )

    elif draft.goal_type != "maintenance":
        errors.append(f"Unknown goal type: {draft.goal_type}")

    return GoalValidation(is_valid=not errors, errors=errors)


def goal_advisories(draft: GoalDraft) -> list[str]:
    """Non-blocking warnings shown while a goal is being set up."""
    warnings: list[str] = []

    if draft.goal_type == "fat_loss":
        if (
            draft.rate_type == "absolute"
            and draft.target_rate_lbs
            and draft.target_rate_lbs > SUSTAINABLE_ABSOLUTE_RATE_LBS
        ):
            warnings.append(
                f"Weight loss rate above {SUSTAINABLE_ABSOLUTE_RATE_LBS:g} lbs/week "
                "might be unsustainable"
            )
        if (
            draft.rate_type == "percentage"
            and draft.target_rate_percent
            and draft.target_rate_percent > SUSTAINABLE_PERCENT_RATE
        ):
            warnings.append(
                f"Weight loss rate above {SUSTAINABLE_PERCENT_RATE:g}% bodyweight/week "
                "might be unsustainable"
            )

    if (
        draft.goal_type == "muscle_gain"
        and draft.surplus_calories
        and draft.surplus_calories > LARGE_SURPLUS_CALORIES
    ):
        warnings.append("Large calorie surplus might result in more fat gain than muscle gain")

    return warnings


def plan_from_draft(draft: GoalDraft) -> GoalPlan:
    """
    Convert a validated draft into its goal plan.

    Fields that do not belong to the goal type (e.g. a surplus on a
    fat-loss goal) are dropped.

    Raises:
        GoalValidationError: If the draft is not valid
    """
    validation = validate_goal_parameters(draft)
    if not validation.is_valid:
        raise GoalValidationError(validation.errors)

    if draft.goal_type == "fat_loss":
        if draft.rate_type == "absolute":
            return FatLoss(rate=AbsoluteRate(lbs_per_week=float(draft.target_rate_lbs)))  # type: ignore[arg-type]
        return FatLoss(rate=PercentageRate(percent_per_week=float(draft.target_rate_percent)))  # type: ignore[arg-type]
    if draft.goal_type == "muscle_gain":
        return MuscleGain(surplus_calories=draft.surplus_calories or None)
    return Maintenance()


def build_goal(
    draft: GoalDraft,
    start_weight: float,
    goal_id: int,
    start_date: date | None = None,
) -> Goal:
    """
    Create an active goal from a draft.

    Args:
        draft: Goal request
        start_weight: Current bodyweight, snapshotted as the goal baseline
        goal_id: Identifier for the new goal
        start_date: First day of the goal (default: today)

    Returns:
        New active Goal

    Raises:
        GoalValidationError: If the draft is not valid
    """
    plan = plan_from_draft(draft)
    return Goal(
        goal_id=goal_id,
        plan=plan,
        start_weight=start_weight,
        start_date=start_date or date.today(),
        duration_weeks=draft.duration_weeks,
    )


def active_goal(goals: Sequence[Goal]) -> Goal | None:
    """Return the active goal, or None."""
    for goal in goals:
        if goal.is_active:
            return goal
    return None


def next_goal_id(goals: Sequence[Goal]) -> int:
    return max((g.goal_id for g in goals), default=0) + 1


def activate_goal(goals: Sequence[Goal], new_goal: Goal) -> list[Goal]:
    """
    Add ``new_goal`` as the active goal.

    Every other goal is deactivated (superseded).  Completed goals keep
    their completion timestamp.

    Returns:
        New goal list, oldest first
    """
    updated = [replace(g, is_active=False) if g.is_active else g for g in goals]
    updated.append(replace(new_goal, is_active=True))
    return updated


def set_goal_active(goals: Sequence[Goal], goal_id: int) -> list[Goal]:
    """
    Make an existing goal the active one, deactivating all others.

    Raises:
        KeyError: If no goal has ``goal_id``
    """
    if not any(g.goal_id == goal_id for g in goals):
        raise KeyError(f"Goal {goal_id} not found")
    return [replace(g, is_active=(g.goal_id == goal_id)) for g in goals]


def complete_goal(goal: Goal, when: datetime | None = None) -> Goal:
    """Mark a goal completed: deactivate it and stamp the completion time."""
    return replace(goal, is_active=False, completed_at=when or datetime.now())
