"""
JSON/YAML serialization for fitplan data models.

Handles conversion between dataclasses and JSON-compatible dicts.  Dates
are stored as ISO strings (YYYY-MM-DD).
"""

import json
import re
from datetime import date, datetime
from typing import Any

from ..core.exercises.loader import exercise_from_dict, exercise_to_dict
from ..core.models import (
    AbsoluteRate,
    DayPlan,
    FatLoss,
    Goal,
    GoalPlan,
    Maintenance,
    MesocyclePlan,
    MuscleGain,
    PercentageRate,
    Profile,
    WeightEntry,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_date(date_str: str) -> date:
    """
    Parse an ISO date string.

    Args:
        date_str: Date string to validate

    Returns:
        Parsed date

    Raises:
        ValidationError: If date format is invalid
    """
    if not isinstance(date_str, str) or not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValidationError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError as e:
        raise ValidationError(f"Invalid date: {date_str}") from e


def validate_positive(value: Any, name: str) -> float:
    """
    Validate that a value is a positive number.

    Raises:
        ValidationError: If value is missing, not numeric or not positive
    """
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} must be a number, got {value!r}") from e
    if number <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return number


def _optional_date(value: Any) -> date | None:
    return validate_date(value) if value else None


def _require_mapping(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationError(f"{what} must be a JSON object, got {type(data).__name__}")
    return data


# =============================================================================
# Profile
# =============================================================================


def profile_to_dict(profile: Profile) -> dict[str, Any]:
    return {
        "height_inches": profile.height_inches,
        "biological_sex": profile.biological_sex,
        "birth_date": profile.birth_date.isoformat() if profile.birth_date else None,
        "activity_level": profile.activity_level,
    }


def dict_to_profile(data: dict[str, Any]) -> Profile:
    """
    Convert dict to Profile.

    Raises:
        ValidationError: If a set field is invalid
    """
    data = _require_mapping(data, "Profile")
    height = data.get("height_inches")
    try:
        return Profile(
            height_inches=float(height) if height is not None else None,
            biological_sex=data.get("biological_sex"),
            birth_date=_optional_date(data.get("birth_date")),
            activity_level=data.get("activity_level"),
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(str(e)) from e


# =============================================================================
# Weight entries
# =============================================================================


def weight_entry_to_dict(entry: WeightEntry) -> dict[str, Any]:
    d: dict[str, Any] = {
        "entry_date": entry.entry_date.isoformat(),
        "weight_lbs": entry.weight_lbs,
    }
    if entry.note:
        d["note"] = entry.note
    return d


def dict_to_weight_entry(data: dict[str, Any]) -> WeightEntry:
    """
    Convert dict to WeightEntry.

    Raises:
        ValidationError: If date or weight is invalid
    """
    data = _require_mapping(data, "Weight entry")
    if "entry_date" not in data:
        raise ValidationError("Weight entry missing entry_date")
    return WeightEntry(
        weight_lbs=validate_positive(data.get("weight_lbs"), "weight_lbs"),
        entry_date=validate_date(data["entry_date"]),
        note=data.get("note"),
    )


def weight_to_json_line(entry: WeightEntry) -> str:
    """Serialize a weight entry as one JSONL line (no trailing newline)."""
    return json.dumps(weight_entry_to_dict(entry), separators=(",", ":"))


# =============================================================================
# Goals
# =============================================================================


def goal_plan_to_dict(plan: GoalPlan) -> dict[str, Any]:
    """
    Flatten a goal plan into its stored fields.

    Fat-loss rates are stored as a nested {"type", "value"} mapping so a
    stored goal can only ever hold one rate.
    """
    if isinstance(plan, FatLoss):
        if isinstance(plan.rate, AbsoluteRate):
            rate = {"type": "absolute", "value": plan.rate.lbs_per_week}
        else:
            rate = {"type": "percentage", "value": plan.rate.percent_per_week}
        return {"goal_type": plan.goal_type, "rate": rate}
    if isinstance(plan, MuscleGain):
        return {"goal_type": plan.goal_type, "surplus_calories": plan.surplus_calories}
    if isinstance(plan, Maintenance):
        return {"goal_type": plan.goal_type}
    raise TypeError(f"Unknown goal plan: {plan!r}")


def dict_to_goal_plan(data: dict[str, Any]) -> GoalPlan:
    """
    Rebuild a goal plan from stored fields.

    Raises:
        ValidationError: If goal_type or rate is missing or unknown
    """
    goal_type = data.get("goal_type")
    try:
        if goal_type == "maintenance":
            return Maintenance()
        if goal_type == "muscle_gain":
            surplus = data.get("surplus_calories")
            return MuscleGain(surplus_calories=int(surplus) if surplus is not None else None)
        if goal_type == "fat_loss":
            rate = data.get("rate") or {}
            rate = _require_mapping(rate, "Fat loss rate")
            if rate.get("type") == "absolute":
                return FatLoss(rate=AbsoluteRate(lbs_per_week=float(rate["value"])))
            if rate.get("type") == "percentage":
                return FatLoss(rate=PercentageRate(percent_per_week=float(rate["value"])))
            raise ValidationError(f"Invalid fat loss rate: {rate!r}")
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid {goal_type} goal: {e}") from e
    raise ValidationError(
        f"Invalid goal_type: {goal_type!r}. Must be one of fat_loss, maintenance, muscle_gain"
    )


def goal_to_dict(goal: Goal) -> dict[str, Any]:
    d: dict[str, Any] = {
        "goal_id": goal.goal_id,
        **goal_plan_to_dict(goal.plan),
        "start_weight": goal.start_weight,
        "start_date": goal.start_date.isoformat(),
        "duration_weeks": goal.duration_weeks,
        "end_date": goal.end_date.isoformat(),  # informational; recomputed on load
        "is_active": goal.is_active,
        "completed_at": goal.completed_at.isoformat() if goal.completed_at else None,
    }
    return d


def dict_to_goal(data: dict[str, Any]) -> Goal:
    """
    Convert dict to Goal.

    Raises:
        ValidationError: If any field is missing or invalid
    """
    data = _require_mapping(data, "Goal")
    for key in ("goal_id", "goal_type", "start_weight", "start_date", "duration_weeks"):
        if key not in data:
            raise ValidationError(f"Goal missing field: {key}")

    completed_raw = data.get("completed_at")
    try:
        completed_at = datetime.fromisoformat(completed_raw) if completed_raw else None
        return Goal(
            goal_id=int(data["goal_id"]),
            plan=dict_to_goal_plan(data),
            start_weight=validate_positive(data["start_weight"], "start_weight"),
            start_date=validate_date(data["start_date"]),
            duration_weeks=int(data["duration_weeks"]),
            is_active=bool(data.get("is_active", False)),
            completed_at=completed_at,
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid goal {data.get('goal_id')}: {e}") from e


# =============================================================================
# Mesocycle plans
# =============================================================================


def mesocycle_to_dict(plan: MesocyclePlan) -> dict[str, Any]:
    d: dict[str, Any] = {
        "name": plan.name,
        "weeks": plan.weeks,
        "days_per_week": plan.days_per_week,
        "specialization": list(plan.specialization),
        "days": [{"day": day.day, "exercises": list(day.exercises)} for day in plan.days],
    }
    if plan.goal_statement:
        d["goal_statement"] = plan.goal_statement
    if plan.exercise_db:
        d["exercises"] = [exercise_to_dict(ex) for ex in plan.exercise_db.values()]
    return d


def _day_exercise_ids(raw: list) -> list[str]:
    """Accept plain ids or {exercise_id, order_index} records (sorted by order)."""
    records = [item for item in raw if isinstance(item, dict)]
    if not records:
        return [str(item) for item in raw]
    if len(records) != len(raw):
        raise ValidationError("Day exercises must be all ids or all {exercise_id, order_index} records")
    ordered = sorted(records, key=lambda item: item.get("order_index", 0))
    return [str(item["exercise_id"]) for item in ordered]


def dict_to_mesocycle(data: dict[str, Any]) -> MesocyclePlan:
    """
    Convert dict (from a plan YAML file) to MesocyclePlan.

    Raises:
        ValidationError: If required fields are missing or invalid
    """
    data = _require_mapping(data, "Mesocycle plan")
    for key in ("name", "weeks", "days_per_week"):
        if key not in data:
            raise ValidationError(f"Mesocycle missing field: {key}")

    try:
        days = [
            DayPlan(day=int(raw["day"]), exercises=_day_exercise_ids(raw.get("exercises") or []))
            for raw in data.get("days") or []
        ]
        inline = [exercise_from_dict(raw) for raw in data.get("exercises") or []]
        return MesocyclePlan(
            name=str(data["name"]),
            weeks=int(data["weeks"]),
            days_per_week=int(data["days_per_week"]),
            days=days,
            specialization=tuple(str(g).upper() for g in data.get("specialization") or []),
            goal_statement=data.get("goal_statement"),
            exercise_db={ex.exercise_id: ex for ex in inline},
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid mesocycle plan: {e}") from e
