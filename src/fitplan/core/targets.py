"""
Goal-adjusted calorie targets and macro allocation.

Calorie adjustment by goal type:

    fat_loss     adjusted = TDEE - (lbs_per_week * 3500) / 7, floored at 1100
    maintenance  adjusted = TDEE
    muscle_gain  adjusted = TDEE + surplus (default 300)

Macros are allocated from the adjusted figure:

    protein = 1 g per lb bodyweight
    fat     = max(50 g, 0.25 g per lb)
    carbs   = whatever calories remain, at 4 kcal/g

Warnings are advisory: they never block the calculation.
"""

from datetime import date
from typing import Sequence

from .config import (
    CALORIE_FLOOR,
    CALORIES_PER_LB,
    FAT_G_PER_LB,
    FAT_MIN_G,
    KCAL_PER_G_CARBS,
    KCAL_PER_G_FAT,
    KCAL_PER_G_PROTEIN,
    LARGE_SURPLUS_CALORIES,
    PROTEIN_G_PER_LB,
    SUSTAINABLE_ABSOLUTE_RATE_LBS,
    SUSTAINABLE_PERCENT_RATE,
)
from .energy import estimate_energy
from .models import (
    AbsoluteRate,
    CalorieAdjustment,
    FatLoss,
    FatLossRate,
    Goal,
    GoalPlan,
    MacroTargets,
    Maintenance,
    MuscleGain,
    NutritionTargets,
    PercentageRate,
    Profile,
    WeightEntry,
)
from .units import round_int
from .weights import current_weight as latest_weight

FLOOR_WARNING = (
    f"Calories adjusted to {CALORIE_FLOOR} minimum for safety - "
    "this may result in slower weight loss"
)
ABSOLUTE_RATE_WARNING = (
    f"Weight loss rate above {SUSTAINABLE_ABSOLUTE_RATE_LBS:g} lbs/week may be unsustainable"
)
PERCENT_RATE_WARNING = (
    f"Weight loss rate above {SUSTAINABLE_PERCENT_RATE:g}% bodyweight/week may be unsustainable"
)
SURPLUS_WARNING = "Large calorie surplus may result in more fat gain than muscle gain"
NO_GOAL_REASON = "Maintenance calories (no active goal)"


def fat_loss_lbs_per_week(rate: FatLossRate, bodyweight: float) -> float:
    """
    Convert a fat-loss rate to pounds per week.

    Args:
        rate: Absolute (lbs/week) or percentage (% bodyweight/week) rate
        bodyweight: Bodyweight the percentage applies to, in lbs

    Returns:
        Weekly loss in lbs (positive)
    """
    if isinstance(rate, AbsoluteRate):
        return rate.lbs_per_week
    if isinstance(rate, PercentageRate):
        return bodyweight * rate.percent_per_week / 100
    raise TypeError(f"Unknown fat-loss rate: {rate!r}")


def sustainability_warnings(rate: FatLossRate) -> list[str]:
    """Advisory warnings for aggressive fat-loss rates."""
    if isinstance(rate, AbsoluteRate):
        if rate.lbs_per_week > SUSTAINABLE_ABSOLUTE_RATE_LBS:
            return [ABSOLUTE_RATE_WARNING]
        return []
    if isinstance(rate, PercentageRate):
        if rate.percent_per_week > SUSTAINABLE_PERCENT_RATE:
            return [PERCENT_RATE_WARNING]
        return []
    raise TypeError(f"Unknown fat-loss rate: {rate!r}")


def _rate_reason(rate: FatLossRate) -> str:
    if isinstance(rate, AbsoluteRate):
        return f"{rate.lbs_per_week} lbs/week target"
    return f"{rate.percent_per_week}% bodyweight/week target"


def adjust_calories_for_goal(
    tdee: float,
    current_weight: float,
    goal: Goal | GoalPlan,
) -> CalorieAdjustment:
    """
    Apply goal-specific arithmetic to TDEE.

    Args:
        tdee: Total daily energy expenditure (kcal)
        current_weight: Current bodyweight in lbs (percentage rates use it)
        goal: Active goal, or just its plan

    Returns:
        CalorieAdjustment with whole-calorie target, reason and warnings

    Raises:
        TypeError: If the goal type is not one of the known goal types
    """
    plan = goal.plan if isinstance(goal, Goal) else goal
    warnings: list[str] = []

    if isinstance(plan, Maintenance):
        adjusted = tdee
        reason = "Maintenance calories"

    elif isinstance(plan, FatLoss):
        weekly_deficit = fat_loss_lbs_per_week(plan.rate, current_weight) * CALORIES_PER_LB
        adjusted = tdee - weekly_deficit / 7
        reason = _rate_reason(plan.rate)
        warnings.extend(sustainability_warnings(plan.rate))

        if adjusted < CALORIE_FLOOR:
            adjusted = CALORIE_FLOOR
            warnings.append(FLOOR_WARNING)
            reason += " (limited by safety floor)"

    elif isinstance(plan, MuscleGain):
        surplus = plan.effective_surplus
        adjusted = tdee + surplus
        reason = f"{surplus} calorie surplus for muscle gain"
        if surplus > LARGE_SURPLUS_CALORIES:
            warnings.append(SURPLUS_WARNING)

    else:
        raise TypeError(f"Unknown goal type: {plan!r}")

    return CalorieAdjustment(
        adjusted_calories=round_int(adjusted),
        reason=reason,
        warnings=warnings,
    )


def allocate_macros(adjusted_calories: float, current_weight: float) -> MacroTargets:
    """
    Split a calorie target into protein, fat and carbohydrate.

    Must be called with the goal-adjusted calories, not raw TDEE, whenever
    a goal is active.  Calories per macro are recomputed from the rounded
    grams so the displayed numbers agree with each other.

    Args:
        adjusted_calories: Daily calorie target
        current_weight: Current bodyweight in lbs

    Returns:
        MacroTargets in whole grams
    """
    protein = current_weight * PROTEIN_G_PER_LB
    fat = max(FAT_MIN_G, current_weight * FAT_G_PER_LB)
    remaining = max(
        0.0,
        adjusted_calories - protein * KCAL_PER_G_PROTEIN - fat * KCAL_PER_G_FAT,
    )
    carbs = remaining / KCAL_PER_G_CARBS

    protein_g = round_int(protein)
    fat_g = round_int(fat)
    carbs_g = round_int(carbs)

    return MacroTargets(
        protein_g=protein_g,
        fat_g=fat_g,
        carbs_g=carbs_g,
        protein_kcal=protein_g * KCAL_PER_G_PROTEIN,
        fat_kcal=fat_g * KCAL_PER_G_FAT,
        carbs_kcal=carbs_g * KCAL_PER_G_CARBS,
    )


def compute_nutrition_targets(
    profile: Profile,
    weights: Sequence[WeightEntry],
    goal: Goal | None = None,
    today: date | None = None,
) -> NutritionTargets | None:
    """
    Full calorie-calculator pipeline: energy -> goal adjustment -> macros.

    Args:
        profile: Body/activity attributes
        weights: Weight history (current weight = latest by date)
        goal: Active goal, if any
        today: Reference date for age

    Returns:
        NutritionTargets, or None if the profile is incomplete or no
        weight has been logged
    """
    weight = latest_weight(weights)
    energy = estimate_energy(profile, weight, today)
    if energy is None or weight is None:
        return None

    if goal is not None:
        adjustment = adjust_calories_for_goal(energy.tdee, weight, goal)
    else:
        adjustment = CalorieAdjustment(
            adjusted_calories=round_int(energy.tdee),
            reason=NO_GOAL_REASON,
        )

    return NutritionTargets(
        current_weight=weight,
        energy=energy,
        adjustment=adjustment,
        macros=allocate_macros(adjustment.adjusted_calories, weight),
    )
