"""
Energy expenditure estimation.

BMR uses the Mifflin-St Jeor equation:

    BMR = 10 * kg + 6.25 * cm - 5 * age + s      (s = +5 male, -161 female)

TDEE scales BMR by a fixed activity multiplier.  Weight is stored in
pounds and height in inches; both are converted before use.
"""

import math
from datetime import date

from .config import (
    ACTIVITY_MULTIPLIERS,
    BMR_AGE_COEF,
    BMR_HEIGHT_COEF,
    BMR_SEX_OFFSET,
    BMR_WEIGHT_COEF,
    DAYS_PER_YEAR,
)
from .models import EnergyEstimate, Profile
from .units import inches_to_cm, lbs_to_kg


def age_in_years(birth_date: date, today: date | None = None) -> int:
    """
    Whole years between ``birth_date`` and ``today``.

    age = floor(days / 365.25)
    """
    if today is None:
        today = date.today()
    return math.floor((today - birth_date).days / DAYS_PER_YEAR)


def bmr_mifflin_st_jeor(weight_lbs: float, height_inches: float, age: int, sex: str) -> float:
    """
    Calculate basal metabolic rate.

    Args:
        weight_lbs: Bodyweight in pounds
        height_inches: Height in inches
        age: Age in whole years
        sex: "male" or "female"

    Returns:
        BMR in kcal/day (unrounded)

    Raises:
        ValueError: If sex is not recognised
    """
    if sex not in BMR_SEX_OFFSET:
        raise ValueError(f"Unsupported sex: {sex!r}")
    return (
        BMR_WEIGHT_COEF * lbs_to_kg(weight_lbs)
        + BMR_HEIGHT_COEF * inches_to_cm(height_inches)
        - BMR_AGE_COEF * age
        + BMR_SEX_OFFSET[sex]
    )


def tdee_from_bmr(bmr: float, activity_level: str) -> float:
    """
    Scale BMR by the activity multiplier.

    Raises:
        ValueError: If activity_level is not one of the five tiers
    """
    if activity_level not in ACTIVITY_MULTIPLIERS:
        raise ValueError(f"Unknown activity level: {activity_level!r}")
    return bmr * ACTIVITY_MULTIPLIERS[activity_level]


def estimate_energy(
    profile: Profile,
    current_weight: float | None,
    today: date | None = None,
) -> EnergyEstimate | None:
    """
    Estimate BMR and TDEE for a profile at its current weight.

    TDEE is computed from the unrounded BMR.

    Args:
        profile: Body/activity attributes
        current_weight: Latest bodyweight in lbs (None if never logged)
        today: Reference date for age (default: today)

    Returns:
        EnergyEstimate, or None when the profile is incomplete or there is
        no weight to work from
    """
    if not profile.is_complete or current_weight is None or current_weight <= 0:
        return None

    age = age_in_years(profile.birth_date, today)  # type: ignore[arg-type]
    bmr = bmr_mifflin_st_jeor(
        current_weight,
        profile.height_inches,  # type: ignore[arg-type]
        age,
        profile.biological_sex,  # type: ignore[arg-type]
    )
    tdee = tdee_from_bmr(bmr, profile.activity_level)  # type: ignore[arg-type]
    return EnergyEstimate(bmr=bmr, tdee=tdee, age=age)
