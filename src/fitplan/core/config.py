"""
Configuration constants for the nutrition and training-volume model.

All adjustable parameters are centralized here for easy tuning.
"""

from typing import Final

# =============================================================================
# UNIT CONVERSION
# =============================================================================

LBS_PER_KG: Final[float] = 2.205
CM_PER_INCH: Final[float] = 2.54
DAYS_PER_YEAR: Final[float] = 365.25  # Age is floor(days alive / this)

# =============================================================================
# ENERGY ESTIMATION (Mifflin-St Jeor)
# =============================================================================

BMR_WEIGHT_COEF: Final[float] = 10.0  # per kg
BMR_HEIGHT_COEF: Final[float] = 6.25  # per cm
BMR_AGE_COEF: Final[float] = 5.0  # per year, subtracted
BMR_SEX_OFFSET: Final[dict[str, float]] = {
    "male": 5.0,
    "female": -161.0,
}

ACTIVITY_MULTIPLIERS: Final[dict[str, float]] = {
    "sedentary": 1.20,
    "lightly_active": 1.375,
    "moderately_active": 1.55,
    "very_active": 1.725,
    "extremely_active": 1.90,
}

ACTIVITY_DESCRIPTIONS: Final[dict[str, str]] = {
    "sedentary": "Office job, no exercise",
    "lightly_active": "Light exercise 1-3 days/week",
    "moderately_active": "Moderate exercise 3-5 days/week",
    "very_active": "Hard exercise 6-7 days/week",
    "extremely_active": "Very hard exercise, 2x/day",
}

# =============================================================================
# GOAL CALORIE ADJUSTMENT
# =============================================================================

CALORIES_PER_LB: Final[int] = 3500  # Energy content of one pound of body mass
CALORIE_FLOOR: Final[int] = 1100  # Adjusted target never drops below this

SUSTAINABLE_ABSOLUTE_RATE_LBS: Final[float] = 2.0  # Above: sustainability warning
SUSTAINABLE_PERCENT_RATE: Final[float] = 1.5  # % bodyweight/week
DEFAULT_SURPLUS_CALORIES: Final[int] = 300
LARGE_SURPLUS_CALORIES: Final[int] = 500  # Above: excess fat gain warning

# =============================================================================
# GOAL VALIDATION
# =============================================================================

MIN_GOAL_WEEKS: Final[int] = 2
MAX_GOAL_WEEKS: Final[int] = 16
MAX_ABSOLUTE_RATE_LBS: Final[float] = 3.0
MAX_PERCENT_RATE: Final[float] = 2.0
MIN_SURPLUS_CALORIES: Final[int] = 100
MAX_SURPLUS_CALORIES: Final[int] = 1000

# =============================================================================
# MACRO ALLOCATION
# =============================================================================

PROTEIN_G_PER_LB: Final[float] = 1.0
FAT_G_PER_LB: Final[float] = 0.25
FAT_MIN_G: Final[float] = 50.0

KCAL_PER_G_PROTEIN: Final[int] = 4
KCAL_PER_G_FAT: Final[int] = 9
KCAL_PER_G_CARBS: Final[int] = 4

# =============================================================================
# GOAL PROGRESS
# =============================================================================

MUSCLE_GAIN_RATE_LBS: Final[float] = 0.5  # Assumed lean gain per week
ON_TRACK_TOLERANCE: Final[float] = 0.20  # Relative variance band
MIN_EXPECTED_CHANGE_LBS: Final[float] = 0.1  # Below: on-track is indeterminate

MID_WEEK_NOTICE: Final[str] = (
    "Your goal started mid-week. Weekly progress starts from the first "
    "Sunday after your goal began."
)

# =============================================================================
# MUSCLE VOLUME
# =============================================================================

MUSCLE_GROUPS: Final[tuple[str, ...]] = (
    "CHEST",
    "BACK",
    "SHOULDERS",
    "TRICEPS",
    "BICEPS",
    "QUADS",
    "HAMSTRINGS",
    "GLUTES",
    "CALVES",
    "ABS",
    "FOREARMS",
)

PRIMARY_SET_CREDIT: Final[float] = 1.0
SECONDARY_SET_CREDIT: Final[float] = 0.5

# (low_below, high_above) in weekly sets
VOLUME_BANDS: Final[dict[bool, tuple[float, float]]] = {
    True: (3.0, 5.0),  # specialized
    False: (2.0, 4.0),
}

MAX_SPECIALIZED_GROUPS: Final[int] = 2

# =============================================================================
# MESOCYCLE BOUNDS
# =============================================================================

MIN_MESOCYCLE_WEEKS: Final[int] = 2
MAX_MESOCYCLE_WEEKS: Final[int] = 16
MIN_DAYS_PER_WEEK: Final[int] = 1
MAX_DAYS_PER_WEEK: Final[int] = 7


def clamp_goal_weeks(duration_weeks: int) -> int:
    """
    Clamp a goal duration into the supported range.

    Args:
        duration_weeks: Requested duration

    Returns:
        Duration within [MIN_GOAL_WEEKS, MAX_GOAL_WEEKS]
    """
    return max(MIN_GOAL_WEEKS, min(MAX_GOAL_WEEKS, duration_weeks))
