"""
Data models for fitplan.

All core dataclasses for body data, goals, derived nutrition targets and
mesocycle plans.

Goal types form a closed set: ``FatLoss``, ``Maintenance`` and
``MuscleGain``.  A fat-loss goal carries exactly one rate, either
``AbsoluteRate`` or ``PercentageRate``, so a goal with both (or neither)
rate set cannot be constructed.  Loose user input that may be invalid is
held in ``GoalDraft`` until it has been validated.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import ClassVar, Literal

from .config import (
    ACTIVITY_MULTIPLIERS,
    DEFAULT_SURPLUS_CALORIES,
    MAX_SPECIALIZED_GROUPS,
    MUSCLE_GROUPS,
    clamp_goal_weeks,
)

Sex = Literal["male", "female"]
ActivityLevel = Literal[
    "sedentary",
    "lightly_active",
    "moderately_active",
    "very_active",
    "extremely_active",
]
GoalType = Literal["fat_loss", "maintenance", "muscle_gain"]
RateType = Literal["absolute", "percentage"]
VolumeWarning = Literal["low", "normal", "high", "none"]

# Muscle groups are upper-case names from config.MUSCLE_GROUPS
MuscleGroup = str


def _check_muscle_group(group: str, what: str) -> None:
    if group not in MUSCLE_GROUPS:
        raise ValueError(f"Invalid {what}: {group!r}")


# =============================================================================
# Body data
# =============================================================================


@dataclass
class Profile:
    """
    Body and activity attributes used for energy estimation.

    Every field may be unset while the user is still filling in their
    settings; calculations only run once ``is_complete`` is true.
    """

    height_inches: float | None = None
    biological_sex: Sex | None = None
    birth_date: date | None = None
    activity_level: ActivityLevel | None = None

    def __post_init__(self) -> None:
        """Validate the fields that are set."""
        if self.height_inches is not None and self.height_inches <= 0:
            raise ValueError("height_inches must be positive")

        if self.biological_sex is not None and self.biological_sex not in ("male", "female"):
            raise ValueError(f"Invalid biological_sex: {self.biological_sex}")

        if self.activity_level is not None and self.activity_level not in ACTIVITY_MULTIPLIERS:
            raise ValueError(
                f"Invalid activity_level: {self.activity_level!r}. "
                f"Must be one of {', '.join(ACTIVITY_MULTIPLIERS)}"
            )

    def missing_fields(self) -> list[str]:
        """Return the names of required fields that are still unset."""
        return [
            name
            for name in ("height_inches", "biological_sex", "birth_date", "activity_level")
            if getattr(self, name) is None
        ]

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields()


@dataclass
class WeightEntry:
    """A single bodyweight observation."""

    weight_lbs: float
    entry_date: date
    note: str | None = None

    def __post_init__(self) -> None:
        if self.weight_lbs <= 0:
            raise ValueError("weight_lbs must be positive")


# =============================================================================
# Goals
# =============================================================================


@dataclass(frozen=True)
class AbsoluteRate:
    """Fat-loss rate in pounds per week."""

    lbs_per_week: float
    rate_type: ClassVar[RateType] = "absolute"

    def __post_init__(self) -> None:
        if self.lbs_per_week <= 0:
            raise ValueError("lbs_per_week must be positive")


@dataclass(frozen=True)
class PercentageRate:
    """Fat-loss rate as percent of current bodyweight per week."""

    percent_per_week: float
    rate_type: ClassVar[RateType] = "percentage"

    def __post_init__(self) -> None:
        if self.percent_per_week <= 0:
            raise ValueError("percent_per_week must be positive")


FatLossRate = AbsoluteRate | PercentageRate


@dataclass(frozen=True)
class FatLoss:
    rate: FatLossRate
    goal_type: ClassVar[GoalType] = "fat_loss"


@dataclass(frozen=True)
class Maintenance:
    goal_type: ClassVar[GoalType] = "maintenance"


@dataclass(frozen=True)
class MuscleGain:
    """Calorie surplus goal.  ``surplus_calories=None`` means the default surplus."""

    surplus_calories: int | None = None
    goal_type: ClassVar[GoalType] = "muscle_gain"

    @property
    def effective_surplus(self) -> int:
        return self.surplus_calories or DEFAULT_SURPLUS_CALORIES


GoalPlan = FatLoss | Maintenance | MuscleGain


@dataclass(frozen=True)
class Goal:
    """
    A time-boxed body-composition goal.

    ``start_weight`` is the bodyweight snapshot taken when the goal was
    created and never changes afterwards; the dataclass is frozen, and
    lifecycle changes (deactivation, completion) produce new instances.
    """

    goal_id: int
    plan: GoalPlan
    start_weight: float
    start_date: date
    duration_weeks: int
    is_active: bool = True
    completed_at: datetime | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.plan, (FatLoss, Maintenance, MuscleGain)):
            raise TypeError(f"Unknown goal plan: {self.plan!r}")
        if self.start_weight <= 0:
            raise ValueError("start_weight must be positive")

    @property
    def goal_type(self) -> GoalType:
        return self.plan.goal_type

    @property
    def effective_weeks(self) -> int:
        """Duration clamped to the supported 2-16 week range."""
        return clamp_goal_weeks(self.duration_weeks)

    @property
    def end_date(self) -> date:
        return self.start_date + timedelta(weeks=self.effective_weeks)


@dataclass
class GoalDraft:
    """
    Unvalidated goal request as entered by the user.

    Mirrors the goal creation form: flat optional fields that may describe
    an impossible goal.  Pass through ``validate_goal_parameters`` before
    turning it into a ``Goal``.
    """

    goal_type: str
    duration_weeks: int
    rate_type: str | None = None
    target_rate_lbs: float | None = None
    target_rate_percent: float | None = None
    surplus_calories: int | None = None


@dataclass
class GoalValidation:
    """Outcome of goal parameter validation."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)


# =============================================================================
# Derived nutrition results
# =============================================================================


@dataclass
class EnergyEstimate:
    """BMR and TDEE in kcal/day (unrounded) plus the age they were computed for."""

    bmr: float
    tdee: float
    age: int


@dataclass
class CalorieAdjustment:
    """Goal-adjusted daily calorie target."""

    adjusted_calories: int
    reason: str
    warnings: list[str] = field(default_factory=list)


@dataclass
class MacroTargets:
    """Daily macro targets in grams and the calories they provide."""

    protein_g: int
    fat_g: int
    carbs_g: int
    protein_kcal: int
    fat_kcal: int
    carbs_kcal: int

    @property
    def total_kcal(self) -> int:
        return self.protein_kcal + self.fat_kcal + self.carbs_kcal


@dataclass
class NutritionTargets:
    """Everything the calorie calculator shows for one person on one day."""

    current_weight: float
    energy: EnergyEstimate
    adjustment: CalorieAdjustment
    macros: MacroTargets


# =============================================================================
# Goal progress
# =============================================================================


@dataclass
class WeeklyProgress:
    """One Sunday check-in of the expected-vs-actual trajectory."""

    week_number: int  # 0 = first check-in Sunday
    week_label: str  # e.g. "Mar 3"
    check_in_date: date
    expected_weight: float
    actual_weight: float | None = None
    variance: float | None = None  # actual - expected
    is_current_week: bool = False


@dataclass
class GoalProgress:
    """Progress of a goal as of one day."""

    days_elapsed: int
    days_remaining: int
    total_days: int
    progress_percent: float
    expected_weight_change: float
    current_weight_change: float | None
    on_track: bool | None  # None when there is not enough signal to judge
    weekly_progress: list[WeeklyProgress] = field(default_factory=list)
    started_mid_week: bool = False
    notice: str | None = None


# =============================================================================
# Training plans
# =============================================================================


@dataclass(frozen=True)
class Exercise:
    """
    An exercise from the library.

    ``use_rir_rpe`` selects whether sets of this exercise are logged with
    an RIR/RPE intensity value.
    """

    exercise_id: str
    name: str
    primary: MuscleGroup
    secondary: tuple[MuscleGroup, ...] = ()
    use_rir_rpe: bool = True
    equipment: str | None = None
    notes: str | None = None

    def __post_init__(self) -> None:
        if not self.exercise_id:
            raise ValueError("exercise_id must be non-empty")
        _check_muscle_group(self.primary, "primary muscle group")
        for group in self.secondary:
            _check_muscle_group(group, "secondary muscle group")


@dataclass
class DayPlan:
    """One training day: ordered exercise ids (order is list order)."""

    day: int
    exercises: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.day < 1:
            raise ValueError("day must be 1 or greater")


@dataclass
class MesocyclePlan:
    """
    A training block whose days repeat every week for ``weeks`` weeks.

    ``exercise_db`` holds exercises defined inline with the plan; they take
    precedence over the shared exercise library.
    """

    name: str
    weeks: int
    days_per_week: int
    days: list[DayPlan] = field(default_factory=list)
    specialization: tuple[MuscleGroup, ...] = ()
    goal_statement: str | None = None
    exercise_db: dict[str, Exercise] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if len(self.specialization) > MAX_SPECIALIZED_GROUPS:
            raise ValueError(
                f"At most {MAX_SPECIALIZED_GROUPS} muscle groups can be specialized"
            )
        if len(set(self.specialization)) != len(self.specialization):
            raise ValueError(f"Duplicate specialized muscle group: {self.specialization}")
        for group in self.specialization:
            _check_muscle_group(group, "specialized muscle group")

    def is_specialized(self, group: MuscleGroup) -> bool:
        return group in self.specialization


@dataclass
class MuscleGroupReport:
    """Weekly volume of one muscle group with its advisory warning."""

    muscle_group: MuscleGroup
    volume: float
    warning: VolumeWarning
    specialized: bool
