"""
Goal progress projection.

Compares the expected weight trajectory of a goal with logged weights,
both cumulatively (as of today) and as a series of weekly check-ins.

Check-ins are anchored to Sundays, not to the goal's start date, so the
user always weighs in on the same weekday.  Week 0 is the first Sunday on
or after the start date; for a goal started mid-week the days before that
Sunday do not belong to any check-in.

Expected trajectory:

    weekly_rate = -lbs_per_week                 fat loss, absolute
                  -start_weight * pct / 100     fat loss, percentage
                  +0.5                          muscle gain
                  0                             maintenance

    expected_change(t)  = weekly_rate * days_elapsed / 7
    expected_weight(n)  = start_weight + weekly_rate * n   (n-th Sunday)
"""

from datetime import date, timedelta
from typing import Sequence

from .config import (
    MID_WEEK_NOTICE,
    MIN_EXPECTED_CHANGE_LBS,
    MUSCLE_GAIN_RATE_LBS,
    ON_TRACK_TOLERANCE,
)
from .models import (
    FatLoss,
    Goal,
    GoalProgress,
    Maintenance,
    MuscleGain,
    WeeklyProgress,
    WeightEntry,
)
from .targets import fat_loss_lbs_per_week
from .units import round_tenth
from .weights import collapse_daily, current_weight, entries_between

ONE_WEEK = timedelta(weeks=1)
SUNDAY = 6  # date.weekday()


def weekly_rate(goal: Goal) -> float:
    """
    Expected bodyweight change per week in lbs (negative for fat loss).

    Percentage rates apply to the goal's start weight, so the trajectory
    stays fixed for the life of the goal.

    Raises:
        TypeError: If the goal type is not one of the known goal types
    """
    plan = goal.plan
    if isinstance(plan, FatLoss):
        return -fat_loss_lbs_per_week(plan.rate, goal.start_weight)
    if isinstance(plan, MuscleGain):
        return MUSCLE_GAIN_RATE_LBS
    if isinstance(plan, Maintenance):
        return 0.0
    raise TypeError(f"Unknown goal type: {plan!r}")


def sunday_on_or_before(day: date) -> date:
    """Start of the Sunday-based calendar week containing ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def first_check_in(start_date: date) -> date:
    """
    Sunday of week 0 for a goal starting on ``start_date``.

    Takes the Sunday starting the start date's week and moves one week on
    when that Sunday falls before the start date.
    """
    sunday = sunday_on_or_before(start_date)
    if sunday < start_date:
        sunday += ONE_WEEK
    return sunday


def next_check_in(today: date | None = None) -> date:
    """The next Sunday strictly after ``today``."""
    if today is None:
        today = date.today()
    return sunday_on_or_before(today + ONE_WEEK)


def started_mid_week(goal: Goal) -> bool:
    return goal.start_date.weekday() != SUNDAY


def is_on_track(expected_change: float, actual_change: float | None) -> bool | None:
    """
    Compare actual with expected cumulative change.

    On track means the relative variance |actual - expected| / |expected|
    is within the tolerance band.  Returns None when there is no actual
    change yet or the expected change is too small to judge against.
    """
    if actual_change is None or abs(expected_change) <= MIN_EXPECTED_CHANGE_LBS:
        return None
    variance = abs(actual_change - expected_change) / abs(expected_change)
    return variance <= ON_TRACK_TOLERANCE


def _check_in_weight(entries: list[WeightEntry], sunday: date) -> float | None:
    """Weight from the week ending on ``sunday`` that is closest to it."""
    in_window = entries_between(entries, sunday - ONE_WEEK, sunday)
    if not in_window:
        return None
    closest = min(in_window, key=lambda e: abs((sunday - e.entry_date).days))
    return closest.weight_lbs


def weekly_check_ins(
    goal: Goal,
    weight_history: Sequence[WeightEntry],
    today: date | None = None,
) -> list[WeeklyProgress]:
    """
    Build the Sunday-by-Sunday expected-vs-actual series.

    One row per Sunday from week 0 up to and including the goal end date.
    Sundays after ``today`` never get an actual weight.

    Args:
        goal: Goal to project
        weight_history: Logged weights (any order, duplicates per day allowed)
        today: Reference date (default: today)

    Returns:
        List of WeeklyProgress, weights rounded to 0.1 lb
    """
    if today is None:
        today = date.today()

    entries = collapse_daily(weight_history)
    rate = weekly_rate(goal)
    end_date = goal.end_date

    weeks: list[WeeklyProgress] = []
    sunday = first_check_in(goal.start_date)
    week_number = 0

    while sunday <= end_date:
        expected = goal.start_weight + rate * week_number
        actual = _check_in_weight(entries, sunday) if sunday <= today else None
        variance = actual - expected if actual is not None else None

        weeks.append(
            WeeklyProgress(
                week_number=week_number,
                week_label=f"{sunday:%b} {sunday.day}",
                check_in_date=sunday,
                expected_weight=round_tenth(expected),
                actual_weight=round_tenth(actual) if actual is not None else None,
                variance=round_tenth(variance) if variance is not None else None,
                is_current_week=today - ONE_WEEK < sunday < today + ONE_WEEK,
            )
        )

        sunday += ONE_WEEK
        week_number += 1

    return weeks


def project_goal_progress(
    goal: Goal,
    weight_history: Sequence[WeightEntry],
    today: date | None = None,
) -> GoalProgress:
    """
    Summarize progress of a goal as of ``today``.

    Args:
        goal: Goal to evaluate (duration is clamped to 2-16 weeks)
        weight_history: Logged weights; the latest by date is the current weight
        today: Reference date (default: today)

    Returns:
        GoalProgress.  ``current_weight_change`` and ``on_track`` are None
        without weight data; ``weekly_progress`` is empty in that case.
    """
    if today is None:
        today = date.today()

    end_date = goal.end_date
    total_days = (end_date - goal.start_date).days
    days_elapsed = max(0, (today - goal.start_date).days)
    days_remaining = max(0, (end_date - today).days)
    progress_percent = min(100.0, days_elapsed / total_days * 100)

    expected_change = weekly_rate(goal) * days_elapsed / 7

    weight = current_weight(weight_history)
    actual_change = weight - goal.start_weight if weight is not None else None

    weekly = weekly_check_ins(goal, weight_history, today) if weight_history else []
    mid_week = started_mid_week(goal)

    return GoalProgress(
        days_elapsed=days_elapsed,
        days_remaining=days_remaining,
        total_days=total_days,
        progress_percent=progress_percent,
        expected_weight_change=expected_change,
        current_weight_change=actual_change,
        on_track=is_on_track(expected_change, actual_change),
        weekly_progress=weekly,
        started_mid_week=mid_week,
        notice=MID_WEEK_NOTICE if mid_week else None,
    )
