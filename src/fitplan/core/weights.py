"""
Weight-history helpers.

All functions are pure and leave their input lists untouched.
"""

from datetime import date
from typing import Sequence

from .models import WeightEntry


def collapse_daily(entries: Sequence[WeightEntry]) -> list[WeightEntry]:
    """
    Keep one entry per date, sorted by date.

    When several entries share a date the one recorded last (later in
    ``entries``) wins.

    Args:
        entries: Weight entries in recording order

    Returns:
        Chronological list with unique dates
    """
    by_date: dict[date, WeightEntry] = {}
    for entry in entries:
        by_date[entry.entry_date] = entry
    return [by_date[d] for d in sorted(by_date)]


def current_weight(entries: Sequence[WeightEntry]) -> float | None:
    """
    Most recent bodyweight by date.

    Args:
        entries: Weight entries in recording order

    Returns:
        Weight in lbs, or None when there are no entries
    """
    daily = collapse_daily(entries)
    if not daily:
        return None
    return daily[-1].weight_lbs


def entries_between(
    entries: Sequence[WeightEntry],
    start: date,
    end: date,
) -> list[WeightEntry]:
    """Entries with ``start < entry_date <= end``, collapsed per day."""
    return [e for e in collapse_daily(entries) if start < e.entry_date <= end]
