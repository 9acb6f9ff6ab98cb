"""
Exercise library for fitplan.

Each exercise names its primary and secondary muscle groups, which drive
the weekly muscle-volume calculation.
"""

from .loader import exercise_from_dict, exercise_to_dict
from .registry import EXERCISE_LIBRARY, exercises_for_muscle, get_exercise

__all__ = [
    "EXERCISE_LIBRARY",
    "exercise_from_dict",
    "exercise_to_dict",
    "exercises_for_muscle",
    "get_exercise",
]
