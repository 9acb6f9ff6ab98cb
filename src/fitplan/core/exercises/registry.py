"""
Exercise library.

Default exercises are loaded from per-exercise YAML files in the bundled
``src/fitplan/exercises/`` directory at import time.  If no definition can
be loaded at all a RuntimeError is raised; mesocycle plans cannot be
analysed without a library.

User overrides: place matching files in ``~/.fitplan/exercises/``.
"""

from ..config import MUSCLE_GROUPS
from ..models import Exercise
from .loader import load_exercises_from_yaml


def _build_library() -> dict[str, Exercise]:
    loaded = load_exercises_from_yaml()
    if not loaded:
        raise RuntimeError(
            "fitplan: no exercise definitions could be loaded from YAML. "
            "Check that src/fitplan/exercises/*.yaml files are present and valid."
        )
    return loaded


EXERCISE_LIBRARY: dict[str, Exercise] = _build_library()


def get_exercise(exercise_id: str) -> Exercise:
    """
    Return the Exercise for the given exercise_id.

    Raises:
        ValueError: If exercise_id is not in the library
    """
    if exercise_id not in EXERCISE_LIBRARY:
        valid = ", ".join(EXERCISE_LIBRARY)
        raise ValueError(f"Unknown exercise '{exercise_id}'. Valid IDs: {valid}")
    return EXERCISE_LIBRARY[exercise_id]


def exercises_for_muscle(group: str) -> list[Exercise]:
    """Library exercises training ``group`` as primary or secondary mover."""
    group = group.upper()
    if group not in MUSCLE_GROUPS:
        raise ValueError(f"Unknown muscle group '{group}'")
    return [
        ex
        for ex in EXERCISE_LIBRARY.values()
        if ex.primary == group or group in ex.secondary
    ]


def format_muscle_group_name(group: str) -> str:
    """'HAMSTRINGS' -> 'Hamstrings'."""
    return group[:1] + group[1:].lower()
