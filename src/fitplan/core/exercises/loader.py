"""
YAML -> Exercise loader.

Loads exercise definitions from individual YAML files in the bundled
``src/fitplan/exercises/`` directory.  Each file (e.g. squat.yaml) holds a
flat exercise definition matching the Exercise dataclass.

User overrides: place matching files in ``$FITPLAN_HOME/exercises/``
(default ``~/.fitplan/exercises/``).  A user file is merged over the
bundled definition, so only changed keys need to be listed.  A user file
whose stem does not match any bundled file is added as a new exercise.

Usage (internal, called by registry.py):
    from .loader import load_exercises_from_yaml
    exercises = load_exercises_from_yaml()
"""

from __future__ import annotations

import os
import warnings
from pathlib import Path

import yaml

from ..models import Exercise

_REQUIRED_FIELDS: frozenset[str] = frozenset({"exercise_id", "name", "primary"})


def exercise_from_dict(d: dict) -> Exercise:
    """Convert a raw dict (from YAML) to an Exercise.

    Raises ValueError if a required field is absent or a muscle group is unknown.
    """
    missing = _REQUIRED_FIELDS - set(d)
    if missing:
        raise ValueError(f"Exercise missing fields: {sorted(missing)}")

    secondary = d.get("secondary") or []
    return Exercise(
        exercise_id=str(d["exercise_id"]),
        name=str(d["name"]),
        primary=str(d["primary"]).upper(),
        secondary=tuple(str(g).upper() for g in secondary),
        use_rir_rpe=bool(d.get("use_rir_rpe", True)),
        equipment=d.get("equipment"),
        notes=d.get("notes"),
    )


def exercise_to_dict(exercise: Exercise) -> dict:
    d: dict = {
        "exercise_id": exercise.exercise_id,
        "name": exercise.name,
        "primary": exercise.primary,
        "secondary": list(exercise.secondary),
        "use_rir_rpe": exercise.use_rir_rpe,
    }
    if exercise.equipment:
        d["equipment"] = exercise.equipment
    if exercise.notes:
        d["notes"] = exercise.notes
    return d


def _load_yaml_file(path: Path) -> dict:
    """Load a YAML mapping; warn and return {} if the file cannot be read."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"fitplan: cannot read {path} ({exc}); skipping", stacklevel=3)
        return {}
    return data if isinstance(data, dict) else {}


def _get_bundled_exercises_dir() -> Path | None:
    """Return path to the bundled exercises/ data directory, or None if not found."""
    # loader.py lives at src/fitplan/core/exercises/loader.py
    candidate = Path(__file__).parent.parent.parent / "exercises"
    return candidate if candidate.is_dir() else None


def fitplan_home() -> Path:
    """Directory holding user files: $FITPLAN_HOME, else ~/.fitplan."""
    home = os.environ.get("FITPLAN_HOME")
    return Path(home).expanduser() if home else Path.home() / ".fitplan"


def _get_user_exercises_dir() -> Path | None:
    """Return $FITPLAN_HOME/exercises/ if it exists, else None."""
    p = fitplan_home() / "exercises"
    return p if p.is_dir() else None


def load_exercises_from_dir(
    bundled_dir: Path | None,
    user_dir: Path | None = None,
) -> dict[str, Exercise]:
    """Return {exercise_id: Exercise} from bundled files merged with user files.

    Invalid definitions are skipped with a warning.
    """
    result: dict[str, Exercise] = {}

    stems: dict[str, Path] = {}
    if bundled_dir is not None:
        for p in sorted(bundled_dir.glob("*.yaml")):
            stems[p.stem] = p

    user_only: list[Path] = []
    if user_dir is not None:
        for p in sorted(user_dir.glob("*.yaml")):
            if p.stem not in stems:
                user_only.append(p)

    for stem, bundled_path in stems.items():
        raw = _load_yaml_file(bundled_path)
        if not raw:
            continue
        if user_dir is not None:
            user_path = user_dir / f"{stem}.yaml"
            if user_path.exists():
                raw = {**raw, **_load_yaml_file(user_path)}
        try:
            ex = exercise_from_dict(raw)
            result[ex.exercise_id] = ex
        except ValueError as exc:
            warnings.warn(f"fitplan: skipping exercise '{stem}': {exc}", stacklevel=2)

    for p in user_only:
        raw = _load_yaml_file(p)
        if not raw:
            continue
        try:
            ex = exercise_from_dict(raw)
            result[ex.exercise_id] = ex
        except ValueError as exc:
            warnings.warn(f"fitplan: skipping user exercise '{p.stem}': {exc}", stacklevel=2)

    return result


def load_exercises_from_yaml() -> dict[str, Exercise]:
    """Load the bundled library with the user's overrides applied."""
    return load_exercises_from_dir(_get_bundled_exercises_dir(), _get_user_exercises_dir())
