"""
YAML settings loader.

Loads CLI defaults from ``settings.yaml`` (bundled with the package) and
merges user overrides from ``$FITPLAN_HOME/settings.yaml`` (default
``~/.fitplan/settings.yaml``).

Usage:
    from fitplan.io.settings import load_settings
    settings = load_settings()
    weeks = settings["goals"]["default_duration_weeks"]

If a settings file cannot be parsed a warning is issued and the file is
ignored; the built-in defaults below always apply.
"""

from __future__ import annotations

import warnings
from pathlib import Path
from typing import Any

import yaml

from ..core.exercises.loader import fitplan_home

DEFAULT_SETTINGS: dict[str, Any] = {
    "data_dir": None,  # None = FITPLAN_HOME or ~/.fitplan
    "goals": {
        "default_duration_weeks": 8,
        "default_surplus_calories": 300,
    },
}


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML mapping; warn and return {} on parse errors."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"fitplan: ignoring settings file {path} ({exc})", stacklevel=3)
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def get_bundled_settings_path() -> Path | None:
    """Return the path to the bundled settings.yaml, or None if not found."""
    candidate = Path(__file__).parent.parent / "settings.yaml"
    return candidate if candidate.exists() else None


def get_user_settings_path() -> Path | None:
    """Return the user's settings.yaml if it exists, else None."""
    p = fitplan_home() / "settings.yaml"
    return p if p.exists() else None


def load_settings() -> dict[str, Any]:
    """
    Load and merge settings.

    Load order (later overrides earlier):
    1. DEFAULT_SETTINGS
    2. Bundled src/fitplan/settings.yaml
    3. User override at $FITPLAN_HOME/settings.yaml

    Returns:
        Merged settings dict
    """
    settings: dict[str, Any] = dict(DEFAULT_SETTINGS)

    for path in (get_bundled_settings_path(), get_user_settings_path()):
        if path is not None:
            settings = _deep_merge(settings, _load_yaml_file(path))

    return settings


def get_data_dir(settings: dict[str, Any] | None = None) -> Path:
    """Resolve the data directory from settings, falling back to fitplan_home()."""
    if settings is None:
        settings = load_settings()
    configured = settings.get("data_dir")
    return Path(configured).expanduser() if configured else fitplan_home()
