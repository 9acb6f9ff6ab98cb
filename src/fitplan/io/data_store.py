"""
File-based storage for the profile, weight history and goals.

Layout of the data directory:

    profile.json   body/activity attributes
    weights.jsonl  one weight entry per line, chronological, one per date
    goals.json     list of goal records, oldest first

Writes rewrite the whole file; there is no locking.
"""

import json
from datetime import date, datetime
from pathlib import Path

from ..core.goals import (
    activate_goal,
    active_goal,
    build_goal,
    complete_goal,
    next_goal_id,
    set_goal_active,
)
from ..core.models import Goal, GoalDraft, Profile, WeightEntry
from ..core.weights import current_weight
from .serializers import (
    ValidationError,
    dict_to_goal,
    dict_to_profile,
    dict_to_weight_entry,
    goal_to_dict,
    profile_to_dict,
    weight_to_json_line,
)
from .settings import get_data_dir


class DataStore:
    """
    Manages the user's data files in one directory.

    Weight history keeps at most one entry per date: logging a weight for a
    date that already has one replaces it.  Goal records keep the
    one-active-goal rule: adding a goal deactivates the previous one.
    """

    def __init__(self, data_dir: str | Path):
        """
        Initialize the store.

        Args:
            data_dir: Directory holding the data files
        """
        self.data_dir = Path(data_dir)
        self.profile_path = self.data_dir / "profile.json"
        self.weights_path = self.data_dir / "weights.jsonl"
        self.goals_path = self.data_dir / "goals.json"

    def exists(self) -> bool:
        """Check if the store has been initialized."""
        return self.profile_path.exists()

    def init(self) -> None:
        """
        Create the data directory and empty files if missing.
        """
        self.data_dir.mkdir(parents=True, exist_ok=True)

        if not self.weights_path.exists():
            self.weights_path.touch()
        if not self.goals_path.exists():
            self._write_goals([])

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    def load_profile(self) -> Profile | None:
        """
        Load the profile.

        Returns:
            Profile, or None if no profile has been saved

        Raises:
            ValidationError: If profile.json is malformed
        """
        if not self.profile_path.exists():
            return None

        try:
            with open(self.profile_path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Error parsing {self.profile_path}: {e}") from e
        return dict_to_profile(data)

    def save_profile(self, profile: Profile) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        with open(self.profile_path, "w") as f:
            json.dump(profile_to_dict(profile), f, indent=2)

    # ------------------------------------------------------------------
    # Weights
    # ------------------------------------------------------------------

    def load_weights(self) -> list[WeightEntry]:
        """
        Load all weight entries.

        Returns:
            Entries sorted by date (empty if nothing logged yet)

        Raises:
            ValidationError: If a line cannot be parsed
        """
        if not self.weights_path.exists():
            return []

        entries: list[WeightEntry] = []

        with open(self.weights_path, "r") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    entries.append(dict_to_weight_entry(json.loads(line)))
                except (json.JSONDecodeError, ValidationError) as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {self.weights_path}: {e}"
                    ) from e

        entries.sort(key=lambda e: e.entry_date)
        return entries

    def append_weight(self, entry: WeightEntry) -> None:
        """
        Add a weight entry, replacing any entry on the same date.

        Args:
            entry: Entry to store
        """
        entries = [e for e in self.load_weights() if e.entry_date != entry.entry_date]
        entries.append(entry)
        entries.sort(key=lambda e: e.entry_date)
        self._write_weights(entries)

    def delete_weight(self, entry_date: date) -> None:
        """
        Delete the weight entry for a date.

        Raises:
            KeyError: If no entry exists for that date
        """
        entries = self.load_weights()
        remaining = [e for e in entries if e.entry_date != entry_date]
        if len(remaining) == len(entries):
            raise KeyError(f"No weight entry on {entry_date.isoformat()}")
        self._write_weights(remaining)

    def current_weight(self) -> float | None:
        """Latest logged weight in lbs, or None."""
        return current_weight(self.load_weights())

    def _write_weights(self, entries: list[WeightEntry]) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        with open(self.weights_path, "w") as f:
            for entry in entries:
                f.write(weight_to_json_line(entry) + "\n")

    # ------------------------------------------------------------------
    # Goals
    # ------------------------------------------------------------------

    def load_goals(self) -> list[Goal]:
        """
        Load all goals, oldest first.

        Raises:
            ValidationError: If goals.json is malformed
        """
        if not self.goals_path.exists():
            return []
        try:
            with open(self.goals_path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Error parsing {self.goals_path}: {e}") from e
        if not isinstance(data, list):
            raise ValidationError(f"{self.goals_path} must contain a list of goals")
        return [dict_to_goal(item) for item in data]

    def active_goal(self) -> Goal | None:
        return active_goal(self.load_goals())

    def add_goal(
        self,
        draft: GoalDraft,
        start_weight: float,
        start_date: date | None = None,
    ) -> Goal:
        """
        Validate a draft and store it as the new active goal.

        The previously active goal, if any, is deactivated.

        Returns:
            The stored goal

        Raises:
            GoalValidationError: If the draft is invalid
        """
        goals = self.load_goals()
        goal = build_goal(draft, start_weight, next_goal_id(goals), start_date)
        self._write_goals(activate_goal(goals, goal))
        return goal

    def set_active(self, goal_id: int) -> None:
        """
        Reactivate a stored goal.

        Raises:
            KeyError: If the goal does not exist
        """
        self._write_goals(set_goal_active(self.load_goals(), goal_id))

    def complete_active_goal(self, when: datetime | None = None) -> Goal:
        """
        Complete the active goal.

        Returns:
            The completed goal

        Raises:
            LookupError: If there is no active goal
        """
        goals = self.load_goals()
        current = active_goal(goals)
        if current is None:
            raise LookupError("No active goal to complete")
        done = complete_goal(current, when)
        self._write_goals([done if g.goal_id == done.goal_id else g for g in goals])
        return done

    def delete_goal(self, goal_id: int) -> None:
        """
        Delete a goal.

        Raises:
            KeyError: If the goal does not exist
        """
        goals = self.load_goals()
        remaining = [g for g in goals if g.goal_id != goal_id]
        if len(remaining) == len(goals):
            raise KeyError(f"Goal {goal_id} not found")
        self._write_goals(remaining)

    def _write_goals(self, goals: list[Goal]) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        with open(self.goals_path, "w") as f:
            json.dump([goal_to_dict(g) for g in goals], f, indent=2)


def get_default_store() -> DataStore:
    """
    Get a DataStore in the configured data directory.

    Returns:
        DataStore instance
    """
    return DataStore(get_data_dir())
