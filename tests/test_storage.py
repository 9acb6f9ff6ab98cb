"""
Tests for the file layer: DataStore, serializers, settings and the YAML
exercise loader.
"""

import json
from datetime import date, datetime

import pytest

from fitplan.core.exercises.loader import (
    _get_user_exercises_dir,
    exercise_from_dict,
    fitplan_home,
    load_exercises_from_dir,
)
from fitplan.core.exercises.registry import EXERCISE_LIBRARY, exercises_for_muscle, get_exercise
from fitplan.core.goals import GoalValidationError
from fitplan.core.models import (
    AbsoluteRate,
    FatLoss,
    GoalDraft,
    MuscleGain,
    PercentageRate,
    Profile,
    WeightEntry,
)
from fitplan.io.data_store import DataStore
from fitplan.io.serializers import (
    ValidationError,
    dict_to_goal,
    dict_to_goal_plan,
    dict_to_mesocycle,
    dict_to_profile,
    goal_plan_to_dict,
    mesocycle_to_dict,
    validate_date,
)
from fitplan.io.settings import get_data_dir, load_settings


@pytest.fixture
def store(tmp_path):
    s = DataStore(tmp_path / "data")
    s.init()
    return s


FAT_LOSS_DRAFT = GoalDraft("fat_loss", 8, rate_type="absolute", target_rate_lbs=1.0)


# ===========================================================================
# DataStore
# ===========================================================================

class TestDataStoreProfile:

    def test_init_creates_files(self, store):
        assert store.weights_path.exists()
        assert json.loads(store.goals_path.read_text()) == []
        assert not store.exists()

    def test_profile_round_trip(self, store):
        profile = Profile(70.0, "female", date(1990, 5, 2), "lightly_active")
        store.save_profile(profile)
        assert store.exists()
        assert store.load_profile() == profile

    def test_missing_profile(self, store):
        assert store.load_profile() is None

    def test_malformed_profile(self, store):
        store.profile_path.write_text("{not json")
        with pytest.raises(ValidationError):
            store.load_profile()

    def test_profile_not_an_object(self, store):
        store.profile_path.write_text("[]")
        with pytest.raises(ValidationError, match="Profile must be a JSON object"):
            store.load_profile()

    def test_profile_wrong_value_type(self, store):
        store.profile_path.write_text('{"height_inches": [70]}')
        with pytest.raises(ValidationError):
            store.load_profile()


class TestDataStoreWeights:

    def test_one_entry_per_date(self, store):
        store.append_weight(WeightEntry(181.0, date(2026, 3, 2)))
        store.append_weight(WeightEntry(180.0, date(2026, 3, 1)))
        store.append_weight(WeightEntry(180.6, date(2026, 3, 2), note="after lunch"))

        entries = store.load_weights()
        assert [(e.entry_date, e.weight_lbs) for e in entries] == [
            (date(2026, 3, 1), 180.0),
            (date(2026, 3, 2), 180.6),
        ]
        assert entries[1].note == "after lunch"
        assert store.current_weight() == 180.6

    def test_delete_weight(self, store):
        store.append_weight(WeightEntry(180.0, date(2026, 3, 1)))
        store.delete_weight(date(2026, 3, 1))
        assert store.load_weights() == []

    def test_delete_missing_weight(self, store):
        with pytest.raises(KeyError):
            store.delete_weight(date(2026, 3, 1))

    def test_bad_line_reports_line_number(self, store):
        store.weights_path.write_text(
            '{"entry_date":"2026-03-01","weight_lbs":180}\n{"entry_date":"2026-03-02"}\n'
        )
        with pytest.raises(ValidationError, match="line 2"):
            store.load_weights()

    def test_line_not_an_object(self, store):
        store.weights_path.write_text('{"entry_date":"2026-03-01","weight_lbs":180}\n180\n')
        with pytest.raises(ValidationError, match="line 2"):
            store.load_weights()


class TestDataStoreGoals:

    def test_add_goal(self, store):
        goal = store.add_goal(FAT_LOSS_DRAFT, 200.0, date(2026, 3, 1))
        assert goal.goal_id == 1
        assert store.active_goal() == goal

    def test_invalid_goal_not_stored(self, store):
        with pytest.raises(GoalValidationError):
            store.add_goal(GoalDraft("fat_loss", 8), 200.0)
        assert store.load_goals() == []

    def test_one_active_goal(self, store):
        store.add_goal(FAT_LOSS_DRAFT, 200.0, date(2026, 1, 1))
        store.add_goal(GoalDraft("maintenance", 4), 195.0, date(2026, 3, 1))

        goals = store.load_goals()
        assert [g.is_active for g in goals] == [False, True]
        assert store.active_goal().goal_id == 2

        store.set_active(1)
        assert store.active_goal().goal_id == 1

    def test_complete_active_goal(self, store):
        store.add_goal(FAT_LOSS_DRAFT, 200.0, date(2026, 3, 1))
        done = store.complete_active_goal(datetime(2026, 4, 26, 8, 30))
        assert store.active_goal() is None
        reloaded = store.load_goals()[0]
        assert reloaded == done
        assert reloaded.completed_at == datetime(2026, 4, 26, 8, 30)

    def test_complete_without_active_goal(self, store):
        with pytest.raises(LookupError):
            store.complete_active_goal()

    def test_delete_goal(self, store):
        store.add_goal(FAT_LOSS_DRAFT, 200.0)
        store.delete_goal(1)
        assert store.load_goals() == []
        with pytest.raises(KeyError):
            store.delete_goal(1)

    def test_stored_rate_is_nested(self, store):
        store.add_goal(FAT_LOSS_DRAFT, 200.0, date(2026, 3, 1))
        raw = json.loads(store.goals_path.read_text())[0]
        assert raw["rate"] == {"type": "absolute", "value": 1.0}
        assert raw["end_date"] == "2026-04-26"
        assert "target_rate_percent" not in raw

    @pytest.mark.parametrize(
        "field, value",
        [
            ("goal_id", None),
            ("duration_weeks", None),
            ("start_weight", None),
            ("completed_at", 20260301),
            ("rate", ["absolute", 1.0]),
        ],
    )
    def test_malformed_stored_goal(self, store, field, value):
        store.add_goal(FAT_LOSS_DRAFT, 200.0, date(2026, 3, 1))
        raw = json.loads(store.goals_path.read_text())
        raw[0][field] = value
        store.goals_path.write_text(json.dumps(raw))
        with pytest.raises(ValidationError):
            store.load_goals()

    def test_stored_goal_not_an_object(self, store):
        store.goals_path.write_text("[1]")
        with pytest.raises(ValidationError, match="Goal must be a JSON object"):
            store.load_goals()

    def test_zero_duration_goal_loads_clamped(self, store):
        store.add_goal(GoalDraft("maintenance", 4), 200.0, date(2026, 3, 1))
        raw = json.loads(store.goals_path.read_text())
        raw[0]["duration_weeks"] = 0
        store.goals_path.write_text(json.dumps(raw))

        goal = store.load_goals()[0]
        assert goal.duration_weeks == 0
        assert goal.effective_weeks == 2
        assert goal.end_date == date(2026, 3, 15)


# ===========================================================================
# Serializers
# ===========================================================================

class TestSerializers:

    def test_validate_date(self):
        assert validate_date("2026-03-01") == date(2026, 3, 1)
        with pytest.raises(ValidationError):
            validate_date("03/01/2026")
        with pytest.raises(ValidationError):
            validate_date("2026-02-30")

    def test_goal_plan_round_trip(self):
        for plan in (
            FatLoss(rate=AbsoluteRate(1.5)),
            FatLoss(rate=PercentageRate(0.75)),
            MuscleGain(surplus_calories=250),
            MuscleGain(),
        ):
            assert dict_to_goal_plan(goal_plan_to_dict(plan)) == plan

    def test_fat_loss_without_rate_rejected(self):
        with pytest.raises(ValidationError):
            dict_to_goal_plan({"goal_type": "fat_loss"})

    def test_unknown_goal_type_rejected(self):
        with pytest.raises(ValidationError):
            dict_to_goal_plan({"goal_type": "cut"})

    def test_goal_missing_field(self):
        with pytest.raises(ValidationError, match="start_weight"):
            dict_to_goal({
                "goal_id": 1,
                "goal_type": "maintenance",
                "start_date": "2026-03-01",
                "duration_weeks": 4,
            })

    def test_invalid_profile_value(self):
        with pytest.raises(ValidationError):
            dict_to_profile({"biological_sex": "x"})

    def test_mesocycle_accepts_ordered_records(self):
        plan = dict_to_mesocycle({
            "name": "Upper/Lower",
            "weeks": 6,
            "days_per_week": 2,
            "specialization": ["chest"],
            "days": [
                {
                    "day": 1,
                    "exercises": [
                        {"exercise_id": "overhead_press", "order_index": 2},
                        {"exercise_id": "bench_press", "order_index": 1},
                    ],
                },
                {"day": 2, "exercises": ["squat"]},
            ],
            "exercises": [
                {"exercise_id": "cable_fly", "name": "Cable Fly", "primary": "chest"},
            ],
        })
        assert plan.days[0].exercises == ["bench_press", "overhead_press"]
        assert plan.days[1].exercises == ["squat"]
        assert plan.specialization == ("CHEST",)
        assert plan.exercise_db["cable_fly"].primary == "CHEST"

    def test_mesocycle_to_dict_keeps_inline_exercises(self):
        data = {
            "name": "Base",
            "weeks": 4,
            "days_per_week": 1,
            "specialization": ["BACK"],
            "days": [{"day": 1, "exercises": ["pull_up", "face_pull"]}],
            "exercises": [
                {"exercise_id": "face_pull", "name": "Face Pull", "primary": "SHOULDERS"},
            ],
        }
        out = mesocycle_to_dict(dict_to_mesocycle(data))
        assert out["days"] == [{"day": 1, "exercises": ["pull_up", "face_pull"]}]
        assert out["exercises"][0]["exercise_id"] == "face_pull"
        assert "goal_statement" not in out

    def test_mesocycle_missing_field(self):
        with pytest.raises(ValidationError):
            dict_to_mesocycle({"name": "x", "weeks": 4})

    def test_mesocycle_mixed_day_entries_rejected(self):
        with pytest.raises(ValidationError, match="all ids or all"):
            dict_to_mesocycle({
                "name": "x",
                "weeks": 4,
                "days_per_week": 1,
                "days": [
                    {"day": 1, "exercises": ["squat", {"exercise_id": "bench_press", "order_index": 1}]},
                ],
            })

    def test_mesocycle_not_an_object(self):
        with pytest.raises(ValidationError):
            dict_to_mesocycle(["squat"])  # type: ignore[arg-type]

    def test_duplicate_specialization_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate"):
            dict_to_mesocycle({
                "name": "x", "weeks": 4, "days_per_week": 1, "specialization": ["chest", "CHEST"],
            })


# ===========================================================================
# Settings
# ===========================================================================

class TestSettings:

    def test_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FITPLAN_HOME", str(tmp_path))
        settings = load_settings()
        assert settings["goals"]["default_duration_weeks"] == 8
        assert get_data_dir(settings) == tmp_path

    def test_user_override_merges(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FITPLAN_HOME", str(tmp_path))
        (tmp_path / "settings.yaml").write_text(
            f"data_dir: {tmp_path / 'elsewhere'}\ngoals:\n  default_duration_weeks: 12\n"
        )
        settings = load_settings()
        assert settings["goals"]["default_duration_weeks"] == 12
        assert settings["goals"]["default_surplus_calories"] == 300
        assert get_data_dir(settings) == tmp_path / "elsewhere"

    def test_user_exercises_share_home(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FITPLAN_HOME", str(tmp_path))
        (tmp_path / "exercises").mkdir()
        assert fitplan_home() == tmp_path
        assert get_data_dir(load_settings()) == tmp_path
        assert _get_user_exercises_dir() == tmp_path / "exercises"

    def test_bad_user_file_warns(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FITPLAN_HOME", str(tmp_path))
        (tmp_path / "settings.yaml").write_text("goals: [unclosed\n")
        with pytest.warns(UserWarning):
            settings = load_settings()
        assert settings["goals"]["default_duration_weeks"] == 8


# ===========================================================================
# Exercise library
# ===========================================================================

class TestExerciseLibrary:

    def test_bundled_library(self):
        bench = get_exercise("bench_press")
        assert bench.primary == "CHEST"
        assert bench.secondary == ("TRICEPS", "SHOULDERS")
        assert not EXERCISE_LIBRARY["standing_calf_raise"].use_rir_rpe

    def test_unknown_exercise(self):
        with pytest.raises(ValueError):
            get_exercise("curl_machine_9000")

    def test_exercises_for_muscle_includes_secondary(self):
        ids = {ex.exercise_id for ex in exercises_for_muscle("triceps")}
        assert {"bench_press", "overhead_press"} <= ids

    def test_from_dict_requires_fields(self):
        with pytest.raises(ValueError):
            exercise_from_dict({"exercise_id": "x", "name": "X"})

    def test_user_file_overrides_bundled(self, tmp_path):
        bundled = tmp_path / "bundled"
        user = tmp_path / "user"
        bundled.mkdir()
        user.mkdir()
        (bundled / "row.yaml").write_text(
            "exercise_id: row\nname: Row\nprimary: BACK\nsecondary: [BICEPS]\n"
        )
        (user / "row.yaml").write_text("secondary: [BICEPS, FOREARMS]\n")
        (user / "curl.yaml").write_text("exercise_id: curl\nname: Curl\nprimary: BICEPS\n")

        library = load_exercises_from_dir(bundled, user)
        assert library["row"].secondary == ("BICEPS", "FOREARMS")
        assert library["curl"].primary == "BICEPS"

    def test_invalid_definition_skipped(self, tmp_path):
        (tmp_path / "bad.yaml").write_text("exercise_id: bad\nname: Bad\nprimary: NECK\n")
        with pytest.warns(UserWarning):
            library = load_exercises_from_dir(tmp_path)
        assert library == {}
