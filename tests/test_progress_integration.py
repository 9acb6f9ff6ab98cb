"""
Integration tests for goal progress projection and the goal lifecycle.

Each test runs the full pipeline: Goal + weight history ->
project_goal_progress / weekly_check_ins.  Hand-computed expected values
are included in comments.

Calendar used throughout (2026):
  Sun Mar 1, Sun Mar 8, Sun Mar 15, Sun Mar 22, Sun Mar 29
  Wed Mar 4 is the mid-week start date
"""

from datetime import date, datetime

import pytest

from fitplan.core.config import MID_WEEK_NOTICE
from fitplan.core.goals import (
    activate_goal,
    active_goal,
    build_goal,
    complete_goal,
    next_goal_id,
    set_goal_active,
)
from fitplan.core.models import (
    AbsoluteRate,
    FatLoss,
    Goal,
    GoalDraft,
    Maintenance,
    MuscleGain,
    PercentageRate,
    WeightEntry,
)
from fitplan.core.progress import (
    first_check_in,
    is_on_track,
    next_check_in,
    project_goal_progress,
    started_mid_week,
    sunday_on_or_before,
    weekly_check_ins,
    weekly_rate,
)


# ===========================================================================
# Helpers
# ===========================================================================

def _goal(
    plan=None,
    start: date = date(2026, 3, 1),
    weeks: int = 4,
    start_weight: float = 200.0,
    goal_id: int = 1,
) -> Goal:
    return Goal(
        goal_id=goal_id,
        plan=plan or FatLoss(rate=AbsoluteRate(1.0)),
        start_weight=start_weight,
        start_date=start,
        duration_weeks=weeks,
    )


def _w(day: date, lbs: float) -> WeightEntry:
    return WeightEntry(weight_lbs=lbs, entry_date=day)


HISTORY = [
    _w(date(2026, 3, 1), 200.0),
    _w(date(2026, 3, 7), 199.2),
    _w(date(2026, 3, 8), 198.8),
    _w(date(2026, 3, 15), 198.0),
    _w(date(2026, 3, 29), 196.0),
]


# ===========================================================================
# Sunday alignment
# ===========================================================================

class TestSundayAlignment:

    def test_sunday_on_or_before(self):
        assert sunday_on_or_before(date(2026, 3, 4)) == date(2026, 3, 1)
        assert sunday_on_or_before(date(2026, 3, 1)) == date(2026, 3, 1)
        assert sunday_on_or_before(date(2026, 3, 7)) == date(2026, 3, 1)

    def test_sunday_start_is_its_own_week_zero(self):
        assert first_check_in(date(2026, 3, 1)) == date(2026, 3, 1)

    def test_mid_week_start_moves_to_next_sunday(self):
        assert first_check_in(date(2026, 3, 4)) == date(2026, 3, 8)
        assert first_check_in(date(2026, 3, 7)) == date(2026, 3, 8)

    def test_next_check_in_is_strictly_after_today(self):
        assert next_check_in(date(2026, 3, 4)) == date(2026, 3, 8)
        assert next_check_in(date(2026, 3, 8)) == date(2026, 3, 15)

    def test_started_mid_week(self):
        assert not started_mid_week(_goal())
        assert started_mid_week(_goal(start=date(2026, 3, 4)))


# ===========================================================================
# Weekly rate
# ===========================================================================

class TestWeeklyRate:

    def test_absolute(self):
        assert weekly_rate(_goal()) == pytest.approx(-1.0)

    def test_percentage_applies_to_start_weight(self):
        # 1% of 200 lb start weight
        assert weekly_rate(_goal(FatLoss(rate=PercentageRate(1.0)))) == pytest.approx(-2.0)

    def test_muscle_gain(self):
        assert weekly_rate(_goal(MuscleGain())) == pytest.approx(0.5)

    def test_maintenance(self):
        assert weekly_rate(_goal(Maintenance())) == 0.0


# ===========================================================================
# Weekly check-ins
# ===========================================================================

class TestWeeklyCheckIns:

    def test_sunday_start_rows(self):
        # Mar 1 + 4 weeks = Mar 29 end date: five Sundays, weeks 0-4
        weeks = weekly_check_ins(_goal(), HISTORY, today=date(2026, 3, 29))
        assert [w.week_number for w in weeks] == [0, 1, 2, 3, 4]
        assert [w.week_label for w in weeks] == ["Mar 1", "Mar 8", "Mar 15", "Mar 22", "Mar 29"]
        assert [w.expected_weight for w in weeks] == [200.0, 199.0, 198.0, 197.0, 196.0]

    def test_week_zero_expected_is_start_weight(self):
        weeks = weekly_check_ins(_goal(), HISTORY, today=date(2026, 3, 29))
        assert weeks[0].expected_weight == 200.0
        assert weeks[0].actual_weight == 200.0
        # zero variance is a value, not missing data
        assert weeks[0].variance == 0.0

    def test_closest_entry_in_window(self):
        # (Mar 1, Mar 8]: Mar 7 = 199.2 and Mar 8 = 198.8 -> Mar 8 is closest
        weeks = weekly_check_ins(_goal(), HISTORY, today=date(2026, 3, 29))
        assert weeks[1].actual_weight == 198.8
        assert weeks[1].variance == pytest.approx(-0.2)

    def test_window_excludes_previous_sunday(self):
        # Mar 15 entry belongs to week 2 only; (Mar 15, Mar 22] is empty
        weeks = weekly_check_ins(_goal(), HISTORY, today=date(2026, 3, 29))
        assert weeks[2].actual_weight == 198.0
        assert weeks[3].actual_weight is None
        assert weeks[3].variance is None

    def test_future_sundays_have_no_actual(self):
        weeks = weekly_check_ins(_goal(), HISTORY, today=date(2026, 3, 10))
        assert weeks[2].actual_weight is None
        assert weeks[4].actual_weight is None

    def test_current_week_flag(self):
        # today - 7 < sunday < today + 7
        weeks = weekly_check_ins(_goal(), HISTORY, today=date(2026, 3, 29))
        assert [w.is_current_week for w in weeks] == [False, False, False, False, True]

        weeks = weekly_check_ins(_goal(), HISTORY, today=date(2026, 3, 11))
        assert [w.is_current_week for w in weeks] == [False, True, True, False, False]

    def test_mid_week_start(self):
        # Wed Mar 4 + 4 weeks = Wed Apr 1: Sundays Mar 8 .. Mar 29
        goal = _goal(start=date(2026, 3, 4))
        weeks = weekly_check_ins(goal, HISTORY, today=date(2026, 4, 1))
        assert [w.check_in_date for w in weeks] == [
            date(2026, 3, 8),
            date(2026, 3, 15),
            date(2026, 3, 22),
            date(2026, 3, 29),
        ]
        assert weeks[0].expected_weight == 200.0
        assert weeks[0].actual_weight == 198.8

    def test_duplicate_day_entries_collapse(self):
        history = HISTORY + [_w(date(2026, 3, 8), 198.4)]
        weeks = weekly_check_ins(_goal(), history, today=date(2026, 3, 29))
        assert weeks[1].actual_weight == 198.4


# ===========================================================================
# Progress summary
# ===========================================================================

class TestProjectGoalProgress:

    def test_on_track_at_end(self):
        # 28 days at -1 lb/week: expected -4.0, actual 196 - 200 = -4.0
        progress = project_goal_progress(_goal(), HISTORY, today=date(2026, 3, 29))
        assert progress.days_elapsed == 28
        assert progress.days_remaining == 0
        assert progress.total_days == 28
        assert progress.progress_percent == pytest.approx(100.0)
        assert progress.expected_weight_change == pytest.approx(-4.0)
        assert progress.current_weight_change == pytest.approx(-4.0)
        assert progress.on_track is True
        assert len(progress.weekly_progress) == 5

    def test_off_track(self):
        # actual -3.0 vs expected -4.0: variance 25% > 20%
        history = HISTORY[:-1] + [_w(date(2026, 3, 29), 197.0)]
        progress = project_goal_progress(_goal(), history, today=date(2026, 3, 29))
        assert progress.on_track is False

    def test_within_tolerance(self):
        # actual -3.5 vs expected -4.0: variance 12.5%
        history = HISTORY[:-1] + [_w(date(2026, 3, 29), 196.5)]
        progress = project_goal_progress(_goal(), history, today=date(2026, 3, 29))
        assert progress.on_track is True

    def test_halfway(self):
        progress = project_goal_progress(_goal(), HISTORY, today=date(2026, 3, 15))
        assert progress.days_elapsed == 14
        assert progress.days_remaining == 14
        assert progress.progress_percent == pytest.approx(50.0)
        assert progress.expected_weight_change == pytest.approx(-2.0)

    def test_before_start(self):
        progress = project_goal_progress(_goal(), [], today=date(2026, 2, 20))
        assert progress.days_elapsed == 0
        assert progress.progress_percent == 0.0
        assert progress.on_track is None

    def test_past_end_is_capped(self):
        progress = project_goal_progress(_goal(), HISTORY, today=date(2026, 5, 1))
        assert progress.progress_percent == 100.0
        assert progress.days_remaining == 0

    def test_no_history(self):
        progress = project_goal_progress(_goal(), [], today=date(2026, 3, 15))
        assert progress.current_weight_change is None
        assert progress.on_track is None
        assert progress.weekly_progress == []

    def test_maintenance_is_indeterminate(self):
        progress = project_goal_progress(_goal(Maintenance()), HISTORY, today=date(2026, 3, 29))
        assert progress.expected_weight_change == 0.0
        assert progress.on_track is None

    def test_mid_week_notice(self):
        progress = project_goal_progress(_goal(start=date(2026, 3, 4)), HISTORY, today=date(2026, 3, 15))
        assert progress.started_mid_week
        assert progress.notice == MID_WEEK_NOTICE

    def test_sunday_start_has_no_notice(self):
        progress = project_goal_progress(_goal(), HISTORY, today=date(2026, 3, 15))
        assert not progress.started_mid_week
        assert progress.notice is None

    def test_duration_clamped(self):
        goal = _goal(weeks=30)
        assert goal.effective_weeks == 16
        assert goal.end_date == date(2026, 6, 21)
        progress = project_goal_progress(goal, [], today=date(2026, 3, 1))
        assert progress.total_days == 16 * 7


class TestIsOnTrack:

    def test_tiny_expected_change(self):
        assert is_on_track(0.05, -1.0) is None

    def test_no_actual(self):
        assert is_on_track(-2.0, None) is None

    def test_boundary_is_on_track(self):
        # |(-1.6) - (-2.0)| / 2.0 = 0.2
        assert is_on_track(-2.0, -1.6) is True


# ===========================================================================
# Goal lifecycle
# ===========================================================================

class TestGoalLifecycle:

    def test_build_goal_snapshots_start_weight(self):
        draft = GoalDraft("fat_loss", 8, rate_type="absolute", target_rate_lbs=1.0)
        goal = build_goal(draft, 190.0, goal_id=3, start_date=date(2026, 3, 1))
        assert goal.goal_id == 3
        assert goal.start_weight == 190.0
        assert goal.plan == FatLoss(rate=AbsoluteRate(1.0))
        assert goal.is_active
        assert goal.end_date == date(2026, 4, 26)

    def test_new_goal_supersedes_active(self):
        first = _goal(goal_id=1)
        goals = activate_goal([], first)
        second = _goal(Maintenance(), goal_id=next_goal_id(goals))
        goals = activate_goal(goals, second)

        assert [g.goal_id for g in goals] == [1, 2]
        assert [g.is_active for g in goals] == [False, True]
        assert active_goal(goals).goal_id == 2
        assert goals[0].completed_at is None

    def test_reactivate(self):
        goals = activate_goal(activate_goal([], _goal(goal_id=1)), _goal(goal_id=2))
        goals = set_goal_active(goals, 1)
        assert active_goal(goals).goal_id == 1
        assert sum(g.is_active for g in goals) == 1

    def test_reactivate_missing(self):
        with pytest.raises(KeyError):
            set_goal_active([_goal()], 9)

    def test_complete_goal(self):
        when = datetime(2026, 3, 29, 9, 0)
        done = complete_goal(_goal(), when)
        assert not done.is_active
        assert done.completed_at == when

    def test_start_weight_is_immutable(self):
        goal = _goal()
        with pytest.raises(AttributeError):
            goal.start_weight = 150.0  # type: ignore[misc]

    def test_unknown_plan_rejected(self):
        with pytest.raises(TypeError):
            _goal(plan="fat_loss")
