from datetime import datetime, timedelta

import pytest

from app.schemas.goal import GoalType
from app.services.goal_progress import (
    ActivityRecord,
    GoalState,
    LOWER_IS_BETTER,
    apply_manual_progress,
    is_active,
    progress_percentage,
    recompute_all_active,
    recompute_goal,
)


START = datetime(2025, 3, 1)
END = datetime(2025, 3, 31, 23, 59, 59)
NOW = datetime(2025, 3, 15, 12, 0)


def run(day: int, distance_km, duration_seconds=1800, month: int = 3) -> ActivityRecord:
    return ActivityRecord(
        date=datetime(2025, month, day, 7, 0),
        distance_km=distance_km,
        duration_seconds=duration_seconds,
    )


def goal(goal_type: GoalType, target: float, **kwargs) -> GoalState:
    fields = dict(target_value=target, goal_type=goal_type, start_date=START, end_date=END)
    fields.update(kwargs)
    return GoalState(**fields)


def test_total_distance_sums_window():
    g = recompute_goal(goal(GoalType.TotalDistance, 10), [run(2, 4), run(3, 3.5)])
    assert g.current_value == pytest.approx(7.5)
    assert g.is_completed is False


def test_average_pace_lower_is_better():
    g = recompute_goal(goal(GoalType.AveragePace, 5.5), [run(2, 5, 1500)])
    assert g.current_value == pytest.approx(5.0)
    assert g.is_completed is True


def test_average_pace_is_distance_weighted():
    # 10 km in 50 min + 5 km in 30 min -> 80 min / 15 km
    g = recompute_goal(goal(GoalType.AveragePace, 6), [run(2, 10, 3000), run(4, 5, 1800)])
    assert g.current_value == pytest.approx(80 / 15)


def test_fastest_pace_without_valid_runs_is_zero_and_not_completed():
    g = recompute_goal(goal(GoalType.FastestPace, 5), [run(2, 0, 1500), run(3, 5, 0)])
    assert g.current_value == 0
    assert g.is_completed is False


def test_fastest_pace_picks_minimum():
    g = recompute_goal(
        goal(GoalType.FastestPace, 4.5),
        [run(2, 5, 1500), run(3, 10, 2640), run(4, 3, 1080)],
    )
    assert g.current_value == pytest.approx(4.4)
    assert g.is_completed is True


def test_total_activities_counts_every_record():
    runs = [run(2, 5), run(3, 0, 0), run(4, 8)]
    assert recompute_goal(goal(GoalType.TotalActivities, 5), runs).current_value == 3
    assert recompute_goal(goal(GoalType.TotalActivities, 5), runs).is_completed is False
    assert recompute_goal(goal(GoalType.TotalActivities, 3), runs).is_completed is True


def test_longest_run_ignores_invalid_records():
    runs = [run(2, 12.3), run(3, 42, 0), run(4, 8)]
    g = recompute_goal(goal(GoalType.LongestRun, 12), runs)
    assert g.current_value == pytest.approx(12.3)
    assert g.is_completed is True


def test_invalid_records_do_not_count_toward_distance():
    g = recompute_goal(goal(GoalType.TotalDistance, 10), [run(2, 5), run(3, -2), run(4, None)])
    assert g.current_value == pytest.approx(5)


@pytest.mark.parametrize("goal_type", list(GoalType))
def test_empty_window_yields_zero(goal_type):
    g = recompute_goal(goal(goal_type, 5), [])
    assert g.current_value == 0
    assert g.is_completed is False
    assert progress_percentage(g) == 0


def test_window_boundaries_are_inclusive():
    on_end = ActivityRecord(date=END, distance_km=4, duration_seconds=1200)
    on_start = ActivityRecord(date=START, distance_km=2, duration_seconds=600)
    day_after = ActivityRecord(date=END + timedelta(days=1), distance_km=100, duration_seconds=30000)
    before = ActivityRecord(date=START - timedelta(seconds=1), distance_km=100, duration_seconds=30000)

    g = recompute_goal(goal(GoalType.TotalDistance, 50), [on_end, on_start, day_after, before])
    assert g.current_value == pytest.approx(6)
    assert g.is_completed is False


def test_recompute_is_idempotent_and_order_independent():
    runs = [run(2, 5, 1500), run(9, 12, 3900), run(20, 7.5, 2400)]
    base = goal(GoalType.AveragePace, 5.5)
    once = recompute_goal(base, runs)
    twice = recompute_goal(once, runs)
    reordered = recompute_goal(base, list(reversed(runs)))
    assert once == twice
    assert once.current_value == pytest.approx(reordered.current_value)


def test_recompute_leaves_other_fields_and_input_untouched():
    base = goal(GoalType.TotalDistance, 10, id=7, user_id=3)
    out = recompute_goal(base, [run(2, 11)])
    assert base.current_value == 0 and base.is_completed is False
    assert (out.id, out.user_id, out.target_value, out.start_date, out.end_date) == (
        7, 3, 10, START, END,
    )
    assert out.is_completed is True


def test_unknown_goal_type_is_fatal():
    with pytest.raises(ValueError):
        recompute_goal(goal("MostElevation", 5), [run(2, 5)])


def test_string_tags_are_accepted():
    g = recompute_goal(goal("LongestRun", 5), [run(2, 6)])
    assert g.current_value == 6


def test_recompute_all_active_skips_completed_and_expired():
    active = goal(GoalType.TotalDistance, 10, id=1)
    done = goal(GoalType.TotalDistance, 10, id=2, is_completed=True, current_value=12)
    expired = goal(
        GoalType.TotalDistance, 10, id=3,
        start_date=datetime(2025, 1, 1), end_date=datetime(2025, 1, 31),
    )
    pace = goal(GoalType.FastestPace, 6, id=4)

    out = recompute_all_active([active, done, expired, pace], [run(2, 5, 1500)], now=NOW)
    assert [g.id for g in out] == [1, 4]
    assert out[0].current_value == 5
    assert out[1].is_completed is True


def test_recompute_all_active_applies_each_goal_window():
    early = goal(GoalType.TotalDistance, 100, id=1, end_date=datetime(2025, 3, 20))
    late = goal(GoalType.TotalDistance, 100, id=2, start_date=datetime(2025, 3, 10))
    out = recompute_all_active([early, late], [run(5, 4), run(15, 6), run(25, 10)], now=NOW)
    assert [g.current_value for g in out] == [10, 16]


def test_goal_ending_exactly_now_is_still_active():
    g = goal(GoalType.TotalDistance, 10, end_date=NOW)
    assert is_active(g, NOW)
    assert not is_active(g, NOW + timedelta(seconds=1))


def test_progress_percentage_higher_is_better():
    assert progress_percentage(goal(GoalType.TotalDistance, 10, current_value=7.5)) == 75
    assert progress_percentage(goal(GoalType.TotalDistance, 10, current_value=30)) == 100


def test_progress_percentage_lower_is_better():
    pct = progress_percentage(goal(GoalType.AveragePace, 5, current_value=6.25))
    assert pct == pytest.approx(80)
    assert progress_percentage(goal(GoalType.FastestPace, 5, current_value=4)) == 100


@pytest.mark.parametrize("current", [-5, 0, 0.001, 3, 10, 1e9])
@pytest.mark.parametrize("goal_type", list(GoalType))
def test_progress_percentage_is_bounded(goal_type, current):
    pct = progress_percentage(goal(goal_type, 5, current_value=current))
    assert 0 <= pct <= 100


def test_manual_progress_reevaluates_completion():
    base = goal(GoalType.TotalActivities, 3)
    assert apply_manual_progress(base, 3).is_completed is True
    assert apply_manual_progress(base, 2).is_completed is False

    pace = goal(GoalType.AveragePace, 5.5)
    assert apply_manual_progress(pace, 5.2).is_completed is True
    assert apply_manual_progress(pace, 0).is_completed is False
    assert apply_manual_progress(pace, 6).is_completed is False


def test_direction_classification():
    assert LOWER_IS_BETTER == {GoalType.AveragePace, GoalType.FastestPace}


def test_activity_record_derived_fields():
    r = ActivityRecord(date=START, distance_km=10, duration_seconds=3000)
    assert r.pace_min_per_km == pytest.approx(5.0)
    assert r.speed_kmh == pytest.approx(12.0)
    assert ActivityRecord(date=START, distance_km=0, duration_seconds=3000).pace_min_per_km is None
