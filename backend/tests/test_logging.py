from datetime import datetime, timedelta

import pytest
from loguru import logger

from app.schemas.goal import GoalType
from app.services.goal_progress import ActivityRecord, GoalState, recompute_goal


@pytest.fixture()
def log_lines():
    import app.main  # noqa: F401  (main resets sinks on import)

    lines: list[str] = []
    sink_id = logger.add(lambda msg: lines.append(str(msg)), level="DEBUG", format="{message}")
    yield lines
    logger.remove(sink_id)


def test_activity_log_includes_values(client, log_lines):
    r = client.post(
        "/activities/",
        json={"date": "2025-01-01T07:00:00", "distance_km": 5.0, "duration_seconds": 1500},
    )
    activity_id = r.json()["id"]
    assert any(f"Created activity {activity_id}: 5.0 km in 1500s" in line for line in log_lines)


def test_goal_logs_include_ids_and_values(client, log_lines):
    r = client.post(
        "/goals/",
        json={"name": "Ten k", "target_value": 10, "goal_type": "TotalDistance"},
    )
    goal_id = r.json()["id"]
    client.put(f"/goals/{goal_id}/progress", json={"current_value": 12})

    assert any(f"Created goal {goal_id}: TotalDistance target=10.0" in line for line in log_lines)
    assert any(
        f"Set goal {goal_id} progress to 12.0 (completed=True)" in line for line in log_lines
    )


def test_engine_debug_log_includes_result(log_lines):
    start = datetime(2025, 3, 1)
    goal = GoalState(
        id=5,
        target_value=10,
        goal_type=GoalType.LongestRun,
        start_date=start,
        end_date=start + timedelta(days=30),
    )
    recompute_goal(goal, [ActivityRecord(date=start, distance_km=12.0, duration_seconds=3600)])
    assert any(
        "Recomputed goal 5 (LongestRun): 12.0 from 1 activities, completed=True" in line
        for line in log_lines
    )
