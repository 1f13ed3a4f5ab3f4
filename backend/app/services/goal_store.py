"""Bridge between ORM rows and the goal progress engine."""

from collections import defaultdict
from datetime import datetime
from typing import Optional

from loguru import logger
from sqlalchemy.orm import Session

from app.models.activity import RunningActivity
from app.models.goal import Goal
from app.services.goal_progress import (
    ActivityRecord,
    GoalState,
    recompute_all_active,
)


def to_activity_record(row: RunningActivity) -> ActivityRecord:
    return ActivityRecord(
        date=row.date,
        distance_km=row.distance_km,
        duration_seconds=row.duration_seconds,
    )


def to_goal_state(row: Goal) -> GoalState:
    return GoalState(
        id=row.id,
        user_id=row.user_id,
        target_value=row.target_value,
        goal_type=row.goal_type,
        start_date=row.start_date,
        end_date=row.end_date,
        current_value=row.current_value or 0.0,
        is_completed=bool(row.is_completed),
    )


def write_back(row: Goal, state: GoalState) -> None:
    # Only the engine-owned fields are copied
    row.current_value = state.current_value
    row.is_completed = state.is_completed


def recompute_active_goals(db: Session, now: Optional[datetime] = None) -> int:
    """Recompute all active goals and persist the results.

    A goal owned by a user is evaluated against that user's activities only;
    a goal without an owner sees every activity. Returns the number of goals
    updated.
    """
    now = now or datetime.now()
    rows = (
        db.query(Goal)
        .filter(Goal.is_completed.is_(False))
        .filter(Goal.end_date >= now)
        .all()
    )
    if not rows:
        logger.info("No active goals to update")
        return 0

    activities = db.query(RunningActivity).all()
    by_user: dict[Optional[int], list[ActivityRecord]] = defaultdict(list)
    all_records: list[ActivityRecord] = []
    for a in activities:
        record = to_activity_record(a)
        by_user[a.user_id].append(record)
        all_records.append(record)

    goals_by_owner: dict[Optional[int], list[GoalState]] = defaultdict(list)
    for row in rows:
        goals_by_owner[row.user_id].append(to_goal_state(row))

    rows_by_id = {row.id: row for row in rows}
    updated = 0
    for owner, states in goals_by_owner.items():
        records = all_records if owner is None else by_user.get(owner, [])
        for state in recompute_all_active(states, records, now=now):
            write_back(rows_by_id[state.id], state)
            updated += 1

    db.commit()
    logger.info("Updated progress for {count} goals", count=updated)
    return updated
