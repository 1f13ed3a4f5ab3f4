"""Goal progress engine.

Pure functions that reduce a set of activity records to a goal's current
value, completion flag and progress percentage. Nothing here touches the
database; see ``app.services.goal_store`` for the ORM side.

Direction of improvement is classified once in ``LOWER_IS_BETTER`` and used
by both the completion rule and the percentage rule. A current value of 0
means "no qualifying data" for every goal type.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Iterable, Optional, Sequence

from loguru import logger

from app.core.constants import PROGRESS_MAX, PROGRESS_MIN, SECONDS_PER_HOUR, SECONDS_PER_MINUTE
from app.schemas.goal import GoalType


@dataclass(frozen=True)
class ActivityRecord:
    date: datetime
    distance_km: Optional[float]
    duration_seconds: Optional[int]

    @property
    def is_valid(self) -> bool:
        """True when both distance and duration are positive."""
        return (
            self.distance_km is not None
            and self.duration_seconds is not None
            and self.distance_km > 0
            and self.duration_seconds > 0
        )

    @property
    def pace_min_per_km(self) -> Optional[float]:
        if not self.is_valid:
            return None
        return self.duration_seconds / SECONDS_PER_MINUTE / self.distance_km

    @property
    def speed_kmh(self) -> Optional[float]:
        if not self.is_valid:
            return None
        return self.distance_km / (self.duration_seconds / SECONDS_PER_HOUR)


@dataclass(frozen=True)
class GoalState:
    target_value: float
    goal_type: GoalType
    start_date: datetime
    end_date: datetime
    current_value: float = 0.0
    is_completed: bool = False
    id: Optional[int] = None
    user_id: Optional[int] = None


LOWER_IS_BETTER = frozenset({GoalType.AveragePace, GoalType.FastestPace})


def _total_distance(records: Sequence[ActivityRecord]) -> float:
    return float(sum(r.distance_km for r in records if r.is_valid))


def _total_activities(records: Sequence[ActivityRecord]) -> float:
    # Counting does not require valid distance/duration
    return float(len(records))


def _average_pace(records: Sequence[ActivityRecord]) -> float:
    valid = [r for r in records if r.is_valid]
    total_distance = sum(r.distance_km for r in valid)
    if total_distance <= 0:
        return 0.0
    total_duration = sum(r.duration_seconds for r in valid)
    return total_duration / SECONDS_PER_MINUTE / total_distance


def _longest_run(records: Sequence[ActivityRecord]) -> float:
    return max((r.distance_km for r in records if r.is_valid), default=0.0)


def _fastest_pace(records: Sequence[ActivityRecord]) -> float:
    paces = [r.pace_min_per_km for r in records if r.is_valid]
    return min((p for p in paces if p > 0), default=0.0)


AGGREGATORS: dict[GoalType, Callable[[Sequence[ActivityRecord]], float]] = {
    GoalType.TotalDistance: _total_distance,
    GoalType.TotalActivities: _total_activities,
    GoalType.AveragePace: _average_pace,
    GoalType.LongestRun: _longest_run,
    GoalType.FastestPace: _fastest_pace,
}


def resolve_goal_type(goal_type: GoalType | str) -> GoalType:
    """Coerce a goal type tag to ``GoalType``.

    Raises ValueError for unknown tags; there is no fallback aggregation.
    """
    try:
        return GoalType(goal_type)
    except ValueError:
        raise ValueError(f"Unknown goal type: {goal_type!r}") from None


def is_lower_better(goal_type: GoalType | str) -> bool:
    return resolve_goal_type(goal_type) in LOWER_IS_BETTER


def is_completed_value(goal_type: GoalType | str, current_value: float, target_value: float) -> bool:
    if is_lower_better(goal_type):
        # 0 means no qualifying runs, never "infinitely fast"
        return current_value > 0 and current_value <= target_value
    return current_value >= target_value


def in_window(record: ActivityRecord, start: datetime, end: datetime) -> bool:
    return start <= record.date <= end


def aggregate(goal_type: GoalType | str, records: Sequence[ActivityRecord]) -> float:
    return AGGREGATORS[resolve_goal_type(goal_type)](records)


def recompute_goal(goal: GoalState, activities: Iterable[ActivityRecord]) -> GoalState:
    """Recompute current value and completion for one goal.

    Only activities dated inside [start_date, end_date] (inclusive) count.
    Order of ``activities`` does not matter and the result is idempotent.
    """
    goal_type = resolve_goal_type(goal.goal_type)
    window = [a for a in activities if in_window(a, goal.start_date, goal.end_date)]
    current = aggregate(goal_type, window)
    completed = is_completed_value(goal_type, current, goal.target_value)
    logger.debug(
        "Recomputed goal {goal_id} ({goal_type}): {current_value} "
        "from {activities} activities, completed={is_completed}",
        goal_id=goal.id,
        goal_type=goal_type.value,
        activities=len(window),
        current_value=current,
        is_completed=completed,
    )
    return replace(goal, current_value=current, is_completed=completed)


def is_active(goal: GoalState, now: Optional[datetime] = None) -> bool:
    """Active goals are not completed and their window has not ended."""
    now = now or datetime.now()
    return not goal.is_completed and goal.end_date >= now


def recompute_all_active(
    goals: Iterable[GoalState],
    activities: Iterable[ActivityRecord],
    now: Optional[datetime] = None,
) -> list[GoalState]:
    """Recompute every active goal against the full activity set.

    Returns only the recomputed goals, in input order. Completed or expired
    goals are left out; merging them back is the caller's job.
    """
    now = now or datetime.now()
    records = list(activities)
    updated = [recompute_goal(g, records) for g in goals if is_active(g, now)]
    logger.info(
        "Recomputed {updated} active goals against {activities} activities",
        updated=len(updated),
        activities=len(records),
    )
    return updated


def progress_percentage(goal: GoalState) -> float:
    """Progress toward the target in [0, 100]."""
    current = goal.current_value
    target = goal.target_value
    if current == 0:
        return PROGRESS_MIN
    if is_lower_better(goal.goal_type):
        pct = target / current * 100
    elif target > 0:
        pct = current / target * 100
    else:
        pct = PROGRESS_MAX
    return max(PROGRESS_MIN, min(PROGRESS_MAX, pct))


def apply_manual_progress(goal: GoalState, new_value: float) -> GoalState:
    """Set the current value directly and re-evaluate completion."""
    completed = is_completed_value(goal.goal_type, new_value, goal.target_value)
    return replace(goal, current_value=new_value, is_completed=completed)
