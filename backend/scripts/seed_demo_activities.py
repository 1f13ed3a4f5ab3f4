from datetime import datetime, time, timedelta
import random

from loguru import logger

from app.core.time_utils import hhmmss_to_seconds, timeframe_end
from app.db import Base, SessionLocal, engine
from app.models.activity import RunningActivity
from app.models.goal import Goal
from app.models.route import RunningRoute  # noqa: F401  (FK target must be registered)
from app.models.user import User  # noqa: F401
from app.services.goal_store import recompute_active_goals


def clear_recent_activities(db, days: int = 120) -> None:
    """Delete activities in the last N days so we can reseed cleanly."""
    cutoff = datetime.now() - timedelta(days=days)
    db.query(RunningActivity).filter(RunningActivity.date >= cutoff).delete()
    db.commit()


def seed_demo_activities(db) -> None:
    """Insert a 12-week block of demo runs (easy, tempo, long)."""
    now = datetime.now()
    # Go back 11 full weeks + current week (12 total)
    start_day = (now - timedelta(weeks=11)).date()

    to_add = []

    for week in range(12):
        week_start = start_day + timedelta(weeks=week)

        # Example: Tue easy, Thu tempo, Sun long run
        tue = week_start + timedelta(days=1)
        thu = week_start + timedelta(days=3)
        sun = week_start + timedelta(days=6)

        for d, dist, dur_str, notes in [
            (tue, round(random.uniform(6.0, 10.0), 1), "00:50:00", "Easy aerobic kilometers."),
            (thu, round(random.uniform(9.0, 14.0), 1), "01:00:00", "Threshold / tempo workout."),
            (sun, round(random.uniform(16.0, 28.0), 1), "02:00:00", "Long run on rolling hills."),
        ]:
            when = datetime.combine(d, time(7, 0))
            # Skip future days
            if when > now:
                continue

            to_add.append(
                RunningActivity(
                    date=when,
                    distance_km=dist,
                    duration_seconds=hhmmss_to_seconds(dur_str),
                    notes=notes,
                )
            )

    if to_add:
        db.add_all(to_add)
        db.commit()

    logger.info("Seeded {count} demo activities", count=len(to_add))


DEMO_GOALS = [
    ("Run 150 km this month", "TotalDistance", 150.0),
    ("Run 12 times this month", "TotalActivities", 12.0),
    ("Average under 5:45/km", "AveragePace", 5.75),
    ("Go long: 25 km", "LongestRun", 25.0),
    ("One run under 4:30/km", "FastestPace", 4.5),
]


def clear_demo_goals(db) -> None:
    """Delete previously seeded demo goals so reseeding does not duplicate them."""
    names = [name for name, _, _ in DEMO_GOALS]
    db.query(Goal).filter(Goal.user_id.is_(None)).filter(Goal.name.in_(names)).delete(
        synchronize_session=False
    )
    db.commit()


def seed_demo_goals(db) -> None:
    """Add one goal per goal type covering the current month."""
    start = datetime.now().replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    end = timeframe_end(start, "Monthly")
    for name, goal_type, target in DEMO_GOALS:
        db.add(
            Goal(
                name=name,
                target_value=target,
                current_value=0.0,
                goal_type=goal_type,
                timeframe="Monthly",
                start_date=start,
                end_date=end,
                is_completed=False,
            )
        )
    db.commit()


def main():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        clear_recent_activities(db, days=150)
        seed_demo_activities(db)
        clear_demo_goals(db)
        seed_demo_goals(db)
        recompute_active_goals(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
