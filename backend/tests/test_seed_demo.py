from datetime import datetime

from app.core.time_utils import timeframe_end
from app.db import Base, SessionLocal, engine
from app.models.goal import Goal
from scripts.seed_demo_activities import DEMO_GOALS, clear_demo_goals, seed_demo_goals


def test_reseeding_goals_does_not_duplicate():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        for _ in range(2):
            clear_demo_goals(db)
            seed_demo_goals(db)

        goals = db.query(Goal).all()
        assert len(goals) == len(DEMO_GOALS)
        for g in goals:
            assert g.end_date == timeframe_end(g.start_date, "Monthly")
            assert g.start_date.day == 1
    finally:
        db.close()


def test_clearing_demo_goals_keeps_other_goals():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        now = datetime.now()
        db.add(
            Goal(
                name="My own goal",
                target_value=5,
                goal_type="TotalActivities",
                timeframe="Custom",
                start_date=now,
                end_date=now,
            )
        )
        db.commit()
        seed_demo_goals(db)
        clear_demo_goals(db)
        assert [g.name for g in db.query(Goal).all()] == ["My own goal"]
    finally:
        db.close()
