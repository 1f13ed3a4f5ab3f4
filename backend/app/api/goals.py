from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from loguru import logger
from sqlalchemy.orm import Session

from app.core.time_utils import timeframe_end
from app.db import get_db
from app.models.goal import Goal
from app.models.user import User
from app.schemas.goal import (
    GoalCreate,
    GoalProgressUpdate,
    GoalRead,
    GoalRecomputeResult,
    GoalUpdate,
)
from app.services.goal_progress import (
    apply_manual_progress,
    is_completed_value,
    progress_percentage,
)
from app.services.goal_store import recompute_active_goals, to_goal_state, write_back


router = APIRouter(prefix="/goals", tags=["goals"])


def _to_read(row: Goal) -> GoalRead:
    return GoalRead(
        id=row.id,
        name=row.name,
        description=row.description,
        target_value=row.target_value,
        current_value=row.current_value,
        goal_type=row.goal_type,
        timeframe=row.timeframe,
        start_date=row.start_date,
        end_date=row.end_date,
        is_completed=row.is_completed,
        user_id=row.user_id,
        progress_percentage=progress_percentage(to_goal_state(row)),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _get_or_404(db: Session, goal_id: int) -> Goal:
    row = db.get(Goal, goal_id)
    if not row:
        raise HTTPException(status_code=404, detail="Goal not found")
    return row


@router.get("/", response_model=list[GoalRead])
def list_goals(
    user_id: Optional[int] = Query(None),
    active_only: bool = Query(False),
    db: Session = Depends(get_db),
):
    query = db.query(Goal)
    if user_id is not None:
        query = query.filter(Goal.user_id == user_id)
    if active_only:
        query = query.filter(Goal.is_completed.is_(False)).filter(Goal.end_date >= datetime.now())
    rows = query.order_by(Goal.end_date, Goal.id).all()
    return [_to_read(r) for r in rows]


@router.get("/user/{user_id}", response_model=list[GoalRead])
def list_user_goals(user_id: int, db: Session = Depends(get_db)):
    rows = db.query(Goal).filter(Goal.user_id == user_id).order_by(Goal.end_date, Goal.id).all()
    return [_to_read(r) for r in rows]


@router.put("/update-progress", response_model=GoalRecomputeResult)
def update_all_goals_progress(db: Session = Depends(get_db)):
    """Recompute progress for every active goal (not completed, not expired)."""
    updated = recompute_active_goals(db)
    if updated == 0:
        return GoalRecomputeResult(message="No active goals to update", updated=0)
    return GoalRecomputeResult(message=f"Updated progress for {updated} goals", updated=updated)


@router.get("/{goal_id}", response_model=GoalRead)
def get_goal(goal_id: int, db: Session = Depends(get_db)):
    return _to_read(_get_or_404(db, goal_id))


@router.post("/", response_model=GoalRead, status_code=201)
def create_goal(payload: GoalCreate, db: Session = Depends(get_db)):
    if payload.user_id is not None and db.get(User, payload.user_id) is None:
        raise HTTPException(status_code=422, detail="user_id does not exist")

    start = payload.start_date or datetime.now()
    end = payload.end_date or timeframe_end(start, payload.timeframe.value)
    if end < start:
        raise HTTPException(status_code=422, detail="end_date must not be before start_date")

    row = Goal(
        name=payload.name,
        description=payload.description,
        target_value=payload.target_value,
        current_value=0.0,
        goal_type=payload.goal_type.value,
        timeframe=payload.timeframe.value,
        start_date=start,
        end_date=end,
        is_completed=False,
        user_id=payload.user_id,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info(
        "Created goal {goal_id}: {goal_type} target={target}",
        goal_id=row.id,
        goal_type=row.goal_type,
        target=row.target_value,
    )
    return _to_read(row)


@router.put("/{goal_id}", response_model=GoalRead)
def update_goal(goal_id: int, payload: GoalUpdate, db: Session = Depends(get_db)):
    row = _get_or_404(db, goal_id)

    update_data = payload.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        if value is None and key != "description":
            raise HTTPException(status_code=422, detail=f"{key} cannot be null")

    start = update_data.get("start_date", row.start_date)
    end = update_data.get("end_date", row.end_date)
    if end < start:
        raise HTTPException(status_code=422, detail="end_date must not be before start_date")

    for key, value in update_data.items():
        # Enum members are stored as their string tags
        setattr(row, key, getattr(value, "value", value))

    # Completion always follows the stored value under the (possibly new) rule
    row.is_completed = is_completed_value(row.goal_type, row.current_value, row.target_value)

    db.commit()
    db.refresh(row)
    return _to_read(row)


@router.put("/{goal_id}/progress", response_model=GoalRead)
def update_goal_progress(goal_id: int, payload: GoalProgressUpdate, db: Session = Depends(get_db)):
    row = _get_or_404(db, goal_id)

    state = apply_manual_progress(to_goal_state(row), payload.current_value)
    write_back(row, state)

    db.commit()
    db.refresh(row)
    logger.info(
        "Set goal {goal_id} progress to {current_value} (completed={is_completed})",
        goal_id=goal_id,
        current_value=row.current_value,
        is_completed=row.is_completed,
    )
    return _to_read(row)


@router.delete("/{goal_id}", status_code=204)
def delete_goal(goal_id: int, db: Session = Depends(get_db)):
    row = _get_or_404(db, goal_id)

    db.delete(row)
    db.commit()
    logger.info("Deleted goal {goal_id}", goal_id=goal_id)
    return Response(status_code=204)
