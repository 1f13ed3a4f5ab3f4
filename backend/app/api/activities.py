from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from loguru import logger
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.time_utils import (
    compute_pace,
    compute_speed,
    format_pace,
    hhmmss_to_seconds,
    seconds_to_hhmmss,
)
from app.db import get_db
from app.models.activity import RunningActivity
from app.models.route import RunningRoute
from app.models.user import User
from app.schemas.activity import ActivityCreate, ActivityRead, ActivityUpdate
from app.services.goal_store import recompute_active_goals


router = APIRouter(prefix="/activities", tags=["activities"])


def _to_read(row: RunningActivity) -> ActivityRead:
    pace = compute_pace(row.duration_seconds, row.distance_km)
    return ActivityRead(
        id=row.id,
        date=row.date,
        distance_km=row.distance_km,
        duration_seconds=row.duration_seconds,
        notes=row.notes,
        weather_conditions=row.weather_conditions,
        temperature_c=row.temperature_c,
        user_id=row.user_id,
        route_id=row.route_id,
        pace=pace,
        speed=compute_speed(row.duration_seconds, row.distance_km),
        pace_display=format_pace(pace),
        duration_display=seconds_to_hhmmss(row.duration_seconds),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _check_refs(db: Session, user_id: Optional[int], route_id: Optional[int]) -> None:
    if user_id is not None and db.get(User, user_id) is None:
        raise HTTPException(status_code=422, detail="user_id does not exist")
    if route_id is not None and db.get(RunningRoute, route_id) is None:
        raise HTTPException(status_code=422, detail="route_id does not exist")


def _after_write(db: Session) -> None:
    # Goal progress is recomputed here only when the deployment opts in
    if settings.recompute_goals_on_write:
        recompute_active_goals(db)


@router.get("/", response_model=list[ActivityRead])
def list_activities(
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    user_id: Optional[int] = Query(None),
    route_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    """
    List runs, optionally filtered by [start_date, end_date], owner and route.

      GET /activities?start_date=2025-01-06T00:00:00&end_date=2025-01-12T23:59:59
    """
    query = db.query(RunningActivity)

    if start_date is not None:
        query = query.filter(RunningActivity.date >= start_date)
    if end_date is not None:
        query = query.filter(RunningActivity.date <= end_date)
    if user_id is not None:
        query = query.filter(RunningActivity.user_id == user_id)
    if route_id is not None:
        query = query.filter(RunningActivity.route_id == route_id)

    # Most recent first
    rows = query.order_by(RunningActivity.date.desc()).all()
    return [_to_read(r) for r in rows]


@router.get("/{activity_id}", response_model=ActivityRead)
def get_activity(activity_id: int, db: Session = Depends(get_db)):
    row = db.get(RunningActivity, activity_id)
    if not row:
        raise HTTPException(status_code=404, detail="Activity not found")
    return _to_read(row)


@router.post("/", response_model=ActivityRead, status_code=201)
def create_activity(payload: ActivityCreate, db: Session = Depends(get_db)):
    _check_refs(db, payload.user_id, payload.route_id)

    row = RunningActivity(**payload.model_dump())
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info(
        "Created activity {activity_id}: {distance_km} km in {duration_seconds}s",
        activity_id=row.id,
        distance_km=row.distance_km,
        duration_seconds=row.duration_seconds,
    )

    _after_write(db)
    db.refresh(row)
    return _to_read(row)


@router.put("/{activity_id}", response_model=ActivityRead)
def update_activity(activity_id: int, payload: ActivityUpdate, db: Session = Depends(get_db)):
    row = db.get(RunningActivity, activity_id)
    if not row:
        raise HTTPException(status_code=404, detail="Activity not found")

    update_data = payload.model_dump(exclude_unset=True)

    if "duration" in update_data:
        val = update_data.pop("duration")
        if val is not None:
            try:
                update_data["duration_seconds"] = hhmmss_to_seconds(val)
            except ValueError as e:
                raise HTTPException(status_code=422, detail=str(e))

    for key in ("date", "distance_km", "duration_seconds"):
        if key in update_data and update_data[key] is None:
            raise HTTPException(status_code=422, detail=f"{key} cannot be null")
    if update_data.get("duration_seconds") is not None and update_data["duration_seconds"] <= 0:
        raise HTTPException(status_code=422, detail="duration must be > 0")

    _check_refs(db, update_data.get("user_id"), update_data.get("route_id"))

    # Set other fields directly
    for key, value in update_data.items():
        setattr(row, key, value)

    db.commit()
    db.refresh(row)

    _after_write(db)
    db.refresh(row)
    return _to_read(row)


@router.delete("/{activity_id}", status_code=204)
def delete_activity(activity_id: int, db: Session = Depends(get_db)):
    row = db.get(RunningActivity, activity_id)
    if not row:
        raise HTTPException(status_code=404, detail="Activity not found")

    db.delete(row)
    db.commit()
    logger.info("Deleted activity {activity_id}", activity_id=activity_id)

    _after_write(db)
    return Response(status_code=204)
