from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from loguru import logger
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.route import RunningRoute
from app.models.user import User
from app.schemas.route import RouteCreate, RouteRead, RouteUpdate


router = APIRouter(prefix="/routes", tags=["routes"])


@router.get("/", response_model=list[RouteRead])
def list_routes(user_id: Optional[int] = Query(None), db: Session = Depends(get_db)):
    query = db.query(RunningRoute)
    if user_id is not None:
        query = query.filter(RunningRoute.user_id == user_id)
    return query.order_by(RunningRoute.name).all()


@router.get("/{route_id}", response_model=RouteRead)
def get_route(route_id: int, db: Session = Depends(get_db)):
    row = db.get(RunningRoute, route_id)
    if not row:
        raise HTTPException(status_code=404, detail="Route not found")
    return row


@router.post("/", response_model=RouteRead, status_code=201)
def create_route(payload: RouteCreate, db: Session = Depends(get_db)):
    if payload.user_id is not None and db.get(User, payload.user_id) is None:
        raise HTTPException(status_code=422, detail="user_id does not exist")

    row = RunningRoute(**payload.model_dump())
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Created route {route_id} ({name})", route_id=row.id, name=row.name)
    return row


@router.put("/{route_id}", response_model=RouteRead)
def update_route(route_id: int, payload: RouteUpdate, db: Session = Depends(get_db)):
    row = db.get(RunningRoute, route_id)
    if not row:
        raise HTTPException(status_code=404, detail="Route not found")

    update_data = payload.model_dump(exclude_unset=True)
    for key in ("name", "distance_km", "is_loop"):
        if key in update_data and update_data[key] is None:
            raise HTTPException(status_code=422, detail=f"{key} cannot be null")
    if update_data.get("user_id") is not None and db.get(User, update_data["user_id"]) is None:
        raise HTTPException(status_code=422, detail="user_id does not exist")

    for key, value in update_data.items():
        setattr(row, key, value)

    db.commit()
    db.refresh(row)
    return row


@router.delete("/{route_id}", status_code=204)
def delete_route(route_id: int, db: Session = Depends(get_db)):
    row = db.get(RunningRoute, route_id)
    if not row:
        raise HTTPException(status_code=404, detail="Route not found")

    db.delete(row)
    db.commit()
    logger.info("Deleted route {route_id}", route_id=route_id)
    return Response(status_code=204)
