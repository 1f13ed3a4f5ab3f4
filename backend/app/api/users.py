from fastapi import APIRouter, Depends, HTTPException, Response
from loguru import logger
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.goal import Goal
from app.models.user import User
from app.schemas.user import UserCreate, UserRead, UserUpdate


router = APIRouter(prefix="/users", tags=["users"])


def _ensure_unique(db: Session, username=None, email=None, exclude_id=None) -> None:
    if username is not None:
        q = db.query(User).filter(User.username == username)
        if exclude_id is not None:
            q = q.filter(User.id != exclude_id)
        if q.first():
            raise HTTPException(status_code=409, detail="Username already exists")
    if email is not None:
        q = db.query(User).filter(User.email == email)
        if exclude_id is not None:
            q = q.filter(User.id != exclude_id)
        if q.first():
            raise HTTPException(status_code=409, detail="Email already exists")


@router.get("/", response_model=list[UserRead])
def list_users(db: Session = Depends(get_db)):
    return db.query(User).order_by(User.id).all()


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: int, db: Session = Depends(get_db)):
    row = db.get(User, user_id)
    if not row:
        raise HTTPException(status_code=404, detail="User not found")
    return row


@router.post("/", response_model=UserRead, status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    _ensure_unique(db, username=payload.username, email=payload.email)

    row = User(**payload.model_dump())
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Created user {user_id}", user_id=row.id)
    return row


@router.put("/{user_id}", response_model=UserRead)
def update_user(user_id: int, payload: UserUpdate, db: Session = Depends(get_db)):
    row = db.get(User, user_id)
    if not row:
        raise HTTPException(status_code=404, detail="User not found")

    update_data = payload.model_dump(exclude_unset=True)
    for key in ("username", "email"):
        if key in update_data and update_data[key] is None:
            raise HTTPException(status_code=422, detail=f"{key} cannot be null")
    _ensure_unique(
        db,
        username=update_data.get("username"),
        email=update_data.get("email"),
        exclude_id=user_id,
    )

    for key, value in update_data.items():
        setattr(row, key, value)

    db.commit()
    db.refresh(row)
    return row


@router.delete("/{user_id}", status_code=204)
def delete_user(user_id: int, db: Session = Depends(get_db)):
    row = db.get(User, user_id)
    if not row:
        raise HTTPException(status_code=404, detail="User not found")

    # Goals are per-user; without an owner they would start counting everyone's runs
    goals_deleted = db.query(Goal).filter(Goal.user_id == user_id).delete()
    db.delete(row)
    db.commit()
    logger.info("Deleted user {user_id} and {goals} goals", user_id=user_id, goals=goals_deleted)
    return Response(status_code=204)
