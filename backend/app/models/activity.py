from sqlalchemy import Column, Integer, String, DateTime, Float, ForeignKey
from sqlalchemy.sql import func
from app.core.constants import DESCRIPTION_MAX_LEN
from app.db import Base


class RunningActivity(Base):
    __tablename__ = "running_activities"

    id = Column(Integer, primary_key=True, index=True)

    # Local wall-clock time of the run (stored naive, see time_utils.to_naive_local)
    date = Column(DateTime, nullable=False, index=True)

    distance_km = Column(Float, nullable=False)

    # Duration stored as **total seconds** (int)
    duration_seconds = Column(Integer, nullable=False)

    notes = Column(String(DESCRIPTION_MAX_LEN), nullable=True)
    weather_conditions = Column(String, nullable=True)
    temperature_c = Column(Float, nullable=True)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    route_id = Column(Integer, ForeignKey("running_routes.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    # Pace and speed are NOT stored, they are computed on the fly
    # pace = duration_seconds / 60 / distance_km, speed = distance_km / hours
