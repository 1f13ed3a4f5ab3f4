from sqlalchemy import Column, Integer, String, Boolean, DateTime, Float, ForeignKey, Text
from sqlalchemy.sql import func
from app.core.constants import DESCRIPTION_MAX_LEN, NAME_MAX_LEN
from app.db import Base


class RunningRoute(Base):
    __tablename__ = "running_routes"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String(NAME_MAX_LEN), nullable=False)
    description = Column(String(DESCRIPTION_MAX_LEN), nullable=True)

    distance_km = Column(Float, nullable=False)

    start_location = Column(String, nullable=True)
    end_location = Column(String, nullable=True)
    is_loop = Column(Boolean, nullable=False, default=False)  # ends where it starts

    route_data = Column(Text, nullable=True)  # JSON-encoded coordinates

    elevation_gain_m = Column(Float, nullable=True)
    elevation_loss_m = Column(Float, nullable=True)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())
