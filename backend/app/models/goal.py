from sqlalchemy import Column, Integer, String, Boolean, DateTime, Float, ForeignKey
from sqlalchemy.sql import func
from app.core.constants import DESCRIPTION_MAX_LEN, NAME_MAX_LEN
from app.db import Base


class Goal(Base):
    __tablename__ = "goals"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String(NAME_MAX_LEN), nullable=False)
    description = Column(String(DESCRIPTION_MAX_LEN), nullable=True)

    target_value = Column(Float, nullable=False)
    # Last computed aggregate; only written by recompute or manual progress
    current_value = Column(Float, nullable=False, default=0.0)

    # String tags, see schemas.goal.GoalType / GoalTimeframe
    goal_type = Column(String(20), nullable=False)
    timeframe = Column(String(20), nullable=False, server_default="Weekly")

    # Inclusive evaluation window
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False, index=True)

    is_completed = Column(Boolean, nullable=False, default=False)

    # A user's goals are deleted with them; ownerless goals see every activity
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())
