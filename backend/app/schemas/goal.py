from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.config import settings
from app.core.constants import DESCRIPTION_MAX_LEN, NAME_MAX_LEN
from app.core.time_utils import to_naive_local


class GoalType(str, Enum):
    TotalDistance = "TotalDistance"
    TotalActivities = "TotalActivities"
    AveragePace = "AveragePace"
    LongestRun = "LongestRun"
    FastestPace = "FastestPace"


class GoalTimeframe(str, Enum):
    Weekly = "Weekly"
    Monthly = "Monthly"
    Yearly = "Yearly"
    Custom = "Custom"


class GoalBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LEN)
    target_value: float = Field(..., gt=0)
    goal_type: GoalType = GoalType.TotalDistance
    timeframe: GoalTimeframe = GoalTimeframe.Weekly
    user_id: Optional[int] = None


class GoalCreate(GoalBase):
    """Schema for creating a goal. Dates default to now / the timeframe length."""

    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def _normalize_tz(cls, v):
        return to_naive_local(v, settings.timezone)


class GoalUpdate(BaseModel):
    """Schema for updating a goal (all fields optional).

    current_value / is_completed are not accepted here: progress changes go
    through PUT /goals/{id}/progress or the batch recompute.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=NAME_MAX_LEN)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LEN)
    target_value: Optional[float] = Field(None, gt=0)
    goal_type: Optional[GoalType] = None
    timeframe: Optional[GoalTimeframe] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    # Be lenient with extra fields from clients
    model_config = ConfigDict(extra="ignore")

    @field_validator("start_date", "end_date")
    @classmethod
    def _normalize_tz(cls, v):
        return to_naive_local(v, settings.timezone)


class GoalProgressUpdate(BaseModel):
    current_value: float


class GoalRead(GoalBase):
    """Schema returned to the frontend when reading a goal."""

    id: int
    current_value: float
    start_date: datetime
    end_date: datetime
    is_completed: bool
    progress_percentage: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class GoalRecomputeResult(BaseModel):
    message: str
    updated: int
