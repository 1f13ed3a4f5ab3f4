from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.config import settings
from app.core.constants import DESCRIPTION_MAX_LEN
from app.core.time_utils import to_naive_local


class ActivityBase(BaseModel):
    date: datetime
    distance_km: float = Field(..., gt=0)       # e.g. 10.2
    duration_seconds: int = Field(..., gt=0)    # e.g. 3120
    notes: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LEN)
    weather_conditions: Optional[str] = None
    temperature_c: Optional[float] = None
    user_id: Optional[int] = None
    route_id: Optional[int] = None

    @field_validator("date")
    @classmethod
    def _normalize_tz(cls, v):
        return to_naive_local(v, settings.timezone)


class ActivityCreate(ActivityBase):
    """Schema for logging a new run."""
    pass


class ActivityUpdate(BaseModel):
    """Schema for updating an existing run (all fields optional)."""

    date: Optional[datetime] = None
    distance_km: Optional[float] = Field(None, gt=0)
    duration_seconds: Optional[int] = Field(None, gt=0)
    # "HH:MM:SS" alternative to duration_seconds, as typed in the UI
    duration: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LEN)
    weather_conditions: Optional[str] = None
    temperature_c: Optional[float] = None
    user_id: Optional[int] = None
    route_id: Optional[int] = None

    # Tolerate derived fields a client might echo back
    model_config = ConfigDict(extra="ignore")

    @field_validator("date")
    @classmethod
    def _normalize_tz(cls, v):
        return to_naive_local(v, settings.timezone)


class ActivityRead(ActivityBase):
    """Schema returned when reading a run, with derived fields."""

    id: int
    pace: Optional[float] = None     # min/km
    speed: Optional[float] = None    # km/h
    pace_display: str                # e.g. "5:30"
    duration_display: str            # e.g. "00:52:00"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
