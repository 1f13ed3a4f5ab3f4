from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.core.constants import DESCRIPTION_MAX_LEN, NAME_MAX_LEN


class RouteBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LEN)
    distance_km: float = Field(..., gt=0)
    start_location: Optional[str] = None
    end_location: Optional[str] = None
    is_loop: bool = False
    route_data: Optional[str] = None  # JSON string of coordinates
    elevation_gain_m: Optional[float] = None
    elevation_loss_m: Optional[float] = None
    user_id: Optional[int] = None


class RouteCreate(RouteBase):
    pass


class RouteUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=NAME_MAX_LEN)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LEN)
    distance_km: Optional[float] = Field(None, gt=0)
    start_location: Optional[str] = None
    end_location: Optional[str] = None
    is_loop: Optional[bool] = None
    route_data: Optional[str] = None
    elevation_gain_m: Optional[float] = None
    elevation_loss_m: Optional[float] = None
    user_id: Optional[int] = None

    model_config = ConfigDict(extra="ignore")


class RouteRead(RouteBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
