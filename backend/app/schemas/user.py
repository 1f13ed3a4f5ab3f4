from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.core.constants import NAME_MAX_LEN, USERNAME_MAX_LEN


class UserBase(BaseModel):
    username: str = Field(..., min_length=1, max_length=USERNAME_MAX_LEN)
    email: EmailStr
    first_name: Optional[str] = Field(None, max_length=NAME_MAX_LEN)
    last_name: Optional[str] = Field(None, max_length=NAME_MAX_LEN)
    weight_kg: Optional[float] = Field(None, gt=0)
    height_cm: Optional[float] = Field(None, gt=0)
    date_of_birth: Optional[date] = None
    profile_picture_url: Optional[str] = None


class UserCreate(UserBase):
    pass


class UserUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=1, max_length=USERNAME_MAX_LEN)
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, max_length=NAME_MAX_LEN)
    last_name: Optional[str] = Field(None, max_length=NAME_MAX_LEN)
    weight_kg: Optional[float] = Field(None, gt=0)
    height_cm: Optional[float] = Field(None, gt=0)
    date_of_birth: Optional[date] = None
    profile_picture_url: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class UserRead(UserBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
