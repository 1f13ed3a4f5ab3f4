from sqlalchemy import Column, Integer, String, Date, DateTime, Float
from sqlalchemy.sql import func
from app.core.constants import NAME_MAX_LEN, USERNAME_MAX_LEN
from app.db import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    username = Column(String(USERNAME_MAX_LEN), nullable=False, unique=True)
    email = Column(String(NAME_MAX_LEN), nullable=False, unique=True)

    first_name = Column(String(NAME_MAX_LEN), nullable=True)
    last_name = Column(String(NAME_MAX_LEN), nullable=True)

    weight_kg = Column(Float, nullable=True)
    height_cm = Column(Float, nullable=True)
    date_of_birth = Column(Date, nullable=True)
    profile_picture_url = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())
