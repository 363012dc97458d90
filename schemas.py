"""
Database Schemas for the habit tracker

Each Pydantic model represents a MongoDB collection. The collection name is the
lowercased class name (e.g., Habit -> "habit").
"""
from datetime import datetime
from typing import FrozenSet, Optional

from pydantic import BaseModel, EmailStr, Field

DEFAULT_COLOR = "#3b82f6"
HEX_COLOR_PATTERN = r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$"
DATE_KEY_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class User(BaseModel):
    id: str = Field(..., description="Stringified ObjectId")
    email: EmailStr = Field(..., description="Lowercased user email")
    password_hash: str = Field(..., description="BCrypt password hash")
    name: str = Field(..., min_length=1, max_length=50, description="Display name")
    created_at: Optional[datetime] = None


class Habit(BaseModel):
    id: str = Field(..., description="Stringified ObjectId")
    user_id: str = Field(..., description="Owner user id (stringified ObjectId)")
    name: str = Field(..., min_length=1, max_length=100)
    color: str = Field(DEFAULT_COLOR, pattern=HEX_COLOR_PATTERN, description="Hex color e.g. '#3b82f6'")
    tracked_dates: FrozenSet[str] = Field(default_factory=frozenset, description="YYYY-MM-DD keys")
    created_at: Optional[datetime] = None
