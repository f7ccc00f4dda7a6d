# memory_jar/schemas.py
from __future__ import annotations

import datetime as dt
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from memory_jar.db.models import MOODS

# ------------------------
# Memories
# ------------------------


class MemoryIn(BaseModel):
    """POST /memories body. Any owner id sent by the client is ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    date: Optional[str] = None
    note: Optional[str] = ""
    mood: Optional[str] = None
    image_url: Optional[str] = Field(default=None, alias="imageUrl")

    @model_validator(mode="after")
    def _required(self):
        if not self.date or not self.mood:
            raise ValueError("Date and mood are required")
        return self

    @field_validator("date")
    @classmethod
    def _iso_date(cls, v):
        if v:
            try:
                dt.date.fromisoformat(v.strip())
            except ValueError:
                raise ValueError(f"Invalid date: {v!r} (expected YYYY-MM-DD)")
            return v.strip()
        return v

    @field_validator("mood")
    @classmethod
    def _known_mood(cls, v):
        if v and v not in MOODS:
            raise ValueError(f"Invalid mood: {v!r} (expected one of {', '.join(MOODS)})")
        return v


class MemoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    owner_id: str = Field(alias="ownerId")
    date: dt.date
    note: str = ""
    mood: str
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    created_at: Optional[dt.datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[dt.datetime] = Field(default=None, alias="updatedAt")

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class MonthlyInsights(BaseModel):
    month: int
    year: int
    entries: int
    words: int
    moods: Dict[str, int]


# ------------------------
# Auth
# ------------------------


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
