"""
Pydantic schemas for event-related request/response validation.
"""

from datetime import date as calendar_date
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, StrictInt, field_validator


class EventCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    date: str = Field(..., description="ISO calendar date, YYYY-MM-DD")
    tickets: StrictInt = Field(..., ge=0, le=1_000_000)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Event name is required")
        return value

    @field_validator("date")
    @classmethod
    def date_is_iso(cls, value: str) -> str:
        value = value.strip()
        try:
            return calendar_date.fromisoformat(value).isoformat()
        except ValueError:
            raise ValueError("Invalid date format. Use ISO format (YYYY-MM-DD)")


class EventResponse(BaseModel):
    id: int
    name: str
    date: str
    tickets: int
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class EventSnapshot(BaseModel):
    id: int
    name: str
    date: str


class EventListResponse(BaseModel):
    events: list[EventResponse]
    count: int
    cached: bool = False


class EventWriteResponse(BaseModel):
    message: str
    event: EventResponse
