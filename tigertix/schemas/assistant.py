"""
Pydantic schemas for the chat assistant.
"""

from typing import Optional

from pydantic import BaseModel, Field

from tigertix.schemas.booking import CamelModel
from tigertix.schemas.event import EventResponse


class ParseRequest(BaseModel):
    text: str = Field(..., max_length=1000)


class ParseResponse(CamelModel):
    intent: str
    message: str
    tickets: int = 1
    event_name: Optional[str] = None
    event_id: Optional[int] = None
    event: Optional[EventResponse] = None
    needs_confirmation: bool = False
    events: Optional[list[EventResponse]] = None
