"""
Pydantic schemas for booking-related request/response validation.

The wire format is camelCase (`eventId`, `remainingTickets`) to match the
browser client; Python code uses the snake_case field names.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tigertix.schemas.event import EventSnapshot


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BookingConfirmRequest(CamelModel):
    # Raw values; the booking core validates ids and quantities and defaults the name
    event_id: Any = None
    tickets: Any = None
    customer_name: Any = None


class BookingConfirmResponse(CamelModel):
    message: str
    booking_id: int
    event: EventSnapshot
    requested_tickets: int
    remaining_tickets: int


class PurchaseResponse(CamelModel):
    message: str
    booking_id: int
    event: EventSnapshot
    remaining: int


class BookingErrorResponse(BaseModel):
    kind: str
    message: str
    available: Optional[int] = None
    event_name: Optional[str] = Field(default=None, serialization_alias="eventName")
