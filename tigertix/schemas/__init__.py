from tigertix.schemas.assistant import ParseRequest, ParseResponse
from tigertix.schemas.booking import (
    BookingConfirmRequest,
    BookingConfirmResponse,
    BookingErrorResponse,
    PurchaseResponse,
)
from tigertix.schemas.event import (
    EventCreate,
    EventListResponse,
    EventResponse,
    EventSnapshot,
    EventWriteResponse,
)
from tigertix.schemas.user import AuthResponse, UserCreate, UserLogin, UserResponse

__all__ = [
    "ParseRequest", "ParseResponse",
    "BookingConfirmRequest", "BookingConfirmResponse", "BookingErrorResponse", "PurchaseResponse",
    "EventCreate", "EventListResponse", "EventResponse", "EventSnapshot", "EventWriteResponse",
    "AuthResponse", "UserCreate", "UserLogin", "UserResponse",
]
