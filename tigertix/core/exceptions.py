"""
Domain error taxonomy for the booking core.

Every failure that can leave `confirm_booking` is one of the four kinds below.
Each kind carries the HTTP status the API layer answers with, so the
exception handlers stay a thin translation.
"""

from typing import Any, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse

from tigertix.core.logging import get_logger

logger = get_logger(__name__)


class BookingError(Exception):
    """Base class for all booking-core errors."""

    kind: str = "BookingError"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "message": self.message}


class InvalidArgument(BookingError):
    """Malformed event id or ticket quantity. Raised before any storage access."""

    kind = "InvalidArgument"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(BookingError):
    kind = "NotFound"
    status_code = status.HTTP_404_NOT_FOUND


class InsufficientInventory(BookingError):
    """The event exists but has fewer tickets than requested."""

    kind = "InsufficientInventory"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, available: int, event_name: str, message: Optional[str] = None):
        self.available = available
        self.event_name = event_name
        super().__init__(message or f"Only {available} tickets remaining for {event_name}")

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["available"] = self.available
        data["eventName"] = self.event_name
        return data


class StorageFailure(BookingError):
    """Any I/O, lock-timeout or constraint failure inside the store."""

    kind = "StorageFailure"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("booking_error", kind=exc.kind, error=exc.message)
    else:
        logger.info("booking_error", kind=exc.kind, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def register_exception_handlers(app) -> None:
    app.add_exception_handler(BookingError, booking_error_handler)
