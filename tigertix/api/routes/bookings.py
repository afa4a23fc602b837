"""
Booking confirmation endpoint. All inventory safety lives in the booking service.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from tigertix.core.logging import get_logger
from tigertix.core.security import get_current_user_id
from tigertix.db.session import get_db
from tigertix.schemas.booking import BookingConfirmRequest, BookingConfirmResponse, BookingErrorResponse
from tigertix.services.booking_service import confirm_booking
from tigertix.services.cache_service import invalidate_event_cache

logger = get_logger(__name__)
router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post(
    "/confirm",
    response_model=BookingConfirmResponse,
    responses={
        400: {"model": BookingErrorResponse},
        404: {"model": BookingErrorResponse},
        500: {"model": BookingErrorResponse},
    },
)
async def confirm_booking_endpoint(
    booking_data: BookingConfirmRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Finalize a booking the user has explicitly approved.

    Answers 400 with `kind=InsufficientInventory` and the real remaining count
    when fewer tickets are left than requested.
    """
    if booking_data.event_id is None or booking_data.tickets is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="eventId and tickets are required to confirm a booking",
        )

    confirmation = await confirm_booking(
        db,
        booking_data.event_id,
        booking_data.tickets,
        booking_data.customer_name,
    )
    await invalidate_event_cache()
    logger.info("booking_confirmed_by_user", user_id=user_id, booking_id=confirmation.booking_id)

    return BookingConfirmResponse(
        message=f"Booked {confirmation.requested_tickets} ticket(s) for {confirmation.event['name']}.",
        booking_id=confirmation.booking_id,
        event=confirmation.event,
        requested_tickets=confirmation.requested_tickets,
        remaining_tickets=confirmation.remaining_tickets,
    )
