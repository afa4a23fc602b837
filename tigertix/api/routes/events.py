"""
Client-facing event endpoints: browse, search, and single-ticket purchase.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from tigertix.core.logging import get_logger
from tigertix.core.security import get_current_user_id
from tigertix.db.session import get_db
from tigertix.schemas.booking import BookingErrorResponse, PurchaseResponse
from tigertix.schemas.event import EventListResponse, EventResponse
from tigertix.services.booking_service import purchase_ticket
from tigertix.services.cache_service import (
    get_cached_events,
    get_event_list_version,
    invalidate_event_cache,
    set_cached_events,
)
from tigertix.services.event_service import find_event_by_name, get_event_by_id, list_events

logger = get_logger(__name__)
router = APIRouter(prefix="/events", tags=["Events"])

BOOKING_ERRORS = {
    400: {"model": BookingErrorResponse},
    404: {"model": BookingErrorResponse},
    500: {"model": BookingErrorResponse},
}


@router.get("", response_model=EventListResponse)
async def list_events_endpoint(db: AsyncSession = Depends(get_db)):
    """
    All events ordered by date.
    Cached in Redis; every booking and admin write invalidates the cache.
    """
    version = await get_event_list_version()
    cached = await get_cached_events(version)
    if cached is not None:
        logger.debug("events_list_cache_hit")
        return EventListResponse(events=cached, count=len(cached), cached=True)

    events = [EventResponse.model_validate(e) for e in await list_events(db)]
    await set_cached_events([e.model_dump(mode="json") for e in events], version)
    return EventListResponse(events=events, count=len(events))


@router.get("/search", response_model=EventResponse)
async def search_event_endpoint(
    name: str = Query(..., min_length=1, max_length=255),
    db: AsyncSession = Depends(get_db),
):
    """Find one event by name, e.g. /events/search?name=Jazz%20Night"""
    event = await find_event_by_name(db, name)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    return event


@router.get("/{event_id}", response_model=EventResponse, responses=BOOKING_ERRORS)
async def get_event_endpoint(event_id: int, db: AsyncSession = Depends(get_db)):
    """Single event with its live ticket count (never cached)."""
    event = await get_event_by_id(db, event_id)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    return event


@router.post("/{event_id}/purchase", response_model=PurchaseResponse, responses=BOOKING_ERRORS)
async def purchase_ticket_endpoint(
    event_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Buy exactly one ticket for an event."""
    confirmation = await purchase_ticket(db, event_id)
    await invalidate_event_cache()
    logger.info("ticket_purchased", user_id=user_id, booking_id=confirmation.booking_id)
    return PurchaseResponse(
        message="Ticket purchased successfully",
        booking_id=confirmation.booking_id,
        event=confirmation.event,
        remaining=confirmation.remaining_tickets,
    )
