"""
Event service: point reads and listings for clients, create/update for admins.
"""

from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tigertix.core.exceptions import NotFound
from tigertix.core.logging import get_logger
from tigertix.models.event import Event
from tigertix.schemas.event import EventCreate
from tigertix.services.booking_service import MAX_STORAGE_ID, parse_positive_int

logger = get_logger(__name__)


async def get_event_by_id(db: AsyncSession, event_id: Any) -> Optional[Event]:
    """Return the event or None. Malformed ids raise InvalidArgument."""
    parsed_id = parse_positive_int(event_id, "Invalid event id")
    if parsed_id > MAX_STORAGE_ID:
        return None
    result = await db.execute(select(Event).where(Event.id == parsed_id))
    return result.scalar_one_or_none()


async def list_events(db: AsyncSession) -> list[Event]:
    """All events, earliest date first. Uses the ix_events_date index."""
    result = await db.execute(select(Event).order_by(Event.date.asc(), Event.id.asc()))
    return list(result.scalars().all())


async def find_event_by_name(db: AsyncSession, name: Optional[str]) -> Optional[Event]:
    """Case-insensitive exact match first, then the first substring match."""
    if not name or not name.strip():
        return None
    cleaned = name.strip().lower()

    result = await db.execute(
        select(Event).where(func.lower(Event.name) == cleaned).order_by(Event.id).limit(1)
    )
    event = result.scalar_one_or_none()
    if event:
        return event

    result = await db.execute(
        select(Event)
        .where(func.lower(Event.name).contains(cleaned, autoescape=True))
        .order_by(Event.id)
        .limit(1)
    )
    return result.scalar_one_or_none()


async def create_event(db: AsyncSession, event_data: EventCreate) -> Event:
    event = Event(name=event_data.name, date=event_data.date, tickets=event_data.tickets)
    db.add(event)
    await db.flush()
    await db.refresh(event)

    logger.info("event_created", event_id=event.id, name=event.name, tickets=event.tickets)
    return event


async def update_event(db: AsyncSession, event_id: Any, event_data: EventCreate) -> Event:
    """
    Replace an event's name, date and ticket count.
    Setting `tickets` re-bases the inventory; existing bookings are untouched.
    """
    event = await get_event_by_id(db, event_id)
    if event is None:
        raise NotFound("Event not found")

    event.name = event_data.name
    event.date = event_data.date
    event.tickets = event_data.tickets
    await db.flush()
    await db.refresh(event)

    logger.info("event_updated", event_id=event.id, name=event.name, tickets=event.tickets)
    return event
