"""
Admin event management: create, list and update events.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from tigertix.db.session import get_db
from tigertix.schemas.event import EventCreate, EventListResponse, EventResponse, EventWriteResponse
from tigertix.services.cache_service import invalidate_event_cache
from tigertix.services.event_service import create_event, list_events, update_event

router = APIRouter(prefix="/admin/events", tags=["Admin"])


@router.post("", response_model=EventWriteResponse, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(event_data: EventCreate, db: AsyncSession = Depends(get_db)):
    event = await create_event(db, event_data)
    # Readers must not see the new cache generation before the write is visible
    await db.commit()
    await invalidate_event_cache()
    return EventWriteResponse(message="Event created successfully", event=EventResponse.model_validate(event))


@router.get("", response_model=EventListResponse)
async def list_events_endpoint(db: AsyncSession = Depends(get_db)):
    """Uncached listing so admins always see live counts."""
    events = [EventResponse.model_validate(e) for e in await list_events(db)]
    return EventListResponse(events=events, count=len(events))


@router.put("/{event_id}", response_model=EventWriteResponse)
async def update_event_endpoint(
    event_id: int,
    event_data: EventCreate,
    db: AsyncSession = Depends(get_db),
):
    event = await update_event(db, event_id, event_data)
    await db.commit()
    await invalidate_event_cache()
    return EventWriteResponse(message="Event updated successfully", event=EventResponse.model_validate(event))
