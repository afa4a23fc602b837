"""
Chat assistant endpoint: parse a message into an intent the UI can act on.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from tigertix.core.logging import get_logger
from tigertix.db.session import get_db
from tigertix.schemas.assistant import ParseRequest, ParseResponse
from tigertix.schemas.event import EventResponse
from tigertix.services.assistant_service import build_reply, parse_user_input
from tigertix.services.event_service import list_events

logger = get_logger(__name__)
router = APIRouter(prefix="/llm", tags=["Assistant"])


@router.post("/parse", response_model=ParseResponse)
async def parse_request(request: ParseRequest, db: AsyncSession = Depends(get_db)):
    if not request.text.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Text is required for parsing")

    events = await list_events(db)
    parsed = parse_user_input(request.text, events)
    logger.info("assistant_parsed", intent=parsed.intent, event_name=parsed.event_name, tickets=parsed.tickets)

    return ParseResponse(
        intent=parsed.intent,
        message=build_reply(parsed),
        tickets=parsed.tickets,
        event_name=parsed.event_name,
        event_id=parsed.event.id if parsed.event else None,
        event=EventResponse.model_validate(parsed.event) if parsed.event else None,
        needs_confirmation=parsed.needs_confirmation,
        events=[EventResponse.model_validate(e) for e in events] if parsed.intent == "show_events" else None,
    )
