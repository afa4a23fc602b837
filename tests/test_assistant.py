"""
Tests for the chat assistant parser and its endpoint.
"""

import pytest
from httpx import AsyncClient

from tigertix.models.event import Event
from tigertix.services.assistant_service import (
    build_reply,
    detect_intent,
    extract_ticket_count,
    parse_user_input,
    resolve_event,
)

EVENTS = [
    Event(id=1, name="Jazz Night", date="2025-12-01", tickets=50),
    Event(id=2, name="Homecoming Football Game", date="2025-10-15", tickets=20),
    Event(id=3, name="Spring Concert", date="2025-04-12", tickets=75),
]


@pytest.mark.parametrize(
    "text, intent",
    [
        ("Book 2 tickets for Jazz Night", "book"),
        ("I'd like to reserve a seat at the football game", "book"),
        ("Show events", "show_events"),
        ("what's upcoming?", "show_events"),
        ("Tell me about Spring Concert", "event_details"),
        ("hello", "greet"),
        ("yes", "confirm"),
        ("No thanks", "cancel"),
        ("purple elephants", "unknown"),
        ("", "unknown"),
    ],
)
def test_detect_intent(text, intent):
    assert detect_intent(text) == intent


@pytest.mark.parametrize(
    "text, count",
    [
        ("Book 2 tickets for Jazz Night", 2),
        ("book three seats for spring concert", 3),
        ("buy 4 for jazz night", 4),
        ("book tickets for jazz night", 1),
        ("book 0 tickets for jazz night", 1),
    ],
)
def test_extract_ticket_count(text, count):
    assert extract_ticket_count(text) == count


def test_resolve_event():
    assert resolve_event("jazz night", EVENTS).id == 1
    assert resolve_event("football", EVENTS).id == 2
    assert resolve_event("the spring concert tonight", EVENTS).id == 3
    assert resolve_event("concerts in spring", EVENTS).id == 3
    assert resolve_event("opera", EVENTS) is None
    assert resolve_event("", EVENTS) is None


def test_parse_book_request():
    parsed = parse_user_input("Book 2 tickets for Jazz Night", EVENTS)
    assert parsed.intent == "book"
    assert parsed.tickets == 2
    assert parsed.event.id == 1
    assert parsed.event_name == "Jazz Night"
    assert parsed.needs_confirmation
    assert build_reply(parsed) == "I found Jazz Night. I can prepare 2 ticket(s). Should I confirm the booking?"


def test_parse_book_unknown_event():
    parsed = parse_user_input("book 2 tickets for opera", EVENTS)
    assert parsed.event is None
    assert not parsed.needs_confirmation
    assert build_reply(parsed).startswith('I could not find an event named "opera".')


def test_parse_book_without_event():
    parsed = parse_user_input("I want to book tickets", EVENTS)
    assert parsed.event is None
    assert build_reply(parsed) == "Which event would you like to book tickets for?"


def test_parse_event_details():
    parsed = parse_user_input("details about spring concert", EVENTS)
    assert parsed.intent == "event_details"
    assert not parsed.needs_confirmation
    assert build_reply(parsed) == "Spring Concert is on 2025-04-12 with 75 tickets remaining."


@pytest.mark.asyncio
async def test_parse_endpoint_book(client: AsyncClient, jazz_night):
    """Parsing never books; it only prepares the confirmation."""
    response = await client.post("/api/v1/llm/parse", json={"text": "Book 2 tickets for Jazz Night"})
    assert response.status_code == 200
    data = response.json()
    assert data["intent"] == "book"
    assert data["tickets"] == 2
    assert data["eventId"] == jazz_night.id
    assert data["eventName"] == "Jazz Night"
    assert data["needsConfirmation"] is True
    assert data["events"] is None

    event_response = await client.get(f"/api/v1/events/{jazz_night.id}")
    assert event_response.json()["tickets"] == 50


@pytest.mark.asyncio
async def test_parse_endpoint_show_events(client: AsyncClient, jazz_night, small_event):
    response = await client.post("/api/v1/llm/parse", json={"text": "show events"})
    assert response.status_code == 200
    data = response.json()
    assert data["intent"] == "show_events"
    assert data["message"] == "Here are the current events with tickets available."
    assert [e["name"] for e in data["events"]] == ["Chamber Trio", "Jazz Night"]


@pytest.mark.asyncio
async def test_parse_endpoint_blank_text(client: AsyncClient):
    response = await client.post("/api/v1/llm/parse", json={"text": "   "})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_parse_then_confirm(client: AsyncClient, auth_headers, jazz_night):
    parsed = (await client.post("/api/v1/llm/parse", json={"text": "reserve 3 seats for jazz night"})).json()

    response = await client.post(
        "/api/v1/bookings/confirm",
        json={"eventId": parsed["eventId"], "tickets": parsed["tickets"]},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["remainingTickets"] == 47
