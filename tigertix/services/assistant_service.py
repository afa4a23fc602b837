"""
Chat assistant: turns a free-text message into a booking intent.

This is a deterministic keyword parser. It never books anything itself; a
`book` intent only prepares the event id and ticket count that the client
later sends to the confirm endpoint after the user agrees.
"""

import re
from dataclasses import dataclass
from typing import Optional, Sequence

from tigertix.models.event import Event

NUMBER_WORDS = {
    "one": 1, "two": 2, "three": 3, "four": 4, "five": 5, "six": 6,
    "seven": 7, "eight": 8, "nine": 9, "ten": 10, "eleven": 11, "twelve": 12,
}

CONFIRM_WORDS = {"yes", "yeah", "yep", "ok", "okay", "sure", "confirm"}
CANCEL_WORDS = {"no", "nope", "cancel", "stop", "nevermind"}
BOOK_WORDS = {"book", "reserve", "buy", "purchase", "ticket", "tickets", "booking"}
SHOW_WORDS = {"show", "list", "events", "available", "upcoming"}
DETAIL_WORDS = {"details", "detail", "info", "when", "about", "where"}
GREET_WORDS = {"hello", "hi", "hey", "greetings", "howdy"}

FILLER_WORDS = (
    BOOK_WORDS | DETAIL_WORDS | set(NUMBER_WORDS)
    | {"a", "an", "the", "for", "to", "me", "i", "i'd", "want", "would", "like",
       "please", "get", "can", "you", "some", "seat", "seats", "tell", "is", "of", "what", "at"}
)

_TOKEN_RE = re.compile(r"[a-z0-9']+")
_COUNT_BEFORE_NOUN_RE = re.compile(r"\b(\d+|" + "|".join(NUMBER_WORDS) + r")\s+(?:tickets?|seats?)\b")
_COUNT_AFTER_VERB_RE = re.compile(r"\b(?:book|buy|reserve|get|purchase)\s+(\d+|" + "|".join(NUMBER_WORDS) + r")\b")


@dataclass
class ParsedIntent:
    intent: str
    tickets: int = 1
    event_name: Optional[str] = None
    event: Optional[Event] = None

    @property
    def needs_confirmation(self) -> bool:
        return self.intent == "book" and self.event is not None


def _tokens(text: str) -> list[str]:
    return _TOKEN_RE.findall(text.lower())


def detect_intent(text: str) -> str:
    words = _tokens(text)
    if not words:
        return "unknown"
    vocabulary = set(words)

    if words[0] in CONFIRM_WORDS:
        return "confirm"
    if words[0] in CANCEL_WORDS:
        return "cancel"
    if vocabulary & BOOK_WORDS:
        return "book"
    if vocabulary & SHOW_WORDS:
        return "show_events"
    if vocabulary & DETAIL_WORDS:
        return "event_details"
    if vocabulary & GREET_WORDS:
        return "greet"
    return "unknown"


def _to_count(token: str) -> int:
    if token.isdigit():
        return int(token)
    return NUMBER_WORDS.get(token, 1)


def extract_ticket_count(text: str) -> int:
    """Count next to "tickets"/"seats" or right after the verb; defaults to 1."""
    lowered = text.lower()
    for pattern in (_COUNT_BEFORE_NOUN_RE, _COUNT_AFTER_VERB_RE):
        match = pattern.search(lowered)
        if match:
            count = _to_count(match.group(1))
            return count if count > 0 else 1
    return 1


def extract_event_phrase(text: str) -> Optional[str]:
    """What is left of the message once verbs, counts and filler are dropped."""
    words = [w for w in _tokens(text) if w not in FILLER_WORDS]
    while words and words[0].isdigit():
        words.pop(0)
    phrase = " ".join(words).strip()
    return phrase or None


def resolve_event(name: Optional[str], events: Sequence[Event]) -> Optional[Event]:
    """Exact name, then substring either way, then best word overlap."""
    if not name or not name.strip():
        return None
    cleaned = name.strip().lower()
    lowered = [(event, event.name.lower()) for event in events]

    for event, event_name in lowered:
        if event_name == cleaned:
            return event
    for event, event_name in lowered:
        if cleaned in event_name:
            return event
    for event, event_name in lowered:
        if event_name in cleaned:
            return event

    best, best_score = None, 0
    user_words = cleaned.split()
    for event, event_name in lowered:
        score = sum(
            1
            for user_word in user_words
            for event_word in event_name.split()
            if user_word in event_word or event_word in user_word
        )
        if score > best_score:
            best, best_score = event, score
    return best


def parse_user_input(text: str, events: Sequence[Event]) -> ParsedIntent:
    intent = detect_intent(text)
    parsed = ParsedIntent(intent=intent, tickets=extract_ticket_count(text))

    if intent in ("book", "event_details"):
        parsed.event_name = extract_event_phrase(text)
        parsed.event = resolve_event(parsed.event_name, events)
        if parsed.event is not None:
            parsed.event_name = parsed.event.name
    return parsed


def build_reply(parsed: ParsedIntent) -> str:
    if parsed.intent == "greet":
        return "Hi there! I can list events and help prepare a ticket booking for you."
    if parsed.intent == "show_events":
        return "Here are the current events with tickets available."
    if parsed.intent == "confirm":
        return "Please click the confirm button to finalize your booking."
    if parsed.intent == "cancel":
        return "Okay, I will cancel that booking request."

    if parsed.intent in ("book", "event_details"):
        event = parsed.event
        if event is None and parsed.event_name:
            return (
                f'I could not find an event named "{parsed.event_name}". '
                'Try asking for "Show events" to see what\'s available.'
            )
        if event is None:
            return "Which event would you like to book tickets for?"
        if parsed.intent == "event_details":
            return f"{event.name} is on {event.date} with {event.tickets} tickets remaining."
        return (
            f"I found {event.name}. I can prepare {parsed.tickets} ticket(s). "
            "Should I confirm the booking?"
        )

    return 'Sorry, I didn\'t catch that. Try "Show events" or "Book 2 tickets for Jazz Night".'
