"""
Booking Transaction Manager: the only code path that lowers an event's inventory.

CONCURRENCY STRATEGY: Exclusive transaction + guarded update
=============================================================

Problem:
  Two users try to book the last ticket simultaneously.
  Both read tickets=1, both decrement, both succeed.
  Result: Overselling.

Solution:
  1. Validate event id and quantity before touching storage.
  2. Open a write-intent transaction on the event row:
       - SQLite:     BEGIN IMMEDIATE (write lock taken at BEGIN)
       - PostgreSQL: SELECT ... FOR UPDATE on the event row
     A second writer waits here until the first commits or rolls back.
  3. Read the row, reject missing events and short inventory.
  4. UPDATE events SET tickets = tickets - :q
     WHERE id = :id AND tickets >= :q
     The WHERE clause repeats the availability check; zero affected rows
     means inventory moved under us and the booking is rejected.
  5. INSERT the booking row, then COMMIT.

  Every failure after step 2 rolls back before the error is raised, so no
  caller ever sees a decrement without its booking row or the reverse.
  The DB CHECK constraint (tickets >= 0) is the final safety net.

  There is no automatic retry. A lock wait that exceeds the driver's busy or
  lock timeout surfaces as StorageFailure and the caller decides what to do.

Remaining tickets are computed from the row read under the lock rather than
re-read after commit: the lock guarantees nobody else changed it in between.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from tigertix.core.exceptions import (
    BookingError,
    InsufficientInventory,
    InvalidArgument,
    NotFound,
    StorageFailure,
)
from tigertix.core.logging import get_logger
from tigertix.core.metrics import booking_latency, record_booking_attempt
from tigertix.db.session import EXCLUSIVE_TRANSACTION
from tigertix.models.booking import DEFAULT_CUSTOMER_NAME, Booking
from tigertix.models.event import Event

logger = get_logger(__name__)

DIRECT_PURCHASE_CUSTOMER = "Direct Purchase"

# Largest id a 64-bit INTEGER column can hold; anything above cannot match a row
MAX_STORAGE_ID = 2**63 - 1


@dataclass(frozen=True)
class BookingConfirmation:
    booking_id: int
    event: dict
    requested_tickets: int
    remaining_tickets: int


def parse_positive_int(value: Any, message: str) -> int:
    """
    Coerce an id or quantity to a positive int, or raise InvalidArgument.

    Accepts ints, integral floats and strings of ASCII digits; bools are
    rejected even though they subclass int.
    """
    if isinstance(value, bool):
        raise InvalidArgument(message)

    if isinstance(value, int):
        parsed = value
    elif isinstance(value, float) and value.is_integer():
        parsed = int(value)
    elif isinstance(value, str):
        cleaned = value.strip()
        if not (cleaned.isascii() and cleaned.isdigit()):
            raise InvalidArgument(message)
        parsed = int(cleaned)
    else:
        raise InvalidArgument(message)

    if parsed <= 0:
        raise InvalidArgument(message)
    return parsed


def normalize_customer_name(customer_name: Any) -> str:
    if isinstance(customer_name, str) and customer_name.strip():
        return customer_name.strip()
    return DEFAULT_CUSTOMER_NAME


async def confirm_booking(
    db: AsyncSession,
    event_id: Any,
    quantity: Any,
    customer_name: Optional[str] = None,
) -> BookingConfirmation:
    """
    Atomically reserve `quantity` tickets for an event and record the booking.

    The session must not have an open transaction: this function owns the
    transaction boundary and commits or rolls back before returning.
    """
    started = time.perf_counter()
    try:
        confirmation = await _confirm_booking(db, event_id, quantity, customer_name)
    except BookingError as exc:
        record_booking_attempt(exc.kind)
        logger.warning(
            "booking_rejected",
            kind=exc.kind,
            event_id=event_id,
            quantity=quantity,
            reason=exc.message,
        )
        raise
    finally:
        booking_latency.observe(time.perf_counter() - started)

    record_booking_attempt("confirmed", confirmation.requested_tickets)
    logger.info(
        "booking_confirmed",
        booking_id=confirmation.booking_id,
        event_id=confirmation.event["id"],
        quantity=confirmation.requested_tickets,
        remaining=confirmation.remaining_tickets,
    )
    return confirmation


async def _confirm_booking(
    db: AsyncSession,
    event_id: Any,
    quantity: Any,
    customer_name: Optional[str],
) -> BookingConfirmation:
    parsed_id = parse_positive_int(event_id, "Invalid event id")
    parsed_qty = parse_positive_int(quantity, "Ticket quantity must be a positive integer")
    name = normalize_customer_name(customer_name)

    if parsed_id > MAX_STORAGE_ID:
        raise NotFound("Event not found")

    if db.in_transaction():
        raise StorageFailure("Booking requires a session without an open transaction")

    try:
        # Procuring the connection with these options emits BEGIN IMMEDIATE on SQLite
        await db.connection(execution_options=EXCLUSIVE_TRANSACTION)

        result = await db.execute(
            select(Event.id, Event.name, Event.date, Event.tickets)
            .where(Event.id == parsed_id)
            .with_for_update()
        )
        row = result.one_or_none()
        if row is None:
            raise NotFound("Event not found")
        if row.tickets < parsed_qty:
            raise InsufficientInventory(available=row.tickets, event_name=row.name)

        update_result = await db.execute(
            update(Event)
            .where(Event.id == parsed_id, Event.tickets >= parsed_qty)
            .values(tickets=Event.tickets - parsed_qty)
            .execution_options(synchronize_session=False)
        )
        if update_result.rowcount != 1:
            await _raise_inventory_moved(db, parsed_id, parsed_qty)

        booking = Booking(event_id=parsed_id, quantity=parsed_qty, customer_name=name)
        db.add(booking)
        await db.flush()
        booking_id = booking.id

        await db.commit()
    except BookingError:
        await _rollback(db, parsed_id)
        raise
    except asyncio.CancelledError:
        await _rollback(db, parsed_id)
        raise
    except Exception as exc:
        await _rollback(db, parsed_id)
        logger.error(
            "booking_storage_failure",
            event_id=parsed_id,
            quantity=parsed_qty,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        raise StorageFailure("Failed to confirm booking") from exc

    return BookingConfirmation(
        booking_id=booking_id,
        event={"id": row.id, "name": row.name, "date": row.date},
        requested_tickets=parsed_qty,
        remaining_tickets=row.tickets - parsed_qty,
    )


async def _raise_inventory_moved(db: AsyncSession, event_id: int, quantity: int) -> None:
    """The guarded update matched nothing: report what the row holds now."""
    result = await db.execute(select(Event.name, Event.tickets).where(Event.id == event_id))
    row = result.one_or_none()
    if row is None:
        raise NotFound("Event not found")
    logger.warning(
        "booking_guard_rejected",
        event_id=event_id,
        requested=quantity,
        available=row.tickets,
    )
    raise InsufficientInventory(available=row.tickets, event_name=row.name)


async def _rollback(db: AsyncSession, event_id: int) -> None:
    # A failed rollback is reported but never replaces the error being raised.
    try:
        await db.rollback()
    except Exception as exc:
        logger.error("booking_rollback_failed", event_id=event_id, error=str(exc))


async def purchase_ticket(db: AsyncSession, event_id: Any) -> BookingConfirmation:
    """Single-ticket shortcut used by the event page's buy button."""
    return await confirm_booking(db, event_id, 1, DIRECT_PURCHASE_CUSTOMER)
