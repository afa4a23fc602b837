"""
Event model with ticket inventory tracking.

Key design decisions:
- `tickets` is the live count of unsold tickets; only the booking core decrements it
- `date` is an ISO `YYYY-MM-DD` string so lexical order equals calendar order
- CHECK constraint keeps inventory non-negative even if a caller bypasses the service
"""

from sqlalchemy import CheckConstraint, Column, Index, Integer, String

from tigertix.db.base import Base, TimestampMixin


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    date = Column(String(10), nullable=False)
    tickets = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("tickets >= 0", name="check_event_tickets_non_negative"),
        Index("ix_events_date", "date"),
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, name={self.name}, tickets={self.tickets})>"
