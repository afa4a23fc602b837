"""
Booking model: an immutable record of one confirmed reservation.
Rows are only ever inserted, never updated or deleted.
"""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, String, text

from tigertix.db.base import Base, TimestampMixin

DEFAULT_CUSTOMER_NAME = "Guest"


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    customer_name = Column(
        String(255),
        nullable=False,
        default=DEFAULT_CUSTOMER_NAME,
        server_default=text(f"'{DEFAULT_CUSTOMER_NAME}'"),
    )

    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_booking_quantity_positive"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, event={self.event_id}, quantity={self.quantity})>"
