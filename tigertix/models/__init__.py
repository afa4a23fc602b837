from tigertix.models.booking import Booking
from tigertix.models.event import Event
from tigertix.models.user import User

__all__ = ["Booking", "Event", "User"]
