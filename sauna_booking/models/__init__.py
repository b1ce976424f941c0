"""Database models"""

from sauna_booking.models.slot import SlotOverride
from sauna_booking.models.reservation import Reservation

__all__ = [
    "SlotOverride",
    "Reservation",
]
