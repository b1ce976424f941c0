"""Pydantic schemas for request/response validation"""

from sauna_booking.schemas.booking import (
    ReservationCreate,
    ReserveResponse,
    SlotAvailability,
    SlotView,
    AvailabilityResponse,
    SessionsResponse,
    ReservationResponse,
    ReservationListResponse,
    SlotUpdate,
    SlotClear,
    ActionResponse,
)

__all__ = [
    "ReservationCreate",
    "ReserveResponse",
    "SlotAvailability",
    "SlotView",
    "AvailabilityResponse",
    "SessionsResponse",
    "ReservationResponse",
    "ReservationListResponse",
    "SlotUpdate",
    "SlotClear",
    "ActionResponse",
]
