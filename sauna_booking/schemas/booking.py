"""Booking schemas"""

from datetime import date as Date, datetime, time
from typing import Any, Optional, List
from uuid import UUID
from pydantic import BaseModel, ConfigDict, field_serializer


class ReservationCreate(BaseModel):
    """Public reserve request. Field checks happen in the reservation service."""
    date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    booking_type: Optional[str] = None
    # Raw JSON value; the reservation service decides what counts as a guest count
    guests: Any = 1
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None


class ReserveResponse(BaseModel):
    success: bool = True
    reservation_id: UUID


class SlotAvailability(BaseModel):
    """Derived availability for one session"""
    date: str
    start: str
    end: str
    capacity_social: int
    booked_social: int
    available_social: int
    has_private: bool
    is_blocked: bool
    status: str  # open, full, private, blocked


class SlotView(SlotAvailability):
    """Session view for the ops panel, with the override notes"""
    notes: str = ""


class AvailabilityResponse(BaseModel):
    date: str
    slots: List[SlotAvailability]


class SessionsResponse(BaseModel):
    """Admin calendar view across a date range"""
    date: str
    days: int
    sessions: List[SlotView]


class ReservationResponse(BaseModel):
    """Reservation row as shown in the ops panel"""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    date: Date
    start_time: time
    end_time: time
    booking_type: str
    guests: int
    name: str
    email: str
    phone: Optional[str] = None
    notes: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None

    @field_serializer("start_time", "end_time")
    def serialize_time(self, value: time) -> str:
        return value.strftime("%H:%M")


class ReservationListResponse(BaseModel):
    date: str
    days: int
    reservations: List[ReservationResponse]


class SlotUpdate(BaseModel):
    """Admin capacity/block change for one session"""
    date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    # Raw JSON value; coerced by the ops service
    capacity_social: Any = None
    is_blocked: bool = False
    notes: Optional[str] = None


class SlotClear(BaseModel):
    date: Optional[str] = None
    start_time: Optional[str] = None


class ActionResponse(BaseModel):
    success: bool = True
    deleted: Optional[int] = None
