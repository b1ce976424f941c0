"""Public booking API endpoints"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from sauna_booking.database import get_db
from sauna_booking.schemas.booking import (
    AvailabilityResponse,
    ReservationCreate,
    ReserveResponse,
)
from sauna_booking.services import availability, reservations

router = APIRouter()


@router.get("/availability", response_model=AvailabilityResponse)
async def get_availability(
    date: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """Sessions for one day with remaining social spots"""
    slots = await availability.resolve(db, date)
    return AvailabilityResponse(date=date, slots=slots)


@router.post("/reserve", response_model=ReserveResponse)
async def reserve_slot(
    reservation_data: ReservationCreate,
    db: AsyncSession = Depends(get_db),
):
    """Reserve a session. 409 means the slot can no longer take this booking."""
    reservation_id = await reservations.reserve(db, reservation_data)
    return ReserveResponse(reservation_id=reservation_id)
