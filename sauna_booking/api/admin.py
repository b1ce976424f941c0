"""Booking ops API endpoints (shared admin token)"""

from typing import Optional

from fastapi import APIRouter, Depends, Header
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from sauna_booking.database import get_db
from sauna_booking.schemas.booking import (
    ActionResponse,
    ReservationListResponse,
    ReservationResponse,
    SessionsResponse,
    SlotClear,
    SlotUpdate,
)
from sauna_booking.services import admin
from sauna_booking.slots import clamp_days

router = APIRouter()


async def require_admin(x_admin_token: Optional[str] = Header(None)) -> None:
    """Reject the request before any store access unless the token matches"""
    admin.verify_admin_token(x_admin_token)


@router.get("/sessions", response_model=SessionsResponse, dependencies=[Depends(require_admin)])
async def list_sessions(
    date: Optional[str] = None,
    days: int = 1,
    db: AsyncSession = Depends(get_db),
):
    """Derived session views across a date range"""
    day = admin.date_or_today(date)
    days = clamp_days(days)
    sessions = await admin.list_sessions(db, day.isoformat(), days)
    return SessionsResponse(date=day.isoformat(), days=days, sessions=sessions)


@router.get("/reservations", response_model=ReservationListResponse, dependencies=[Depends(require_admin)])
async def list_reservations(
    date: Optional[str] = None,
    days: int = 1,
    db: AsyncSession = Depends(get_db),
):
    """Reservation rows ordered by date and start time"""
    day = admin.date_or_today(date)
    days = clamp_days(days)
    rows = await admin.list_reservations(db, day.isoformat(), days)
    return ReservationListResponse(
        date=day.isoformat(),
        days=days,
        reservations=[ReservationResponse.model_validate(row) for row in rows],
    )


@router.get("/reservations.csv", dependencies=[Depends(require_admin)])
async def export_reservations(
    date: Optional[str] = None,
    days: int = 1,
    db: AsyncSession = Depends(get_db),
):
    """CSV download of the reservation rows"""
    day = admin.date_or_today(date)
    rows = await admin.list_reservations(db, day.isoformat(), days)
    return Response(
        content=admin.reservations_to_csv(rows),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="bookings_{day.isoformat()}.csv"'},
    )


@router.post("/slots", response_model=ActionResponse, dependencies=[Depends(require_admin)])
async def update_slot(
    slot_data: SlotUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Set capacity, block flag and notes for one session"""
    await admin.update_slot(db, slot_data)
    return ActionResponse()


@router.post("/slots/clear", response_model=ActionResponse, dependencies=[Depends(require_admin)])
async def clear_slot(
    slot_data: SlotClear,
    db: AsyncSession = Depends(get_db),
):
    """Delete every reservation in a session"""
    deleted = await admin.clear_slot(db, slot_data)
    return ActionResponse(deleted=deleted)


@router.post("/days/{date}/block", response_model=ActionResponse, dependencies=[Depends(require_admin)])
async def block_day(date: str, db: AsyncSession = Depends(get_db)):
    await admin.block_day(db, date)
    return ActionResponse()


@router.post("/days/{date}/unblock", response_model=ActionResponse, dependencies=[Depends(require_admin)])
async def unblock_day(date: str, db: AsyncSession = Depends(get_db)):
    await admin.unblock_day(db, date)
    return ActionResponse()


@router.post("/days/{date}/reset", response_model=ActionResponse, dependencies=[Depends(require_admin)])
async def reset_day(date: str, db: AsyncSession = Depends(get_db)):
    """Unblock the day and restore default capacity"""
    await admin.reset_day(db, date)
    return ActionResponse()


@router.delete("/reservations/{reservation_id}", response_model=ActionResponse, dependencies=[Depends(require_admin)])
async def cancel_reservation(
    reservation_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Cancel one reservation; 404 when it no longer exists"""
    await admin.cancel_reservation(db, reservation_id)
    return ActionResponse()
