"""
Availability resolver.

Combines the fixed slot calendar with admin overrides and existing
reservations to produce a view of every session in a date range. Both the
public calendar and the ops panel read through here.
"""

from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from sauna_booking.errors import ValidationError
from sauna_booking.models.reservation import Reservation
from sauna_booking.models.slot import SlotOverride
from sauna_booking.schemas.booking import SlotView
from sauna_booking.slots import (
    DEFAULT_SOCIAL_CAPACITY,
    build_slots,
    clamp_days,
    date_range,
    parse_date,
    slot_key,
)

logger = structlog.get_logger()


@dataclass
class BookingStats:
    """Aggregated reservations for one session"""
    booked_social: int = 0
    has_private: bool = False

    def add(self, booking_type: str, guests: Optional[int]) -> None:
        if booking_type == "private":
            self.has_private = True
        else:
            self.booked_social += guests or 1


def slot_status(capacity: int, booked_social: int, has_private: bool, is_blocked: bool) -> str:
    """blocked beats private beats full; anything else is open"""
    if is_blocked:
        return "blocked"
    if has_private:
        return "private"
    if booked_social >= capacity:
        return "full"
    return "open"


def aggregate_reservations(rows: Iterable) -> Dict[str, BookingStats]:
    """Index (date, start_time, booking_type, guests) rows by slot key"""
    stats: Dict[str, BookingStats] = {}
    for row in rows:
        key = slot_key(row.date, row.start_time)
        stats.setdefault(key, BookingStats()).add(row.booking_type, row.guests)
    return stats


def build_view(day: date, slot, override: Optional[SlotOverride], stats: Optional[BookingStats]) -> SlotView:
    stats = stats or BookingStats()
    capacity = override.capacity_social if override is not None and override.capacity_social is not None else DEFAULT_SOCIAL_CAPACITY
    is_blocked = bool(override.is_blocked) if override is not None else False
    status = slot_status(capacity, stats.booked_social, stats.has_private, is_blocked)

    return SlotView(
        date=day.isoformat(),
        start=slot.start,
        end=slot.end,
        capacity_social=capacity,
        booked_social=stats.booked_social,
        available_social=max(capacity - stats.booked_social, 0) if status == "open" else 0,
        has_private=stats.has_private,
        is_blocked=is_blocked,
        status=status,
        notes=(override.notes or "") if override is not None else "",
    )


async def resolve_range(db: AsyncSession, start: date, days: int = 1) -> List[SlotView]:
    """Derived views for every session from ``start`` over ``days`` days"""
    dates = date_range(start, clamp_days(days))

    # Two bulk reads for the whole range
    override_result = await db.execute(
        select(SlotOverride).where(SlotOverride.date.in_(dates))
    )
    overrides = {
        slot_key(row.date, row.start_time): row
        for row in override_result.scalars().all()
    }

    reservation_result = await db.execute(
        select(
            Reservation.date,
            Reservation.start_time,
            Reservation.booking_type,
            Reservation.guests,
        ).where(Reservation.date.in_(dates))
    )
    stats = aggregate_reservations(reservation_result.all())

    views = []
    for day in dates:
        for slot in build_slots():
            key = slot_key(day, slot.start)
            views.append(build_view(day, slot, overrides.get(key), stats.get(key)))

    logger.debug("Resolved availability", date=start.isoformat(), days=len(dates), slots=len(views))
    return views


async def resolve(db: AsyncSession, date_str: str, days: int = 1) -> List[SlotView]:
    """Validate a YYYY-MM-DD string and resolve availability from it"""
    start = parse_date(date_str)
    if start is None:
        raise ValidationError("Invalid date")
    return await resolve_range(db, start, days)
