"""
Booking ops: privileged slot and reservation changes.

All writes go to the same two tables the public path reads. Day-level
operations upsert the six sessions in one statement so a failure leaves the
day untouched.
"""

import csv
import hmac
import io
import re
from datetime import date, datetime
from typing import List, Optional
from uuid import UUID
from zoneinfo import ZoneInfo

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from sauna_booking.config import settings
from sauna_booking.errors import AuthorizationError, NotFoundError, ValidationError
from sauna_booking.models.reservation import Reservation
from sauna_booking.models.slot import SlotOverride
from sauna_booking.schemas.booking import SlotClear, SlotUpdate, SlotView
from sauna_booking.services.availability import resolve_range
from sauna_booking.slots import (
    DEFAULT_SOCIAL_CAPACITY,
    build_slots,
    clamp_days,
    date_range,
    find_slot,
    normalize_time,
    parse_date,
    parse_time,
)

logger = structlog.get_logger()

UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)
CAPACITY_RE = re.compile(r"^-?\d+$")

CSV_COLUMNS = [
    "date",
    "start_time",
    "end_time",
    "booking_type",
    "guests",
    "name",
    "email",
    "phone",
    "notes",
    "created_at",
]


def verify_admin_token(token: Optional[str]) -> None:
    """Compare a presented token with OPS_ADMIN_TOKEN; no configured token denies all"""
    expected = settings.ops_admin_token
    if not expected or not token:
        raise AuthorizationError()
    if not hmac.compare_digest(token.encode(), expected.encode()):
        raise AuthorizationError()


def require_date(value: Optional[str]) -> date:
    day = parse_date(value)
    if day is None:
        raise ValidationError("Invalid date")
    return day


def date_or_today(value: Optional[str]) -> date:
    """Ops panel reads fall back to today, in the business timezone, for a missing or bad date"""
    return parse_date(value) or datetime.now(ZoneInfo(settings.booking_timezone)).date()


def coerce_capacity(value) -> int:
    """Non-negative whole-number capacity, default capacity otherwise"""
    if isinstance(value, bool):
        return DEFAULT_SOCIAL_CAPACITY
    if isinstance(value, str) and CAPACITY_RE.match(value.strip()):
        value = int(value.strip())
    if not isinstance(value, int) or value < 0:
        return DEFAULT_SOCIAL_CAPACITY
    return value


def _upsert(db: AsyncSession):
    """Dialect-specific INSERT that supports ON CONFLICT"""
    if db.get_bind().dialect.name == "sqlite":
        return sqlite_insert(SlotOverride)
    return pg_insert(SlotOverride)


async def list_sessions(db: AsyncSession, date_str: Optional[str], days=1) -> List[SlotView]:
    return await resolve_range(db, date_or_today(date_str), clamp_days(days))


async def list_reservations(db: AsyncSession, date_str: Optional[str], days=1) -> List[Reservation]:
    dates = date_range(date_or_today(date_str), clamp_days(days))
    result = await db.execute(
        select(Reservation)
        .where(Reservation.date.in_(dates))
        .order_by(Reservation.date.asc(), Reservation.start_time.asc(), Reservation.created_at.asc())
    )
    return list(result.scalars().all())


def reservations_to_csv(reservations: List[Reservation]) -> str:
    """Export rows for the ops panel, every value quoted"""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for reservation in reservations:
        row = []
        for column in CSV_COLUMNS:
            value = getattr(reservation, column)
            if column in ("start_time", "end_time"):
                value = normalize_time(value)
            elif isinstance(value, (date, datetime)):
                value = value.isoformat()
            row.append("" if value is None else value)
        writer.writerow(row)
    return buffer.getvalue()


async def update_slot(db: AsyncSession, data: SlotUpdate) -> None:
    """Upsert one session's capacity, block flag and notes"""
    day = require_date(data.date)
    if not data.start_time or not data.end_time:
        raise ValidationError("Invalid slot data")
    slot = find_slot(normalize_time(data.start_time), normalize_time(data.end_time))
    if slot is None:
        raise ValidationError("Invalid slot data")

    capacity = coerce_capacity(data.capacity_social)
    notes = (data.notes or "").strip() or None
    now = datetime.utcnow()

    stmt = _upsert(db).values(
        date=day,
        start_time=slot.start_time,
        end_time=slot.end_time,
        capacity_social=capacity,
        is_blocked=bool(data.is_blocked),
        notes=notes,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["date", "start_time"],
        set_={
            "end_time": stmt.excluded.end_time,
            "capacity_social": stmt.excluded.capacity_social,
            "is_blocked": stmt.excluded.is_blocked,
            "notes": stmt.excluded.notes,
            "updated_at": stmt.excluded.updated_at,
        },
    )
    await db.execute(stmt)
    await db.commit()

    logger.info(
        "Slot updated",
        date=day.isoformat(),
        start_time=slot.start,
        capacity_social=capacity,
        is_blocked=bool(data.is_blocked),
    )


async def clear_slot(db: AsyncSession, data: SlotClear) -> int:
    """Delete every reservation in one session. Returns how many went."""
    day = require_date(data.date)
    start = normalize_time(data.start_time)
    if not start or find_slot(start) is None:
        raise ValidationError("Invalid slot data")

    result = await db.execute(
        delete(Reservation).where(
            Reservation.date == day,
            Reservation.start_time == parse_time(start),
        )
    )
    await db.commit()

    logger.info("Slot cleared", date=day.isoformat(), start_time=start, deleted=result.rowcount)
    return result.rowcount


async def _upsert_day(db: AsyncSession, day: date, is_blocked: bool, reset: bool) -> None:
    now = datetime.utcnow()
    rows = [
        {
            "date": day,
            "start_time": slot.start_time,
            "end_time": slot.end_time,
            "capacity_social": DEFAULT_SOCIAL_CAPACITY,
            "is_blocked": is_blocked,
            "notes": None,
            "updated_at": now,
        }
        for slot in build_slots()
    ]
    stmt = _upsert(db).values(rows)

    set_ = {
        "end_time": stmt.excluded.end_time,
        "is_blocked": stmt.excluded.is_blocked,
        "updated_at": stmt.excluded.updated_at,
    }
    if reset:
        set_["capacity_social"] = stmt.excluded.capacity_social
        set_["notes"] = stmt.excluded.notes

    await db.execute(stmt.on_conflict_do_update(index_elements=["date", "start_time"], set_=set_))
    await db.commit()


async def block_day(db: AsyncSession, date_str: str) -> None:
    day = require_date(date_str)
    await _upsert_day(db, day, is_blocked=True, reset=False)
    logger.info("Day blocked", date=day.isoformat())


async def unblock_day(db: AsyncSession, date_str: str) -> None:
    day = require_date(date_str)
    await _upsert_day(db, day, is_blocked=False, reset=False)
    logger.info("Day unblocked", date=day.isoformat())


async def reset_day(db: AsyncSession, date_str: str) -> None:
    """Unblock every session and restore default capacity. Bookings stay."""
    day = require_date(date_str)
    await _upsert_day(db, day, is_blocked=False, reset=True)
    logger.info("Day reset", date=day.isoformat())


async def cancel_reservation(db: AsyncSession, reservation_id: str) -> None:
    """Delete one reservation by id"""
    if not reservation_id:
        raise ValidationError("Missing reservation_id")
    if not UUID_RE.match(str(reservation_id)):
        raise ValidationError("Invalid reservation_id format")
    parsed = UUID(str(reservation_id))

    result = await db.execute(delete(Reservation).where(Reservation.id == parsed))
    await db.commit()

    if result.rowcount == 0:
        raise NotFoundError("Reservation not found")

    logger.info("Reservation cancelled", reservation_id=str(parsed))
