"""
Reservation transaction.

A reserve request is validated without touching the database, then
committed with one guarded ``INSERT ... SELECT`` whose WHERE clause re-checks
block, private exclusivity and social capacity against the latest committed
rows. On PostgreSQL the statement runs under a transaction-scoped advisory
lock for the slot, so competing requests for the same session commit one at
a time and only the capacity-respecting subset succeeds.
"""

import re
import uuid
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from uuid import UUID
from zoneinfo import ZoneInfo

from sqlalchemy import Date, DateTime, Integer, String, Text, Time, and_, func, insert, literal, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from sauna_booking.config import settings
from sauna_booking.errors import ConflictError, StoreError, ValidationError
from sauna_booking.models.reservation import Reservation
from sauna_booking.models.slot import SlotOverride
from sauna_booking.schemas.booking import ReservationCreate
from sauna_booking.services.availability import BookingStats
from sauna_booking.slots import (
    BOOKING_TYPES,
    DEFAULT_SOCIAL_CAPACITY,
    MIN_ADVANCE_HOURS,
    SlotDefinition,
    find_slot,
    is_valid_time,
    max_guests_for,
    parse_date,
    slot_start_datetime,
)

logger = structlog.get_logger()

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_STRIP_RE = re.compile(r"[^\d+\-() ]")

NAME_MAX_LENGTH = 200
NOTES_MAX_LENGTH = 1000


@dataclass
class ValidatedReservation:
    """A reserve request that passed every local check"""
    date: date
    slot: SlotDefinition
    booking_type: str
    guests: int
    name: str
    email: str
    phone: Optional[str] = None
    notes: Optional[str] = None

    @property
    def start_time(self) -> time:
        return self.slot.start_time

    @property
    def end_time(self) -> time:
        return self.slot.end_time


def _parse_guests(value) -> Optional[int]:
    if value is None or value == "":
        return 1
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    value = str(value).strip()
    if not value.isdigit():
        return None
    return int(value)


def _clean_phone(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    phone = PHONE_STRIP_RE.sub("", str(value)).strip()
    if not phone:
        return None
    digits = re.sub(r"\D", "", phone)
    if len(digits) < 7 or len(digits) > 15:
        raise ValidationError("Invalid phone number")
    return phone


def validate_request(data: ReservationCreate) -> ValidatedReservation:
    """Reject malformed input before any store access"""
    day = parse_date(data.date)
    if day is None or not is_valid_time(data.start_time) or not is_valid_time(data.end_time):
        raise ValidationError("Invalid booking time")

    slot = find_slot(data.start_time, data.end_time)
    if slot is None:
        raise ValidationError("Invalid slot selection")

    if data.booking_type not in BOOKING_TYPES:
        raise ValidationError("Invalid booking type")

    guests = _parse_guests(data.guests)
    if guests is None or guests < 1 or guests > max_guests_for(data.booking_type):
        raise ValidationError("Invalid guest count")

    name = (data.name or "").strip()[:NAME_MAX_LENGTH]
    if not name:
        raise ValidationError("Name is required")

    email = (data.email or "").strip()
    if not EMAIL_RE.match(email):
        raise ValidationError("Invalid email address")

    notes = (data.notes or "").strip()[:NOTES_MAX_LENGTH] or None

    return ValidatedReservation(
        date=day,
        slot=slot,
        booking_type=data.booking_type,
        guests=guests,
        name=name,
        email=email,
        phone=_clean_phone(data.phone),
        notes=notes,
    )


def check_advance_window(booking: ValidatedReservation, now: Optional[datetime] = None) -> None:
    """Sessions must start at least MIN_ADVANCE_HOURS from now"""
    now = now or datetime.now(timezone.utc)
    starts_at = slot_start_datetime(booking.date, booking.slot, ZoneInfo(settings.booking_timezone))
    if starts_at < now + timedelta(hours=MIN_ADVANCE_HOURS):
        raise ConflictError("Slot is no longer bookable")


def _at_slot(day: date, start: time):
    return and_(Reservation.date == day, Reservation.start_time == start)


def _override_at(day: date, start: time):
    return and_(SlotOverride.date == day, SlotOverride.start_time == start)


def reservation_guard(booking: ValidatedReservation):
    """WHERE clause that admits the insert only if the slot can take it"""
    day, start = booking.date, booking.start_time

    blocked = (
        select(SlotOverride.date)
        .where(_override_at(day, start), SlotOverride.is_blocked.is_(True))
        .correlate(None)
        .exists()
    )
    private_taken = (
        select(Reservation.id)
        .where(_at_slot(day, start), Reservation.booking_type == "private")
        .correlate(None)
        .exists()
    )
    conditions = [~blocked, ~private_taken]

    if booking.booking_type == "private":
        occupied = select(Reservation.id).where(_at_slot(day, start)).correlate(None).exists()
        conditions.append(~occupied)
    else:
        booked = (
            select(func.coalesce(func.sum(Reservation.guests), 0))
            .where(_at_slot(day, start), Reservation.booking_type == "social")
            .correlate(None)
            .scalar_subquery()
        )
        capacity = (
            select(SlotOverride.capacity_social)
            .where(_override_at(day, start))
            .correlate(None)
            .scalar_subquery()
        )
        conditions.append(booked + booking.guests <= func.coalesce(capacity, DEFAULT_SOCIAL_CAPACITY))

    return and_(*conditions)


def guarded_insert(booking: ValidatedReservation, reservation_id: UUID, created_at: datetime):
    """Single INSERT ... SELECT that writes nothing when the guard fails"""
    row = select(
        literal(reservation_id, Reservation.id.type),
        literal(booking.date, Date()),
        literal(booking.start_time, Time()),
        literal(booking.end_time, Time()),
        literal(booking.booking_type, String()),
        literal(booking.guests, Integer()),
        literal(booking.name, String()),
        literal(booking.email, String()),
        literal(booking.phone, String()),
        literal(booking.notes, Text()),
        literal("confirmed", String()),
        literal(created_at, DateTime()),
    ).where(reservation_guard(booking))

    return insert(Reservation).from_select(
        [
            "id",
            "date",
            "start_time",
            "end_time",
            "booking_type",
            "guests",
            "name",
            "email",
            "phone",
            "notes",
            "status",
            "created_at",
        ],
        row,
    )


async def _lock_slot(db: AsyncSession, booking: ValidatedReservation) -> None:
    """Serialize writers for one slot until the transaction ends"""
    if db.get_bind().dialect.name != "postgresql":
        return
    key = f"{booking.date.isoformat()}|{booking.slot.start}"
    await db.execute(select(func.pg_advisory_xact_lock(func.hashtext(key))))


async def _conflict_reason(db: AsyncSession, booking: ValidatedReservation) -> str:
    """Explain a rejected insert from the state the guard just saw"""
    day, start = booking.date, booking.start_time

    override = (
        await db.execute(select(SlotOverride).where(_override_at(day, start)))
    ).scalar_one_or_none()
    rows = await db.execute(
        select(Reservation.booking_type, Reservation.guests).where(_at_slot(day, start))
    )
    stats = BookingStats()
    for booking_type, guests in rows.all():
        stats.add(booking_type, guests)

    capacity = override.capacity_social if override is not None else DEFAULT_SOCIAL_CAPACITY

    if override is not None and override.is_blocked:
        return "Slot is blocked"
    if stats.has_private:
        return "Slot already booked"
    if booking.booking_type == "private" and stats.booked_social > 0:
        return "Slot already has social bookings"
    if booking.booking_type == "social" and stats.booked_social + booking.guests > capacity:
        return "Not enough spots available"
    return ConflictError.default_message


async def commit_reservation(db: AsyncSession, booking: ValidatedReservation) -> UUID:
    """Atomically check the slot and insert the reservation"""
    reservation_id = uuid.uuid4()
    log = logger.bind(
        date=booking.date.isoformat(),
        start_time=booking.slot.start,
        booking_type=booking.booking_type,
        guests=booking.guests,
    )

    try:
        await _lock_slot(db, booking)
        result = await db.execute(guarded_insert(booking, reservation_id, datetime.utcnow()))

        if result.rowcount == 1:
            await db.commit()
            log.info("Reservation created", reservation_id=str(reservation_id))
            return reservation_id

        reason = await _conflict_reason(db, booking)
        await db.rollback()
    except SQLAlchemyError as exc:
        await db.rollback()
        log.error("Reservation insert failed", error=str(exc))
        raise StoreError() from exc

    log.info("Reservation rejected", reason=reason)
    raise ConflictError(reason)


async def reserve(db: AsyncSession, data: ReservationCreate, now: Optional[datetime] = None) -> UUID:
    """
    Validate and commit a public reservation.

    Raises ValidationError for malformed input and ConflictError when the
    slot is blocked, taken, over capacity or too close to its start time.
    Conflicts are terminal; the caller re-reads availability.
    """
    booking = validate_request(data)
    check_advance_window(booking, now)
    return await commit_reservation(db, booking)
