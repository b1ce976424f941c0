"""Tests for the availability resolver"""

from datetime import date, timedelta
from types import SimpleNamespace

import pytest

from sauna_booking.errors import ValidationError
from sauna_booking.schemas.booking import SlotUpdate
from sauna_booking.services import admin, availability, reservations


def test_status_precedence():
    """blocked > private > full > open"""
    assert availability.slot_status(12, 12, True, True) == "blocked"
    assert availability.slot_status(12, 0, True, False) == "private"
    assert availability.slot_status(12, 12, False, False) == "full"
    assert availability.slot_status(0, 0, False, False) == "full"
    assert availability.slot_status(12, 11, False, False) == "open"


def test_aggregate_normalizes_stored_times():
    """Rows with HH:MM:SS start times land on the same session"""
    rows = [
        SimpleNamespace(date=date(2025, 6, 6), start_time="09:00:00", booking_type="social", guests=3),
        SimpleNamespace(date=date(2025, 6, 6), start_time="09:00", booking_type="social", guests=None),
        SimpleNamespace(date=date(2025, 6, 6), start_time="11:00:00", booking_type="private", guests=8),
    ]

    stats = availability.aggregate_reservations(rows)

    assert stats["2025-06-06_09:00"].booked_social == 4
    assert not stats["2025-06-06_09:00"].has_private
    assert stats["2025-06-06_11:00"].has_private


@pytest.mark.asyncio
async def test_empty_day_is_open(run, booking_day):
    slots = await run(availability.resolve, booking_day)

    assert len(slots) == 6
    for slot in slots:
        assert slot.status == "open"
        assert slot.capacity_social == 12
        assert slot.booked_social == 0
        assert slot.available_social == 12
        assert slot.has_private is False
        assert slot.is_blocked is False


@pytest.mark.asyncio
@pytest.mark.parametrize("value", [None, "", "2025-02-30", "tomorrow"])
async def test_invalid_date_rejected(run, value):
    with pytest.raises(ValidationError):
        await run(availability.resolve, value)


@pytest.mark.asyncio
async def test_range_is_capped(run, booking_day):
    slots = await run(availability.resolve, booking_day, 90)

    assert len(slots) == 31 * 6


@pytest.mark.asyncio
async def test_range_covers_consecutive_days(run, booking_day):
    slots = await run(availability.resolve, booking_day, 3)

    start = date.fromisoformat(booking_day)
    expected = [(start + timedelta(days=offset)).isoformat() for offset in range(3)]
    assert sorted({slot.date for slot in slots}) == expected
    assert [slot.start for slot in slots[:6]] == ["09:00", "11:00", "13:00", "15:00", "17:00", "19:00"]


@pytest.mark.asyncio
async def test_override_and_reservations_combined(run, booking_day, make_request):
    await run(admin.update_slot, SlotUpdate(
        date=booking_day, start_time="13:00", end_time="15:00", capacity_social=6, notes="Half house",
    ))
    await run(reservations.reserve, make_request(start_time="13:00", end_time="15:00", guests=4))

    slots = await run(availability.resolve, booking_day)
    slot = next(s for s in slots if s.start == "13:00")

    assert slot.capacity_social == 6
    assert slot.booked_social == 4
    assert slot.available_social == 2
    assert slot.status == "open"
    assert slot.notes == "Half house"


@pytest.mark.asyncio
async def test_zero_capacity_reports_full(run, booking_day):
    await run(admin.update_slot, SlotUpdate(
        date=booking_day, start_time="09:00", end_time="11:00", capacity_social=0,
    ))

    slots = await run(availability.resolve, booking_day)

    assert slots[0].status == "full"
    assert slots[0].available_social == 0


@pytest.mark.asyncio
async def test_repeated_reads_are_identical(run, booking_day, make_request):
    await run(reservations.reserve, make_request(guests=3))
    await run(reservations.reserve, make_request(start_time="11:00", end_time="13:00", booking_type="private", guests=6))

    first = await run(availability.resolve, booking_day, 2)
    second = await run(availability.resolve, booking_day, 2)

    assert [s.model_dump() for s in first] == [s.model_dump() for s in second]
