"""Tests for the public booking endpoints"""

from datetime import date, timedelta

import pytest
from httpx import AsyncClient


def reserve_payload(day, **overrides):
    payload = {
        "date": day,
        "start_time": "09:00",
        "end_time": "11:00",
        "booking_type": "social",
        "guests": 5,
        "name": "Jane Smith",
        "email": "jane@example.com",
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_get_availability(client: AsyncClient, booking_day):
    response = await client.get("/booking/availability", params={"date": booking_day})

    assert response.status_code == 200
    data = response.json()
    assert data["date"] == booking_day
    assert len(data["slots"]) == 6
    first = data["slots"][0]
    assert first["start"] == "09:00"
    assert first["end"] == "11:00"
    assert first["status"] == "open"
    assert first["available_social"] == 12
    assert "notes" not in first


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{}, {"date": "2025-13-01"}, {"date": "06-06-2025"}])
async def test_get_availability_invalid_date(client: AsyncClient, params):
    response = await client.get("/booking/availability", params=params)

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid date"}


@pytest.mark.asyncio
async def test_full_reservation_flow(client: AsyncClient, booking_day):
    """
    1. Check availability
    2. Reserve five, then the remaining seven spots
    3. A further spot is refused with 409
    """
    response = await client.post("/booking/reserve", json=reserve_payload(booking_day, guests=5))
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert "reservation_id" in data

    response = await client.get("/booking/availability", params={"date": booking_day})
    first = response.json()["slots"][0]
    assert first["booked_social"] == 5
    assert first["available_social"] == 7
    assert first["status"] == "open"

    response = await client.post("/booking/reserve", json=reserve_payload(booking_day, guests=7))
    assert response.status_code == 200

    response = await client.get("/booking/availability", params={"date": booking_day})
    first = response.json()["slots"][0]
    assert first["status"] == "full"
    assert first["available_social"] == 0

    response = await client.post("/booking/reserve", json=reserve_payload(booking_day, guests=1))
    assert response.status_code == 409
    assert response.json() == {"error": "Not enough spots available"}


@pytest.mark.asyncio
async def test_reserve_validation_is_400(client: AsyncClient, booking_day):
    response = await client.post(
        "/booking/reserve",
        json=reserve_payload(booking_day, start_time="10:00", end_time="12:00"),
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid slot selection"}


@pytest.mark.asyncio
async def test_reserve_malformed_body_is_400(client: AsyncClient):
    response = await client.post(
        "/booking/reserve",
        content="not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_reserve_too_soon_is_409(client: AsyncClient):
    yesterday = (date.today() - timedelta(days=1)).isoformat()

    response = await client.post("/booking/reserve", json=reserve_payload(yesterday))

    assert response.status_code == 409
    assert response.json() == {"error": "Slot is no longer bookable"}


@pytest.mark.asyncio
async def test_private_then_social_is_409(client: AsyncClient, booking_day):
    response = await client.post(
        "/booking/reserve",
        json=reserve_payload(booking_day, booking_type="private", guests=14),
    )
    assert response.status_code == 200

    response = await client.get("/booking/availability", params={"date": booking_day})
    assert response.json()["slots"][0]["status"] == "private"

    response = await client.post("/booking/reserve", json=reserve_payload(booking_day, guests=1))
    assert response.status_code == 409


@pytest.mark.asyncio
@pytest.mark.parametrize("guests", [True, 2.5, [2]])
async def test_reserve_non_integer_guests_is_400(client: AsyncClient, booking_day, guests):
    response = await client.post("/booking/reserve", json=reserve_payload(booking_day, guests=guests))

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid guest count"}
