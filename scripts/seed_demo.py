#!/usr/bin/env python3
"""
Seed script to create demo booking data for the coming week
"""

import asyncio
from datetime import date, timedelta


async def seed_demo_data():
    """Seed demo overrides and reservations for development"""
    from sqlalchemy import select, func

    from sauna_booking.database import SessionLocal, engine, Base
    from sauna_booking.models.reservation import Reservation
    from sauna_booking.schemas.booking import ReservationCreate, SlotUpdate
    from sauna_booking.services import admin, reservations

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    start = date.today() + timedelta(days=2)

    async with SessionLocal() as db:
        existing = (
            await db.execute(select(func.count(Reservation.id)).where(Reservation.date >= start))
        ).scalar()

        if existing:
            print("Demo data already exists. Skipping...")
            return

        print(f"Creating demo bookings from {start.isoformat()}...")

        # Smaller evening session and a maintenance morning
        await admin.update_slot(db, SlotUpdate(
            date=start.isoformat(),
            start_time="19:00",
            end_time="21:00",
            capacity_social=8,
            notes="Reduced capacity: staff training",
        ))
        await admin.block_day(db, (start + timedelta(days=3)).isoformat())

        demo_bookings = [
            ("09:00", "11:00", "social", 5, "Ada Lovelace", "ada@example.com"),
            ("09:00", "11:00", "social", 4, "Grace Hopper", "grace@example.com"),
            ("11:00", "13:00", "private", 10, "Birthday Group", "party@example.com"),
            ("17:00", "19:00", "social", 12, "Run Club", "runclub@example.com"),
            ("19:00", "21:00", "social", 2, "Alan Turing", "alan@example.com"),
        ]

        for start_time, end_time, booking_type, guests, name, email in demo_bookings:
            reservation_id = await reservations.reserve(db, ReservationCreate(
                date=start.isoformat(),
                start_time=start_time,
                end_time=end_time,
                booking_type=booking_type,
                guests=guests,
                name=name,
                email=email,
            ))
            print(f"  Reserved {booking_type} {start_time} for {name} ({reservation_id})")

        print("Demo data created.")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
