"""Reservation model"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, Date, Time, DateTime, Text, Index, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID

from sauna_booking.database import Base


class Reservation(Base):
    """Sauna session bookings. Rows are inserted once and only ever deleted."""
    __tablename__ = "booking_reservations"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Session
    date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    # Booking details
    booking_type = Column(String(20), nullable=False)  # social, private
    guests = Column(Integer, nullable=False, default=1)

    # Contact
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(30))
    notes = Column(Text)

    status = Column(String(20), nullable=False, default="confirmed")

    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("ix_booking_reservations_date_start", "date", "start_time"),
        CheckConstraint("guests > 0", name="ck_booking_reservations_guests_positive"),
        CheckConstraint("booking_type IN ('social', 'private')", name="ck_booking_reservations_type"),
    )
