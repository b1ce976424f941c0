"""Slot override model"""

from datetime import datetime
from sqlalchemy import Column, Integer, Boolean, Date, Time, DateTime, Text

from sauna_booking.database import Base
from sauna_booking.slots import DEFAULT_SOCIAL_CAPACITY


class SlotOverride(Base):
    """Admin-set capacity or block for one session; no row means defaults"""
    __tablename__ = "booking_slots"

    # One row per (date, start_time)
    date = Column(Date, primary_key=True)
    start_time = Column(Time, primary_key=True)
    end_time = Column(Time, nullable=False)

    capacity_social = Column(Integer, nullable=False, default=DEFAULT_SOCIAL_CAPACITY)
    is_blocked = Column(Boolean, nullable=False, default=False)
    notes = Column(Text)

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
