"""
Slot calendar: the fixed daily session windows and booking constants.

Every operating day has the same six two-hour sessions between 09:00 and
21:00. Nothing here touches the database.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Tuple, Union

DEFAULT_SOCIAL_CAPACITY = 12
SOCIAL_MAX_GUESTS = 12
PRIVATE_MAX_GUESTS = 14
MIN_ADVANCE_HOURS = 18
MAX_RANGE_DAYS = 31

BOOKING_TYPES = ("social", "private")

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


@dataclass(frozen=True)
class SlotDefinition:
    """One session window, times as HH:MM strings"""
    start: str
    end: str

    @property
    def start_time(self) -> time:
        return parse_time(self.start)

    @property
    def end_time(self) -> time:
        return parse_time(self.end)


SLOT_DEFINITIONS: Tuple[SlotDefinition, ...] = (
    SlotDefinition("09:00", "11:00"),
    SlotDefinition("11:00", "13:00"),
    SlotDefinition("13:00", "15:00"),
    SlotDefinition("15:00", "17:00"),
    SlotDefinition("17:00", "19:00"),
    SlotDefinition("19:00", "21:00"),
)


def build_slots() -> List[SlotDefinition]:
    """Ordered list of the day's session windows"""
    return list(SLOT_DEFINITIONS)


def max_guests_for(booking_type: str) -> int:
    return PRIVATE_MAX_GUESTS if booking_type == "private" else SOCIAL_MAX_GUESTS


def is_valid_date(value) -> bool:
    """True for a real calendar date written as YYYY-MM-DD"""
    return parse_date(value) is not None


def parse_date(value) -> Optional[date]:
    if not isinstance(value, str) or not _DATE_RE.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        # e.g. 2025-02-30
        return None


def is_valid_time(value) -> bool:
    return isinstance(value, str) and bool(_TIME_RE.match(value))


def parse_time(value: str) -> time:
    hours, minutes = value.split(":")[:2]
    return time(int(hours), int(minutes))


def normalize_time(value: Union[str, time, None]) -> Optional[str]:
    """
    Reduce a stored time to HH:MM.

    Databases hand ``time`` columns back as ``datetime.time`` or as
    ``HH:MM:SS`` strings depending on the driver.
    """
    if value is None or value == "":
        return None
    if isinstance(value, time):
        return value.strftime("%H:%M")
    return str(value)[:5]


def find_slot(start: str, end: Optional[str] = None) -> Optional[SlotDefinition]:
    """Slot definition matching ``start`` (and ``end`` when given)"""
    for slot in SLOT_DEFINITIONS:
        if slot.start == start and (end is None or slot.end == end):
            return slot
    return None


def date_range(start: date, days: int) -> List[date]:
    return [start + timedelta(days=offset) for offset in range(days)]


def clamp_days(days) -> int:
    """Bound a requested day count to 1..MAX_RANGE_DAYS"""
    try:
        days = int(days)
    except (TypeError, ValueError):
        return 1
    return max(1, min(days, MAX_RANGE_DAYS))


def slot_key(day: Union[date, str], start: Union[str, time]) -> str:
    """Composite index key used to join overrides and reservations"""
    day_str = day.isoformat() if isinstance(day, date) else str(day)
    return f"{day_str}_{normalize_time(start)}"


def slot_start_datetime(day: date, slot: SlotDefinition, tzinfo) -> datetime:
    return datetime.combine(day, slot.start_time, tzinfo=tzinfo)
