# slotbook/utils/time_utils.py
"""
Wall-clock time arithmetic on "HH:MM" strings.

All values are local to the business; there is no timezone handling here
and spans never cross midnight.
"""
import re
from datetime import date, datetime
from typing import Union

from slotbook.services.booking.exceptions import ValidationError

MINUTES_PER_DAY = 24 * 60

_TIME_PATTERN = re.compile(r"^\d{2}:\d{2}$")

Comparable = Union[int, datetime]


def time_to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(total_minutes: int) -> str:
    """Convert minutes since midnight to a zero-padded "HH:MM" string."""
    total_minutes %= MINUTES_PER_DAY
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def add_minutes_to_time(start: str, duration: int) -> str:
    return minutes_to_time(time_to_minutes(start) + duration)


def intervals_overlap(a_start: Comparable, a_end: Comparable, b_start: Comparable, b_end: Comparable) -> bool:
    """
    Half-open overlap test for [a_start, a_end) and [b_start, b_end).

    Touching endpoints (a_end == b_start) do not overlap.
    """
    return not (a_end <= b_start or a_start >= b_end)


def is_valid_time(value) -> bool:
    if not isinstance(value, str) or not _TIME_PATTERN.match(value):
        return False
    hours, minutes = (int(part) for part in value.split(":"))
    return 0 <= hours <= 23 and 0 <= minutes <= 59


def parse_time(value, field: str = "start_time") -> str:
    """Return value if it is a legal "HH:MM" time, otherwise raise ValidationError."""
    if not isinstance(value, str) or not _TIME_PATTERN.match(value):
        raise ValidationError(f"{field} must be in HH:MM format", field=field)
    if not is_valid_time(value):
        raise ValidationError(f"Invalid {field} values", field=field)
    return value


def day_of_week(target_date: date) -> int:
    """Weekday index with 0=Sunday .. 6=Saturday."""
    return (target_date.weekday() + 1) % 7


def combine(target_date: date, value: str) -> datetime:
    """Build a naive local datetime from a date and an "HH:MM" string."""
    minutes = time_to_minutes(value)
    return datetime(target_date.year, target_date.month, target_date.day, minutes // 60, minutes % 60)
