from datetime import date, datetime

import pytest

from slotbook.services.booking.exceptions import ValidationError
from slotbook.utils.time_utils import (
    add_minutes_to_time,
    combine,
    day_of_week,
    intervals_overlap,
    is_valid_time,
    minutes_to_time,
    parse_time,
    time_to_minutes,
)


def test_time_to_minutes_and_back():
    assert time_to_minutes("00:00") == 0
    assert time_to_minutes("09:45") == 585
    assert time_to_minutes("23:59") == 1439
    assert minutes_to_time(585) == "09:45"
    assert minutes_to_time(5) == "00:05"


def test_minutes_to_time_wraps_within_a_day():
    assert minutes_to_time(1440) == "00:00"
    assert minutes_to_time(1500) == "01:00"


def test_add_minutes_to_time():
    assert add_minutes_to_time("16:00", 45) == "16:45"
    assert add_minutes_to_time("09:30", 30) == "10:00"


def test_touching_intervals_do_not_overlap():
    assert not intervals_overlap(600, 630, 630, 660)
    assert not intervals_overlap(630, 660, 600, 630)


def test_partial_and_contained_overlap():
    assert intervals_overlap(585, 630, 600, 630)
    assert intervals_overlap(600, 700, 620, 640)
    assert intervals_overlap(620, 640, 600, 700)


def test_overlap_accepts_datetimes():
    a = datetime(2030, 1, 7, 9, 0)
    b = datetime(2030, 1, 7, 10, 0)
    c = datetime(2030, 1, 7, 11, 0)
    assert intervals_overlap(a, c, b, c)
    assert not intervals_overlap(a, b, b, c)


@pytest.mark.parametrize("value", ["9:00", "09:0", "0900", "", None, "ab:cd", "09:00:00"])
def test_parse_time_rejects_bad_format(value):
    with pytest.raises(ValidationError) as exc_info:
        parse_time(value)
    assert exc_info.value.field == "start_time"
    assert "HH:MM" in exc_info.value.message


@pytest.mark.parametrize("value", ["24:00", "12:60", "99:99"])
def test_parse_time_rejects_out_of_range(value):
    with pytest.raises(ValidationError) as exc_info:
        parse_time(value, field="end_time")
    assert exc_info.value.message == "Invalid end_time values"
    assert not is_valid_time(value)


def test_parse_time_accepts_legal_values():
    assert parse_time("00:00") == "00:00"
    assert parse_time("23:59") == "23:59"


def test_day_of_week_starts_on_sunday():
    assert day_of_week(date(2030, 1, 6)) == 0  # Sunday
    assert day_of_week(date(2030, 1, 7)) == 1  # Monday
    assert day_of_week(date(2030, 1, 12)) == 6  # Saturday


def test_combine_builds_naive_local_datetime():
    assert combine(date(2030, 1, 7), "09:45") == datetime(2030, 1, 7, 9, 45)
