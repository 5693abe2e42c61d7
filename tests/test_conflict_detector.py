from datetime import datetime
from types import SimpleNamespace
from uuid import uuid4

from slotbook.services.booking.conflict_detector import (
    REASON_BLOCKED,
    REASON_CAPACITY,
    ConflictDetector,
    DayState,
    load_day_state,
)

from tests.conftest import TUESDAY, add_booking


def booking(start, end, status="confirmed", team_member_id=None, booking_date=TUESDAY):
    return SimpleNamespace(
        id=uuid4(), booking_date=booking_date, start_time=start, end_time=end,
        status=status, team_member_id=team_member_id,
    )


def block(start, end):
    return SimpleNamespace(start_datetime=start, end_datetime=end)


def test_free_interval_is_feasible():
    result = ConflictDetector.check(TUESDAY, "10:00", "10:45", [], [], 1)
    assert result.feasible
    assert result.capacity_remaining == 1
    assert result.reason is None


def test_back_to_back_bookings_do_not_conflict():
    existing = [booking("09:00", "10:00"), booking("10:45", "11:30")]
    assert ConflictDetector.check(TUESDAY, "10:00", "10:45", existing, [], 1).feasible


def test_overlap_at_capacity_conflicts():
    existing = booking("10:00", "10:30")
    result = ConflictDetector.check(TUESDAY, "09:45", "10:30", [existing], [], 1)
    assert not result.feasible
    assert result.reason == REASON_CAPACITY
    assert result.overlapping_booking_ids == [existing.id]
    assert result.capacity_used == 1


def test_capacity_above_one_admits_parallel_bookings():
    existing = [booking("10:00", "10:45")]
    result = ConflictDetector.check(TUESDAY, "10:00", "10:45", existing, [], 2)
    assert result.feasible
    assert result.capacity_remaining == 1

    existing.append(booking("10:15", "11:00"))
    assert not ConflictDetector.check(TUESDAY, "10:00", "10:45", existing, [], 2).feasible


def test_cancelled_and_excluded_bookings_are_ignored():
    moving = booking("10:00", "10:45")
    existing = [booking("10:00", "10:45", status="cancelled"), moving]

    assert not ConflictDetector.check(TUESDAY, "10:15", "11:00", existing, [], 1).feasible
    assert ConflictDetector.check(TUESDAY, "10:15", "11:00", existing, [], 1, exclude_booking_id=moving.id).feasible


def test_other_dates_are_ignored():
    existing = [booking("10:00", "10:45", booking_date=datetime(2030, 1, 9).date())]
    assert ConflictDetector.check(TUESDAY, "10:00", "10:45", existing, [], 1).feasible


def test_blocked_range_wins_over_free_capacity():
    blocked = [block(datetime(2030, 1, 8, 10, 30), datetime(2030, 1, 8, 11, 0))]
    result = ConflictDetector.check(TUESDAY, "10:00", "10:45", [], blocked, 10)
    assert not result.feasible
    assert result.reason == REASON_BLOCKED
    assert result.capacity_remaining == 0


def test_multi_day_block_covers_whole_day():
    blocked = [block(datetime(2030, 1, 6, 0, 0), datetime(2030, 1, 10, 0, 0))]
    assert not ConflictDetector.check(TUESDAY, "09:00", "09:30", [], blocked, 1).feasible


def test_block_ending_at_start_does_not_conflict():
    blocked = [block(datetime(2030, 1, 8, 9, 0), datetime(2030, 1, 8, 10, 0))]
    assert ConflictDetector.check(TUESDAY, "10:00", "10:45", [], blocked, 1).feasible


def test_scoped_check_limits_member_to_one_booking():
    member_id = uuid4()
    state = DayState(TUESDAY, [booking("10:00", "10:45", team_member_id=member_id)], [])

    result = ConflictDetector.check_scoped(state, "10:00", "10:45", 3, team_member_id=member_id)
    assert not result.feasible
    assert result.reason == REASON_CAPACITY

    other = ConflictDetector.check_scoped(state, "10:00", "10:45", 3, team_member_id=uuid4())
    assert other.feasible
    assert other.capacity_remaining == 1


def test_scoped_check_respects_business_capacity():
    state = DayState(TUESDAY, [booking("10:00", "10:45")], [])
    result = ConflictDetector.check_scoped(state, "10:00", "10:45", 1, team_member_id=uuid4())
    assert not result.feasible


def test_load_day_state_reads_live_rows(db, business, service):
    add_booking(db, business, service, TUESDAY, "10:00", "10:45")
    add_booking(db, business, service, TUESDAY, "11:00", "11:45", status="cancelled")

    state = load_day_state(db, business.id, TUESDAY)
    assert [b.start_time for b in state.bookings] == ["10:00"]
    assert state.blocked == []
