# ============================================================================
# slotbook/services/booking/conflict_detector.py
# Decides whether an interval on a date can take one more booking
# ============================================================================
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Optional, Sequence
from sqlalchemy.orm import Session
import logging

from slotbook.models.availability import BlockedTime
from slotbook.models.booking import Booking, BookingStatus
from slotbook.utils.time_utils import combine, intervals_overlap, time_to_minutes

logger = logging.getLogger(__name__)

REASON_BLOCKED = "blocked"
REASON_CAPACITY = "capacity"

TEAM_MEMBER_CAPACITY = 1


@dataclass
class ConflictResult:
    feasible: bool
    reason: Optional[str] = None
    overlapping_booking_ids: List = field(default_factory=list)
    capacity_used: int = 0
    capacity_remaining: int = 0


@dataclass
class DayState:
    """Live bookings and blocked ranges of one business on one date"""
    target_date: date
    bookings: List[Booking]
    blocked: List[BlockedTime]


def load_day_state(db: Session, business_id, target_date: date) -> DayState:
    """Fresh read of everything that can make an interval on target_date infeasible"""
    bookings = db.query(Booking).filter(
        Booking.business_id == business_id,
        Booking.booking_date == target_date,
        Booking.status != BookingStatus.CANCELLED.value
    ).populate_existing().all()

    day_start = combine(target_date, "00:00")
    day_end = day_start + timedelta(days=1)
    blocked = db.query(BlockedTime).filter(
        BlockedTime.business_id == business_id,
        BlockedTime.start_datetime < day_end,
        BlockedTime.end_datetime > day_start
    ).all()

    return DayState(target_date=target_date, bookings=bookings, blocked=blocked)


class ConflictDetector:

    @staticmethod
    def check(
            candidate_date: date,
            start_time: str,
            end_time: str,
            bookings: Sequence,
            blocked: Sequence,
            max_bookings_per_slot: int,
            exclude_booking_id=None
    ) -> ConflictResult:
        """
        Test [start_time, end_time) on candidate_date against existing
        bookings and blocked ranges.

        Blocked ranges have zero capacity and win over everything. Cancelled
        bookings and the excluded booking are ignored. Back-to-back intervals
        do not overlap.
        """
        candidate_start = combine(candidate_date, start_time)
        candidate_end = combine(candidate_date, end_time)

        for block in blocked:
            if intervals_overlap(candidate_start, candidate_end, block.start_datetime, block.end_datetime):
                return ConflictResult(feasible=False, reason=REASON_BLOCKED)

        start = time_to_minutes(start_time)
        end = time_to_minutes(end_time)
        exclude = str(exclude_booking_id) if exclude_booking_id is not None else None

        overlapping = []
        for booking in bookings:
            if booking.status == BookingStatus.CANCELLED.value:
                continue
            if exclude is not None and str(booking.id) == exclude:
                continue
            if booking.booking_date != candidate_date:
                continue
            if intervals_overlap(start, end, time_to_minutes(booking.start_time), time_to_minutes(booking.end_time)):
                overlapping.append(booking.id)

        used = len(overlapping)
        if used >= max_bookings_per_slot:
            return ConflictResult(
                feasible=False,
                reason=REASON_CAPACITY,
                overlapping_booking_ids=overlapping,
                capacity_used=used,
                capacity_remaining=0,
            )

        return ConflictResult(
            feasible=True,
            overlapping_booking_ids=overlapping,
            capacity_used=used,
            capacity_remaining=max_bookings_per_slot - used,
        )

    @staticmethod
    def check_scoped(
            state: DayState,
            start_time: str,
            end_time: str,
            business_capacity: int,
            team_member_id=None,
            exclude_booking_id=None
    ) -> ConflictResult:
        """
        Run check() for the booked resource.

        With a team member the member's own bookings are held to capacity 1,
        and the business capacity still applies to all bookings of the day.
        """
        business_result = ConflictDetector.check(
            state.target_date, start_time, end_time,
            state.bookings, state.blocked, business_capacity, exclude_booking_id
        )
        if team_member_id is None or not business_result.feasible:
            return business_result

        member_bookings = [b for b in state.bookings if str(b.team_member_id) == str(team_member_id)]
        member_result = ConflictDetector.check(
            state.target_date, start_time, end_time,
            member_bookings, state.blocked, TEAM_MEMBER_CAPACITY, exclude_booking_id
        )
        if not member_result.feasible:
            return member_result

        member_result.capacity_remaining = min(
            member_result.capacity_remaining, business_result.capacity_remaining
        )
        return member_result
