# ===== slotbook/services/availability/slot_service.py =====
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Iterator, List, Optional
from sqlalchemy.orm import Session
import logging

from slotbook.models.business import Business
from slotbook.services.availability.availability_service import AvailabilityService, DayWindow
from slotbook.services.booking.conflict_detector import ConflictDetector, load_day_state
from slotbook.services.catalog.service_catalog_service import ServiceCatalogService
from slotbook.services.catalog.team_service import TeamService
from slotbook.services.booking.exceptions import ValidationError
from slotbook.utils.clock import Clock, system_clock
from slotbook.utils.time_utils import minutes_to_time

logger = logging.getLogger(__name__)

MAX_DATE_RANGE_DAYS = 92


@dataclass(frozen=True)
class SlotCandidate:
    start_time: str
    end_time: str
    available: bool


class SlotCandidates:
    """
    Candidate start times of a service inside a day window.

    Starts step by the window's slot_duration and only starts whose service
    fits entirely before the window end are produced. On the current day
    starts at or before `now` come out unavailable. Every iteration starts
    over, nothing is precomputed.
    """

    def __init__(self, window: DayWindow, service_duration: int, target_date: date,
                 now: Optional[datetime] = None):
        if service_duration <= 0:
            raise ValidationError("Service duration must be positive", field="duration")
        self.window = window
        self.service_duration = service_duration
        self.target_date = target_date
        self.now = now

    def _is_past(self, start_minutes: int) -> bool:
        if self.now is None:
            return False
        today = self.now.date()
        if self.target_date != today:
            return self.target_date < today
        return start_minutes <= self.now.hour * 60 + self.now.minute

    def __iter__(self) -> Iterator[SlotCandidate]:
        end = self.window.end_minutes
        t = self.window.start_minutes
        while t + self.service_duration <= end:
            yield SlotCandidate(
                start_time=minutes_to_time(t),
                end_time=minutes_to_time(t + self.service_duration),
                available=not self._is_past(t),
            )
            t += self.window.slot_duration


class SlotService:

    @staticmethod
    def resolve_window(db: Session, business_id, target_date: date, team_member_id=None) -> Optional[DayWindow]:
        if team_member_id is not None:
            return AvailabilityService.get_team_member_window(db, team_member_id, target_date)
        return AvailabilityService.get_business_window(db, business_id, target_date)

    @staticmethod
    def get_day_slots(
            db: Session,
            business: Business,
            service_id,
            target_date: date,
            team_member_id=None,
            clock: Clock = system_clock
    ) -> List[Dict]:
        """
        Slots of a service on one day with live availability.

        Each entry is {time, end_time, available, capacity_remaining}. A
        closed day yields an empty list.
        """
        service = ServiceCatalogService.get_bookable_service(db, business.id, service_id)
        if team_member_id is not None:
            TeamService.get_bookable_member(db, business.id, team_member_id, service.id)

        window = SlotService.resolve_window(db, business.id, target_date, team_member_id)
        if window is None:
            return []

        now = clock.local_now(business.timezone)
        state = load_day_state(db, business.id, target_date)
        business_capacity = AvailabilityService.get_business_capacity(db, business.id, target_date)

        slots = []
        for candidate in SlotCandidates(window, service.duration, target_date, now):
            if not candidate.available:
                slots.append({
                    "time": candidate.start_time,
                    "end_time": candidate.end_time,
                    "available": False,
                    "capacity_remaining": 0,
                })
                continue

            result = ConflictDetector.check_scoped(
                state, candidate.start_time, candidate.end_time,
                business_capacity, team_member_id=team_member_id
            )
            slots.append({
                "time": candidate.start_time,
                "end_time": candidate.end_time,
                "available": result.feasible,
                "capacity_remaining": result.capacity_remaining,
            })

        logger.debug(f"Generated {len(slots)} slots for business {business.id} on {target_date}")
        return slots

    @staticmethod
    def get_available_dates(
            db: Session,
            business: Business,
            service_id,
            start_date: date,
            days: int = 30,
            team_member_id=None,
            clock: Clock = system_clock
    ) -> List[date]:
        """Dates from start_date on that are open for the resource and not in the past"""
        if days < 1 or days > MAX_DATE_RANGE_DAYS:
            raise ValidationError(f"days must be between 1 and {MAX_DATE_RANGE_DAYS}", field="days")

        service = ServiceCatalogService.get_bookable_service(db, business.id, service_id)
        if team_member_id is not None:
            TeamService.get_bookable_member(db, business.id, team_member_id, service.id)

        today = clock.local_now(business.timezone).date()
        dates = []
        for offset in range(days):
            current = start_date + timedelta(days=offset)
            if current < today:
                continue
            window = SlotService.resolve_window(db, business.id, current, team_member_id)
            if window is None or window.end_minutes - window.start_minutes < service.duration:
                continue
            dates.append(current)
        return dates
