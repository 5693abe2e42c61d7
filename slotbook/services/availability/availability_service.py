# ===== slotbook/services/availability/availability_service.py =====
from dataclasses import dataclass
from typing import List, Optional, Iterable
from datetime import date
from sqlalchemy.orm import Session
from slotbook.config.settings import settings
from slotbook.models.availability import AvailabilityRule
from slotbook.models.team_member import TeamMember, TeamMemberAvailability
from slotbook.schemas.availability import AvailabilityRuleUpsert, TeamMemberAvailabilityUpsert
from slotbook.services.booking.exceptions import ValidationError, NotFoundError
from slotbook.utils.time_utils import parse_time, time_to_minutes, minutes_to_time, day_of_week
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayWindow:
    """Resolved operating window of one resource on one date"""
    start_time: str
    end_time: str
    slot_duration: int
    max_bookings_per_slot: int

    @property
    def start_minutes(self) -> int:
        return time_to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        return time_to_minutes(self.end_time)


def resolve_day_window(rules: Iterable, target_date: date) -> Optional[DayWindow]:
    """
    Pick the weekly rule matching target_date's weekday.

    Works for both business rules and team member rules. Returns None when
    the day has no rule, is closed, or the rule is malformed (start >= end).
    """
    weekday = day_of_week(target_date)
    rule = next((r for r in rules if r.day_of_week == weekday), None)

    if rule is None or not rule.is_active_day:
        return None

    if time_to_minutes(rule.start_time) >= time_to_minutes(rule.end_time):
        logger.warning(f"Ignoring malformed rule {rule.id}: {rule.start_time}-{rule.end_time}")
        return None

    return DayWindow(
        start_time=rule.start_time,
        end_time=rule.end_time,
        slot_duration=getattr(rule, "slot_duration", None) or settings.DEFAULT_SLOT_DURATION,
        max_bookings_per_slot=(
            getattr(rule, "max_bookings_per_slot", None) or settings.DEFAULT_MAX_BOOKINGS_PER_SLOT
        ),
    )


class AvailabilityService:
    """Weekly working hours of businesses and team members"""

    # ------------------------------------------------------------------
    # Business hours
    # ------------------------------------------------------------------

    @staticmethod
    def get_business_rules(db: Session, business_id) -> List[AvailabilityRule]:
        return db.query(AvailabilityRule).filter(
            AvailabilityRule.business_id == business_id
        ).order_by(AvailabilityRule.day_of_week).all()

    @staticmethod
    def list_business_rules(db: Session, business_id) -> List[AvailabilityRule]:
        """
        Weekly hours for the settings page. An unconfigured business gets
        seven closed default rows so the owner has something to edit; closed
        rows keep every day unbookable until the owner opens them.
        """
        rules = AvailabilityService.get_business_rules(db, business_id)
        if rules:
            return rules

        logger.info(f"Creating default availability rules for business {business_id}")
        for weekday in range(7):
            db.add(AvailabilityRule(
                business_id=business_id,
                day_of_week=weekday,
                start_time=settings.DEFAULT_OPEN_TIME,
                end_time=settings.DEFAULT_CLOSE_TIME,
                is_open=False,
                slot_duration=settings.DEFAULT_SLOT_DURATION,
                max_bookings_per_slot=settings.DEFAULT_MAX_BOOKINGS_PER_SLOT,
            ))
        db.commit()
        return AvailabilityService.get_business_rules(db, business_id)

    @staticmethod
    def _validate_hours(start_time: str, end_time: str, is_open: bool):
        parse_time(start_time, field="start_time")
        parse_time(end_time, field="end_time")
        if is_open and time_to_minutes(start_time) >= time_to_minutes(end_time):
            raise ValidationError("end_time must be after start_time", field="end_time")

    @staticmethod
    def _apply_business_rule(db: Session, business_id, data: AvailabilityRuleUpsert) -> AvailabilityRule:
        AvailabilityService._validate_hours(data.start_time, data.end_time, data.is_open)
        if data.slot_duration <= 0:
            raise ValidationError("slot_duration must be positive", field="slot_duration")
        if data.max_bookings_per_slot < 1:
            raise ValidationError("max_bookings_per_slot must be at least 1", field="max_bookings_per_slot")

        rule = db.query(AvailabilityRule).filter(
            AvailabilityRule.business_id == business_id,
            AvailabilityRule.day_of_week == data.day_of_week
        ).first()

        if rule is None:
            rule = AvailabilityRule(business_id=business_id, day_of_week=data.day_of_week)
            db.add(rule)

        rule.start_time = data.start_time
        rule.end_time = data.end_time
        rule.is_open = data.is_open
        rule.slot_duration = data.slot_duration
        rule.max_bookings_per_slot = data.max_bookings_per_slot
        return rule

    @staticmethod
    def upsert_business_rule(db: Session, business_id, data: AvailabilityRuleUpsert) -> AvailabilityRule:
        rule = AvailabilityService._apply_business_rule(db, business_id, data)
        db.commit()
        db.refresh(rule)
        logger.info(f"Availability for business {business_id} day {data.day_of_week} updated")
        return rule

    @staticmethod
    def replace_business_rules(
            db: Session,
            business_id,
            rules: List[AvailabilityRuleUpsert]
    ) -> List[AvailabilityRule]:
        """Save a whole week at once; nothing is written if any day is invalid"""
        weekdays = [r.day_of_week for r in rules]
        if len(weekdays) != len(set(weekdays)):
            raise ValidationError("Each day_of_week may appear only once", field="day_of_week")

        try:
            for data in rules:
                AvailabilityService._apply_business_rule(db, business_id, data)
            db.commit()
        except Exception:
            db.rollback()
            raise

        return AvailabilityService.get_business_rules(db, business_id)

    @staticmethod
    def get_business_window(db: Session, business_id, target_date: date) -> Optional[DayWindow]:
        return resolve_day_window(AvailabilityService.get_business_rules(db, business_id), target_date)

    @staticmethod
    def get_business_capacity(db: Session, business_id, target_date: date) -> int:
        """Bookings allowed per interval on that weekday, open or not"""
        rule = db.query(AvailabilityRule).filter(
            AvailabilityRule.business_id == business_id,
            AvailabilityRule.day_of_week == day_of_week(target_date)
        ).first()
        if rule and rule.max_bookings_per_slot:
            return rule.max_bookings_per_slot
        return settings.DEFAULT_MAX_BOOKINGS_PER_SLOT

    # ------------------------------------------------------------------
    # Team member hours
    # ------------------------------------------------------------------

    @staticmethod
    def list_team_member_rules(db: Session, team_member_id) -> List[TeamMemberAvailability]:
        return db.query(TeamMemberAvailability).filter(
            TeamMemberAvailability.team_member_id == team_member_id
        ).order_by(TeamMemberAvailability.day_of_week).all()

    @staticmethod
    def upsert_team_member_rule(
            db: Session,
            team_member: TeamMember,
            data: TeamMemberAvailabilityUpsert
    ) -> TeamMemberAvailability:
        AvailabilityService._validate_hours(data.start_time, data.end_time, data.is_available)

        rule = db.query(TeamMemberAvailability).filter(
            TeamMemberAvailability.team_member_id == team_member.id,
            TeamMemberAvailability.day_of_week == data.day_of_week
        ).first()

        if rule is None:
            rule = TeamMemberAvailability(team_member_id=team_member.id, day_of_week=data.day_of_week)
            db.add(rule)

        rule.start_time = data.start_time
        rule.end_time = data.end_time
        rule.is_available = data.is_available

        db.commit()
        db.refresh(rule)
        return rule

    @staticmethod
    def get_team_member_window(db: Session, team_member_id, target_date: date) -> Optional[DayWindow]:
        """
        A member's own hours clipped to the business hours of the same day.

        Slot spacing comes from the business rule; a member is one person so
        the window capacity is always 1.
        """
        member = db.query(TeamMember).filter(TeamMember.id == team_member_id).first()
        if not member:
            raise NotFoundError("Team member not found", field="team_member_id")

        own = resolve_day_window(AvailabilityService.list_team_member_rules(db, member.id), target_date)
        if own is None:
            return None

        business = AvailabilityService.get_business_window(db, member.business_id, target_date)
        if business is None:
            return None

        start = max(own.start_minutes, business.start_minutes)
        end = min(own.end_minutes, business.end_minutes)
        if start >= end:
            return None

        return DayWindow(
            start_time=minutes_to_time(start),
            end_time=minutes_to_time(end),
            slot_duration=business.slot_duration,
            max_bookings_per_slot=1,
        )
