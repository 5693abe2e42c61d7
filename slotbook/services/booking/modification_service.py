# ============================================================================
# slotbook/services/booking/modification_service.py
# Booking status machine: reschedule proposals and cancellations
# ============================================================================
from datetime import date, datetime
from typing import Optional
from sqlalchemy.orm import Session
import logging

from slotbook.config.settings import settings
from slotbook.models.booking import Booking, BookingStatus
from slotbook.models.business import Business
from slotbook.schemas.booking import ModificationRequest
from slotbook.services.booking.booking_lock import BookingLockManager, booking_lock_manager
from slotbook.services.booking.booking_service import BookingService
from slotbook.services.booking.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    TokenExpiredError,
    ValidationError
)
from slotbook.services.business.business_service import BusinessService
from slotbook.services.notification.booking_notifier import BookingNotifier
from slotbook.utils.clock import Clock, system_clock
from slotbook.utils.time_utils import combine

logger = logging.getLogger(__name__)

PENDING = BookingStatus.PENDING.value
CONFIRMED = BookingStatus.CONFIRMED.value
MODIFICATION_PENDING = BookingStatus.MODIFICATION_PENDING.value
CANCELLED = BookingStatus.CANCELLED.value

ALLOWED_TRANSITIONS = {
    PENDING: {CONFIRMED, MODIFICATION_PENDING, CANCELLED},
    CONFIRMED: {MODIFICATION_PENDING, CANCELLED},
    MODIFICATION_PENDING: {CONFIRMED, CANCELLED},
    CANCELLED: set(),
}

# One message for unknown, consumed or mismatched tokens
INVALID_LINK_MESSAGE = "This link is invalid or has already been used"


def assert_transition(current: str, target: str):
    if target not in ALLOWED_TRANSITIONS.get(current, set()):
        if current == CANCELLED:
            raise InvalidTransitionError("Booking is already cancelled", field="status")
        raise InvalidTransitionError(f"Cannot change booking from {current} to {target}", field="status")


class ModificationService:

    # ------------------------------------------------------------------
    # Business-initiated reschedule
    # ------------------------------------------------------------------

    @staticmethod
    def request_modification(
            db: Session,
            business: Business,
            booking_id,
            data: ModificationRequest,
            clock: Clock = system_clock,
            lock_manager: BookingLockManager = booking_lock_manager
    ) -> Booking:
        """
        Store a proposed new time and issue a modification token.

        The live date/time stay untouched until the customer confirms.
        """
        booking = BookingService.get_booking(db, business.id, booking_id)
        assert_transition(booking.status, MODIFICATION_PENDING)

        start_time, end_time = BookingService.resolve_times(
            data.proposed_start_time, data.proposed_end_time,
            booking.service.duration, prefix="proposed_"
        )
        if combine(data.proposed_booking_date, start_time) <= clock.local_now(business.timezone):
            raise ValidationError("Proposed time is in the past", field="proposed_booking_date")

        with lock_manager.acquire(db, business.id, data.proposed_booking_date):
            try:
                BookingService.assert_slot_available(
                    db, business.id, data.proposed_booking_date, start_time, end_time,
                    team_member_id=booking.team_member_id,
                    exclude_booking_id=booking.id
                )

                booking.proposed_booking_date = data.proposed_booking_date
                booking.proposed_start_time = start_time
                booking.proposed_end_time = end_time
                booking.modification_reason = data.modification_reason
                booking.issue_modification_token(clock.utcnow(), settings.MODIFICATION_TOKEN_TTL_HOURS)
                booking.status_before_modification = booking.status
                booking.status = MODIFICATION_PENDING
                db.commit()
            except Exception:
                db.rollback()
                raise

        db.refresh(booking)
        logger.info(
            f"Modification requested for booking {booking.id}: "
            f"{booking.proposed_booking_date} {start_time}-{end_time}"
        )
        BookingNotifier.modification_requested(booking, business)
        return booking

    @staticmethod
    def _get_by_modification_token(db: Session, token: str, now: datetime) -> Booking:
        if not token:
            raise NotFoundError(INVALID_LINK_MESSAGE)

        booking = db.query(Booking).filter(Booking.modification_token == token).first()
        if not booking or booking.status != MODIFICATION_PENDING:
            raise NotFoundError(INVALID_LINK_MESSAGE)

        if booking.is_modification_token_expired(now):
            raise TokenExpiredError("This modification link has expired")
        return booking

    @staticmethod
    def get_modification(db: Session, token: str, clock: Clock = system_clock) -> Booking:
        return ModificationService._get_by_modification_token(db, token, clock.utcnow())

    @staticmethod
    def confirm_modification(
            db: Session,
            token: str,
            clock: Clock = system_clock,
            lock_manager: BookingLockManager = booking_lock_manager
    ) -> Booking:
        """
        Customer accepts the proposal. The proposed interval is checked again
        under the day lock since other bookings may have landed on it after
        the proposal was made. The token is consumed on success.
        """
        booking = ModificationService._get_by_modification_token(db, token, clock.utcnow())
        if not booking.has_proposal:
            raise ValidationError("No pending modification for this booking")
        assert_transition(booking.status, CONFIRMED)

        business = BusinessService.get_business(db, booking.business_id)
        target_date = booking.proposed_booking_date

        with lock_manager.acquire(db, booking.business_id, target_date):
            try:
                db.refresh(booking)
                # A concurrent confirm may have consumed the token while we waited
                if booking.modification_token != token or not booking.has_proposal:
                    raise NotFoundError(INVALID_LINK_MESSAGE)

                BookingService.assert_slot_available(
                    db, booking.business_id, booking.proposed_booking_date,
                    booking.proposed_start_time, booking.proposed_end_time,
                    team_member_id=booking.team_member_id,
                    exclude_booking_id=booking.id
                )

                booking.booking_date = booking.proposed_booking_date
                booking.start_time = booking.proposed_start_time
                booking.end_time = booking.proposed_end_time
                booking.clear_proposal()
                booking.status = CONFIRMED
                db.commit()
            except Exception:
                db.rollback()
                raise

        db.refresh(booking)
        logger.info(f"Modification confirmed for booking {booking.id}")
        BookingNotifier.booking_confirmed(booking, business)
        return booking

    @staticmethod
    def decline_modification(db: Session, token: str, clock: Clock = system_clock) -> Booking:
        """
        Customer keeps the original time. The proposal and token are discarded
        and the booking returns to the status it had before the proposal.
        """
        booking = ModificationService._get_by_modification_token(db, token, clock.utcnow())

        restored = booking.withdraw_proposal()
        db.commit()
        db.refresh(booking)

        logger.info(f"Modification declined for booking {booking.id}, back to {restored}")
        return booking

    # ------------------------------------------------------------------
    # Customer self-service (permanent action token)
    # ------------------------------------------------------------------

    @staticmethod
    def _get_by_action_token(db: Session, token: str) -> Booking:
        if not token:
            raise NotFoundError(INVALID_LINK_MESSAGE)
        booking = db.query(Booking).filter(Booking.customer_action_token == token).first()
        if not booking:
            raise NotFoundError(INVALID_LINK_MESSAGE)
        return booking

    @staticmethod
    def get_customer_booking(db: Session, token: str) -> Booking:
        booking = ModificationService._get_by_action_token(db, token)
        if booking.status == CANCELLED:
            raise InvalidTransitionError("Booking is already cancelled", field="status")
        return booking

    @staticmethod
    def customer_cancel(
            db: Session,
            token: str,
            reason: Optional[str] = None,
            clock: Clock = system_clock
    ) -> Booking:
        booking = ModificationService._get_by_action_token(db, token)
        assert_transition(booking.status, CANCELLED)

        business = BusinessService.get_business(db, booking.business_id)
        today: date = clock.local_now(business.timezone).date()
        if booking.booking_date < today:
            raise ValidationError("Past bookings cannot be cancelled", field="booking_date")

        booking.status = CANCELLED
        booking.cancellation_reason = reason
        booking.clear_proposal()
        db.commit()
        db.refresh(booking)

        logger.info(f"Booking {booking.id} cancelled by customer")
        BookingNotifier.cancelled_by_customer(booking, business)
        return booking

    @staticmethod
    def customer_modify(
            db: Session,
            token: str,
            new_date: date,
            new_start_time: str,
            new_end_time: Optional[str] = None,
            clock: Clock = system_clock,
            lock_manager: BookingLockManager = booking_lock_manager
    ) -> Booking:
        """
        Customer moves their own booking. The target day is re-read and
        checked with the booking itself excluded, so moving within its own
        interval is allowed. Any pending business proposal is dropped.
        """
        booking = ModificationService._get_by_action_token(db, token)
        if booking.status == CANCELLED:
            raise InvalidTransitionError("Booking is already cancelled", field="status")

        business = BusinessService.get_business(db, booking.business_id)
        start_time, end_time = BookingService.resolve_times(
            new_start_time, new_end_time, booking.service.duration, prefix="new_"
        )
        BookingService.validate_customer_slot(
            db, business, new_date, start_time, end_time,
            team_member_id=booking.team_member_id, clock=clock, date_field="new_date"
        )

        with lock_manager.acquire(db, booking.business_id, new_date):
            try:
                BookingService.assert_slot_available(
                    db, booking.business_id, new_date, start_time, end_time,
                    team_member_id=booking.team_member_id,
                    exclude_booking_id=booking.id
                )

                booking.booking_date = new_date
                booking.start_time = start_time
                booking.end_time = end_time
                booking.clear_proposal()
                booking.status = CONFIRMED
                db.commit()
            except Exception:
                db.rollback()
                raise

        db.refresh(booking)
        logger.info(f"Booking {booking.id} moved by customer to {new_date} {start_time}-{end_time}")
        BookingNotifier.booking_confirmed(booking, business)
        return booking

    # ------------------------------------------------------------------
    # Business side
    # ------------------------------------------------------------------

    @staticmethod
    def business_cancel(db: Session, business: Business, booking_id, reason: Optional[str] = None) -> Booking:
        """Owner cancellation; allowed for past dates as well"""
        booking = BookingService.get_booking(db, business.id, booking_id)
        assert_transition(booking.status, CANCELLED)

        booking.status = CANCELLED
        booking.cancellation_reason = reason
        booking.clear_proposal()
        db.commit()
        db.refresh(booking)

        logger.info(f"Booking {booking.id} cancelled by business {business.id}")
        return booking

    @staticmethod
    def cleanup_expired_modification_tokens(db: Session, now: datetime) -> int:
        """Drop expired proposals; each booking keeps its original time and prior status"""
        candidates = db.query(Booking).filter(Booking.modification_token.isnot(None)).all()

        cleaned = 0
        for booking in candidates:
            if not booking.is_modification_token_expired(now):
                continue
            if booking.status == MODIFICATION_PENDING:
                booking.withdraw_proposal()
            else:
                booking.clear_proposal()
            cleaned += 1

        if cleaned:
            db.commit()
            logger.info(f"Cleared {cleaned} expired modification tokens")
        return cleaned
