# ============================================================================
# slotbook/services/booking/booking_service.py
# ============================================================================
"""Service for creating, reading and updating bookings"""
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
import logging

from slotbook.models.booking import Booking, BookingStatus
from slotbook.models.business import Business
from slotbook.schemas.booking import BookingCreate, BookingUpdate
from slotbook.services.availability.availability_service import AvailabilityService
from slotbook.services.availability.slot_service import SlotService
from slotbook.services.booking.booking_lock import BookingLockManager, booking_lock_manager
from slotbook.services.booking.conflict_detector import ConflictDetector, ConflictResult, load_day_state
from slotbook.services.booking.exceptions import NotFoundError, SlotConflictError, ValidationError
from slotbook.services.catalog.service_catalog_service import ServiceCatalogService
from slotbook.services.catalog.team_service import TeamService
from slotbook.services.notification.booking_notifier import BookingNotifier
from slotbook.utils.clock import Clock, system_clock
from slotbook.utils.time_utils import MINUTES_PER_DAY, add_minutes_to_time, combine, parse_time, time_to_minutes

logger = logging.getLogger(__name__)

SOURCE_PUBLIC = "public"
SOURCE_DASHBOARD = "dashboard"

BLOCKED_DETAILS = "This time is not available for booking. Please select a different time."


class BookingService:
    """Handles the booking write path and booking queries"""

    # ------------------------------------------------------------------
    # Validation helpers shared with the modification flows
    # ------------------------------------------------------------------

    @staticmethod
    def resolve_times(start_time: str, end_time: Optional[str], duration: int, prefix: str = ""):
        """Validate start/end, computing end from the service duration when absent"""
        start = parse_time(start_time, field=f"{prefix}start_time")
        if end_time:
            end = parse_time(end_time, field=f"{prefix}end_time")
        else:
            if time_to_minutes(start) + duration >= MINUTES_PER_DAY:
                raise ValidationError("Booking must end on the same day", field=f"{prefix}start_time")
            end = add_minutes_to_time(start, duration)

        if time_to_minutes(end) <= time_to_minutes(start):
            raise ValidationError("end_time must be after start_time", field=f"{prefix}end_time")
        return start, end

    @staticmethod
    def validate_customer_slot(
            db: Session,
            business: Business,
            target_date: date,
            start_time: str,
            end_time: str,
            team_member_id=None,
            clock: Clock = system_clock,
            date_field: str = "booking_date"
    ):
        """Customer-chosen times must be in the future and inside working hours"""
        now = clock.local_now(business.timezone)
        if combine(target_date, start_time) <= now:
            raise ValidationError("Cannot book a time in the past", field=date_field)

        window = SlotService.resolve_window(db, business.id, target_date, team_member_id)
        if window is None:
            raise ValidationError("No availability on the selected date", field=date_field)

        if time_to_minutes(start_time) < window.start_minutes or time_to_minutes(end_time) > window.end_minutes:
            raise ValidationError("Selected time is outside working hours", field="start_time")

    @staticmethod
    def check_slot(
            db: Session,
            business_id,
            target_date: date,
            start_time: str,
            end_time: str,
            team_member_id=None,
            exclude_booking_id=None
    ) -> ConflictResult:
        """Fresh read of the day followed by the conflict check"""
        state = load_day_state(db, business_id, target_date)
        capacity = AvailabilityService.get_business_capacity(db, business_id, target_date)
        return ConflictDetector.check_scoped(
            state, start_time, end_time, capacity,
            team_member_id=team_member_id,
            exclude_booking_id=exclude_booking_id
        )

    @staticmethod
    def assert_slot_available(
            db: Session,
            business_id,
            target_date: date,
            start_time: str,
            end_time: str,
            team_member_id=None,
            exclude_booking_id=None
    ):
        result = BookingService.check_slot(
            db, business_id, target_date, start_time, end_time,
            team_member_id=team_member_id, exclude_booking_id=exclude_booking_id
        )
        if not result.feasible:
            logger.info(
                f"Slot conflict for business {business_id} on {target_date} "
                f"{start_time}-{end_time}: {result.reason}"
            )
            if result.reason == "blocked":
                raise SlotConflictError(details=BLOCKED_DETAILS, reason=result.reason)
            raise SlotConflictError(reason=result.reason)

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    @staticmethod
    def create_booking(
            db: Session,
            business: Business,
            data: BookingCreate,
            source: str = SOURCE_PUBLIC,
            clock: Clock = system_clock,
            lock_manager: BookingLockManager = booking_lock_manager
    ) -> Booking:
        """
        Create a booking.

        Input is validated before any booking is read. The day's bookings are
        then re-read and checked inside the per-day lock, and the row is
        committed before the lock is released. Raises SlotConflictError when
        the interval is taken; nothing is written in that case.
        """
        customer_name = (data.customer_name or "").strip()
        if not customer_name:
            raise ValidationError("Customer name is required", field="customer_name")
        customer_email = (data.customer_email or "").strip()
        if "@" not in customer_email:
            raise ValidationError("A valid email address is required", field="customer_email")

        service = ServiceCatalogService.get_bookable_service(db, business.id, data.service_id)
        if data.team_member_id is not None:
            TeamService.get_bookable_member(db, business.id, data.team_member_id, service.id)

        start_time, end_time = BookingService.resolve_times(data.start_time, data.end_time, service.duration)

        if source == SOURCE_PUBLIC:
            BookingService.validate_customer_slot(
                db, business, data.booking_date, start_time, end_time,
                team_member_id=data.team_member_id, clock=clock
            )
            status = BookingStatus.PENDING if service.requires_confirmation else BookingStatus.CONFIRMED
        else:
            # Owner-entered bookings may sit outside working hours and need no approval
            status = BookingStatus.CONFIRMED

        with lock_manager.acquire(db, business.id, data.booking_date):
            try:
                BookingService.assert_slot_available(
                    db, business.id, data.booking_date, start_time, end_time,
                    team_member_id=data.team_member_id
                )

                booking = Booking(
                    business_id=business.id,
                    service_id=service.id,
                    team_member_id=data.team_member_id,
                    customer_name=customer_name,
                    customer_email=customer_email,
                    customer_phone=data.customer_phone,
                    customer_notes=data.customer_notes,
                    booking_date=data.booking_date,
                    start_time=start_time,
                    end_time=end_time,
                    status=status.value,
                    customer_action_token=Booking.generate_token(),
                )
                db.add(booking)
                db.commit()
            except Exception:
                db.rollback()
                raise

        db.refresh(booking)
        logger.info(
            f"Created {source} booking {booking.id} for business {business.id} "
            f"on {booking.booking_date} {start_time}-{end_time} ({booking.status})"
        )

        if booking.status == BookingStatus.CONFIRMED.value:
            BookingNotifier.booking_confirmed(booking, business)

        return booking

    @staticmethod
    def update_booking(
            db: Session,
            business: Business,
            booking_id,
            data: BookingUpdate
    ) -> Booking:
        """Owner PATCH: internal notes and status changes through the state machine"""
        from slotbook.services.booking.modification_service import assert_transition

        booking = BookingService.get_booking(db, business.id, booking_id)
        updates = data.model_dump(exclude_unset=True)

        previous_status = booking.status
        new_status = updates.get("status")
        if new_status is not None:
            new_status = BookingStatus(new_status).value

        if new_status and new_status != previous_status:
            assert_transition(previous_status, new_status)

            if new_status == BookingStatus.MODIFICATION_PENDING.value:
                raise ValidationError(
                    "Use the modification request to propose a new time", field="status"
                )

            if new_status == BookingStatus.CANCELLED.value:
                booking.cancellation_reason = updates.get("cancellation_reason")
            booking.clear_proposal()
            booking.status = new_status

        if "internal_notes" in updates:
            booking.internal_notes = updates["internal_notes"]

        db.commit()
        db.refresh(booking)

        if new_status and new_status != previous_status:
            logger.info(f"Booking {booking.id} status {previous_status} -> {new_status}")
            if previous_status == BookingStatus.PENDING.value and new_status == BookingStatus.CONFIRMED.value:
                BookingNotifier.booking_confirmed(booking, business)

        return booking

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @staticmethod
    def get_booking(db: Session, business_id, booking_id) -> Booking:
        booking = db.query(Booking).filter(
            Booking.id == booking_id,
            Booking.business_id == business_id
        ).first()
        if not booking:
            raise NotFoundError("Booking not found")
        return booking

    @staticmethod
    def list_bookings(
            db: Session,
            business_id,
            start_date: Optional[date] = None,
            end_date: Optional[date] = None,
            status: Optional[str] = None,
            team_member_id=None
    ) -> List[Booking]:
        query = db.query(Booking).filter(Booking.business_id == business_id)

        if start_date:
            query = query.filter(Booking.booking_date >= start_date)
        if end_date:
            query = query.filter(Booking.booking_date <= end_date)
        if status:
            query = query.filter(Booking.status == status)
        if team_member_id:
            query = query.filter(Booking.team_member_id == team_member_id)

        return query.order_by(Booking.booking_date, Booking.start_time).all()

    @staticmethod
    def list_public_day_bookings(db: Session, business_id, target_date: date) -> List[dict]:
        """Occupied intervals of a day without any customer data"""
        bookings = db.query(Booking).filter(
            Booking.business_id == business_id,
            Booking.booking_date == target_date,
            Booking.status != BookingStatus.CANCELLED.value
        ).order_by(Booking.start_time).all()
        return [b.to_public_dict() for b in bookings]
