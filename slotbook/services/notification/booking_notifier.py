# slotbook/services/notification/booking_notifier.py
"""
Enqueues booking emails after the write has committed.

A broker outage must never undo or fail a booking, so enqueue errors are
logged and dropped here.
"""
import logging

from slotbook.config.settings import settings
from slotbook.models.booking import Booking
from slotbook.models.business import Business
from slotbook.tasks.email_tasks import (
    send_booking_confirmation_email,
    send_modification_request_email,
    send_cancellation_notice_email
)

logger = logging.getLogger(__name__)


def _service_name(booking: Booking) -> str:
    return booking.service.name if booking.service else "Appointment"


class BookingNotifier:

    @staticmethod
    def booking_confirmed(booking: Booking, business: Business):
        try:
            send_booking_confirmation_email.delay(
                email=booking.customer_email,
                customer_name=booking.customer_name,
                business_name=business.name,
                service_name=_service_name(booking),
                booking_date=booking.booking_date.isoformat(),
                start_time=booking.start_time,
                end_time=booking.end_time,
                action_token=booking.customer_action_token,
                business_email=business.email
            )
            logger.info(f"Queued confirmation email for booking {booking.id}")
        except Exception as e:
            logger.error(f"Failed to queue confirmation email for booking {booking.id}: {e}", exc_info=True)

    @staticmethod
    def modification_requested(booking: Booking, business: Business):
        try:
            send_modification_request_email.delay(
                email=booking.customer_email,
                customer_name=booking.customer_name,
                business_name=business.name,
                service_name=_service_name(booking),
                original_date=booking.booking_date.isoformat(),
                original_start_time=booking.start_time,
                proposed_date=booking.proposed_booking_date.isoformat(),
                proposed_start_time=booking.proposed_start_time,
                proposed_end_time=booking.proposed_end_time,
                modification_token=booking.modification_token,
                reason=booking.modification_reason,
                ttl_hours=settings.MODIFICATION_TOKEN_TTL_HOURS
            )
            logger.info(f"Queued modification request email for booking {booking.id}")
        except Exception as e:
            logger.error(f"Failed to queue modification email for booking {booking.id}: {e}", exc_info=True)

    @staticmethod
    def cancelled_by_customer(booking: Booking, business: Business):
        if not business.email:
            logger.info(f"Business {business.id} has no email, skipping cancellation notice")
            return
        try:
            send_cancellation_notice_email.delay(
                business_email=business.email,
                business_name=business.name,
                customer_name=booking.customer_name,
                service_name=_service_name(booking),
                booking_date=booking.booking_date.isoformat(),
                start_time=booking.start_time,
                reason=booking.cancellation_reason
            )
        except Exception as e:
            logger.error(f"Failed to queue cancellation notice for booking {booking.id}: {e}", exc_info=True)
