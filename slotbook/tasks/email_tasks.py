# ===== slotbook/tasks/email_tasks.py =====
from typing import Optional
import logging

from slotbook.config.celery_config import celery_app
from slotbook.services.email.email_service import EmailService

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3)
def send_booking_confirmation_email(
        self,
        email: str,
        customer_name: str,
        business_name: str,
        service_name: str,
        booking_date: str,
        start_time: str,
        end_time: str,
        action_token: str,
        business_email: Optional[str] = None
):
    """
    Send booking confirmation to the customer, and a new-booking notice to
    the business when it has an email address

    Args:
        email: Customer's email address
        customer_name: Customer's name
        business_name: Name of the business
        service_name: Booked service
        booking_date: ISO date of the booking
        start_time: HH:MM start
        end_time: HH:MM end
        action_token: Permanent token for the customer's cancel/modify links
        business_email: Business contact address (optional)
    """
    try:
        logger.info(f"Sending booking confirmation email to {email}")

        EmailService.send_booking_confirmation(
            email=email,
            customer_name=customer_name,
            business_name=business_name,
            service_name=service_name,
            booking_date=booking_date,
            start_time=start_time,
            end_time=end_time,
            action_token=action_token
        )

        if business_email and self.request.retries == 0:
            EmailService.send_new_booking_notice(
                business_email=business_email,
                business_name=business_name,
                customer_name=customer_name,
                service_name=service_name,
                booking_date=booking_date,
                start_time=start_time
            )

        logger.info(f"Booking confirmation email sent successfully to {email}")
        return {"status": "success", "email": email}

    except Exception as exc:
        logger.error(f"Failed to send booking confirmation email to {email}: {exc}")

        # Retry with exponential backoff: 1min, 2min, 4min
        raise self.retry(
            exc=exc,
            countdown=60 * (2 ** self.request.retries)
        )


@celery_app.task(bind=True, max_retries=3)
def send_modification_request_email(
        self,
        email: str,
        customer_name: str,
        business_name: str,
        service_name: str,
        original_date: str,
        original_start_time: str,
        proposed_date: str,
        proposed_start_time: str,
        proposed_end_time: str,
        modification_token: str,
        reason: Optional[str] = None,
        ttl_hours: int = 48
):
    """Send the business's reschedule proposal with the confirmation link"""
    try:
        logger.info(f"Sending modification request email to {email}")

        EmailService.send_modification_request(
            email=email,
            customer_name=customer_name,
            business_name=business_name,
            service_name=service_name,
            original_date=original_date,
            original_start_time=original_start_time,
            proposed_date=proposed_date,
            proposed_start_time=proposed_start_time,
            proposed_end_time=proposed_end_time,
            modification_token=modification_token,
            reason=reason,
            ttl_hours=ttl_hours
        )

        logger.info(f"Modification request email sent successfully to {email}")
        return {"status": "success", "email": email}

    except Exception as exc:
        logger.error(f"Failed to send modification request email to {email}: {exc}")

        raise self.retry(
            exc=exc,
            countdown=60 * (2 ** self.request.retries)
        )


@celery_app.task(bind=True, max_retries=3)
def send_cancellation_notice_email(
        self,
        business_email: str,
        business_name: str,
        customer_name: str,
        service_name: str,
        booking_date: str,
        start_time: str,
        reason: Optional[str] = None
):
    """Notify the business that a customer cancelled a booking"""
    try:
        logger.info(f"Sending cancellation notice to {business_email}")

        EmailService.send_cancellation_notice(
            business_email=business_email,
            business_name=business_name,
            customer_name=customer_name,
            service_name=service_name,
            booking_date=booking_date,
            start_time=start_time,
            reason=reason
        )

        return {"status": "success", "email": business_email}

    except Exception as exc:
        logger.error(f"Failed to send cancellation notice to {business_email}: {exc}")

        raise self.retry(
            exc=exc,
            countdown=60 * (2 ** self.request.retries)
        )
