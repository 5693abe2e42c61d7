# ===== slotbook/services/email/email_service.py =====
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from html import escape
from typing import List, Optional
import logging

from slotbook.config.settings import settings

logger = logging.getLogger(__name__)


def customer_cancel_url(action_token: str) -> str:
    return f"{settings.FRONTEND_URL}/customer-cancel?token={action_token}"


def customer_modify_url(action_token: str) -> str:
    return f"{settings.FRONTEND_URL}/customer-modify?token={action_token}"


def confirm_modification_url(modification_token: str) -> str:
    return f"{settings.FRONTEND_URL}/confirm-modification?token={modification_token}"


def _wrap_html(title: str, body: str) -> str:
    return f"""
        <!DOCTYPE html>
        <html>
        <head><meta charset="UTF-8"></head>
        <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
            <h1 style="font-size: 24px;">{escape(title)}</h1>
            {body}
        </body>
        </html>
        """


class EmailService:
    """Service for sending emails via SMTP"""

    @staticmethod
    def _get_smtp_connection():
        """Create and return SMTP connection"""
        try:
            if settings.EMAIL_USE_TLS:
                server = smtplib.SMTP(settings.EMAIL_HOST, settings.EMAIL_PORT)
                server.starttls()
            else:
                server = smtplib.SMTP_SSL(settings.EMAIL_HOST, settings.EMAIL_PORT)

            if settings.EMAIL_USERNAME and settings.EMAIL_PASSWORD:
                server.login(settings.EMAIL_USERNAME, settings.EMAIL_PASSWORD)

            return server
        except Exception as e:
            logger.error(f"Failed to connect to SMTP server: {e}")
            raise

    @staticmethod
    def send_email(
            to_email: str,
            subject: str,
            html_content: str,
            plain_text: Optional[str] = None,
            bcc: Optional[List[str]] = None
    ) -> bool:
        """
        Send an email using SMTP

        Args:
            to_email: Recipient email address
            subject: Email subject
            html_content: HTML content of the email
            plain_text: Plain text version (fallback for non-HTML clients)
            bcc: List of BCC email addresses

        Returns:
            bool: True if the email was handed to the SMTP server; failures raise
        """
        try:
            msg = MIMEMultipart('alternative')
            msg['Subject'] = subject
            msg['From'] = f"{settings.EMAIL_FROM_NAME} <{settings.EMAIL_FROM_ADDRESS}>"
            msg['To'] = to_email

            if plain_text:
                msg.attach(MIMEText(plain_text, 'plain'))
            msg.attach(MIMEText(html_content, 'html'))

            recipients = [to_email] + (bcc or [])

            server = EmailService._get_smtp_connection()
            try:
                server.sendmail(settings.EMAIL_FROM_ADDRESS, recipients, msg.as_string())
            finally:
                server.quit()

            logger.info(f"Email sent successfully to {to_email}")
            return True

        except Exception as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            raise

    @staticmethod
    def send_booking_confirmation(
            email: str,
            customer_name: str,
            business_name: str,
            service_name: str,
            booking_date: str,
            start_time: str,
            end_time: str,
            action_token: str
    ) -> bool:
        """Confirmation to the customer with self-service cancel/modify links"""
        cancel_url = customer_cancel_url(action_token)
        modify_url = customer_modify_url(action_token)

        html_content = _wrap_html("Booking confirmed", f"""
            <p>Hi {escape(customer_name)},</p>
            <p>Your booking for <strong>{escape(service_name)}</strong> at {escape(business_name)}
               on <strong>{booking_date}</strong> from {start_time} to {end_time} is confirmed.</p>
            <p><a href="{modify_url}">Change booking</a> | <a href="{cancel_url}">Cancel booking</a></p>
        """)

        plain_text = (
            f"Hi {customer_name},\n\n"
            f"Your booking for {service_name} at {business_name} on {booking_date} "
            f"from {start_time} to {end_time} is confirmed.\n\n"
            f"Change booking: {modify_url}\n"
            f"Cancel booking: {cancel_url}\n"
        )

        return EmailService.send_email(
            to_email=email,
            subject=f"Booking confirmed: {service_name} - {business_name}",
            html_content=html_content,
            plain_text=plain_text
        )

    @staticmethod
    def send_new_booking_notice(
            business_email: str,
            business_name: str,
            customer_name: str,
            service_name: str,
            booking_date: str,
            start_time: str
    ) -> bool:
        """Heads-up to the business owner about a new confirmed booking"""
        html_content = _wrap_html("New booking", f"""
            <p>{escape(customer_name)} booked <strong>{escape(service_name)}</strong>
               on {booking_date} at {start_time}.</p>
        """)
        return EmailService.send_email(
            to_email=business_email,
            subject=f"New booking: {service_name} - {business_name}",
            html_content=html_content,
            plain_text=f"{customer_name} booked {service_name} on {booking_date} at {start_time}.\n"
        )

    @staticmethod
    def send_modification_request(
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
    ) -> bool:
        confirm_url = confirm_modification_url(modification_token)
        reason_html = f"<p>Reason: {escape(reason)}</p>" if reason else ""

        html_content = _wrap_html("Your booking needs to be rescheduled", f"""
            <p>Hi {escape(customer_name)},</p>
            <p>{escape(business_name)} proposes to move your <strong>{escape(service_name)}</strong>
               from {original_date} {original_start_time} to
               <strong>{proposed_date} {proposed_start_time}-{proposed_end_time}</strong>.</p>
            {reason_html}
            <p><a href="{confirm_url}">Review the new time</a></p>
            <p style="font-size: 12px; color: #999;">This link expires in {ttl_hours} hours.</p>
        """)

        plain_text = (
            f"Hi {customer_name},\n\n"
            f"{business_name} proposes to move your {service_name} from {original_date} "
            f"{original_start_time} to {proposed_date} {proposed_start_time}-{proposed_end_time}.\n"
            + (f"Reason: {reason}\n" if reason else "")
            + f"\nReview the new time: {confirm_url}\n"
            f"This link expires in {ttl_hours} hours.\n"
        )

        return EmailService.send_email(
            to_email=email,
            subject=f"Booking change requested: {service_name} - {business_name}",
            html_content=html_content,
            plain_text=plain_text
        )

    @staticmethod
    def send_cancellation_notice(
            business_email: str,
            business_name: str,
            customer_name: str,
            service_name: str,
            booking_date: str,
            start_time: str,
            reason: Optional[str] = None
    ) -> bool:
        """Tell the business that a customer cancelled"""
        reason_html = f"<p>Reason: {escape(reason)}</p>" if reason else ""
        html_content = _wrap_html("Booking cancelled", f"""
            <p>{escape(customer_name)} cancelled <strong>{escape(service_name)}</strong>
               on {booking_date} at {start_time}.</p>
            {reason_html}
        """)
        return EmailService.send_email(
            to_email=business_email,
            subject=f"Booking cancelled: {service_name} - {business_name}",
            html_content=html_content,
            plain_text=(
                f"{customer_name} cancelled {service_name} on {booking_date} at {start_time}.\n"
                + (f"Reason: {reason}\n" if reason else "")
            )
        )
