# ===== slotbook/models/booking.py =====
from sqlalchemy import Column, String, Text, Date, DateTime, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from datetime import datetime, timedelta, timezone
import enum
import uuid
import secrets

from slotbook.models.base import Base


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    MODIFICATION_PENDING = "modification_pending"
    CANCELLED = "cancelled"


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        Index("idx_bookings_business_date", "business_id", "booking_date"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # References
    business_id = Column(UUID(as_uuid=True), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False)
    service_id = Column(UUID(as_uuid=True), ForeignKey("services.id", ondelete="CASCADE"), nullable=False)
    team_member_id = Column(UUID(as_uuid=True), ForeignKey("team_members.id", ondelete="SET NULL"), nullable=True)

    # Customer info
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(50), nullable=True)
    customer_notes = Column(Text, nullable=True)

    # Slot
    booking_date = Column(Date, nullable=False)
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)  # HH:MM

    # Status tracking
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value)
    internal_notes = Column(Text, nullable=True)
    cancellation_reason = Column(Text, nullable=True)

    # Permanent capability token for the customer's cancel/modify links
    customer_action_token = Column(String(64), unique=True, nullable=False, index=True)

    # Business-proposed reschedule awaiting customer confirmation
    proposed_booking_date = Column(Date, nullable=True)
    proposed_start_time = Column(String(5), nullable=True)
    proposed_end_time = Column(String(5), nullable=True)
    modification_reason = Column(Text, nullable=True)
    modification_token = Column(String(64), unique=True, nullable=True, index=True)
    modification_token_expires_at = Column(DateTime(timezone=True), nullable=True)
    # Status to return to if the proposal is declined or lapses
    status_before_modification = Column(String(20), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    service = relationship("Service", lazy="joined")
    team_member = relationship("TeamMember", lazy="joined")

    @staticmethod
    def generate_token() -> str:
        """Generate an unguessable 32-byte hex capability token."""
        return secrets.token_hex(32)

    @property
    def is_cancelled(self) -> bool:
        return self.status == BookingStatus.CANCELLED.value

    @property
    def has_proposal(self) -> bool:
        return bool(
            self.proposed_booking_date
            and self.proposed_start_time
            and self.proposed_end_time
        )

    def issue_modification_token(self, now: datetime, ttl_hours: int) -> str:
        """Set a fresh modification token that expires ttl_hours after now."""
        self.modification_token = Booking.generate_token()
        self.modification_token_expires_at = now + timedelta(hours=ttl_hours)
        return self.modification_token

    def is_modification_token_expired(self, now: datetime) -> bool:
        expires_at = self.modification_token_expires_at
        if expires_at is None:
            return False
        # SQLite hands back naive values; they are stored as UTC
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return now > expires_at

    def withdraw_proposal(self) -> str:
        """Drop the proposal and return to the status held before it was made."""
        previous = self.status_before_modification or BookingStatus.CONFIRMED.value
        self.clear_proposal()
        self.status = previous
        return previous

    def clear_proposal(self):
        self.status_before_modification = None
        self.proposed_booking_date = None
        self.proposed_start_time = None
        self.proposed_end_time = None
        self.modification_reason = None
        self.modification_token = None
        self.modification_token_expires_at = None

    def __repr__(self):
        return (
            f"<Booking(id={self.id}, date={self.booking_date}, "
            f"{self.start_time}-{self.end_time}, status={self.status})>"
        )

    def to_dict(self):
        return {
            "id": str(self.id),
            "business_id": str(self.business_id),
            "service_id": str(self.service_id),
            "team_member_id": str(self.team_member_id) if self.team_member_id else None,
            "customer_name": self.customer_name,
            "customer_email": self.customer_email,
            "customer_phone": self.customer_phone,
            "customer_notes": self.customer_notes,
            "booking_date": self.booking_date.isoformat(),
            "start_time": self.start_time,
            "end_time": self.end_time,
            "status": self.status,
            "internal_notes": self.internal_notes,
            "cancellation_reason": self.cancellation_reason,
            "proposed_booking_date": (
                self.proposed_booking_date.isoformat() if self.proposed_booking_date else None
            ),
            "proposed_start_time": self.proposed_start_time,
            "proposed_end_time": self.proposed_end_time,
            "modification_reason": self.modification_reason,
            "modification_token_expires_at": (
                self.modification_token_expires_at.isoformat()
                if self.modification_token_expires_at else None
            ),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def to_public_dict(self):
        """Anonymised view for the public booking page"""
        return {
            "id": str(self.id),
            "service_id": str(self.service_id),
            "team_member_id": str(self.team_member_id) if self.team_member_id else None,
            "booking_date": self.booking_date.isoformat(),
            "start_time": self.start_time,
            "end_time": self.end_time,
            "status": self.status,
        }
