# ===== slotbook/models/availability.py =====
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
import uuid

from slotbook.models.base import Base


class AvailabilityRule(Base):
    """Weekly working hours of a business, one row per weekday"""
    __tablename__ = "availability_rules"
    __table_args__ = (
        UniqueConstraint("business_id", "day_of_week", name="uq_availability_business_day"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(
        UUID(as_uuid=True),
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    day_of_week = Column(Integer, nullable=False)  # 0=Sunday, 6=Saturday
    start_time = Column(String(5), nullable=False)  # HH:MM format
    end_time = Column(String(5), nullable=False)  # HH:MM format
    is_open = Column(Boolean, default=True, nullable=False)
    slot_duration = Column(Integer, default=30, nullable=False)  # minutes between candidate starts
    max_bookings_per_slot = Column(Integer, default=1, nullable=False)

    @property
    def is_active_day(self) -> bool:
        return bool(self.is_open)

    def to_dict(self):
        return {
            "id": str(self.id),
            "business_id": str(self.business_id),
            "day_of_week": self.day_of_week,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "is_open": self.is_open,
            "slot_duration": self.slot_duration,
            "max_bookings_per_slot": self.max_bookings_per_slot,
        }


class BlockedTime(Base):
    """Absolute local time ranges (holidays, vacations) with zero capacity"""
    __tablename__ = "blocked_times"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(
        UUID(as_uuid=True),
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    start_datetime = Column(DateTime, nullable=False)  # naive local wall clock
    end_datetime = Column(DateTime, nullable=False)
    reason = Column(String(255), nullable=True)  # "Holiday", "Vacation", etc.

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def to_dict(self):
        return {
            "id": str(self.id),
            "business_id": str(self.business_id),
            "start_datetime": self.start_datetime.isoformat(),
            "end_datetime": self.end_datetime.isoformat(),
            "reason": self.reason,
        }
