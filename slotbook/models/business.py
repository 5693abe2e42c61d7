# slotbook/models/business.py
"""
Business Model - the tenant every other row hangs off
"""
from sqlalchemy import Column, String, Boolean, DateTime, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
import uuid

from slotbook.models.base import Base


class SubscriptionTier(str, enum.Enum):
    """Subscription tiers, ordered from lowest to highest."""
    STARTER = "starter"
    PRO = "pro"
    TEAMS = "teams"


class Business(Base):
    __tablename__ = "businesses"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(String(255), nullable=False, index=True)  # external identity subject
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)

    # Contact information
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    address = Column(String(500), nullable=True)

    # System configuration
    timezone = Column(String(50), default="UTC")
    subscription_tier = Column(String(20), nullable=False, default=SubscriptionTier.STARTER.value)

    services = relationship("Service", back_populates="business")
    team_members = relationship("TeamMember", back_populates="business")

    # Technical fields
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
    is_active = Column(Boolean, default=True)

    def __repr__(self):
        return f"<Business(id={self.id}, slug={self.slug})>"

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "timezone": self.timezone,
            "subscription_tier": self.subscription_tier,
            "is_active": self.is_active,
        }
