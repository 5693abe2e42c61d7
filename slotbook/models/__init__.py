# slotbook/models/__init__.py
from .base import Base
from .business import Business, SubscriptionTier
from .service import Service
from .availability import AvailabilityRule, BlockedTime
from .team_member import TeamMember, TeamMemberService, TeamMemberAvailability
from .booking import Booking, BookingStatus

__all__ = [
    "Base",
    "Business",
    "SubscriptionTier",
    "Service",
    "AvailabilityRule",
    "BlockedTime",
    "TeamMember",
    "TeamMemberService",
    "TeamMemberAvailability",
    "Booking",
    "BookingStatus",
]
