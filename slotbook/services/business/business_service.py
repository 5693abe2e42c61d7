# slotbook/services/business/business_service.py
"""Service for looking up businesses and gating tier features"""
from slotbook.models.business import Business, SubscriptionTier
from slotbook.services.booking.exceptions import NotFoundError, FeatureNotAvailableError
from typing import Optional
from sqlalchemy.orm import Session
import logging

logger = logging.getLogger(__name__)

TIER_ORDER = [SubscriptionTier.STARTER.value, SubscriptionTier.PRO.value, SubscriptionTier.TEAMS.value]


class BusinessService:
    """Handles business-related operations"""

    @staticmethod
    def get_business_by_slug(db: Session, slug: str) -> Business:
        """Active business behind a public booking URL"""
        business = db.query(Business).filter(
            Business.slug == slug,
            Business.is_active == True
        ).first()
        if not business:
            raise NotFoundError("Business not found")
        return business

    @staticmethod
    def get_business(db: Session, business_id) -> Optional[Business]:
        return db.query(Business).filter(Business.id == business_id).first()


class TierService:
    """Subscription tier checks; tiers are ordered starter < pro < teams"""

    @staticmethod
    def tier_rank(tier: Optional[str]) -> int:
        try:
            return TIER_ORDER.index(tier)
        except ValueError:
            logger.warning(f"Unknown subscription tier {tier!r}, treating as starter")
            return 0

    @staticmethod
    def can_access(business: Business, required_tier: str) -> bool:
        return TierService.tier_rank(business.subscription_tier) >= TierService.tier_rank(required_tier)

    @staticmethod
    def require(business: Business, required_tier: str, feature: str):
        if not TierService.can_access(business, required_tier):
            raise FeatureNotAvailableError(
                f"{feature} requires the {required_tier} plan or higher"
            )
