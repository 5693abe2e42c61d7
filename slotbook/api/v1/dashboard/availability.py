"""
Business Hours Dashboard Routes
Weekly working hours of the authenticated owner's business
"""
from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.orm import Session
from typing import List
import logging

from slotbook.config.database import get_db
from slotbook.models.business import Business
from slotbook.api.dependencies import get_current_business
from slotbook.schemas.availability import AvailabilityRuleUpsert, AvailabilityRuleResponse
from slotbook.services.availability.availability_service import AvailabilityService
from slotbook.services.booking.exceptions import BookingError, ValidationError

logger = logging.getLogger(__name__)
router = APIRouter(tags=["dashboard-availability"])


@router.get("", response_model=List[AvailabilityRuleResponse])
def get_business_hours(
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    """Weekly hours; an unconfigured week comes back as seven closed days"""
    try:
        return AvailabilityService.list_business_rules(db, business.id)
    except Exception as e:
        logger.error(f"Error loading availability for {business.id}: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to load availability")


@router.put("", response_model=List[AvailabilityRuleResponse])
def replace_business_hours(
        rules: List[AvailabilityRuleUpsert],
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    """Save the whole week in one go"""
    try:
        return AvailabilityService.replace_business_rules(db, business.id, rules)
    except (HTTPException, BookingError):
        raise
    except Exception as e:
        logger.error(f"Error saving availability for {business.id}: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to save availability")


@router.put("/{day_of_week}", response_model=AvailabilityRuleResponse)
def update_business_day(
        data: AvailabilityRuleUpsert,
        day_of_week: int = Path(..., ge=0, le=6),
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    if data.day_of_week != day_of_week:
        raise ValidationError("day_of_week in body does not match the URL", field="day_of_week")
    try:
        return AvailabilityService.upsert_business_rule(db, business.id, data)
    except (HTTPException, BookingError):
        raise
    except Exception as e:
        logger.error(f"Error saving availability day {day_of_week} for {business.id}: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to save availability")
