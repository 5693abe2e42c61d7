"""
Blocked Time Dashboard Routes
Holidays and time off; multi-day blocks are a Pro feature
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
from uuid import UUID
import logging

from slotbook.config.database import get_db
from slotbook.models.business import Business, SubscriptionTier
from slotbook.api.dependencies import get_current_business
from slotbook.schemas.availability import BlockedTimeCreate, BlockedTimeResponse
from slotbook.services.blocked_time.blocked_time_service import BlockedTimeService, spans_multiple_days
from slotbook.services.booking.exceptions import BookingError
from slotbook.services.business.business_service import TierService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["dashboard-blocked-times"])


@router.get("", response_model=List[BlockedTimeResponse])
def list_blocked_times(
        start_date: Optional[date] = Query(None),
        end_date: Optional[date] = Query(None),
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    return BlockedTimeService.list_blocked_times(db, business.id, start_date, end_date)


@router.post("", response_model=BlockedTimeResponse, status_code=201)
def create_blocked_time(
        data: BlockedTimeCreate,
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    if spans_multiple_days(data.start_datetime, data.end_datetime):
        TierService.require(business, SubscriptionTier.PRO.value, "Multi-day time off")

    try:
        return BlockedTimeService.create(db, business.id, data)
    except (HTTPException, BookingError):
        raise
    except Exception as e:
        logger.error(f"Error creating blocked time for {business.id}: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to create blocked time")


@router.delete("/{blocked_time_id}", status_code=204)
def delete_blocked_time(
        blocked_time_id: UUID,
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    BlockedTimeService.delete(db, business.id, blocked_time_id)
