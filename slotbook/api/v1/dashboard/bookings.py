"""
Booking Dashboard Routes
Owner view of bookings: manual entry, status changes, reschedule proposals
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
from uuid import UUID
import logging

from slotbook.config.database import get_db
from slotbook.models.booking import BookingStatus
from slotbook.models.business import Business
from slotbook.api.dependencies import get_current_business, get_clock
from slotbook.schemas.booking import (
    BookingCreate,
    BookingUpdate,
    BookingResponse,
    ModificationRequest,
    BusinessCancelRequest
)
from slotbook.services.booking.booking_service import BookingService, SOURCE_DASHBOARD
from slotbook.services.booking.exceptions import BookingError
from slotbook.services.booking.modification_service import ModificationService
from slotbook.utils.clock import Clock

logger = logging.getLogger(__name__)
router = APIRouter(tags=["dashboard-bookings"])


@router.get("", response_model=List[BookingResponse])
def list_bookings(
        start_date: Optional[date] = Query(None),
        end_date: Optional[date] = Query(None),
        status: Optional[BookingStatus] = Query(None),
        team_member_id: Optional[UUID] = Query(None),
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    return BookingService.list_bookings(
        db, business.id,
        start_date=start_date,
        end_date=end_date,
        status=status.value if status else None,
        team_member_id=team_member_id
    )


@router.post("", response_model=BookingResponse, status_code=201)
def create_manual_booking(
        data: BookingCreate,
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db),
        clock: Clock = Depends(get_clock)
):
    """Owner-entered booking; always confirmed, still conflict checked"""
    try:
        return BookingService.create_booking(db, business, data, source=SOURCE_DASHBOARD, clock=clock)
    except (HTTPException, BookingError):
        raise
    except Exception as e:
        logger.error(f"Error creating manual booking for {business.id}: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to create booking")


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(
        booking_id: UUID,
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    return BookingService.get_booking(db, business.id, booking_id)


@router.patch("/{booking_id}", response_model=BookingResponse)
def update_booking(
        booking_id: UUID,
        data: BookingUpdate,
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    try:
        return BookingService.update_booking(db, business, booking_id, data)
    except (HTTPException, BookingError):
        raise
    except Exception as e:
        logger.error(f"Error updating booking {booking_id}: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to update booking")


@router.post("/{booking_id}/request-modification", response_model=BookingResponse)
def request_modification(
        booking_id: UUID,
        data: ModificationRequest,
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db),
        clock: Clock = Depends(get_clock)
):
    """Propose a new time; the customer gets a link to accept it"""
    try:
        return ModificationService.request_modification(db, business, booking_id, data, clock=clock)
    except (HTTPException, BookingError):
        raise
    except Exception as e:
        logger.error(f"Error requesting modification for {booking_id}: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to request modification")


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
def cancel_booking(
        booking_id: UUID,
        data: Optional[BusinessCancelRequest] = None,
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    reason = data.reason if data else None
    try:
        return ModificationService.business_cancel(db, business, booking_id, reason)
    except (HTTPException, BookingError):
        raise
    except Exception as e:
        logger.error(f"Error cancelling booking {booking_id}: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to cancel booking")
