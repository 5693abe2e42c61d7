"""
Customer Self-Service Routes
Authorised only by the tokens sent in booking emails
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
import logging

from slotbook.config.database import get_db
from slotbook.models.booking import Booking
from slotbook.api.dependencies import get_clock
from slotbook.schemas.booking import TokenRequest, CustomerCancelRequest, CustomerModifyRequest
from slotbook.services.booking.exceptions import BookingError
from slotbook.services.booking.modification_service import ModificationService
from slotbook.services.business.business_service import BusinessService
from slotbook.utils.clock import Clock

logger = logging.getLogger(__name__)
router = APIRouter(tags=["public-customer-actions"])


def _customer_view(db: Session, booking: Booking) -> dict:
    business = BusinessService.get_business(db, booking.business_id)
    return {
        "id": str(booking.id),
        "status": booking.status,
        "customer_name": booking.customer_name,
        "booking_date": booking.booking_date.isoformat(),
        "start_time": booking.start_time,
        "end_time": booking.end_time,
        "service": {
            "id": str(booking.service_id),
            "name": booking.service.name if booking.service else None,
            "duration": booking.service.duration if booking.service else None,
        },
        "team_member": (
            {"id": str(booking.team_member_id), "name": booking.team_member.name}
            if booking.team_member else None
        ),
        "business": {
            "name": business.name if business else None,
            "slug": business.slug if business else None,
        },
    }


def _modification_view(db: Session, booking: Booking) -> dict:
    data = _customer_view(db, booking)
    data["proposed"] = {
        "booking_date": booking.proposed_booking_date.isoformat() if booking.proposed_booking_date else None,
        "start_time": booking.proposed_start_time,
        "end_time": booking.proposed_end_time,
        "reason": booking.modification_reason,
    }
    data["expires_at"] = (
        booking.modification_token_expires_at.isoformat()
        if booking.modification_token_expires_at else None
    )
    return data


def _run(db: Session, action: str, fn):
    """Service call with the standard rollback/500 handling"""
    try:
        return fn()
    except (HTTPException, BookingError):
        raise
    except Exception as e:
        logger.error(f"Error during {action}: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to {action}")


# ============================================================================
# Business-proposed reschedule (modification token, 48h)
# ============================================================================

@router.get("/modification")
def get_modification(
        token: str = Query(...),
        db: Session = Depends(get_db),
        clock: Clock = Depends(get_clock)
):
    booking = ModificationService.get_modification(db, token, clock=clock)
    return _modification_view(db, booking)


@router.post("/confirm-modification")
def confirm_modification(
        data: TokenRequest,
        db: Session = Depends(get_db),
        clock: Clock = Depends(get_clock)
):
    booking = _run(db, "confirm modification",
                   lambda: ModificationService.confirm_modification(db, data.token, clock=clock))
    return {"message": "Booking updated", "booking": _customer_view(db, booking)}


@router.post("/decline-modification")
def decline_modification(
        data: TokenRequest,
        db: Session = Depends(get_db),
        clock: Clock = Depends(get_clock)
):
    booking = _run(db, "decline modification",
                   lambda: ModificationService.decline_modification(db, data.token, clock=clock))
    return {"message": "Original booking kept", "booking": _customer_view(db, booking)}


# ============================================================================
# Customer-initiated changes (permanent action token)
# ============================================================================

@router.get("/customer-action")
def get_customer_booking(token: str = Query(...), db: Session = Depends(get_db)):
    booking = ModificationService.get_customer_booking(db, token)
    return _customer_view(db, booking)


@router.post("/customer-cancel")
def customer_cancel(
        data: CustomerCancelRequest,
        db: Session = Depends(get_db),
        clock: Clock = Depends(get_clock)
):
    booking = _run(db, "cancel booking",
                   lambda: ModificationService.customer_cancel(db, data.token, data.reason, clock=clock))
    return {"message": "Booking cancelled", "booking": _customer_view(db, booking)}


@router.post("/customer-modify")
def customer_modify(
        data: CustomerModifyRequest,
        db: Session = Depends(get_db),
        clock: Clock = Depends(get_clock)
):
    booking = _run(db, "modify booking", lambda: ModificationService.customer_modify(
        db, data.token, data.new_date, data.new_start_time, data.new_end_time, clock=clock
    ))
    return {"message": "Booking updated", "booking": _customer_view(db, booking)}
