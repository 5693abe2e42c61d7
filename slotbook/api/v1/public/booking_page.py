"""
Public Booking Page Routes
Everything a customer needs to pick a slot and book it; no authentication
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
from uuid import UUID
import logging

from slotbook.config.database import get_db
from slotbook.models.booking import BookingStatus
from slotbook.api.dependencies import get_clock
from slotbook.schemas.availability import AvailabilityRuleResponse, DaySlotsResponse
from slotbook.schemas.booking import BookingCreate, BookingResponse, PublicBookingResponse
from slotbook.schemas.catalog import ServiceResponse
from slotbook.services.availability.availability_service import AvailabilityService
from slotbook.services.availability.slot_service import SlotService
from slotbook.services.booking.booking_service import BookingService, SOURCE_PUBLIC
from slotbook.services.booking.exceptions import BookingError
from slotbook.services.business.business_service import BusinessService
from slotbook.services.catalog.service_catalog_service import ServiceCatalogService
from slotbook.services.catalog.team_service import TeamService
from slotbook.utils.clock import Clock

logger = logging.getLogger(__name__)
router = APIRouter(tags=["public-booking"])


@router.get("/{slug}")
def get_business(slug: str, db: Session = Depends(get_db)):
    business = BusinessService.get_business_by_slug(db, slug)
    data = business.to_dict()
    data.pop("subscription_tier", None)
    return data


@router.get("/{slug}/services", response_model=List[ServiceResponse])
def list_services(slug: str, db: Session = Depends(get_db)):
    business = BusinessService.get_business_by_slug(db, slug)
    return ServiceCatalogService.list_services(db, business.id, active_only=True)


@router.get("/{slug}/availability", response_model=List[AvailabilityRuleResponse])
def get_business_hours(slug: str, db: Session = Depends(get_db)):
    business = BusinessService.get_business_by_slug(db, slug)
    return AvailabilityService.get_business_rules(db, business.id)


@router.get("/{slug}/team-members")
def list_team_members(
        slug: str,
        service_id: UUID = Query(...),
        db: Session = Depends(get_db)
):
    """Members who perform the service, with their weekly schedules"""
    business = BusinessService.get_business_by_slug(db, slug)
    members = TeamService.list_members_for_service(db, business.id, service_id)
    return [
        {
            "id": str(m.id),
            "name": m.name,
            "role": m.role,
            "availability": [rule.to_dict() for rule in m.availability],
        }
        for m in members
    ]


@router.get("/{slug}/slots", response_model=DaySlotsResponse)
def get_day_slots(
        slug: str,
        service_id: UUID = Query(...),
        booking_date: date = Query(..., alias="date"),
        team_member_id: Optional[UUID] = Query(None),
        db: Session = Depends(get_db),
        clock: Clock = Depends(get_clock)
):
    business = BusinessService.get_business_by_slug(db, slug)
    slots = SlotService.get_day_slots(
        db, business, service_id, booking_date,
        team_member_id=team_member_id, clock=clock
    )
    return DaySlotsResponse(
        date=booking_date,
        service_id=service_id,
        team_member_id=team_member_id,
        is_open=bool(slots),
        slots=slots
    )


@router.get("/{slug}/available-dates")
def get_available_dates(
        slug: str,
        service_id: UUID = Query(...),
        start_date: date = Query(...),
        days: int = Query(30),
        team_member_id: Optional[UUID] = Query(None),
        db: Session = Depends(get_db),
        clock: Clock = Depends(get_clock)
):
    business = BusinessService.get_business_by_slug(db, slug)
    dates = SlotService.get_available_dates(
        db, business, service_id, start_date, days,
        team_member_id=team_member_id, clock=clock
    )
    return {"dates": [d.isoformat() for d in dates]}


@router.get("/{slug}/bookings")
def list_day_bookings(
        slug: str,
        booking_date: date = Query(..., alias="date"),
        db: Session = Depends(get_db)
):
    """Occupied intervals of a day, without customer details"""
    business = BusinessService.get_business_by_slug(db, slug)
    return BookingService.list_public_day_bookings(db, business.id, booking_date)


@router.post("/{slug}/bookings", response_model=PublicBookingResponse, status_code=201)
def create_booking(
        slug: str,
        data: BookingCreate,
        db: Session = Depends(get_db),
        clock: Clock = Depends(get_clock)
):
    """
    Book a slot. A 409 with error "slot_conflict" means someone else got
    the interval first; fetch the slots again and pick another one.
    """
    business = BusinessService.get_business_by_slug(db, slug)
    try:
        booking = BookingService.create_booking(db, business, data, source=SOURCE_PUBLIC, clock=clock)
    except (HTTPException, BookingError):
        raise
    except Exception as e:
        logger.error(f"Error creating booking for {slug}: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to create booking")

    return PublicBookingResponse(
        **BookingResponse.model_validate(booking).model_dump(),
        customer_action_token=booking.customer_action_token,
        requires_confirmation=booking.status == BookingStatus.PENDING.value
    )
