"""
Pydantic schemas for bookings and the customer self-service flows
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime
from uuid import UUID

from slotbook.models.booking import BookingStatus


# ============================================================================
# Request Schemas
# ============================================================================

class BookingCreate(BaseModel):
    """New booking, submitted from the public page or the owner dashboard"""
    service_id: UUID
    team_member_id: Optional[UUID] = None
    booking_date: date
    start_time: str = Field(..., description="HH:MM")
    end_time: Optional[str] = Field(None, description="HH:MM; computed from the service duration when omitted")
    customer_name: str = Field(..., max_length=255)
    customer_email: str = Field(..., max_length=255)
    customer_phone: Optional[str] = Field(None, max_length=50)
    customer_notes: Optional[str] = None


class BookingUpdate(BaseModel):
    """Owner-side status / notes change"""
    status: Optional[BookingStatus] = None
    internal_notes: Optional[str] = None
    cancellation_reason: Optional[str] = None


class ModificationRequest(BaseModel):
    """Owner proposes a new date/time; the customer must confirm it"""
    proposed_booking_date: date
    proposed_start_time: str
    proposed_end_time: Optional[str] = None
    modification_reason: Optional[str] = None


class TokenRequest(BaseModel):
    token: str = Field(..., min_length=1)


class CustomerCancelRequest(TokenRequest):
    reason: Optional[str] = None


class CustomerModifyRequest(TokenRequest):
    new_date: date
    new_start_time: str
    new_end_time: Optional[str] = None


# ============================================================================
# Response Schemas
# ============================================================================

class BookingResponse(BaseModel):
    id: UUID
    business_id: UUID
    service_id: UUID
    team_member_id: Optional[UUID] = None
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    customer_notes: Optional[str] = None
    booking_date: date
    start_time: str
    end_time: str
    status: BookingStatus
    internal_notes: Optional[str] = None
    cancellation_reason: Optional[str] = None
    proposed_booking_date: Optional[date] = None
    proposed_start_time: Optional[str] = None
    proposed_end_time: Optional[str] = None
    modification_reason: Optional[str] = None
    modification_token_expires_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PublicBookingResponse(BookingResponse):
    """Returned to the customer right after booking"""
    customer_action_token: str
    requires_confirmation: bool


class BusinessCancelRequest(BaseModel):
    reason: Optional[str] = None
