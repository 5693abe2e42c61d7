"""
Pydantic schemas for working hours, team schedules and blocked time
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import date, datetime
from uuid import UUID


# ============================================================================
# Request Schemas
# ============================================================================

class AvailabilityRuleUpsert(BaseModel):
    """Working hours for one weekday of the business (0=Sunday .. 6=Saturday)"""
    day_of_week: int = Field(..., ge=0, le=6)
    start_time: str = Field(..., description="HH:MM")
    end_time: str = Field(..., description="HH:MM")
    is_open: bool = True
    slot_duration: int = Field(default=30, ge=5, le=480, description="Minutes between slot starts")
    max_bookings_per_slot: int = Field(default=1, ge=1, le=100)


class TeamMemberAvailabilityUpsert(BaseModel):
    """Working hours for one weekday of a team member"""
    day_of_week: int = Field(..., ge=0, le=6)
    start_time: str = Field(..., description="HH:MM")
    end_time: str = Field(..., description="HH:MM")
    is_available: bool = True


class BlockedTimeCreate(BaseModel):
    """Absolute local time range during which nothing can be booked"""
    start_datetime: datetime
    end_datetime: datetime
    reason: Optional[str] = Field(None, max_length=255)

    @field_validator('start_datetime', 'end_datetime')
    @classmethod
    def strip_timezone(cls, v: datetime):
        """Blocked ranges are wall-clock times; drop any offset the client sent"""
        return v.replace(tzinfo=None) if v.tzinfo else v


# ============================================================================
# Response Schemas
# ============================================================================

class AvailabilityRuleResponse(BaseModel):
    id: UUID
    day_of_week: int
    start_time: str
    end_time: str
    is_open: bool
    slot_duration: int
    max_bookings_per_slot: int

    class Config:
        from_attributes = True


class TeamMemberAvailabilityResponse(BaseModel):
    id: UUID
    team_member_id: UUID
    day_of_week: int
    start_time: str
    end_time: str
    is_available: bool

    class Config:
        from_attributes = True


class BlockedTimeResponse(BaseModel):
    id: UUID
    business_id: UUID
    start_datetime: datetime
    end_datetime: datetime
    reason: Optional[str] = None

    class Config:
        from_attributes = True


class SlotResponse(BaseModel):
    """A candidate start time for a service on a given day"""
    time: str
    end_time: str
    available: bool
    capacity_remaining: int


class DaySlotsResponse(BaseModel):
    date: date
    service_id: UUID
    team_member_id: Optional[UUID] = None
    is_open: bool
    slots: List[SlotResponse]
