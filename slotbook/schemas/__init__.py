# slotbook/schemas/__init__.py
from .availability import (
    AvailabilityRuleUpsert,
    TeamMemberAvailabilityUpsert,
    BlockedTimeCreate,
    AvailabilityRuleResponse,
    TeamMemberAvailabilityResponse,
    BlockedTimeResponse,
    SlotResponse,
    DaySlotsResponse
)

from .booking import (
    BookingCreate,
    BookingUpdate,
    ModificationRequest,
    TokenRequest,
    CustomerCancelRequest,
    CustomerModifyRequest,
    BusinessCancelRequest,
    BookingResponse,
    PublicBookingResponse
)

from .catalog import (
    ServiceCreate,
    ServiceUpdate,
    ServiceResponse,
    TeamMemberCreate,
    TeamMemberUpdate,
    TeamMemberServicesUpdate,
    TeamMemberResponse
)
