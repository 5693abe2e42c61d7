"""
API v1 router setup
Organized into: public (no auth / capability tokens) and dashboard (JWT) routes
"""
from fastapi import APIRouter

from slotbook.api.v1.dashboard import availability, blocked_times, bookings, services, team
from slotbook.api.v1.public import booking_page, customer_actions

api_v1_router = APIRouter()

# ============================================================================
# PUBLIC ROUTES (No authentication required)
# ============================================================================
api_v1_router.include_router(
    customer_actions.router,
    prefix="/public/bookings",
    tags=["Public"]
)

api_v1_router.include_router(
    booking_page.router,
    prefix="/public/businesses",
    tags=["Public"]
)

# ============================================================================
# DASHBOARD ROUTES (JWT authentication required)
# ============================================================================
api_v1_router.include_router(
    availability.router,
    prefix="/dashboard/availability",
    tags=["Dashboard"]
)

api_v1_router.include_router(
    blocked_times.router,
    prefix="/dashboard/blocked-times",
    tags=["Dashboard"]
)

api_v1_router.include_router(
    bookings.router,
    prefix="/dashboard/bookings",
    tags=["Dashboard"]
)

api_v1_router.include_router(
    services.router,
    prefix="/dashboard/services",
    tags=["Dashboard"]
)

api_v1_router.include_router(
    team.router,
    prefix="/dashboard/team-members",
    tags=["Dashboard"]
)


# ============================================================================
# ROOT ENDPOINT - API Info
# ============================================================================
@api_v1_router.get("/", tags=["Info"])
async def api_info():
    """Structure of the API by authentication type"""
    return {
        "version": "1.0",
        "authentication": {
            "public": "No authentication; customer actions use the tokens from booking emails",
            "dashboard": "JWT Bearer token with sub (owner) and business_id claims",
        }
    }
