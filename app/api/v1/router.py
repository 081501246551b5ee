"""
API v1 router setup
Organized into: public (no auth) and dashboard (dashboard key) routes
"""
from fastapi import APIRouter

from app.api.v1.public import availability, bookings, holidays
from app.api.v1.dashboard import appointments

api_v1_router = APIRouter()

# ============================================================================
# PUBLIC ROUTES (No authentication required)
# ============================================================================
api_v1_router.include_router(
    availability.router,
    prefix="/public",
    tags=["Public"]
)

api_v1_router.include_router(
    bookings.router,
    prefix="/public",
    tags=["Public"]
)

api_v1_router.include_router(
    holidays.router,
    prefix="/public",
    tags=["Public"]
)

# ============================================================================
# DASHBOARD ROUTES (Dashboard key required)
# ============================================================================
api_v1_router.include_router(
    appointments.router,
    prefix="/dashboard",
    tags=["Dashboard"]
)


# ============================================================================
# ROOT ENDPOINT - API Info
# ============================================================================
@api_v1_router.get("/", tags=["Info"])
async def api_info():
    """
    API information and available endpoints.
    Shows the structure of all API routes organized by authentication type.
    """
    return {
        "version": "1.0",
        "authentication": {
            "public": "No authentication required",
            "dashboard": "Bearer dashboard key required (staff tooling)"
        }
    }
