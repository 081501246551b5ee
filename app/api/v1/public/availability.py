# ============================================================================
# app/api/v1/public/availability.py
# Public slot lookup - thin HTTP layer
# ============================================================================
from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.clock import Clock, get_clock
from app.schemas.booking import AvailabilityResponse
from app.services.availability.availability_service import AvailabilityService

router = APIRouter(tags=["public-availability"])


@router.get(
    "/shops/{shop_id}/staff/{staff_id}/availability",
    response_model=AvailabilityResponse
)
async def get_availability(
        shop_id: UUID = Path(..., description="The shop ID"),
        staff_id: UUID = Path(..., description="The staff member ID"),
        day: date = Query(..., alias="date", description="Date to check (YYYY-MM-DD)"),
        db: Session = Depends(get_db),
        clock: Clock = Depends(get_clock)
):
    """
    Bookable slots of one staff member on one date.
    An empty list comes with a reason when the whole day is unavailable.
    """
    result = AvailabilityService.get_available_slots(db, shop_id, staff_id, day, clock)

    return AvailabilityResponse(
        date=result.day,
        shop_id=shop_id,
        staff_id=staff_id,
        slots=result.slots,
        reason=result.reason.value if result.reason else None,
        message=result.message,
    )
