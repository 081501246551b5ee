# ============================================================================
# app/api/v1/dashboard/appointments.py
# Staff endpoints (dashboard key) - thin HTTP layer
# ============================================================================
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.orm import Session

from app.api.dependencies import require_dashboard_key
from app.config.database import get_db
from app.core.clock import Clock, get_clock
from app.core.errors import ValidationError
from app.models.appointment import BookingSource
from app.schemas.booking import (
    BookingResponse,
    CancelResponse,
    ManualBookingCreate,
    SeriesMaterializeRequest,
    StaffCancelRequest,
)
from app.services.appointment.appointment_query_service import AppointmentQueryService
from app.services.appointment.booking_service import BookingService
from app.services.appointment.cancellation_service import CancellationService
from app.services.appointment.series_booking_service import SeriesBookingService
from app.services.availability.staff_leave import StaffLeave
from app.services.directory.directory_service import DirectoryService

router = APIRouter(
    tags=["dashboard-appointments"],
    dependencies=[Depends(require_dashboard_key)]
)


@router.get("/shops/{shop_id}/appointments")
async def list_appointments(
        shop_id: UUID = Path(..., description="The shop ID"),
        day: date = Query(..., alias="date", description="Day to list"),
        staff_id: Optional[UUID] = Query(None, description="Only this staff member"),
        include_cancelled: bool = Query(False),
        db: Session = Depends(get_db)
):
    """A shop's appointments for one day, ordered by staff then slot"""
    DirectoryService.get_active_shop(db, shop_id)
    return AppointmentQueryService.list_day_appointments(
        db=db,
        shop_id=shop_id,
        day=day,
        staff_id=staff_id,
        include_cancelled=include_cancelled
    )


@router.get("/shops/{shop_id}/appointments/{appointment_id}")
async def get_appointment(
        shop_id: UUID = Path(..., description="The shop ID"),
        appointment_id: UUID = Path(..., description="The appointment ID"),
        db: Session = Depends(get_db)
):
    result = AppointmentQueryService.get_appointment_by_id(db, shop_id, appointment_id)
    if not result:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Appointment not found"
        )
    return result


@router.post("/bookings", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_manual_booking(
        payload: ManualBookingCreate,
        db: Session = Depends(get_db),
        clock: Clock = Depends(get_clock)
):
    """Staff-entered booking; same rules as self-service"""
    appointment = BookingService.book(
        db=db,
        clock=clock,
        shop_id=payload.shop_id,
        staff_id=payload.staff_id,
        service_id=payload.service_id,
        day=payload.date,
        time_slot=payload.time,
        customer_name=payload.customer_name,
        customer_phone=payload.customer_phone,
        customer_email=payload.customer_email,
        customer_id=payload.customer_id,
        source=BookingSource.MANUAL,
        notes=payload.notes,
    )

    return {
        "success": True,
        "appointment": AppointmentQueryService.booking_summary(appointment),
        "message": "Appointment booked",
    }


@router.post("/appointments/{appointment_id}/cancel", response_model=CancelResponse)
async def cancel_appointment(
        payload: StaffCancelRequest,
        appointment_id: UUID = Path(..., description="The appointment ID"),
        db: Session = Depends(get_db),
        clock: Clock = Depends(get_clock)
):
    """Staff/admin cancellation, not subject to the customer window"""
    CancellationService.cancel(db, appointment_id, clock, actor=payload.actor, reason=payload.reason)
    return {"success": True, "message": "Appointment cancelled"}


@router.post("/series/{series_id}/appointments", status_code=status.HTTP_201_CREATED)
async def materialize_series(
        payload: SeriesMaterializeRequest,
        series_id: UUID = Path(..., description="The recurring series ID"),
        db: Session = Depends(get_db),
        clock: Clock = Depends(get_clock)
):
    """Book the series' upcoming occurrences; taken or removed dates are reported as skipped"""
    return SeriesBookingService.materialize(
        db=db,
        clock=clock,
        series_id=series_id,
        from_date=payload.from_date,
        weeks_ahead=payload.weeks_ahead,
    )


@router.get("/shops/{shop_id}/staff/{staff_id}/time-off")
async def list_time_off(
        shop_id: UUID = Path(..., description="The shop ID"),
        staff_id: UUID = Path(..., description="The staff member ID"),
        start: date = Query(..., description="First day (inclusive)"),
        end: date = Query(..., description="Last day (inclusive)"),
        db: Session = Depends(get_db)
):
    """Leave entries overlapping [start, end], for planning around absences"""
    if end < start:
        raise ValidationError("end must not be before start", code="INVALID_RANGE")

    staff = DirectoryService.get_active_staff(db, shop_id, staff_id)
    entries = StaffLeave.get_time_off_in_range(db, staff.id, start, end)

    return {
        "staff_id": str(staff.id),
        "time_off": [
            {
                "start_date": entry.start_date.isoformat(),
                "end_date": entry.end_date.isoformat(),
                "reason": entry.reason,
            }
            for entry in entries
        ],
    }
