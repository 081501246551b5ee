# ============================================================================
# app/api/v1/public/bookings.py
# Self-service booking and cancellation - thin HTTP layer
# ============================================================================
from uuid import UUID

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.clock import Clock, get_clock
from app.models.appointment import BookingSource, CancelledBy
from app.schemas.booking import BookingCreate, BookingResponse, CancellationPreview, CancelResponse
from app.services.appointment.appointment_query_service import AppointmentQueryService
from app.services.appointment.booking_service import BookingService
from app.services.appointment.cancellation_service import CancellationService

router = APIRouter(prefix="/bookings", tags=["public-bookings"])


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
        payload: BookingCreate,
        db: Session = Depends(get_db),
        clock: Clock = Depends(get_clock)
):
    """
    Book one slot.
    409 SLOT_TAKEN / SLOT_UNAVAILABLE when the slot cannot be had.
    """
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
        source=BookingSource.ONLINE,
    )

    return {
        "success": True,
        "appointment": AppointmentQueryService.booking_summary(appointment),
        "message": "Your appointment has been booked",
    }


@router.get("/{appointment_id}/cancellation", response_model=CancellationPreview)
async def get_cancellation_preview(
        appointment_id: UUID = Path(..., description="The appointment ID"),
        db: Session = Depends(get_db),
        clock: Clock = Depends(get_clock)
):
    """Appointment details and whether online cancellation is still possible"""
    return CancellationService.get_cancellation_preview(db, appointment_id, clock)


@router.post("/{appointment_id}/cancel", response_model=CancelResponse)
async def cancel_booking(
        appointment_id: UUID = Path(..., description="The appointment ID"),
        db: Session = Depends(get_db),
        clock: Clock = Depends(get_clock)
):
    """
    Customer cancellation.
    403 TOO_LATE inside the cancellation window, 409 ALREADY_CANCELLED on repeat.
    """
    CancellationService.cancel(db, appointment_id, clock, actor=CancelledBy.CUSTOMER)
    return {"success": True, "message": "Your appointment has been cancelled"}
