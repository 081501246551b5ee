"""
Pydantic schemas for availability, booking and cancellation requests/responses
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import date as Date
from uuid import UUID

from app.models.appointment import CancelledBy
from app.utils.slot_time import is_valid_slot


# ============================================================================
# Request Schemas
# ============================================================================

class BookingCreate(BaseModel):
    """Self-service booking request"""
    shop_id: UUID
    staff_id: UUID
    service_id: UUID
    date: Date
    time: str = Field(..., description="Catalog slot, HH:MM")
    customer_name: str = Field(..., min_length=1, max_length=200)
    customer_phone: Optional[str] = Field(None, max_length=30)
    customer_email: Optional[str] = Field(None, max_length=255)
    customer_id: Optional[UUID] = None

    @field_validator('time')
    @classmethod
    def validate_time(cls, v):
        if not is_valid_slot(v):
            raise ValueError('time must be in HH:MM format')
        return v

    @field_validator('customer_name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('customer_name must not be blank')
        return v.strip()


class ManualBookingCreate(BookingCreate):
    """Staff-entered booking"""
    notes: Optional[str] = None


class StaffCancelRequest(BaseModel):
    actor: CancelledBy = CancelledBy.STAFF
    reason: Optional[str] = None

    @field_validator('actor')
    @classmethod
    def validate_actor(cls, v):
        if v == CancelledBy.CUSTOMER:
            raise ValueError('actor must be staff or admin')
        return v


# ============================================================================
# Response Schemas
# ============================================================================

class AvailabilityResponse(BaseModel):
    date: Date
    shop_id: UUID
    staff_id: UUID
    slots: List[str] = Field(default_factory=list)
    reason: Optional[str] = None
    message: Optional[str] = None


class BookedAppointment(BaseModel):
    id: UUID
    date: Date
    date_display: str
    time: str
    service: Optional[str] = None
    staff: str
    price: Optional[int] = None
    price_display: Optional[str] = None
    duration_display: Optional[str] = None


class BookingResponse(BaseModel):
    success: bool = True
    appointment: BookedAppointment
    message: str


class CancellationPreview(BaseModel):
    id: UUID
    date: Date
    date_display: str
    time: str
    service: Optional[str] = None
    staff: str
    customer_name: str
    status: str
    can_cancel: bool
    hours_until_appointment: int
    cutoff_hours: int


class CancelResponse(BaseModel):
    success: bool = True
    message: str


class SeriesMaterializeRequest(BaseModel):
    """Book a series' occurrences ahead of time"""
    from_date: Optional[Date] = Field(None, description="Defaults to today in the shop's timezone")
    weeks_ahead: int = Field(52, ge=1, le=104)
