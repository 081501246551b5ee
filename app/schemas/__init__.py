# app/schemas/__init__.py
from .booking import (
    BookingCreate,
    ManualBookingCreate,
    StaffCancelRequest,
    AvailabilityResponse,
    BookedAppointment,
    BookingResponse,
    CancellationPreview,
    CancelResponse
)
