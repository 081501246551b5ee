# app/models/__init__.py
from .base import Base
from .shop import Shop, StaffMember
from .service import Service
from .time_slot import TimeSlot
from .schedule import OpeningHours, ClosedDate, OpenSunday, StaffTimeOff
from .series import RecurringSeries, SeriesException, IntervalType, SeriesExceptionType
from .customer import Customer
from .appointment import Appointment, AppointmentStatus, BookingSource, CancelledBy

__all__ = [
    "Base",
    "Shop",
    "StaffMember",
    "Service",
    "TimeSlot",
    "OpeningHours",
    "ClosedDate",
    "OpenSunday",
    "StaffTimeOff",
    "RecurringSeries",
    "SeriesException",
    "IntervalType",
    "SeriesExceptionType",
    "Customer",
    "Appointment",
    "AppointmentStatus",
    "BookingSource",
    "CancelledBy",
]
