# ============================================================================
# app/services/appointment/booking_service.py
# Booking write path - the only code that creates confirmed appointments
# ============================================================================
"""
Booking committer.

The checks before the insert are cheap short-circuits. The partial unique
index on (shop_id, staff_id, date, time_slot) for non-cancelled rows is
what actually prevents double booking; a violation of it is translated
into the same SlotConflictError the pre-check raises.
"""
from datetime import date
from typing import Optional
from uuid import UUID
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.clock import Clock
from app.core.errors import NotFoundError, SlotConflictError, ValidationError
from app.models.appointment import (
    ACTIVE_SLOT_INDEX,
    Appointment,
    AppointmentStatus,
    BookingSource,
)
from app.models.customer import Customer
from app.models.series import RecurringSeries
from app.models.shop import Shop, StaffMember
from app.services.availability.availability_service import AvailabilityService
from app.services.availability.series_expander import SeriesExpander, occupies_slot
from app.services.directory.directory_service import DirectoryService
from app.services.notification.notification_service import NotificationService
from app.utils.slot_time import is_valid_slot

logger = logging.getLogger(__name__)

# SQLite reports the indexed columns instead of the index name
_SQLITE_ACTIVE_SLOT_MESSAGE = (
    "UNIQUE constraint failed: appointments.shop_id, appointments.staff_id, "
    "appointments.date, appointments.time_slot"
)


def is_active_slot_violation(exc: IntegrityError) -> bool:
    """True if the integrity error comes from the active-slot unique index"""
    message = str(exc.orig)
    return ACTIVE_SLOT_INDEX in message or _SQLITE_ACTIVE_SLOT_MESSAGE in message


class BookingService:
    """Creates appointments"""

    @staticmethod
    def book(
            db: Session,
            clock: Clock,
            shop_id: UUID,
            staff_id: UUID,
            service_id: UUID,
            day: date,
            time_slot: str,
            customer_name: str,
            customer_phone: Optional[str] = None,
            customer_email: Optional[str] = None,
            customer_id: Optional[UUID] = None,
            source: BookingSource = BookingSource.ONLINE,
            series_id: Optional[UUID] = None,
            notes: Optional[str] = None,
            notify: bool = True
    ) -> Appointment:
        """
        Reserve one slot.

        Raises:
            ValidationError: missing/invalid field, past date, slot not in the catalog
            NotFoundError: shop, staff, service, customer or series missing or inactive
            SlotConflictError: slot already booked or not offered on that date
        """
        customer_name = (customer_name or "").strip()
        if not customer_name:
            raise ValidationError("Customer name is required")
        if not is_valid_slot(time_slot):
            raise ValidationError(f"Invalid time slot '{time_slot}', expected HH:MM")

        tz = DirectoryService.shop_timezone(db.get(Shop, shop_id))
        if day < clock.today(tz):
            raise ValidationError("Cannot book appointments in the past", code="PAST_DATE")

        shop = DirectoryService.get_active_shop(db, shop_id)
        staff = DirectoryService.get_active_staff(db, shop.id, staff_id)
        service = DirectoryService.get_active_service(db, shop.id, service_id)

        if customer_id is not None and db.get(Customer, customer_id) is None:
            raise NotFoundError("Customer not found", code="CUSTOMER_NOT_FOUND")

        if time_slot not in AvailabilityService.get_catalog(db, shop.id):
            raise ValidationError(
                f"Time slot {time_slot} is not offered by this shop",
                code="UNKNOWN_TIME_SLOT"
            )

        if BookingService._find_active_appointment(db, shop.id, staff.id, day, time_slot):
            logger.info(f"Slot taken (pre-check): shop={shop.id} staff={staff.id} {day} {time_slot}")
            raise SlotConflictError()

        if series_id is not None:
            BookingService._ensure_series_occurrence(db, shop, staff, series_id, day, time_slot)

        BookingService._ensure_slot_offered(db, shop, staff, day, time_slot, clock, ignore_series_id=series_id)

        appointment = Appointment(
            shop_id=shop.id,
            staff_id=staff.id,
            service_id=service.id,
            customer_id=customer_id,
            series_id=series_id,
            date=day,
            time_slot=time_slot,
            customer_name=customer_name,
            customer_phone=customer_phone or None,
            customer_email=customer_email or None,
            notes=notes,
            status=AppointmentStatus.CONFIRMED.value,
            source=BookingSource(source).value,
        )

        db.add(appointment)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            if is_active_slot_violation(exc):
                logger.info(f"Slot taken (constraint): shop={shop.id} staff={staff.id} {day} {time_slot}")
                raise SlotConflictError() from exc
            raise
        db.refresh(appointment)

        logger.info(
            f"Booked appointment {appointment.id}: shop={shop.id} staff={staff.id} "
            f"{day} {time_slot} source={appointment.source}"
        )

        if notify:
            NotificationService.appointment_booked(appointment)
        return appointment

    @staticmethod
    def _find_active_appointment(
            db: Session,
            shop_id: UUID,
            staff_id: UUID,
            day: date,
            time_slot: str
    ) -> Optional[Appointment]:
        return db.query(Appointment).filter(
            Appointment.shop_id == shop_id,
            Appointment.staff_id == staff_id,
            Appointment.date == day,
            Appointment.time_slot == time_slot,
            Appointment.status != AppointmentStatus.CANCELLED.value
        ).first()

    @staticmethod
    def _ensure_slot_offered(
            db: Session,
            shop: Shop,
            staff: StaffMember,
            day: date,
            time_slot: str,
            clock: Clock,
            ignore_series_id: Optional[UUID] = None
    ) -> None:
        """Re-run the resolver; a catalog slot it does not offer is a conflict"""
        result = AvailabilityService.resolve(db, shop, staff, day, clock, ignore_series_id=ignore_series_id)
        if time_slot in result.slots:
            return

        reason = result.reason.value if result.reason else "slot_unavailable"
        logger.info(f"Slot not offered: shop={shop.id} staff={staff.id} {day} {time_slot} ({reason})")
        raise SlotConflictError(
            "This time slot is not available",
            code="SLOT_UNAVAILABLE",
            reason=reason,
        )

    @staticmethod
    def _ensure_series_occurrence(
            db: Session,
            shop: Shop,
            staff: StaffMember,
            series_id: UUID,
            day: date,
            time_slot: str
    ) -> RecurringSeries:
        """The booking must be exactly one live occurrence of the series"""
        series = db.get(RecurringSeries, series_id)
        if series is None or series.shop_id != shop.id or series.staff_id != staff.id:
            raise NotFoundError("Series not found", code="SERIES_NOT_FOUND")

        if not occupies_slot(series, day, time_slot):
            raise ValidationError(
                f"{day} {time_slot} is not an occurrence of this series",
                code="NOT_A_SERIES_OCCURRENCE"
            )
        if SeriesExpander.get_suppressed_series_ids(db, [series.id], day):
            raise ValidationError(
                f"The series occurrence on {day} was removed",
                code="SERIES_OCCURRENCE_REMOVED"
            )
        return series
