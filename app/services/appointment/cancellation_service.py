# ============================================================================
# app/services/appointment/cancellation_service.py
# Cancellation window and the cancel write path
# ============================================================================
"""
Customers may cancel online only while the appointment start is at least
CANCELLATION_WINDOW_HOURS away. Staff and admins cancel without a window.
"""
from datetime import datetime, timedelta, tzinfo
from typing import Any, Dict, Optional
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from app.config.settings import settings
from app.core.clock import Clock
from app.core.errors import AlreadyCancelledError, NotFoundError, PolicyDeniedError
from app.models.appointment import Appointment, AppointmentStatus, CancelledBy
from app.models.series import SeriesException, SeriesExceptionType
from app.services.directory.directory_service import DirectoryService
from app.services.notification.notification_service import NotificationService
from app.utils.formatting import format_date_display
from app.utils.slot_time import slot_start

logger = logging.getLogger(__name__)


class CancellationPolicy:
    """Pure time-window rule"""

    @staticmethod
    def appointment_start(appointment: Appointment, tz: tzinfo) -> datetime:
        return slot_start(appointment.date, appointment.time_slot, tz)

    @staticmethod
    def can_cancel(
            appointment: Appointment,
            now: datetime,
            tz: tzinfo,
            window_hours: Optional[int] = None
    ) -> bool:
        """True iff the start is at least window_hours after now (boundary inclusive)"""
        if window_hours is None:
            window_hours = settings.CANCELLATION_WINDOW_HOURS
        start = CancellationPolicy.appointment_start(appointment, tz)
        return start - now >= timedelta(hours=window_hours)

    @staticmethod
    def hours_until(appointment: Appointment, now: datetime, tz: tzinfo) -> int:
        """Whole hours until the start, negative once it has passed"""
        delta = CancellationPolicy.appointment_start(appointment, tz) - now
        return int(delta.total_seconds() // 3600)


class CancellationService:

    @staticmethod
    def get_appointment(db: Session, appointment_id: UUID) -> Appointment:
        appointment = db.get(Appointment, appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment not found", code="APPOINTMENT_NOT_FOUND")
        return appointment

    @staticmethod
    def get_cancellation_preview(db: Session, appointment_id: UUID, clock: Clock) -> Dict[str, Any]:
        """Appointment details plus whether the customer may still cancel online"""
        appointment = CancellationService.get_appointment(db, appointment_id)
        tz = DirectoryService.shop_timezone(appointment.shop)
        now = clock.now(tz)

        can_cancel = (
            not appointment.is_cancelled
            and CancellationPolicy.can_cancel(appointment, now, tz)
        )

        return {
            "id": str(appointment.id),
            "date": appointment.date.isoformat(),
            "date_display": format_date_display(appointment.date),
            "time": appointment.time_slot,
            "service": appointment.service.name if appointment.service else None,
            "staff": appointment.staff.name,
            "customer_name": appointment.customer_name,
            "status": appointment.status,
            "can_cancel": can_cancel,
            "hours_until_appointment": CancellationPolicy.hours_until(appointment, now, tz),
            "cutoff_hours": settings.CANCELLATION_WINDOW_HOURS,
        }

    @staticmethod
    def cancel(
            db: Session,
            appointment_id: UUID,
            clock: Clock,
            actor: CancelledBy = CancelledBy.CUSTOMER,
            reason: Optional[str] = None
    ) -> Appointment:
        """
        Cancel an appointment.

        Raises:
            NotFoundError: unknown appointment
            AlreadyCancelledError: already cancelled (including by a concurrent request)
            PolicyDeniedError: customer inside the cancellation window
        """
        actor = CancelledBy(actor)
        appointment = CancellationService.get_appointment(db, appointment_id)

        if appointment.is_cancelled:
            raise AlreadyCancelledError()

        tz = DirectoryService.shop_timezone(appointment.shop)
        now = clock.now(tz)

        if actor == CancelledBy.CUSTOMER and not CancellationPolicy.can_cancel(appointment, now, tz):
            window = settings.CANCELLATION_WINDOW_HOURS
            phone = appointment.shop.phone or settings.SUPPORT_PHONE or None
            logger.info(f"Late cancellation refused for {appointment.id} ({window}h window)")
            raise PolicyDeniedError(
                f"Online cancellation is only possible up to {window} hours before the appointment. "
                f"Please call the shop.",
                code="TOO_LATE",
                cutoff_hours=window,
                phone=phone,
            )

        # Conditional update: a concurrent cancel leaves zero rows for the loser
        updated = db.query(Appointment).filter(
            Appointment.id == appointment.id,
            Appointment.status != AppointmentStatus.CANCELLED.value
        ).update(
            {
                Appointment.status: AppointmentStatus.CANCELLED.value,
                Appointment.cancelled_by: actor.value,
                Appointment.cancelled_at: clock.now(),
            },
            synchronize_session=False
        )
        if updated == 0:
            db.rollback()
            raise AlreadyCancelledError()

        if appointment.series_id is not None:
            CancellationService._record_series_exception(db, appointment, reason)

        db.commit()
        db.refresh(appointment)

        logger.info(f"Cancelled appointment {appointment.id} by {actor.value}")

        NotificationService.appointment_cancelled(appointment)
        return appointment

    @staticmethod
    def _record_series_exception(db: Session, appointment: Appointment, reason: Optional[str]) -> None:
        """Stop the series occurrence on this date from re-blocking the slot"""
        exists = db.query(SeriesException.id).filter(
            SeriesException.series_id == appointment.series_id,
            SeriesException.exception_date == appointment.date
        ).first()
        if exists:
            return

        db.add(SeriesException(
            series_id=appointment.series_id,
            exception_date=appointment.date,
            exception_type=SeriesExceptionType.DELETED.value,
            reason=reason or "Appointment cancelled",
        ))
