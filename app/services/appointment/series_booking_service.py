# ============================================================================
# app/services/appointment/series_booking_service.py
# Turns a recurring series into concrete appointments
# ============================================================================
from datetime import date, timedelta
from typing import Any, Dict, Optional
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from app.core.clock import Clock
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.models.appointment import BookingSource
from app.models.series import RecurringSeries, SeriesException
from app.services.appointment.booking_service import BookingService
from app.services.availability.series_expander import occurrences_between
from app.services.directory.directory_service import DirectoryService

logger = logging.getLogger(__name__)

MAX_WEEKS_AHEAD = 104


class SeriesBookingService:

    @staticmethod
    def materialize(
            db: Session,
            clock: Clock,
            series_id: UUID,
            from_date: Optional[date] = None,
            weeks_ahead: int = 52
    ) -> Dict[str, Any]:
        """
        Book every occurrence of a series in [from_date, from_date + weeks_ahead weeks].

        Each occurrence goes through BookingService.book with source=series,
        so it gets the same checks and the same unique-index guard as any
        other booking. Occurrences with a series exception, and occurrences
        whose slot is taken or not offered, are skipped and reported.
        Re-running is safe: already booked occurrences come back as slot_taken.
        """
        if not 1 <= weeks_ahead <= MAX_WEEKS_AHEAD:
            raise ValidationError(
                f"weeks_ahead must be between 1 and {MAX_WEEKS_AHEAD}",
                code="INVALID_RANGE"
            )

        series = db.get(RecurringSeries, series_id)
        if series is None:
            raise NotFoundError("Series not found", code="SERIES_NOT_FOUND")
        if series.service_id is None:
            raise ValidationError("Series has no service to book", code="SERIES_WITHOUT_SERVICE")

        shop = DirectoryService.get_active_shop(db, series.shop_id)
        today = clock.today(DirectoryService.shop_timezone(shop))
        start = max(from_date or today, today)
        end = start + timedelta(weeks=weeks_ahead)

        exception_dates = {
            row[0]
            for row in db.query(SeriesException.exception_date).filter(
                SeriesException.series_id == series.id,
                SeriesException.exception_date.between(start, end)
            ).all()
        }

        created, skipped = [], []
        for day in occurrences_between(series, start, end):
            if day in exception_dates:
                skipped.append({"date": day.isoformat(), "reason": "series_exception"})
                continue
            try:
                appointment = BookingService.book(
                    db=db,
                    clock=clock,
                    shop_id=series.shop_id,
                    staff_id=series.staff_id,
                    service_id=series.service_id,
                    day=day,
                    time_slot=series.time_slot,
                    customer_name=series.customer_name,
                    customer_phone=series.customer_phone,
                    customer_email=series.customer_email,
                    source=BookingSource.SERIES,
                    series_id=series.id,
                    notes=series.notes,
                    notify=False,
                )
            except ConflictError as exc:
                skipped.append({"date": day.isoformat(), "reason": exc.extra.get("reason", exc.code.lower())})
                continue
            created.append({"date": day.isoformat(), "appointment_id": str(appointment.id)})

        logger.info(
            f"Materialized series {series.id} {start}..{end}: "
            f"{len(created)} booked, {len(skipped)} skipped"
        )
        return {
            "series_id": str(series.id),
            "start": start.isoformat(),
            "end": end.isoformat(),
            "created": created,
            "skipped": skipped,
        }
