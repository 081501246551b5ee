# ===== app/services/availability/closure_rules.py =====
"""
Per-date open/closed verdict for a shop.

Precedence, first match wins:
  1. a ClosedDate row for the date            -> closed
  2. the weekday is closed (or has no row):
       Sunday with an OpenSunday for the date -> open with its hours
       otherwise                              -> closed
  3. otherwise                                -> open with the weekday hours

Statutory holidays do not take part; a shop may open on a holiday.
"""
from dataclasses import dataclass
from datetime import date, time
from typing import Optional
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from app.models.schedule import OpeningHours, ClosedDate, OpenSunday
from app.utils.slot_time import sunday_based_weekday

logger = logging.getLogger(__name__)

SUNDAY = 0


@dataclass(frozen=True)
class DayVerdict:
    is_open: bool
    open_time: Optional[time] = None
    close_time: Optional[time] = None
    reason: Optional[str] = None  # why the shop is closed


class ClosureRules:
    """Evaluates whether a shop takes bookings on a date"""

    @staticmethod
    def evaluate(
            day: date,
            opening_hours: Optional[OpeningHours],
            closed_date: Optional[ClosedDate] = None,
            open_sunday: Optional[OpenSunday] = None
    ) -> DayVerdict:
        """Apply the precedence rules to already loaded rows"""
        if closed_date is not None:
            return DayVerdict(is_open=False, reason=closed_date.reason or "closed_date")

        if opening_hours is None or opening_hours.is_closed:
            if sunday_based_weekday(day) == SUNDAY and open_sunday is not None:
                return DayVerdict(
                    is_open=True,
                    open_time=open_sunday.open_time,
                    close_time=open_sunday.close_time,
                )
            return DayVerdict(
                is_open=False,
                reason="no_opening_hours" if opening_hours is None else "weekday_closed",
            )

        return DayVerdict(
            is_open=True,
            open_time=opening_hours.open_time,
            close_time=opening_hours.close_time,
        )

    @staticmethod
    def get_day_verdict(db: Session, shop_id: UUID, day: date) -> DayVerdict:
        """Load the shop's rules for one date and evaluate them"""
        closed_date = db.query(ClosedDate).filter(
            ClosedDate.shop_id == shop_id,
            ClosedDate.date == day
        ).first()

        opening_hours = db.query(OpeningHours).filter(
            OpeningHours.shop_id == shop_id,
            OpeningHours.day_of_week == sunday_based_weekday(day)
        ).first()

        open_sunday = None
        if sunday_based_weekday(day) == SUNDAY:
            open_sunday = db.query(OpenSunday).filter(
                OpenSunday.shop_id == shop_id,
                OpenSunday.date == day
            ).first()

        if opening_hours is None:
            logger.debug(f"No opening hours row for shop {shop_id} on weekday {sunday_based_weekday(day)}")

        return ClosureRules.evaluate(day, opening_hours, closed_date, open_sunday)

    @staticmethod
    def is_shop_open(db: Session, shop_id: UUID, day: date) -> bool:
        return ClosureRules.get_day_verdict(db, shop_id, day).is_open
