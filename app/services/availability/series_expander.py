# ===== app/services/availability/series_expander.py =====
"""
Recurring series expansion.

Series are stored as patterns; whether a series occupies a slot on a date
is computed on every availability query. Everything here is pure and
side-effect free.
"""
from datetime import date, timedelta
from typing import Iterable, List, Optional, Set

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.series import RecurringSeries, SeriesException, IntervalType
from app.utils.slot_time import monday_based_weekday

INTERVAL_TYPE_WEEKS = {
    IntervalType.WEEKLY.value: 1,
    IntervalType.BIWEEKLY.value: 2,
    IntervalType.MONTHLY.value: 4,
}


def interval_weeks(series: RecurringSeries) -> int:
    """Explicit interval_weeks wins; otherwise derived from interval_type"""
    if series.interval_weeks:
        return series.interval_weeks
    return INTERVAL_TYPE_WEEKS.get(series.interval_type, 1)


def is_occurrence(series: RecurringSeries, day: date) -> bool:
    """True if the series has an occurrence on the given date"""
    if series.start_date > day:
        return False
    if series.end_date is not None and series.end_date < day:
        return False
    if monday_based_weekday(day) != series.day_of_week:
        return False

    weeks = interval_weeks(series)
    if weeks > 1:
        weeks_elapsed = (day - series.start_date).days // 7
        if weeks_elapsed % weeks != 0:
            return False

    return True


def occupies_slot(series: RecurringSeries, day: date, time_slot: str) -> bool:
    """True if the series occupies time_slot on the given date"""
    return is_occurrence(series, day) and series.time_slot == time_slot


def occurrences_between(series: RecurringSeries, start: date, end: date) -> List[date]:
    """All occurrence dates of a series in [start, end]"""
    first = max(start, series.start_date)
    # jump to the series weekday
    first += timedelta(days=(series.day_of_week - monday_based_weekday(first)) % 7)

    dates = []
    current = first
    while current <= end:
        if is_occurrence(series, current):
            dates.append(current)
        current += timedelta(days=7)
    return dates


class SeriesExpander:
    """Loads a staff member's series and resolves the slots they occupy"""

    @staticmethod
    def get_candidate_series(db: Session, staff_id, day: date) -> List[RecurringSeries]:
        """Series of a staff member whose date range covers the day"""
        return db.query(RecurringSeries).filter(
            RecurringSeries.staff_id == staff_id,
            RecurringSeries.start_date <= day,
            or_(RecurringSeries.end_date.is_(None), RecurringSeries.end_date >= day)
        ).all()

    @staticmethod
    def get_suppressed_series_ids(db: Session, series_ids: Iterable, day: date) -> Set:
        """Series with an exception (deleted/skipped/moved) on the day"""
        series_ids = list(series_ids)
        if not series_ids:
            return set()
        rows = db.query(SeriesException.series_id).filter(
            SeriesException.series_id.in_(series_ids),
            SeriesException.exception_date == day
        ).all()
        return {row[0] for row in rows}

    @staticmethod
    def occupied_slots(
            db: Session,
            staff_id,
            day: date,
            catalog: Iterable[str],
            series: Optional[List[RecurringSeries]] = None,
            ignore_series_id=None
    ) -> Set[str]:
        """
        Catalog slots occupied on the day by any of the staff member's series.
        ignore_series_id leaves one series out, so its own occurrence can be booked.
        """
        if series is None:
            series = SeriesExpander.get_candidate_series(db, staff_id, day)
        if ignore_series_id is not None:
            series = [s for s in series if s.id != ignore_series_id]
        suppressed = SeriesExpander.get_suppressed_series_ids(db, (s.id for s in series), day)
        active = [s for s in series if s.id not in suppressed]

        return {
            slot
            for slot in catalog
            if any(occupies_slot(s, day, slot) for s in active)
        }
