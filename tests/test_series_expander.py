from datetime import date, timedelta

import pytest

from app.models import IntervalType, RecurringSeries, SeriesException
from app.services.availability import series_expander
from app.services.availability.series_expander import SeriesExpander

from conftest import CATALOG, TUESDAY

D = TUESDAY  # day_of_week 2


def _series(interval_type=IntervalType.WEEKLY, **fields):
    defaults = dict(
        day_of_week=2,
        time_slot="10:00",
        interval_type=interval_type.value,
        interval_weeks=None,
        start_date=D,
        end_date=None,
        customer_name="Stammkunde",
    )
    defaults.update(fields)
    return RecurringSeries(**defaults)


@pytest.mark.parametrize("offset_days, expected", [(0, True), (7, True), (14, True), (3, False)])
def test_weekly_series(offset_days, expected) -> None:
    assert series_expander.occupies_slot(_series(), D + timedelta(days=offset_days), "10:00") is expected


@pytest.mark.parametrize("offset_days, expected", [(0, True), (7, False), (14, True), (21, False), (28, True)])
def test_biweekly_series(offset_days, expected) -> None:
    series = _series(IntervalType.BIWEEKLY)
    assert series_expander.occupies_slot(series, D + timedelta(days=offset_days), "10:00") is expected


def test_monthly_series_is_every_four_weeks() -> None:
    series = _series(IntervalType.MONTHLY)

    assert series_expander.is_occurrence(series, D + timedelta(weeks=4))
    assert not series_expander.is_occurrence(series, D + timedelta(weeks=2))


def test_explicit_interval_weeks_wins() -> None:
    series = _series(IntervalType.WEEKLY, interval_weeks=3)

    assert series_expander.interval_weeks(series) == 3
    assert series_expander.is_occurrence(series, D + timedelta(weeks=3))
    assert not series_expander.is_occurrence(series, D + timedelta(weeks=1))


def test_other_time_slot_is_not_occupied() -> None:
    assert not series_expander.occupies_slot(_series(), D, "10:30")


def test_outside_date_range() -> None:
    series = _series(end_date=D + timedelta(days=7))

    assert not series_expander.is_occurrence(series, D - timedelta(days=7))
    assert series_expander.is_occurrence(series, D + timedelta(days=7))
    assert not series_expander.is_occurrence(series, D + timedelta(days=14))


def test_occurrences_between() -> None:
    series = _series(IntervalType.BIWEEKLY)

    assert series_expander.occurrences_between(series, date(2025, 1, 1), date(2025, 2, 28)) == [
        date(2025, 1, 14),
        date(2025, 1, 28),
        date(2025, 2, 11),
        date(2025, 2, 25),
    ]


def test_occupied_slots_respects_exceptions(db, shop) -> None:
    series = _series(shop_id=shop.shop.id, staff_id=shop.anna.id)
    db.add(series)
    db.commit()

    next_week = D + timedelta(days=7)
    assert SeriesExpander.occupied_slots(db, shop.anna.id, D, CATALOG) == {"10:00"}
    assert SeriesExpander.occupied_slots(db, shop.ben.id, D, CATALOG) == set()

    db.add(SeriesException(series_id=series.id, exception_date=next_week, reason="Urlaub"))
    db.commit()

    assert SeriesExpander.occupied_slots(db, shop.anna.id, next_week, CATALOG) == set()
    assert SeriesExpander.occupied_slots(db, shop.anna.id, D, CATALOG) == {"10:00"}
