import logging
from datetime import datetime, time, timedelta
from uuid import uuid4

import pytest

from app.core.clock import FixedClock
from app.core.errors import NotFoundError
from app.models import (
    AppointmentStatus,
    ClosedDate,
    IntervalType,
    OpenSunday,
    RecurringSeries,
    SeriesException,
    StaffTimeOff,
    TimeSlot,
)
from app.services.availability.availability_service import AvailabilityService, UnavailableReason
from app.services.availability.staff_leave import StaffLeave
from app.services.directory.directory_service import DirectoryService

from conftest import BERLIN, CATALOG, MONDAY, SUNDAY, THURSDAY, TUESDAY, WEDNESDAY


def _slots(db, shop, day, clock, staff=None):
    return AvailabilityService.get_available_slots(db, shop.shop.id, (staff or shop.anna).id, day, clock)


def test_open_day_offers_full_catalog(db, shop, clock) -> None:
    result = _slots(db, shop, TUESDAY, clock)

    assert result.slots == CATALOG
    assert result.reason is None
    assert result.message is None


def test_catalog_follows_sort_order_and_skips_inactive(db, shop, clock) -> None:
    db.add(TimeSlot(shop_id=shop.shop.id, time="09:30", sort_order=-1))
    db.add(TimeSlot(shop_id=shop.shop.id, time="12:00", sort_order=5, is_active=False))
    db.commit()

    assert _slots(db, shop, TUESDAY, clock).slots == ["09:30"] + CATALOG


def test_free_day_yields_no_slots(db, shop, clock) -> None:
    result = _slots(db, shop, WEDNESDAY, clock)

    assert result.slots == []
    assert result.reason == UnavailableReason.STAFF_DAY_OFF
    # other staff work that day
    assert _slots(db, shop, WEDNESDAY, clock, staff=shop.ben).slots == CATALOG


def test_closed_shop_yields_no_slots(db, shop, clock) -> None:
    db.add(ClosedDate(shop_id=shop.shop.id, date=TUESDAY, reason="Betriebsausflug"))
    db.commit()

    result = _slots(db, shop, TUESDAY, clock)
    assert result.slots == []
    assert result.reason == UnavailableReason.SHOP_CLOSED
    assert _slots(db, shop, SUNDAY, clock).reason == UnavailableReason.SHOP_CLOSED


def test_open_sunday_offers_slots(db, shop, clock) -> None:
    db.add(OpenSunday(shop_id=shop.shop.id, date=SUNDAY, open_time=time(12, 0), close_time=time(16, 0)))
    db.commit()

    assert _slots(db, shop, SUNDAY, clock).slots == CATALOG


def test_free_day_checked_before_closure(db, shop, clock) -> None:
    db.add(ClosedDate(shop_id=shop.shop.id, date=WEDNESDAY))
    db.commit()

    assert _slots(db, shop, WEDNESDAY, clock).reason == UnavailableReason.STAFF_DAY_OFF


def test_leave_covers_inclusive_range(db, shop, clock) -> None:
    db.add(StaffTimeOff(staff_id=shop.anna.id, start_date=TUESDAY, end_date=THURSDAY, reason="Urlaub"))
    db.commit()

    assert _slots(db, shop, TUESDAY, clock).reason == UnavailableReason.STAFF_ON_LEAVE
    assert _slots(db, shop, THURSDAY, clock).reason == UnavailableReason.STAFF_ON_LEAVE
    assert _slots(db, shop, THURSDAY + timedelta(days=1), clock).slots == CATALOG
    assert _slots(db, shop, TUESDAY, clock, staff=shop.ben).slots == CATALOG


def test_booked_slots_are_excluded(db, shop, clock, make_appointment) -> None:
    make_appointment(day=TUESDAY, time_slot="10:30")
    make_appointment(day=TUESDAY, time_slot="11:00", status=AppointmentStatus.CANCELLED.value)

    result = _slots(db, shop, TUESDAY, clock)
    assert result.slots == ["10:00", "11:00"]
    # the booking belongs to Anna only
    assert _slots(db, shop, TUESDAY, clock, staff=shop.ben).slots == CATALOG


def test_fully_booked_day_has_message(db, shop, clock, make_appointment) -> None:
    for slot in CATALOG:
        make_appointment(day=TUESDAY, time_slot=slot)

    result = _slots(db, shop, TUESDAY, clock)
    assert result.slots == []
    assert result.reason is None
    assert result.message == "No free time slots on this date"


def test_repeated_queries_return_same_slots(db, shop, clock, make_appointment) -> None:
    make_appointment(day=TUESDAY, time_slot="10:00")

    first = _slots(db, shop, TUESDAY, clock)
    second = _slots(db, shop, TUESDAY, clock)
    assert first.slots == second.slots == ["10:30", "11:00"]


@pytest.mark.parametrize(
    "now, expected",
    [
        (datetime(2025, 1, 13, 9, 59, tzinfo=BERLIN), CATALOG),
        (datetime(2025, 1, 13, 10, 0, tzinfo=BERLIN), ["10:30", "11:00"]),
        (datetime(2025, 1, 13, 10, 15, tzinfo=BERLIN), ["10:30", "11:00"]),
        (datetime(2025, 1, 13, 11, 0, tzinfo=BERLIN), []),
    ],
)
def test_same_day_cutoff(db, shop, now, expected) -> None:
    assert _slots(db, shop, MONDAY, FixedClock(now)).slots == expected


def test_same_day_cutoff_uses_shop_timezone(db, shop) -> None:
    # 09:30 UTC is 10:30 in Berlin (winter time)
    clock = FixedClock(datetime(2025, 1, 13, 9, 30))

    assert _slots(db, shop, MONDAY, clock).slots == ["11:00"]


def test_cutoff_does_not_touch_future_days(db, shop) -> None:
    clock = FixedClock(datetime(2025, 1, 13, 18, 0, tzinfo=BERLIN))

    assert _slots(db, shop, TUESDAY, clock).slots == CATALOG


def test_series_occupies_slot_until_exception(db, shop, clock) -> None:
    series = RecurringSeries(
        shop_id=shop.shop.id,
        staff_id=shop.anna.id,
        day_of_week=2,
        time_slot="10:00",
        interval_type=IntervalType.WEEKLY.value,
        start_date=TUESDAY,
        customer_name="Stammkunde",
    )
    db.add(series)
    db.commit()

    next_week = TUESDAY + timedelta(days=7)
    assert _slots(db, shop, TUESDAY, clock).slots == ["10:30", "11:00"]
    assert _slots(db, shop, next_week, clock).slots == ["10:30", "11:00"]
    assert _slots(db, shop, THURSDAY, clock).slots == CATALOG

    db.add(SeriesException(series_id=series.id, exception_date=next_week))
    db.commit()

    assert _slots(db, shop, next_week, clock).slots == CATALOG


def test_unknown_staff_or_shop(db, shop, clock) -> None:
    with pytest.raises(NotFoundError) as exc_info:
        AvailabilityService.get_available_slots(db, shop.shop.id, uuid4(), TUESDAY, clock)
    assert exc_info.value.code == "STAFF_NOT_FOUND"

    with pytest.raises(NotFoundError) as exc_info:
        AvailabilityService.get_available_slots(db, uuid4(), shop.anna.id, TUESDAY, clock)
    assert exc_info.value.code == "SHOP_NOT_FOUND"


def test_inactive_staff_is_not_found(db, shop, clock) -> None:
    shop.ben.is_active = False
    db.commit()

    with pytest.raises(NotFoundError):
        _slots(db, shop, TUESDAY, clock, staff=shop.ben)


def test_time_off_in_range_lists_overlapping_entries(db, shop) -> None:
    db.add(StaffTimeOff(staff_id=shop.anna.id, start_date=MONDAY, end_date=TUESDAY, reason="Krank"))
    db.add(StaffTimeOff(staff_id=shop.anna.id, start_date=SUNDAY, end_date=SUNDAY + timedelta(days=3)))
    db.commit()

    entries = StaffLeave.get_time_off_in_range(db, shop.anna.id, TUESDAY, THURSDAY)
    assert [entry.reason for entry in entries] == ["Krank"]
    assert len(StaffLeave.get_time_off_in_range(db, shop.anna.id, MONDAY, SUNDAY)) == 2


def test_unknown_shop_timezone_falls_back_to_default(db, shop, caplog) -> None:
    shop.shop.timezone = "Mars/Olympus_Mons"
    db.commit()

    with caplog.at_level(logging.WARNING):
        assert DirectoryService.shop_timezone(shop.shop) == BERLIN
    assert "unknown timezone" in caplog.text

    # 09:30 UTC is 10:30 in Berlin
    clock = FixedClock(datetime(2025, 1, 13, 9, 30))
    assert _slots(db, shop, MONDAY, clock).slots == ["11:00"]
