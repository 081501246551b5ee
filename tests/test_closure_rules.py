from datetime import date, time
from types import SimpleNamespace

from app.models import ClosedDate, OpenSunday
from app.services.availability.closure_rules import ClosureRules

from conftest import SUNDAY, TUESDAY


def _hours(is_closed=False, open_time=time(10, 0), close_time=time(19, 0)):
    return SimpleNamespace(is_closed=is_closed, open_time=open_time, close_time=close_time)


def test_open_weekday_uses_weekday_hours() -> None:
    verdict = ClosureRules.evaluate(TUESDAY, _hours())

    assert verdict.is_open
    assert verdict.open_time == time(10, 0)
    assert verdict.close_time == time(19, 0)


def test_closed_date_wins_over_open_weekday() -> None:
    closed = SimpleNamespace(reason="Renovation")
    verdict = ClosureRules.evaluate(TUESDAY, _hours(), closed_date=closed)

    assert not verdict.is_open
    assert verdict.reason == "Renovation"


def test_missing_opening_hours_row_means_closed() -> None:
    verdict = ClosureRules.evaluate(TUESDAY, None)

    assert not verdict.is_open
    assert verdict.reason == "no_opening_hours"


def test_closed_sunday_opened_by_open_sunday() -> None:
    open_sunday = SimpleNamespace(open_time=time(12, 0), close_time=time(16, 0))
    verdict = ClosureRules.evaluate(SUNDAY, _hours(is_closed=True), open_sunday=open_sunday)

    assert verdict.is_open
    assert verdict.open_time == time(12, 0)


def test_open_sunday_only_applies_to_sundays() -> None:
    open_sunday = SimpleNamespace(open_time=time(12, 0), close_time=time(16, 0))
    verdict = ClosureRules.evaluate(TUESDAY, _hours(is_closed=True), open_sunday=open_sunday)

    assert not verdict.is_open
    assert verdict.reason == "weekday_closed"


def test_closed_date_wins_over_open_sunday() -> None:
    open_sunday = SimpleNamespace(open_time=time(12, 0), close_time=time(16, 0))
    verdict = ClosureRules.evaluate(
        SUNDAY,
        _hours(is_closed=True),
        closed_date=SimpleNamespace(reason=None),
        open_sunday=open_sunday,
    )

    assert not verdict.is_open
    assert verdict.reason == "closed_date"


def test_shop_open_from_stored_rules(db, shop) -> None:
    shop_id = shop.shop.id

    assert ClosureRules.is_shop_open(db, shop_id, TUESDAY)
    assert not ClosureRules.is_shop_open(db, shop_id, SUNDAY)

    db.add(ClosedDate(shop_id=shop_id, date=TUESDAY, reason="Inventory"))
    db.add(OpenSunday(shop_id=shop_id, date=SUNDAY, open_time=time(11, 0), close_time=time(15, 0)))
    db.commit()

    assert not ClosureRules.is_shop_open(db, shop_id, TUESDAY)
    assert ClosureRules.get_day_verdict(db, shop_id, SUNDAY).open_time == time(11, 0)
    # other Sundays stay closed
    assert not ClosureRules.is_shop_open(db, shop_id, date(2025, 1, 26))


def test_holidays_do_not_close_the_shop(db, shop) -> None:
    # Jan 6 is a holiday in some states, never a closure by itself
    assert ClosureRules.is_shop_open(db, shop.shop.id, date(2025, 1, 6))
