import threading
from datetime import date
from unittest.mock import patch
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from app.core.errors import NotFoundError, SlotConflictError, ValidationError
from app.models import Appointment, AppointmentStatus, BookingSource, Customer
from app.services.appointment.booking_service import BookingService, is_active_slot_violation

from conftest import MONDAY, TUESDAY, WEDNESDAY


def _book(db, shop, clock, **overrides):
    params = dict(
        shop_id=shop.shop.id,
        staff_id=shop.anna.id,
        service_id=shop.service.id,
        day=TUESDAY,
        time_slot="10:30",
        customer_name="Erika Muster",
        customer_email="erika@example.com",
    )
    params.update(overrides)
    return BookingService.book(db, clock, **params)


def test_book_creates_confirmed_appointment(db, shop, clock) -> None:
    appointment = _book(db, shop, clock)

    assert appointment.id is not None
    assert appointment.status == AppointmentStatus.CONFIRMED.value
    assert appointment.source == BookingSource.ONLINE.value
    assert appointment.date == TUESDAY
    assert appointment.time_slot == "10:30"
    assert appointment.customer_name == "Erika Muster"


def test_book_triggers_notification(db, shop, clock) -> None:
    with patch(
        "app.services.appointment.booking_service.NotificationService.appointment_booked"
    ) as notify:
        appointment = _book(db, shop, clock)

    notify.assert_called_once_with(appointment)


def test_second_booking_of_same_slot_conflicts(db, shop, clock) -> None:
    _book(db, shop, clock)

    with pytest.raises(SlotConflictError) as exc_info:
        _book(db, shop, clock, customer_name="Max Mustermann")

    assert exc_info.value.code == "SLOT_TAKEN"
    assert exc_info.value.status_code == 409


def test_same_slot_with_other_staff_is_fine(db, shop, clock) -> None:
    _book(db, shop, clock)
    other = _book(db, shop, clock, staff_id=shop.ben.id)

    assert other.staff_id == shop.ben.id


def test_cancelled_appointment_frees_the_slot(db, shop, clock, make_appointment) -> None:
    make_appointment(day=TUESDAY, time_slot="10:30", status=AppointmentStatus.CANCELLED.value)

    appointment = _book(db, shop, clock)
    assert appointment.status == AppointmentStatus.CONFIRMED.value


def test_past_date_is_rejected(db, shop, clock) -> None:
    with pytest.raises(ValidationError) as exc_info:
        _book(db, shop, clock, day=date(2025, 1, 10))

    assert exc_info.value.code == "PAST_DATE"


def test_elapsed_slot_today_is_unavailable(db, shop, clock) -> None:
    clock.advance(hours=3)  # 11:00 Berlin

    with pytest.raises(SlotConflictError) as exc_info:
        _book(db, shop, clock, day=MONDAY, time_slot="10:30")

    assert exc_info.value.code == "SLOT_UNAVAILABLE"


def test_slot_outside_catalog_is_rejected(db, shop, clock) -> None:
    with pytest.raises(ValidationError) as exc_info:
        _book(db, shop, clock, time_slot="12:00")

    assert exc_info.value.code == "UNKNOWN_TIME_SLOT"


@pytest.mark.parametrize("slot", ["9:00", "10:3", "25:00", "", "abc"])
def test_malformed_slot_is_rejected(db, shop, clock, slot) -> None:
    with pytest.raises(ValidationError):
        _book(db, shop, clock, time_slot=slot)


def test_blank_customer_name_is_rejected(db, shop, clock) -> None:
    with pytest.raises(ValidationError):
        _book(db, shop, clock, customer_name="   ")


def test_free_day_booking_carries_reason(db, shop, clock) -> None:
    with pytest.raises(SlotConflictError) as exc_info:
        _book(db, shop, clock, day=WEDNESDAY)

    assert exc_info.value.code == "SLOT_UNAVAILABLE"
    assert exc_info.value.extra["reason"] == "staff_day_off"


def test_unknown_entities(db, shop, clock) -> None:
    with pytest.raises(NotFoundError) as exc_info:
        _book(db, shop, clock, service_id=uuid4())
    assert exc_info.value.code == "SERVICE_NOT_FOUND"

    with pytest.raises(NotFoundError) as exc_info:
        _book(db, shop, clock, staff_id=uuid4())
    assert exc_info.value.code == "STAFF_NOT_FOUND"

    with pytest.raises(NotFoundError) as exc_info:
        _book(db, shop, clock, customer_id=uuid4())
    assert exc_info.value.code == "CUSTOMER_NOT_FOUND"


def test_booking_linked_to_customer(db, shop, clock) -> None:
    customer = Customer(name="Erika Muster", email="erika@example.com")
    db.add(customer)
    db.commit()

    appointment = _book(db, shop, clock, customer_id=customer.id, source=BookingSource.MANUAL)

    assert appointment.customer_id == customer.id
    assert appointment.source == "manual"


def test_storage_constraint_rejects_duplicate_rows(db, shop, make_appointment) -> None:
    make_appointment(day=TUESDAY, time_slot="10:00")

    with pytest.raises(IntegrityError) as exc_info:
        make_appointment(day=TUESDAY, time_slot="10:00")

    assert is_active_slot_violation(exc_info.value)
    db.rollback()


def test_concurrent_bookings_yield_exactly_one_winner(session_factory, shop, clock) -> None:
    shop_id, staff_id, service_id = shop.shop.id, shop.anna.id, shop.service.id
    barrier = threading.Barrier(2)
    outcomes = []
    lock = threading.Lock()

    def attempt(name):
        session = session_factory()
        try:
            barrier.wait(timeout=5)
            BookingService.book(
                session, clock,
                shop_id=shop_id,
                staff_id=staff_id,
                service_id=service_id,
                day=TUESDAY,
                time_slot="11:00",
                customer_name=name,
            )
            result = "booked"
        except SlotConflictError:
            result = "conflict"
        finally:
            session.close()
        with lock:
            outcomes.append(result)

    # Both requests get past the cheap checks; only the storage constraint decides
    with patch.object(BookingService, "_find_active_appointment", return_value=None), \
            patch.object(BookingService, "_ensure_slot_offered", return_value=None):
        threads = [threading.Thread(target=attempt, args=(name,)) for name in ("Anna K.", "Bernd L.")]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

    assert sorted(outcomes) == ["booked", "conflict"]

    verify = session_factory()
    try:
        count = verify.query(Appointment).filter(
            Appointment.staff_id == staff_id,
            Appointment.date == TUESDAY,
            Appointment.time_slot == "11:00",
        ).count()
    finally:
        verify.close()
    assert count == 1
