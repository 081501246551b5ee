import os

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["NOTIFICATIONS_ENABLED"] = "false"
os.environ["DASHBOARD_API_KEY"] = "test-dashboard-key"
os.environ["SUPPORT_PHONE"] = "+49 211 000000"

from datetime import date, datetime, time
from types import SimpleNamespace
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.config.database import build_engine, get_db
from app.core.clock import FixedClock, get_clock
from app.main import create_app
from app.models import (
    Appointment,
    AppointmentStatus,
    Base,
    OpeningHours,
    Service,
    Shop,
    StaffMember,
    TimeSlot,
)

BERLIN = ZoneInfo("Europe/Berlin")

# Monday 2025-01-13; Anna's free day is Wednesday
MONDAY = date(2025, 1, 13)
TUESDAY = date(2025, 1, 14)
WEDNESDAY = date(2025, 1, 15)
THURSDAY = date(2025, 1, 16)
SUNDAY = date(2025, 1, 19)

CATALOG = ["10:00", "10:30", "11:00"]


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'booking.db'}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def clock():
    return FixedClock(datetime(2025, 1, 13, 8, 0, tzinfo=BERLIN))


@pytest.fixture
def shop(db):
    """Shop open Mon-Sat 10-19, closed Sunday, three catalog slots, two staff"""
    shop = Shop(name="Salon Mitte", region="NW", timezone="Europe/Berlin", phone="+49 211 123456")
    db.add(shop)
    db.flush()

    anna = StaffMember(shop_id=shop.id, name="Anna", free_day=3, sort_order=1)
    ben = StaffMember(shop_id=shop.id, name="Ben", free_day=None, sort_order=2)
    haircut = Service(shop_id=shop.id, name="Haircut", price=2500, duration=30)
    db.add_all([anna, ben, haircut])

    for weekday in range(7):
        if weekday == 0:
            db.add(OpeningHours(shop_id=shop.id, day_of_week=0, is_closed=True))
        else:
            db.add(OpeningHours(
                shop_id=shop.id,
                day_of_week=weekday,
                is_closed=False,
                open_time=time(10, 0),
                close_time=time(19, 0),
            ))

    for position, slot in enumerate(CATALOG):
        db.add(TimeSlot(shop_id=shop.id, time=slot, sort_order=position))

    db.commit()
    return SimpleNamespace(shop=shop, anna=anna, ben=ben, service=haircut)


@pytest.fixture
def make_appointment(db, shop):
    """Insert an appointment row directly, bypassing the booking rules"""

    def _make(day=TUESDAY, time_slot="10:00", staff=None, **fields):
        appointment = Appointment(
            shop_id=shop.shop.id,
            staff_id=(staff or shop.anna).id,
            service_id=shop.service.id,
            date=day,
            time_slot=time_slot,
            customer_name=fields.pop("customer_name", "Erika Muster"),
            status=fields.pop("status", AppointmentStatus.CONFIRMED.value),
            **fields
        )
        db.add(appointment)
        db.commit()
        return appointment

    return _make


@pytest.fixture
def client(session_factory, clock):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock

    with TestClient(app) as test_client:
        yield test_client
