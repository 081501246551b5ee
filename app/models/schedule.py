# ===== app/models/schedule.py =====
from sqlalchemy import Column, String, Integer, Boolean, Time, Date, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from app.models.base import Base
import uuid


class OpeningHours(Base):
    """Weekly opening hours, one row per weekday per shop"""
    __tablename__ = "opening_hours"
    __table_args__ = (
        UniqueConstraint("shop_id", "day_of_week", name="uq_opening_hours_shop_day"),
        CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="ck_opening_hours_day"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    shop_id = Column(UUID(as_uuid=True), ForeignKey("shops.id", ondelete="CASCADE"), nullable=False, index=True)

    day_of_week = Column(Integer, nullable=False)  # 0=Sunday, 6=Saturday
    is_closed = Column(Boolean, default=False, nullable=False)
    open_time = Column(Time, nullable=True)
    close_time = Column(Time, nullable=True)


class ClosedDate(Base):
    """Single date on which the shop is fully closed (holiday, special closure)"""
    __tablename__ = "closed_dates"
    __table_args__ = (
        UniqueConstraint("shop_id", "date", name="uq_closed_dates_shop_date"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    shop_id = Column(UUID(as_uuid=True), ForeignKey("shops.id", ondelete="CASCADE"), nullable=False, index=True)

    date = Column(Date, nullable=False)
    reason = Column(String, nullable=True)  # "Holiday", "Renovation", etc.


class OpenSunday(Base):
    """Sunday on which a normally closed shop opens anyway"""
    __tablename__ = "open_sundays"
    __table_args__ = (
        UniqueConstraint("shop_id", "date", name="uq_open_sundays_shop_date"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    shop_id = Column(UUID(as_uuid=True), ForeignKey("shops.id", ondelete="CASCADE"), nullable=False, index=True)

    date = Column(Date, nullable=False)
    open_time = Column(Time, nullable=False)
    close_time = Column(Time, nullable=False)


class StaffTimeOff(Base):
    """Inclusive date range during which a staff member is away"""
    __tablename__ = "staff_time_off"
    __table_args__ = (
        CheckConstraint("start_date <= end_date", name="ck_staff_time_off_range"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    staff_id = Column(UUID(as_uuid=True), ForeignKey("staff_members.id", ondelete="CASCADE"), nullable=False, index=True)

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    reason = Column(String, nullable=True)  # "Vacation", "Sick", etc.
