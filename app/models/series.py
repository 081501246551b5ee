# app/models/series.py
"""
Recurring reservation series.
A series is a rule, not a set of rows: occurrences are computed per query.
"""
from sqlalchemy import Column, String, Integer, Date, DateTime, ForeignKey, UniqueConstraint, CheckConstraint, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
import enum

from app.models.base import Base


class IntervalType(str, enum.Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"  # every 4 weeks
    CUSTOM = "custom"  # every interval_weeks weeks


class SeriesExceptionType(str, enum.Enum):
    DELETED = "deleted"
    SKIPPED = "skipped"
    MOVED = "moved"


class RecurringSeries(Base):
    __tablename__ = "recurring_series"
    __table_args__ = (
        CheckConstraint("day_of_week >= 1 AND day_of_week <= 7", name="ck_series_day_of_week"),
        CheckConstraint("interval_weeks IS NULL OR interval_weeks >= 1", name="ck_series_interval_weeks"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    shop_id = Column(UUID(as_uuid=True), ForeignKey("shops.id", ondelete="CASCADE"), nullable=False, index=True)
    staff_id = Column(UUID(as_uuid=True), ForeignKey("staff_members.id", ondelete="CASCADE"), nullable=False, index=True)
    service_id = Column(UUID(as_uuid=True), ForeignKey("services.id", ondelete="SET NULL"), nullable=True)

    # Pattern
    day_of_week = Column(Integer, nullable=False)  # 1=Monday, ..., 7=Sunday
    time_slot = Column(String(5), nullable=False)  # "HH:MM"
    interval_type = Column(String(20), nullable=False, default=IntervalType.WEEKLY.value)
    interval_weeks = Column(Integer, nullable=True)  # overrides interval_type when set
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)

    # Payload for the implied occurrences
    customer_name = Column(String(200), nullable=False)
    customer_phone = Column(String(30), nullable=True)
    customer_email = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    exceptions = relationship("SeriesException", back_populates="series", cascade="all, delete-orphan")

    def __repr__(self):
        return (
            f"<RecurringSeries(id={self.id}, staff_id={self.staff_id}, "
            f"day_of_week={self.day_of_week}, time_slot={self.time_slot})>"
        )


class SeriesException(Base):
    """A single date on which a series does not occupy its slot"""
    __tablename__ = "series_exceptions"
    __table_args__ = (
        UniqueConstraint("series_id", "exception_date", name="uq_series_exceptions_series_date"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    series_id = Column(UUID(as_uuid=True), ForeignKey("recurring_series.id", ondelete="CASCADE"), nullable=False, index=True)
    exception_date = Column(Date, nullable=False)
    exception_type = Column(String(20), nullable=False, default=SeriesExceptionType.DELETED.value)
    reason = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    series = relationship("RecurringSeries", back_populates="exceptions")
