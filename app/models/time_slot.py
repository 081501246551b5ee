# app/models/time_slot.py
from sqlalchemy import Column, String, Boolean, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
import uuid

from app.models.base import Base


class TimeSlot(Base):
    """Bookable start time in a shop's catalog (e.g. "10:00")"""
    __tablename__ = "time_slots"
    __table_args__ = (
        UniqueConstraint("shop_id", "time", name="uq_time_slots_shop_time"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    shop_id = Column(
        UUID(as_uuid=True),
        ForeignKey("shops.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    time = Column(String(5), nullable=False)  # "HH:MM"
    sort_order = Column(Integer, default=0, nullable=False)

    # Deactivating hides the slot from new bookings only
    is_active = Column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<TimeSlot(shop_id={self.shop_id}, time={self.time})>"
