# app/models/shop.py
"""
Shop and staff directory.
Administration of these rows lives elsewhere; the booking engine reads them.
"""
from sqlalchemy import Column, String, Boolean, DateTime, Integer, ForeignKey, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from app.models.base import Base


class Shop(Base):
    __tablename__ = "shops"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(UUID(as_uuid=True), nullable=True, index=True)
    name = Column(String(200), nullable=False)
    slug = Column(String(100), nullable=True, index=True)

    # Holiday calendar selection (German federal state code, e.g. "NW")
    region = Column(String(2), nullable=False, default="NW")
    timezone = Column(String(50), nullable=False, default="Europe/Berlin")
    currency = Column(String(3), nullable=False, default="EUR")

    # Human fallback for late cancellations
    phone = Column(String(30), nullable=True)

    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    staff = relationship("StaffMember", back_populates="shop", order_by="StaffMember.sort_order")

    def __repr__(self):
        return f"<Shop(id={self.id}, name={self.name}, region={self.region})>"


class StaffMember(Base):
    __tablename__ = "staff_members"
    __table_args__ = (
        CheckConstraint("free_day IS NULL OR (free_day >= 0 AND free_day <= 6)", name="ck_staff_free_day"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    shop_id = Column(
        UUID(as_uuid=True),
        ForeignKey("shops.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    name = Column(String(200), nullable=False)

    # Weekly day off: 0=Sunday, 1=Monday, ..., 6=Saturday
    free_day = Column(Integer, nullable=True)

    sort_order = Column(Integer, default=0)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    shop = relationship("Shop", back_populates="staff")

    def __repr__(self):
        return f"<StaffMember(id={self.id}, name={self.name}, shop_id={self.shop_id})>"

    def to_dict(self):
        return {
            "id": str(self.id),
            "shop_id": str(self.shop_id),
            "name": self.name,
            "free_day": self.free_day,
            "is_active": self.is_active,
        }
