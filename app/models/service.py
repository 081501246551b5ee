# app/models/service.py
"""
Service Model - what a customer books
Each service belongs to one shop. Price is stored in minor currency units (cents).
"""
from sqlalchemy import Column, String, Integer, ForeignKey, Boolean, DateTime, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from typing import Optional
from app.models.base import Base
from app.utils.formatting import format_price


class Service(Base):
    """
    Bookable service offered by a shop.
    Duration is informational: one booking always occupies exactly one catalog slot.
    """
    __tablename__ = "services"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    shop_id = Column(
        UUID(as_uuid=True),
        ForeignKey("shops.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Core service details
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)

    # Pricing in minor units (e.g. 2500 = 25.00 EUR)
    price = Column(Integer, nullable=False, default=0)

    # Duration in minutes
    duration = Column(Integer, nullable=True)

    # Status and ordering
    is_active = Column(Boolean, default=True, index=True)
    display_order = Column(Integer, default=0)  # For UI sorting

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    # Relationships
    shop = relationship("Shop", backref="services")

    def __repr__(self):
        return f"<Service(id={self.id}, name={self.name}, shop_id={self.shop_id})>"

    @property
    def formatted_price(self) -> str:
        """Return human-readable price string, e.g. "25,00 EUR" """
        currency = self.shop.currency if self.shop is not None else "EUR"
        return format_price(self.price, currency)

    @property
    def formatted_duration(self) -> Optional[str]:
        """Duration text such as "30 min" or "1 h 15 min", None when unset"""
        if not self.duration:
            return None
        hours, minutes = divmod(self.duration, 60)
        parts = []
        if hours:
            parts.append(f"{hours} h")
        if minutes:
            parts.append(f"{minutes} min")
        return " ".join(parts)
