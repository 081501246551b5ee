from sqlalchemy import Column, String, Text, Date, DateTime, ForeignKey, Index, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from .base import Base
import uuid
import enum


class AppointmentStatus(str, enum.Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class BookingSource(str, enum.Enum):
    ONLINE = "online"  # self-service
    MANUAL = "manual"  # entered by staff
    SERIES = "series"  # materialised from a recurring series


class CancelledBy(str, enum.Enum):
    CUSTOMER = "customer"
    STAFF = "staff"
    ADMIN = "admin"


# At most one live appointment per (shop, staff, date, slot)
ACTIVE_SLOT_INDEX = "uq_appointments_active_slot"


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        Index(
            ACTIVE_SLOT_INDEX,
            "shop_id", "staff_id", "date", "time_slot",
            unique=True,
            postgresql_where=text("status != 'cancelled'"),
            sqlite_where=text("status != 'cancelled'"),
        ),
        Index("idx_appointments_shop_date", "shop_id", "date"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # References
    shop_id = Column(UUID(as_uuid=True), ForeignKey("shops.id"), nullable=False)
    staff_id = Column(UUID(as_uuid=True), ForeignKey("staff_members.id"), nullable=False)
    service_id = Column(UUID(as_uuid=True), ForeignKey("services.id"), nullable=True)
    customer_id = Column(UUID(as_uuid=True), ForeignKey("customers.id", ondelete="SET NULL"), nullable=True)
    series_id = Column(UUID(as_uuid=True), ForeignKey("recurring_series.id", ondelete="SET NULL"), nullable=True)

    # Slot
    date = Column(Date, nullable=False)
    time_slot = Column(String(5), nullable=False)  # "HH:MM"

    # Customer info
    customer_name = Column(String(200), nullable=False)
    customer_phone = Column(String(30), nullable=True)
    customer_email = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)

    # Status tracking
    status = Column(String(20), nullable=False, default=AppointmentStatus.CONFIRMED.value)
    source = Column(String(20), nullable=False, default=BookingSource.ONLINE.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_by = Column(String(20), nullable=True)  # customer, staff, admin

    shop = relationship("Shop")
    staff = relationship("StaffMember")
    service = relationship("Service")

    @property
    def is_cancelled(self) -> bool:
        return self.status == AppointmentStatus.CANCELLED.value

    def __repr__(self):
        return (
            f"<Appointment(id={self.id}, staff_id={self.staff_id}, "
            f"date={self.date}, time_slot={self.time_slot}, status={self.status})>"
        )
