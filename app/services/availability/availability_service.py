# ===== app/services/availability/availability_service.py =====
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Set
from uuid import UUID
import enum
import logging

from sqlalchemy.orm import Session

from app.core.clock import Clock
from app.models.appointment import Appointment, AppointmentStatus
from app.models.shop import Shop, StaffMember
from app.models.time_slot import TimeSlot
from app.services.availability.closure_rules import ClosureRules
from app.services.availability.series_expander import SeriesExpander
from app.services.availability.staff_leave import StaffLeave
from app.services.directory.directory_service import DirectoryService
from app.utils.slot_time import slot_start

logger = logging.getLogger(__name__)


class UnavailableReason(str, enum.Enum):
    STAFF_DAY_OFF = "staff_day_off"
    SHOP_CLOSED = "shop_closed"
    STAFF_ON_LEAVE = "staff_on_leave"


REASON_MESSAGES = {
    UnavailableReason.STAFF_DAY_OFF: "Staff member has a day off",
    UnavailableReason.SHOP_CLOSED: "Shop is closed on this date",
    UnavailableReason.STAFF_ON_LEAVE: "Staff member is on leave",
}


@dataclass
class AvailabilityResult:
    day: date
    slots: List[str] = field(default_factory=list)
    reason: Optional[UnavailableReason] = None

    @property
    def message(self) -> Optional[str]:
        if self.reason is not None:
            return REASON_MESSAGES[self.reason]
        if not self.slots:
            return "No free time slots on this date"
        return None


class AvailabilityService:
    """Computes the open slots of one staff member on one date"""

    @staticmethod
    def get_available_slots(
            db: Session,
            shop_id: UUID,
            staff_id: UUID,
            day: date,
            clock: Clock
    ) -> AvailabilityResult:
        """
        Resolve bookable slots for (shop, staff, date).

        Raises NotFoundError for an unknown/inactive shop or staff member.
        Recomputed on every call; leave, series and bookings change underneath.
        """
        shop = DirectoryService.get_active_shop(db, shop_id)
        staff = DirectoryService.get_active_staff(db, shop.id, staff_id)
        return AvailabilityService.resolve(db, shop, staff, day, clock)

    @staticmethod
    def resolve(
            db: Session,
            shop: Shop,
            staff: StaffMember,
            day: date,
            clock: Clock,
            ignore_series_id: Optional[UUID] = None
    ) -> AvailabilityResult:
        """
        Layer the exclusion rules over the slot catalog for already loaded entities.
        ignore_series_id is set when booking an occurrence of that series.
        """

        # Whole-day exclusions, in order
        if StaffLeave.is_free_day(staff, day):
            return AvailabilityResult(day=day, reason=UnavailableReason.STAFF_DAY_OFF)

        if not ClosureRules.is_shop_open(db, shop.id, day):
            return AvailabilityResult(day=day, reason=UnavailableReason.SHOP_CLOSED)

        if StaffLeave.is_on_leave(db, staff.id, day):
            return AvailabilityResult(day=day, reason=UnavailableReason.STAFF_ON_LEAVE)

        catalog = AvailabilityService.get_catalog(db, shop.id)

        excluded = AvailabilityService.get_booked_slots(db, shop.id, staff.id, day)
        excluded |= SeriesExpander.occupied_slots(db, staff.id, day, catalog, ignore_series_id=ignore_series_id)

        # Same-day cutoff: nothing at or before "now" on the booking day
        tz = DirectoryService.shop_timezone(shop)
        now = clock.now(tz)
        if day == now.date():
            excluded |= {slot for slot in catalog if slot_start(day, slot, tz) <= now}

        slots = [slot for slot in catalog if slot not in excluded]

        logger.debug(
            f"Availability shop={shop.id} staff={staff.id} date={day}: "
            f"{len(slots)}/{len(catalog)} slots open"
        )
        return AvailabilityResult(day=day, slots=slots)

    @staticmethod
    def get_catalog(db: Session, shop_id: UUID) -> List[str]:
        """Active catalog slots in configured order"""
        rows = db.query(TimeSlot.time).filter(
            TimeSlot.shop_id == shop_id,
            TimeSlot.is_active.is_(True)
        ).order_by(TimeSlot.sort_order.asc(), TimeSlot.time.asc()).all()
        return [row[0] for row in rows]

    @staticmethod
    def get_booked_slots(db: Session, shop_id: UUID, staff_id: UUID, day: date) -> Set[str]:
        """Slots holding a non-cancelled appointment"""
        rows = db.query(Appointment.time_slot).filter(
            Appointment.shop_id == shop_id,
            Appointment.staff_id == staff_id,
            Appointment.date == day,
            Appointment.status != AppointmentStatus.CANCELLED.value
        ).all()
        return {row[0] for row in rows}
