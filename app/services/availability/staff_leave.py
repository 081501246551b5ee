# ===== app/services/availability/staff_leave.py =====
from datetime import date
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.schedule import StaffTimeOff
from app.models.shop import StaffMember
from app.utils.slot_time import sunday_based_weekday


class StaffLeave:
    """Staff leave ledger and weekly free day checks"""

    @staticmethod
    def is_on_leave(db: Session, staff_id: UUID, day: date) -> bool:
        """True if any time-off range of the staff member covers the date (inclusive)"""
        return db.query(StaffTimeOff.id).filter(
            StaffTimeOff.staff_id == staff_id,
            StaffTimeOff.start_date <= day,
            StaffTimeOff.end_date >= day
        ).first() is not None

    @staticmethod
    def get_time_off_in_range(
            db: Session,
            staff_id: UUID,
            start: date,
            end: date
    ) -> List[StaffTimeOff]:
        """Time-off ranges overlapping [start, end]"""
        return db.query(StaffTimeOff).filter(
            StaffTimeOff.staff_id == staff_id,
            StaffTimeOff.start_date <= end,
            StaffTimeOff.end_date >= start
        ).order_by(StaffTimeOff.start_date.asc()).all()

    @staticmethod
    def is_free_day(staff: StaffMember, day: date) -> bool:
        """Weekly day off; not modelled as leave"""
        free_day: Optional[int] = staff.free_day
        if free_day is None:
            return False
        return sunday_based_weekday(day) == free_day
