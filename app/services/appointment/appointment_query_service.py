# ============================================================================
# app/services/appointment/appointment_query_service.py
# Pure read logic - no FastAPI dependencies, fully testable
# ============================================================================
from datetime import date
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.appointment import Appointment, AppointmentStatus
from app.models.shop import StaffMember
from app.utils.formatting import format_date_display


class AppointmentQueryService:
    """Service layer for appointment reads used by staff tooling"""

    @staticmethod
    def list_day_appointments(
            db: Session,
            shop_id: UUID,
            day: date,
            staff_id: Optional[UUID] = None,
            include_cancelled: bool = False
    ) -> Dict[str, Any]:
        """A shop's appointments for one date, ordered by staff then slot"""
        query = db.query(Appointment).join(
            StaffMember, StaffMember.id == Appointment.staff_id
        ).filter(
            Appointment.shop_id == shop_id,
            Appointment.date == day
        )

        if staff_id:
            query = query.filter(Appointment.staff_id == staff_id)
        if not include_cancelled:
            query = query.filter(Appointment.status != AppointmentStatus.CANCELLED.value)

        appointments = query.order_by(
            StaffMember.sort_order.asc(),
            StaffMember.name.asc(),
            Appointment.time_slot.asc()
        ).all()

        return {
            "shop_id": str(shop_id),
            "date": day.isoformat(),
            "date_display": format_date_display(day),
            "staff_id": str(staff_id) if staff_id else None,
            "total_appointments": len(appointments),
            "appointments": [AppointmentQueryService.serialize(appt) for appt in appointments]
        }

    @staticmethod
    def get_appointment_by_id(
            db: Session,
            shop_id: UUID,
            appointment_id: UUID
    ) -> Optional[Dict[str, Any]]:
        """Get a single appointment by ID. Returns None if not found."""
        appointment = db.query(Appointment).filter(
            Appointment.id == appointment_id,
            Appointment.shop_id == shop_id
        ).first()

        if not appointment:
            return None

        return AppointmentQueryService.serialize(appointment, detailed=True)

    @staticmethod
    def booking_summary(appointment: Appointment) -> Dict[str, Any]:
        """Customer-facing confirmation payload"""
        service = appointment.service
        return {
            "id": str(appointment.id),
            "date": appointment.date.isoformat(),
            "date_display": format_date_display(appointment.date),
            "time": appointment.time_slot,
            "service": service.name if service else None,
            "staff": appointment.staff.name,
            "price": service.price if service else None,
            "price_display": service.formatted_price if service else None,
            "duration_display": service.formatted_duration if service else None,
        }

    @staticmethod
    def serialize(appointment: Appointment, detailed: bool = False) -> Dict[str, Any]:
        data = {
            "id": str(appointment.id),
            "date": appointment.date.isoformat(),
            "time": appointment.time_slot,
            "staff_id": str(appointment.staff_id),
            "staff": appointment.staff.name if appointment.staff else None,
            "service": appointment.service.name if appointment.service else None,
            "customer_name": appointment.customer_name,
            "customer_phone": appointment.customer_phone,
            "status": appointment.status,
            "source": appointment.source,
        }

        if detailed:
            data.update({
                "shop_id": str(appointment.shop_id),
                "service_id": str(appointment.service_id) if appointment.service_id else None,
                "customer_id": str(appointment.customer_id) if appointment.customer_id else None,
                "series_id": str(appointment.series_id) if appointment.series_id else None,
                "customer_email": appointment.customer_email,
                "notes": appointment.notes,
                "created_at": appointment.created_at.isoformat() if appointment.created_at else None,
                "cancelled_at": appointment.cancelled_at.isoformat() if appointment.cancelled_at else None,
                "cancelled_by": appointment.cancelled_by,
            })

        return data
