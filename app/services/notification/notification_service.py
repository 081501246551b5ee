# ===== app/services/notification/notification_service.py =====
"""
Fire-and-forget notification dispatch.
Called after the booking/cancellation is committed; a failure to enqueue is
logged and never undoes the write.
"""
import logging

from app.config.settings import settings
from app.models.appointment import Appointment
from app.tasks.notification_tasks import send_booking_confirmation_email, send_cancellation_email
from app.utils.formatting import format_date_display

logger = logging.getLogger(__name__)


class NotificationService:

    @staticmethod
    def appointment_booked(appointment: Appointment) -> bool:
        """Queue the confirmation email; returns True if a task was queued"""
        if not settings.NOTIFICATIONS_ENABLED or not appointment.customer_email:
            return False

        try:
            send_booking_confirmation_email.delay(
                email=appointment.customer_email,
                customer_name=appointment.customer_name,
                shop_name=appointment.shop.name,
                staff_name=appointment.staff.name,
                service_name=appointment.service.name if appointment.service else "",
                date_display=format_date_display(appointment.date),
                time_slot=appointment.time_slot,
                appointment_id=str(appointment.id),
            )
            return True
        except Exception as e:
            logger.warning(f"Could not queue booking confirmation for {appointment.id}: {e}")
            return False

    @staticmethod
    def appointment_cancelled(appointment: Appointment) -> bool:
        """Queue the cancellation email; returns True if a task was queued"""
        if not settings.NOTIFICATIONS_ENABLED or not appointment.customer_email:
            return False

        try:
            send_cancellation_email.delay(
                email=appointment.customer_email,
                customer_name=appointment.customer_name,
                shop_name=appointment.shop.name,
                date_display=format_date_display(appointment.date),
                time_slot=appointment.time_slot,
                appointment_id=str(appointment.id),
            )
            return True
        except Exception as e:
            logger.warning(f"Could not queue cancellation notice for {appointment.id}: {e}")
            return False
