# ===== app/tasks/notification_tasks.py =====
from typing import Optional
import logging

from app.config.celery_config import celery_app
from app.services.email.email_service import EmailService

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3)
def send_booking_confirmation_email(
        self,
        email: str,
        customer_name: str,
        shop_name: str,
        staff_name: str,
        service_name: str,
        date_display: str,
        time_slot: str,
        appointment_id: str
):
    """
    Send booking confirmation to the customer

    Args:
        email: Customer email address
        appointment_id: Appointment ID (used for the cancellation link)
    """
    try:
        logger.info(f"Sending booking confirmation for {appointment_id} to {email}")

        EmailService.send_booking_confirmation_email(
            email=email,
            customer_name=customer_name,
            shop_name=shop_name,
            staff_name=staff_name,
            service_name=service_name,
            date_display=date_display,
            time_slot=time_slot,
            appointment_id=appointment_id
        )

        return {"status": "success", "email": email, "appointment_id": appointment_id}

    except Exception as exc:
        logger.error(f"Failed to send booking confirmation to {email}: {exc}")

        # Retry with exponential backoff: 1min, 2min, 4min
        raise self.retry(
            exc=exc,
            countdown=60 * (2 ** self.request.retries)
        )


@celery_app.task(bind=True, max_retries=3)
def send_cancellation_email(
        self,
        email: str,
        customer_name: str,
        shop_name: str,
        date_display: str,
        time_slot: str,
        appointment_id: Optional[str] = None
):
    """Send cancellation notice to the customer"""
    try:
        logger.info(f"Sending cancellation notice for {appointment_id} to {email}")

        EmailService.send_cancellation_email(
            email=email,
            customer_name=customer_name,
            shop_name=shop_name,
            date_display=date_display,
            time_slot=time_slot
        )

        return {"status": "success", "email": email, "appointment_id": appointment_id}

    except Exception as exc:
        logger.error(f"Failed to send cancellation notice to {email}: {exc}")

        raise self.retry(
            exc=exc,
            countdown=60 * (2 ** self.request.retries)
        )
