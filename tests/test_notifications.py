import smtplib
from types import SimpleNamespace
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest

from app.services.email.email_service import EmailService
from app.services.notification.notification_service import NotificationService
from app.tasks import notification_tasks

from conftest import TUESDAY


def _appointment(email="erika@example.com"):
    return SimpleNamespace(
        id=uuid4(),
        customer_email=email,
        customer_name="Erika Muster",
        shop=SimpleNamespace(name="Salon Mitte"),
        staff=SimpleNamespace(name="Anna"),
        service=SimpleNamespace(name="Haircut"),
        date=TUESDAY,
        time_slot="10:30",
    )


def test_disabled_notifications_queue_nothing() -> None:
    task = MagicMock()
    with patch("app.services.notification.notification_service.settings.NOTIFICATIONS_ENABLED", False), \
            patch("app.services.notification.notification_service.send_booking_confirmation_email", task):
        assert NotificationService.appointment_booked(_appointment()) is False

    task.delay.assert_not_called()


def test_booking_confirmation_is_queued() -> None:
    task = MagicMock()
    appointment = _appointment()
    with patch("app.services.notification.notification_service.settings.NOTIFICATIONS_ENABLED", True), \
            patch("app.services.notification.notification_service.send_booking_confirmation_email", task):
        assert NotificationService.appointment_booked(appointment) is True

    kwargs = task.delay.call_args.kwargs
    assert kwargs["email"] == "erika@example.com"
    assert kwargs["date_display"] == "Tuesday, 14.01.2025"
    assert kwargs["appointment_id"] == str(appointment.id)


def test_no_email_address_queues_nothing() -> None:
    task = MagicMock()
    with patch("app.services.notification.notification_service.settings.NOTIFICATIONS_ENABLED", True), \
            patch("app.services.notification.notification_service.send_cancellation_email", task):
        assert NotificationService.appointment_cancelled(_appointment(email=None)) is False

    task.delay.assert_not_called()


def test_broker_failure_does_not_propagate() -> None:
    task = MagicMock()
    task.delay.side_effect = ConnectionError("broker down")
    with patch("app.services.notification.notification_service.settings.NOTIFICATIONS_ENABLED", True), \
            patch("app.services.notification.notification_service.send_cancellation_email", task):
        assert NotificationService.appointment_cancelled(_appointment()) is False


def test_confirmation_task_sends_email() -> None:
    with patch("app.tasks.notification_tasks.EmailService.send_booking_confirmation_email") as send:
        result = notification_tasks.send_booking_confirmation_email.run(
            email="erika@example.com",
            customer_name="Erika Muster",
            shop_name="Salon Mitte",
            staff_name="Anna",
            service_name="Haircut",
            date_display="Tuesday, 14.01.2025",
            time_slot="10:30",
            appointment_id="abc",
        )

    assert result["status"] == "success"
    assert send.call_args.kwargs["appointment_id"] == "abc"


def test_cancellation_email_renders_details() -> None:
    with patch("app.services.email.email_service.EmailService.send_email") as send_email:
        EmailService.send_cancellation_email(
            email="erika@example.com",
            customer_name="Erika <Muster>",
            shop_name="Salon Mitte",
            date_display="Tuesday, 14.01.2025",
            time_slot="10:30",
        )

    kwargs = send_email.call_args.kwargs
    assert kwargs["to_email"] == "erika@example.com"
    assert "Erika &lt;Muster&gt;" in kwargs["html_content"]
    assert "10:30" in kwargs["plain_text"]


def test_send_email_builds_multipart_message() -> None:
    server = MagicMock()
    server.__enter__.return_value = server
    server.__exit__.return_value = False

    with patch.object(EmailService, "_get_smtp_connection", return_value=server):
        assert EmailService.send_email(
            to_email="erika@example.com",
            subject="Appointment confirmed",
            html_content="<p>Hi</p>",
            plain_text="\n        Hi\n        ",
        ) is True

    message = server.send_message.call_args.args[0]
    assert message["To"] == "erika@example.com"
    assert [part.get_content_type() for part in message.get_payload()] == ["text/plain", "text/html"]
    assert message.get_payload()[0].get_payload(decode=True).decode() == "Hi"
    server.__exit__.assert_called_once()


def test_send_email_reraises_smtp_errors() -> None:
    server = MagicMock()
    server.__enter__.return_value = server
    server.__exit__.return_value = False
    server.send_message.side_effect = smtplib.SMTPServerDisconnected("gone")

    with patch.object(EmailService, "_get_smtp_connection", return_value=server):
        with pytest.raises(smtplib.SMTPServerDisconnected):
            EmailService.send_email("erika@example.com", "Subject", "<p>Hi</p>")
