# ===== app/services/email/email_service.py =====
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from email.utils import formataddr
from html import escape
from textwrap import dedent
from typing import Optional
import logging

from app.config.settings import settings

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending booking emails via SMTP"""

    @staticmethod
    def _get_smtp_connection() -> smtplib.SMTP:
        """Open an authenticated SMTP connection; the caller closes it"""
        if settings.EMAIL_USE_TLS:
            server = smtplib.SMTP(settings.EMAIL_HOST, settings.EMAIL_PORT, timeout=settings.EMAIL_TIMEOUT)
            server.starttls()
        else:
            server = smtplib.SMTP_SSL(settings.EMAIL_HOST, settings.EMAIL_PORT, timeout=settings.EMAIL_TIMEOUT)

        if settings.EMAIL_USERNAME and settings.EMAIL_PASSWORD:
            server.login(settings.EMAIL_USERNAME, settings.EMAIL_PASSWORD)
        return server

    @staticmethod
    def _build_message(to_email: str, subject: str, html_content: str, plain_text: Optional[str]) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = formataddr((settings.EMAIL_FROM_NAME, settings.EMAIL_FROM_ADDRESS))
        message["To"] = to_email
        # alternative parts: the last one is preferred
        if plain_text:
            message.attach(MIMEText(dedent(plain_text).strip(), "plain", "utf-8"))
        message.attach(MIMEText(html_content, "html", "utf-8"))
        return message

    @staticmethod
    def send_email(
            to_email: str,
            subject: str,
            html_content: str,
            plain_text: Optional[str] = None
    ) -> bool:
        """
        Send one customer email.

        SMTP and socket errors are logged and re-raised so the calling
        Celery task can retry.
        """
        message = EmailService._build_message(to_email, subject, html_content, plain_text)
        try:
            with EmailService._get_smtp_connection() as server:
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send '{subject}' to {to_email}: {e}")
            raise

        logger.info(f"Sent '{subject}' to {to_email}")
        return True

    @staticmethod
    def _layout(title: str, body_html: str) -> str:
        return f"""
        <!DOCTYPE html>
        <html>
        <head>
            <meta charset="UTF-8">
            <meta name="viewport" content="width=device-width, initial-scale=1.0">
        </head>
        <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
            <div style="background-color: #1f2937; padding: 30px; text-align: center; border-radius: 10px 10px 0 0;">
                <h1 style="color: white; margin: 0; font-size: 26px;">{escape(title)}</h1>
            </div>
            <div style="background-color: #ffffff; padding: 30px; border: 1px solid #e0e0e0; border-top: none; border-radius: 0 0 10px 10px;">
                {body_html}
            </div>
        </body>
        </html>
        """

    @staticmethod
    def send_booking_confirmation_email(
            email: str,
            customer_name: str,
            shop_name: str,
            staff_name: str,
            service_name: str,
            date_display: str,
            time_slot: str,
            appointment_id: str
    ) -> bool:
        """Send booking confirmation with a self-service cancellation link"""
        cancel_url = f"{settings.FRONTEND_URL}/cancel?id={appointment_id}"

        body_html = f"""
                <h2 style="color: #333; margin-top: 0;">Hi {escape(customer_name)}!</h2>
                <p style="font-size: 16px; color: #555;">Your appointment at {escape(shop_name)} is confirmed.</p>
                <table style="font-size: 16px; color: #333; margin: 20px 0;">
                    <tr><td style="padding-right: 20px;">Date</td><td><strong>{escape(date_display)}</strong></td></tr>
                    <tr><td style="padding-right: 20px;">Time</td><td><strong>{escape(time_slot)}</strong></td></tr>
                    <tr><td style="padding-right: 20px;">Service</td><td>{escape(service_name)}</td></tr>
                    <tr><td style="padding-right: 20px;">With</td><td>{escape(staff_name)}</td></tr>
                </table>
                <p style="font-size: 14px; color: #777;">
                    Need to cancel? You can do so online up to {settings.CANCELLATION_WINDOW_HOURS} hours before your appointment:
                </p>
                <p style="font-size: 14px; word-break: break-all;"><a href="{cancel_url}">{cancel_url}</a></p>
        """

        plain_text = f"""
        Hi {customer_name}!

        Your appointment at {shop_name} is confirmed.

        Date: {date_display}
        Time: {time_slot}
        Service: {service_name}
        With: {staff_name}

        Cancel online up to {settings.CANCELLATION_WINDOW_HOURS} hours before your appointment:
        {cancel_url}
        """

        return EmailService.send_email(
            to_email=email,
            subject=f"Appointment confirmed: {date_display} {time_slot}",
            html_content=EmailService._layout("Appointment Confirmed", body_html),
            plain_text=plain_text
        )

    @staticmethod
    def send_cancellation_email(
            email: str,
            customer_name: str,
            shop_name: str,
            date_display: str,
            time_slot: str
    ) -> bool:
        """Send cancellation notice"""
        body_html = f"""
                <h2 style="color: #333; margin-top: 0;">Hi {escape(customer_name)},</h2>
                <p style="font-size: 16px; color: #555;">
                    Your appointment at {escape(shop_name)} on <strong>{escape(date_display)}</strong>
                    at <strong>{escape(time_slot)}</strong> has been cancelled.
                </p>
                <p style="font-size: 16px; color: #555;">We hope to see you another time.</p>
        """

        plain_text = f"""
        Hi {customer_name},

        Your appointment at {shop_name} on {date_display} at {time_slot} has been cancelled.

        We hope to see you another time.
        """

        return EmailService.send_email(
            to_email=email,
            subject=f"Appointment cancelled: {date_display} {time_slot}",
            html_content=EmailService._layout("Appointment Cancelled", body_html),
            plain_text=plain_text
        )
