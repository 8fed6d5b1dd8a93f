"""Email notifications via SendGrid.

Sending is fire-and-forget: failures are logged and reported as False, they
never propagate into the booking flow.
"""

import logging
from datetime import UTC, datetime
from typing import Any

import httpx

from minedine.config import settings
from minedine.models.booking import Booking
from minedine.models.dinner import Dinner
from minedine.models.user import User

logger = logging.getLogger(__name__)

SENDGRID_SEND_URL = "https://api.sendgrid.com/v3/mail/send"


class NotificationService:
    """Service for sending transactional email."""

    def __init__(self) -> None:
        self._http_client: httpx.AsyncClient | None = None

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Lazy-load HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=30.0)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: str | None = None,
    ) -> bool:
        """Send an email via SendGrid.

        Args:
            to_email: Recipient email
            subject: Email subject
            html_content: HTML body
            text_content: Plain text body

        Returns:
            bool: True if SendGrid accepted the message
        """
        if not settings.sendgrid_api_key:
            logger.debug(f"SendGrid not configured, skipping email to {to_email}")
            return False

        headers = {
            "Authorization": f"Bearer {settings.sendgrid_api_key}",
            "Content-Type": "application/json",
        }
        payload: dict[str, Any] = {
            "personalizations": [{"to": [{"email": to_email}]}],
            "from": {
                "email": settings.email_from_address,
                "name": settings.email_from_name,
            },
            "subject": subject,
            "content": [{"type": "text/html", "value": html_content}],
        }
        if text_content:
            payload["content"].insert(0, {"type": "text/plain", "value": text_content})

        try:
            response = await self.http_client.post(
                SENDGRID_SEND_URL,
                headers=headers,
                json=payload,
            )
        except httpx.HTTPError as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            return False

        if response.status_code not in (200, 202):
            logger.error(
                f"SendGrid rejected email to {to_email}: "
                f"{response.status_code} {response.text}"
            )
            return False
        return True

    def _build_email_html(self, title: str, body: str) -> str:
        return f"""
        <!DOCTYPE html>
        <html>
        <head><meta charset="utf-8"></head>
        <body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
                     max-width: 600px; margin: 0 auto; padding: 20px; color: #333;">
            <div style="background-color: #f9fafb; border-radius: 8px; padding: 24px;">
                <h1 style="color: #111827; font-size: 24px; margin-bottom: 16px;">{title}</h1>
                <p style="color: #4b5563; font-size: 16px; line-height: 1.6;">{body}</p>
            </div>
            <p style="color: #9ca3af; font-size: 12px; margin-top: 24px; text-align: center;">
                &copy; {datetime.now(UTC).year} Mine Dine
            </p>
        </body>
        </html>
        """

    async def send_booking_confirmation(self, guest: User, booking: Booking, dinner: Dinner) -> bool:
        """Tell the guest their booking is paid and confirmed."""
        when = dinner.date_time.strftime("%A %d %B %Y, %H:%M")
        body = (
            f"Your booking for {dinner.title} on {when} is confirmed. "
            f"Guests: {booking.number_of_guests}. Total paid: EUR {booking.total_price}."
        )
        return await self.send_email(
            to_email=guest.email,
            subject=f"Booking confirmed: {dinner.title}",
            html_content=self._build_email_html("Booking confirmed", body),
            text_content=body,
        )


# Singleton instance
notification_service = NotificationService()
