"""
Contact Notifier
================

Emails the site owner when a contact form is submitted.

Delivery is best effort: failures are logged and never propagate, so a
submission is stored even when the mail server is down. Without SMTP
configuration the notifier runs in logging-only mode.
"""

import asyncio
import smtplib
from email.message import EmailMessage
from typing import Optional

import structlog

from portfolio_api.core.config import settings

logger = structlog.get_logger()


class ContactNotifier:
    """SMTP client for contact-form notifications."""

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        sender: Optional[str] = None,
        recipient: Optional[str] = None,
        timeout: float = 10.0,
    ):
        self.host = host or settings.SMTP_HOST
        self.port = port or settings.SMTP_PORT
        self.username = username or settings.SMTP_USER
        self.password = password or settings.SMTP_PASSWORD
        self.sender = sender or settings.SMTP_FROM
        self.recipient = recipient or settings.ADMIN_NOTIFY_EMAIL
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        """Check if SMTP delivery is configured"""
        return bool(self.host and self.recipient)

    def build_message(self, name: str, email: str, message: str) -> EmailMessage:
        mail = EmailMessage()
        mail["Subject"] = f"New Contact Form Submission from {name}"
        mail["From"] = self.sender
        mail["To"] = self.recipient or ""
        mail["Reply-To"] = email
        mail.set_content(f"Name: {name}\nEmail: {email}\nMessage:\n{message}\n")
        return mail

    def _deliver(self, mail: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            smtp.starttls()
            if self.username and self.password:
                smtp.login(self.username, self.password)
            smtp.send_message(mail)

    async def notify_new_contact(self, name: str, email: str, message: str) -> bool:
        """Send the notification; returns False instead of raising on failure."""
        if not self.enabled:
            logger.info("contact_notification_logged", sender_email=email, mode="disabled")
            return True

        mail = self.build_message(name, email, message)
        try:
            await asyncio.to_thread(self._deliver, mail)
        except (smtplib.SMTPException, OSError) as e:
            logger.warning("contact_notification_failed", sender_email=email, error=str(e))
            return False

        logger.info("contact_notification_sent", sender_email=email)
        return True


_notifier: ContactNotifier | None = None


def get_notifier() -> ContactNotifier:
    """Get or create the notifier instance."""
    global _notifier
    if _notifier is None:
        _notifier = ContactNotifier()
    return _notifier
