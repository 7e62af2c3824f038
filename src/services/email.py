"""Email delivery over SMTP."""

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage as MIMEMessage
from email.utils import formataddr

from src.config import get_settings

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """Raised when a message could not be handed to the mail server."""


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    body: str


class EmailService:
    """Sends plain-text email through the configured SMTP server."""

    def __init__(self) -> None:
        self.settings = get_settings()

    def send(self, message: EmailMessage) -> None:
        """Send a message. Raises EmailDeliveryError on any failure.

        This blocks on network I/O; async callers should run it in a
        threadpool.
        """
        if not self.settings.smtp_host:
            logger.warning("SMTP_HOST not configured, cannot send email")
            raise EmailDeliveryError("SMTP is not configured")

        mime = MIMEMessage()
        mime["From"] = formataddr((self.settings.from_name, self.settings.from_email))
        mime["To"] = message.to
        mime["Subject"] = message.subject
        mime.set_content(message.body)

        try:
            with smtplib.SMTP(self.settings.smtp_host, self.settings.smtp_port, timeout=30) as smtp:
                if self.settings.smtp_use_tls:
                    smtp.starttls()
                if self.settings.smtp_username and self.settings.smtp_password:
                    smtp.login(self.settings.smtp_username, self.settings.smtp_password)
                smtp.send_message(mime)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {message.to}: {e}")
            raise EmailDeliveryError(str(e)) from e

        logger.info(f"Sent email '{message.subject}' to {message.to}")


def get_email_service() -> EmailService:
    """Get an email service instance."""
    return EmailService()
