"""
Notification Service — Admin email alerts over SMTP.
"""
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr

from formpay.config import Settings
from formpay.logging_config import get_logger
from formpay.models.contact import ContactMessage


class NotificationService:
    """Sends best-effort email notifications; never raises to the caller."""

    def __init__(self, settings: Settings, logger=None):
        self.settings = settings
        self.logger = logger or get_logger("notification")

    @property
    def enabled(self) -> bool:
        s = self.settings
        return bool(s.EMAIL_USER and s.EMAIL_PASS and s.ADMIN_EMAIL)

    def send_email(self, subject: str, body: str, to: str) -> None:
        """Deliver one plain-text message. Raises smtplib.SMTPException / OSError."""
        s = self.settings
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = formataddr((s.APP_NAME, s.EMAIL_USER))
        msg["To"] = to
        msg.set_content(body)

        if s.SMTP_USE_SSL:
            ctx = ssl.create_default_context()
            with smtplib.SMTP_SSL(s.SMTP_HOST, s.SMTP_PORT, context=ctx, timeout=s.SMTP_TIMEOUT_SECONDS) as smtp:
                smtp.login(s.EMAIL_USER, s.EMAIL_PASS)
                smtp.send_message(msg)
        else:
            with smtplib.SMTP(s.SMTP_HOST, s.SMTP_PORT, timeout=s.SMTP_TIMEOUT_SECONDS) as smtp:
                smtp.ehlo()
                smtp.starttls(context=ssl.create_default_context())
                smtp.ehlo()
                smtp.login(s.EMAIL_USER, s.EMAIL_PASS)
                smtp.send_message(msg)

    def notify_contact(self, contact: ContactMessage) -> bool:
        """Email the admin about a new contact message. Returns True if sent."""
        if not self.enabled:
            self.logger.info("contact_email_skipped", reason="email not configured", contact_id=contact.id)
            return False

        body = (
            f"Name: {contact.name}\n"
            f"Email: {contact.email}\n"
            f"Phone: {contact.phone or 'Not provided'}\n"
            f"Subject: {contact.subject}\n"
            f"Message: {contact.message}\n"
        )
        try:
            self.send_email(
                subject=f"New Contact Form Submission: {contact.subject}",
                body=body,
                to=self.settings.ADMIN_EMAIL,
            )
        except (smtplib.SMTPException, OSError):
            self.logger.exception("contact_email_failed", contact_id=contact.id)
            return False

        self.logger.info("contact_email_sent", contact_id=contact.id)
        return True
