# ielts_portal/services/mail_service.py
import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr

from ielts_portal.core.config import settings

logger = logging.getLogger(__name__)


class MailError(Exception):
    pass


class MailSender:
    """
    Sends plain-text mail over SMTP with STARTTLS.

    Endpoints take the sender through get_mail_sender so tests can swap in
    a recorder.
    """

    def send(self, to: str, subject: str, body: str) -> None:
        if not settings.MAIL_SMTP_SERVER:
            raise MailError("SMTP server is not configured")

        message = EmailMessage()
        message["From"] = formataddr(
            (settings.MAIL_SENDER_NAME, settings.MAIL_SENDER_EMAIL or settings.MAIL_USERNAME or "")
        )
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)

        try:
            with smtplib.SMTP(settings.MAIL_SMTP_SERVER, settings.MAIL_SMTP_PORT, timeout=30) as smtp:
                smtp.starttls()
                if settings.MAIL_USERNAME:
                    smtp.login(settings.MAIL_USERNAME, settings.MAIL_PASSWORD or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise MailError(f"Sending mail to {to} failed: {e}") from e
        logger.info(f"Sent mail '{subject}' to {to}")


_mail_sender = MailSender()


def get_mail_sender() -> MailSender:
    return _mail_sender
