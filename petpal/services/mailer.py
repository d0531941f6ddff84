"""Outgoing email over SMTP."""
import logging
import smtplib
from email.message import EmailMessage

from petpal.config import Settings


logger = logging.getLogger(__name__)


TEMP_PASSWORD_SUBJECT = "PetPal - your temporary password"


def build_temp_password_email(settings: Settings, recipient: str, token: str) -> EmailMessage:
    """
    Compose the message carrying a temporary password code.

    The code is redeemed at ``POST /api/auth/temp-password/confirm`` for a
    temporary password. It stops working once the password changes.
    """
    msg = EmailMessage()
    msg["From"] = settings.email_from
    msg["To"] = recipient
    msg["Subject"] = TEMP_PASSWORD_SUBJECT
    msg.set_content(
        "Someone asked for a temporary password for your PetPal account.\n"
        "If it was not you, ignore this email; your password is unchanged.\n"
        "\n"
        "Send this code to /api/auth/temp-password/confirm to receive it:\n"
        "\n"
        f"Code: {token}\n"
    )
    return msg


def send_email(settings: Settings, msg: EmailMessage) -> bool:
    """
    Send a message through the configured SMTP server.

    Returns:
        True when the server accepted the message, False when sending is
        disabled or the server could not be reached
    """
    if not settings.smtp_host:
        logger.warning(f"SMTP is not configured; '{msg['Subject']}' was not sent")
        return False

    try:
        with smtplib.SMTP_SSL(settings.smtp_host, settings.smtp_port) as smtp:
            if settings.smtp_user:
                smtp.login(settings.smtp_user, settings.smtp_password)
            smtp.send_message(msg)
    except (smtplib.SMTPException, OSError):
        logger.error(f"Failed to send '{msg['Subject']}'", exc_info=True)
        return False

    return True
