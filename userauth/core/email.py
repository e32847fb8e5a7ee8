# userauth/core/email.py

import logging
from email.message import EmailMessage

import aiosmtplib

from userauth.core.configuration import settings

logger = logging.getLogger(__name__)


def build_message(to: str, html: str, subject: str) -> EmailMessage:
    message = EmailMessage()
    message["From"] = settings.MAIL_FROM
    message["To"] = to
    message["Subject"] = subject
    message.set_content("This message needs an HTML capable mail client.")
    message.add_alternative(html, subtype="html")
    return message


async def send_email(to: str, html: str, subject: str = "Change password") -> None:
    """
    Sends one HTML email through the configured SMTP server
    """
    message = build_message(to, html, subject)
    try:
        await aiosmtplib.send(
            message,
            hostname=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USERNAME,
            password=settings.SMTP_PASSWORD,
            start_tls=settings.SMTP_START_TLS,
        )
    except aiosmtplib.SMTPException as e:
        logger.error(f"Failed to send email to {to}: {e}")
        raise

    logger.info(f"Email '{subject}' sent to {to}")
