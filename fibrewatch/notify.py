"""
Mail delivery of a rendered diff.

The message is a multipart/alternative with a single text/html part, sent
from the configured Gmail address to itself over SMTPS.
"""

import smtplib
from email.header import Header
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from .config import Settings
from .errors import NotifyError
from .logger import get_logger

SMTP_HOST = "smtp.gmail.com"
SMTP_PORT = 465
SUBJECT = "Isère Fibre diff"


def compose_message(settings: Settings, markup: str) -> MIMEMultipart:
    if not settings.gmail_address:
        raise NotifyError("GMAIL_ADDRESS is not configured")
    msg = MIMEMultipart("alternative")
    msg["From"] = settings.gmail_address
    msg["To"] = settings.gmail_address
    msg["Subject"] = Header(SUBJECT, "utf-8")
    msg.attach(MIMEText(markup, "html", "utf-8"))
    return msg


def send_notification(settings: Settings, markup: str, smtp_factory=smtplib.SMTP_SSL) -> None:
    """Compose and send the diff mail.

    Args:
        settings: Run settings carrying the GMAIL_* values
        markup: Rendered diff from render_diff
        smtp_factory: Callable(host, port, timeout=...) returning an SMTP client

    Raises:
        NotifyError: On missing credentials or any SMTP/connection failure
    """
    logger = get_logger()
    msg = compose_message(settings, markup)
    if not settings.gmail_user or not settings.gmail_password:
        raise NotifyError("GMAIL_USER and GMAIL_PASSWORD are required to send mail")

    try:
        with smtp_factory(SMTP_HOST, SMTP_PORT, timeout=settings.fetch_timeout) as smtp:
            smtp.login(settings.gmail_user, settings.gmail_password)
            smtp.send_message(msg)
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Mail delivery failed", host=SMTP_HOST, error=str(e))
        raise NotifyError(f"Cannot send diff mail via {SMTP_HOST}: {e}") from e

    logger.record_notification()
    logger.info("Diff mail sent", to=settings.gmail_address)
