"""
SMTP mail transport.

smtplib is blocking, so sends run in a worker thread.
"""

from __future__ import annotations

import asyncio
import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.headerregistry import Address
from email.message import EmailMessage

from . import config

logger = logging.getLogger(__name__)


class MailError(RuntimeError):
    pass


@dataclass(frozen=True)
class OutgoingMail:
    to: str
    subject: str
    text: str
    html: str
    from_name: str = "CarIntel"
    reply_to: str | None = None


def build_message(mail: OutgoingMail, *, sender: str) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = Address(display_name=mail.from_name, addr_spec=sender)
    msg["To"] = mail.to
    msg["Subject"] = mail.subject
    if mail.reply_to:
        msg["Reply-To"] = mail.reply_to
    msg.set_content(mail.text)
    msg.add_alternative(mail.html, subtype="html")
    return msg


def _send_sync(mail: OutgoingMail) -> None:
    sender = config.smtp_user()
    password = config.smtp_password()
    if not sender or not password:
        raise MailError("EMAIL_USER / EMAIL_PASS are not configured.")

    msg = build_message(mail, sender=sender)
    context = ssl.create_default_context()
    try:
        with smtplib.SMTP(config.smtp_host(), config.smtp_port(), timeout=30) as server:
            server.starttls(context=context)
            server.login(sender, password)
            server.send_message(msg)
    except (smtplib.SMTPException, OSError) as exc:
        raise MailError(f"SMTP send failed: {exc}") from exc


async def send(mail: OutgoingMail) -> None:
    await asyncio.to_thread(_send_sync, mail)
    logger.info("mail_sent subject=%r", mail.subject)
