"""
Contact form handling: validate, then mail the operator and the submitter.
"""

from __future__ import annotations

import logging
import re

from carintel.core import config, errors, mail

from . import schemas, templates

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# The subject ends up in a mail header.
HEADER_BREAK = re.compile(r"[\r\n]")

logger = logging.getLogger(__name__)


def validate(payload: schemas.ContactRequest) -> schemas.ContactForm:
    name = (payload.name or "").strip()
    email = (payload.email or "").strip()
    subject = (payload.subject or "").strip()
    message = (payload.message or "").strip()
    if not name or not email or not subject or not message:
        raise errors.ValidationError("Alle velden zijn verplicht")
    if not EMAIL_PATTERN.match(email):
        raise errors.ValidationError("Ongeldig email adres")
    if HEADER_BREAK.search(subject):
        raise errors.ValidationError("Onderwerp mag geen regeleinden bevatten")
    return schemas.ContactForm(name=name, email=email, subject=subject, message=message)


def build_mails(form: schemas.ContactForm) -> tuple[mail.OutgoingMail, mail.OutgoingMail]:
    sent_at = templates.local_now()
    to_operator = mail.OutgoingMail(
        to=config.contact_to(),
        subject=templates.operator_subject(form),
        text=templates.operator_text(form),
        html=templates.operator_html(form),
        from_name="CarIntel Contact",
        reply_to=form.email,
    )
    to_submitter = mail.OutgoingMail(
        to=form.email,
        subject=templates.CONFIRMATION_SUBJECT,
        text=templates.confirmation_text(form, sent_at),
        html=templates.confirmation_html(form, sent_at),
    )
    return to_operator, to_submitter


async def submit(payload: schemas.ContactRequest) -> dict:
    form = validate(payload)
    to_operator, to_submitter = build_mails(form)
    try:
        await mail.send(to_operator)
        await mail.send(to_submitter)
    except mail.MailError as exc:
        logger.exception("contact_mail_failed")
        raise errors.InternalError("Er ging iets mis bij het versturen van je bericht") from exc

    return {"success": True, "message": "Bericht succesvol verzonden"}
