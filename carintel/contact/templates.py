"""
Mail bodies for the contact form.

All user-supplied text goes through `html.escape` before it lands in HTML.
"""

from __future__ import annotations

from datetime import datetime
from html import escape
from zoneinfo import ZoneInfo

from . import schemas

SENDER_TIMEZONE = ZoneInfo("Europe/Amsterdam")


def local_now() -> datetime:
    return datetime.now(SENDER_TIMEZONE)

_STYLE = (
    "body{font-family:Arial,sans-serif;line-height:1.6;color:#333}"
    ".container{max-width:600px;margin:0 auto;padding:20px}"
    ".header{background:#1e40af;color:#fff;padding:20px;border-radius:10px 10px 0 0}"
    ".content{background:#f8fafc;padding:20px;border-radius:0 0 10px 10px}"
    ".label{font-weight:bold;color:#374151}"
    ".value{background:#fff;padding:10px;border-left:4px solid #3b82f6}"
)


def _page(title: str, body: str) -> str:
    return (
        "<!DOCTYPE html><html><head><meta charset=\"utf-8\">"
        f"<style>{_STYLE}</style></head><body><div class=\"container\">"
        f"<div class=\"header\"><h2>{title}</h2></div>"
        f"<div class=\"content\">{body}</div>"
        "</div></body></html>"
    )


def _multiline(text: str) -> str:
    return escape(text).replace("\n", "<br>")


def operator_subject(form: schemas.ContactForm) -> str:
    return f"[CarIntel Contact] {form.subject}"


def operator_text(form: schemas.ContactForm) -> str:
    return (
        "Nieuw contact bericht van CarIntel website\n\n"
        f"Van: {form.name} ({form.email})\n"
        f"Onderwerp: {form.subject}\n\n"
        "Bericht:\n"
        f"{form.message}\n\n"
        "---\n"
        "Dit bericht is verzonden via het contactformulier op de CarIntel website.\n"
    )


def operator_html(form: schemas.ContactForm) -> str:
    body = (
        f"<p class=\"label\">Van:</p><p class=\"value\">{escape(form.name)} ({escape(form.email)})</p>"
        f"<p class=\"label\">Onderwerp:</p><p class=\"value\">{escape(form.subject)}</p>"
        f"<p class=\"label\">Bericht:</p><p class=\"value\">{_multiline(form.message)}</p>"
        "<p><strong>Tip:</strong> Antwoord direct op deze email om contact op te nemen met de verzender.</p>"
    )
    return _page("Nieuw Contact Bericht - CarIntel", body)


CONFIRMATION_SUBJECT = "Bedankt voor je bericht - CarIntel"


def confirmation_text(form: schemas.ContactForm, sent_at: datetime) -> str:
    return (
        f"Beste {form.name},\n\n"
        "Bedankt voor je bericht! We hebben je contactformulier succesvol ontvangen.\n\n"
        "Je bericht details:\n"
        f"- Onderwerp: {form.subject}\n"
        f"- Verzonden op: {sent_at:%d-%m-%Y %H:%M}\n\n"
        "Ons team bekijkt je bericht en we nemen binnen 24 uur contact met je op tijdens werkdagen.\n\n"
        "Met vriendelijke groet,\n"
        "Het CarIntel Team\n"
        "info@carintel.nl\n"
    )


def confirmation_html(form: schemas.ContactForm, sent_at: datetime) -> str:
    body = (
        f"<p>Beste {escape(form.name)},</p>"
        "<p>Bedankt voor je bericht! We hebben je contactformulier succesvol ontvangen.</p>"
        f"<p class=\"value\"><strong>Onderwerp:</strong> {escape(form.subject)}<br>"
        f"<strong>Verzonden op:</strong> {sent_at:%d-%m-%Y %H:%M}</p>"
        "<p>Ons team bekijkt je bericht en we nemen binnen 24 uur contact met je op tijdens werkdagen.</p>"
        "<p><a href=\"https://carintel.nl\">Terug naar CarIntel</a></p>"
        "<p>Met vriendelijke groet,<br>Het CarIntel Team<br>info@carintel.nl</p>"
    )
    return _page("Bericht ontvangen!", body)
