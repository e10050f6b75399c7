import pytest
from fastapi.testclient import TestClient

from carintel.contact import schemas, service, templates
from carintel.core import errors, mail
from carintel.main import app

FORM = {
    "name": "Jan <b>de</b> Vries",
    "email": "jan@example.com",
    "subject": "Vraag over trekgewicht",
    "message": "Regel 1\nRegel 2 <script>",
}


@pytest.fixture
def outbox(monkeypatch):
    sent: list[mail.OutgoingMail] = []

    async def _send(message: mail.OutgoingMail) -> None:
        sent.append(message)

    monkeypatch.setattr(mail, "send", _send)
    return sent


def test_contact_sends_operator_and_confirmation_mail(outbox):
    resp = TestClient(app).post("/api/contact", json=FORM)
    assert resp.status_code == 200, resp.text
    assert resp.json() == {"success": True, "message": "Bericht succesvol verzonden"}

    operator, confirmation = outbox
    assert operator.to == "info@carintel.nl"
    assert operator.reply_to == "jan@example.com"
    assert operator.subject == "[CarIntel Contact] Vraag over trekgewicht"
    assert confirmation.to == "jan@example.com"
    assert confirmation.subject == templates.CONFIRMATION_SUBJECT


def test_contact_html_escapes_user_input(outbox):
    TestClient(app).post("/api/contact", json=FORM)
    operator, confirmation = outbox

    assert "<script>" not in operator.html
    assert "&lt;script&gt;" in operator.html
    assert "Regel 1<br>Regel 2" in operator.html
    assert "<b>de</b>" not in confirmation.html
    # plain text parts carry the raw message
    assert "<script>" in operator.text


@pytest.mark.parametrize(
    "override, error",
    [
        ({"name": "  "}, "Alle velden zijn verplicht"),
        ({"message": None}, "Alle velden zijn verplicht"),
        ({"email": "geen-email"}, "Ongeldig email adres"),
        ({"email": "jan @example.com"}, "Ongeldig email adres"),
        ({"subject": "Vraag\nover kenteken"}, "Onderwerp mag geen regeleinden bevatten"),
        ({"subject": "Vraag\r\nBcc: iedereen@example.com"}, "Onderwerp mag geen regeleinden bevatten"),
    ],
)
def test_contact_validation(outbox, override, error):
    resp = TestClient(app).post("/api/contact", json={**FORM, **override})
    assert resp.status_code == 400
    assert resp.json() == {"error": error}
    assert outbox == []


def test_contact_only_accepts_post(outbox):
    resp = TestClient(app).get("/api/contact")
    assert resp.status_code == 405


def test_mail_failure_is_reported_as_server_error(monkeypatch):
    async def _broken(_message):
        raise mail.MailError("SMTP send failed")

    monkeypatch.setattr(mail, "send", _broken)
    resp = TestClient(app).post("/api/contact", json=FORM)
    assert resp.status_code == 500
    assert resp.json() == {"error": "Er ging iets mis bij het versturen van je bericht"}


def test_validate_strips_fields():
    form = service.validate(schemas.ContactRequest(name=" Jan ", email=" jan@example.com ", subject=" Hoi ", message=" x "))
    assert form == schemas.ContactForm(name="Jan", email="jan@example.com", subject="Hoi", message="x")

    with pytest.raises(errors.ValidationError):
        service.validate(schemas.ContactRequest(name="Jan"))


def test_confirmation_uses_amsterdam_time():
    assert templates.local_now().tzinfo is templates.SENDER_TIMEZONE


def test_missing_smtp_credentials_raise_mail_error(monkeypatch):
    monkeypatch.delenv("EMAIL_USER", raising=False)
    monkeypatch.delenv("EMAIL_PASS", raising=False)
    message = mail.OutgoingMail(to="a@example.com", subject="s", text="t", html="<p>t</p>")
    with pytest.raises(mail.MailError):
        mail._send_sync(message)


def test_build_message_sets_reply_to_and_alternative():
    message = mail.OutgoingMail(
        to="info@carintel.nl",
        subject="Onderwerp",
        text="tekst",
        html="<p>tekst</p>",
        from_name="CarIntel Contact",
        reply_to="jan@example.com",
    )
    built = mail.build_message(message, sender="noreply@carintel.nl")
    assert built["Reply-To"] == "jan@example.com"
    sender = built["From"].addresses[0]
    assert sender.display_name == "CarIntel Contact"
    assert sender.addr_spec == "noreply@carintel.nl"
    assert built.is_multipart()
