import logging

import asyncpg
from fastapi.testclient import TestClient

from carintel.activity import repository as activity_repository
from carintel.auth import security
from carintel.main import app


def _client() -> TestClient:
    return TestClient(app)


def _register(client: TestClient, email: str = "jan@example.com", password: str = "geheim123", name: str = "Jan"):
    return client.post(
        "/api/auth",
        params={"action": "register"},
        json={"email": email, "password": password, "name": name},
    )


def test_register_returns_user_and_token(fake_db):
    resp = _register(_client())
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["user"]["email"] == "jan@example.com"
    assert body["user"]["role"] == "user"
    assert body["token"]
    assert [r["action"] for r in fake_db.activity_logs] == ["REGISTER"]


def test_register_stores_email_lowercased(fake_db):
    resp = _register(_client(), email="  Jan@Example.COM ")
    assert resp.status_code == 201
    assert fake_db.users[0]["email"] == "jan@example.com"


def test_duplicate_registration_conflicts_without_new_row(fake_db):
    client = _client()
    assert _register(client).status_code == 201

    resp = _register(client, email="JAN@example.com")
    assert resp.status_code == 409
    assert resp.json() == {"error": "Gebruiker bestaat al met dit email adres"}
    assert len(fake_db.users) == 1


def test_register_requires_email_and_password(fake_db):
    resp = _client().post("/api/auth?action=register", json={"email": "jan@example.com"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Email en wachtwoord zijn verplicht"


def test_register_rejects_short_password(fake_db):
    resp = _register(_client(), password="12345")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Wachtwoord moet minimaal 6 karakters lang zijn"
    assert fake_db.users == []


def test_login_token_verifies_to_same_user(fake_db):
    client = _client()
    registered = _register(client).json()

    resp = client.post("/api/auth?action=login", json={"email": "jan@example.com", "password": "geheim123"})
    assert resp.status_code == 200, resp.text
    token = resp.json()["token"]

    claims = security.decode_access_token(token)
    assert claims["sub"] == registered["user"]["id"]

    verified = client.post("/api/auth?action=verify", json={"token": token})
    assert verified.status_code == 200
    assert verified.json()["user"]["id"] == registered["user"]["id"]


def test_login_unknown_email_and_wrong_password(fake_db):
    client = _client()
    _register(client)

    unknown = client.post("/api/auth?action=login", json={"email": "piet@example.com", "password": "geheim123"})
    assert unknown.status_code == 401
    assert unknown.json()["error"] == "Gebruiker niet gevonden"

    wrong = client.post("/api/auth?action=login", json={"email": "jan@example.com", "password": "fout-wachtwoord"})
    assert wrong.status_code == 401
    assert wrong.json()["error"] == "Ongeldig wachtwoord"


def test_verify_garbage_token_returns_null_user(fake_db):
    resp = _client().post("/api/auth?action=verify", json={"token": "not-a-jwt"})
    assert resp.status_code == 200
    assert resp.json() == {"user": None}


def test_verify_requires_token(fake_db):
    resp = _client().post("/api/auth?action=verify", json={})
    assert resp.status_code == 400


def test_unknown_action_and_wrong_method(fake_db):
    client = _client()

    unknown = client.post("/api/auth?action=bogus", json={})
    assert unknown.status_code == 400
    assert unknown.json() == {"error": "Invalid action"}

    wrong_method = client.get("/api/auth?action=login")
    assert wrong_method.status_code == 405
    assert wrong_method.json() == {"error": "Method not allowed"}


def test_admin_stats_requires_token_and_admin_role(fake_db):
    client = _client()

    missing = client.get("/api/auth?action=admin-stats")
    assert missing.status_code == 401

    user_token = _register(client).json()["token"]
    forbidden = client.get("/api/auth?action=admin-stats", headers={"Authorization": f"Bearer {user_token}"})
    assert forbidden.status_code == 403
    assert forbidden.json() == {"error": "Geen admin rechten"}


def test_admin_stats_for_admin(fake_db):
    client = _client()
    _register(client)
    admin_token = security.build_access_token(
        user_id="00000000-0000-0000-0000-000000000001",
        email="admin@carintel.nl",
        role="admin",
    )

    resp = client.get("/api/auth?action=admin-stats", headers={"Authorization": f"Bearer {admin_token}"})
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["totalUsers"] == 1
    assert body["totalSavedSearches"] == 0
    assert body["recentUsers"] == []


def test_admin_logs_paginates(fake_db):
    client = _client()
    for index in range(3):
        _register(client, email=f"user{index}@example.com")
    admin_token = security.build_access_token(
        user_id="00000000-0000-0000-0000-000000000001",
        email="admin@carintel.nl",
        role="admin",
    )

    resp = client.get(
        "/api/auth",
        params={"action": "admin-logs", "page": 2, "limit": 2},
        headers={"Authorization": f"Bearer {admin_token}"},
    )
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert len(body["logs"]) == 1
    assert body["pagination"] == {"page": 2, "limit": 2, "total": 3, "pages": 2}


def test_expired_token_is_rejected(fake_db):
    token = security.build_access_token(
        user_id="00000000-0000-0000-0000-000000000001",
        email="jan@example.com",
        role="user",
        issued_at=1_000_000,
    )
    resp = _client().get("/api/auth?action=get-saved-searches", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


def test_activity_failure_does_not_fail_registration(fake_db, monkeypatch, caplog):
    async def _broken(_conn, **_fields):
        raise asyncpg.PostgresError("activity_logs is unavailable")

    monkeypatch.setattr(activity_repository, "insert_activity", _broken)
    caplog.set_level(logging.ERROR)

    resp = _register(_client())
    assert resp.status_code == 201
    assert len(fake_db.users) == 1
    assert "activity_log_failed" in caplog.text


def test_register_rejects_password_over_72_bytes(fake_db):
    resp = _register(_client(), password="x" * 100)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Wachtwoord mag maximaal 72 bytes lang zijn"}
    assert fake_db.users == []

    # multi-byte characters count by their UTF-8 size
    assert _register(_client(), password="é" * 37).status_code == 400
    assert _register(_client(), password="x" * 72).status_code == 201
