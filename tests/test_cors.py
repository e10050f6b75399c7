from fastapi.testclient import TestClient

from carintel.core import config
from carintel.main import app
from carintel.saved import service as saved_service


def test_allowed_origin_is_echoed():
    resp = TestClient(app).get("/health", headers={"Origin": "http://localhost:5173"})
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "http://localhost:5173"
    assert resp.headers["access-control-allow-credentials"] == "true"


def test_unknown_origin_falls_back():
    resp = TestClient(app).get("/health", headers={"Origin": "https://evil.example"})
    assert resp.headers["access-control-allow-origin"] == config.FALLBACK_ORIGIN


def test_extra_origins_from_env(monkeypatch):
    monkeypatch.setenv("CORS_EXTRA_ORIGINS", "https://staging.carintel.nl, ")
    resp = TestClient(app).get("/health", headers={"Origin": "https://staging.carintel.nl"})
    assert resp.headers["access-control-allow-origin"] == "https://staging.carintel.nl"


def test_preflight_short_circuits():
    resp = TestClient(app).options("/api/auth?action=login", headers={"Origin": "https://carintel.nl"})
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-methods"] == "GET, POST, PUT, DELETE, OPTIONS"
    assert resp.headers["access-control-allow-headers"] == "Content-Type, Authorization"


def test_error_responses_carry_cors_headers(fake_db):
    resp = TestClient(app).get("/api/auth?action=get-saved-searches", headers={"Origin": "https://carintel.nl"})
    assert resp.status_code == 401
    assert resp.headers["access-control-allow-origin"] == "https://carintel.nl"


def test_unexpected_error_is_500_with_cors(fake_db, monkeypatch):
    async def _boom(_user_id):
        raise RuntimeError("boom")

    monkeypatch.setattr(saved_service, "list_vehicles", _boom)
    client = TestClient(app)
    token = client.post(
        "/api/auth?action=register",
        json={"email": "jan@example.com", "password": "geheim123"},
    ).json()["token"]

    resp = client.get(
        "/api/auth?action=get-saved-vehicles",
        headers={"Authorization": f"Bearer {token}", "Origin": "https://carintel.nl"},
    )
    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error"}
    assert resp.headers["access-control-allow-origin"] == "https://carintel.nl"
