import uuid

from fastapi.testclient import TestClient

from carintel.main import app


def _client() -> TestClient:
    return TestClient(app)


def _token(client: TestClient, email: str) -> str:
    resp = client.post("/api/auth?action=register", json={"email": email, "password": "geheim123"})
    assert resp.status_code == 201, resp.text
    return resp.json()["token"]


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def test_saved_searches_crud_is_owner_scoped(fake_db):
    client = _client()
    alice = _token(client, "alice@example.com")
    bob = _token(client, "bob@example.com")

    created = client.post(
        "/api/auth?action=save-search-results",
        json={"name": "Trekhaken", "kentekens": ["AB123C", "12ABC3"], "searchQuery": "volkswagen"},
        headers=_auth(alice),
    )
    assert created.status_code == 201, created.text
    search = created.json()
    assert search["kenteken_count"] == 2
    assert search["kentekens"] == ["AB123C", "12ABC3"]

    listed = client.get("/api/auth?action=get-saved-searches", headers=_auth(alice)).json()
    assert [s["id"] for s in listed] == [search["id"]]
    assert listed[0]["kenteken_count"] == 2
    assert client.get("/api/auth?action=get-saved-searches", headers=_auth(bob)).json() == []

    stolen = client.request(
        "DELETE",
        "/api/auth?action=delete-saved-search",
        json={"searchId": search["id"]},
        headers=_auth(bob),
    )
    assert stolen.status_code == 404

    deleted = client.request(
        "DELETE",
        "/api/auth?action=delete-saved-search",
        json={"searchId": search["id"]},
        headers=_auth(alice),
    )
    assert deleted.status_code == 200
    assert fake_db.saved_searches == []


def test_save_search_requires_name_and_kentekens(fake_db):
    client = _client()
    token = _token(client, "alice@example.com")
    resp = client.post("/api/auth?action=save-search-results", json={"name": "x"}, headers=_auth(token))
    assert resp.status_code == 400
    assert resp.json()["error"] == "Kentekens en naam zijn verplicht"


def test_delete_saved_search_requires_id_and_tolerates_garbage(fake_db):
    client = _client()
    token = _token(client, "alice@example.com")

    missing = client.request("DELETE", "/api/auth?action=delete-saved-search", json={}, headers=_auth(token))
    assert missing.status_code == 400

    garbage = client.request(
        "DELETE",
        "/api/auth?action=delete-saved-search",
        json={"searchId": "not-a-uuid"},
        headers=_auth(token),
    )
    assert garbage.status_code == 404

    wrong_type = client.request(
        "DELETE",
        "/api/auth?action=delete-saved-search",
        json={"searchId": 42},
        headers=_auth(token),
    )
    assert wrong_type.status_code == 400
    assert wrong_type.json()["error"].startswith("searchId")


def test_delete_saved_items_accept_query_id(fake_db):
    client = _client()
    token = _token(client, "alice@example.com")
    search = client.post(
        "/api/auth?action=save-search-results",
        json={"name": "Trekhaken", "kentekens": ["AB123C"]},
        headers=_auth(token),
    ).json()
    vehicle = client.post(
        "/api/auth?action=save-vehicle",
        json={"kenteken": "AB123C", "vehicleData": {"merk": "VOLKSWAGEN"}},
        headers=_auth(token),
    ).json()

    by_search_id = client.delete(
        f"/api/auth?action=delete-saved-search&searchId={search['id']}", headers=_auth(token)
    )
    assert by_search_id.status_code == 200
    by_id = client.delete(f"/api/auth?action=delete-saved-vehicle&id={vehicle['id']}", headers=_auth(token))
    assert by_id.status_code == 200
    assert fake_db.saved_searches == []
    assert fake_db.saved_vehicles == []


def test_save_vehicle_conflicts_on_second_save(fake_db):
    client = _client()
    token = _token(client, "alice@example.com")
    payload = {"kenteken": "AB123C", "vehicleData": {"merk": "VOLKSWAGEN"}, "notes": "Caravan"}

    first = client.post("/api/auth?action=save-vehicle", json=payload, headers=_auth(token))
    assert first.status_code == 201, first.text
    assert first.json()["vehicle_data"] == {"merk": "VOLKSWAGEN"}

    second = client.post("/api/auth?action=save-vehicle", json=payload, headers=_auth(token))
    assert second.status_code == 409
    assert second.json()["error"] == "Dit voertuig is al opgeslagen"
    assert len(fake_db.saved_vehicles) == 1


def test_saved_vehicles_list_and_delete(fake_db):
    client = _client()
    alice = _token(client, "alice@example.com")
    bob = _token(client, "bob@example.com")
    vehicle = client.post(
        "/api/auth?action=save-vehicle",
        json={"kenteken": "AB123C", "vehicleData": {"merk": "VOLKSWAGEN"}},
        headers=_auth(alice),
    ).json()

    assert len(client.get("/api/auth?action=get-saved-vehicles", headers=_auth(alice)).json()) == 1
    assert client.get("/api/auth?action=get-saved-vehicles", headers=_auth(bob)).json() == []

    not_owned = client.request(
        "DELETE",
        "/api/auth?action=delete-saved-vehicle",
        json={"vehicleId": vehicle["id"]},
        headers=_auth(bob),
    )
    assert not_owned.status_code == 404

    unknown = client.request(
        "DELETE",
        "/api/auth?action=delete-saved-vehicle",
        json={"vehicleId": str(uuid.uuid4())},
        headers=_auth(alice),
    )
    assert unknown.status_code == 404

    deleted = client.request(
        "DELETE",
        "/api/auth?action=delete-saved-vehicle",
        json={"vehicleId": vehicle["id"]},
        headers=_auth(alice),
    )
    assert deleted.status_code == 200
    assert fake_db.saved_vehicles == []


def test_saved_actions_require_token(fake_db):
    resp = _client().get("/api/auth?action=get-saved-vehicles")
    assert resp.status_code == 401
    assert resp.json() == {"error": "Geen autorisatie token"}


def test_log_search_and_anonymous_search(fake_db):
    client = _client()
    token = _token(client, "alice@example.com")

    logged = client.post(
        "/api/auth?action=log-search",
        json={"searchQuery": "AB123C", "resultCount": 1},
        headers={**_auth(token), "X-Forwarded-For": "203.0.113.7, 10.0.0.1"},
    )
    assert logged.status_code == 200
    search_row = fake_db.activity_logs[-1]
    assert search_row["action"] == "SEARCH"
    assert str(search_row["ip_address"]) == "203.0.113.7"
    assert search_row["details"]["result_count"] == 1

    anonymous = client.post(
        "/api/auth?action=log-anonymous-search",
        json={"searchQuery": "Tesla", "searchType": "merk", "sessionId": "s-1"},
    )
    assert anonymous.status_code == 200
    assert fake_db.anonymous_searches[0]["search_type"] == "merk"

    incomplete = client.post("/api/auth?action=log-anonymous-search", json={"searchQuery": "Tesla"})
    assert incomplete.status_code == 400
