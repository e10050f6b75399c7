"""
Typed bindings for the CarIntel HTTP API.

Works with any `httpx.Client` whose base URL points at the API host (a
FastAPI `TestClient` included).
"""

from __future__ import annotations

from typing import Any

import httpx

from .store import AppState


class ApiError(RuntimeError):
    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


def _error_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text[:500] or resp.reason_phrase
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return resp.reason_phrase


class CarIntelApi:
    def __init__(self, http: httpx.Client, state: AppState | None = None) -> None:
        self.http = http
        self.state = state or AppState()

    def _headers(self, *, auth: bool) -> dict[str, str]:
        if not auth:
            return {}
        token = self.state.token
        if not token:
            raise ApiError(401, "Geen autorisatie token")
        return {"Authorization": f"Bearer {token}"}

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        auth: bool = False,
    ) -> Any:
        resp = self.http.request(
            method,
            path,
            params={k: v for k, v in (params or {}).items() if v is not None},
            json=json,
            headers=self._headers(auth=auth),
        )
        if resp.status_code >= 400:
            raise ApiError(resp.status_code, _error_message(resp))
        return resp.json() if resp.content else None

    def _auth(self, method: str, action: str, **kwargs: Any) -> Any:
        params = {"action": action, **kwargs.pop("params", {})}
        return self._request(method, "/api/auth", params=params, **kwargs)

    def _sketches(self, method: str, action: str, sketch_id: str | None = None, **kwargs: Any) -> Any:
        return self._request(
            method,
            "/api/sketches",
            params={"action": action, "id": sketch_id},
            auth=True,
            **kwargs,
        )

    # Accounts

    def register(self, email: str, password: str, name: str | None = None) -> dict:
        data = self._auth("POST", "register", json={"email": email, "password": password, "name": name})
        self.state.set_session(data["user"], data["token"])
        return data

    def login(self, email: str, password: str) -> dict:
        data = self._auth("POST", "login", json={"email": email, "password": password})
        self.state.set_session(data["user"], data["token"])
        return data

    def logout(self) -> None:
        self.state.clear_session()

    def verify(self, token: str | None = None) -> dict | None:
        token = token or self.state.token
        data = self._auth("POST", "verify", json={"token": token})
        return data.get("user")

    def admin_stats(self) -> dict:
        return self._auth("GET", "admin-stats", auth=True)

    def admin_logs(self, *, page: int = 1, limit: int = 50) -> dict:
        return self._auth("GET", "admin-logs", params={"page": page, "limit": limit}, auth=True)

    def cleanup_old_data(self) -> dict:
        return self._auth("POST", "cleanup-old-data", auth=True)

    # Search logging

    def log_search(self, query: str, filters: dict | None = None, result_count: int = 0) -> dict:
        return self._auth(
            "POST",
            "log-search",
            json={"searchQuery": query, "searchFilters": filters, "resultCount": result_count},
            auth=True,
        )

    def log_anonymous_search(
        self,
        query: str,
        search_type: str,
        *,
        filters: dict | None = None,
        result_count: int = 0,
        session_id: str | None = None,
    ) -> dict:
        return self._auth(
            "POST",
            "log-anonymous-search",
            json={
                "searchQuery": query,
                "searchType": search_type,
                "searchFilters": filters,
                "resultCount": result_count,
                "sessionId": session_id,
            },
        )

    # Saved items

    def save_search_results(
        self,
        name: str,
        kentekens: list[str],
        *,
        query: str | None = None,
        filters: dict | None = None,
    ) -> dict:
        return self._auth(
            "POST",
            "save-search-results",
            json={"name": name, "kentekens": kentekens, "searchQuery": query, "searchFilters": filters},
            auth=True,
        )

    def get_saved_searches(self) -> list[dict]:
        return self._auth("GET", "get-saved-searches", auth=True)

    def delete_saved_search(self, search_id: str) -> dict:
        return self._auth("DELETE", "delete-saved-search", json={"searchId": search_id}, auth=True)

    def save_vehicle(self, kenteken: str, vehicle_data: dict, notes: str | None = None) -> dict:
        return self._auth(
            "POST",
            "save-vehicle",
            json={"kenteken": kenteken, "vehicleData": vehicle_data, "notes": notes},
            auth=True,
        )

    def get_saved_vehicles(self) -> list[dict]:
        return self._auth("GET", "get-saved-vehicles", auth=True)

    def delete_saved_vehicle(self, vehicle_id: str) -> dict:
        return self._auth("DELETE", "delete-saved-vehicle", json={"vehicleId": vehicle_id}, auth=True)

    # Sketches

    def list_sketches(self) -> list[dict]:
        return self._sketches("GET", "list")["sketches"]

    def get_sketch(self, sketch_id: str) -> dict:
        return self._sketches("GET", "get", sketch_id)["sketch"]

    def save_sketch(self, sketch: dict) -> dict:
        return self._sketches("POST", "save", json=sketch)["sketch"]

    def update_sketch(self, sketch_id: str, sketch: dict) -> dict:
        return self._sketches("PUT", "update", sketch_id, json=sketch)["sketch"]

    def delete_sketch(self, sketch_id: str) -> dict:
        return self._sketches("DELETE", "delete", sketch_id)

    # Misc

    def contact(self, name: str, email: str, subject: str, message: str) -> dict:
        return self._request(
            "POST",
            "/api/contact",
            json={"name": name, "email": email, "subject": subject, "message": message},
        )

    def init_db(self) -> dict:
        return self._request("POST", "/api/init-db")

    def maintenance(self, action: str) -> dict:
        return self._request("POST", "/api/maintenance", params={"action": action})
