"""
Client application state.

`AppState` pairs a `PersistedState` (written to a JSON file between runs) with
a `TransientState` that always starts empty. Pages receive the `AppState`
instance they work on; there is no module-level store.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Literal

from pydantic import BaseModel, Field

from . import kenteken as plates

MAX_RECENT_SEARCHES = 10
DEFAULT_NOTIFICATION_MS = 5000
DEFAULT_TAB = "trekgewicht"

Severity = Literal["success", "error", "warning", "info"]
Clock = Callable[[], int]


def monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


class Session(BaseModel):
    user: dict[str, Any]
    token: str


class PersistedState(BaseModel):
    is_dark_mode: bool = False
    search_filters: dict[str, Any] = Field(default_factory=dict)
    recent_searches: list[str] = Field(default_factory=list)
    favorites: list[str] = Field(default_factory=list)
    active_tab: str = DEFAULT_TAB
    session: Session | None = None


@dataclass
class Notification:
    id: str
    severity: Severity
    title: str
    message: str
    duration_ms: int | None
    created_at_ms: int

    def expired(self, now_ms: int) -> bool:
        if self.duration_ms is None:
            return False
        return now_ms - self.created_at_ms >= self.duration_ms


@dataclass
class TransientState:
    search_results: list[dict[str, Any]] = field(default_factory=list)
    search_query: str = ""
    is_searching: bool = False
    vehicle_cache: dict[str, dict[str, Any]] = field(default_factory=dict)
    notifications: list[Notification] = field(default_factory=list)


class AppState:
    def __init__(
        self,
        persisted: PersistedState | None = None,
        *,
        path: Path | None = None,
        clock: Clock = monotonic_ms,
    ) -> None:
        self.persisted = persisted or PersistedState()
        self.transient = TransientState()
        self.path = path
        self.clock = clock

    @classmethod
    def load(cls, path: Path, *, clock: Clock = monotonic_ms) -> "AppState":
        """
        Restore the persisted subset from `path`; a missing file gives defaults.
        """
        path = Path(path)
        if path.exists():
            persisted = PersistedState.model_validate_json(path.read_text(encoding="utf-8"))
        else:
            persisted = PersistedState()
        return cls(persisted, path=path, clock=clock)

    def save(self, path: Path | None = None) -> Path:
        target = Path(path or self.path or "")
        if not str(target):
            raise ValueError("No path to save the app state to.")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.persisted.model_dump_json(indent=2), encoding="utf-8")
        self.path = target
        return target

    # Theme

    @property
    def is_dark_mode(self) -> bool:
        return self.persisted.is_dark_mode

    def toggle_dark_mode(self) -> bool:
        self.persisted.is_dark_mode = not self.persisted.is_dark_mode
        return self.persisted.is_dark_mode

    # Search

    def set_search_filters(self, filters: dict[str, Any]) -> None:
        self.persisted.search_filters = dict(filters)

    def set_search_query(self, query: str) -> None:
        self.transient.search_query = query

    def set_search_results(self, results: list[dict[str, Any]]) -> None:
        self.transient.search_results = list(results)

    def set_searching(self, is_searching: bool) -> None:
        self.transient.is_searching = is_searching

    def clear_search(self) -> None:
        self.persisted.search_filters = {}
        self.transient.search_results = []
        self.transient.search_query = ""
        self.transient.is_searching = False

    # Recent searches and favorites

    @property
    def recent_searches(self) -> list[str]:
        return list(self.persisted.recent_searches)

    def add_recent_search(self, kenteken: str) -> None:
        rest = [item for item in self.persisted.recent_searches if item != kenteken]
        self.persisted.recent_searches = [kenteken, *rest][:MAX_RECENT_SEARCHES]

    def clear_recent_searches(self) -> None:
        self.persisted.recent_searches = []

    @property
    def favorites(self) -> list[str]:
        return list(self.persisted.favorites)

    def add_favorite(self, kenteken: str) -> None:
        if kenteken not in self.persisted.favorites:
            self.persisted.favorites.append(kenteken)

    def remove_favorite(self, kenteken: str) -> None:
        self.persisted.favorites = [item for item in self.persisted.favorites if item != kenteken]

    def is_favorite(self, kenteken: str) -> bool:
        return kenteken in self.persisted.favorites

    # UI

    @property
    def active_tab(self) -> str:
        return self.persisted.active_tab

    def set_active_tab(self, tab: str) -> None:
        self.persisted.active_tab = tab

    # Vehicle cache

    def cache_vehicle(self, kenteken: str, vehicle: dict[str, Any]) -> None:
        self.transient.vehicle_cache[plates.normalize_license_plate(kenteken)] = vehicle

    def get_cached_vehicle(self, kenteken: str) -> dict[str, Any] | None:
        return self.transient.vehicle_cache.get(plates.normalize_license_plate(kenteken))

    # Auth session

    @property
    def session(self) -> Session | None:
        return self.persisted.session

    @property
    def token(self) -> str | None:
        return self.persisted.session.token if self.persisted.session else None

    def set_session(self, user: dict[str, Any], token: str) -> None:
        self.persisted.session = Session(user=user, token=token)

    def clear_session(self) -> None:
        self.persisted.session = None

    # Notifications

    def add_notification(
        self,
        severity: Severity,
        title: str,
        message: str = "",
        *,
        duration_ms: int | None = DEFAULT_NOTIFICATION_MS,
    ) -> str:
        """
        Queue a notification and return its id. `duration_ms=None` keeps it until removed.
        """
        notification = Notification(
            id=uuid.uuid4().hex,
            severity=severity,
            title=title,
            message=message,
            duration_ms=duration_ms,
            created_at_ms=self.clock(),
        )
        self.transient.notifications.append(notification)
        return notification.id

    def remove_notification(self, notification_id: str) -> None:
        self.transient.notifications = [
            n for n in self.transient.notifications if n.id != notification_id
        ]

    def clear_notifications(self) -> None:
        self.transient.notifications = []

    @property
    def notifications(self) -> list[Notification]:
        now = self.clock()
        self.transient.notifications = [n for n in self.transient.notifications if not n.expired(now)]
        return list(self.transient.notifications)
