"""Client-side state containers.

Each container owns a cached view of server data, built with an explicit
``ApiClient``; ``invalidate`` drops the cache and ``refresh`` reloads it.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from .api_client import ApiClient


class AuthState:
    def __init__(self, client: ApiClient):
        self._client = client
        self.user: Optional[dict] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_admin(self) -> bool:
        return bool(self.user and self.user.get("role") == "admin")

    def login(self, email: str, password: str) -> dict:
        data = self._client.post("/api/auth/login", {"email": email, "password": password})
        self._client.token = data["token"]
        self.user = data["user"]
        return self.user

    def logout(self) -> None:
        try:
            self._client.post("/api/auth/logout")
        finally:
            self._client.token = None
            self.user = None

    def refresh(self) -> Optional[dict]:
        if not self._client.token:
            self.user = None
            return None
        self.user = self._client.get("/api/auth/profile")
        return self.user

    def update_profile(self, first_name: str, last_name: str) -> dict:
        self.user = self._client.put("/api/auth/profile", {"first_name": first_name, "last_name": last_name})
        return self.user

    def update_password(self, current_password: str, new_password: str) -> None:
        self._client.put(
            "/api/auth/password",
            {"current_password": current_password, "new_password": new_password},
        )


class TimeState:
    def __init__(self, client: ApiClient):
        self._client = client
        self.status: Optional[dict] = None
        self.stats: Optional[dict] = None
        self.entries: Optional[list] = None

    @property
    def is_clocked_in(self) -> bool:
        return bool(self.status and self.status.get("is_clocked_in"))

    def invalidate(self) -> None:
        self.status = None
        self.stats = None
        self.entries = None

    def refresh(self, *, start_date: Optional[date] = None, end_date: Optional[date] = None) -> None:
        self.status = self._client.get("/api/time/status")
        self.stats = self._client.get("/api/time/stats")
        self.entries = self._client.get(
            "/api/time/entries",
            startDate=start_date.isoformat() if start_date else None,
            endDate=end_date.isoformat() if end_date else None,
        )

    def clock_in(self) -> dict:
        entry = self._client.post("/api/time/clock-in")
        self.invalidate()
        self.refresh()
        return entry

    def clock_out(self) -> dict:
        entry = self._client.post("/api/time/clock-out")
        self.invalidate()
        self.refresh()
        return entry

    def delete_entry(self, entry_id: int) -> dict:
        result = self._client.delete(f"/api/time/entries/{int(entry_id)}")
        self.invalidate()
        return result


class PTOState:
    def __init__(self, client: ApiClient):
        self._client = client
        self.requests: Optional[list] = None
        self.monthly: dict[tuple[int, int], int] = {}
        self.yearly: dict[int, dict] = {}

    def invalidate(self) -> None:
        self.requests = None
        self.monthly.clear()
        self.yearly.clear()

    def refresh(self, *, search: Optional[str] = None) -> list:
        self.requests = self._client.get("/api/pto/user", search=search or None)
        return self.requests

    def monthly_count(self, year: int, month: int) -> int:
        """Approved hours for a 1-based month, cached until invalidated."""
        key = (int(year), int(month))
        if key not in self.monthly:
            self.monthly[key] = self._client.get(f"/api/pto/user/month/{key[0]}/{key[1]}")["count"]
        return self.monthly[key]

    def yearly_hours(self, year: int) -> dict:
        if int(year) not in self.yearly:
            self.yearly[int(year)] = self._client.get(f"/api/pto/user/year/{int(year)}")
        return self.yearly[int(year)]

    def create_request(self, request_date: date, hours: int, reason: str) -> dict:
        created: Any = self._client.post(
            "/api/pto/request",
            {"date": request_date.isoformat(), "hours": hours, "reason": reason},
        )
        self.invalidate()
        return created
