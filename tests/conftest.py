from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.timeclock.timeclock.common.tokens import TokenService
from src.timeclock.timeclock.container import wire
from src.timeclock.timeclock.core.enums import EntryStatus, PTOStatus, Role
from src.timeclock.timeclock.core.exceptions import BusinessRuleError
from src.timeclock.timeclock.main import create_app
from src.timeclock.timeclock.pto.model import PTORequest
from src.timeclock.timeclock.reports.model import TimeLogQuery, TimeLogRow
from src.timeclock.timeclock.time_entries.model import TimeEntry
from src.timeclock.timeclock.users.model import PopulatedUser, User, UserReference

FAST_HASH = "pbkdf2:sha256:1000"

ADMIN_PASSWORD = "Admin123!"
STAFF_PASSWORD = "Staff123!"


class InMemoryUsers:
    def __init__(self):
        self._users: dict[int, User] = {}
        self._id = 0

    def add(self, *, first_name, last_name, email, password, role=Role.USER, position="Engineer", is_active=True) -> User:
        user_id = self.create_user(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=generate_password_hash(password, method=FAST_HASH),
            role=role,
            position=position,
        )
        if not is_active:
            self._users[user_id] = replace(self._users[user_id], is_active=False)
        return self._users[user_id]

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._users.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self._users.values() if u.email == email), None)

    def create_user(self, *, first_name, last_name, email, password_hash, role, position) -> int:
        self._id += 1
        self._users[self._id] = User(
            user_id=self._id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=password_hash,
            role=role,
            position=position,
            created_at=datetime(2026, 1, 1, 9, 0),
        )
        return self._id

    def update_profile(self, user_id: int, *, first_name: str, last_name: str) -> bool:
        if user_id not in self._users:
            return False
        self._users[user_id] = replace(self._users[user_id], first_name=first_name, last_name=last_name)
        return True

    def update_password_hash(self, user_id: int, *, password_hash: str) -> bool:
        if user_id not in self._users:
            return False
        self._users[user_id] = replace(self._users[user_id], password_hash=password_hash)
        return True

    def update_role(self, user_id: int, *, role: Role) -> bool:
        if user_id not in self._users:
            return False
        self._users[user_id] = replace(self._users[user_id], role=role)
        return True

    def list_all(self):
        return sorted(self._users.values(), key=lambda u: (u.last_name, u.first_name))


class InMemoryTimeEntries:
    """Mirrors the store's one-open-entry-per-user unique key."""

    def __init__(self):
        self._entries: dict[int, TimeEntry] = {}
        self._id = 0

    def add(self, *, user_id: int, clock_in: datetime, clock_out: Optional[datetime] = None) -> TimeEntry:
        self._id += 1
        hours = (clock_out - clock_in).total_seconds() / 3600 if clock_out else 0.0
        self._entries[self._id] = TimeEntry(
            entry_id=self._id,
            user_id=user_id,
            work_date=clock_in.date(),
            clock_in=clock_in,
            clock_out=clock_out,
            total_hours=hours,
        )
        return self._entries[self._id]

    def all(self):
        return list(self._entries.values())

    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        return self._entries.get(int(entry_id))

    def get_active_for_user(self, user_id: int) -> Optional[TimeEntry]:
        return next((e for e in self._entries.values() if e.user_id == user_id and e.is_active), None)

    def create_clock_in(self, *, user_id: int, work_date: date, clock_in: datetime) -> int:
        if any(e.user_id == user_id and e.is_active for e in self._entries.values()):
            raise BusinessRuleError("You already have an active time entry")
        return self.add(user_id=user_id, clock_in=clock_in).entry_id

    def close_entry(self, *, entry_id: int, clock_out: datetime, total_hours: float) -> bool:
        e = self._entries.get(entry_id)
        if not e or not e.is_active:
            return False
        self._entries[entry_id] = replace(e, clock_out=clock_out, total_hours=total_hours)
        return True

    def _for_user(self, user_id, start_date, end_date):
        items = [e for e in self._entries.values() if e.user_id == user_id]
        if start_date and end_date:
            items = [e for e in items if start_date <= e.work_date <= end_date]
        items.sort(key=lambda e: (e.work_date, e.clock_in), reverse=True)
        return items

    def list_for_user(self, user_id: int, *, start_date=None, end_date=None, limit=None, offset=0):
        items = self._for_user(user_id, start_date, end_date)
        if limit is not None:
            items = items[offset : offset + limit]
        return items

    def count_for_user(self, user_id: int, *, start_date=None, end_date=None) -> int:
        return len(self._for_user(user_id, start_date, end_date))

    def list_overlapping(self, user_id: int, *, window_start: datetime, window_end: datetime):
        return [
            e
            for e in self._entries.values()
            if e.user_id == user_id
            and e.clock_in < window_end
            and (e.clock_out is None or e.clock_out > window_start)
        ]

    def delete_completed(self, entry_id: int) -> bool:
        e = self._entries.get(entry_id)
        if not e or e.is_active:
            return False
        del self._entries[entry_id]
        return True


class InMemoryPTO:
    def __init__(self, users: InMemoryUsers):
        self._users = users
        self._requests: dict[int, PTORequest] = {}
        self._id = 0

    def _populate(self, req: PTORequest) -> PTORequest:
        user = self._users.get_by_id(req.user_id)
        return replace(req, owner=PopulatedUser(user) if user else UserReference(req.user_id))

    def add(self, *, user_id: int, request_date: date, hours: int, reason="Vacation", status=PTOStatus.PENDING) -> PTORequest:
        rid = self.create_request(
            user_id=user_id,
            request_date=request_date,
            hours=hours,
            reason=reason,
            expiry_year=request_date.year,
        )
        if status != PTOStatus.PENDING:
            self._requests[rid] = replace(self._requests[rid], status=status)
        return self.get_by_id(rid)

    def create_request(self, *, user_id, request_date, hours, reason, expiry_year) -> int:
        self._id += 1
        self._requests[self._id] = PTORequest(
            request_id=self._id,
            owner=UserReference(user_id),
            request_date=request_date,
            hours=hours,
            reason=reason,
            status=PTOStatus.PENDING,
            expiry_year=expiry_year,
            created_at=datetime(2026, 1, 1, 9, 0, self._id % 60),
        )
        return self._id

    def get_by_id(self, request_id: int) -> Optional[PTORequest]:
        req = self._requests.get(int(request_id))
        return self._populate(req) if req else None

    def decide(self, *, request_id, status, approved_by, approval_date) -> bool:
        req = self._requests.get(int(request_id))
        if not req or req.status != PTOStatus.PENDING:
            return False
        self._requests[req.request_id] = replace(req, status=status, approved_by=approved_by, approval_date=approval_date)
        return True

    def sum_approved_hours(self, user_id: int, *, start_date: date, end_date: date) -> int:
        return sum(
            r.hours
            for r in self._requests.values()
            if r.user_id == user_id and r.status == PTOStatus.APPROVED and start_date <= r.request_date <= end_date
        )

    def _newest_first(self, items):
        return [self._populate(r) for r in sorted(items, key=lambda r: r.request_id, reverse=True)]

    def list_for_user(self, user_id: int):
        return self._newest_first(r for r in self._requests.values() if r.user_id == user_id)

    def list_all(self, *, status=None):
        return self._newest_first(r for r in self._requests.values() if status is None or r.status == status)


class InMemoryReports:
    def __init__(self, users: InMemoryUsers, entries: InMemoryTimeEntries):
        self._users = users
        self._entries = entries

    def _rows(self, query: TimeLogQuery):
        rows = []
        for e in self._entries.all():
            user = self._users.get_by_id(e.user_id)
            if query.start_date and query.end_date and not query.start_date <= e.work_date <= query.end_date:
                continue
            if query.status == EntryStatus.ACTIVE and not e.is_active:
                continue
            if query.status == EntryStatus.COMPLETED and e.is_active:
                continue
            term = query.search.lower()
            if term and not any(
                term in field
                for field in (user.first_name.lower(), user.last_name.lower(), user.email, e.work_date.isoformat())
            ):
                continue
            rows.append(TimeLogRow(entry=e, user=user))
        rows.sort(key=lambda r: (r.entry.work_date, r.entry.clock_in), reverse=True)
        return rows

    def search_time_logs(self, query: TimeLogQuery, *, limit=None, offset=0):
        rows = self._rows(query)
        return rows[offset : offset + limit] if limit is not None else rows

    def count_time_logs(self, query: TimeLogQuery) -> int:
        return len(self._rows(query))

    def completed_entries_between(self, start_date: date, end_date: date):
        query = TimeLogQuery(status=EntryStatus.COMPLETED, start_date=start_date, end_date=end_date)
        return sorted(self._rows(query), key=lambda r: (r.user.user_id, r.entry.clock_in))


@pytest.fixture
def fixed_now() -> datetime:
    # Wednesday
    return datetime(2026, 3, 11, 15, 0, 0)


@pytest.fixture
def users() -> InMemoryUsers:
    return InMemoryUsers()


@pytest.fixture
def admin(users) -> User:
    return users.add(
        first_name="Ada",
        last_name="Admin",
        email="admin@example.com",
        password=ADMIN_PASSWORD,
        role=Role.ADMIN,
        position="Administrator",
    )


@pytest.fixture
def staff(users) -> User:
    return users.add(first_name="Jane", last_name="Doe", email="jane@example.com", password=STAFF_PASSWORD)


@pytest.fixture
def entries() -> InMemoryTimeEntries:
    return InMemoryTimeEntries()


@pytest.fixture
def pto_repo(users) -> InMemoryPTO:
    return InMemoryPTO(users)


@pytest.fixture
def reports_repo(users, entries) -> InMemoryReports:
    return InMemoryReports(users, entries)


@pytest.fixture
def tokens() -> TokenService:
    return TokenService("test-secret")


@pytest.fixture
def container(users, entries, pto_repo, reports_repo, tokens):
    return wire(
        users_repo=users,
        time_entries_repo=entries,
        pto_repo=pto_repo,
        reports_repo=reports_repo,
        tokens=tokens,
    )


@pytest.fixture
def app(container):
    app = create_app(container, settings_module="config.testing")
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, email: str, password: str) -> dict:
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}


@pytest.fixture
def staff_headers(client, staff) -> dict:
    return login(client, staff.email, STAFF_PASSWORD)


@pytest.fixture
def admin_headers(client, admin) -> dict:
    return login(client, admin.email, ADMIN_PASSWORD)
