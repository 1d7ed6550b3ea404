from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ..core.enums import EntryStatus
from ..time_entries.model import TimeEntry
from ..users.model import User


def _user_summary(user: User) -> dict:
    return {
        "id": user.user_id,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email": user.email,
    }


@dataclass(frozen=True)
class TimeLogRow:
    """A time entry joined with its owner."""

    entry: TimeEntry
    user: User


@dataclass(frozen=True)
class TimeLogQuery:
    search: str = ""
    status: Optional[EntryStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    by_month: bool = False


@dataclass(frozen=True)
class TimeLog:
    entry: TimeEntry
    user: User
    hours: float

    def to_json(self) -> dict:
        data = self.entry.to_json()
        data["hours"] = round(self.hours, 2)
        data["user"] = _user_summary(self.user)
        return data


@dataclass(frozen=True)
class TimeLogPage:
    logs: Sequence[TimeLog]
    total: int
    page: int
    limit: int
    pages: int

    def to_json(self) -> dict:
        return {
            "logs": [log.to_json() for log in self.logs],
            "pagination": {"total": self.total, "page": self.page, "limit": self.limit, "pages": self.pages},
        }


@dataclass(frozen=True)
class UserTimeReport:
    user: User
    total_hours: float
    entries: Sequence[TimeEntry]

    def to_json(self) -> dict:
        return {
            "user": _user_summary(self.user),
            "total_hours": round(self.total_hours, 2),
            "entries": [e.to_json() for e in self.entries],
        }


@dataclass(frozen=True)
class ExportFile:
    content: bytes
    filename: str
