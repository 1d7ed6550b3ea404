from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import EntryStatus


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() + "Z" if value else None


@dataclass(frozen=True)
class TimeEntry:
    """Domain entity: one clock-in session."""

    entry_id: int
    user_id: int
    work_date: date
    clock_in: datetime
    clock_out: Optional[datetime]
    total_hours: float = 0.0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.clock_out is None

    @property
    def status(self) -> EntryStatus:
        return EntryStatus.ACTIVE if self.is_active else EntryStatus.COMPLETED

    def hours_until(self, now: datetime) -> float:
        """Elapsed hours; an active entry is measured up to ``now``."""
        end = self.clock_out or now
        return max((end - self.clock_in).total_seconds() / 3600, 0.0)

    def to_json(self) -> dict:
        return {
            "id": self.entry_id,
            "user_id": self.user_id,
            "date": self.work_date.isoformat(),
            "clock_in": _iso(self.clock_in),
            "clock_out": _iso(self.clock_out),
            "total_hours": self.total_hours,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class ClockStatus:
    is_clocked_in: bool
    active_entry: Optional[TimeEntry] = None

    def to_json(self) -> dict:
        return {
            "is_clocked_in": self.is_clocked_in,
            "active_entry": self.active_entry.to_json() if self.active_entry else None,
        }


@dataclass(frozen=True)
class TimeStats:
    total_hours_today: float
    total_hours_this_week: float

    def to_json(self) -> dict:
        return {
            "total_hours_today": round(self.total_hours_today, 2),
            "total_hours_this_week": round(self.total_hours_this_week, 2),
        }


@dataclass(frozen=True)
class EntryPage:
    entries: Sequence[TimeEntry]
    total: int
    page: int
    pages: int

    def to_json(self) -> dict:
        return {
            "entries": [e.to_json() for e in self.entries],
            "pagination": {"total": self.total, "page": self.page, "pages": self.pages},
        }


@dataclass(frozen=True)
class DeletedEntry:
    deleted_id: int
    message: str = "Time entry deleted successfully"
    success: bool = field(default=True)

    def to_json(self) -> dict:
        return {"success": self.success, "message": self.message, "deleted_id": self.deleted_id}
