from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import TimeEntry


class TimeEntryRepository(Protocol):
    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        raise NotImplementedError

    def get_active_for_user(self, user_id: int) -> Optional[TimeEntry]:
        raise NotImplementedError

    def create_clock_in(self, *, user_id: int, work_date: date, clock_in: datetime) -> int:
        """Insert an open entry.

        Implementations raise BusinessRuleError when the store already holds an
        open entry for the user.
        """
        raise NotImplementedError

    def close_entry(self, *, entry_id: int, clock_out: datetime, total_hours: float) -> bool:
        """Set clock_out only if the entry is still open."""
        raise NotImplementedError

    def list_for_user(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Sequence[TimeEntry]:
        raise NotImplementedError

    def count_for_user(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> int:
        raise NotImplementedError

    def list_overlapping(self, user_id: int, *, window_start: datetime, window_end: datetime) -> Sequence[TimeEntry]:
        """Entries with clock_in < window_end that are open or closed after window_start."""
        raise NotImplementedError

    def delete_completed(self, entry_id: int) -> bool:
        raise NotImplementedError
