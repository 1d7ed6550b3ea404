from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import TimeLogQuery, TimeLogRow


class ReportRepository(Protocol):
    def search_time_logs(
        self,
        query: TimeLogQuery,
        *,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Sequence[TimeLogRow]:
        """Entries of all users joined with their owner, newest first."""
        raise NotImplementedError

    def count_time_logs(self, query: TimeLogQuery) -> int:
        raise NotImplementedError

    def completed_entries_between(self, start_date: date, end_date: date) -> Sequence[TimeLogRow]:
        raise NotImplementedError
