from __future__ import annotations

import logging
import math
from datetime import date, datetime, timedelta
from typing import Optional

from ..common.datetime_utils import clamp_pagination, now_utc, overlap_hours, utc_day_start, week_start
from ..core.constants import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, BusinessRuleError, NotFoundError
from .model import ClockStatus, DeletedEntry, EntryPage, TimeEntry, TimeStats
from .repository import TimeEntryRepository

logger = logging.getLogger(__name__)


class TimeEntryService:
    """Clock in/out sessions; at most one open entry per user."""

    def __init__(self, entries: TimeEntryRepository):
        self._entries = entries

    def clock_in(self, user_id: int, *, now: datetime | None = None) -> TimeEntry:
        now = now or now_utc()

        if self._entries.get_active_for_user(user_id):
            raise BusinessRuleError("You already have an active time entry")

        entry_id = self._entries.create_clock_in(user_id=user_id, work_date=now.date(), clock_in=now)
        logger.info("User %s clocked in (entry %s)", user_id, entry_id)
        return self._entries.get_by_id(entry_id)

    def clock_out(self, user_id: int, *, now: datetime | None = None) -> TimeEntry:
        now = now or now_utc()

        active = self._entries.get_active_for_user(user_id)
        if not active:
            raise BusinessRuleError("No active time entry found")

        total_hours = (now - active.clock_in).total_seconds() / 3600
        if not self._entries.close_entry(entry_id=active.entry_id, clock_out=now, total_hours=total_hours):
            # closed concurrently by another request
            raise BusinessRuleError("No active time entry found")

        logger.info("User %s clocked out (entry %s, %.2fh)", user_id, active.entry_id, total_hours)
        return self._entries.get_by_id(active.entry_id)

    def get_status(self, user_id: int) -> ClockStatus:
        active = self._entries.get_active_for_user(user_id)
        return ClockStatus(is_clocked_in=active is not None, active_entry=active)

    def get_stats(self, user_id: int, *, now: datetime | None = None) -> TimeStats:
        now = now or now_utc()
        today_start = utc_day_start(now)
        today_end = today_start + timedelta(days=1)
        monday = week_start(now)

        today_total = 0.0
        week_total = 0.0
        for e in self._entries.list_overlapping(user_id, window_start=monday, window_end=today_end):
            end = e.clock_out or now
            today_total += overlap_hours(e.clock_in, end, today_start, today_end)
            week_total += overlap_hours(e.clock_in, end, monday, today_end)

        return TimeStats(total_hours_today=today_total, total_hours_this_week=week_total)

    def list_entries(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        page=None,
        limit=DEFAULT_PAGE_LIMIT,
    ) -> list[TimeEntry] | EntryPage:
        """Newest first; returns an ``EntryPage`` when ``page`` is given."""
        if page is None:
            return list(self._entries.list_for_user(user_id, start_date=start_date, end_date=end_date))

        page, limit, offset = clamp_pagination(page, limit, MAX_PAGE_LIMIT, DEFAULT_PAGE_LIMIT)
        total = self._entries.count_for_user(user_id, start_date=start_date, end_date=end_date)
        rows = self._entries.list_for_user(
            user_id, start_date=start_date, end_date=end_date, limit=limit, offset=offset
        )
        return EntryPage(entries=list(rows), total=total, page=page, pages=math.ceil(total / limit))

    def delete_entry(self, user_id: int, entry_id: int) -> DeletedEntry:
        entry = self._entries.get_by_id(int(entry_id))
        if not entry:
            raise NotFoundError("Time entry not found")
        if entry.user_id != int(user_id):
            raise AuthorizationError("Not authorized to delete this entry")
        return self._delete(entry)

    def delete_entry_as_admin(self, *, current_role: Role, entry_id: int) -> DeletedEntry:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")

        entry = self._entries.get_by_id(int(entry_id))
        if not entry:
            raise NotFoundError("Time entry not found")
        return self._delete(entry)

    def _delete(self, entry: TimeEntry) -> DeletedEntry:
        if entry.is_active:
            raise BusinessRuleError("Cannot delete an active time entry. Please clock out first.")
        if not self._entries.delete_completed(entry.entry_id):
            raise NotFoundError("Time entry not found")

        logger.info("Deleted time entry %s of user %s", entry.entry_id, entry.user_id)
        return DeletedEntry(deleted_id=entry.entry_id)
