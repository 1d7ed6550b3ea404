from __future__ import annotations

import calendar
import logging
import math
from collections import OrderedDict
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import clamp_pagination, now_utc
from ..core.constants import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from ..core.enums import EntryStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..pto.repository import PTORequestRepository
from ..pto.search import filter_requests
from ..pto.service import parse_status_filter
from ..time_entries.model import TimeEntry
from ..time_entries.repository import TimeEntryRepository
from ..users.model import populated_user
from ..users.repository import UserRepository
from .model import ExportFile, TimeLog, TimeLogPage, TimeLogQuery, TimeLogRow, UserTimeReport
from .repository import ReportRepository
from .xlsx import format_date, format_hours_worked, format_time, parse_tz_offset, to_local, to_xlsx

logger = logging.getLogger(__name__)

TIME_LOG_COLUMNS = ["Employee", "Email", "Date", "Clock In", "Clock Out", "Hours Worked", "Status"]
PTO_COLUMNS = ["Employee", "Date", "Hours", "Reason", "Status"]


def _require_admin(current_role: Role) -> None:
    if current_role != Role.ADMIN:
        raise AuthorizationError("Admin access required")


def _parse_entry_status(value) -> Optional[EntryStatus]:
    if not value or value == "all":
        return None
    try:
        return EntryStatus(value)
    except ValueError:
        raise ValidationError("Invalid status")


def _month_range(month, year) -> tuple[date, date]:
    """``month`` is 0-based (0 = January)."""
    try:
        m = int(month)
        y = int(year)
    except (TypeError, ValueError):
        raise ValidationError("Invalid year or month")
    if not 0 <= m <= 11 or not 1 <= y <= 9999:
        raise ValidationError("Invalid year or month")
    return date(y, m + 1, 1), date(y, m + 1, calendar.monthrange(y, m + 1)[1])


def build_time_log_query(
    *,
    search: str = "",
    status=None,
    month=None,
    year=None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> TimeLogQuery:
    """A month/year pair wins over an explicit date range."""
    by_month = month not in (None, "") and year not in (None, "")
    if by_month:
        start_date, end_date = _month_range(month, year)
    elif not (start_date and end_date):
        start_date = end_date = None

    return TimeLogQuery(
        search=(search or "").strip(),
        status=_parse_entry_status(status),
        start_date=start_date,
        end_date=end_date,
        by_month=by_month,
    )


class ReportService:
    """Admin reporting: time logs, grouped hours and spreadsheet exports."""

    def __init__(
        self,
        reports: ReportRepository,
        entries: TimeEntryRepository,
        users: UserRepository,
        pto_requests: PTORequestRepository,
    ):
        self._reports = reports
        self._entries = entries
        self._users = users
        self._pto = pto_requests

    @staticmethod
    def _to_log(row: TimeLogRow, now: datetime) -> TimeLog:
        return TimeLog(entry=row.entry, user=row.user, hours=row.entry.hours_until(now))

    def list_time_logs(
        self,
        *,
        current_role: Role,
        query: TimeLogQuery,
        page=1,
        limit=DEFAULT_PAGE_LIMIT,
        now: datetime | None = None,
    ) -> TimeLogPage:
        _require_admin(current_role)
        now = now or now_utc()

        page, limit, offset = clamp_pagination(page, limit, MAX_PAGE_LIMIT, DEFAULT_PAGE_LIMIT)
        total = self._reports.count_time_logs(query)
        rows = self._reports.search_time_logs(query, limit=limit, offset=offset)
        return TimeLogPage(
            logs=[self._to_log(r, now) for r in rows],
            total=total,
            page=page,
            limit=limit,
            pages=math.ceil(total / limit),
        )

    def export_time_logs(
        self,
        *,
        current_role: Role,
        query: TimeLogQuery,
        tz_offset=None,
        now: datetime | None = None,
    ) -> ExportFile:
        _require_admin(current_role)
        now = now or now_utc()
        offset = parse_tz_offset(tz_offset)

        rows = []
        for r in self._reports.search_time_logs(query):
            log = self._to_log(r, now)
            rows.append(
                {
                    "Employee": log.user.full_name,
                    "Email": log.user.email,
                    "Date": format_date(to_local(log.entry.clock_in, offset)),
                    "Clock In": format_time(to_local(log.entry.clock_in, offset)),
                    "Clock Out": format_time(to_local(log.entry.clock_out, offset)),
                    "Hours Worked": format_hours_worked(log.hours),
                    "Status": log.entry.status.value.capitalize(),
                }
            )

        if query.by_month and query.start_date:
            filename = f"time-logs-{query.start_date:%Y-%m}.xlsx"
        else:
            filename = f"time-logs-{now:%Y-%m-%d}.xlsx"

        logger.info("Exporting %s time log rows to %s", len(rows), filename)
        return ExportFile(content=to_xlsx(rows, columns=TIME_LOG_COLUMNS, sheet_name="Time Logs"), filename=filename)

    def export_pto_requests(
        self,
        *,
        current_role: Role,
        search: str | None = None,
        status=None,
        today: date | None = None,
    ) -> ExportFile:
        _require_admin(current_role)
        today = today or now_utc().date()

        requests = filter_requests(
            self._pto.list_all(status=parse_status_filter(status)), search, include_owner=True, month_names=False
        )
        rows = []
        for req in requests:
            user = populated_user(req.owner)
            rows.append(
                {
                    "Employee": user.full_name if user else "",
                    "Date": req.request_date.isoformat(),
                    "Hours": req.hours,
                    "Reason": req.reason,
                    "Status": req.status.value.capitalize(),
                }
            )

        filename = f"pto-requests-{today:%Y-%m-%d}.xlsx"
        logger.info("Exporting %s PTO requests to %s", len(rows), filename)
        return ExportFile(content=to_xlsx(rows, columns=PTO_COLUMNS, sheet_name="PTO Requests"), filename=filename)

    def time_report(
        self,
        *,
        current_role: Role,
        start_date: Optional[date],
        end_date: Optional[date],
    ) -> Sequence[UserTimeReport]:
        """Completed entries in the range, grouped per user."""
        _require_admin(current_role)
        if not (start_date and end_date):
            raise ValidationError("Start date and end date are required")

        grouped: "OrderedDict[int, list[TimeLogRow]]" = OrderedDict()
        for row in self._reports.completed_entries_between(start_date, end_date):
            grouped.setdefault(row.user.user_id, []).append(row)

        return [
            UserTimeReport(
                user=rows[0].user,
                total_hours=sum(r.entry.total_hours for r in rows),
                entries=[r.entry for r in rows],
            )
            for rows in grouped.values()
        ]

    def user_time_entries(
        self,
        *,
        current_role: Role,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[TimeEntry]:
        _require_admin(current_role)
        if not self._users.get_by_id(int(user_id)):
            raise NotFoundError("User not found")
        return list(self._entries.list_for_user(int(user_id), start_date=start_date, end_date=end_date))
