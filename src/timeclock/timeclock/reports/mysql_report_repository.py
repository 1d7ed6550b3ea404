from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import EntryStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, like
from ..time_entries.mysql_time_entry_repository import ENTRY_COLUMNS, row_to_entry
from ..users.mysql_user_repository import USER_COLUMNS, row_to_user
from .model import TimeLogQuery, TimeLogRow
from .repository import ReportRepository

_ENTRY_SELECT = ", ".join(f"t.{c}" for c in ENTRY_COLUMNS.split(", "))
_USER_SELECT = ", ".join(f"u.{c} AS u_{c}" for c in USER_COLUMNS.split(", "))

_FROM = """
    FROM time_entries t
    JOIN users u ON u.user_id = t.user_id
"""


def _row_to_log(r: dict) -> TimeLogRow:
    return TimeLogRow(entry=row_to_entry(r), user=row_to_user(r, prefix="u_"))


def _where(query: TimeLogQuery) -> tuple[str, list[object]]:
    clauses: list[str] = []
    params: list[object] = []

    if query.start_date and query.end_date:
        clauses.append("t.work_date BETWEEN %s AND %s")
        params.extend([query.start_date, query.end_date])

    if query.status == EntryStatus.ACTIVE:
        clauses.append("t.clock_out IS NULL")
    elif query.status == EntryStatus.COMPLETED:
        clauses.append("t.clock_out IS NOT NULL")

    search = (query.search or "").strip()
    if search:
        clauses.append(
            """
            (u.first_name LIKE %s OR u.last_name LIKE %s OR u.email LIKE %s
             OR DATE_FORMAT(t.work_date, '%%Y-%%m-%%d') LIKE %s)
            """
        )
        params.extend([like(search)] * 4)

    return (" WHERE " + " AND ".join(clauses)) if clauses else "", params


class MySQLReportRepository(ReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def search_time_logs(
        self,
        query: TimeLogQuery,
        *,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Sequence[TimeLogRow]:
        where, params = _where(query)
        sql = f"SELECT {_ENTRY_SELECT}, {_USER_SELECT} {_FROM} {where} ORDER BY t.work_date DESC, t.clock_in DESC"
        if limit is not None:
            sql += " LIMIT %s OFFSET %s"
            params.extend([int(limit), int(offset)])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_log(r) for r in fetchall(cur)]

    def count_time_logs(self, query: TimeLogQuery) -> int:
        where, params = _where(query)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n {_FROM} {where}", tuple(params))
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def completed_entries_between(self, start_date: date, end_date: date) -> Sequence[TimeLogRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ENTRY_SELECT}, {_USER_SELECT}
                {_FROM}
                WHERE t.work_date BETWEEN %s AND %s AND t.clock_out IS NOT NULL
                ORDER BY u.last_name, u.first_name, t.work_date, t.clock_in
                """,
                (start_date, end_date),
            )
            return [_row_to_log(r) for r in fetchall(cur)]
