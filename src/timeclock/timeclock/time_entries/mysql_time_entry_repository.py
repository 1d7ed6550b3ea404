from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.exceptions import BusinessRuleError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import TimeEntry
from .repository import TimeEntryRepository

ENTRY_COLUMNS = "entry_id, user_id, work_date, clock_in, clock_out, total_hours, created_at, updated_at"


def row_to_entry(r: dict) -> TimeEntry:
    return TimeEntry(
        entry_id=int(r["entry_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        clock_in=r["clock_in"],
        clock_out=r.get("clock_out"),
        total_hours=float(r.get("total_hours") or 0),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _date_filter(clauses: list[str], params: list[object], start_date: Optional[date], end_date: Optional[date]) -> None:
    if start_date and end_date:
        clauses.append("work_date BETWEEN %s AND %s")
        params.extend([start_date, end_date])


class MySQLTimeEntryRepository(TimeEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {ENTRY_COLUMNS} FROM time_entries WHERE entry_id=%s", (int(entry_id),))
            r = fetchone(cur)
            return row_to_entry(r) if r else None

    def get_active_for_user(self, user_id: int) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {ENTRY_COLUMNS}
                FROM time_entries
                WHERE user_id=%s AND clock_out IS NULL
                ORDER BY clock_in DESC
                LIMIT 1
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return row_to_entry(r) if r else None

    def create_clock_in(self, *, user_id: int, work_date: date, clock_in: datetime) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO time_entries(user_id, work_date, clock_in, clock_out, total_hours)
                    VALUES(%s,%s,%s,NULL,0)
                    """,
                    (int(user_id), work_date, clock_in),
                )
                return int(cur.lastrowid)
        except IntegrityError as exc:
            if is_duplicate_key(exc):
                raise BusinessRuleError("You already have an active time entry") from exc
            raise

    def close_entry(self, *, entry_id: int, clock_out: datetime, total_hours: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_entries
                SET clock_out=%s, total_hours=%s
                WHERE entry_id=%s AND clock_out IS NULL
                """,
                (clock_out, float(total_hours), int(entry_id)),
            )
            return cur.rowcount > 0

    def list_for_user(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Sequence[TimeEntry]:
        clauses = ["user_id=%s"]
        params: list[object] = [int(user_id)]
        _date_filter(clauses, params, start_date, end_date)

        sql = f"""
            SELECT {ENTRY_COLUMNS}
            FROM time_entries
            WHERE {" AND ".join(clauses)}
            ORDER BY work_date DESC, clock_in DESC
        """
        if limit is not None:
            sql += " LIMIT %s OFFSET %s"
            params.extend([int(limit), int(offset)])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [row_to_entry(r) for r in fetchall(cur)]

    def count_for_user(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> int:
        clauses = ["user_id=%s"]
        params: list[object] = [int(user_id)]
        _date_filter(clauses, params, start_date, end_date)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM time_entries WHERE {' AND '.join(clauses)}", tuple(params))
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def list_overlapping(self, user_id: int, *, window_start: datetime, window_end: datetime) -> Sequence[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {ENTRY_COLUMNS}
                FROM time_entries
                WHERE user_id=%s
                  AND clock_in < %s
                  AND (clock_out IS NULL OR clock_out > %s)
                ORDER BY clock_in
                """,
                (int(user_id), window_end, window_start),
            )
            return [row_to_entry(r) for r in fetchall(cur)]

    def delete_completed(self, entry_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM time_entries WHERE entry_id=%s AND clock_out IS NOT NULL", (int(entry_id),))
            return cur.rowcount > 0
