from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import PTOStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..users.model import PopulatedUser, UserReference
from ..users.mysql_user_repository import USER_COLUMNS, row_to_user
from .model import PTORequest
from .repository import PTORequestRepository

_USER_SELECT = ", ".join(f"u.{c} AS u_{c}" for c in USER_COLUMNS.split(", "))

_SELECT = f"""
    SELECT p.request_id, p.user_id, p.request_date, p.hours, p.reason, p.status,
           p.approved_by, p.approval_date, p.expiry_year, p.created_at, p.updated_at,
           {_USER_SELECT}
    FROM pto_requests p
    LEFT JOIN users u ON u.user_id = p.user_id
"""


def _row_to_request(r: dict) -> PTORequest:
    owner = PopulatedUser(row_to_user(r, prefix="u_")) if r.get("u_user_id") is not None else UserReference(int(r["user_id"]))
    return PTORequest(
        request_id=int(r["request_id"]),
        owner=owner,
        request_date=r["request_date"],
        hours=int(r["hours"]),
        reason=r["reason"],
        status=PTOStatus(r["status"]),
        expiry_year=int(r["expiry_year"]),
        approved_by=int(r["approved_by"]) if r.get("approved_by") is not None else None,
        approval_date=r.get("approval_date"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLPTORequestRepository(PTORequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_request(self, *, user_id: int, request_date: date, hours: int, reason: str, expiry_year: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO pto_requests(user_id, request_date, hours, reason, status, expiry_year)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), request_date, int(hours), reason, PTOStatus.PENDING.value, int(expiry_year)),
            )
            return int(cur.lastrowid)

    def get_by_id(self, request_id: int) -> Optional[PTORequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE p.request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _row_to_request(r) if r else None

    def decide(self, *, request_id: int, status: PTOStatus, approved_by: int, approval_date: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE pto_requests
                SET status=%s, approved_by=%s, approval_date=%s
                WHERE request_id=%s AND status=%s
                """,
                (status.value, int(approved_by), approval_date, int(request_id), PTOStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def sum_approved_hours(self, user_id: int, *, start_date: date, end_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COALESCE(SUM(hours), 0) AS total
                FROM pto_requests
                WHERE user_id=%s AND status=%s AND request_date BETWEEN %s AND %s
                """,
                (int(user_id), PTOStatus.APPROVED.value, start_date, end_date),
            )
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def list_for_user(self, user_id: int) -> Sequence[PTORequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE p.user_id=%s ORDER BY p.created_at DESC, p.request_id DESC", (int(user_id),))
            return [_row_to_request(r) for r in fetchall(cur)]

    def list_all(self, *, status: Optional[PTOStatus] = None) -> Sequence[PTORequest]:
        sql = _SELECT
        params: tuple = ()
        if status:
            sql += " WHERE p.status=%s"
            params = (status.value,)
        sql += " ORDER BY p.created_at DESC, p.request_id DESC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_row_to_request(r) for r in fetchall(cur)]
