from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .common.tokens import TokenService
from .database.connection import DBConfig, DatabaseConnection
from .pto.mysql_pto_repository import MySQLPTORequestRepository
from .pto.repository import PTORequestRepository
from .pto.service import PTOService
from .reports.mysql_report_repository import MySQLReportRepository
from .reports.repository import ReportRepository
from .reports.service import ReportService
from .time_entries.mysql_time_entry_repository import MySQLTimeEntryRepository
from .time_entries.repository import TimeEntryRepository
from .time_entries.service import TimeEntryService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    time_entries_repo: TimeEntryRepository
    pto_repo: PTORequestRepository
    reports_repo: ReportRepository

    tokens: TokenService
    auth_service: AuthService
    user_service: UserService
    time_entry_service: TimeEntryService
    pto_service: PTOService
    report_service: ReportService

    conn: Optional[DatabaseConnection] = None


def wire(
    *,
    users_repo: UserRepository,
    time_entries_repo: TimeEntryRepository,
    pto_repo: PTORequestRepository,
    reports_repo: ReportRepository,
    tokens: TokenService,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build the services on top of any set of repositories."""
    return Container(
        users_repo=users_repo,
        time_entries_repo=time_entries_repo,
        pto_repo=pto_repo,
        reports_repo=reports_repo,
        tokens=tokens,
        auth_service=AuthService(users_repo, tokens),
        user_service=UserService(users_repo),
        time_entry_service=TimeEntryService(time_entries_repo),
        pto_service=PTOService(pto_repo, users_repo),
        report_service=ReportService(reports_repo, time_entries_repo, users_repo, pto_repo),
        conn=conn,
    )


def build_container(*, db_config: dict, secret_key: str, token_expire_days: int = 7) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        users_repo=MySQLUserRepository(conn),
        time_entries_repo=MySQLTimeEntryRepository(conn),
        pto_repo=MySQLPTORequestRepository(conn),
        reports_repo=MySQLReportRepository(conn),
        tokens=TokenService(secret_key, expire_days=token_expire_days),
        conn=conn,
    )
