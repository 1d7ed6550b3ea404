from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import month_bounds, month_label, now_utc
from ..common.validators import require_int, require_non_empty
from ..core.constants import MAX_PTO_HOURS, MIN_PTO_HOURS, MONTHLY_PTO_HOURS, YEARLY_PTO_HOURS
from ..core.enums import PTOStatus, Role
from ..core.exceptions import AuthorizationError, BusinessRuleError, NotFoundError, ValidationError
from ..users.repository import UserRepository
from .model import PTORequest
from .repository import PTORequestRepository
from .search import filter_requests

logger = logging.getLogger(__name__)

_DECISIONS = {PTOStatus.APPROVED, PTOStatus.DENIED}


def parse_status_filter(value) -> Optional[PTOStatus]:
    """``all`` / empty means no filter."""
    if not value or value == "all":
        return None
    try:
        return PTOStatus(value)
    except ValueError:
        raise ValidationError("Invalid status")


class PTOService:
    """Use cases: request PTO, decide requests (admin), quota summaries."""

    def __init__(self, requests: PTORequestRepository, users: UserRepository):
        self._requests = requests
        self._users = users

    def _approved_hours_in_month(self, user_id: int, year: int, month: int) -> int:
        first, last = month_bounds(year, month)
        return self._requests.sum_approved_hours(user_id, start_date=first, end_date=last)

    def create_request(
        self,
        *,
        user_id: int,
        request_date: date,
        hours,
        reason: str,
        today: date | None = None,
    ) -> PTORequest:
        today = today or now_utc().date()

        if not self._users.get_by_id(user_id):
            raise NotFoundError("User not found")

        if request_date < today:
            raise ValidationError("Request date must be in the future")

        hours = require_int(hours, "Hours")
        if hours < MIN_PTO_HOURS or hours > MAX_PTO_HOURS:
            raise ValidationError(f"PTO hours must be between {MIN_PTO_HOURS} and {MAX_PTO_HOURS}")

        reason = require_non_empty(reason, "Reason")

        used = self._approved_hours_in_month(user_id, request_date.year, request_date.month)
        if used + hours > MONTHLY_PTO_HOURS:
            remaining = MONTHLY_PTO_HOURS - used
            raise BusinessRuleError(
                f"You have {remaining} PTO hours remaining for {month_label(request_date.year, request_date.month)}"
            )

        request_id = self._requests.create_request(
            user_id=user_id,
            request_date=request_date,
            hours=hours,
            reason=reason,
            expiry_year=request_date.year,
        )
        logger.info("User %s requested %sh PTO on %s (request %s)", user_id, hours, request_date, request_id)
        return self._requests.get_by_id(request_id)

    def update_status(
        self,
        *,
        current_role: Role,
        request_id: int,
        approver_id: int,
        status,
        now: datetime | None = None,
    ) -> PTORequest:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")

        try:
            status = PTOStatus(status)
        except ValueError:
            raise ValidationError("Invalid status")
        if status not in _DECISIONS:
            raise ValidationError("Invalid status")

        req = self._requests.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("PTO request not found")
        if not req.is_pending:
            raise BusinessRuleError("PTO request has already been processed")

        decided = self._requests.decide(
            request_id=req.request_id,
            status=status,
            approved_by=int(approver_id),
            approval_date=now or now_utc(),
        )
        if not decided:
            raise BusinessRuleError("PTO request has already been processed")

        logger.info("PTO request %s %s by %s", req.request_id, status.value, approver_id)
        return self._requests.get_by_id(req.request_id)

    def monthly_count(self, user_id: int, year, month) -> dict:
        """Approved hours in a 1-based calendar month."""
        try:
            year = require_int(year, "Year")
            month = require_int(month, "Month")
        except ValidationError:
            raise ValidationError("Invalid year or month")
        if not 1 <= month <= 12 or not 1 <= year <= 9999:
            raise ValidationError("Invalid year or month")

        return {"count": self._approved_hours_in_month(user_id, year, month)}

    def yearly_hours(self, user_id: int, year) -> dict:
        try:
            year = require_int(year, "Year")
        except ValidationError:
            raise ValidationError("Invalid year")
        if not 1 <= year <= 9999:
            raise ValidationError("Invalid year")

        used = self._requests.sum_approved_hours(user_id, start_date=date(year, 1, 1), end_date=date(year, 12, 31))
        return {
            "total_hours_used": used,
            "yearly_limit": YEARLY_PTO_HOURS,
            "remaining_hours": YEARLY_PTO_HOURS - used,
        }

    def list_user_requests(self, user_id: int, *, search: str | None = None) -> Sequence[PTORequest]:
        return filter_requests(self._requests.list_for_user(user_id), search)

    def list_all_requests(
        self,
        *,
        current_role: Role,
        search: str | None = None,
        status=None,
    ) -> Sequence[PTORequest]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")

        rows = self._requests.list_all(status=parse_status_filter(status))
        return filter_requests(rows, search, split_terms=True, include_owner=True)
