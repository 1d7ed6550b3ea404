from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import PTOStatus
from .model import PTORequest


class PTORequestRepository(Protocol):
    def create_request(self, *, user_id: int, request_date: date, hours: int, reason: str, expiry_year: int) -> int:
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[PTORequest]:
        raise NotImplementedError

    def decide(self, *, request_id: int, status: PTOStatus, approved_by: int, approval_date: datetime) -> bool:
        """Apply a decision only while the request is still pending."""
        raise NotImplementedError

    def sum_approved_hours(self, user_id: int, *, start_date: date, end_date: date) -> int:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[PTORequest]:
        raise NotImplementedError

    def list_all(self, *, status: Optional[PTOStatus] = None) -> Sequence[PTORequest]:
        raise NotImplementedError
