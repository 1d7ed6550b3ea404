from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import PTOStatus
from ..users.model import UserRef, populated_user, user_id_of


@dataclass(frozen=True)
class PTORequest:
    """Domain entity: a request for paid time off on one day."""

    request_id: int
    owner: UserRef
    request_date: date
    hours: int
    reason: str
    status: PTOStatus
    expiry_year: int
    approved_by: Optional[int] = None
    approval_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def user_id(self) -> int:
        return user_id_of(self.owner)

    @property
    def is_pending(self) -> bool:
        return self.status == PTOStatus.PENDING

    def to_json(self) -> dict:
        user = populated_user(self.owner)
        return {
            "id": self.request_id,
            "user_id": self.user_id,
            "user_name": user.full_name if user else "Unknown User",
            "user_email": user.email if user else "No Email",
            "date": self.request_date.isoformat(),
            "hours": self.hours,
            "reason": self.reason,
            "status": self.status.value,
            "approved_by": self.approved_by,
            "approval_date": self.approval_date.isoformat() if self.approval_date else None,
            "expiry_year": self.expiry_year,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
