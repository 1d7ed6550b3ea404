from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used for authorization checks."""

    ADMIN = "admin"
    USER = "user"


class PTOStatus(str, Enum):
    """PTO request lifecycle: pending -> approved | denied."""

    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


class EntryStatus(str, Enum):
    """Derived state of a time entry, used by listings and exports."""

    ACTIVE = "active"
    COMPLETED = "completed"
