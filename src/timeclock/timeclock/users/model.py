from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Plain data object (no DB access code).
    """

    user_id: int
    first_name: str
    last_name: str
    email: str
    password_hash: str
    role: Role
    position: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def to_public(self) -> dict:
        """Serializable view without the password hash."""
        return {
            "id": self.user_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "name": self.full_name,
            "email": self.email,
            "role": self.role.value,
            "position": self.position,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class UserReference:
    """Owner known only by id."""

    user_id: int


@dataclass(frozen=True)
class PopulatedUser:
    """Owner loaded together with the record (joined query)."""

    user: User

    @property
    def user_id(self) -> int:
        return self.user.user_id


UserRef = Union[UserReference, PopulatedUser]


def user_id_of(ref: UserRef) -> int:
    if isinstance(ref, PopulatedUser):
        return ref.user.user_id
    if isinstance(ref, UserReference):
        return ref.user_id
    raise TypeError(f"Unsupported user reference: {type(ref)!r}")


def populated_user(ref: UserRef) -> Optional[User]:
    """The joined user, or None when only the id is known."""
    if isinstance(ref, PopulatedUser):
        return ref.user
    if isinstance(ref, UserReference):
        return None
    raise TypeError(f"Unsupported user reference: {type(ref)!r}")
