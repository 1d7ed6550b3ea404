from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.tokens import TokenService
from ..common.validators import (
    require_email,
    require_min_length,
    require_non_empty,
    require_strong_password,
)
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What a successful login hands back to the controller."""

    user: User
    token: str


def parse_role(value) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise ValidationError("Invalid role")


class AuthService:
    """Use cases: login, profile and password for the signed-in user."""

    def __init__(self, users: UserRepository, tokens: TokenService):
        self._users = users
        self._tokens = tokens

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = require_email(email)
        require_non_empty(password, "Password")

        user = self._users.get_by_email(email)
        if not user or not user.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        logger.info("User %s signed in", user.user_id)
        return SessionUser(user=user, token=self._tokens.create_access_token(user.user_id, user.role))

    def resolve_identity(self, *, token: Optional[str] = None, session_user_id: Optional[int] = None) -> Optional[User]:
        """Map a bearer token or session user id to an active user (None when anonymous)."""
        user_id = session_user_id
        if token:
            user_id = self._tokens.decode(token).user_id
        if user_id is None:
            return None

        user = self._users.get_by_id(int(user_id))
        if not user or not user.is_active:
            raise AuthenticationError("User not found")
        return user

    def get_profile(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def update_profile(self, user_id: int, *, first_name: str, last_name: str) -> User:
        first_name = require_non_empty(first_name, "First name")
        last_name = require_non_empty(last_name, "Last name")

        self.get_profile(user_id)
        self._users.update_profile(user_id, first_name=first_name, last_name=last_name)
        return self.get_profile(user_id)

    def update_password(self, user_id: int, *, current_password: str, new_password: str) -> None:
        require_non_empty(current_password, "Current password")
        require_strong_password(new_password)

        user = self.get_profile(user_id)
        try:
            ok = check_password_hash(user.password_hash, current_password)
        except ValueError:
            ok = False
        if not ok:
            raise ValidationError("Current password is incorrect")

        self._users.update_password_hash(user_id, password_hash=generate_password_hash(new_password))
        logger.info("User %s changed password", user_id)


class UserService:
    """Use cases: manage users (admin)."""

    def __init__(self, users: UserRepository):
        self._users = users

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")

    def create_user(
        self,
        *,
        current_role: Role,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        role,
        position: str,
    ) -> User:
        self._require_admin(current_role)

        email = require_email(email)
        first_name = require_min_length((first_name or "").strip(), "First name", 2)
        last_name = require_min_length((last_name or "").strip(), "Last name", 2)
        position = require_min_length((position or "").strip(), "Position", 2)
        require_min_length(password or "", "Password", MIN_PASSWORD_LENGTH)
        role = parse_role(role)

        if self._users.get_by_email(email):
            raise ValidationError("User with this email already exists")

        user_id = self._users.create_user(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            position=position,
        )
        logger.info("Created %s account %s", role.value, user_id)
        return self._users.get_by_id(user_id)

    def list_users(self, *, current_role: Role) -> Sequence[User]:
        self._require_admin(current_role)
        return self._users.list_all()

    def update_role(self, *, current_role: Role, user_id: int, role) -> User:
        self._require_admin(current_role)
        role = parse_role(role)

        if not self._users.update_role(int(user_id), role=role):
            raise NotFoundError("User not found")
        logger.info("User %s role set to %s", user_id, role.value)
        return self._users.get_by_id(int(user_id))
