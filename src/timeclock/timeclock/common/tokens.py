"""Signed access tokens (JWT) for bearer authentication."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from ..core.constants import DEFAULT_TOKEN_DAYS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError


@dataclass(frozen=True)
class TokenPayload:
    user_id: int
    role: Role
    expires_at: datetime


class TokenService:
    def __init__(self, secret_key: str, *, algorithm: str = "HS256", expire_days: int = DEFAULT_TOKEN_DAYS):
        if not secret_key:
            raise ValueError("Token secret not configured")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_delta = timedelta(days=int(expire_days))

    def create_access_token(self, user_id: int, role: Role, *, now: Optional[datetime] = None) -> str:
        issued = now or datetime.now(timezone.utc)
        claims = {
            "sub": str(user_id),
            "role": role.value,
            "iat": int(issued.timestamp()),
            "exp": int((issued + self._expire_delta).timestamp()),
        }
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

    def decode(self, token: str) -> TokenPayload:
        try:
            claims = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
            return TokenPayload(
                user_id=int(claims["sub"]),
                role=Role(claims["role"]),
                expires_at=datetime.fromtimestamp(int(claims["exp"]), tz=timezone.utc),
            )
        except (JWTError, KeyError, ValueError):
            raise AuthenticationError("Invalid token")
