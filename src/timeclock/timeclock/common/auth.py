from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import Flask, g, request, session

from ..core.exceptions import AuthenticationError, AuthorizationError, DomainError
from ..users.model import User


def bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return None


def install_identity_loader(app: Flask, auth_service) -> None:
    """Resolve the caller once per request into ``g.current_user``.

    A bad token does not fail public routes; the error is kept and raised by
    ``login_required``.
    """

    @app.before_request
    def load_current_user():
        g.current_user = None
        g.auth_error = None
        try:
            g.current_user = auth_service.resolve_identity(
                token=bearer_token(),
                session_user_id=session.get("user_id"),
            )
        except AuthenticationError as e:
            session.pop("user_id", None)
            g.auth_error = e


def current_user() -> User:
    user = g.get("current_user")
    if user is None:
        error: Optional[DomainError] = g.get("auth_error")
        raise error or AuthenticationError("Authentication required")
    return user


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_user()
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not current_user().is_admin:
            raise AuthorizationError("Admin access required")
        return view(*args, **kwargs)

    return wrapper
