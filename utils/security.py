"""Token issuing and the authorization gates used by protected routes.

Signing secret and expiry come from ``JWT_SECRET_KEY`` and
``JWT_ACCESS_TOKEN_EXPIRES``. Routes only use the helpers below, so token
revocation can be added here with ``token_in_blocklist_loader`` later.
"""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable

from flask import g
from flask_jwt_extended import (
    JWTManager,
    create_access_token,
    decode_token,
    get_jwt,
    get_jwt_identity,
    verify_jwt_in_request,
)
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from models.user import User

from .errors import AdminRequired, Unauthenticated, json_error


def issue_token(user: User) -> str:
    """Return a signed token asserting the user's id, email and admin flag."""

    return create_access_token(
        identity=str(user.id),
        additional_claims={"email": user.email, "is_admin": bool(user.is_admin)},
    )


def verify_token(token: str) -> dict[str, Any]:
    """Decode a raw token and return its identity claims."""

    try:
        payload = decode_token(token)
    except (JWTExtendedException, PyJWTError) as exc:
        raise Unauthenticated("Invalid or expired token.") from exc
    return _claims_from_payload(payload)


def _claims_from_payload(payload: dict[str, Any]) -> dict[str, Any]:
    raw_id = payload.get("sub")
    try:
        user_id: int | str | None = int(raw_id)
    except (TypeError, ValueError):
        user_id = raw_id
    return {
        "id": user_id,
        "email": payload.get("email"),
        "is_admin": bool(payload.get("is_admin", False)),
    }


def current_claims() -> dict[str, Any]:
    """Return ``{id, email, is_admin}`` for the verified request token."""

    claims = g.get("user_claims")
    if claims is None:
        if get_jwt_identity() is None:
            raise Unauthenticated()
        claims = _claims_from_payload(get_jwt())
        g.user_claims = claims
    return claims


def login_required(fn: Callable) -> Callable:
    """Reject the request with 401 unless a valid bearer token is present."""

    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        current_claims()
        return fn(*args, **kwargs)

    return wrapper


def admin_required(fn: Callable) -> Callable:
    """Authenticate first, then reject non-admin callers with 403."""

    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        if not current_claims()["is_admin"]:
            raise AdminRequired()
        return fn(*args, **kwargs)

    return wrapper


def register_token_handlers(jwt: JWTManager) -> None:
    """Render every token failure as a 401 in the shared error shape."""

    @jwt.unauthorized_loader
    def _missing_token(reason: str):
        return json_error(Unauthenticated("Authentication required."))

    @jwt.invalid_token_loader
    def _invalid_token(reason: str):
        return json_error(Unauthenticated("Invalid token."))

    @jwt.expired_token_loader
    def _expired_token(jwt_header, jwt_payload):
        return json_error(Unauthenticated("Token has expired."))
