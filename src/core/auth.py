from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
from src.core.config import get_settings
from src.domain.models import Identity
from src.domain.roles import Role

REQUIRED_CLAIMS = ("sub", "employee_id", "role", "first_name", "last_name", "exp")


class TokenError(Exception):
    """Raised when a token cannot be decoded or validated."""


def create_session_token(
    identity: Identity,
    *,
    expires_delta: timedelta | None = None,
) -> str:
    """Generate a signed session token embedding the identity claims."""
    settings = get_settings()

    now = datetime.now(UTC)
    ttl = expires_delta or timedelta(seconds=settings.session_ttl_seconds)
    payload = {
        "sub": identity.id,
        "employee_id": identity.employee_id,
        "role": Role(identity.role).value,
        "first_name": identity.first_name,
        "last_name": identity.last_name,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
        "iss": settings.app_name,
    }

    if identity.email:
        payload["email"] = identity.email

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_session_token(token: str) -> Identity:
    """Decode a session token back into the identity snapshot it carries."""
    settings = get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": list(REQUIRED_CLAIMS)},
        )
    except jwt.PyJWTError as exc:  # pragma: no cover - third-party raises numerous subclasses
        raise TokenError("Invalid token") from exc

    role = payload.get("role", "")
    if not Role.contains(role):
        raise TokenError(f"Unsupported role: {role}")

    return Identity(
        id=payload["sub"],
        employee_id=payload["employee_id"],
        first_name=payload["first_name"],
        last_name=payload["last_name"],
        role=Role(role),
        email=payload.get("email"),
    )
