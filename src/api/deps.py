from __future__ import annotations

from collections.abc import AsyncIterator, Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.auth import TokenError, create_session_token, decode_session_token
from src.domain.models import Identity
from src.domain.permissions import PERMISSION_RULES, check
from src.infrastructure.db.session import get_session

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),  # noqa: B008
) -> Identity:
    """Resolve the acting identity from the session token claims alone."""
    if credentials is None:
        raise unauthorized("Not authenticated")

    try:
        return decode_session_token(credentials.credentials)
    except TokenError as exc:
        raise unauthorized(str(exc)) from exc


def require_permission(
    permission: str, *, detail: str = "Insufficient permissions"
) -> Callable[[Identity], Identity]:
    """Dependency factory enforcing a named rule from the permission table."""
    if permission not in PERMISSION_RULES:
        raise ValueError(f"Unknown permission requested: {permission}")

    def dependency(user: Identity = Depends(get_current_user)) -> Identity:  # noqa: B008
        if not check(permission, user.role):
            raise forbidden(detail)
        return user

    return dependency


def issue_smoke_token(identity: Identity) -> str:
    """Generate a signed token for manual smoke testing."""
    return create_session_token(identity)


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """Provide an async SQLAlchemy session for API handlers."""
    async for session in get_session():
        yield session


def unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def forbidden(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def not_found(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def conflict(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)


def bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
