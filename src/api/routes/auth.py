"""Authentication routes - login, session refresh, profile."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import get_current_user, get_db_session, not_found, unauthorized
from src.api.schemas.auth import (
    IdentityResponse,
    LoginRequest,
    LoginResponse,
    MeResponse,
    TokenResponse,
)
from src.api.schemas.users import UserResponse
from src.core.auth import create_session_token
from src.core.config import get_settings
from src.domain.models import Identity
from src.domain.errors import InvalidCredentialsError, NotFoundError
from src.domain.services.auth_service import AuthService

logger = structlog.get_logger()
router = APIRouter(prefix="/auth", tags=["authentication"])


def _session_payload(identity: Identity) -> TokenResponse:
    return TokenResponse(
        access_token=create_session_token(identity),
        expires_in=get_settings().session_ttl_seconds,
    )


def _identity_response(identity: Identity) -> IdentityResponse:
    return IdentityResponse(
        id=identity.id,
        employee_id=identity.employee_id,
        first_name=identity.first_name,
        last_name=identity.last_name,
        email=identity.email,
        role=identity.role,
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Employee login",
    description="Authenticate with employee ID and password, returns a session token.",
)
async def login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    service = AuthService(session)

    try:
        identity = await service.authenticate(
            employee_id=payload.employee_id,
            password=payload.password,
        )
    except InvalidCredentialsError as exc:
        raise unauthorized(str(exc)) from exc

    return LoginResponse(user=_identity_response(identity), tokens=_session_payload(identity))


@router.post(
    "/refresh",
    response_model=LoginResponse,
    summary="Reissue session",
    description="Re-read the account and issue a fresh token carrying its current role.",
)
async def refresh(
    user: Identity = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    service = AuthService(session)

    try:
        identity = await service.refresh_identity(user.id)
    except InvalidCredentialsError as exc:
        raise unauthorized(str(exc)) from exc

    await logger.ainfo(
        "session_refreshed",
        user_id=identity.id,
        role_changed=identity.role is not user.role,
    )
    return LoginResponse(
        message="Session refreshed",
        user=_identity_response(identity),
        tokens=_session_payload(identity),
    )


@router.get("/me", response_model=MeResponse, summary="Get current user")
async def get_me(
    user: Identity = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> MeResponse:
    service = AuthService(session)

    try:
        profile = await service.get_profile(user.id)
    except NotFoundError as exc:
        raise not_found(str(exc)) from exc

    return MeResponse(user=UserResponse.model_validate(profile))
