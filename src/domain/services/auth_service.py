"""Credential authentication and password hashing."""

from __future__ import annotations

import asyncio
import re

import structlog
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.config import get_settings
from src.domain.errors import InvalidCredentialsError, NotFoundError
from src.domain.models import Identity
from src.infrastructure.db.models import UserModel

logger = structlog.get_logger()

EMPLOYEE_ID_PATTERN = re.compile(r"^[0-9]{7}$")
INVALID_CREDENTIALS_MESSAGE = "Invalid employee ID or password"

# bcrypt cost comes from settings (12 by default)
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=get_settings().bcrypt_rounds,
)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def is_valid_employee_id(value: str) -> bool:
    return bool(EMPLOYEE_ID_PATTERN.fullmatch(value))


def to_identity(user: UserModel) -> Identity:
    """Project a stored user onto its public claims."""
    return Identity(
        id=user.id,
        employee_id=user.employee_id,
        first_name=user.first_name,
        last_name=user.last_name,
        role=user.role,
        email=user.email,
    )


class AuthService:
    """Service for credential authentication."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def authenticate(self, *, employee_id: str, password: str) -> Identity:
        """
        Verify an employee ID / password pair.

        Every failure (malformed input, unknown employee, inactive account,
        wrong password) raises the same InvalidCredentialsError so callers
        cannot tell them apart. The reason is only logged.
        """
        if not is_valid_employee_id(employee_id) or not password:
            await logger.awarning("login_failed", reason="malformed_input")
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)

        stmt = select(UserModel).where(UserModel.employee_id == employee_id)
        user = (await self.session.execute(stmt)).scalar_one_or_none()

        if user is None:
            await logger.awarning("login_failed", reason="not_found", employee_id=employee_id)
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)

        if not user.is_active:
            await logger.awarning("login_failed", reason="inactive", employee_id=employee_id)
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)

        # bcrypt is CPU-bound; verify off the event loop
        if not await asyncio.to_thread(verify_password, password, user.password):
            await logger.awarning("login_failed", reason="bad_password", employee_id=employee_id)
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)

        await logger.ainfo("login_success", user_id=user.id, employee_id=employee_id)
        return to_identity(user)

    async def refresh_identity(self, user_id: str) -> Identity:
        """Re-read an identity from the store so a new session reflects current data."""
        user = await self.session.get(UserModel, user_id)
        if user is None or not user.is_active:
            await logger.awarning("session_refresh_rejected", user_id=user_id)
            raise InvalidCredentialsError("Session is no longer valid")
        return to_identity(user)

    async def get_profile(self, user_id: str) -> UserModel:
        user = await self.session.get(UserModel, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user
