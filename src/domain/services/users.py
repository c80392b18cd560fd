"""Employee account management."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.config import get_settings
from src.domain.errors import (
    ConflictError,
    DomainError,
    NotFoundError,
    PermissionDeniedError,
    RoleAssignmentError,
)
from src.domain.models import Identity
from src.domain.permissions import can_edit_user, get_roles_user_can_assign
from src.domain.roles import Role
from src.domain.services.auth_service import hash_password
from src.infrastructure.db.models import UserModel

logger = structlog.get_logger()

UPDATABLE_FIELDS = ("first_name", "last_name", "email", "role", "is_active")
NULLABLE_FIELDS = ("email",)


class EmptyUpdateError(DomainError):
    """Raised when an update carries no allow-listed field."""


class PasswordPolicyError(DomainError):
    """Raised when a new password does not meet the minimum length."""


def ensure_can_assign(actor_role: Role, role: Role) -> None:
    if role not in get_roles_user_can_assign(actor_role):
        raise RoleAssignmentError("You cannot assign this role")


class UserService:
    """CRUD operations on employee accounts. Users are deactivated, never deleted."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_users(self, *, active_only: bool = False) -> list[UserModel]:
        stmt = select(UserModel).order_by(UserModel.created_at, UserModel.employee_id)
        if active_only:
            stmt = stmt.where(UserModel.is_active.is_(True))
        return list((await self.session.execute(stmt)).scalars().all())

    async def get_user(self, user_id: str) -> UserModel:
        user = await self.session.get(UserModel, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    async def employee_id_exists(self, employee_id: str) -> bool:
        stmt = select(UserModel.id).where(UserModel.employee_id == employee_id).limit(1)
        return (await self.session.scalar(stmt)) is not None

    async def create_user(
        self,
        actor: Identity,
        *,
        employee_id: str,
        password: str,
        first_name: str,
        last_name: str,
        role: Role,
        email: str | None = None,
    ) -> UserModel:
        """Create an account on behalf of ``actor``."""
        ensure_can_assign(actor.role, role)

        if await self.employee_id_exists(employee_id):
            raise ConflictError(f"User with employee ID {employee_id} already exists")

        password_hash = await asyncio.to_thread(hash_password, password)
        user = UserModel(
            employee_id=employee_id,
            password=password_hash,
            first_name=first_name,
            last_name=last_name,
            email=email or None,
            role=role,
            created_by=actor.id,
            is_active=True,
        )

        try:
            self.session.add(user)
            await self.session.commit()
            await self.session.refresh(user)
        except IntegrityError as exc:
            # Lost a race against a concurrent create with the same employee ID
            await self.session.rollback()
            await logger.awarning("user_create_duplicate", employee_id=employee_id)
            raise ConflictError(f"User with employee ID {employee_id} already exists") from exc

        await logger.ainfo(
            "user_created",
            user_id=user.id,
            employee_id=employee_id,
            role=role.value,
            created_by=actor.id,
        )
        return user

    async def update_user(
        self, actor: Identity, user_id: str, changes: Mapping[str, Any]
    ) -> UserModel:
        """Apply allow-listed field changes to an existing account."""
        data = {
            key: value
            for key, value in changes.items()
            if key in UPDATABLE_FIELDS and (value is not None or key in NULLABLE_FIELDS)
        }
        if not data:
            raise EmptyUpdateError("No fields to update")

        user = await self.get_user(user_id)

        if not can_edit_user(actor.role, user.role):
            raise PermissionDeniedError("You cannot edit this user")

        new_role = data.get("role")
        if new_role is not None and Role(new_role) is not user.role:
            ensure_can_assign(actor.role, Role(new_role))

        if "email" in data:
            data["email"] = data["email"] or None

        for key, value in data.items():
            setattr(user, key, Role(value) if key == "role" else value)

        await self.session.commit()
        await self.session.refresh(user)

        await logger.ainfo(
            "user_updated",
            user_id=user.id,
            employee_id=user.employee_id,
            updated_by=actor.id,
            updated_fields=sorted(data),
        )
        return user

    async def reset_password(self, actor: Identity, user_id: str, new_password: str) -> None:
        settings = get_settings()
        if len(new_password) < settings.password_reset_min_length:
            raise PasswordPolicyError(
                f"Password must be at least {settings.password_reset_min_length} characters"
            )

        user = await self.get_user(user_id)
        if not can_edit_user(actor.role, user.role):
            raise PermissionDeniedError("You cannot edit this user")

        user.password = await asyncio.to_thread(hash_password, new_password)
        await self.session.commit()

        await logger.ainfo("password_reset", user_id=user.id, reset_by=actor.id)
