"""Course and provider catalog management.

Writes are gated on ``can_create_courses`` at the route layer; these services
only deal with the store.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from src.domain.errors import ConflictError, NotFoundError
from src.domain.models import Identity
from src.infrastructure.db.models import CourseModel, ProviderModel, TrainingType

logger = structlog.get_logger()

COURSE_FIELDS = (
    "training_type",
    "program_direction",
    "training_name",
    "duration",
    "format",
    "price_without_vat",
    "price_with_vat",
    "provider_id",
    "description",
    "content",
    "is_active",
)
PROVIDER_FIELDS = (
    "name",
    "description",
    "website",
    "contact_email",
    "contact_phone",
    "is_active",
)


class CourseService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_courses(
        self,
        *,
        active_only: bool = False,
        training_type: TrainingType | None = None,
    ) -> list[CourseModel]:
        stmt = select(CourseModel).order_by(CourseModel.created_at, CourseModel.training_name)
        if active_only:
            stmt = stmt.where(CourseModel.is_active.is_(True))
        if training_type is not None:
            stmt = stmt.where(CourseModel.training_type == training_type)
        return list((await self.session.execute(stmt)).scalars().all())

    async def get_course(self, course_id: str) -> CourseModel:
        course = await self.session.get(CourseModel, course_id)
        if course is None:
            raise NotFoundError(f"Course {course_id} not found")
        return course

    async def _ensure_provider(self, provider_id: str | None) -> None:
        if provider_id is None:
            return
        if await self.session.get(ProviderModel, provider_id) is None:
            raise NotFoundError(f"Provider {provider_id} not found")

    async def create_course(self, actor: Identity, data: Mapping[str, Any]) -> CourseModel:
        values = {key: data[key] for key in COURSE_FIELDS if key in data}
        await self._ensure_provider(values.get("provider_id"))

        course = CourseModel(**values, created_by=actor.id)
        self.session.add(course)
        await self.session.commit()
        await self.session.refresh(course)

        await logger.ainfo(
            "course_created",
            course_id=course.id,
            training_name=course.training_name,
            created_by=actor.id,
        )
        return course

    async def update_course(
        self, actor: Identity, course_id: str, changes: Mapping[str, Any]
    ) -> CourseModel:
        course = await self.get_course(course_id)
        values = {key: changes[key] for key in COURSE_FIELDS if key in changes}
        if "provider_id" in values:
            await self._ensure_provider(values["provider_id"])

        for key, value in values.items():
            if value is None and key in ("training_name", "is_active"):
                continue
            setattr(course, key, value)

        await self.session.commit()
        await self.session.refresh(course)

        await logger.ainfo(
            "course_updated",
            course_id=course.id,
            updated_by=actor.id,
            updated_fields=sorted(values),
        )
        return course

    async def delete_course(self, actor: Identity, course_id: str) -> None:
        await self.get_course(course_id)
        await self.session.execute(delete(CourseModel).where(CourseModel.id == course_id))
        await self.session.commit()

        await logger.ainfo("course_deleted", course_id=course_id, deleted_by=actor.id)


class ProviderService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_providers(self, *, active_only: bool = False) -> list[ProviderModel]:
        stmt = select(ProviderModel).order_by(ProviderModel.name)
        if active_only:
            stmt = stmt.where(ProviderModel.is_active.is_(True))
        return list((await self.session.execute(stmt)).scalars().all())

    async def get_provider(self, provider_id: str) -> ProviderModel:
        provider = await self.session.get(ProviderModel, provider_id)
        if provider is None:
            raise NotFoundError(f"Provider {provider_id} not found")
        return provider

    async def _ensure_name_free(self, name: str, *, exclude_id: str | None = None) -> None:
        stmt = select(ProviderModel.id).where(func.lower(ProviderModel.name) == name.lower())
        if exclude_id is not None:
            stmt = stmt.where(ProviderModel.id != exclude_id)
        if await self.session.scalar(stmt.limit(1)) is not None:
            raise ConflictError(f"Provider with name '{name}' already exists")

    async def _commit_unique(self, name: str) -> None:
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            await logger.awarning("provider_duplicate_name", name=name)
            raise ConflictError(f"Provider with name '{name}' already exists") from exc

    async def create_provider(self, actor: Identity, data: Mapping[str, Any]) -> ProviderModel:
        values = {key: data[key] for key in PROVIDER_FIELDS if key in data}
        await self._ensure_name_free(values["name"])

        provider = ProviderModel(**values, created_by=actor.id)
        self.session.add(provider)
        await self._commit_unique(provider.name)
        await self.session.refresh(provider)

        await logger.ainfo(
            "provider_created",
            provider_id=provider.id,
            name=provider.name,
            created_by=actor.id,
        )
        return provider

    async def update_provider(
        self, actor: Identity, provider_id: str, changes: Mapping[str, Any]
    ) -> ProviderModel:
        provider = await self.get_provider(provider_id)
        values = {key: changes[key] for key in PROVIDER_FIELDS if key in changes}
        if values.get("name") is not None:
            await self._ensure_name_free(values["name"], exclude_id=provider.id)

        for key, value in values.items():
            if value is None and key in ("name", "is_active"):
                continue
            setattr(provider, key, value)

        await self._commit_unique(provider.name)
        await self.session.refresh(provider)

        await logger.ainfo(
            "provider_updated",
            provider_id=provider.id,
            updated_by=actor.id,
            updated_fields=sorted(values),
        )
        return provider

    async def delete_provider(self, actor: Identity, provider_id: str) -> None:
        await self.get_provider(provider_id)

        # Courses keep existing without a provider
        await self.session.execute(
            update(CourseModel)
            .where(CourseModel.provider_id == provider_id)
            .values(provider_id=None)
        )
        await self.session.execute(delete(ProviderModel).where(ProviderModel.id == provider_id))
        await self.session.commit()

        await logger.ainfo("provider_deleted", provider_id=provider_id, deleted_by=actor.id)
