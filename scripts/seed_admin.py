#!/usr/bin/env python3
"""
Seed the bootstrap accounts and sample course providers.

Creates the super admin (0000001) and five HR super admins (0000002-0000006)
when they are missing, then adds the sample providers. Safe to run repeatedly.

Run with:
    python scripts/seed_admin.py
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.config import get_settings
from src.domain.roles import Role
from src.domain.services.auth_service import hash_password
from src.infrastructure.db.models import ProviderModel, UserModel
from src.infrastructure.db.session import dispose_engine, get_session_factory

SUPER_ADMIN_ID = "0000001"
SUPER_ADMIN_PASSWORD = "SuperAdmin123!"
HR_SUPER_PASSWORD = "HRSuper123!"

SAMPLE_PROVIDERS = [
    {
        "name": "Coursera",
        "description": "Онлайн-платформа для обучения с курсами от ведущих университетов",
        "website": "https://www.coursera.org",
        "contact_email": "info@coursera.org",
    },
    {
        "name": "Udemy",
        "description": "Глобальная платформа онлайн-обучения с тысячами курсов",
        "website": "https://www.udemy.com",
        "contact_email": "support@udemy.com",
    },
    {
        "name": "LinkedIn Learning",
        "description": "Профессиональные курсы для развития карьеры",
        "website": "https://www.linkedin.com/learning",
        "contact_email": "help@linkedin.com",
    },
    {
        "name": "edX",
        "description": "Некоммерческая платформа онлайн-обучения",
        "website": "https://www.edx.org",
        "contact_email": "info@edx.org",
    },
    {
        "name": "Stepik",
        "description": "Образовательная платформа и конструктор курсов",
        "website": "https://stepik.org",
        "contact_email": "hello@stepik.org",
    },
]


async def _get_user(session: AsyncSession, employee_id: str) -> UserModel | None:
    result = await session.execute(select(UserModel).where(UserModel.employee_id == employee_id))
    return result.scalar_one_or_none()


async def seed_accounts(session: AsyncSession) -> UserModel:
    super_admin = await _get_user(session, SUPER_ADMIN_ID)
    if super_admin is None:
        super_admin = UserModel(
            employee_id=SUPER_ADMIN_ID,
            password=hash_password(SUPER_ADMIN_PASSWORD),
            first_name="Super",
            last_name="Admin",
            email="superadmin@hr-ktzh.kz",
            role=Role.SUPER_ADMIN,
        )
        session.add(super_admin)
        await session.flush()
        print(f"Super admin created: {SUPER_ADMIN_ID}")

    for index in range(2, 7):
        employee_id = str(index).zfill(7)
        if await _get_user(session, employee_id) is not None:
            continue
        session.add(
            UserModel(
                employee_id=employee_id,
                password=hash_password(HR_SUPER_PASSWORD),
                first_name="HR Super",
                last_name=f"Admin {index - 1}",
                email=f"hrsuper{index - 1}@hr-ktzh.kz",
                role=Role.HR_SUPER,
                created_by=super_admin.id,
            )
        )
        print(f"HR super admin created: {employee_id}")

    await session.commit()
    return super_admin


async def seed_providers(session: AsyncSession, creator: UserModel) -> None:
    result = await session.execute(select(ProviderModel.name))
    existing = {name.lower() for name in result.scalars()}

    added = 0
    for provider in SAMPLE_PROVIDERS:
        if provider["name"].lower() in existing:
            continue
        session.add(ProviderModel(**provider, created_by=creator.id))
        added += 1

    await session.commit()
    print(f"Sample providers added: {added}")


async def main() -> None:
    settings = get_settings()
    print(f"Environment: {settings.environment}")

    session_factory = get_session_factory()
    try:
        async with session_factory() as session:
            super_admin = await seed_accounts(session)
            await seed_providers(session, super_admin)
    finally:
        await dispose_engine()

    print("\nLogin credentials:")
    print(f"  Super admin: {SUPER_ADMIN_ID} / {SUPER_ADMIN_PASSWORD}")
    print(f"  HR super admins: 0000002 - 0000006 / {HR_SUPER_PASSWORD}")


if __name__ == "__main__":
    asyncio.run(main())
