from __future__ import annotations

import os

# Must be set before src is imported: settings are cached and the password
# context reads its cost factor at import time.
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret"

from collections.abc import AsyncIterator, Iterator

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from src.api.deps import get_db_session
from src.api.main import app
from src.domain.roles import Role
from src.domain.services.auth_service import hash_password
from src.infrastructure.db.base import Base
from src.infrastructure.db.models import UserModel

from tests.utils import DEFAULT_PASSWORD, UserFactory


@pytest.fixture()
async def session_factory() -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    """Fresh in-memory database wired into the app for one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", future=True, poolclass=StaticPool
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False)

    async def override_db_session() -> AsyncIterator[AsyncSession]:
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    yield factory
    app.dependency_overrides.pop(get_db_session, None)
    await engine.dispose()


@pytest.fixture()
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client for testing async routes."""
    transport = ASGITransport(app=app)  # type: ignore
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture()
async def db(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """Provide a database session for tests that need direct DB access."""
    async with session_factory() as session:
        yield session


@pytest.fixture()
def make_user(session_factory: async_sessionmaker[AsyncSession]) -> UserFactory:
    """Insert an account directly and return the stored row."""

    async def _make_user(
        employee_id: str,
        role: Role = Role.EMPLOYEE,
        *,
        password: str = DEFAULT_PASSWORD,
        first_name: str = "Test",
        last_name: str = "User",
        email: str | None = None,
        is_active: bool = True,
    ) -> UserModel:
        async with session_factory() as session:
            user = UserModel(
                employee_id=employee_id,
                password=hash_password(password),
                first_name=first_name,
                last_name=last_name,
                email=email,
                role=role,
                is_active=is_active,
            )
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user

    return _make_user


@pytest.fixture()
def test_client() -> Iterator[TestClient]:
    """Synchronous client running the full app lifespan."""
    with TestClient(app) as client:
        yield client
