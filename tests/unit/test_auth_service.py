"""Unit tests for authentication service."""

from __future__ import annotations

import pytest
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.schemas.users import UserCreate, UserResponse
from src.domain.errors import InvalidCredentialsError
from src.domain.roles import Role
from src.domain.services.auth_service import (
    AuthService,
    hash_password,
    is_valid_employee_id,
    verify_password,
)

from tests.utils import DEFAULT_PASSWORD, UserFactory


class TestPasswordHashing:
    """Tests for password hashing functions."""

    def test_hash_password_returns_bcrypt_hash(self) -> None:
        """Hash should start with bcrypt prefix."""
        hashed = hash_password("Secret123")

        assert hashed.startswith("$2b$")
        assert len(hashed) == 60

    def test_hash_password_is_not_plaintext(self) -> None:
        password = "Secret123"
        assert password not in hash_password(password)

    def test_hash_password_unique_per_call(self) -> None:
        """Same password should produce different hashes (due to salt)."""
        assert hash_password("Secret123") != hash_password("Secret123")

    def test_verify_password(self) -> None:
        hashed = hash_password("Secret123")

        assert verify_password("Secret123", hashed) is True
        assert verify_password("secret123", hashed) is False
        assert verify_password("wrong", hashed) is False


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("0000001", True),
        ("1234567", True),
        ("123456", False),
        ("12345678", False),
        ("12a4567", False),
        ("", False),
        (" 1234567", False),
    ],
)
def test_is_valid_employee_id(value: str, expected: bool) -> None:
    assert is_valid_employee_id(value) is expected


class TestUserSchemas:
    def _payload(self, **overrides) -> dict:
        data = {
            "employee_id": "0000100",
            "password": "Secret123",
            "first_name": "Ivan",
            "last_name": "Petrov",
            "role": "employee",
        }
        data.update(overrides)
        return data

    def test_valid_payload(self) -> None:
        user = UserCreate.model_validate(self._payload(email=""))
        assert user.email is None
        assert user.role is Role.EMPLOYEE

    @pytest.mark.parametrize("password", ["secret123", "SECRET123", "SecretPwd", "Sh0rt"])
    def test_weak_password_rejected(self, password: str) -> None:
        with pytest.raises(ValidationError):
            UserCreate.model_validate(self._payload(password=password))

    def test_invalid_fields_reported_together(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            UserCreate.model_validate(
                self._payload(employee_id="12", first_name="I", email="not-an-email")
            )

        fields = {error["loc"][0] for error in exc_info.value.errors()}
        assert {"employee_id", "first_name", "email"} <= fields

    def test_unknown_role_rejected(self) -> None:
        with pytest.raises(ValidationError):
            UserCreate.model_validate(self._payload(role="admin"))

    def test_response_has_no_password_field(self) -> None:
        assert "password" not in UserResponse.model_fields


@pytest.mark.asyncio
class TestAuthenticate:
    async def test_success_returns_identity(self, db: AsyncSession, make_user: UserFactory) -> None:
        stored = await make_user("0000010", Role.HR_LINE, email="line@example.com")

        identity = await AuthService(db).authenticate(
            employee_id="0000010", password=DEFAULT_PASSWORD
        )

        assert identity.id == stored.id
        assert identity.role is Role.HR_LINE
        assert identity.email == "line@example.com"
        assert not hasattr(identity, "password")

    @pytest.mark.parametrize(
        ("employee_id", "password"),
        [
            ("0000011", "Wrong1234"),
            ("0000099", DEFAULT_PASSWORD),
            ("000", DEFAULT_PASSWORD),
            ("0000011", ""),
        ],
    )
    async def test_failures_share_one_error(
        self,
        db: AsyncSession,
        make_user: UserFactory,
        employee_id: str,
        password: str,
    ) -> None:
        await make_user("0000011")

        with pytest.raises(InvalidCredentialsError) as exc_info:
            await AuthService(db).authenticate(employee_id=employee_id, password=password)

        assert str(exc_info.value) == "Invalid employee ID or password"

    async def test_inactive_user_cannot_login(
        self, db: AsyncSession, make_user: UserFactory
    ) -> None:
        await make_user("0000012", is_active=False)

        with pytest.raises(InvalidCredentialsError, match="Invalid employee ID or password"):
            await AuthService(db).authenticate(employee_id="0000012", password=DEFAULT_PASSWORD)

    async def test_refresh_rejects_deactivated_user(
        self, db: AsyncSession, make_user: UserFactory
    ) -> None:
        stored = await make_user("0000013", is_active=False)

        with pytest.raises(InvalidCredentialsError):
            await AuthService(db).refresh_identity(stored.id)
