"""Pydantic schemas for employee account endpoints."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from src.domain.roles import Role

EMPLOYEE_ID_PATTERN = r"^[0-9]{7}$"


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class UserCreate(BaseModel):
    employee_id: str = Field(..., pattern=EMPLOYEE_ID_PATTERN, description="7-digit employee ID")
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=2, max_length=100)
    last_name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr | None = None
    role: Role

    @field_validator("email", mode="before")
    @classmethod
    def _email_optional(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("password")
    @classmethod
    def _password_strength(cls, value: str) -> str:
        missing = []
        if not re.search(r"[A-Z]", value):
            missing.append("an uppercase letter")
        if not re.search(r"[a-z]", value):
            missing.append("a lowercase letter")
        if not re.search(r"[0-9]", value):
            missing.append("a digit")
        if missing:
            raise ValueError(f"Password must contain {', '.join(missing)}")
        return value


class UserUpdate(BaseModel):
    """Partial update. Only these fields may be changed; anything else is rejected."""

    model_config = ConfigDict(extra="forbid")

    first_name: str | None = Field(None, min_length=2, max_length=100)
    last_name: str | None = Field(None, min_length=2, max_length=100)
    email: EmailStr | None = None
    role: Role | None = None
    is_active: bool | None = None

    @field_validator("email", mode="before")
    @classmethod
    def _email_optional(cls, value: Any) -> Any:
        return _blank_to_none(value)


class ResetPasswordRequest(BaseModel):
    password: str = Field(..., max_length=128)


class UserResponse(BaseModel):
    """Public view of an account. The password hash is never part of it."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    employee_id: str
    first_name: str
    last_name: str
    email: str | None = None
    role: Role
    is_active: bool
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime


class AssignableRole(BaseModel):
    value: Role
    display_name: str


class ActionResponse(BaseModel):
    success: bool = True
    message: str


class ImportRowErrorItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    row: int
    employee_id: str
    error: str


class ImportResultResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    success: int
    failed: int
    errors: list[ImportRowErrorItem]
