from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from src.infrastructure.db.models import CourseFormat, TrainingType


def _strip_or_none(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class CourseCreate(BaseModel):
    training_type: TrainingType | None = None
    program_direction: str | None = Field(None, max_length=255)
    training_name: str = Field(..., min_length=3, max_length=500)
    duration: str | None = Field(None, max_length=100)
    format: CourseFormat | None = None
    price_without_vat: str | None = Field(None, max_length=50)
    price_with_vat: str | None = Field(None, max_length=50)
    provider_id: str | None = None
    description: str | None = None
    content: str | None = None
    is_active: bool = True

    @field_validator(
        "program_direction",
        "duration",
        "price_without_vat",
        "price_with_vat",
        "provider_id",
        "description",
        "content",
        mode="before",
    )
    @classmethod
    def _optional_text(cls, value: Any) -> Any:
        return _strip_or_none(value)


class CourseUpdate(CourseCreate):
    model_config = ConfigDict(extra="forbid")

    training_name: str | None = Field(None, min_length=3, max_length=500)
    is_active: bool | None = None


class CourseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    training_type: TrainingType | None = None
    program_direction: str | None = None
    training_name: str
    duration: str | None = None
    format: CourseFormat | None = None
    price_without_vat: str | None = None
    price_with_vat: str | None = None
    provider_id: str | None = None
    description: str | None = None
    content: str | None = None
    is_active: bool
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime


class ProviderCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    website: str | None = Field(None, max_length=500)
    contact_email: EmailStr | None = None
    contact_phone: str | None = Field(None, max_length=50)
    is_active: bool = True

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator(
        "description", "website", "contact_email", "contact_phone", mode="before"
    )
    @classmethod
    def _optional_text(cls, value: Any) -> Any:
        return _strip_or_none(value)


class ProviderUpdate(ProviderCreate):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=255)
    is_active: bool | None = None


class ProviderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None = None
    website: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    is_active: bool
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime
