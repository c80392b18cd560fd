from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from src.domain.roles import Role

from .base import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class TrainingType(str, enum.Enum):
    """Category of a training offering."""

    PREPARATION = "preparation"
    RETRAINING = "retraining"
    PROFESSIONAL_DEV = "professional_dev"
    MANDATORY = "mandatory"


class CourseFormat(str, enum.Enum):
    ONLINE = "online"
    OFFLINE = "offline"
    HYBRID = "hybrid"


class UserModel(Base):
    """SQLAlchemy model for users table."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    employee_id: Mapped[str] = mapped_column(String(7), unique=True, nullable=False, index=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[Role] = mapped_column(
        Enum(Role, name="role", values_callable=_enum_values),
        default=Role.EMPLOYEE,
        nullable=False,
    )
    # Provenance only: resolved by lookup, never cascaded
    created_by: Mapped[str | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, employee_id={self.employee_id}, role={self.role.value})>"


class ProviderModel(Base):
    """Organization or platform that delivers courses."""

    __tablename__ = "providers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    website: Mapped[str | None] = mapped_column(String(500))
    contact_email: Mapped[str | None] = mapped_column(String(255))
    contact_phone: Mapped[str | None] = mapped_column(String(50))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_by: Mapped[str | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    courses: Mapped[list[CourseModel]] = relationship(
        back_populates="provider", passive_deletes=True
    )


class CourseModel(Base):
    """Catalog entry describing a training offering."""

    __tablename__ = "courses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    training_type: Mapped[TrainingType | None] = mapped_column(
        Enum(TrainingType, name="training_type", values_callable=_enum_values),
        nullable=True,
    )
    program_direction: Mapped[str | None] = mapped_column(String(255))
    training_name: Mapped[str] = mapped_column(String(500), nullable=False)
    duration: Mapped[str | None] = mapped_column(String(100))
    format: Mapped[CourseFormat | None] = mapped_column(
        Enum(CourseFormat, name="format", values_callable=_enum_values),
        nullable=True,
    )
    price_without_vat: Mapped[str | None] = mapped_column(String(50))
    price_with_vat: Mapped[str | None] = mapped_column(String(50))
    provider_id: Mapped[str | None] = mapped_column(
        ForeignKey("providers.id", ondelete="SET NULL"), nullable=True
    )
    description: Mapped[str | None] = mapped_column(Text)
    content: Mapped[str | None] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_by: Mapped[str | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    provider: Mapped[ProviderModel | None] = relationship(back_populates="courses")


__all__ = [
    "CourseFormat",
    "CourseModel",
    "ProviderModel",
    "TrainingType",
    "UserModel",
]
