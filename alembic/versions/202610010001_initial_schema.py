"""Initial schema: users, providers, courses

Revision ID: 202610010001
Revises:
Create Date: 2026-10-01 00:01:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "202610010001"
down_revision = None
branch_labels = None
depends_on = None

role_enum = sa.Enum(
    "super_admin",
    "hr_super",
    "hr_central",
    "hr_regional",
    "hr_line",
    "employee",
    name="role",
)

training_type_enum = sa.Enum(
    "preparation",
    "retraining",
    "professional_dev",
    "mandatory",
    name="training_type",
)

format_enum = sa.Enum("online", "offline", "hybrid", name="format")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("employee_id", sa.String(length=7), nullable=False),
        sa.Column("password", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("role", role_enum, nullable=False, server_default="employee"),
        sa.Column(
            "created_by",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_users_employee_id", "users", ["employee_id"], unique=True)

    op.create_table(
        "providers",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("website", sa.String(length=500), nullable=True),
        sa.Column("contact_email", sa.String(length=255), nullable=True),
        sa.Column("contact_phone", sa.String(length=50), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column(
            "created_by",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamps(),
    )

    op.create_table(
        "courses",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("training_type", training_type_enum, nullable=True),
        sa.Column("program_direction", sa.String(length=255), nullable=True),
        sa.Column("training_name", sa.String(length=500), nullable=False),
        sa.Column("duration", sa.String(length=100), nullable=True),
        sa.Column("format", format_enum, nullable=True),
        sa.Column("price_without_vat", sa.String(length=50), nullable=True),
        sa.Column("price_with_vat", sa.String(length=50), nullable=True),
        sa.Column(
            "provider_id",
            sa.String(length=36),
            sa.ForeignKey("providers.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column(
            "created_by",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("courses")
    op.drop_table("providers")
    op.drop_index("ix_users_employee_id", "users")
    op.drop_table("users")
    format_enum.drop(op.get_bind(), checkfirst=True)
    training_type_enum.drop(op.get_bind(), checkfirst=True)
    role_enum.drop(op.get_bind(), checkfirst=True)
