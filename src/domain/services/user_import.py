"""Bulk import of employee accounts from an Excel workbook."""

from __future__ import annotations

import asyncio
import io
import re
import zipfile
from collections.abc import Iterator
from typing import Any

import structlog
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from pydantic import BaseModel, EmailStr, Field, ValidationError, field_validator
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.config import get_settings
from src.domain.errors import ImportFileError
from src.domain.models import Identity, ImportResult
from src.domain.permissions import get_roles_user_can_assign
from src.domain.roles import Role
from src.domain.services.auth_service import hash_password
from src.domain.services.users import UserService
from src.infrastructure.db.models import UserModel

logger = structlog.get_logger()

ALLOWED_EXTENSIONS = (".xlsx", ".xls")
HEADER_ROW = 1
UNREADABLE_FILE_MESSAGE = "Could not read the spreadsheet"

# Normalized header text -> field name
COLUMN_ALIASES: dict[str, str] = {
    "employeeid": "employee_id",
    "firstname": "first_name",
    "lastname": "last_name",
    "email": "email",
    "password": "password",
    "role": "role",
}


class ImportRow(BaseModel):
    """One spreadsheet row, after cell normalization."""

    employee_id: str = Field(..., pattern=r"^[0-9]{7}$")
    first_name: str = Field(..., min_length=2, max_length=100)
    last_name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr | None = None
    password: str = Field(..., min_length=8, max_length=128)
    role: Role

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


def _normalize_header(value: Any) -> str:
    return re.sub(r"[\s_\-]", "", str(value or "")).lower()


def _cell_text(value: Any, *, field: str | None = None) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int) and field == "employee_id":
        # Excel stores numeric IDs without their leading zeros
        return str(value).zfill(7)
    return str(value).strip()


def format_row_errors(exc: ValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        messages.append(f"{location}: {error['msg']}")
    return "; ".join(messages)


def _sheet_records(sheet: Any) -> Iterator[tuple[int, dict[str, str]]]:
    rows = sheet.iter_rows(values_only=True)
    header = next(rows, None)
    if header is None:
        raise ImportFileError("File is empty")

    columns = {
        index: COLUMN_ALIASES[_normalize_header(title)]
        for index, title in enumerate(header)
        if _normalize_header(title) in COLUMN_ALIASES
    }

    for row_number, values in enumerate(rows, start=HEADER_ROW + 1):
        if all(value is None or str(value).strip() == "" for value in values):
            continue
        record = {field: "" for field in COLUMN_ALIASES.values()}
        for index, field in columns.items():
            if index < len(values):
                record[field] = _cell_text(values[index], field=field)
        yield row_number, record


def read_rows(content: bytes) -> Iterator[tuple[int, dict[str, str]]]:
    """Yield ``(sheet_row_number, record)`` for each non-blank data row of the first sheet.

    The sheet XML is parsed lazily in read-only mode, so a corrupt sheet
    surfaces while iterating rather than on open.
    """
    try:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as exc:
        raise ImportFileError(UNREADABLE_FILE_MESSAGE) from exc

    # XML errors subclass SyntaxError under both the stdlib and lxml parsers
    try:
        yield from _sheet_records(workbook.worksheets[0])
    except (SyntaxError, ValueError, zipfile.BadZipFile, KeyError, OSError) as exc:
        raise ImportFileError(UNREADABLE_FILE_MESSAGE) from exc
    finally:
        workbook.close()


def load_rows(content: bytes) -> list[tuple[int, dict[str, str]]]:
    return list(read_rows(content))


class UserImportService:
    """Creates accounts row by row; a failing row never aborts the batch."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.users = UserService(session)

    async def import_workbook(self, actor: Identity, *, filename: str, content: bytes) -> ImportResult:
        settings = get_settings()

        if not filename.lower().endswith(ALLOWED_EXTENSIONS):
            raise ImportFileError("Unsupported file format. Only .xlsx and .xls are accepted")

        # Parsing and hashing are CPU-bound; keep them off the event loop
        rows = await asyncio.to_thread(load_rows, content)
        if not rows:
            raise ImportFileError("File is empty")
        if len(rows) > settings.import_max_rows:
            raise ImportFileError(f"File has more than {settings.import_max_rows} rows")

        await logger.ainfo(
            "user_import_started",
            filename=filename,
            rows=len(rows),
            imported_by=actor.id,
        )

        allowed_roles = get_roles_user_can_assign(actor.role)
        seen: set[str] = set()
        result = ImportResult()

        for row_number, record in rows:
            label = record.get("employee_id") or "N/A"

            try:
                row = ImportRow.model_validate(record)
            except ValidationError as exc:
                result.record_failure(row_number, label, format_row_errors(exc))
                continue

            if row.role not in allowed_roles:
                result.record_failure(
                    row_number, row.employee_id, f"You cannot assign role: {row.role.value}"
                )
                continue

            if row.employee_id in seen or await self.users.employee_id_exists(row.employee_id):
                result.record_failure(row_number, row.employee_id, "User already exists")
                continue

            error = await self._insert(actor, row)
            if error is not None:
                result.record_failure(row_number, row.employee_id, error)
                continue

            seen.add(row.employee_id)
            result.record_success()

        await logger.ainfo(
            "user_import_finished",
            filename=filename,
            success=result.success,
            failed=result.failed,
            imported_by=actor.id,
        )
        return result

    async def _insert(self, actor: Identity, row: ImportRow) -> str | None:
        password_hash = await asyncio.to_thread(hash_password, row.password)
        self.session.add(
            UserModel(
                employee_id=row.employee_id,
                password=password_hash,
                first_name=row.first_name,
                last_name=row.last_name,
                email=row.email or None,
                role=row.role,
                created_by=actor.id,
                is_active=True,
            )
        )
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            return "User already exists"
        except SQLAlchemyError:
            await self.session.rollback()
            await logger.aexception("user_import_row_failed", employee_id=row.employee_id)
            return "Failed to create user"
        return None
