from __future__ import annotations

import asyncio
import io
import time
import zipfile
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from openpyxl import Workbook
from src.api.deps import issue_smoke_token
from src.domain.models import Identity
from src.domain.roles import Role
from src.infrastructure.db.models import UserModel

DEFAULT_PASSWORD = "Secret123"

UserFactory = Callable[..., Awaitable[UserModel]]

IMPORT_HEADER = ("employee_id", "first_name", "last_name", "email", "password", "role")


def identity_for(role: Role, user_id: str | None = None) -> Identity:
    return Identity(
        id=user_id or f"{role.value}-actor",
        employee_id="9999999",
        first_name="Acting",
        last_name=role.value,
        role=role,
    )


def auth_headers(role: Role = Role.EMPLOYEE, user_id: str | None = None) -> dict[str, str]:
    token = issue_smoke_token(identity_for(role, user_id))
    return {"Authorization": f"Bearer {token}"}


def headers_for(user: UserModel) -> dict[str, str]:
    """Bearer headers carrying the claims of a stored account."""
    identity = Identity(
        id=user.id,
        employee_id=user.employee_id,
        first_name=user.first_name,
        last_name=user.last_name,
        role=user.role,
        email=user.email,
    )
    return {"Authorization": f"Bearer {issue_smoke_token(identity)}"}


def build_workbook(
    rows: Sequence[Sequence[Any]],
    header: Sequence[str] = IMPORT_HEADER,
) -> bytes:
    """Serialize rows under a header line into .xlsx bytes."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(list(header))
    for row in rows:
        sheet.append(list(row))

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def truncate_sheet(content: bytes, sheet: str = "xl/worksheets/sheet1.xml") -> bytes:
    """Return a copy of an .xlsx whose first sheet XML is cut in half."""
    source = zipfile.ZipFile(io.BytesIO(content))
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as target:
        for item in source.infolist():
            data = source.read(item.filename)
            if item.filename == sheet:
                data = data[: len(data) // 2]
            target.writestr(item, data)
    return buffer.getvalue()


async def run_with_loop_monitor(work: Awaitable[Any], interval: float = 0.01) -> tuple[Any, float]:
    """Await ``work`` while a ticker measures the longest event-loop stall."""
    gaps: list[float] = []
    done = asyncio.Event()

    async def ticker() -> None:
        last = time.perf_counter()
        while not done.is_set():
            await asyncio.sleep(interval)
            now = time.perf_counter()
            gaps.append(now - last)
            last = now

    task = asyncio.create_task(ticker())
    try:
        result = await work
    finally:
        done.set()
        await task
    return result, max(gaps, default=0.0)
