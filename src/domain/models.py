from __future__ import annotations

from dataclasses import dataclass, field

from src.domain.roles import Role


@dataclass(frozen=True, slots=True)
class Identity:
    """Public claims of an authenticated user. Never carries the password hash."""

    id: str
    employee_id: str
    first_name: str
    last_name: str
    role: Role
    email: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(slots=True)
class ImportRowError:
    row: int
    employee_id: str
    error: str


@dataclass(slots=True)
class ImportResult:
    """Accumulated outcome of a spreadsheet import."""

    success: int = 0
    failed: int = 0
    errors: list[ImportRowError] = field(default_factory=list)

    def record_success(self) -> None:
        self.success += 1

    def record_failure(self, row: int, employee_id: str, error: str) -> None:
        self.failed += 1
        self.errors.append(ImportRowError(row=row, employee_id=employee_id, error=error))
