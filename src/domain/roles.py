"""Role hierarchy reference table.

The six roles form a strict chain::

    super_admin > hr_super > hr_central > hr_regional > hr_line > employee

Two assignment relations are kept side by side on purpose. ``DIRECT_ASSIGNMENTS``
is the single-step table (each role hands out only the role right below it) and
``ASSIGNABLE_ROLES`` is the full downward closure used when creating accounts.
Neither is derived from the other.
"""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    SUPER_ADMIN = "super_admin"
    HR_SUPER = "hr_super"
    HR_CENTRAL = "hr_central"
    HR_REGIONAL = "hr_regional"
    HR_LINE = "hr_line"
    EMPLOYEE = "employee"

    @classmethod
    def contains(cls, value: str) -> bool:
        return value in {role.value for role in cls}


ROLE_RANK: dict[Role, int] = {
    Role.SUPER_ADMIN: 6,
    Role.HR_SUPER: 5,
    Role.HR_CENTRAL: 4,
    Role.HR_REGIONAL: 3,
    Role.HR_LINE: 2,
    Role.EMPLOYEE: 1,
}

DIRECT_ASSIGNMENTS: dict[Role, frozenset[Role]] = {
    Role.SUPER_ADMIN: frozenset({Role.HR_SUPER}),
    Role.HR_SUPER: frozenset({Role.HR_CENTRAL}),
    Role.HR_CENTRAL: frozenset({Role.HR_REGIONAL}),
    Role.HR_REGIONAL: frozenset({Role.HR_LINE}),
    Role.HR_LINE: frozenset(),
    Role.EMPLOYEE: frozenset(),
}

ASSIGNABLE_ROLES: dict[Role, tuple[Role, ...]] = {
    Role.SUPER_ADMIN: (
        Role.HR_SUPER,
        Role.HR_CENTRAL,
        Role.HR_REGIONAL,
        Role.HR_LINE,
        Role.EMPLOYEE,
    ),
    Role.HR_SUPER: (Role.HR_CENTRAL, Role.HR_REGIONAL, Role.HR_LINE, Role.EMPLOYEE),
    Role.HR_CENTRAL: (Role.HR_REGIONAL, Role.HR_LINE, Role.EMPLOYEE),
    Role.HR_REGIONAL: (Role.HR_LINE, Role.EMPLOYEE),
    Role.HR_LINE: (Role.EMPLOYEE,),
    Role.EMPLOYEE: (),
}

ROLE_DISPLAY_NAMES: dict[Role, str] = {
    Role.SUPER_ADMIN: "Супер Админ",
    Role.HR_SUPER: "HR Супер Админ",
    Role.HR_CENTRAL: "HR Центральный Админ",
    Role.HR_REGIONAL: "HR Региональный Админ",
    Role.HR_LINE: "HR Линейный Админ",
    Role.EMPLOYEE: "Сотрудник",
}


def rank_of(role: Role) -> int:
    return ROLE_RANK[role]
