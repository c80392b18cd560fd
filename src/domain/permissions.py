"""Pure permission predicates over the role hierarchy.

Course creation is an exact-role gate while employee management is a rank
threshold. Both kinds live in ``PERMISSION_RULES`` so the asymmetry stays
visible instead of being folded into one rank comparison.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from src.domain.roles import (
    ASSIGNABLE_ROLES,
    DIRECT_ASSIGNMENTS,
    ROLE_DISPLAY_NAMES,
    Role,
    rank_of,
)


class RuleKind(str, Enum):
    EXACT = "exact"
    RANK_AT_LEAST = "rank_at_least"


@dataclass(frozen=True, slots=True)
class PermissionRule:
    kind: RuleKind
    role: Role

    def allows(self, role: Role) -> bool:
        if self.kind is RuleKind.EXACT:
            return role is self.role
        return rank_of(role) >= rank_of(self.role)


PERMISSION_RULES: dict[str, PermissionRule] = {
    "create_courses": PermissionRule(RuleKind.EXACT, Role.HR_SUPER),
    "manage_employees": PermissionRule(RuleKind.RANK_AT_LEAST, Role.HR_LINE),
    "import_excel": PermissionRule(RuleKind.RANK_AT_LEAST, Role.HR_LINE),
    "access_admin_panel": PermissionRule(RuleKind.RANK_AT_LEAST, Role.HR_LINE),
}


def check(permission: str, role: Role) -> bool:
    """Evaluate a named rule from ``PERMISSION_RULES``."""
    return PERMISSION_RULES[permission].allows(role)


def can_assign_role(user_role: Role, target_role: Role) -> bool:
    """Single-step assignment: only the role immediately below."""
    return target_role in DIRECT_ASSIGNMENTS[user_role]


def get_roles_user_can_assign(user_role: Role) -> list[Role]:
    """Every role below ``user_role`` in chain order."""
    return list(ASSIGNABLE_ROLES[user_role])


def can_create_courses(user_role: Role) -> bool:
    return check("create_courses", user_role)


def can_manage_employees(user_role: Role) -> bool:
    return check("manage_employees", user_role)


def can_import_excel(user_role: Role) -> bool:
    return check("import_excel", user_role)


def can_access_admin_panel(user_role: Role) -> bool:
    return check("access_admin_panel", user_role)


def can_edit_user(user_role: Role, target_user_role: Role) -> bool:
    """Whether ``user_role`` may modify an account holding ``target_user_role``.

    A super admin may edit anyone except another super admin (self included).
    Everybody else may only edit strictly lower ranks.
    """
    if user_role is Role.SUPER_ADMIN:
        return target_user_role is not Role.SUPER_ADMIN
    return rank_of(user_role) > rank_of(target_user_role)


def is_admin(role: Role) -> bool:
    return role is not Role.EMPLOYEE


def is_hr_super(role: Role) -> bool:
    return role is Role.HR_SUPER


def is_super_admin(role: Role) -> bool:
    return role is Role.SUPER_ADMIN


def get_role_display_name(role: Role) -> str:
    return ROLE_DISPLAY_NAMES[role]
