from __future__ import annotations

import pytest
from src.domain.permissions import (
    PERMISSION_RULES,
    can_access_admin_panel,
    can_assign_role,
    can_create_courses,
    can_edit_user,
    can_import_excel,
    can_manage_employees,
    get_role_display_name,
    get_roles_user_can_assign,
    is_admin,
    is_hr_super,
    is_super_admin,
)
from src.domain.roles import ASSIGNABLE_ROLES, ROLE_RANK, Role, rank_of

CHAIN = [
    Role.SUPER_ADMIN,
    Role.HR_SUPER,
    Role.HR_CENTRAL,
    Role.HR_REGIONAL,
    Role.HR_LINE,
    Role.EMPLOYEE,
]


def test_rank_is_strictly_decreasing_along_chain() -> None:
    ranks = [rank_of(role) for role in CHAIN]
    assert ranks == sorted(ranks, reverse=True)
    assert len(set(ranks)) == len(CHAIN)
    assert set(ROLE_RANK) == set(Role)


@pytest.mark.parametrize("role", CHAIN)
def test_assignable_roles_are_everything_strictly_below(role: Role) -> None:
    expected = [other for other in CHAIN if rank_of(other) < rank_of(role)]
    assert get_roles_user_can_assign(role) == expected


def test_assignable_roles_examples() -> None:
    assert get_roles_user_can_assign(Role.HR_CENTRAL) == [
        Role.HR_REGIONAL,
        Role.HR_LINE,
        Role.EMPLOYEE,
    ]
    assert get_roles_user_can_assign(Role.EMPLOYEE) == []
    assert Role.SUPER_ADMIN not in get_roles_user_can_assign(Role.SUPER_ADMIN)


def test_direct_assignment_is_single_step_only() -> None:
    assert can_assign_role(Role.SUPER_ADMIN, Role.HR_SUPER)
    assert can_assign_role(Role.HR_REGIONAL, Role.HR_LINE)
    assert not can_assign_role(Role.SUPER_ADMIN, Role.HR_CENTRAL)
    assert not can_assign_role(Role.HR_LINE, Role.EMPLOYEE)
    assert not can_assign_role(Role.EMPLOYEE, Role.EMPLOYEE)


def test_direct_assignment_is_subset_of_closure() -> None:
    for role in Role:
        for target in Role:
            if can_assign_role(role, target):
                assert target in ASSIGNABLE_ROLES[role]


@pytest.mark.parametrize("role", CHAIN)
def test_only_hr_super_creates_courses(role: Role) -> None:
    assert can_create_courses(role) is (role is Role.HR_SUPER)


def test_super_admin_cannot_create_courses() -> None:
    assert can_create_courses(Role.SUPER_ADMIN) is False


@pytest.mark.parametrize("role", CHAIN)
def test_manage_import_and_panel_share_hr_line_threshold(role: Role) -> None:
    expected = role is not Role.EMPLOYEE
    assert can_manage_employees(role) is expected
    assert can_import_excel(role) is expected
    assert can_access_admin_panel(role) is expected
    assert is_admin(role) is expected


def test_rule_table_names_every_gate() -> None:
    assert set(PERMISSION_RULES) == {
        "create_courses",
        "manage_employees",
        "import_excel",
        "access_admin_panel",
    }


class TestCanEditUser:
    def test_super_admin_edits_every_lower_role(self) -> None:
        for target in CHAIN[1:]:
            assert can_edit_user(Role.SUPER_ADMIN, target)

    def test_super_admin_cannot_edit_super_admin(self) -> None:
        assert can_edit_user(Role.SUPER_ADMIN, Role.SUPER_ADMIN) is False

    def test_no_role_edits_its_peer(self) -> None:
        for role in CHAIN:
            assert can_edit_user(role, role) is False

    def test_edit_requires_strictly_higher_rank(self) -> None:
        assert can_edit_user(Role.HR_CENTRAL, Role.HR_REGIONAL)
        assert can_edit_user(Role.HR_LINE, Role.EMPLOYEE)
        assert not can_edit_user(Role.HR_REGIONAL, Role.HR_CENTRAL)
        assert not can_edit_user(Role.EMPLOYEE, Role.HR_LINE)


def test_role_predicates() -> None:
    assert is_hr_super(Role.HR_SUPER)
    assert not is_hr_super(Role.SUPER_ADMIN)
    assert is_super_admin(Role.SUPER_ADMIN)
    assert not is_super_admin(Role.HR_SUPER)


def test_display_names_cover_all_roles() -> None:
    assert get_role_display_name(Role.EMPLOYEE) == "Сотрудник"
    assert get_role_display_name(Role.SUPER_ADMIN) == "Супер Админ"
    assert all(get_role_display_name(role) for role in Role)


def test_role_contains() -> None:
    assert Role.contains("hr_line")
    assert not Role.contains("admin")
