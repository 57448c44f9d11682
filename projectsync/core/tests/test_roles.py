"""
Tests for the role system.
"""

import pytest

from projectsync.core.roles import ROLE_DESCRIPTIONS
from projectsync.core.roles import Role
from projectsync.core.roles import get_user_role
from projectsync.core.roles import get_user_roles
from projectsync.core.roles import is_admin
from projectsync.core.roles import is_pmo_or_admin
from projectsync.core.roles import is_staff_role
from projectsync.core.roles import user_has_any_role
from projectsync.core.roles import user_has_role
from projectsync.users.tests.factories import UserFactory


class TestRoleEnum:
    def test_role_values(self):
        assert len(Role) == 6
        assert Role.STUDENT.value == "student"
        assert Role.EXTERNAL_PANEL.value == "external_panel"
        assert Role.EXAM_CELL.value == "exam_cell"

    def test_role_choices(self):
        choices = Role.choices()
        assert len(choices) == 6
        assert ("pmo", "PMO") in choices

    def test_role_descriptions(self):
        for role in Role:
            assert ROLE_DESCRIPTIONS[role]


@pytest.mark.django_db
class TestUserRoles:
    def test_user_without_role(self, role_groups):
        user = UserFactory()
        assert get_user_roles(user) == []
        assert get_user_role(user) is None

    def test_set_role_replaces_previous_role(self, role_groups):
        user = UserFactory(role=Role.STUDENT)
        user.set_role(Role.SUPERVISOR)

        assert get_user_roles(user) == ["supervisor"]
        assert user.role == "supervisor"

    def test_highest_role_wins(self, role_groups):
        user = UserFactory(role=Role.SUPERVISOR)
        user.groups.add(role_groups[Role.PMO])

        assert get_user_role(user) == "pmo"

    def test_superuser_reported_as_admin(self, role_groups):
        user = UserFactory(is_superuser=True)
        assert get_user_role(user) == "admin"
        assert is_admin(user)

    def test_role_checks(self, student, pmo, admin_user):
        assert user_has_role(student, Role.STUDENT)
        assert user_has_role(student, "student")
        assert not user_has_role(student, Role.PMO)
        assert user_has_any_role(pmo, [Role.PMO, Role.ADMIN])

        assert is_pmo_or_admin(pmo)
        assert is_pmo_or_admin(admin_user)
        assert not is_pmo_or_admin(student)

    def test_staff_roles(self, student, supervisor, external):
        assert not is_staff_role(student)
        assert is_staff_role(supervisor)
        assert is_staff_role(external)
