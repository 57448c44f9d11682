"""
Tests for the permission classes.
"""

import pytest
from django.contrib.auth.models import AnonymousUser
from django.test import RequestFactory

from projectsync.core.api.permissions import HasRole
from projectsync.core.api.permissions import IsAdmin
from projectsync.core.api.permissions import IsAuthenticated
from projectsync.core.api.permissions import IsPMOOrAdmin
from projectsync.core.roles import Role
from projectsync.users.tests.factories import UserFactory


class StudentsOnly(HasRole):
    roles = [Role.STUDENT]


class ExamCellOnly(HasRole):
    roles = [Role.EXAM_CELL]


@pytest.fixture
def request_factory():
    return RequestFactory()


def make_request(request_factory, user=None):
    request = request_factory.get("/")
    request.user = user if user else AnonymousUser()
    return request


@pytest.mark.django_db
class TestIsAuthenticated:
    def test_anonymous_user_denied(self, request_factory):
        assert IsAuthenticated().has_permission(make_request(request_factory), None) is False

    def test_authenticated_user_allowed(self, request_factory, student):
        assert IsAuthenticated().has_permission(make_request(request_factory, student), None) is True


@pytest.mark.django_db
class TestRolePermissions:
    def test_student_permission(self, request_factory, student, supervisor):
        assert StudentsOnly().has_permission(make_request(request_factory, student), None)
        assert not StudentsOnly().has_permission(make_request(request_factory, supervisor), None)

    def test_anonymous_denied_by_role_permission(self, request_factory):
        assert not ExamCellOnly().has_permission(make_request(request_factory), None)

    def test_superuser_passes_every_role(self, request_factory, role_groups):
        superuser = UserFactory(is_superuser=True)
        request = make_request(request_factory, superuser)

        assert StudentsOnly().has_permission(request, None)
        assert ExamCellOnly().has_permission(request, None)
        assert IsAdmin().has_permission(request, None)

    def test_custom_role_list(self, request_factory, exam_cell, pmo, student):
        class CanPublish(HasRole):
            roles = [Role.EXAM_CELL, Role.PMO]

        assert CanPublish().has_permission(make_request(request_factory, exam_cell), None)
        assert CanPublish().has_permission(make_request(request_factory, pmo), None)
        assert not CanPublish().has_permission(make_request(request_factory, student), None)


@pytest.mark.django_db
class TestAdminPermissions:
    def test_pmo_or_admin(self, request_factory, pmo, admin_user, supervisor):
        assert IsPMOOrAdmin().has_permission(make_request(request_factory, pmo), None)
        assert IsPMOOrAdmin().has_permission(make_request(request_factory, admin_user), None)
        assert not IsPMOOrAdmin().has_permission(make_request(request_factory, supervisor), None)

    def test_admin_only(self, request_factory, pmo, admin_user):
        assert IsAdmin().has_permission(make_request(request_factory, admin_user), None)
        assert not IsAdmin().has_permission(make_request(request_factory, pmo), None)
