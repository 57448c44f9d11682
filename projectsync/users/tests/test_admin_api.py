"""
Tests for the user management API.
"""

import pytest

from projectsync.audit.models import AuditAction
from projectsync.audit.models import AuditLog
from projectsync.core.roles import Role
from projectsync.groups.models import ProjectGroup
from projectsync.users.models import User
from projectsync.users.tests.factories import UserFactory


@pytest.mark.django_db
class TestListUsers:
    def test_pmo_lists_users_by_role(self, client_for, pmo, student, supervisor):
        response = client_for(pmo).get("/api/users/?role=student")

        assert response.status_code == 200
        emails = [u["email"] for u in response.json()]
        assert emails == [student.email]

    def test_student_cannot_list_users(self, client_for, student):
        response = client_for(student).get("/api/users/")

        assert response.status_code == 403

    def test_roles_with_counts(self, client_for, admin_user, student, student2):
        response = client_for(admin_user).get("/api/users/roles")

        assert response.status_code == 200
        counts = {r["name"]: r["user_count"] for r in response.json()}
        assert counts["student"] == 2
        assert counts["admin"] == 1


@pytest.mark.django_db
class TestCreateUser:
    def test_pmo_creates_supervisor(self, client_for, pmo):
        response = client_for(pmo).post(
            "/api/users/",
            data={
                "email": "dr.rahim@projectsync.edu",
                "first_name": "Rahim",
                "role": "supervisor",
                "designation": "Assistant Professor",
                "expertise": ["NLP", "Computer Vision"],
                "max_groups": 3,
            },
            content_type="application/json",
        )

        assert response.status_code == 201
        user = User.objects.get(email="dr.rahim@projectsync.edu")
        assert user.role == "supervisor"
        assert user.supervision_capacity == 3
        assert AuditLog.objects.filter(action=AuditAction.USER_CREATED, user=pmo).exists()

    def test_pmo_cannot_create_exam_cell(self, client_for, pmo):
        response = client_for(pmo).post(
            "/api/users/",
            data={"email": "exams2@projectsync.edu", "first_name": "Exam", "role": "exam_cell"},
            content_type="application/json",
        )

        assert response.status_code == 403
        assert not User.objects.filter(email="exams2@projectsync.edu").exists()

    def test_admin_creates_admin_with_staff_flag(self, client_for, admin_user):
        response = client_for(admin_user).post(
            "/api/users/",
            data={"email": "ops@projectsync.edu", "first_name": "Ops", "role": "admin"},
            content_type="application/json",
        )

        assert response.status_code == 201
        assert User.objects.get(email="ops@projectsync.edu").is_staff

    def test_duplicate_email(self, client_for, admin_user, student):
        response = client_for(admin_user).post(
            "/api/users/",
            data={"email": student.email, "first_name": "Again"},
            content_type="application/json",
        )

        assert response.status_code == 409


@pytest.mark.django_db
class TestUpdateUser:
    def test_deactivate_account(self, client_for, pmo, student):
        response = client_for(pmo).put(
            f"/api/users/{student.id}",
            data={"is_active": False},
            content_type="application/json",
        )

        assert response.status_code == 200
        student.refresh_from_db()
        assert not student.is_active
        assert AuditLog.objects.filter(action=AuditAction.USER_DEACTIVATED).exists()

    def test_cannot_deactivate_self(self, client_for, admin_user):
        response = client_for(admin_user).put(
            f"/api/users/{admin_user.id}",
            data={"is_active": False},
            content_type="application/json",
        )

        assert response.status_code == 400

    def test_pmo_cannot_modify_exam_cell(self, client_for, pmo, exam_cell):
        response = client_for(pmo).put(
            f"/api/users/{exam_cell.id}",
            data={"first_name": "Changed"},
            content_type="application/json",
        )

        assert response.status_code == 403


@pytest.mark.django_db
class TestSetRole:
    def test_admin_promotes_student(self, client_for, admin_user, student):
        response = client_for(admin_user).post(
            f"/api/users/{student.id}/role",
            data={"role": "supervisor"},
            content_type="application/json",
        )

        assert response.status_code == 200
        assert response.json()["role"] == "supervisor"
        assert AuditLog.objects.filter(action=AuditAction.ROLE_CHANGED).exists()

    def test_staff_cannot_become_student(self, client_for, admin_user, supervisor):
        response = client_for(admin_user).post(
            f"/api/users/{supervisor.id}/role",
            data={"role": "student"},
            content_type="application/json",
        )

        assert response.status_code == 400
        supervisor.refresh_from_db()
        assert supervisor.role == "supervisor"

    def test_pmo_cannot_change_roles(self, client_for, pmo, student):
        response = client_for(pmo).post(
            f"/api/users/{student.id}/role",
            data={"role": "pmo"},
            content_type="application/json",
        )

        assert response.status_code == 403


@pytest.mark.django_db
class TestSupervisors:
    def test_supervisors_with_load(self, client_for, student, supervisor, active_session, role_groups):
        UserFactory(email="busy@projectsync.edu", role=Role.SUPERVISOR, max_groups=1)
        busy = User.objects.get(email="busy@projectsync.edu")
        ProjectGroup.objects.create(name="G1", leader=student, session=active_session, supervisor=busy)

        response = client_for(student).get("/api/users/supervisors")

        assert response.status_code == 200
        rows = {row["email"]: row for row in response.json()}
        assert rows["busy@projectsync.edu"]["current_groups"] == 1
        assert rows["busy@projectsync.edu"]["has_capacity"] is False
        assert rows[supervisor.email]["current_groups"] == 0
        assert rows[supervisor.email]["max_groups"] == 5
