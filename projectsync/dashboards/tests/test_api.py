"""
Tests for the role dashboards.
"""

import pytest

from projectsync.evaluations.services import submit_evaluation
from projectsync.notifications.models import NotificationType
from projectsync.notifications.services import notify

MARKS = dict.fromkeys(["documentation", "presentation", "implementation", "innovation", "teamwork"], 15)


@pytest.mark.django_db
class TestStudentDashboard:
    def test_with_group_and_project(self, client_for, student, approved_project):
        notify(student, NotificationType.GENERAL, "Hello")

        response = client_for(student).get("/api/dashboard/student")

        assert response.status_code == 200
        data = response.json()
        assert data["group_name"] == "Team Alpha"
        assert data["member_count"] == 2
        assert data["project_status"] == "approved"
        assert data["supervisor_name"] == approved_project.supervisor.get_full_name()
        assert data["unread_notifications"] == 1
        assert data["results_published"] is False

    def test_without_group(self, client_for, student3, active_session):
        data = client_for(student3).get("/api/dashboard/student").json()

        assert data["group_id"] is None
        assert data["project_id"] is None
        assert data["milestone_progress"] == 0

    def test_other_roles_forbidden(self, client_for, supervisor):
        assert client_for(supervisor).get("/api/dashboard/student").status_code == 403


@pytest.mark.django_db
class TestStaffDashboards:
    def test_supervisor(self, client_for, supervisor, approved_project):
        data = client_for(supervisor).get("/api/dashboard/supervisor").json()

        assert data["supervised_groups"] == 1
        assert data["capacity"] == 5
        assert data["pending_evaluations"] == 1

    def test_pmo(self, client_for, pmo, project, student3):
        data = client_for(pmo).get("/api/dashboard/pmo").json()

        assert data["students"] == 3
        assert data["groups"] == 1
        assert data["groups_without_supervisor"] == 1
        assert data["projects_by_status"]["draft"] == 1
        assert data["projects_by_status"]["approved"] == 0

    def test_external(self, client_for, external, approved_project):
        client = client_for(external)

        assert client.get("/api/dashboard/external").json()["projects_to_evaluate"] == 1

        submit_evaluation(approved_project, external, MARKS)

        data = client.get("/api/dashboard/external").json()
        assert data["projects_to_evaluate"] == 0
        assert data["evaluations_submitted"] == 1

    def test_exam_cell(self, client_for, exam_cell, approved_project, supervisor):
        submit_evaluation(approved_project, supervisor, MARKS)

        data = client_for(exam_cell).get("/api/dashboard/exam-cell").json()

        assert data["approved_projects"] == 1
        assert data["evaluations_submitted"] == 1
        assert data["results_published"] is False

    def test_admin_reads_every_dashboard(self, client_for, admin_user, active_session):
        client = client_for(admin_user)

        for path in ["student", "supervisor", "pmo", "external", "exam-cell", "admin"]:
            assert client.get(f"/api/dashboard/{path}").status_code == 200

        data = client.get("/api/dashboard/admin").json()
        assert data["users_by_role"]["admin"] == 1
        assert data["active_session"] == "2025-2026"

    def test_admin_dashboard_forbidden_to_pmo(self, client_for, pmo):
        assert client_for(pmo).get("/api/dashboard/admin").status_code == 403
