"""
Tests for the projects API endpoints.
"""

from datetime import timedelta

import pytest
from django.utils import timezone

from projectsync.audit.models import AuditAction
from projectsync.audit.models import AuditLog
from projectsync.groups.models import ProjectGroup
from projectsync.projects.models import Milestone
from projectsync.projects.models import Project
from projectsync.projects.models import ProjectStatus
from projectsync.users.tests.factories import UserFactory


@pytest.mark.django_db
class TestCreateProject:
    def test_member_creates_draft(self, client_for, student2, group):
        response = client_for(student2).post(
            "/api/projects/",
            data={"title": "Crop Disease Detector", "abstract": "Leaf images classified on device."},
            content_type="application/json",
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "draft"
        assert data["group_id"] == str(group.id)
        assert len(data["members"]) == 2

    def test_one_project_per_group(self, client_for, student, project):
        response = client_for(student).post(
            "/api/projects/",
            data={"title": "Second", "abstract": "Another one."},
            content_type="application/json",
        )

        assert response.status_code == 409

    def test_requires_group(self, client_for, student3, active_session):
        response = client_for(student3).post(
            "/api/projects/",
            data={"title": "Lonely", "abstract": "No group."},
            content_type="application/json",
        )

        assert response.status_code == 400

    def test_blank_title_rejected(self, client_for, student, group):
        response = client_for(student).post(
            "/api/projects/",
            data={"title": "  ", "abstract": "Something."},
            content_type="application/json",
        )

        assert response.status_code == 422


@pytest.mark.django_db
class TestEditAndSubmit:
    def test_edit_draft(self, client_for, student, project):
        response = client_for(student).put(
            f"/api/projects/{project.id}",
            data={"title": "Smart Attendance v2"},
            content_type="application/json",
        )

        assert response.status_code == 200
        assert response.json()["title"] == "Smart Attendance v2"

    def test_outsider_cannot_edit(self, client_for, student3, project):
        response = client_for(student3).put(
            f"/api/projects/{project.id}",
            data={"title": "Hijacked"},
            content_type="application/json",
        )

        assert response.status_code == 403

    def test_submitted_project_not_editable(self, client_for, student, project):
        project.submit()
        project.save()

        response = client_for(student).put(
            f"/api/projects/{project.id}",
            data={"title": "Too late"},
            content_type="application/json",
        )

        assert response.status_code == 400

    def test_submit(self, client_for, student, project):
        response = client_for(student).post(f"/api/projects/{project.id}/submit")

        assert response.status_code == 200
        assert response.json()["status"] == "submitted"

    def test_cannot_submit_twice(self, client_for, student, project):
        client = client_for(student)
        client.post(f"/api/projects/{project.id}/submit")

        response = client.post(f"/api/projects/{project.id}/submit")

        assert response.status_code == 400


@pytest.mark.django_db
class TestReviewEndpoint:
    def test_pmo_approves(self, client_for, pmo, project):
        project.submit()
        project.save()

        response = client_for(pmo).post(
            f"/api/projects/{project.id}/review",
            data={"approve": True, "similarity_score": "8.5"},
            content_type="application/json",
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "approved"
        assert data["reviewed_by"]["id"] == str(pmo.id)

    def test_rejection_without_reason(self, client_for, pmo, project):
        project.submit()
        project.save()

        response = client_for(pmo).post(
            f"/api/projects/{project.id}/review",
            data={"approve": False},
            content_type="application/json",
        )

        assert response.status_code == 400
        project.refresh_from_db()
        assert project.status == ProjectStatus.SUBMITTED

    def test_student_cannot_review(self, client_for, student, project):
        project.submit()
        project.save()

        response = client_for(student).post(
            f"/api/projects/{project.id}/review",
            data={"approve": True},
            content_type="application/json",
        )

        assert response.status_code == 403

    def test_similarity_out_of_range(self, client_for, pmo, project):
        project.submit()
        project.save()

        response = client_for(pmo).post(
            f"/api/projects/{project.id}/review",
            data={"approve": True, "similarity_score": 140},
            content_type="application/json",
        )

        assert response.status_code == 422


@pytest.mark.django_db
class TestLockAndView:
    def test_pmo_locks_approved_project(self, client_for, pmo, approved_project):
        response = client_for(pmo).post(f"/api/projects/{approved_project.id}/lock")

        assert response.status_code == 200
        assert response.json()["status"] == "locked"
        assert AuditLog.objects.filter(action=AuditAction.PROJECT_LOCKED).exists()

    def test_cannot_lock_draft(self, client_for, pmo, project):
        response = client_for(pmo).post(f"/api/projects/{project.id}/lock")

        assert response.status_code == 400

    def test_supervisor_cannot_lock(self, client_for, supervisor, approved_project):
        response = client_for(supervisor).post(f"/api/projects/{approved_project.id}/lock")

        assert response.status_code == 403

    def test_my_project(self, client_for, student2, project):
        response = client_for(student2).get("/api/projects/my")

        assert response.status_code == 200
        assert response.json()["id"] == str(project.id)

    def test_hidden_from_outsiders(self, client_for, student3, project):
        response = client_for(student3).get(f"/api/projects/{project.id}")

        assert response.status_code == 404

    def test_external_panel_sees_approved_only(self, client_for, external, approved_project, active_session, role_groups):
        leader = UserFactory(email="lead3@projectsync.edu", role="student")
        other = ProjectGroup.objects.create(name="Team Draft", leader=leader, session=active_session)
        Project.objects.create(group=other, title="Draft idea", abstract="Not yet.")

        response = client_for(external).get("/api/projects/")

        assert [p["id"] for p in response.json()] == [str(approved_project.id)]

    def test_filter_by_status(self, client_for, pmo, project):
        response = client_for(pmo).get("/api/projects/?status=approved")

        assert response.json() == []

    def test_milestones_endpoint(self, client_for, student, approved_project):
        Milestone.objects.create(
            project=approved_project,
            title="Proposal",
            milestone_type="proposal",
            due_date=timezone.now() - timedelta(days=1),
        )

        response = client_for(student).get(f"/api/projects/{approved_project.id}/milestones")

        assert response.status_code == 200
        data = response.json()
        assert data["progress"] == 0
        assert data["milestones"][0]["status"] == "overdue"
