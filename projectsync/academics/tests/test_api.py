"""
Tests for the academic session and template API.
"""

from datetime import timedelta

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.utils import timezone

from projectsync.academics.models import AcademicSession
from projectsync.academics.models import DocumentTemplate
from projectsync.academics.models import SessionDeadline
from projectsync.audit.models import AuditAction
from projectsync.audit.models import AuditLog


@pytest.mark.django_db
class TestSessions:
    def test_admin_creates_session(self, client_for, admin_user):
        response = client_for(admin_user).post(
            "/api/sessions/",
            data={"name": "2026-2027", "start_date": "2026-09-01", "end_date": "2027-06-30"},
            content_type="application/json",
        )

        assert response.status_code == 201
        assert response.json()["is_active"] is False
        assert AuditLog.objects.filter(action=AuditAction.SESSION_CREATED).exists()

    def test_pmo_cannot_create_session(self, client_for, pmo):
        response = client_for(pmo).post(
            "/api/sessions/",
            data={"name": "2026-2027", "start_date": "2026-09-01", "end_date": "2027-06-30"},
            content_type="application/json",
        )

        assert response.status_code == 403

    def test_dates_validated(self, client_for, admin_user):
        response = client_for(admin_user).post(
            "/api/sessions/",
            data={"name": "Backwards", "start_date": "2027-06-30", "end_date": "2026-09-01"},
            content_type="application/json",
        )

        assert response.status_code == 422
        assert not AcademicSession.objects.filter(name="Backwards").exists()

    def test_duplicate_name(self, client_for, admin_user, active_session):
        response = client_for(admin_user).post(
            "/api/sessions/",
            data={"name": active_session.name, "start_date": "2026-09-01", "end_date": "2027-06-30"},
            content_type="application/json",
        )

        assert response.status_code == 409

    def test_activate_session(self, client_for, admin_user, active_session):
        session = AcademicSession.objects.create(
            name="2026-2027",
            start_date=active_session.end_date + timedelta(days=1),
            end_date=active_session.end_date + timedelta(days=300),
        )

        response = client_for(admin_user).post(f"/api/sessions/{session.id}/activate")

        assert response.status_code == 200
        assert response.json()["is_active"] is True
        active_session.refresh_from_db()
        assert not active_session.is_active

    def test_get_active_session(self, client_for, student, active_session):
        response = client_for(student).get("/api/sessions/active")

        assert response.status_code == 200
        assert response.json()["id"] == str(active_session.id)

    def test_no_active_session(self, client_for, student):
        response = client_for(student).get("/api/sessions/active")

        assert response.status_code == 404


@pytest.mark.django_db
class TestDeadlines:
    def test_create_and_list_deadlines(self, client_for, admin_user, student, active_session):
        due = (timezone.now() + timedelta(days=14)).isoformat()

        response = client_for(admin_user).post(
            f"/api/sessions/{active_session.id}/deadlines",
            data={"name": "Proposal submission", "deadline_type": "proposal", "due_date": due},
            content_type="application/json",
        )
        assert response.status_code == 201

        response = client_for(student).get(f"/api/sessions/{active_session.id}/deadlines")
        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["deadline_type"] == "proposal"
        assert data[0]["is_past"] is False

    def test_one_deadline_per_type(self, client_for, admin_user, active_session):
        SessionDeadline.objects.create(
            session=active_session,
            name="Proposal",
            deadline_type="proposal",
            due_date=timezone.now() + timedelta(days=10),
        )

        response = client_for(admin_user).post(
            f"/api/sessions/{active_session.id}/deadlines",
            data={
                "name": "Proposal again",
                "deadline_type": "proposal",
                "due_date": (timezone.now() + timedelta(days=20)).isoformat(),
            },
            content_type="application/json",
        )

        assert response.status_code == 409

    def test_delete_deadline(self, client_for, admin_user, active_session):
        deadline = SessionDeadline.objects.create(
            session=active_session,
            name="Final",
            deadline_type="final",
            due_date=timezone.now() + timedelta(days=90),
        )

        response = client_for(admin_user).delete(f"/api/sessions/deadlines/{deadline.id}")

        assert response.status_code == 200
        assert not SessionDeadline.objects.filter(id=deadline.id).exists()


@pytest.mark.django_db
class TestTemplates:
    def test_pmo_uploads_template(self, client_for, pmo, student):
        upload = SimpleUploadedFile("proposal.docx", b"template body", content_type="application/octet-stream")

        response = client_for(pmo).post(
            "/api/templates/",
            data={"name": "Proposal template", "category": "proposal", "file": upload},
        )

        assert response.status_code == 201
        assert DocumentTemplate.objects.filter(name="Proposal template").exists()

        response = client_for(student).get("/api/templates/?category=proposal")
        assert [t["name"] for t in response.json()] == ["Proposal template"]

    def test_student_cannot_upload(self, client_for, student):
        upload = SimpleUploadedFile("x.pdf", b"%PDF", content_type="application/pdf")

        response = client_for(student).post(
            "/api/templates/",
            data={"name": "Mine", "file": upload},
        )

        assert response.status_code == 403
