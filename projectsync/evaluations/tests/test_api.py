"""
Tests for the evaluations API.
"""

import pytest

from projectsync.evaluations.services import submit_evaluation
from projectsync.results.models import ResultPublication

MARKS = {
    "documentation": 14,
    "presentation": 14,
    "implementation": 14,
    "innovation": 14,
    "teamwork": 14,
}


@pytest.mark.django_db
class TestSubmit:
    def test_supervisor_submits(self, client_for, supervisor, approved_project):
        response = client_for(supervisor).post(
            "/api/evaluations/",
            data={"project_id": str(approved_project.id), **MARKS, "feedback": "Good progress."},
            content_type="application/json",
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total_marks"] == 70
        assert data["evaluator_role"] == "supervisor"
        assert data["status"] == "submitted"

    def test_marks_out_of_range(self, client_for, supervisor, approved_project):
        response = client_for(supervisor).post(
            "/api/evaluations/",
            data={"project_id": str(approved_project.id), **MARKS, "teamwork": 25},
            content_type="application/json",
        )

        assert response.status_code == 422

    def test_student_forbidden(self, client_for, student, approved_project):
        response = client_for(student).post(
            "/api/evaluations/",
            data={"project_id": str(approved_project.id), **MARKS},
            content_type="application/json",
        )

        assert response.status_code == 403
        assert response.json()["code"] == "PERMISSION_DENIED"


@pytest.mark.django_db
class TestPendingAndVisibility:
    def test_pending_drops_submitted(self, client_for, external, approved_project):
        client = client_for(external)

        before = client.get("/api/evaluations/pending").json()
        submit_evaluation(approved_project, external, MARKS)
        after = client.get("/api/evaluations/pending").json()

        assert [p["project_id"] for p in before] == [str(approved_project.id)]
        assert before[0]["evaluator_role"] == "external_panel"
        assert after == []

    def test_students_see_marks_after_publication(self, client_for, student, supervisor, approved_project):
        submit_evaluation(approved_project, supervisor, MARKS)
        client = client_for(student)

        assert client.get("/api/evaluations/").json() == []

        ResultPublication.objects.create(session=approved_project.group.session, is_published=True)

        assert len(client.get("/api/evaluations/").json()) == 1
