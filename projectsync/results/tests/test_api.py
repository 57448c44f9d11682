"""
Tests for the results API.
"""

import pytest

from projectsync.evaluations.services import submit_evaluation
from projectsync.results.services import compile_results
from projectsync.results.services import publish_results

MARKS = dict.fromkeys(["documentation", "presentation", "implementation", "innovation", "teamwork"], 16)


@pytest.fixture
def compiled(approved_project, active_session, supervisor, external, exam_cell):
    submit_evaluation(approved_project, supervisor, MARKS)
    submit_evaluation(approved_project, external, MARKS)
    compile_results(active_session, exam_cell)
    return approved_project


@pytest.mark.django_db
class TestExamCell:
    def test_compile(self, client_for, exam_cell, approved_project, supervisor):
        submit_evaluation(approved_project, supervisor, MARKS)

        response = client_for(exam_cell).post("/api/results/compile", data={}, content_type="application/json")

        assert response.status_code == 200
        assert [r["project_id"] for r in response.json()] == [str(approved_project.id)]

    def test_pmo_reads_but_cannot_compile(self, client_for, pmo, compiled):
        client = client_for(pmo)

        assert client.get("/api/results/").status_code == 200
        response = client.post("/api/results/compile", data={}, content_type="application/json")
        assert response.status_code == 403

    def test_student_cannot_list(self, client_for, student, compiled):
        assert client_for(student).get("/api/results/").status_code == 403

    def test_publish(self, client_for, exam_cell, compiled):
        client = client_for(exam_cell)

        response = client.post("/api/results/publish", data={}, content_type="application/json")

        assert response.status_code == 200
        assert response.json()["is_published"] is True
        assert response.json()["compiled_projects"] == 1
        again = client.post("/api/results/publish", data={}, content_type="application/json")
        assert again.status_code == 400

    def test_export(self, client_for, exam_cell, compiled):
        response = client_for(exam_cell).get("/api/results/export")

        assert response.status_code == 200
        assert response["Content-Type"] == "text/csv"
        assert "attachment" in response["Content-Disposition"]
        assert b"Smart Attendance System" in response.content


@pytest.mark.django_db
class TestMyResult:
    def test_hidden_until_published(self, client_for, student, compiled, active_session, exam_cell):
        client = client_for(student)

        assert client.get("/api/results/my").status_code == 404

        publish_results(active_session, exam_cell)

        response = client.get("/api/results/my")
        assert response.status_code == 200
        assert response.json()["grade"] == "C"
