"""
Tests for the submissions API.
"""

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from projectsync.submissions.models import Submission
from projectsync.submissions.services import create_submission


def pdf(name="proposal.pdf"):
    return SimpleUploadedFile(name, b"%PDF-1.4 content", content_type="application/pdf")


@pytest.mark.django_db
class TestUpload:
    def test_member_uploads(self, client_for, student2, approved_project):
        response = client_for(student2).post(
            "/api/submissions/",
            data={
                "project_id": str(approved_project.id),
                "milestone_type": "proposal",
                "title": "Proposal document",
                "file": pdf(),
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["version"] == 1
        assert data["status"] == "uploaded"
        assert data["submitted_by"]["id"] == str(student2.id)

    def test_outsider_cannot_upload(self, client_for, student3, approved_project):
        response = client_for(student3).post(
            "/api/submissions/",
            data={
                "project_id": str(approved_project.id),
                "milestone_type": "proposal",
                "title": "Not mine",
                "file": pdf(),
            },
        )

        assert response.status_code == 403
        assert not Submission.objects.exists()

    def test_wrong_file_type(self, client_for, student, approved_project):
        response = client_for(student).post(
            "/api/submissions/",
            data={
                "project_id": str(approved_project.id),
                "milestone_type": "proposal",
                "title": "Script",
                "file": SimpleUploadedFile("script.sh", b"echo hi"),
            },
        )

        assert response.status_code == 415
        assert response.json()["code"] == "INVALID_FILE_TYPE"


@pytest.mark.django_db
class TestReviewAndList:
    def test_supervisor_reviews(self, client_for, supervisor, student, approved_project):
        submission = create_submission(approved_project, student, "proposal", "Proposal", pdf())

        response = client_for(supervisor).post(
            f"/api/submissions/{submission.id}/review",
            data={"approve": False, "feedback": "Needs a clearer scope."},
            content_type="application/json",
        )

        assert response.status_code == 200
        assert response.json()["status"] == "rejected"
        assert response.json()["feedback"] == "Needs a clearer scope."

    def test_student_cannot_review(self, client_for, student, approved_project):
        submission = create_submission(approved_project, student, "proposal", "Proposal", pdf())

        response = client_for(student).post(
            f"/api/submissions/{submission.id}/review",
            data={"approve": True},
            content_type="application/json",
        )

        assert response.status_code == 403

    def test_cannot_review_twice(self, client_for, supervisor, student, approved_project):
        submission = create_submission(approved_project, student, "proposal", "Proposal", pdf())
        client = client_for(supervisor)
        client.post(
            f"/api/submissions/{submission.id}/review",
            data={"approve": True},
            content_type="application/json",
        )

        response = client.post(
            f"/api/submissions/{submission.id}/review",
            data={"approve": False, "feedback": "Changed my mind."},
            content_type="application/json",
        )

        assert response.status_code == 400

    def test_list_by_milestone(self, client_for, student2, student, approved_project):
        create_submission(approved_project, student, "proposal", "Proposal", pdf())
        create_submission(approved_project, student, "proposal", "Proposal v2", pdf())
        create_submission(approved_project, student, "mid_term", "Mid-term", pdf("mid.pdf"))

        response = client_for(student2).get(
            f"/api/submissions/?project_id={approved_project.id}&milestone_type=proposal"
        )

        assert response.status_code == 200
        assert [s["version"] for s in response.json()] == [2, 1]

    def test_hidden_from_outsiders(self, client_for, student3, student, approved_project):
        submission = create_submission(approved_project, student, "proposal", "Proposal", pdf())

        response = client_for(student3).get(f"/api/submissions/{submission.id}")

        assert response.status_code == 404
