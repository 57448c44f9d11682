"""
Tests for submission versioning, validation and review.
"""

from datetime import timedelta

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.utils import timezone

from projectsync.core.exceptions import BadRequestError
from projectsync.core.exceptions import FileTooLargeError
from projectsync.core.exceptions import InvalidFileTypeError
from projectsync.notifications.models import Notification
from projectsync.notifications.models import NotificationType
from projectsync.projects.models import Milestone
from projectsync.projects.models import MilestoneStatus
from projectsync.projects.models import ProjectStatus
from projectsync.submissions.models import SubmissionStatus
from projectsync.submissions.services import create_submission
from projectsync.submissions.services import review_submission
from projectsync.submissions.services import validate_upload


def pdf(name="proposal.pdf", content=b"%PDF-1.4 proposal"):
    return SimpleUploadedFile(name, content, content_type="application/pdf")


@pytest.mark.django_db
class TestValidateUpload:
    def test_accepts_allowed_extension(self):
        validate_upload(pdf("Report.PDF"))

    def test_rejects_extension(self):
        with pytest.raises(InvalidFileTypeError):
            validate_upload(SimpleUploadedFile("run.exe", b"MZ"))

    def test_rejects_large_file(self, settings):
        settings.SUBMISSION_MAX_FILE_SIZE = 10

        with pytest.raises(FileTooLargeError):
            validate_upload(pdf(content=b"x" * 11))


@pytest.mark.django_db
class TestCreateSubmission:
    def test_versions_increase_per_milestone(self, approved_project, student):
        first = create_submission(approved_project, student, "proposal", "Proposal", pdf())
        second = create_submission(approved_project, student, "proposal", "Proposal v2", pdf())
        other = create_submission(approved_project, student, "mid_term", "Mid-term", pdf("mid.pdf"))

        assert (first.version, second.version, other.version) == (1, 2, 1)
        assert second.file_name == "proposal.pdf"
        assert second.group_id == approved_project.group_id

    def test_stores_descriptive_file_name(self, approved_project, student):
        name = "Final_Year_Project_Proposal_Team_Alpha_2025.pdf"

        submission = create_submission(approved_project, student, "proposal", "Proposal", pdf(name))

        submission.refresh_from_db()
        assert submission.file_name == name
        assert submission.file.name.startswith(f"submissions/{approved_project.id}/proposal/")
        assert submission.file.name.endswith(name)

    def test_upload_moves_milestone_in_progress(self, approved_project, student):
        milestone = Milestone.objects.create(
            project=approved_project,
            title="Proposal",
            milestone_type="proposal",
            due_date=timezone.now() + timedelta(days=10),
        )

        create_submission(approved_project, student, "proposal", "Proposal", pdf())

        milestone.refresh_from_db()
        assert milestone.status == MilestoneStatus.IN_PROGRESS

    def test_locked_project_refuses_uploads(self, approved_project, student):
        approved_project.status = ProjectStatus.LOCKED
        approved_project.save()

        with pytest.raises(BadRequestError):
            create_submission(approved_project, student, "final", "Final", pdf())

    def test_approved_milestone_refuses_new_versions(self, approved_project, student, supervisor):
        submission = create_submission(approved_project, student, "proposal", "Proposal", pdf())
        review_submission(submission, True, supervisor)

        with pytest.raises(BadRequestError):
            create_submission(approved_project, student, "proposal", "Proposal v2", pdf())


@pytest.mark.django_db
class TestReviewSubmission:
    def test_approval_completes_milestone(self, approved_project, student, student2, supervisor):
        milestone = Milestone.objects.create(
            project=approved_project,
            title="Proposal",
            milestone_type="proposal",
            due_date=timezone.now() + timedelta(days=10),
        )
        submission = create_submission(approved_project, student, "proposal", "Proposal", pdf())

        review_submission(submission, True, supervisor, "Well structured.")

        milestone.refresh_from_db()
        assert submission.status == SubmissionStatus.APPROVED
        assert submission.reviewed_by == supervisor
        assert submission.reviewed_at is not None
        assert milestone.status == MilestoneStatus.COMPLETED
        assert Notification.objects.filter(
            user=student2,
            notification_type=NotificationType.DOCUMENT_FEEDBACK,
        ).exists()

    def test_rejection_keeps_feedback(self, approved_project, student, supervisor):
        submission = create_submission(approved_project, student, "proposal", "Proposal", pdf())

        review_submission(submission, False, supervisor, "Add a literature review.")

        submission.refresh_from_db()
        assert submission.status == SubmissionStatus.REJECTED
        assert submission.feedback == "Add a literature review."

    def test_second_version_cannot_be_approved(self, approved_project, student, supervisor):
        first = create_submission(approved_project, student, "proposal", "Proposal", pdf())
        second = create_submission(approved_project, student, "proposal", "Proposal v2", pdf())
        review_submission(first, True, supervisor)

        with pytest.raises(BadRequestError):
            review_submission(second, True, supervisor)

        second.refresh_from_db()
        assert second.status == SubmissionStatus.UPLOADED
        assert approved_project.submissions.filter(status=SubmissionStatus.APPROVED).count() == 1

    def test_other_pending_version_can_still_be_rejected(self, approved_project, student, supervisor):
        first = create_submission(approved_project, student, "proposal", "Proposal", pdf())
        second = create_submission(approved_project, student, "proposal", "Proposal v2", pdf())
        review_submission(first, True, supervisor)

        review_submission(second, False, supervisor, "Superseded by the approved version.")

        second.refresh_from_db()
        assert second.status == SubmissionStatus.REJECTED
