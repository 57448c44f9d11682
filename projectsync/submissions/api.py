"""
Submissions API controller.
"""

from uuid import UUID

from django.http import HttpRequest
from django.shortcuts import get_object_or_404
from ninja import File
from ninja import Form
from ninja.files import UploadedFile
from ninja_extra import api_controller
from ninja_extra import http_get
from ninja_extra import http_post

from projectsync.core.api import BaseAPI
from projectsync.core.api import IsAuthenticated
from projectsync.core.exceptions import APIException
from projectsync.core.exceptions import BadRequestError
from projectsync.core.exceptions import ErrorSchema
from projectsync.core.exceptions import NotFoundError
from projectsync.core.exceptions import PermissionDeniedError
from projectsync.core.schemas import UserMinimalSchema
from projectsync.projects.models import Project
from projectsync.submissions.models import Submission
from projectsync.submissions.models import SubmissionStatus
from projectsync.submissions.schemas import SubmissionCreateSchema
from projectsync.submissions.schemas import SubmissionReviewSchema
from projectsync.submissions.schemas import SubmissionSchema
from projectsync.submissions.services import create_submission
from projectsync.submissions.services import review_submission


def submission_to_schema(submission: Submission) -> SubmissionSchema:
    return SubmissionSchema(
        id=submission.id,
        project_id=submission.project_id,
        group_id=submission.group_id,
        milestone_type=submission.milestone_type,
        title=submission.title,
        description=submission.description,
        file_url=submission.file.url if submission.file else "",
        file_name=submission.file_name,
        file_size=submission.file_size,
        version=submission.version,
        status=submission.status,
        submitted_by=UserMinimalSchema.from_optional(submission.submitted_by),
        reviewed_by=UserMinimalSchema.from_optional(submission.reviewed_by),
        reviewed_at=submission.reviewed_at,
        feedback=submission.feedback,
        similarity_score=submission.similarity_score,
        created=submission.created,
    )


SUBMISSION_RELATED = ("group", "submitted_by", "reviewed_by")


@api_controller("/submissions", tags=["Submissions"], permissions=[IsAuthenticated])
class SubmissionController(BaseAPI):
    """Milestone document uploads and their review."""

    @http_get(
        "/",
        response={200: list[SubmissionSchema]},
        url_name="submissions_list",
    )
    def list_submissions(
        self,
        request: HttpRequest,
        project_id: UUID | None = None,
        milestone_type: str | None = None,
        status: str | None = None,
    ):
        """
        List submissions visible to the caller.

        Optional filters:
        - project_id
        - milestone_type: proposal, mid_term, final
        - status: uploaded, approved, rejected
        """
        submissions = Submission.objects.visible_to(request.user).select_related(*SUBMISSION_RELATED)

        if project_id:
            submissions = submissions.filter(project_id=project_id)
        if milestone_type:
            submissions = submissions.filter(milestone_type=milestone_type)
        if status:
            submissions = submissions.filter(status=status)

        return 200, [submission_to_schema(s) for s in submissions.order_by("milestone_type", "-version")]

    @http_get(
        "/{submission_id}",
        response={200: SubmissionSchema, 404: ErrorSchema},
        url_name="submissions_detail",
    )
    def get_submission(self, request: HttpRequest, submission_id: UUID):
        submission = (
            Submission.objects.visible_to(request.user)
            .select_related(*SUBMISSION_RELATED)
            .filter(id=submission_id)
            .first()
        )
        if submission is None:
            return NotFoundError("Submission not found.").to_response()
        return 200, submission_to_schema(submission)

    @http_post(
        "/",
        response={
            201: SubmissionSchema,
            400: ErrorSchema,
            403: ErrorSchema,
            404: ErrorSchema,
            413: ErrorSchema,
            415: ErrorSchema,
        },
        url_name="submissions_create",
    )
    def upload(
        self,
        request: HttpRequest,
        data: Form[SubmissionCreateSchema],
        file: UploadedFile = File(...),
    ):
        """Upload a new version of a milestone document. Group members only."""
        project = get_object_or_404(Project.objects.select_related("group"), id=data.project_id)

        if not project.is_member(request.user):
            return PermissionDeniedError("Only group members can upload documents.").to_response()

        try:
            submission = create_submission(
                project,
                request.user,
                data.milestone_type,
                data.title,
                file,
                description=data.description,
            )
        except APIException as e:
            return e.to_response()

        return 201, submission_to_schema(submission)

    @http_post(
        "/{submission_id}/review",
        response={200: SubmissionSchema, 400: ErrorSchema, 403: ErrorSchema, 404: ErrorSchema},
        url_name="submissions_review",
    )
    def review(self, request: HttpRequest, submission_id: UUID, data: SubmissionReviewSchema):
        """
        Approve or reject an uploaded version.

        Reviewers: the group's supervisor, the PMO and administrators.
        """
        submission = get_object_or_404(
            Submission.objects.select_related(*SUBMISSION_RELATED),
            id=submission_id,
        )

        if not submission.can_be_reviewed_by(request.user):
            return PermissionDeniedError("You cannot review this submission.").to_response()

        if submission.status != SubmissionStatus.UPLOADED:
            return BadRequestError("This submission has already been reviewed.").to_response()

        try:
            review_submission(
                submission,
                data.approve,
                request.user,
                feedback=data.feedback,
                similarity_score=data.similarity_score,
            )
        except APIException as e:
            return e.to_response()

        return 200, submission_to_schema(submission)
