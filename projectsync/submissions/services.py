"""
Upload validation, version allocation and review of submissions.
"""

import logging
from pathlib import Path

from django.conf import settings
from django.db import transaction
from django.db.models import Max

from projectsync.core.exceptions import BadRequestError
from projectsync.core.exceptions import FileTooLargeError
from projectsync.core.exceptions import InvalidFileTypeError
from projectsync.core.workflow import review
from projectsync.notifications.models import NotificationType
from projectsync.notifications.services import notify_many
from projectsync.projects.models import Milestone
from projectsync.projects.models import Project
from projectsync.projects.models import ProjectStatus
from projectsync.submissions.models import Submission
from projectsync.submissions.models import SubmissionStatus

logger = logging.getLogger(__name__)


def validate_upload(file) -> None:
    """
    Raises:
        InvalidFileTypeError: extension not in SUBMISSION_ALLOWED_EXTENSIONS
        FileTooLargeError: larger than SUBMISSION_MAX_FILE_SIZE
    """
    extension = Path(file.name).suffix.lower().lstrip(".")
    allowed = settings.SUBMISSION_ALLOWED_EXTENSIONS
    if extension not in allowed:
        raise InvalidFileTypeError(
            f"'.{extension}' files are not accepted. Allowed: {', '.join(allowed)}."
        )
    if file.size > settings.SUBMISSION_MAX_FILE_SIZE:
        max_mb = settings.SUBMISSION_MAX_FILE_SIZE // (1024 * 1024)
        raise FileTooLargeError(f"The file exceeds the {max_mb} MB limit.")


def create_submission(project: Project, user, milestone_type: str, title: str, file, description: str = "") -> Submission:
    """
    Store a new version of a milestone document.

    The project row is locked while the next version number is chosen.

    Raises:
        BadRequestError: project locked or milestone already approved
        InvalidFileTypeError / FileTooLargeError: rejected upload
    """
    validate_upload(file)

    with transaction.atomic():
        project = Project.objects.select_for_update().get(id=project.id)

        if project.status == ProjectStatus.LOCKED:
            raise BadRequestError("This project is locked; no further uploads are accepted.")

        versions = Submission.objects.filter(project=project, milestone_type=milestone_type)
        if versions.filter(status=SubmissionStatus.APPROVED).exists():
            raise BadRequestError("This milestone already has an approved submission.")

        last = versions.aggregate(last=Max("version"))["last"] or 0
        submission = Submission(
            project=project,
            group_id=project.group_id,
            milestone_type=milestone_type,
            title=title,
            description=description,
            file_name=file.name,
            file_size=file.size,
            version=last + 1,
            submitted_by=user,
        )
        submission.file.save(file.name, file, save=False)
        submission.save()

    for milestone in Milestone.objects.filter(project=project, milestone_type=milestone_type):
        milestone.refresh_status()

    logger.info(
        "SUBMISSION: %s v%d uploaded for project %s by %s",
        milestone_type,
        submission.version,
        project.id,
        user.email,
    )
    return submission


def review_submission(submission: Submission, approve: bool, reviewer, feedback: str = "", similarity_score=None) -> Submission:
    """
    Approve or reject an uploaded version.

    Approval completes the project's milestone of the same type.

    Raises:
        BadRequestError: another version of the milestone is already approved
    """
    with transaction.atomic():
        Project.objects.select_for_update().get(id=submission.project_id)
        if approve and (
            Submission.objects.filter(
                project_id=submission.project_id,
                milestone_type=submission.milestone_type,
                status=SubmissionStatus.APPROVED,
            )
            .exclude(id=submission.id)
            .exists()
        ):
            raise BadRequestError("Another version of this milestone is already approved.")

        if similarity_score is not None:
            submission.similarity_score = similarity_score
        review(submission, approve, reviewer, feedback)

        if approve:
            milestone = Milestone.objects.filter(
                project_id=submission.project_id,
                milestone_type=submission.milestone_type,
            ).first()
            if milestone is not None and milestone.completed_at is None:
                milestone.complete()

    outcome = "approved" if approve else "returned with changes requested"
    notify_many(
        submission.group.members.all(),
        NotificationType.DOCUMENT_FEEDBACK,
        f"Document {outcome}",
        f"'{submission.title}' (version {submission.version}) was {outcome}.",
        link=f"/submissions/{submission.id}",
    )
    return submission
