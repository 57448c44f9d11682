"""
Recording evaluator marks.
"""

import logging

from django.db import transaction

from projectsync.core.exceptions import BadRequestError
from projectsync.core.exceptions import PermissionDeniedError
from projectsync.core.roles import Role
from projectsync.core.roles import user_has_role
from projectsync.evaluations.models import MARK_FIELDS
from projectsync.evaluations.models import Evaluation
from projectsync.evaluations.models import EvaluatorRole
from projectsync.notifications.models import NotificationType
from projectsync.notifications.services import notify_many
from projectsync.projects.models import Project
from projectsync.results.models import results_published
from projectsync.users.models import User

logger = logging.getLogger(__name__)


def evaluator_role_for(user, project: Project) -> str | None:
    """The capacity in which ``user`` evaluates ``project``, if any."""
    if project.group.is_supervisor(user):
        return EvaluatorRole.SUPERVISOR
    if user_has_role(user, Role.EXTERNAL_PANEL):
        return EvaluatorRole.EXTERNAL_PANEL
    return None


def submit_evaluation(project: Project, evaluator, marks: dict, feedback: str = "") -> Evaluation:
    """
    Create or update ``evaluator``'s marks for ``project`` and submit them.

    Raises:
        PermissionDeniedError: not the group's supervisor nor external panel
        BadRequestError: project not approved, results already published, or
            evaluation already locked
    """
    role = evaluator_role_for(evaluator, project)
    if role is None:
        raise PermissionDeniedError("Only the group's supervisor or the external panel can evaluate.")
    if not project.is_active:
        raise BadRequestError("Only approved projects can be evaluated.")
    if results_published(project.group.session):
        raise BadRequestError("Results for this session are already published.")

    with transaction.atomic():
        evaluation, created = Evaluation.objects.select_for_update().get_or_create(
            project=project,
            evaluator=evaluator,
            defaults={"group_id": project.group_id, "evaluator_role": role},
        )
        if evaluation.is_locked:
            raise BadRequestError("This evaluation is locked; results have been published.")

        for field in MARK_FIELDS:
            setattr(evaluation, field, marks[field])
        evaluation.feedback = feedback
        evaluation.submit()
        evaluation.save()

    logger.info(
        "EVALUATION: %s %s project %s: %d/%d",
        evaluator.email,
        "submitted" if created else "updated",
        project.id,
        evaluation.total_marks,
        evaluation.max_marks,
    )
    notify_many(
        User.objects.filter(groups__name=Role.EXAM_CELL.value, is_active=True),
        NotificationType.EVALUATION_SUBMITTED,
        "Evaluation submitted",
        f"{evaluator.get_full_name()} evaluated '{project.title}'.",
        link="/results",
    )
    return evaluation
