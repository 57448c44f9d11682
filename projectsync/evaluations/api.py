"""
Evaluations API controller.
"""

from uuid import UUID

from django.http import HttpRequest
from django.shortcuts import get_object_or_404
from ninja_extra import api_controller
from ninja_extra import http_get
from ninja_extra import http_post

from projectsync.academics.models import get_active_session
from projectsync.core.api import BaseAPI
from projectsync.core.api import IsAuthenticated
from projectsync.core.exceptions import APIException
from projectsync.core.exceptions import ErrorSchema
from projectsync.core.roles import Role
from projectsync.core.roles import user_has_role
from projectsync.core.schemas import UserMinimalSchema
from projectsync.evaluations.models import MARK_FIELDS
from projectsync.evaluations.models import Evaluation
from projectsync.evaluations.models import EvaluationStatus
from projectsync.evaluations.schemas import EvaluationSchema
from projectsync.evaluations.schemas import EvaluationSubmitSchema
from projectsync.evaluations.schemas import PendingEvaluationSchema
from projectsync.evaluations.services import evaluator_role_for
from projectsync.evaluations.services import submit_evaluation
from projectsync.projects.models import ACTIVE_STATUSES
from projectsync.projects.models import Project


def evaluation_to_schema(evaluation: Evaluation) -> EvaluationSchema:
    return EvaluationSchema(
        id=evaluation.id,
        project_id=evaluation.project_id,
        project_title=evaluation.project.title,
        group_id=evaluation.group_id,
        evaluator=UserMinimalSchema.from_user(evaluation.evaluator),
        evaluator_role=evaluation.evaluator_role,
        documentation=evaluation.documentation,
        presentation=evaluation.presentation,
        implementation=evaluation.implementation,
        innovation=evaluation.innovation,
        teamwork=evaluation.teamwork,
        total_marks=evaluation.total_marks,
        max_marks=evaluation.max_marks,
        feedback=evaluation.feedback,
        status=evaluation.status,
        submitted_at=evaluation.submitted_at,
        locked_at=evaluation.locked_at,
    )


@api_controller("/evaluations", tags=["Evaluations"], permissions=[IsAuthenticated])
class EvaluationController(BaseAPI):
    """Supervisor and external panel marks."""

    @http_get(
        "/",
        response={200: list[EvaluationSchema]},
        url_name="evaluations_list",
    )
    def list_evaluations(
        self,
        request: HttpRequest,
        project_id: UUID | None = None,
        evaluator_role: str | None = None,
    ):
        evaluations = Evaluation.objects.visible_to(request.user).select_related("project", "evaluator")
        if project_id:
            evaluations = evaluations.filter(project_id=project_id)
        if evaluator_role:
            evaluations = evaluations.filter(evaluator_role=evaluator_role)
        return 200, [evaluation_to_schema(e) for e in evaluations]

    @http_get(
        "/pending",
        response={200: list[PendingEvaluationSchema]},
        url_name="evaluations_pending",
    )
    def pending(self, request: HttpRequest):
        """
        Approved projects of the active session the caller still has to
        evaluate: supervised groups for supervisors, every group for the
        external panel.
        """
        user = request.user
        session = get_active_session()
        if session is None:
            return 200, []

        projects = Project.objects.filter(
            group__session=session,
            status__in=ACTIVE_STATUSES,
        ).select_related("group")
        if not user_has_role(user, Role.EXTERNAL_PANEL):
            projects = projects.filter(group__supervisor=user)

        own = {
            e.project_id: e
            for e in Evaluation.objects.filter(evaluator=user, project__in=projects)
        }

        pending = []
        for project in projects:
            evaluation = own.get(project.id)
            if evaluation is not None and evaluation.status != EvaluationStatus.PENDING:
                continue
            pending.append(
                PendingEvaluationSchema(
                    project_id=project.id,
                    project_title=project.title,
                    group_id=project.group_id,
                    group_name=project.group.name,
                    evaluator_role=evaluator_role_for(user, project),
                    evaluation_id=evaluation.id if evaluation else None,
                    evaluation_status=evaluation.status if evaluation else None,
                )
            )
        return 200, pending

    @http_post(
        "/",
        response={200: EvaluationSchema, 400: ErrorSchema, 403: ErrorSchema, 404: ErrorSchema},
        url_name="evaluations_submit",
    )
    def submit(self, request: HttpRequest, data: EvaluationSubmitSchema):
        """
        Create or update the caller's marks for a project and submit them.

        Allowed until result publication locks the evaluation.
        """
        project = get_object_or_404(Project.objects.select_related("group"), id=data.project_id)
        marks = {field: getattr(data, field) for field in MARK_FIELDS}

        try:
            evaluation = submit_evaluation(project, request.user, marks, feedback=data.feedback)
        except APIException as e:
            return e.to_response()

        return 200, evaluation_to_schema(evaluation)
