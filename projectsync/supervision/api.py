"""
Supervision requests API controller.
"""

import logging
from uuid import UUID

from django.db import IntegrityError
from django.db import transaction
from django.http import HttpRequest
from django.shortcuts import get_object_or_404
from ninja_extra import api_controller
from ninja_extra import http_get
from ninja_extra import http_post

from projectsync.academics.models import DeadlineType
from projectsync.academics.models import deadline_passed
from projectsync.academics.models import get_active_session
from projectsync.core.api import BaseAPI
from projectsync.core.api import IsAuthenticated
from projectsync.core.api import IsPMOOrAdmin
from projectsync.core.exceptions import AlreadyExistsError
from projectsync.core.exceptions import APIException
from projectsync.core.exceptions import BadRequestError
from projectsync.core.exceptions import ErrorSchema
from projectsync.core.exceptions import NotFoundError
from projectsync.core.exceptions import PermissionDeniedError
from projectsync.core.roles import Role
from projectsync.core.roles import user_has_role
from projectsync.core.schemas import UserMinimalSchema
from projectsync.groups.api import group_to_list_schema
from projectsync.groups.models import ProjectGroup
from projectsync.groups.models import student_group_in_session
from projectsync.groups.schemas import GroupListSchema
from projectsync.notifications.models import NotificationType
from projectsync.notifications.services import notify
from projectsync.supervision.models import RequestStatus
from projectsync.supervision.models import SupervisionRequest
from projectsync.supervision.schemas import SupervisionRequestCreateSchema
from projectsync.supervision.schemas import SupervisionRequestSchema
from projectsync.supervision.schemas import SupervisionRespondSchema
from projectsync.supervision.schemas import SupervisorAssignSchema
from projectsync.supervision.services import assign_supervisor
from projectsync.supervision.services import has_capacity
from projectsync.supervision.services import respond_to_request
from projectsync.users.models import User

logger = logging.getLogger(__name__)


def request_to_schema(supervision_request: SupervisionRequest) -> SupervisionRequestSchema:
    return SupervisionRequestSchema(
        id=supervision_request.id,
        group_id=supervision_request.group_id,
        group_name=supervision_request.group.name,
        supervisor=UserMinimalSchema.from_user(supervision_request.supervisor),
        requested_by=UserMinimalSchema.from_optional(supervision_request.requested_by),
        message=supervision_request.message,
        response_message=supervision_request.response_message,
        status=supervision_request.status,
        created=supervision_request.created,
        responded_at=supervision_request.responded_at,
    )


def get_supervisor(supervisor_id: UUID) -> User | None:
    supervisor = User.objects.filter(id=supervisor_id, is_active=True).first()
    if supervisor is None or not user_has_role(supervisor, Role.SUPERVISOR):
        return None
    return supervisor


@api_controller("/supervision-requests", tags=["Supervision"], permissions=[IsAuthenticated])
class SupervisionRequestController(BaseAPI):
    """Supervisor requests and direct assignment."""

    @http_get(
        "/",
        response={200: list[SupervisionRequestSchema]},
        url_name="supervision_requests_list",
    )
    def list_requests(self, request: HttpRequest, status: str | None = None):
        """
        Requests visible to the caller: addressed to them (supervisor), from
        their group (student), or all (PMO/admin).
        """
        requests = SupervisionRequest.objects.visible_to(request.user).select_related(
            "group", "supervisor", "requested_by"
        )
        if status:
            requests = requests.filter(status=status)
        return 200, [request_to_schema(r) for r in requests.order_by("-created")]

    @http_post(
        "/",
        response={201: SupervisionRequestSchema, 400: ErrorSchema, 403: ErrorSchema, 404: ErrorSchema, 409: ErrorSchema},
        url_name="supervision_requests_create",
    )
    def create_request(self, request: HttpRequest, data: SupervisionRequestCreateSchema):
        """
        Ask a supervisor to supervise the caller's group.

        Group leader only. The group must have no supervisor and no other
        pending request; the supervisor must have capacity.
        """
        session = get_active_session()
        group = student_group_in_session(request.user, session)
        if group is None:
            return BadRequestError("You must belong to a group to request a supervisor.").to_response()

        if not group.is_leader(request.user):
            return PermissionDeniedError("Only the group leader can request a supervisor.").to_response()

        if group.supervisor_id is not None:
            return BadRequestError("Your group already has a supervisor.").to_response()

        if deadline_passed(session, DeadlineType.SUPERVISOR_SELECTION):
            return BadRequestError("The supervisor selection deadline has passed.").to_response()

        supervisor = get_supervisor(data.supervisor_id)
        if supervisor is None:
            return NotFoundError("Supervisor not found.").to_response()

        if not has_capacity(supervisor, session):
            return BadRequestError("This supervisor has no remaining capacity.").to_response()

        try:
            with transaction.atomic():
                supervision_request = SupervisionRequest.objects.create(
                    group=group,
                    supervisor=supervisor,
                    requested_by=request.user,
                    message=data.message,
                )
        except IntegrityError:
            return AlreadyExistsError("Your group already has a pending supervision request.").to_response()

        notify(
            supervisor,
            NotificationType.SUPERVISION_REQUEST,
            "New supervision request",
            f"{group.name} asked you to supervise their project.",
            link="/supervision-requests",
        )
        return 201, request_to_schema(supervision_request)

    @http_post(
        "/assign",
        response={200: GroupListSchema, 400: ErrorSchema, 403: ErrorSchema, 404: ErrorSchema},
        url_name="supervision_assign",
        permissions=[IsPMOOrAdmin],
    )
    def assign(self, request: HttpRequest, data: SupervisorAssignSchema):
        """Assign a supervisor to a group directly, bypassing requests."""
        group = get_object_or_404(ProjectGroup.objects.select_related("session"), id=data.group_id)

        supervisor = get_supervisor(data.supervisor_id)
        if supervisor is None:
            return NotFoundError("Supervisor not found.").to_response()

        try:
            group = assign_supervisor(group, supervisor, request.user, request=request)
        except APIException as e:
            return e.to_response()

        return 200, group_to_list_schema(group)

    @http_post(
        "/{request_id}/respond",
        response={200: SupervisionRequestSchema, 400: ErrorSchema, 403: ErrorSchema, 404: ErrorSchema},
        url_name="supervision_requests_respond",
    )
    def respond(self, request: HttpRequest, request_id: UUID, data: SupervisionRespondSchema):
        """Accept or reject a request. Only the addressed supervisor."""
        supervision_request = get_object_or_404(
            SupervisionRequest.objects.select_related("group", "group__session", "supervisor", "requested_by"),
            id=request_id,
        )

        if supervision_request.supervisor_id != request.user.id:
            return PermissionDeniedError("This request is not addressed to you.").to_response()

        if not supervision_request.is_pending:
            return BadRequestError("This request is no longer pending.").to_response()

        try:
            respond_to_request(supervision_request, data.accept, data.response_message)
        except APIException as e:
            return e.to_response()

        return 200, request_to_schema(supervision_request)

    @http_post(
        "/{request_id}/cancel",
        response={200: SupervisionRequestSchema, 400: ErrorSchema, 403: ErrorSchema, 404: ErrorSchema},
        url_name="supervision_requests_cancel",
    )
    def cancel(self, request: HttpRequest, request_id: UUID):
        """Withdraw a pending request. Group leader only."""
        supervision_request = get_object_or_404(
            SupervisionRequest.objects.select_related("group", "supervisor", "requested_by"),
            id=request_id,
        )

        if not supervision_request.group.is_leader(request.user):
            return PermissionDeniedError("Only the group leader can cancel this request.").to_response()

        if supervision_request.status != RequestStatus.PENDING:
            return BadRequestError("This request is no longer pending.").to_response()

        supervision_request.cancel()
        supervision_request.save()
        logger.info("TRANSITION: supervision request %s pending -> cancelled by %s", supervision_request.id, request.user)
        return 200, request_to_schema(supervision_request)
