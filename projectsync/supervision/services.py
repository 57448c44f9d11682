"""
Supervisor matching rules shared by the request and assignment endpoints.
"""

import logging

from django.db import transaction
from django.utils import timezone

from projectsync.audit.models import AuditAction
from projectsync.audit.services import log_action
from projectsync.core.exceptions import BadRequestError
from projectsync.core.workflow import review
from projectsync.groups.models import ProjectGroup
from projectsync.notifications.models import NotificationType
from projectsync.notifications.services import notify
from projectsync.notifications.services import notify_many
from projectsync.projects.models import Project
from projectsync.supervision.models import RequestStatus
from projectsync.supervision.models import SupervisionRequest

logger = logging.getLogger(__name__)


def supervisor_load(supervisor, session) -> int:
    """Number of groups ``supervisor`` supervises in ``session``."""
    return ProjectGroup.objects.filter(supervisor=supervisor, session=session).count()


def has_capacity(supervisor, session) -> bool:
    return supervisor_load(supervisor, session) < supervisor.supervision_capacity


def _assign(group: ProjectGroup, supervisor):
    """Set the supervisor on a row-locked group and on its project."""
    if group.supervisor_id is not None:
        raise BadRequestError("This group already has a supervisor.")
    if not has_capacity(supervisor, group.session):
        raise BadRequestError("This supervisor has no remaining capacity.")

    group.supervisor = supervisor
    group.save(update_fields=["supervisor", "modified"])
    Project.objects.filter(group=group).update(supervisor=supervisor)
    logger.info("SUPERVISION: %s assigned to '%s'", supervisor.email, group.name)


def respond_to_request(supervision_request: SupervisionRequest, accept: bool, response_message: str = ""):
    """
    Record the supervisor's answer. Accepting assigns the supervisor.

    Raises:
        BadRequestError: not pending, group already supervised, or no capacity
    """
    with transaction.atomic():
        if accept:
            group = ProjectGroup.objects.select_for_update().get(id=supervision_request.group_id)
            _assign(group, supervision_request.supervisor)
        review(supervision_request, accept, supervision_request.supervisor, response_message)

    group = supervision_request.group
    answer = "accepted" if accept else "declined"
    notify_many(
        group.members.all(),
        NotificationType.SUPERVISION_RESPONSE,
        f"Supervision request {answer}",
        f"{supervision_request.supervisor.get_full_name()} {answer} to supervise {group.name}.",
        link=f"/groups/{group.id}",
    )
    return supervision_request


def assign_supervisor(group: ProjectGroup, supervisor, actor, request=None) -> ProjectGroup:
    """
    Assign a supervisor directly (PMO). Pending requests of the group are
    rejected.
    """
    with transaction.atomic():
        locked = ProjectGroup.objects.select_for_update().get(id=group.id)
        _assign(locked, supervisor)
        rejected = SupervisionRequest.objects.filter(
            group=locked,
            status=RequestStatus.PENDING,
        ).update(
            status=RequestStatus.REJECTED,
            response_message="A supervisor was assigned by the PMO.",
            responded_at=timezone.now(),
        )

    log_action(
        actor,
        AuditAction.SUPERVISOR_ASSIGNED,
        {
            "group_id": str(locked.id),
            "group": locked.name,
            "supervisor_id": str(supervisor.id),
            "rejected_requests": rejected,
        },
        request=request,
    )
    notify(
        supervisor,
        NotificationType.SUPERVISION_RESPONSE,
        "New group assigned",
        f"You have been assigned to supervise {locked.name}.",
        link=f"/groups/{locked.id}",
    )
    notify_many(
        locked.members.all(),
        NotificationType.SUPERVISION_RESPONSE,
        "Supervisor assigned",
        f"{supervisor.get_full_name()} will supervise {locked.name}.",
        link=f"/groups/{locked.id}",
    )
    return locked
