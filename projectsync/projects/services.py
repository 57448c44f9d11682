"""
Project review and milestone generation.
"""

import logging

from django.db import transaction

from projectsync.academics.models import MilestoneType
from projectsync.audit.models import AuditAction
from projectsync.audit.services import log_action
from projectsync.core.workflow import review
from projectsync.groups.models import GroupStatus
from projectsync.notifications.models import NotificationType
from projectsync.notifications.services import notify_many
from projectsync.projects.models import Milestone
from projectsync.projects.models import Project

logger = logging.getLogger(__name__)


def generate_milestones(project: Project) -> list[Milestone]:
    """
    Create one milestone per milestone deadline of the project's session.

    Existing milestones are kept; running this twice creates nothing new.
    """
    deadlines = project.group.session.deadlines.filter(
        deadline_type__in=MilestoneType.values,
    )
    created = []
    for deadline in deadlines:
        milestone, was_created = Milestone.objects.get_or_create(
            project=project,
            milestone_type=deadline.deadline_type,
            defaults={
                "title": deadline.name,
                "description": deadline.description,
                "due_date": deadline.due_date,
            },
        )
        if was_created:
            milestone.refresh_status()
            created.append(milestone)

    logger.info("MILESTONES: %d generated for project %s", len(created), project.id)
    return created


def review_project(
    project: Project,
    approve: bool,
    reviewer,
    reason: str = "",
    similarity_score=None,
    request=None,
) -> Project:
    """
    Approve or reject a submitted project.

    Approval freezes the group's membership and generates the milestones.
    Members are notified of either outcome.
    """
    with transaction.atomic():
        if similarity_score is not None:
            project.similarity_score = similarity_score
        review(project, approve, reviewer, reason)

        if approve:
            group = project.group
            if group.status == GroupStatus.OPEN:
                group.lock()
                group.save(update_fields=["status", "modified"])
            if project.supervisor_id is None and group.supervisor_id is not None:
                project.supervisor_id = group.supervisor_id
                project.save(update_fields=["supervisor", "modified"])
            generate_milestones(project)

    members = project.group.members.all()
    if approve:
        notify_many(
            members,
            NotificationType.PROJECT_APPROVED,
            "Project approved",
            f"Your project '{project.title}' has been approved.",
            link=f"/projects/{project.id}",
        )
    else:
        notify_many(
            members,
            NotificationType.PROJECT_REJECTED,
            "Project rejected",
            f"Your project '{project.title}' was rejected: {project.rejection_reason}",
            link=f"/projects/{project.id}",
        )

    log_action(
        reviewer,
        AuditAction.PROJECT_APPROVED if approve else AuditAction.PROJECT_REJECTED,
        {"project_id": str(project.id), "title": project.title},
        request=request,
    )
    return project
