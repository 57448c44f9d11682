"""
Projects API controller.
"""

import logging
from uuid import UUID

from django.http import HttpRequest
from django.shortcuts import get_object_or_404
from ninja_extra import api_controller
from ninja_extra import http_get
from ninja_extra import http_post
from ninja_extra import http_put

from projectsync.academics.models import get_active_session
from projectsync.audit.models import AuditAction
from projectsync.audit.services import log_action
from projectsync.core.api import BaseAPI
from projectsync.core.api import IsAuthenticated
from projectsync.core.api import IsPMOOrAdmin
from projectsync.core.exceptions import AlreadyExistsError
from projectsync.core.exceptions import APIException
from projectsync.core.exceptions import BadRequestError
from projectsync.core.exceptions import ErrorSchema
from projectsync.core.exceptions import NotFoundError
from projectsync.core.exceptions import PermissionDeniedError
from projectsync.core.schemas import UserMinimalSchema
from projectsync.groups.models import student_group_in_session
from projectsync.projects.models import Milestone
from projectsync.projects.models import Project
from projectsync.projects.models import ProjectStatus
from projectsync.projects.models import milestone_progress
from projectsync.projects.schemas import MilestoneListSchema
from projectsync.projects.schemas import MilestoneSchema
from projectsync.projects.schemas import ProjectCreateSchema
from projectsync.projects.schemas import ProjectDetailSchema
from projectsync.projects.schemas import ProjectListSchema
from projectsync.projects.schemas import ProjectReviewSchema
from projectsync.projects.schemas import ProjectUpdateSchema
from projectsync.projects.services import review_project

logger = logging.getLogger(__name__)


# ==================== Helper Functions ====================


def project_to_list_schema(project: Project) -> ProjectListSchema:
    return ProjectListSchema(
        id=project.id,
        title=project.title,
        domain=project.domain,
        group_id=project.group_id,
        group_name=project.group.name,
        supervisor=UserMinimalSchema.from_optional(project.supervisor),
        status=project.status,
        submitted_at=project.submitted_at,
        created=project.created,
    )


def project_to_detail_schema(project: Project) -> ProjectDetailSchema:
    return ProjectDetailSchema(
        id=project.id,
        title=project.title,
        domain=project.domain,
        group_id=project.group_id,
        group_name=project.group.name,
        supervisor=UserMinimalSchema.from_optional(project.supervisor),
        status=project.status,
        submitted_at=project.submitted_at,
        created=project.created,
        abstract=project.abstract,
        members=[UserMinimalSchema.from_user(m) for m in project.group.members.all()],
        approved_at=project.approved_at,
        rejected_at=project.rejected_at,
        rejection_reason=project.rejection_reason,
        reviewed_by=UserMinimalSchema.from_optional(project.reviewed_by),
        similarity_score=project.similarity_score,
        modified=project.modified,
    )


def load_project(project_id: UUID) -> Project:
    return get_object_or_404(
        Project.objects.select_related("group", "group__session", "supervisor", "reviewed_by"),
        id=project_id,
    )


# ==================== Projects Controller ====================


@api_controller("/projects", tags=["Projects"], permissions=[IsAuthenticated])
class ProjectController(BaseAPI):
    """Project proposals and their review."""

    @http_get(
        "/",
        response={200: list[ProjectListSchema]},
        url_name="projects_list",
    )
    def list_projects(
        self,
        request: HttpRequest,
        status: str | None = None,
        session_id: UUID | None = None,
        search: str = "",
    ):
        """
        List projects visible to the caller.

        Optional filters:
        - status: draft, submitted, approved, rejected, locked
        - session_id: academic session of the group
        - search: title contains
        """
        projects = Project.objects.visible_to(request.user).select_related("group", "supervisor")

        if status:
            projects = projects.filter(status=status)
        if session_id:
            projects = projects.filter(group__session_id=session_id)
        if search:
            projects = projects.filter(title__icontains=search)

        return 200, [project_to_list_schema(p) for p in projects.order_by("-created")]

    @http_get(
        "/my",
        response={200: ProjectDetailSchema, 404: ErrorSchema},
        url_name="projects_my",
    )
    def my_project(self, request: HttpRequest):
        """The project of the caller's group in the active session."""
        group = student_group_in_session(request.user, get_active_session())
        project = Project.objects.filter(group=group).first() if group else None
        if project is None:
            return NotFoundError("Your group has no project yet.").to_response()
        return 200, project_to_detail_schema(load_project(project.id))

    @http_get(
        "/{uuid:project_id}",
        response={200: ProjectDetailSchema, 404: ErrorSchema},
        url_name="projects_detail",
    )
    def get_project(self, request: HttpRequest, project_id: UUID):
        if not Project.objects.visible_to(request.user).filter(id=project_id).exists():
            return NotFoundError("Project not found.").to_response()
        return 200, project_to_detail_schema(load_project(project_id))

    @http_post(
        "/",
        response={201: ProjectDetailSchema, 400: ErrorSchema, 409: ErrorSchema},
        url_name="projects_create",
    )
    def create_project(self, request: HttpRequest, data: ProjectCreateSchema):
        """Create the draft project of the caller's group. One per group."""
        group = student_group_in_session(request.user, get_active_session())
        if group is None:
            return BadRequestError("You must belong to a group to create a project.").to_response()

        if Project.objects.filter(group=group).exists():
            return AlreadyExistsError("Your group already has a project.").to_response()

        project = Project.objects.create(
            group=group,
            title=data.title,
            abstract=data.abstract,
            domain=data.domain,
            supervisor=group.supervisor,
        )
        logger.info("PROJECT: '%s' created for group '%s'", project.title, group.name)
        return 201, project_to_detail_schema(load_project(project.id))

    @http_put(
        "/{uuid:project_id}",
        response={200: ProjectDetailSchema, 400: ErrorSchema, 403: ErrorSchema, 404: ErrorSchema},
        url_name="projects_update",
    )
    def update_project(self, request: HttpRequest, project_id: UUID, data: ProjectUpdateSchema):
        """Edit a draft or rejected project. Group members only."""
        project = load_project(project_id)

        if not project.is_member(request.user):
            return PermissionDeniedError("Only group members can edit the project.").to_response()

        if not project.is_editable:
            return BadRequestError(
                f"A project with status '{project.status}' cannot be edited."
            ).to_response()

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(project, field, value.strip() if isinstance(value, str) else value)

        if not project.title or not project.abstract:
            return BadRequestError("Title and abstract are required.").to_response()

        project.save()
        return 200, project_to_detail_schema(project)

    @http_post(
        "/{project_id}/submit",
        response={200: ProjectDetailSchema, 400: ErrorSchema, 403: ErrorSchema, 404: ErrorSchema},
        url_name="projects_submit",
    )
    def submit_project(self, request: HttpRequest, project_id: UUID):
        """Submit a draft or rejected project for review."""
        project = load_project(project_id)

        if not project.is_member(request.user):
            return PermissionDeniedError("Only group members can submit the project.").to_response()

        if not project.is_editable:
            return BadRequestError(
                f"Cannot submit a project with status '{project.status}'."
            ).to_response()

        old_status = project.status
        project.submit()
        project.save()

        logger.info("TRANSITION: project %s %s -> %s by %s", project.id, old_status, project.status, request.user)
        return 200, project_to_detail_schema(project)

    @http_post(
        "/{project_id}/review",
        response={200: ProjectDetailSchema, 400: ErrorSchema, 403: ErrorSchema, 404: ErrorSchema},
        url_name="projects_review",
    )
    def review(self, request: HttpRequest, project_id: UUID, data: ProjectReviewSchema):
        """
        Approve or reject a submitted project.

        Reviewers: the PMO, administrators and the group's supervisor.
        A rejection requires a reason.
        """
        project = load_project(project_id)

        if not project.can_be_reviewed_by(request.user):
            return PermissionDeniedError("You cannot review this project.").to_response()

        try:
            review_project(
                project,
                data.approve,
                request.user,
                reason=data.reason,
                similarity_score=data.similarity_score,
                request=request,
            )
        except APIException as e:
            return e.to_response()

        return 200, project_to_detail_schema(load_project(project.id))

    @http_post(
        "/{project_id}/lock",
        response={200: ProjectDetailSchema, 400: ErrorSchema, 403: ErrorSchema, 404: ErrorSchema},
        url_name="projects_lock",
        permissions=[IsPMOOrAdmin],
    )
    def lock_project(self, request: HttpRequest, project_id: UUID):
        """Lock an approved project."""
        project = load_project(project_id)

        if project.status != ProjectStatus.APPROVED:
            return BadRequestError(
                f"Cannot lock a project with status '{project.status}'."
            ).to_response()

        project.lock()
        project.save()

        log_action(
            request.user,
            AuditAction.PROJECT_LOCKED,
            {"project_id": str(project.id), "title": project.title},
            request=request,
        )
        return 200, project_to_detail_schema(project)

    @http_get(
        "/{project_id}/milestones",
        response={200: MilestoneListSchema, 404: ErrorSchema},
        url_name="projects_milestones",
    )
    def list_milestones(self, request: HttpRequest, project_id: UUID):
        """Milestones with their derived status and overall progress."""
        if not Project.objects.visible_to(request.user).filter(id=project_id).exists():
            return NotFoundError("Project not found.").to_response()

        milestones = list(Milestone.objects.filter(project_id=project_id).select_related("project"))
        for milestone in milestones:
            milestone.refresh_status()

        return 200, MilestoneListSchema(
            project_id=project_id,
            progress=milestone_progress(milestones),
            milestones=[MilestoneSchema.from_orm(m) for m in milestones],
        )
