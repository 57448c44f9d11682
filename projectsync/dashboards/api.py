"""
Role dashboards: read-only aggregate counts, one endpoint per role.

Administrators may read every dashboard.
"""

from datetime import timedelta

from django.db.models import Count
from django.http import HttpRequest
from django.utils import timezone
from ninja_extra import api_controller
from ninja_extra import http_get

from projectsync.academics.models import AcademicSession
from projectsync.academics.models import get_active_session
from projectsync.audit.models import AuditLog
from projectsync.core.api import BaseAPI
from projectsync.core.api import HasRole
from projectsync.core.api import IsAdmin
from projectsync.core.exceptions import ErrorSchema
from projectsync.core.roles import Role
from projectsync.dashboards.schemas import AdminDashboardSchema
from projectsync.dashboards.schemas import ExamCellDashboardSchema
from projectsync.dashboards.schemas import ExternalDashboardSchema
from projectsync.dashboards.schemas import PMODashboardSchema
from projectsync.dashboards.schemas import StudentDashboardSchema
from projectsync.dashboards.schemas import SupervisorDashboardSchema
from projectsync.evaluations.models import Evaluation
from projectsync.evaluations.models import EvaluationStatus
from projectsync.groups.models import GroupInvitation
from projectsync.groups.models import InvitationStatus
from projectsync.groups.models import ProjectGroup
from projectsync.groups.models import student_group_in_session
from projectsync.notifications.models import Notification
from projectsync.projects.models import ACTIVE_STATUSES
from projectsync.projects.models import Milestone
from projectsync.projects.models import MilestoneStatus
from projectsync.projects.models import Project
from projectsync.projects.models import ProjectStatus
from projectsync.projects.models import milestone_progress
from projectsync.results.models import ProjectResult
from projectsync.results.models import results_published
from projectsync.submissions.models import Submission
from projectsync.submissions.models import SubmissionStatus
from projectsync.supervision.models import RequestStatus
from projectsync.supervision.models import SupervisionRequest
from projectsync.users.models import User


class StudentDashboardAccess(HasRole):
    roles = [Role.STUDENT, Role.ADMIN]


class SupervisorDashboardAccess(HasRole):
    roles = [Role.SUPERVISOR, Role.ADMIN]


class PMODashboardAccess(HasRole):
    roles = [Role.PMO, Role.ADMIN]


class ExternalDashboardAccess(HasRole):
    roles = [Role.EXTERNAL_PANEL, Role.ADMIN]


class ExamCellDashboardAccess(HasRole):
    roles = [Role.EXAM_CELL, Role.ADMIN]


def unread_count(user) -> int:
    return Notification.objects.filter(user=user, is_read=False).count()


def role_count(role: Role) -> int:
    return User.objects.filter(groups__name=role.value, is_active=True).count()


@api_controller("/dashboard", tags=["Dashboards"], permissions=[IsAdmin])
class DashboardController(BaseAPI):
    """Aggregate counts for each role's landing page."""

    @http_get(
        "/student",
        response={200: StudentDashboardSchema, 403: ErrorSchema},
        url_name="dashboard_student",
        permissions=[StudentDashboardAccess],
    )
    def student(self, request: HttpRequest):
        user = request.user
        session = get_active_session()
        group = student_group_in_session(user, session)
        project = Project.objects.filter(group=group).first() if group else None

        upcoming = 0
        if session is not None:
            upcoming = session.deadlines.filter(due_date__gt=timezone.now()).count()

        return 200, StudentDashboardSchema(
            group_id=group.id if group else None,
            group_name=group.name if group else None,
            group_status=group.status if group else None,
            member_count=group.member_count if group else 0,
            supervisor_name=group.supervisor.get_full_name() if group and group.supervisor else None,
            project_id=project.id if project else None,
            project_status=project.status if project else None,
            milestone_progress=milestone_progress(project.milestones.all()) if project else 0,
            pending_invitations=GroupInvitation.objects.filter(
                invitee=user,
                status=InvitationStatus.PENDING,
            ).count(),
            upcoming_deadlines=upcoming,
            unread_notifications=unread_count(user),
            results_published=results_published(session),
        )

    @http_get(
        "/supervisor",
        response={200: SupervisorDashboardSchema, 403: ErrorSchema},
        url_name="dashboard_supervisor",
        permissions=[SupervisorDashboardAccess],
    )
    def supervisor(self, request: HttpRequest):
        user = request.user
        session = get_active_session()
        groups = ProjectGroup.objects.filter(supervisor=user, session=session)

        evaluated = Evaluation.objects.filter(
            evaluator=user,
            status__in=[EvaluationStatus.SUBMITTED, EvaluationStatus.LOCKED],
        ).values("project_id")
        pending_evaluations = (
            Project.objects.filter(group__in=groups, status__in=ACTIVE_STATUSES)
            .exclude(id__in=evaluated)
            .count()
        )

        return 200, SupervisorDashboardSchema(
            supervised_groups=groups.count(),
            capacity=user.supervision_capacity,
            pending_requests=SupervisionRequest.objects.filter(
                supervisor=user,
                status=RequestStatus.PENDING,
            ).count(),
            projects_to_review=Project.objects.filter(
                group__supervisor=user,
                status=ProjectStatus.SUBMITTED,
            ).count(),
            submissions_to_review=Submission.objects.filter(
                group__supervisor=user,
                status=SubmissionStatus.UPLOADED,
            ).count(),
            pending_evaluations=pending_evaluations,
            unread_notifications=unread_count(user),
        )

    @http_get(
        "/pmo",
        response={200: PMODashboardSchema, 403: ErrorSchema},
        url_name="dashboard_pmo",
        permissions=[PMODashboardAccess],
    )
    def pmo(self, request: HttpRequest):
        session = get_active_session()
        groups = ProjectGroup.objects.filter(session=session)
        by_status = {
            row["status"]: row["count"]
            for row in Project.objects.filter(group__session=session)
            .values("status")
            .annotate(count=Count("id"))
        }

        return 200, PMODashboardSchema(
            students=role_count(Role.STUDENT),
            supervisors=role_count(Role.SUPERVISOR),
            groups=groups.count(),
            groups_without_supervisor=groups.filter(supervisor__isnull=True).count(),
            projects_by_status={status: by_status.get(status, 0) for status in ProjectStatus.values},
            pending_supervision_requests=SupervisionRequest.objects.filter(
                group__session=session,
                status=RequestStatus.PENDING,
            ).count(),
            submissions_to_review=Submission.objects.filter(
                group__session=session,
                status=SubmissionStatus.UPLOADED,
            ).count(),
            overdue_milestones=Milestone.objects.filter(
                project__group__session=session,
                status=MilestoneStatus.OVERDUE,
            ).count(),
        )

    @http_get(
        "/external",
        response={200: ExternalDashboardSchema, 403: ErrorSchema},
        url_name="dashboard_external",
        permissions=[ExternalDashboardAccess],
    )
    def external(self, request: HttpRequest):
        user = request.user
        session = get_active_session()
        own = Evaluation.objects.filter(evaluator=user)
        submitted = own.filter(status__in=[EvaluationStatus.SUBMITTED, EvaluationStatus.LOCKED]).values("project_id")

        return 200, ExternalDashboardSchema(
            projects_to_evaluate=Project.objects.filter(
                group__session=session,
                status__in=ACTIVE_STATUSES,
            )
            .exclude(id__in=submitted)
            .count(),
            evaluations_submitted=own.filter(status=EvaluationStatus.SUBMITTED).count(),
            evaluations_locked=own.filter(status=EvaluationStatus.LOCKED).count(),
        )

    @http_get(
        "/exam-cell",
        response={200: ExamCellDashboardSchema, 403: ErrorSchema},
        url_name="dashboard_exam_cell",
        permissions=[ExamCellDashboardAccess],
    )
    def exam_cell(self, request: HttpRequest):
        session = get_active_session()
        return 200, ExamCellDashboardSchema(
            approved_projects=Project.objects.filter(
                group__session=session,
                status__in=ACTIVE_STATUSES,
            ).count(),
            evaluations_submitted=Evaluation.objects.filter(
                group__session=session,
                status__in=[EvaluationStatus.SUBMITTED, EvaluationStatus.LOCKED],
            ).count(),
            results_compiled=ProjectResult.objects.filter(session=session).count(),
            results_published=results_published(session),
        )

    @http_get(
        "/admin",
        response={200: AdminDashboardSchema, 403: ErrorSchema},
        url_name="dashboard_admin",
    )
    def admin(self, request: HttpRequest):
        session = get_active_session()
        return 200, AdminDashboardSchema(
            users_by_role={role.value: role_count(role) for role in Role},
            active_users=User.objects.filter(is_active=True).count(),
            inactive_users=User.objects.filter(is_active=False).count(),
            sessions=AcademicSession.objects.count(),
            active_session=session.name if session else None,
            audit_entries_last_24h=AuditLog.objects.filter(
                created__gte=timezone.now() - timedelta(hours=24),
            ).count(),
        )
