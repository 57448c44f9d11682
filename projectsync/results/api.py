"""
Results API controller: compilation, publication and export.
"""

from uuid import UUID

from django.http import HttpRequest
from django.http import HttpResponse
from ninja_extra import api_controller
from ninja_extra import http_get
from ninja_extra import http_post

from projectsync.academics.models import AcademicSession
from projectsync.academics.models import get_active_session
from projectsync.core.api import BaseAPI
from projectsync.core.api import HasRole
from projectsync.core.api import IsAuthenticated
from projectsync.core.exceptions import APIException
from projectsync.core.exceptions import ErrorSchema
from projectsync.core.exceptions import NotFoundError
from projectsync.core.roles import Role
from projectsync.core.schemas import UserMinimalSchema
from projectsync.groups.models import student_group_in_session
from projectsync.results.models import ProjectResult
from projectsync.results.models import ResultPublication
from projectsync.results.models import results_published
from projectsync.results.schemas import ProjectResultSchema
from projectsync.results.schemas import PublicationSchema
from projectsync.results.schemas import SessionRequestSchema
from projectsync.results.services import compile_results
from projectsync.results.services import export_csv
from projectsync.results.services import publish_results


class CanManageResults(HasRole):
    roles = [Role.EXAM_CELL, Role.ADMIN]
    message = "Access restricted to the exam cell."


class CanViewResults(HasRole):
    roles = [Role.EXAM_CELL, Role.PMO, Role.ADMIN]
    message = "Access restricted to the exam cell, the PMO and administrators."


def result_to_schema(result: ProjectResult) -> ProjectResultSchema:
    project = result.project
    return ProjectResultSchema(
        id=result.id,
        project_id=project.id,
        project_title=project.title,
        group_id=project.group_id,
        group_name=project.group.name,
        supervisor=UserMinimalSchema.from_optional(project.supervisor),
        supervisor_score=result.supervisor_score,
        external_score=result.external_score,
        milestone_score=result.milestone_score,
        total=result.total,
        grade=result.grade,
        compiled_at=result.compiled_at,
    )


def resolve_session(session_id: UUID | None) -> AcademicSession | None:
    if session_id:
        return AcademicSession.objects.filter(id=session_id).first()
    return get_active_session()


def session_results(session: AcademicSession):
    return ProjectResult.objects.filter(session=session).select_related(
        "project", "project__group", "project__supervisor"
    )


@api_controller("/results", tags=["Results"], permissions=[CanViewResults])
class ResultController(BaseAPI):
    """Exam cell result sheet."""

    @http_get(
        "/",
        response={200: list[ProjectResultSchema], 404: ErrorSchema},
        url_name="results_list",
    )
    def list_results(self, request: HttpRequest, session_id: UUID | None = None):
        """Compiled results of a session, best total first."""
        session = resolve_session(session_id)
        if session is None:
            return NotFoundError("Academic session not found.").to_response()
        return 200, [result_to_schema(r) for r in session_results(session)]

    @http_get(
        "/export",
        url_name="results_export",
    )
    def export(self, request: HttpRequest, session_id: UUID | None = None):
        """Master result sheet as a CSV download."""
        session = resolve_session(session_id)
        if session is None:
            return HttpResponse("Academic session not found.", status=404, content_type="text/plain")

        response = HttpResponse(export_csv(session_results(session)), content_type="text/csv")
        response["Content-Disposition"] = f'attachment; filename="results-{session.name}.csv"'
        return response

    @http_get(
        "/publication",
        response={200: PublicationSchema, 404: ErrorSchema},
        url_name="results_publication",
    )
    def publication(self, request: HttpRequest, session_id: UUID | None = None):
        session = resolve_session(session_id)
        if session is None:
            return NotFoundError("Academic session not found.").to_response()

        publication = ResultPublication.objects.filter(session=session).select_related("published_by").first()
        return 200, PublicationSchema(
            session_id=session.id,
            is_published=bool(publication and publication.is_published),
            published_at=publication.published_at if publication else None,
            published_by=UserMinimalSchema.from_optional(publication.published_by if publication else None),
            compiled_projects=ProjectResult.objects.filter(session=session).count(),
        )

    @http_post(
        "/compile",
        response={200: list[ProjectResultSchema], 400: ErrorSchema, 403: ErrorSchema, 404: ErrorSchema},
        url_name="results_compile",
        permissions=[CanManageResults],
    )
    def compile_session(self, request: HttpRequest, data: SessionRequestSchema):
        """(Re)compute every project result of the session."""
        session = resolve_session(data.session_id)
        if session is None:
            return NotFoundError("Academic session not found.").to_response()

        try:
            compile_results(session, request.user, request=request)
        except APIException as e:
            return e.to_response()

        return 200, [result_to_schema(r) for r in session_results(session)]

    @http_post(
        "/publish",
        response={200: PublicationSchema, 400: ErrorSchema, 403: ErrorSchema, 404: ErrorSchema},
        url_name="results_publish",
        permissions=[CanManageResults],
    )
    def publish_session(self, request: HttpRequest, data: SessionRequestSchema):
        """Publish the session's results. Locks evaluations; cannot be undone."""
        session = resolve_session(data.session_id)
        if session is None:
            return NotFoundError("Academic session not found.").to_response()

        try:
            publication = publish_results(session, request.user, request=request)
        except APIException as e:
            return e.to_response()

        return 200, PublicationSchema(
            session_id=session.id,
            is_published=True,
            published_at=publication.published_at,
            published_by=UserMinimalSchema.from_user(request.user),
            compiled_projects=ProjectResult.objects.filter(session=session).count(),
        )

    @http_get(
        "/my",
        response={200: ProjectResultSchema, 404: ErrorSchema},
        url_name="results_my",
        permissions=[IsAuthenticated],
    )
    def my_result(self, request: HttpRequest):
        """The caller's group result, once published."""
        session = get_active_session()
        group = student_group_in_session(request.user, session)
        if group is None or not results_published(session):
            return NotFoundError("Results are not published yet.").to_response()

        result = session_results(session).filter(project__group=group).first()
        if result is None:
            return NotFoundError("No result was compiled for your project.").to_response()
        return 200, result_to_schema(result)
