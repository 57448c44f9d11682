"""
Academic configuration API: sessions, deadlines and document templates.
"""

import logging
from uuid import UUID

from django.db import IntegrityError
from django.db import transaction
from django.http import HttpRequest
from django.shortcuts import get_object_or_404
from ninja import File
from ninja import Form
from ninja.files import UploadedFile
from ninja_extra import api_controller
from ninja_extra import http_delete
from ninja_extra import http_get
from ninja_extra import http_post
from ninja_extra import http_put

from projectsync.academics.models import AcademicSession
from projectsync.academics.models import DocumentTemplate
from projectsync.academics.models import SessionDeadline
from projectsync.academics.schemas import DeadlineCreateSchema
from projectsync.academics.schemas import DeadlineSchema
from projectsync.academics.schemas import SessionCreateSchema
from projectsync.academics.schemas import SessionSchema
from projectsync.academics.schemas import SessionUpdateSchema
from projectsync.academics.schemas import TemplateCreateSchema
from projectsync.academics.schemas import TemplateSchema
from projectsync.audit.models import AuditAction
from projectsync.audit.services import log_action
from projectsync.core.api import BaseAPI
from projectsync.core.api import IsAuthenticated
from projectsync.core.exceptions import AlreadyExistsError
from projectsync.core.exceptions import ErrorSchema
from projectsync.core.exceptions import NotFoundError
from projectsync.core.exceptions import PermissionDeniedError
from projectsync.core.exceptions import ValidationError
from projectsync.core.roles import is_admin
from projectsync.core.roles import is_pmo_or_admin
from projectsync.core.schemas import SuccessSchema

logger = logging.getLogger(__name__)


# ==================== Helper Functions ====================


def session_to_schema(session: AcademicSession) -> SessionSchema:
    return SessionSchema(
        id=session.id,
        name=session.name,
        start_date=session.start_date,
        end_date=session.end_date,
        is_active=session.is_active,
        created=session.created,
    )


def deadline_to_schema(deadline: SessionDeadline) -> DeadlineSchema:
    return DeadlineSchema(
        id=deadline.id,
        session_id=deadline.session_id,
        name=deadline.name,
        deadline_type=deadline.deadline_type,
        description=deadline.description,
        due_date=deadline.due_date,
        is_past=deadline.is_past,
    )


def template_to_schema(template: DocumentTemplate) -> TemplateSchema:
    return TemplateSchema(
        id=template.id,
        name=template.name,
        description=template.description,
        category=template.category,
        file_url=template.file.url if template.file else "",
        uploaded_by_id=template.uploaded_by_id,
        created=template.created,
    )


# ==================== Sessions ====================


@api_controller("/sessions", tags=["Academic Sessions"], permissions=[IsAuthenticated])
class AcademicSessionController(BaseAPI):
    """Academic sessions and their deadlines."""

    @http_get("/", response={200: list[SessionSchema]}, url_name="sessions_list")
    def list_sessions(self, request: HttpRequest):
        return 200, [session_to_schema(s) for s in AcademicSession.objects.all()]

    @http_get(
        "/active",
        response={200: SessionSchema, 404: ErrorSchema},
        url_name="sessions_active",
    )
    def get_active_session(self, request: HttpRequest):
        session = AcademicSession.objects.filter(is_active=True).first()
        if session is None:
            return NotFoundError("No academic session is active.").to_response()
        return 200, session_to_schema(session)

    @http_post(
        "/",
        response={201: SessionSchema, 403: ErrorSchema, 409: ErrorSchema},
        url_name="sessions_create",
    )
    def create_session(self, request: HttpRequest, data: SessionCreateSchema):
        if not is_admin(request.user):
            return PermissionDeniedError("Only administrators can manage sessions.").to_response()

        if AcademicSession.objects.filter(name__iexact=data.name).exists():
            return AlreadyExistsError("A session with this name already exists.").to_response()

        session = AcademicSession.objects.create(
            name=data.name,
            start_date=data.start_date,
            end_date=data.end_date,
        )
        log_action(
            request.user,
            AuditAction.SESSION_CREATED,
            {"session_id": str(session.id), "name": session.name},
            request=request,
        )
        return 201, session_to_schema(session)

    @http_put(
        "/{uuid:session_id}",
        response={200: SessionSchema, 400: ErrorSchema, 403: ErrorSchema, 404: ErrorSchema},
        url_name="sessions_update",
    )
    def update_session(self, request: HttpRequest, session_id: UUID, data: SessionUpdateSchema):
        if not is_admin(request.user):
            return PermissionDeniedError("Only administrators can manage sessions.").to_response()

        session = get_object_or_404(AcademicSession, id=session_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(session, field, value)

        if session.end_date <= session.start_date:
            return ValidationError("The session must end after it starts.").to_response()

        session.save()
        return 200, session_to_schema(session)

    @http_post(
        "/{session_id}/activate",
        response={200: SessionSchema, 403: ErrorSchema, 404: ErrorSchema},
        url_name="sessions_activate",
    )
    def activate_session(self, request: HttpRequest, session_id: UUID):
        """Make this the active session and deactivate all others."""
        if not is_admin(request.user):
            return PermissionDeniedError("Only administrators can manage sessions.").to_response()

        session = get_object_or_404(AcademicSession, id=session_id)
        session.activate()
        logger.info("SESSION: %s activated by %s", session.name, request.user.email)
        log_action(
            request.user,
            AuditAction.SESSION_ACTIVATED,
            {"session_id": str(session.id), "name": session.name},
            request=request,
        )
        return 200, session_to_schema(session)

    @http_get(
        "/{session_id}/deadlines",
        response={200: list[DeadlineSchema], 404: ErrorSchema},
        url_name="sessions_deadlines",
    )
    def list_deadlines(self, request: HttpRequest, session_id: UUID):
        session = get_object_or_404(AcademicSession, id=session_id)
        return 200, [deadline_to_schema(d) for d in session.deadlines.all()]

    @http_post(
        "/{session_id}/deadlines",
        response={201: DeadlineSchema, 403: ErrorSchema, 404: ErrorSchema, 409: ErrorSchema},
        url_name="sessions_deadlines_create",
    )
    def create_deadline(self, request: HttpRequest, session_id: UUID, data: DeadlineCreateSchema):
        """Add a deadline. Each deadline type appears once per session."""
        if not is_admin(request.user):
            return PermissionDeniedError("Only administrators can manage deadlines.").to_response()

        session = get_object_or_404(AcademicSession, id=session_id)
        try:
            with transaction.atomic():
                deadline = SessionDeadline.objects.create(
                    session=session,
                    name=data.name,
                    deadline_type=data.deadline_type,
                    description=data.description,
                    due_date=data.due_date,
                )
        except IntegrityError:
            return AlreadyExistsError(
                "This session already has a deadline of this type."
            ).to_response()

        return 201, deadline_to_schema(deadline)

    @http_delete(
        "/deadlines/{deadline_id}",
        response={200: SuccessSchema, 403: ErrorSchema, 404: ErrorSchema},
        url_name="sessions_deadlines_delete",
    )
    def delete_deadline(self, request: HttpRequest, deadline_id: UUID):
        if not is_admin(request.user):
            return PermissionDeniedError("Only administrators can manage deadlines.").to_response()

        deadline = get_object_or_404(SessionDeadline, id=deadline_id)
        deadline.delete()
        return 200, SuccessSchema(success=True, message="Deadline deleted.")


# ==================== Templates ====================


@api_controller("/templates", tags=["Document Templates"], permissions=[IsAuthenticated])
class DocumentTemplateController(BaseAPI):
    """Downloadable document templates."""

    @http_get("/", response={200: list[TemplateSchema]}, url_name="templates_list")
    def list_templates(self, request: HttpRequest, category: str | None = None):
        templates = DocumentTemplate.objects.all()
        if category:
            templates = templates.filter(category=category)
        return 200, [template_to_schema(t) for t in templates]

    @http_post(
        "/",
        response={201: TemplateSchema, 403: ErrorSchema},
        url_name="templates_create",
    )
    def upload_template(
        self,
        request: HttpRequest,
        data: Form[TemplateCreateSchema],
        file: UploadedFile = File(...),
    ):
        if not is_pmo_or_admin(request.user):
            return PermissionDeniedError("Only the PMO can upload templates.").to_response()

        template = DocumentTemplate(
            name=data.name,
            description=data.description,
            category=data.category,
            uploaded_by=request.user,
        )
        template.file.save(file.name, file, save=False)
        template.save()
        return 201, template_to_schema(template)

    @http_delete(
        "/{template_id}",
        response={200: SuccessSchema, 403: ErrorSchema, 404: ErrorSchema},
        url_name="templates_delete",
    )
    def delete_template(self, request: HttpRequest, template_id: UUID):
        if not is_pmo_or_admin(request.user):
            return PermissionDeniedError("Only the PMO can delete templates.").to_response()

        template = get_object_or_404(DocumentTemplate, id=template_id)
        template.file.delete(save=False)
        template.delete()
        return 200, SuccessSchema(success=True, message="Template deleted.")
