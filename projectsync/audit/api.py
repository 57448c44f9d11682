"""
Audit log API controller.
"""

from uuid import UUID

from django.http import HttpRequest
from ninja_extra import api_controller
from ninja_extra import http_get

from projectsync.audit.models import AuditLog
from projectsync.audit.schemas import AuditLogSchema
from projectsync.core.api import BaseAPI
from projectsync.core.api import IsAdmin
from projectsync.core.exceptions import ErrorSchema


@api_controller("/audit-logs", tags=["Audit"], permissions=[IsAdmin])
class AuditLogController(BaseAPI):
    """Read-only audit trail for administrators."""

    @http_get(
        "/",
        response={200: list[AuditLogSchema], 403: ErrorSchema},
        url_name="audit_logs_list",
    )
    def list_audit_logs(
        self,
        request: HttpRequest,
        action: str | None = None,
        user_id: UUID | None = None,
        limit: int = 200,
    ):
        """List the most recent audit entries, optionally filtered."""
        logs = AuditLog.objects.all()
        if action:
            logs = logs.filter(action=action)
        if user_id:
            logs = logs.filter(user_id=user_id)

        limit = max(1, min(limit, 1000))
        return 200, [AuditLogSchema.from_orm(log) for log in logs[:limit]]
