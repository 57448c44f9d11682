from django.conf import settings
from django.db import models

from projectsync.core.models import BaseModel


class AuditAction(models.TextChoices):
    USER_CREATED = "user_created", "User created"
    USER_UPDATED = "user_updated", "User updated"
    USER_ACTIVATED = "user_activated", "User activated"
    USER_DEACTIVATED = "user_deactivated", "User deactivated"
    ROLE_CHANGED = "role_changed", "Role changed"
    SESSION_CREATED = "session_created", "Session created"
    SESSION_ACTIVATED = "session_activated", "Session activated"
    PROJECT_APPROVED = "project_approved", "Project approved"
    PROJECT_REJECTED = "project_rejected", "Project rejected"
    PROJECT_LOCKED = "project_locked", "Project locked"
    SUPERVISOR_ASSIGNED = "supervisor_assigned", "Supervisor assigned"
    RESULTS_COMPILED = "results_compiled", "Results compiled"
    RESULTS_PUBLISHED = "results_published", "Results published"


class AuditLog(BaseModel):
    """
    Append-only record of an administrative action.

    The actor's email and role are copied so the row stays readable after
    the account changes or is deleted.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="audit_logs",
    )
    user_email = models.EmailField(blank=True)
    user_role = models.CharField(max_length=30, blank=True)
    action = models.CharField(max_length=40, choices=AuditAction.choices)
    details = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)

    class Meta:
        ordering = ["-created"]
        indexes = [
            models.Index(fields=["action", "-created"], name="audit_action_created_idx"),
        ]

    def __str__(self):
        return f"{self.action} by {self.user_email or 'system'}"
