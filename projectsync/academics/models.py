"""
Academic session configuration: the active session, its deadlines and the
document templates offered to students.
"""

from django.conf import settings
from django.db import models
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from projectsync.core.models import BaseModel


class MilestoneType(models.TextChoices):
    PROPOSAL = "proposal", "Proposal"
    MID_TERM = "mid_term", "Mid-term"
    FINAL = "final", "Final"


class DeadlineType(models.TextChoices):
    PROPOSAL = "proposal", "Proposal"
    MID_TERM = "mid_term", "Mid-term"
    FINAL = "final", "Final"
    SUPERVISOR_SELECTION = "supervisor_selection", "Supervisor selection"
    GROUP_FORMATION = "group_formation", "Group formation"


class AcademicSession(BaseModel):
    """
    One academic year of final-year projects.

    At most one session is active at a time; new groups and requests are
    attached to it.
    """

    name = models.CharField(max_length=100, unique=True)
    start_date = models.DateField()
    end_date = models.DateField()
    is_active = models.BooleanField(default=False)

    class Meta:
        ordering = ["-start_date"]
        constraints = [
            models.UniqueConstraint(
                fields=["is_active"],
                condition=Q(is_active=True),
                name="unique_active_session",
            ),
            models.CheckConstraint(
                condition=Q(end_date__gt=models.F("start_date")),
                name="session_ends_after_start",
            ),
        ]

    def __str__(self):
        return self.name

    def activate(self):
        """Make this the only active session."""
        with transaction.atomic():
            AcademicSession.objects.filter(is_active=True).exclude(pk=self.pk).update(is_active=False)
            self.is_active = True
            self.save(update_fields=["is_active", "modified"])


class SessionDeadline(BaseModel):
    session = models.ForeignKey(AcademicSession, on_delete=models.CASCADE, related_name="deadlines")
    name = models.CharField(max_length=200)
    deadline_type = models.CharField(max_length=30, choices=DeadlineType.choices)
    description = models.TextField(blank=True)
    due_date = models.DateTimeField()
    reminder_sent_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["due_date"]
        constraints = [
            models.UniqueConstraint(
                fields=["session", "deadline_type"],
                name="unique_deadline_type_per_session",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.session})"

    @property
    def is_past(self) -> bool:
        return timezone.now() > self.due_date


class TemplateCategory(models.TextChoices):
    PROPOSAL = "proposal", "Proposal"
    MID_TERM = "mid_term", "Mid-term"
    FINAL = "final", "Final"
    GENERAL = "general", "General"


def template_upload_path(instance: "DocumentTemplate", filename: str) -> str:
    return f"templates/{instance.category}/{filename}"


class DocumentTemplate(BaseModel):
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=20, choices=TemplateCategory.choices, default=TemplateCategory.GENERAL)
    file = models.FileField(upload_to=template_upload_path, max_length=500)
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="uploaded_templates",
    )

    class Meta:
        ordering = ["category", "name"]

    def __str__(self):
        return self.name


# ============================================================================
# Helpers used by the group and supervision workflows
# ============================================================================


def get_active_session() -> AcademicSession | None:
    return AcademicSession.objects.filter(is_active=True).first()


def deadline_passed(session: AcademicSession | None, deadline_type: str) -> bool:
    """
    True when ``session`` has a deadline of this type and it is over.

    A session without such a deadline never blocks the workflow.
    """
    if session is None:
        return False
    deadline = session.deadlines.filter(deadline_type=deadline_type).first()
    return deadline is not None and deadline.is_past
