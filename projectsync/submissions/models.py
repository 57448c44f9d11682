"""
Versioned milestone documents uploaded by project groups.
"""

import uuid

from django.conf import settings
from django.core.validators import MaxValueValidator
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _
from django_fsm import FSMField
from django_fsm import transition

from projectsync.academics.models import MilestoneType
from projectsync.core.models import BaseModel
from projectsync.core.roles import Role
from projectsync.core.roles import is_pmo_or_admin
from projectsync.core.roles import user_has_role
from projectsync.core.workflow import Reviewable


def submission_path(instance: "Submission", filename: str) -> str:
    """Generate upload path for submissions."""
    return f"submissions/{instance.project_id}/{instance.milestone_type}/{uuid.uuid4()}/{filename}"


class SubmissionStatus(models.TextChoices):
    UPLOADED = "uploaded", _("Uploaded")
    APPROVED = "approved", _("Approved")
    REJECTED = "rejected", _("Rejected")


class SubmissionQuerySet(models.QuerySet):
    def visible_to(self, user):
        if is_pmo_or_admin(user) or user_has_role(user, Role.EXAM_CELL):
            return self.all()

        visible = models.Q(group__members=user)
        if user_has_role(user, Role.SUPERVISOR):
            visible |= models.Q(group__supervisor=user)
        if user_has_role(user, Role.EXTERNAL_PANEL):
            visible |= models.Q(project__status__in=["approved", "locked"])
        return self.filter(visible).distinct()


class Submission(Reviewable, BaseModel):
    """
    One uploaded version of a milestone document.

    ``version`` grows by one per (project, milestone_type). Status moves
    uploaded -> approved | rejected; once a version is approved the
    milestone accepts no further uploads.
    """

    project = models.ForeignKey(
        "projects.Project",
        on_delete=models.CASCADE,
        related_name="submissions",
        verbose_name=_("project"),
    )
    group = models.ForeignKey(
        "groups.ProjectGroup",
        on_delete=models.CASCADE,
        related_name="submissions",
        verbose_name=_("group"),
    )
    milestone_type = models.CharField(
        _("milestone type"),
        max_length=20,
        choices=MilestoneType.choices,
    )
    title = models.CharField(_("title"), max_length=300)
    description = models.TextField(_("description"), blank=True)

    file = models.FileField(_("file"), upload_to=submission_path, max_length=500)
    file_name = models.CharField(_("original filename"), max_length=255)
    file_size = models.PositiveIntegerField(_("file size"), help_text=_("Size in bytes"))
    version = models.PositiveIntegerField(_("version"))

    status = FSMField(
        _("status"),
        default=SubmissionStatus.UPLOADED,
        choices=SubmissionStatus.choices,
    )

    submitted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="submissions",
        verbose_name=_("submitted by"),
    )
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviewed_submissions",
        verbose_name=_("reviewed by"),
    )
    reviewed_at = models.DateTimeField(_("reviewed at"), null=True, blank=True)
    feedback = models.TextField(_("feedback"), blank=True)
    similarity_score = models.DecimalField(
        _("similarity score"),
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )

    objects = SubmissionQuerySet.as_manager()

    class Meta:
        verbose_name = _("submission")
        verbose_name_plural = _("submissions")
        ordering = ["milestone_type", "-version"]
        constraints = [
            models.UniqueConstraint(
                fields=["project", "milestone_type", "version"],
                name="unique_submission_version",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.title} v{self.version} ({self.get_milestone_type_display()})"

    @transition(field=status, source=SubmissionStatus.UPLOADED, target=SubmissionStatus.APPROVED)
    def approve(self):
        pass

    @transition(field=status, source=SubmissionStatus.UPLOADED, target=SubmissionStatus.REJECTED)
    def reject(self):
        pass

    def can_be_reviewed_by(self, user) -> bool:
        """The group's supervisor, the PMO and administrators review documents."""
        if is_pmo_or_admin(user):
            return True
        return self.group.supervisor_id is not None and self.group.supervisor_id == user.id
