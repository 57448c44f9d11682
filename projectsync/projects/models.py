"""
Models for final-year projects and their milestones.

Contains:
- Project: the proposal a group works on, reviewed by the PMO or supervisor
- Milestone: scheduled checkpoints generated when a project is approved
"""

import logging

from django.conf import settings
from django.core.validators import MaxValueValidator
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from django_fsm import FSMField
from django_fsm import transition

from projectsync.academics.models import MilestoneType
from projectsync.core.models import BaseModel
from projectsync.core.roles import Role
from projectsync.core.roles import is_pmo_or_admin
from projectsync.core.roles import user_has_role
from projectsync.core.workflow import Reviewable

logger = logging.getLogger(__name__)


class ProjectStatus(models.TextChoices):
    """Status choices for projects (FSM states)."""

    DRAFT = "draft", _("Draft")
    SUBMITTED = "submitted", _("Submitted")
    APPROVED = "approved", _("Approved")
    REJECTED = "rejected", _("Rejected")
    LOCKED = "locked", _("Locked")


EDITABLE_STATUSES = [ProjectStatus.DRAFT, ProjectStatus.REJECTED]
ACTIVE_STATUSES = [ProjectStatus.APPROVED, ProjectStatus.LOCKED]


class ProjectQuerySet(models.QuerySet):
    def visible_to(self, user):
        """
        Projects ``user`` may see.

        PMO, exam cell and admin see everything; supervisors the projects of
        their groups; the external panel approved projects; students their
        own group's project.
        """
        if is_pmo_or_admin(user) or user_has_role(user, Role.EXAM_CELL):
            return self.all()

        visible = models.Q(group__members=user)
        if user_has_role(user, Role.SUPERVISOR):
            visible |= models.Q(supervisor=user) | models.Q(group__supervisor=user)
        if user_has_role(user, Role.EXTERNAL_PANEL):
            visible |= models.Q(status__in=ACTIVE_STATUSES)
        return self.filter(visible).distinct()


class Project(Reviewable, BaseModel):
    """
    A group's final-year project.

    Status flow:
        draft -> submitted -> approved | rejected
        rejected -> submitted (resubmission)
        approved -> locked

    Only draft and rejected projects may be edited by the group.
    """

    reviewed_at_field = None
    reason_field = "rejection_reason"
    reason_on_approval = False
    reason_required = True

    group = models.OneToOneField(
        "groups.ProjectGroup",
        on_delete=models.CASCADE,
        related_name="project",
        verbose_name=_("group"),
    )

    title = models.CharField(_("title"), max_length=300)
    abstract = models.TextField(_("abstract"))
    domain = models.CharField(
        _("domain"),
        max_length=100,
        blank=True,
        help_text=_("e.g. 'Machine Learning', 'Web', 'IoT'"),
    )

    supervisor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="supervised_projects",
        verbose_name=_("supervisor"),
    )

    status = FSMField(
        _("status"),
        default=ProjectStatus.DRAFT,
        choices=ProjectStatus.choices,
    )

    submitted_at = models.DateTimeField(_("submitted at"), null=True, blank=True)
    approved_at = models.DateTimeField(_("approved at"), null=True, blank=True)
    rejected_at = models.DateTimeField(_("rejected at"), null=True, blank=True)
    rejection_reason = models.TextField(_("rejection reason"), blank=True)

    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviewed_projects",
        verbose_name=_("reviewed by"),
    )

    similarity_score = models.DecimalField(
        _("similarity score"),
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
        help_text=_("Percentage entered by the reviewer"),
    )

    objects = ProjectQuerySet.as_manager()

    class Meta:
        verbose_name = _("project")
        verbose_name_plural = _("projects")
        ordering = ["-created"]

    def __str__(self) -> str:
        return f"{self.title} ({self.get_status_display()})"

    # FSM Transitions

    @transition(field=status, source=EDITABLE_STATUSES, target=ProjectStatus.SUBMITTED)
    def submit(self):
        self.submitted_at = timezone.now()

    @transition(field=status, source=ProjectStatus.SUBMITTED, target=ProjectStatus.APPROVED)
    def approve(self):
        self.approved_at = timezone.now()

    @transition(field=status, source=ProjectStatus.SUBMITTED, target=ProjectStatus.REJECTED)
    def reject(self):
        self.rejected_at = timezone.now()

    @transition(field=status, source=ProjectStatus.APPROVED, target=ProjectStatus.LOCKED)
    def lock(self):
        """Freeze the approved project for evaluation."""

    # Helper methods

    @property
    def is_editable(self) -> bool:
        return self.status in EDITABLE_STATUSES

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def is_member(self, user) -> bool:
        return self.group.is_member(user)

    def can_be_reviewed_by(self, user) -> bool:
        """The PMO, administrators and the group's supervisor review projects."""
        if is_pmo_or_admin(user):
            return True
        return self.group.supervisor_id is not None and self.group.supervisor_id == user.id


class MilestoneStatus(models.TextChoices):
    UPCOMING = "upcoming", _("Upcoming")
    IN_PROGRESS = "in_progress", _("In progress")
    COMPLETED = "completed", _("Completed")
    OVERDUE = "overdue", _("Overdue")


class Milestone(BaseModel):
    """
    Submission checkpoint of an approved project.

    Status is derived from the due date, completion and uploads; it is
    stored so dashboards can filter on it and refreshed by ``refresh_status``.
    """

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name="milestones",
        verbose_name=_("project"),
    )
    title = models.CharField(_("title"), max_length=200)
    description = models.TextField(_("description"), blank=True)
    milestone_type = models.CharField(
        _("milestone type"),
        max_length=20,
        choices=MilestoneType.choices,
    )
    due_date = models.DateTimeField(_("due date"))
    completed_at = models.DateTimeField(_("completed at"), null=True, blank=True)
    status = models.CharField(
        _("status"),
        max_length=20,
        choices=MilestoneStatus.choices,
        default=MilestoneStatus.UPCOMING,
    )

    class Meta:
        verbose_name = _("milestone")
        verbose_name_plural = _("milestones")
        ordering = ["due_date"]
        constraints = [
            models.UniqueConstraint(
                fields=["project", "milestone_type"],
                name="unique_milestone_type_per_project",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.title} - {self.project.title}"

    def compute_status(self, now=None) -> str:
        now = now or timezone.now()
        if self.completed_at is not None:
            return MilestoneStatus.COMPLETED
        if self.due_date < now:
            return MilestoneStatus.OVERDUE
        if self.project.submissions.filter(milestone_type=self.milestone_type).exists():
            return MilestoneStatus.IN_PROGRESS
        return MilestoneStatus.UPCOMING

    def refresh_status(self, save: bool = True) -> bool:
        """Recompute the status. Returns True when it changed."""
        status = self.compute_status()
        if status == self.status:
            return False
        self.status = status
        if save:
            self.save(update_fields=["status", "modified"])
        return True

    def complete(self):
        self.completed_at = timezone.now()
        self.status = MilestoneStatus.COMPLETED
        self.save(update_fields=["completed_at", "status", "modified"])


def milestone_progress(milestones) -> int:
    """Percentage of completed milestones, rounded down."""
    milestones = list(milestones)
    if not milestones:
        return 0
    completed = sum(1 for m in milestones if m.status == MilestoneStatus.COMPLETED)
    return completed * 100 // len(milestones)
