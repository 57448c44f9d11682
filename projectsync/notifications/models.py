from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from projectsync.core.models import BaseModel
from projectsync.core.roles import is_admin


class NotificationType(models.TextChoices):
    SUPERVISION_REQUEST = "supervision_request", "Supervision request"
    SUPERVISION_RESPONSE = "supervision_response", "Supervision response"
    GROUP_INVITATION = "group_invitation", "Group invitation"
    PROJECT_APPROVED = "project_approved", "Project approved"
    PROJECT_REJECTED = "project_rejected", "Project rejected"
    DOCUMENT_FEEDBACK = "document_feedback", "Document feedback"
    EVALUATION_SUBMITTED = "evaluation_submitted", "Evaluation submitted"
    RESULTS_PUBLISHED = "results_published", "Results published"
    ANNOUNCEMENT = "announcement", "Announcement"
    DEADLINE_REMINDER = "deadline_reminder", "Deadline reminder"
    GENERAL = "general", "General"


class Notification(BaseModel):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    notification_type = models.CharField(
        max_length=30,
        choices=NotificationType.choices,
        default=NotificationType.GENERAL,
    )
    title = models.CharField(max_length=200)
    message = models.TextField(blank=True)
    link = models.CharField(max_length=300, blank=True)
    is_read = models.BooleanField(default=False)

    class Meta:
        ordering = ["-created"]
        indexes = [
            models.Index(fields=["user", "is_read"], name="notification_user_read_idx"),
        ]

    def __str__(self):
        return f"{self.notification_type} -> {self.user}"


class AnnouncementPriority(models.TextChoices):
    LOW = "low", "Low"
    MEDIUM = "medium", "Medium"
    HIGH = "high", "High"


class AnnouncementQuerySet(models.QuerySet):
    def active(self):
        now = timezone.now()
        return self.filter(published_at__lte=now).filter(
            Q(expires_at__isnull=True) | Q(expires_at__gt=now)
        )

    def visible_to(self, user):
        """
        Announcements ``user`` may read.

        Targeted by role or by one of the user's groups; authors always see
        their own and administrators see everything.
        """
        if is_admin(user):
            return self.all()
        visible = Q(author=user) | Q(target_groups__members=user) | Q(target_roles__user=user)
        return self.filter(visible).distinct()


class Announcement(BaseModel):
    title = models.CharField(max_length=200)
    content = models.TextField()
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="announcements",
    )
    author_role = models.CharField(max_length=30, blank=True)
    # Role auth groups the announcement is addressed to
    target_roles = models.ManyToManyField(
        "auth.Group",
        blank=True,
        related_name="+",
    )
    target_groups = models.ManyToManyField(
        "groups.ProjectGroup",
        blank=True,
        related_name="announcements",
    )
    priority = models.CharField(
        max_length=10,
        choices=AnnouncementPriority.choices,
        default=AnnouncementPriority.MEDIUM,
    )
    published_at = models.DateTimeField(default=timezone.now)
    expires_at = models.DateTimeField(null=True, blank=True)
    read_by = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        blank=True,
        related_name="read_announcements",
    )

    objects = AnnouncementQuerySet.as_manager()

    class Meta:
        ordering = ["-published_at"]

    def __str__(self):
        return self.title

    @property
    def is_expired(self) -> bool:
        return self.expires_at is not None and self.expires_at <= timezone.now()
