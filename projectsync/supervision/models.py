"""
Supervisor matching: requests sent by a group leader to a supervisor.
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _
from django_fsm import FSMField
from django_fsm import transition

from projectsync.core.models import BaseModel
from projectsync.core.roles import Role
from projectsync.core.roles import is_pmo_or_admin
from projectsync.core.roles import user_has_role
from projectsync.core.workflow import Reviewable


class RequestStatus(models.TextChoices):
    PENDING = "pending", _("Pending")
    ACCEPTED = "accepted", _("Accepted")
    REJECTED = "rejected", _("Rejected")
    CANCELLED = "cancelled", _("Cancelled")


class SupervisionRequestQuerySet(models.QuerySet):
    def visible_to(self, user):
        if is_pmo_or_admin(user):
            return self.all()

        visible = models.Q(group__members=user)
        if user_has_role(user, Role.SUPERVISOR):
            visible |= models.Q(supervisor=user)
        return self.filter(visible).distinct()


class SupervisionRequest(Reviewable, BaseModel):
    """
    Request from a group to be supervised.

    Status flow: pending -> accepted | rejected | cancelled.
    A group has at most one pending request at a time.
    """

    approve_transition = "accept"
    reviewer_field = None
    reviewed_at_field = "responded_at"
    reason_field = "response_message"

    group = models.ForeignKey(
        "groups.ProjectGroup",
        on_delete=models.CASCADE,
        related_name="supervision_requests",
        verbose_name=_("group"),
    )
    supervisor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="received_supervision_requests",
        verbose_name=_("supervisor"),
    )
    requested_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="sent_supervision_requests",
        verbose_name=_("requested by"),
    )
    message = models.TextField(_("message"), blank=True)
    response_message = models.TextField(_("response message"), blank=True)

    status = FSMField(
        _("status"),
        default=RequestStatus.PENDING,
        choices=RequestStatus.choices,
    )
    responded_at = models.DateTimeField(_("responded at"), null=True, blank=True)

    objects = SupervisionRequestQuerySet.as_manager()

    class Meta:
        verbose_name = _("supervision request")
        verbose_name_plural = _("supervision requests")
        ordering = ["-created"]
        constraints = [
            # One pending request per group
            models.UniqueConstraint(
                fields=["group"],
                condition=models.Q(status="pending"),
                name="unique_pending_supervision_request",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.group.name} -> {self.supervisor.email} ({self.status})"

    @transition(field=status, source=RequestStatus.PENDING, target=RequestStatus.ACCEPTED)
    def accept(self):
        pass

    @transition(field=status, source=RequestStatus.PENDING, target=RequestStatus.REJECTED)
    def reject(self):
        pass

    @transition(field=status, source=RequestStatus.PENDING, target=RequestStatus.CANCELLED)
    def cancel(self):
        pass

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING
