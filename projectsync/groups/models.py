"""
Models for project group formation.

Contains:
- ProjectGroup: the students working on one final-year project
- GroupInvitation: invitations sent by a group leader to other students
"""

import logging

from django.conf import settings
from django.db import models
from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from django_fsm import FSMField
from django_fsm import transition

from projectsync.core.models import BaseModel
from projectsync.core.roles import Role
from projectsync.core.roles import is_pmo_or_admin
from projectsync.core.roles import user_has_role
from projectsync.notifications.models import NotificationType
from projectsync.notifications.services import notify

logger = logging.getLogger(__name__)


def default_max_members() -> int:
    return settings.GROUP_MAX_MEMBERS


class GroupStatus(models.TextChoices):
    """Status choices for project groups (FSM states)."""

    OPEN = "open", _("Open")  # Membership may change
    LOCKED = "locked", _("Locked")  # Project approved, membership frozen


class ProjectGroupQuerySet(models.QuerySet):
    def visible_to(self, user):
        """
        Groups ``user`` may see.

        PMO, exam cell and admin see every group; supervisors their own
        groups; external panel members groups with an approved project;
        students the groups they belong to.
        """
        if is_pmo_or_admin(user) or user_has_role(user, Role.EXAM_CELL):
            return self.all()

        visible = models.Q(members=user)
        if user_has_role(user, Role.SUPERVISOR):
            visible |= models.Q(supervisor=user)
        if user_has_role(user, Role.EXTERNAL_PANEL):
            visible |= models.Q(project__status__in=["approved", "locked"])
        return self.filter(visible).distinct()


class ProjectGroup(BaseModel):
    """
    Student group working on one final-year project.

    Invariants:
    - the leader is always a member
    - members never exceed max_members
    - a student belongs to at most one group per session

    Status moves open -> locked when the group's project is approved.
    """

    name = models.CharField(_("name"), max_length=200)

    leader = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="led_groups",
        verbose_name=_("leader"),
    )

    members = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        related_name="project_groups",
        verbose_name=_("members"),
        help_text=_("All group members including the leader"),
    )

    max_members = models.PositiveSmallIntegerField(
        _("max members"),
        default=default_max_members,
    )

    supervisor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="supervised_groups",
        verbose_name=_("supervisor"),
    )

    session = models.ForeignKey(
        "academics.AcademicSession",
        on_delete=models.PROTECT,
        related_name="groups",
        verbose_name=_("academic session"),
    )

    status = FSMField(
        _("status"),
        default=GroupStatus.OPEN,
        choices=GroupStatus.choices,
    )

    objects = ProjectGroupQuerySet.as_manager()

    class Meta:
        verbose_name = _("project group")
        verbose_name_plural = _("project groups")
        ordering = ["-created"]
        constraints = [
            models.UniqueConstraint(
                fields=["session", "name"],
                name="unique_group_name_per_session",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.get_status_display()})"

    def save(self, *args, **kwargs):
        """Ensure leader is always in members."""
        super().save(*args, **kwargs)
        if self.leader_id and not self.members.filter(id=self.leader_id).exists():
            self.members.add(self.leader)

    # FSM Transitions

    @transition(field=status, source=GroupStatus.OPEN, target=GroupStatus.LOCKED)
    def lock(self):
        """Freeze membership once the group's project is approved."""

    # Helper methods

    @property
    def member_count(self) -> int:
        return self.members.count()

    @property
    def is_full(self) -> bool:
        return self.member_count >= self.max_members

    @property
    def is_locked(self) -> bool:
        return self.status == GroupStatus.LOCKED

    def can_add_member(self) -> bool:
        """Open groups below max_members accept new members."""
        return self.status == GroupStatus.OPEN and not self.is_full

    def is_member(self, user) -> bool:
        return self.members.filter(id=user.id).exists()

    def is_leader(self, user) -> bool:
        return self.leader_id == user.id

    def is_supervisor(self, user) -> bool:
        return self.supervisor_id is not None and self.supervisor_id == user.id

    def remove_member(self, user):
        """
        Remove a non-leader member.

        Raises:
            ValueError: group locked, user is the leader, or not a member
        """
        if self.is_locked:
            raise ValueError("Group membership is locked.")
        if self.is_leader(user):
            raise ValueError("The leader must transfer leadership before leaving.")
        if not self.is_member(user):
            raise ValueError("This student is not a member of the group.")

        self.members.remove(user)
        logger.info("GROUP: %s removed from '%s'", user.email, self.name)

    def transfer_leadership(self, new_leader):
        if self.is_locked:
            raise ValueError("Group membership is locked.")
        if not self.is_member(new_leader):
            raise ValueError("The new leader must be a member of the group.")
        if self.is_leader(new_leader):
            raise ValueError("This student is already the leader.")

        old_leader = self.leader
        self.leader = new_leader
        self.save(update_fields=["leader", "modified"])
        logger.info(
            "GROUP: leadership of '%s' transferred from %s to %s",
            self.name,
            old_leader.email,
            new_leader.email,
        )


def student_group_in_session(user, session) -> ProjectGroup | None:
    """The group ``user`` belongs to in ``session``, if any."""
    if session is None:
        return None
    return ProjectGroup.objects.filter(session=session, members=user).first()


class InvitationStatus(models.TextChoices):
    PENDING = "pending", _("Pending")
    ACCEPTED = "accepted", _("Accepted")
    DECLINED = "declined", _("Declined")
    CANCELLED = "cancelled", _("Cancelled")


class GroupInvitation(BaseModel):
    """
    Invitation to join a project group.

    Sent by the leader to a student without a group in the same session.
    """

    group = models.ForeignKey(
        ProjectGroup,
        on_delete=models.CASCADE,
        related_name="invitations",
        verbose_name=_("group"),
    )

    invitee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="group_invitations",
        verbose_name=_("invitee"),
    )

    invited_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_invitations",
        verbose_name=_("invited by"),
    )

    status = models.CharField(
        _("status"),
        max_length=20,
        choices=InvitationStatus.choices,
        default=InvitationStatus.PENDING,
    )

    message = models.TextField(_("message"), blank=True)

    responded_at = models.DateTimeField(_("responded at"), null=True, blank=True)

    class Meta:
        verbose_name = _("group invitation")
        verbose_name_plural = _("group invitations")
        ordering = ["-created"]
        constraints = [
            # One pending invitation per user per group
            models.UniqueConstraint(
                fields=["group", "invitee"],
                condition=models.Q(status="pending"),
                name="unique_pending_invitation",
            ),
        ]

    def __str__(self) -> str:
        return f"Invitation to {self.invitee.email} for {self.group.name}"

    def can_respond(self) -> bool:
        return self.status == InvitationStatus.PENDING

    def accept(self):
        """
        Accept the invitation and join the group.

        The group row is locked while capacity and the one-group-per-session
        rule are re-checked, so two acceptances cannot overfill a group.
        Other pending invitations of the invitee in the session are declined.

        Raises:
            ValueError: not pending, group full or locked, or invitee already grouped
        """
        if not self.can_respond():
            raise ValueError("Cannot accept an invitation that is not pending.")

        with transaction.atomic():
            group = ProjectGroup.objects.select_for_update().get(id=self.group_id)

            if group.status != GroupStatus.OPEN:
                raise ValueError("Group membership is locked.")
            if group.is_full:
                raise ValueError("Group is full")
            if student_group_in_session(self.invitee, group.session_id) is not None:
                raise ValueError("You are already a member of a group this session.")

            self.status = InvitationStatus.ACCEPTED
            self.responded_at = timezone.now()
            self.save(update_fields=["status", "responded_at", "modified"])

            group.members.add(self.invitee)
            self._auto_decline_other_invitations(group)

        logger.info(
            "GROUP: %s joined '%s' (%d/%d members)",
            self.invitee.email,
            group.name,
            group.member_count,
            group.max_members,
        )
        notify(
            group.leader,
            NotificationType.GENERAL,
            "Invitation accepted",
            f"{self.invitee.get_full_name()} joined {group.name}.",
            link=f"/groups/{group.id}",
        )

    def _auto_decline_other_invitations(self, group: ProjectGroup):
        GroupInvitation.objects.filter(
            invitee=self.invitee,
            status=InvitationStatus.PENDING,
            group__session_id=group.session_id,
        ).exclude(id=self.id).update(
            status=InvitationStatus.DECLINED,
            responded_at=timezone.now(),
        )

    def decline(self):
        if not self.can_respond():
            raise ValueError("Cannot decline an invitation that is not pending.")

        self.status = InvitationStatus.DECLINED
        self.responded_at = timezone.now()
        self.save(update_fields=["status", "responded_at", "modified"])

        notify(
            self.group.leader,
            NotificationType.GENERAL,
            "Invitation declined",
            f"{self.invitee.get_full_name()} declined to join {self.group.name}.",
            link=f"/groups/{self.group_id}",
        )

    def cancel(self):
        """Withdraw the invitation (by the leader)."""
        if not self.can_respond():
            raise ValueError("Cannot cancel an invitation that is not pending.")

        self.status = InvitationStatus.CANCELLED
        self.responded_at = timezone.now()
        self.save(update_fields=["status", "responded_at", "modified"])
