"""
Groups API controller.
"""

import logging
from uuid import UUID

from django.db import IntegrityError
from django.db import transaction
from django.db.models import Count
from django.db.models import Q
from django.http import HttpRequest
from django.shortcuts import get_object_or_404
from django.utils import timezone
from ninja_extra import api_controller
from ninja_extra import http_get
from ninja_extra import http_post

from projectsync.academics.models import DeadlineType
from projectsync.academics.models import deadline_passed
from projectsync.academics.models import get_active_session
from projectsync.core.api import BaseAPI
from projectsync.core.api import IsAuthenticated
from projectsync.core.exceptions import AlreadyExistsError
from projectsync.core.exceptions import BadRequestError
from projectsync.core.exceptions import ErrorSchema
from projectsync.core.exceptions import NotFoundError
from projectsync.core.exceptions import PermissionDeniedError
from projectsync.core.roles import Role
from projectsync.core.roles import user_has_role
from projectsync.core.schemas import SuccessSchema
from projectsync.core.schemas import UserMinimalSchema
from projectsync.groups.models import GroupInvitation
from projectsync.groups.models import GroupStatus
from projectsync.groups.models import InvitationStatus
from projectsync.groups.models import ProjectGroup
from projectsync.groups.models import student_group_in_session
from projectsync.groups.schemas import AvailableStudentSchema
from projectsync.groups.schemas import GroupCreateSchema
from projectsync.groups.schemas import GroupDetailSchema
from projectsync.groups.schemas import GroupListSchema
from projectsync.groups.schemas import InvitationCreateSchema
from projectsync.groups.schemas import InvitationResponseSchema
from projectsync.groups.schemas import InvitationSchema
from projectsync.groups.schemas import TransferLeadershipSchema
from projectsync.notifications.models import NotificationType
from projectsync.notifications.services import notify
from projectsync.users.models import User

logger = logging.getLogger(__name__)


def group_to_list_schema(group: ProjectGroup) -> GroupListSchema:
    return GroupListSchema(
        id=group.id,
        name=group.name,
        leader=UserMinimalSchema.from_user(group.leader),
        supervisor=UserMinimalSchema.from_optional(group.supervisor),
        session_id=group.session_id,
        member_count=group.member_count,
        max_members=group.max_members,
        status=group.status,
        created=group.created,
    )


def group_to_detail_schema(group: ProjectGroup) -> GroupDetailSchema:
    project = getattr(group, "project", None)
    return GroupDetailSchema(
        id=group.id,
        name=group.name,
        leader=UserMinimalSchema.from_user(group.leader),
        supervisor=UserMinimalSchema.from_optional(group.supervisor),
        session_id=group.session_id,
        member_count=group.member_count,
        max_members=group.max_members,
        status=group.status,
        created=group.created,
        members=[UserMinimalSchema.from_user(m) for m in group.members.all()],
        project_id=project.id if project else None,
        project_title=project.title if project else None,
        project_status=project.status if project else None,
    )


def invitation_to_schema(invitation: GroupInvitation) -> InvitationSchema:
    return InvitationSchema(
        id=invitation.id,
        group_id=invitation.group_id,
        group_name=invitation.group.name,
        invitee=UserMinimalSchema.from_user(invitation.invitee),
        invited_by=UserMinimalSchema.from_user(invitation.invited_by),
        status=invitation.status,
        message=invitation.message,
        created=invitation.created,
        responded_at=invitation.responded_at,
    )


def load_group(group_id: UUID) -> ProjectGroup:
    return get_object_or_404(
        ProjectGroup.objects.select_related("leader", "supervisor", "session").prefetch_related("members"),
        id=group_id,
    )


@api_controller("/groups", tags=["Groups"], permissions=[IsAuthenticated])
class GroupController(BaseAPI):
    """Group formation, invitations and membership."""

    @http_get(
        "/",
        response={200: list[GroupListSchema]},
        url_name="groups_list",
    )
    def list_groups(
        self,
        request: HttpRequest,
        session_id: UUID | None = None,
        status: str | None = None,
    ):
        """List the groups visible to the caller's role."""
        groups = ProjectGroup.objects.visible_to(request.user).select_related("leader", "supervisor")

        if session_id:
            groups = groups.filter(session_id=session_id)
        if status:
            groups = groups.filter(status=status)

        return 200, [group_to_list_schema(g) for g in groups.order_by("-created")]

    @http_get(
        "/my",
        response={200: GroupDetailSchema, 404: ErrorSchema},
        url_name="groups_my",
    )
    def my_group(self, request: HttpRequest):
        """The caller's group in the active session."""
        group = student_group_in_session(request.user, get_active_session())
        if group is None:
            return NotFoundError("You are not in a group this session.").to_response()
        return 200, group_to_detail_schema(load_group(group.id))

    @http_get(
        "/available-students",
        response={200: list[AvailableStudentSchema], 400: ErrorSchema},
        url_name="groups_available_students",
    )
    def available_students(self, request: HttpRequest, search: str = ""):
        """Active students without a group in the active session."""
        session = get_active_session()
        if session is None:
            return BadRequestError("No academic session is active.").to_response()

        students = (
            User.objects.filter(groups__name=Role.STUDENT.value, is_active=True)
            .exclude(project_groups__session=session)
            .annotate(
                pending=Count(
                    "group_invitations",
                    filter=Q(group_invitations__status=InvitationStatus.PENDING),
                    distinct=True,
                ),
            )
        )
        if search:
            students = students.filter(
                Q(email__icontains=search)
                | Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
                | Q(enrollment_number__icontains=search)
            )

        return 200, [
            AvailableStudentSchema(
                id=s.id,
                email=s.email,
                first_name=s.first_name,
                last_name=s.last_name,
                enrollment_number=s.enrollment_number,
                pending_invitations=s.pending,
            )
            for s in students.order_by("first_name", "last_name")
        ]

    @http_get(
        "/invitations/received",
        response={200: list[InvitationSchema]},
        url_name="invitations_received",
    )
    def my_invitations(self, request: HttpRequest, status: str | None = None):
        invitations = GroupInvitation.objects.filter(invitee=request.user)
        if status:
            invitations = invitations.filter(status=status)
        invitations = invitations.select_related("group", "invitee", "invited_by").order_by("-created")
        return 200, [invitation_to_schema(inv) for inv in invitations]

    @http_get(
        "/{uuid:group_id}",
        response={200: GroupDetailSchema, 403: ErrorSchema, 404: ErrorSchema},
        url_name="groups_detail",
    )
    def get_group(self, request: HttpRequest, group_id: UUID):
        if not ProjectGroup.objects.visible_to(request.user).filter(id=group_id).exists():
            if not ProjectGroup.objects.filter(id=group_id).exists():
                return NotFoundError("Group not found.").to_response()
            return PermissionDeniedError("You cannot view this group.").to_response()

        return 200, group_to_detail_schema(load_group(group_id))

    @http_post(
        "/",
        response={201: GroupDetailSchema, 400: ErrorSchema, 403: ErrorSchema, 409: ErrorSchema},
        url_name="groups_create",
    )
    def create_group(self, request: HttpRequest, data: GroupCreateSchema):
        """
        Create a group in the active session.

        The caller becomes leader and first member.
        """
        if not user_has_role(request.user, Role.STUDENT):
            return PermissionDeniedError("Only students can create groups.").to_response()

        session = get_active_session()
        if session is None:
            return BadRequestError("No academic session is active.").to_response()

        if deadline_passed(session, DeadlineType.GROUP_FORMATION):
            return BadRequestError("The group formation deadline has passed.").to_response()

        if student_group_in_session(request.user, session) is not None:
            return AlreadyExistsError("You are already a member of a group this session.").to_response()

        try:
            with transaction.atomic():
                group = ProjectGroup.objects.create(
                    name=data.name,
                    leader=request.user,
                    session=session,
                )
        except IntegrityError:
            return AlreadyExistsError("A group with this name already exists.").to_response()

        GroupInvitation.objects.filter(
            invitee=request.user,
            status=InvitationStatus.PENDING,
            group__session=session,
        ).update(status=InvitationStatus.DECLINED, responded_at=timezone.now())

        logger.info("GROUP: '%s' created by %s", group.name, request.user.email)
        return 201, group_to_detail_schema(load_group(group.id))

    # ==================== Invitation Endpoints ====================

    @http_post(
        "/{group_id}/invite",
        response={201: InvitationSchema, 400: ErrorSchema, 403: ErrorSchema, 404: ErrorSchema, 409: ErrorSchema},
        url_name="groups_invite",
    )
    def invite_to_group(self, request: HttpRequest, group_id: UUID, data: InvitationCreateSchema):
        """
        Invite a student to join the group.

        Only the leader of an open, non-full group can invite, and only
        students without a group this session can be invited.
        """
        group = get_object_or_404(ProjectGroup.objects.select_related("session"), id=group_id)

        if not group.is_leader(request.user):
            return PermissionDeniedError("Only the group leader can invite members.").to_response()

        if group.status != GroupStatus.OPEN:
            return BadRequestError("Group membership is locked.").to_response()

        if deadline_passed(group.session, DeadlineType.GROUP_FORMATION):
            return BadRequestError("The group formation deadline has passed.").to_response()

        if group.is_full:
            return BadRequestError("Group is full").to_response()

        invitee = User.objects.filter(email__iexact=data.invitee_email, is_active=True).first()
        if not invitee:
            return NotFoundError(f"No user found with email {data.invitee_email}.").to_response()

        if not user_has_role(invitee, Role.STUDENT):
            return BadRequestError("Only students can be invited.").to_response()

        if group.is_member(invitee):
            return BadRequestError("This student is already a member of the group.").to_response()

        if student_group_in_session(invitee, group.session) is not None:
            return BadRequestError("This student already belongs to a group.").to_response()

        if GroupInvitation.objects.filter(
            group=group,
            invitee=invitee,
            status=InvitationStatus.PENDING,
        ).exists():
            return AlreadyExistsError("An invitation is already pending for this student.").to_response()

        invitation = GroupInvitation.objects.create(
            group=group,
            invitee=invitee,
            invited_by=request.user,
            message=data.message,
        )
        notify(
            invitee,
            NotificationType.GROUP_INVITATION,
            "Group invitation",
            f"{request.user.get_full_name()} invited you to join {group.name}.",
            link="/groups/invitations",
        )

        invitation = GroupInvitation.objects.select_related("group", "invitee", "invited_by").get(id=invitation.id)
        return 201, invitation_to_schema(invitation)

    @http_get(
        "/{group_id}/invitations",
        response={200: list[InvitationSchema], 403: ErrorSchema, 404: ErrorSchema},
        url_name="groups_invitations_list",
    )
    def list_group_invitations(self, request: HttpRequest, group_id: UUID):
        """Invitations sent by the group. Leader only."""
        group = get_object_or_404(ProjectGroup, id=group_id)

        if not group.is_leader(request.user):
            return PermissionDeniedError("Only the group leader can view invitations.").to_response()

        invitations = GroupInvitation.objects.filter(
            group=group
        ).select_related("group", "invitee", "invited_by").order_by("-created")

        return 200, [invitation_to_schema(inv) for inv in invitations]

    @http_post(
        "/invitations/{invitation_id}/respond",
        response={200: InvitationSchema, 400: ErrorSchema, 403: ErrorSchema, 404: ErrorSchema},
        url_name="invitations_respond",
    )
    def respond_to_invitation(self, request: HttpRequest, invitation_id: UUID, data: InvitationResponseSchema):
        """Accept or decline an invitation. Only the invitee can respond."""
        invitation = get_object_or_404(
            GroupInvitation.objects.select_related("group", "group__session", "invitee", "invited_by"),
            id=invitation_id,
        )

        if invitation.invitee_id != request.user.id:
            return PermissionDeniedError("You can only respond to your own invitations.").to_response()

        if not invitation.can_respond():
            return BadRequestError("This invitation is no longer pending.").to_response()

        if data.accept and deadline_passed(invitation.group.session, DeadlineType.GROUP_FORMATION):
            return BadRequestError("The group formation deadline has passed.").to_response()

        try:
            if data.accept:
                invitation.accept()
            else:
                invitation.decline()
        except ValueError as e:
            return BadRequestError(str(e)).to_response()

        return 200, invitation_to_schema(invitation)

    @http_post(
        "/{group_id}/invitations/{invitation_id}/cancel",
        response={200: SuccessSchema, 400: ErrorSchema, 403: ErrorSchema, 404: ErrorSchema},
        url_name="invitations_cancel",
    )
    def cancel_invitation(self, request: HttpRequest, group_id: UUID, invitation_id: UUID):
        group = get_object_or_404(ProjectGroup, id=group_id)
        invitation = get_object_or_404(GroupInvitation, id=invitation_id, group=group)

        if not group.is_leader(request.user):
            return PermissionDeniedError("Only the group leader can cancel invitations.").to_response()

        try:
            invitation.cancel()
        except ValueError as e:
            return BadRequestError(str(e)).to_response()

        return 200, SuccessSchema(success=True, message="Invitation cancelled.")

    # ==================== Member Management Endpoints ====================

    @http_post(
        "/{group_id}/leave",
        response={200: SuccessSchema, 400: ErrorSchema, 404: ErrorSchema},
        url_name="groups_leave",
    )
    def leave_group(self, request: HttpRequest, group_id: UUID):
        """Leave a group. The leader must transfer leadership first."""
        group = get_object_or_404(ProjectGroup.objects.select_related("leader"), id=group_id)

        try:
            group.remove_member(request.user)
        except ValueError as e:
            return BadRequestError(str(e)).to_response()

        notify(
            group.leader,
            NotificationType.GENERAL,
            "Member left",
            f"{request.user.get_full_name()} left {group.name}.",
            link=f"/groups/{group.id}",
        )
        return 200, SuccessSchema(success=True, message="You have left the group.")

    @http_post(
        "/{group_id}/members/{user_id}/remove",
        response={200: GroupDetailSchema, 400: ErrorSchema, 403: ErrorSchema, 404: ErrorSchema},
        url_name="groups_remove_member",
    )
    def remove_member(self, request: HttpRequest, group_id: UUID, user_id: UUID):
        """Remove a member from the group. Leader only."""
        group = get_object_or_404(ProjectGroup, id=group_id)

        if not group.is_leader(request.user):
            return PermissionDeniedError("Only the group leader can remove members.").to_response()

        member = get_object_or_404(User, id=user_id)
        try:
            group.remove_member(member)
        except ValueError as e:
            return BadRequestError(str(e)).to_response()

        notify(
            member,
            NotificationType.GENERAL,
            "Removed from group",
            f"You were removed from {group.name}.",
        )
        return 200, group_to_detail_schema(load_group(group.id))

    @http_post(
        "/{group_id}/transfer-leadership",
        response={200: GroupDetailSchema, 400: ErrorSchema, 403: ErrorSchema, 404: ErrorSchema},
        url_name="groups_transfer_leadership",
    )
    def transfer_leadership(self, request: HttpRequest, group_id: UUID, data: TransferLeadershipSchema):
        """Hand leadership to another member. Leader only."""
        group = load_group(group_id)

        if not group.is_leader(request.user):
            return PermissionDeniedError("Only the group leader can transfer leadership.").to_response()

        new_leader = User.objects.filter(id=data.new_leader_id).first()
        if not new_leader:
            return NotFoundError("User not found.").to_response()

        try:
            group.transfer_leadership(new_leader)
        except ValueError as e:
            return BadRequestError(str(e)).to_response()

        notify(
            new_leader,
            NotificationType.GENERAL,
            "You are now the group leader",
            f"{request.user.get_full_name()} made you leader of {group.name}.",
            link=f"/groups/{group.id}",
        )
        return 200, group_to_detail_schema(load_group(group.id))
