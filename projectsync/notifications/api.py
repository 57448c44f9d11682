"""
Notifications and announcements API controllers.
"""

import logging
from uuid import UUID

from django.contrib.auth.models import Group
from django.http import HttpRequest
from django.shortcuts import get_object_or_404
from ninja_extra import api_controller
from ninja_extra import http_delete
from ninja_extra import http_get
from ninja_extra import http_post

from projectsync.core.api import BaseAPI
from projectsync.core.api import IsAuthenticated
from projectsync.core.exceptions import ErrorSchema
from projectsync.core.exceptions import PermissionDeniedError
from projectsync.core.exceptions import ValidationError
from projectsync.core.roles import Role
from projectsync.core.roles import get_user_role
from projectsync.core.roles import is_admin
from projectsync.core.roles import is_pmo_or_admin
from projectsync.core.roles import user_has_role
from projectsync.core.schemas import SuccessSchema
from projectsync.groups.models import ProjectGroup
from projectsync.notifications.models import Announcement
from projectsync.notifications.models import Notification
from projectsync.notifications.models import NotificationType
from projectsync.notifications.schemas import AnnouncementCreateSchema
from projectsync.notifications.schemas import AnnouncementSchema
from projectsync.notifications.schemas import NotificationSchema
from projectsync.notifications.schemas import UnreadCountSchema
from projectsync.notifications.services import notify_many
from projectsync.users.models import User

logger = logging.getLogger(__name__)


def announcement_to_schema(announcement: Announcement, user) -> AnnouncementSchema:
    return AnnouncementSchema(
        id=announcement.id,
        title=announcement.title,
        content=announcement.content,
        author_id=announcement.author_id,
        author_name=announcement.author.get_full_name(),
        author_role=announcement.author_role,
        target_roles=[g.name for g in announcement.target_roles.all()],
        target_group_ids=[g.id for g in announcement.target_groups.all()],
        priority=announcement.priority,
        published_at=announcement.published_at,
        expires_at=announcement.expires_at,
        is_read=announcement.read_by.filter(pk=user.pk).exists(),
    )


@api_controller("/announcements", tags=["Announcements"], permissions=[IsAuthenticated])
class AnnouncementController(BaseAPI):
    """Announcements addressed to roles or project groups."""

    @http_get(
        "/",
        response={200: list[AnnouncementSchema]},
        url_name="announcements_list",
    )
    def list_announcements(self, request: HttpRequest, unread_only: bool = False):
        """Active announcements visible to the caller."""
        announcements = (
            Announcement.objects.visible_to(request.user)
            .active()
            .select_related("author")
            .prefetch_related("target_roles", "target_groups")
        )
        if unread_only:
            announcements = announcements.exclude(read_by=request.user)
        return 200, [announcement_to_schema(a, request.user) for a in announcements]

    @http_post(
        "/",
        response={201: AnnouncementSchema, 400: ErrorSchema, 403: ErrorSchema},
        url_name="announcements_create",
    )
    def create_announcement(self, request: HttpRequest, data: AnnouncementCreateSchema):
        """
        Publish an announcement.

        The PMO and administrators may address any role or group;
        supervisors may address only the groups they supervise.
        """
        user = request.user
        can_target_roles = is_pmo_or_admin(user)

        if not can_target_roles and not user_has_role(user, Role.SUPERVISOR):
            return PermissionDeniedError("Only the PMO and supervisors can post announcements.").to_response()

        if data.target_roles and not can_target_roles:
            return PermissionDeniedError("Supervisors can only address their own groups.").to_response()

        if not data.target_roles and not data.target_group_ids:
            return ValidationError("Choose at least one target role or group.").to_response()

        groups = list(ProjectGroup.objects.filter(id__in=data.target_group_ids))
        if len(groups) != len(set(data.target_group_ids)):
            return ValidationError("Unknown target group.").to_response()
        if not can_target_roles and any(g.supervisor_id != user.id for g in groups):
            return PermissionDeniedError("Supervisors can only address their own groups.").to_response()

        announcement = Announcement.objects.create(
            title=data.title,
            content=data.content,
            author=user,
            author_role=get_user_role(user) or "",
            priority=data.priority,
            expires_at=data.expires_at,
        )
        if data.target_roles:
            role_groups = [Group.objects.get_or_create(name=role.value)[0] for role in data.target_roles]
            announcement.target_roles.set(role_groups)
        announcement.target_groups.set(groups)

        recipients = [m for g in groups for m in g.members.all()]
        if data.target_roles:
            recipients += User.objects.filter(groups__in=role_groups, is_active=True).distinct()
        notify_many(
            recipients,
            NotificationType.ANNOUNCEMENT,
            announcement.title,
            announcement.content[:200],
            link="/announcements",
        )

        logger.info("ANNOUNCEMENT: '%s' posted by %s", announcement.title, user.email)
        return 201, announcement_to_schema(announcement, user)

    @http_post(
        "/{announcement_id}/read",
        response={200: SuccessSchema, 404: ErrorSchema},
        url_name="announcements_mark_read",
    )
    def mark_read(self, request: HttpRequest, announcement_id: UUID):
        announcement = get_object_or_404(
            Announcement.objects.visible_to(request.user),
            id=announcement_id,
        )
        announcement.read_by.add(request.user)
        return 200, SuccessSchema(success=True)

    @http_delete(
        "/{announcement_id}",
        response={200: SuccessSchema, 403: ErrorSchema, 404: ErrorSchema},
        url_name="announcements_delete",
    )
    def delete_announcement(self, request: HttpRequest, announcement_id: UUID):
        """Delete an announcement. Author or administrator only."""
        announcement = get_object_or_404(Announcement, id=announcement_id)
        if announcement.author_id != request.user.id and not is_admin(request.user):
            return PermissionDeniedError("Only the author can delete this announcement.").to_response()

        announcement.delete()
        return 200, SuccessSchema(success=True, message="Announcement deleted.")


@api_controller("/notifications", tags=["Notifications"], permissions=[IsAuthenticated])
class NotificationController(BaseAPI):
    """The caller's own notifications."""

    @http_get(
        "/",
        response={200: list[NotificationSchema]},
        url_name="notifications_list",
    )
    def list_notifications(self, request: HttpRequest, unread_only: bool = False, limit: int = 50):
        notifications = Notification.objects.filter(user=request.user)
        if unread_only:
            notifications = notifications.filter(is_read=False)
        limit = max(1, min(limit, 200))
        return 200, [NotificationSchema.from_orm(n) for n in notifications[:limit]]

    @http_get(
        "/unread-count",
        response={200: UnreadCountSchema},
        url_name="notifications_unread_count",
    )
    def unread_count(self, request: HttpRequest):
        count = Notification.objects.filter(user=request.user, is_read=False).count()
        return 200, UnreadCountSchema(unread=count)

    @http_post(
        "/read-all",
        response={200: SuccessSchema},
        url_name="notifications_mark_all_read",
    )
    def mark_all_read(self, request: HttpRequest):
        updated = Notification.objects.filter(user=request.user, is_read=False).update(is_read=True)
        return 200, SuccessSchema(success=True, message=f"{updated} notifications marked as read.")

    @http_post(
        "/{notification_id}/read",
        response={200: NotificationSchema, 404: ErrorSchema},
        url_name="notifications_mark_read",
    )
    def mark_read(self, request: HttpRequest, notification_id: UUID):
        notification = get_object_or_404(Notification, id=notification_id, user=request.user)
        if not notification.is_read:
            notification.is_read = True
            notification.save(update_fields=["is_read", "modified"])
        return 200, NotificationSchema.from_orm(notification)
