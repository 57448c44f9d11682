from datetime import datetime
from uuid import UUID

from ninja import Schema
from pydantic import field_validator

from projectsync.core.roles import Role
from projectsync.notifications.models import AnnouncementPriority


class NotificationSchema(Schema):
    id: UUID
    notification_type: str
    title: str
    message: str
    link: str
    is_read: bool
    created: datetime


class UnreadCountSchema(Schema):
    unread: int


class AnnouncementSchema(Schema):
    id: UUID
    title: str
    content: str
    author_id: UUID
    author_name: str
    author_role: str
    target_roles: list[str]
    target_group_ids: list[UUID]
    priority: str
    published_at: datetime
    expires_at: datetime | None
    is_read: bool


class AnnouncementCreateSchema(Schema):
    title: str
    content: str
    target_roles: list[Role] = []
    target_group_ids: list[UUID] = []
    priority: AnnouncementPriority = AnnouncementPriority.MEDIUM
    expires_at: datetime | None = None

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            msg = "This field is required."
            raise ValueError(msg)
        return v.strip()
