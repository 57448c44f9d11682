"""
Group schemas for API requests and responses.
"""

from datetime import datetime
from uuid import UUID

from ninja import Schema
from pydantic import EmailStr
from pydantic import field_validator

from projectsync.core.schemas import UserMinimalSchema


class GroupListSchema(Schema):
    id: UUID
    name: str
    leader: UserMinimalSchema
    supervisor: UserMinimalSchema | None
    session_id: UUID
    member_count: int
    max_members: int
    status: str
    created: datetime


class GroupDetailSchema(GroupListSchema):
    """Detailed group schema with members and project summary."""

    members: list[UserMinimalSchema]
    project_id: UUID | None
    project_title: str | None
    project_status: str | None


class GroupCreateSchema(Schema):
    name: str

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Group name is required.")
        if len(v.strip()) < 3:
            raise ValueError("Group name must be at least 3 characters long.")
        return v.strip()


class InvitationSchema(Schema):
    id: UUID
    group_id: UUID
    group_name: str
    invitee: UserMinimalSchema
    invited_by: UserMinimalSchema
    status: str
    message: str
    created: datetime
    responded_at: datetime | None


class InvitationCreateSchema(Schema):
    invitee_email: EmailStr
    message: str = ""


class InvitationResponseSchema(Schema):
    accept: bool


class TransferLeadershipSchema(Schema):
    new_leader_id: UUID


class AvailableStudentSchema(Schema):
    """Student of the active session without a group."""

    id: UUID
    email: str
    first_name: str
    last_name: str
    enrollment_number: str
    pending_invitations: int
