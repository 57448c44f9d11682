"""
Project and milestone schemas for API requests and responses.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from ninja import Field
from ninja import Schema
from pydantic import field_validator

from projectsync.core.schemas import UserMinimalSchema


class ProjectListSchema(Schema):
    id: UUID
    title: str
    domain: str
    group_id: UUID
    group_name: str
    supervisor: UserMinimalSchema | None
    status: str
    submitted_at: datetime | None
    created: datetime


class ProjectDetailSchema(ProjectListSchema):
    abstract: str
    members: list[UserMinimalSchema]
    approved_at: datetime | None
    rejected_at: datetime | None
    rejection_reason: str
    reviewed_by: UserMinimalSchema | None
    similarity_score: Decimal | None
    modified: datetime


class ProjectCreateSchema(Schema):
    title: str
    abstract: str
    domain: str = ""

    @field_validator("title", "abstract")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("This field is required.")
        return v.strip()


class ProjectUpdateSchema(Schema):
    title: str | None = None
    abstract: str | None = None
    domain: str | None = None


class ProjectReviewSchema(Schema):
    approve: bool
    reason: str = ""
    similarity_score: Decimal | None = Field(None, ge=0, le=100)


class MilestoneSchema(Schema):
    id: UUID
    title: str
    description: str
    milestone_type: str
    due_date: datetime
    completed_at: datetime | None
    status: str


class MilestoneListSchema(Schema):
    project_id: UUID
    progress: int
    milestones: list[MilestoneSchema]
