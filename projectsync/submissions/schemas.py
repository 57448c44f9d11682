from datetime import datetime
from decimal import Decimal
from uuid import UUID

from ninja import Field
from ninja import Schema
from pydantic import field_validator

from projectsync.academics.models import MilestoneType
from projectsync.core.schemas import UserMinimalSchema


class SubmissionSchema(Schema):
    id: UUID
    project_id: UUID
    group_id: UUID
    milestone_type: str
    title: str
    description: str
    file_url: str
    file_name: str
    file_size: int
    version: int
    status: str
    submitted_by: UserMinimalSchema | None
    reviewed_by: UserMinimalSchema | None
    reviewed_at: datetime | None
    feedback: str
    similarity_score: Decimal | None
    created: datetime


class SubmissionCreateSchema(Schema):
    """Form fields sent alongside the uploaded file."""

    project_id: UUID
    milestone_type: MilestoneType
    title: str
    description: str = ""

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Title is required.")
        return v.strip()


class SubmissionReviewSchema(Schema):
    approve: bool
    feedback: str = ""
    similarity_score: Decimal | None = Field(None, ge=0, le=100)
