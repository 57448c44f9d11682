from datetime import datetime
from decimal import Decimal
from uuid import UUID

from ninja import Schema

from projectsync.core.schemas import UserMinimalSchema


class ProjectResultSchema(Schema):
    id: UUID
    project_id: UUID
    project_title: str
    group_id: UUID
    group_name: str
    supervisor: UserMinimalSchema | None
    supervisor_score: Decimal
    external_score: Decimal
    milestone_score: Decimal
    total: Decimal
    grade: str
    compiled_at: datetime


class SessionRequestSchema(Schema):
    """Target session; the active session when omitted."""

    session_id: UUID | None = None


class PublicationSchema(Schema):
    session_id: UUID
    is_published: bool
    published_at: datetime | None
    published_by: UserMinimalSchema | None
    compiled_projects: int
