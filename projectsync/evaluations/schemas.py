from datetime import datetime
from uuid import UUID

from ninja import Field
from ninja import Schema

from projectsync.core.schemas import UserMinimalSchema


class EvaluationSchema(Schema):
    id: UUID
    project_id: UUID
    project_title: str
    group_id: UUID
    evaluator: UserMinimalSchema
    evaluator_role: str
    documentation: int
    presentation: int
    implementation: int
    innovation: int
    teamwork: int
    total_marks: int
    max_marks: int
    feedback: str
    status: str
    submitted_at: datetime | None
    locked_at: datetime | None


class EvaluationSubmitSchema(Schema):
    project_id: UUID
    documentation: int = Field(..., ge=0, le=20)
    presentation: int = Field(..., ge=0, le=20)
    implementation: int = Field(..., ge=0, le=20)
    innovation: int = Field(..., ge=0, le=20)
    teamwork: int = Field(..., ge=0, le=20)
    feedback: str = ""


class PendingEvaluationSchema(Schema):
    """A project the caller is expected to evaluate."""

    project_id: UUID
    project_title: str
    group_id: UUID
    group_name: str
    evaluator_role: str
    evaluation_id: UUID | None
    evaluation_status: str | None
