from datetime import datetime
from uuid import UUID

from ninja import Schema

from projectsync.core.schemas import UserMinimalSchema


class SupervisionRequestSchema(Schema):
    id: UUID
    group_id: UUID
    group_name: str
    supervisor: UserMinimalSchema
    requested_by: UserMinimalSchema | None
    message: str
    response_message: str
    status: str
    created: datetime
    responded_at: datetime | None


class SupervisionRequestCreateSchema(Schema):
    supervisor_id: UUID
    message: str = ""


class SupervisionRespondSchema(Schema):
    accept: bool
    response_message: str = ""


class SupervisorAssignSchema(Schema):
    group_id: UUID
    supervisor_id: UUID
