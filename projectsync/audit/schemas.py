from datetime import datetime
from uuid import UUID

from ninja import Schema


class AuditLogSchema(Schema):
    id: UUID
    user_id: UUID | None
    user_email: str
    user_role: str
    action: str
    details: dict
    ip_address: str | None
    created: datetime
