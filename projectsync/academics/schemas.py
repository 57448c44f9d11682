from datetime import date
from datetime import datetime
from uuid import UUID

from ninja import Schema
from pydantic import field_validator
from pydantic import model_validator

from projectsync.academics.models import DeadlineType
from projectsync.academics.models import TemplateCategory


class SessionSchema(Schema):
    id: UUID
    name: str
    start_date: date
    end_date: date
    is_active: bool
    created: datetime


class SessionCreateSchema(Schema):
    name: str
    start_date: date
    end_date: date

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            msg = "Session name is required."
            raise ValueError(msg)
        return v.strip()

    @model_validator(mode="after")
    def dates_ordered(self):
        if self.end_date <= self.start_date:
            msg = "The session must end after it starts."
            raise ValueError(msg)
        return self


class SessionUpdateSchema(Schema):
    name: str | None = None
    start_date: date | None = None
    end_date: date | None = None


class DeadlineSchema(Schema):
    id: UUID
    session_id: UUID
    name: str
    deadline_type: str
    description: str
    due_date: datetime
    is_past: bool


class DeadlineCreateSchema(Schema):
    name: str
    deadline_type: DeadlineType
    description: str = ""
    due_date: datetime


class TemplateSchema(Schema):
    id: UUID
    name: str
    description: str
    category: str
    file_url: str
    uploaded_by_id: UUID | None
    created: datetime


class TemplateCreateSchema(Schema):
    name: str
    description: str = ""
    category: TemplateCategory = TemplateCategory.GENERAL
