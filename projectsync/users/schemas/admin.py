"""
User and role management schemas.
"""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from ninja import Schema
from pydantic import EmailStr
from pydantic import field_validator

from projectsync.core.roles import Role

if TYPE_CHECKING:
    from projectsync.users.models import User


class UserCreateSchema(Schema):
    """Account created by the PMO or an administrator."""

    email: EmailStr
    first_name: str
    last_name: str = ""
    role: Role = Role.STUDENT
    password: str | None = None
    department: str = ""
    enrollment_number: str = ""
    semester: int | None = None
    designation: str = ""
    expertise: list[str] = []
    max_groups: int | None = None

    @field_validator("first_name")
    @classmethod
    def first_name_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            msg = "First name is required."
            raise ValueError(msg)
        return v.strip()

    @field_validator("semester")
    @classmethod
    def semester_in_range(cls, v: int | None) -> int | None:
        if v is not None and not 1 <= v <= 12:
            msg = "Semester must be between 1 and 12."
            raise ValueError(msg)
        return v


class UserUpdateSchema(Schema):
    first_name: str | None = None
    last_name: str | None = None
    department: str | None = None
    enrollment_number: str | None = None
    semester: int | None = None
    designation: str | None = None
    expertise: list[str] | None = None
    max_groups: int | None = None
    is_active: bool | None = None


class UserListSchema(Schema):
    """User row for management screens."""

    id: UUID
    email: str
    first_name: str
    last_name: str
    role: str | None
    department: str
    enrollment_number: str
    semester: int | None
    designation: str
    expertise: list[str]
    max_groups: int | None
    is_active: bool
    date_joined: datetime
    last_login: datetime | None

    @staticmethod
    def from_user(user: "User") -> "UserListSchema":
        return UserListSchema(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role,
            department=user.department,
            enrollment_number=user.enrollment_number,
            semester=user.semester,
            designation=user.designation,
            expertise=list(user.expertise or []),
            max_groups=user.max_groups,
            is_active=user.is_active,
            date_joined=user.date_joined,
            last_login=user.last_login,
        )


class RoleSchema(Schema):
    name: str
    label: str
    description: str
    user_count: int


class SetUserRoleSchema(Schema):
    role: Role


class SupervisorSchema(Schema):
    """Supervisor with current load, used when requesting supervision."""

    id: UUID
    email: str
    full_name: str
    department: str
    designation: str
    expertise: list[str]
    current_groups: int
    max_groups: int
    has_capacity: bool
