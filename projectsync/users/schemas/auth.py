"""
Authentication schemas for login, signup and password management.
"""

from typing import TYPE_CHECKING
from uuid import UUID

from ninja import Schema
from pydantic import EmailStr
from pydantic import field_validator

if TYPE_CHECKING:
    from projectsync.users.models import User


class LoginSchema(Schema):
    """Login request schema."""

    email: EmailStr
    password: str


class SignupSchema(Schema):
    """Self-registration request. Always creates a student account."""

    email: EmailStr
    first_name: str
    last_name: str = ""
    password: str
    password_confirm: str
    department: str = ""
    enrollment_number: str = ""
    semester: int | None = None

    @field_validator("first_name")
    @classmethod
    def first_name_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            msg = "First name is required."
            raise ValueError(msg)
        return v.strip()

    @field_validator("password_confirm")
    @classmethod
    def passwords_match(cls, v: str, info) -> str:
        if "password" in info.data and v != info.data["password"]:
            msg = "Passwords do not match."
            raise ValueError(msg)
        return v


class EmailVerifySchema(Schema):
    key: str


class PasswordResetRequestSchema(Schema):
    email: EmailStr


class PasswordResetConfirmSchema(Schema):
    uid: str
    token: str
    new_password: str
    new_password_confirm: str

    @field_validator("new_password_confirm")
    @classmethod
    def passwords_match(cls, v: str, info) -> str:
        if "new_password" in info.data and v != info.data["new_password"]:
            msg = "Passwords do not match."
            raise ValueError(msg)
        return v


class PasswordChangeSchema(Schema):
    """Password change schema for authenticated users."""

    current_password: str
    new_password: str
    new_password_confirm: str

    @field_validator("new_password_confirm")
    @classmethod
    def passwords_match(cls, v: str, info) -> str:
        if "new_password" in info.data and v != info.data["new_password"]:
            msg = "Passwords do not match."
            raise ValueError(msg)
        return v


class UserSchema(Schema):
    """Role-tagged profile of the current user."""

    id: UUID
    email: str
    first_name: str
    last_name: str
    full_name: str
    role: str | None
    department: str
    enrollment_number: str
    semester: int | None
    designation: str
    expertise: list[str]
    is_active: bool
    is_superuser: bool

    @staticmethod
    def from_user(user: "User") -> "UserSchema":
        """Create schema from User model."""
        return UserSchema(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            full_name=user.get_full_name(),
            role=user.role,
            department=user.department,
            enrollment_number=user.enrollment_number,
            semester=user.semester,
            designation=user.designation,
            expertise=list(user.expertise or []),
            is_active=user.is_active,
            is_superuser=user.is_superuser,
        )


class LoginResponseSchema(Schema):
    success: bool
    user: UserSchema | None = None
    csrf_token: str | None = None


class SignupResponseSchema(Schema):
    success: bool
    message: str
    user: UserSchema


class MessageSchema(Schema):
    """Simple message response."""

    success: bool
    message: str | None = None


class CSRFTokenSchema(Schema):
    csrf_token: str
