"""
Shared schemas for the API.
"""

from uuid import UUID

from ninja import Schema


class SuccessSchema(Schema):
    """Schema for success responses."""

    success: bool
    message: str | None = None


class UserMinimalSchema(Schema):
    """Minimal user information for display."""

    id: UUID
    email: str
    first_name: str
    last_name: str

    @classmethod
    def from_user(cls, user) -> "UserMinimalSchema":
        """Create from User model instance."""
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name or "",
            last_name=user.last_name or "",
        )

    @classmethod
    def from_optional(cls, user) -> "UserMinimalSchema | None":
        return cls.from_user(user) if user is not None else None
