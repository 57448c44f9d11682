"""
User schemas for API requests and responses.
"""

from projectsync.users.schemas.admin import RoleSchema
from projectsync.users.schemas.admin import SetUserRoleSchema
from projectsync.users.schemas.admin import SupervisorSchema
from projectsync.users.schemas.admin import UserCreateSchema
from projectsync.users.schemas.admin import UserListSchema
from projectsync.users.schemas.admin import UserUpdateSchema
from projectsync.users.schemas.auth import CSRFTokenSchema
from projectsync.users.schemas.auth import EmailVerifySchema
from projectsync.users.schemas.auth import LoginResponseSchema
from projectsync.users.schemas.auth import LoginSchema
from projectsync.users.schemas.auth import MessageSchema
from projectsync.users.schemas.auth import PasswordChangeSchema
from projectsync.users.schemas.auth import PasswordResetConfirmSchema
from projectsync.users.schemas.auth import PasswordResetRequestSchema
from projectsync.users.schemas.auth import SignupResponseSchema
from projectsync.users.schemas.auth import SignupSchema
from projectsync.users.schemas.auth import UserSchema

__all__ = [
    # Auth schemas
    "LoginSchema",
    "SignupSchema",
    "EmailVerifySchema",
    "PasswordResetRequestSchema",
    "PasswordResetConfirmSchema",
    "PasswordChangeSchema",
    "UserSchema",
    "LoginResponseSchema",
    "SignupResponseSchema",
    "MessageSchema",
    "CSRFTokenSchema",
    # Admin schemas
    "UserCreateSchema",
    "UserUpdateSchema",
    "UserListSchema",
    "RoleSchema",
    "SetUserRoleSchema",
    "SupervisorSchema",
]
