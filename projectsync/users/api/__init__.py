"""
User API controllers.
"""

from projectsync.users.api.admin import UserAdminController
from projectsync.users.api.auth import AuthController

__all__ = ["AuthController", "UserAdminController"]
