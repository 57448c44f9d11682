"""
Permission classes for API controllers.

Role permissions read the user's auth groups through ``core.roles``.
"""

from typing import Any

from django.http import HttpRequest
from ninja_extra import permissions

from projectsync.core.roles import Role
from projectsync.core.roles import is_admin
from projectsync.core.roles import is_pmo_or_admin
from projectsync.core.roles import user_has_any_role


class IsAuthenticated(permissions.BasePermission):
    """
    Permission class that requires authentication.

    Checks if the user is authenticated before allowing access.
    """

    message = "Authentication required."

    def has_permission(self, request: HttpRequest, controller: Any) -> bool:
        """Check if the user is authenticated."""
        return bool(request.user and request.user.is_authenticated)


class AllowAny(permissions.BasePermission):
    """
    Permission class that allows any access.

    Used for public endpoints that don't require authentication.
    """

    def has_permission(self, request: HttpRequest, controller: Any) -> bool:
        """Always return True."""
        return True


class HasRole(permissions.BasePermission):
    """
    Base class for role permissions.

    Subclasses list the accepted roles. Superusers always pass.
    """

    roles: list[Role] = []
    message = "Your role does not allow this action."

    def has_permission(self, request: HttpRequest, controller: Any) -> bool:
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if user.is_superuser:
            return True
        return user_has_any_role(user, self.roles)


class IsAdmin(permissions.BasePermission):
    """Superusers and users with the admin role."""

    message = "Access restricted to administrators."

    def has_permission(self, request: HttpRequest, controller: Any) -> bool:
        return is_admin(request.user)


class IsPMOOrAdmin(permissions.BasePermission):
    message = "Access restricted to the PMO and administrators."

    def has_permission(self, request: HttpRequest, controller: Any) -> bool:
        return is_pmo_or_admin(request.user)
