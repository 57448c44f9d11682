"""
Role definitions for ProjectSync.

Defines the 6 roles used across the portal:
- Student: forms a group, proposes the project, uploads milestone documents
- Supervisor: accepts supervision requests, reviews documents, evaluates groups
- PMO: program management office, approves projects and assigns supervisors
- External panel: external examiners who evaluate final projects
- Exam cell: compiles and publishes results
- Admin: system administrators with full access
"""

from enum import Enum


class Role(str, Enum):
    """
    Enum of available roles in ProjectSync.

    Values match Django Group names exactly.
    """

    STUDENT = "student"
    SUPERVISOR = "supervisor"
    PMO = "pmo"
    EXTERNAL_PANEL = "external_panel"
    EXAM_CELL = "exam_cell"
    ADMIN = "admin"

    @classmethod
    def choices(cls) -> list[tuple[str, str]]:
        """Return choices for Django form fields."""
        return [(role.value, ROLE_LABELS[role]) for role in cls]

    @classmethod
    def values(cls) -> list[str]:
        """Return all role values."""
        return [role.value for role in cls]


ROLE_LABELS = {
    Role.STUDENT: "Student",
    Role.SUPERVISOR: "Supervisor",
    Role.PMO: "PMO",
    Role.EXTERNAL_PANEL: "External Panel",
    Role.EXAM_CELL: "Exam Cell",
    Role.ADMIN: "Admin",
}

# Role descriptions for documentation and admin interfaces
ROLE_DESCRIPTIONS = {
    Role.STUDENT: "Student - Forms a group, proposes a project, submits documents",
    Role.SUPERVISOR: "Supervisor - Guides groups, reviews documents, evaluates",
    Role.PMO: "PMO - Approves projects, assigns supervisors, publishes announcements",
    Role.EXTERNAL_PANEL: "External Panel - Evaluates final project defences",
    Role.EXAM_CELL: "Exam Cell - Compiles and publishes results",
    Role.ADMIN: "Admin - Full system administration",
}

# Highest privilege first; used to pick a single role for display
ROLE_PRECEDENCE = [
    Role.ADMIN,
    Role.PMO,
    Role.EXAM_CELL,
    Role.SUPERVISOR,
    Role.EXTERNAL_PANEL,
    Role.STUDENT,
]

STAFF_ROLES = [role for role in Role if role is not Role.STUDENT]


def get_user_roles(user) -> list[str]:
    """
    Get the list of role names for a user.

    Args:
        user: Django User instance

    Returns:
        List of role names the user belongs to
    """
    if not user or not user.is_authenticated:
        return []

    return list(user.groups.values_list("name", flat=True))


def get_user_role(user) -> str | None:
    """
    Get the primary role of a user.

    Superusers without an explicit role are reported as admin.
    """
    if not user or not user.is_authenticated:
        return None

    names = set(get_user_roles(user))
    for role in ROLE_PRECEDENCE:
        if role.value in names:
            return role.value
    if user.is_superuser:
        return Role.ADMIN.value
    return None


def user_has_role(user, role: Role | str) -> bool:
    """
    Check if a user has a specific role.

    Args:
        user: Django User instance
        role: Role enum value or role name string

    Returns:
        True if user has the role
    """
    if not user or not user.is_authenticated:
        return False

    role_name = role.value if isinstance(role, Role) else role
    return user.groups.filter(name=role_name).exists()


def user_has_any_role(user, roles: list[Role | str]) -> bool:
    """
    Check if a user has any of the specified roles.

    Args:
        user: Django User instance
        roles: List of Role enum values or role name strings

    Returns:
        True if user has at least one of the roles
    """
    if not user or not user.is_authenticated:
        return False

    role_names = [r.value if isinstance(r, Role) else r for r in roles]
    return user.groups.filter(name__in=role_names).exists()


# ============================================================================
# Convenience functions for common permission checks
# ============================================================================


def is_admin(user) -> bool:
    """
    Check if user has admin privileges.

    Returns True for superusers or users with the admin role.
    """
    if not user or not user.is_authenticated:
        return False
    if user.is_superuser:
        return True
    return user_has_role(user, Role.ADMIN)


def is_pmo_or_admin(user) -> bool:
    """Superusers, PMO and admin users."""
    if not user or not user.is_authenticated:
        return False
    if user.is_superuser:
        return True
    return user_has_any_role(user, [Role.PMO, Role.ADMIN])


def is_staff_role(user) -> bool:
    """
    Check if user holds any non-student role.

    Staff accounts can never be downgraded to student.
    """
    if not user or not user.is_authenticated:
        return False
    if user.is_superuser:
        return True
    return user_has_any_role(user, STAFF_ROLES)
