"""
Account and role management rules shared by the auth and user controllers.
"""

import secrets
import string

from django.conf import settings
from django.db.models import Count
from django.db.models import Q

from projectsync.audit.models import AuditAction
from projectsync.audit.services import log_action
from projectsync.core.exceptions import BadRequestError
from projectsync.core.exceptions import PermissionDeniedError
from projectsync.core.exceptions import ValidationError
from projectsync.core.roles import Role
from projectsync.core.roles import is_admin
from projectsync.core.roles import is_pmo_or_admin
from projectsync.core.roles import is_staff_role
from projectsync.users.models import User

# Roles the PMO may hand out; everything else needs an administrator
PMO_CREATABLE_ROLES = {Role.STUDENT, Role.SUPERVISOR, Role.EXTERNAL_PANEL}


def generate_temp_password(length: int = 16) -> str:
    """Generate a secure temporary password."""
    alphabet = string.ascii_letters + string.digits + "!@#$%^&*"
    return "".join(secrets.choice(alphabet) for _ in range(length))


def email_domain_error(email: str, role: Role | str) -> str | None:
    """Return an error message when a student email is outside the institution."""
    domain = settings.STUDENT_EMAIL_DOMAIN
    if not domain or Role(role) is not Role.STUDENT:
        return None
    if not email.lower().endswith(f"@{domain.lower()}"):
        return f"Student accounts must use an @{domain} email address."
    return None


def can_create_role(actor, role: Role | str) -> bool:
    if is_admin(actor):
        return True
    return is_pmo_or_admin(actor) and Role(role) in PMO_CREATABLE_ROLES


def create_account(actor, *, email: str, role: Role | str, password: str | None = None, request=None, **fields) -> User:
    """
    Create an account on behalf of the PMO or an administrator.

    Raises:
        PermissionDeniedError: actor may not create accounts with this role
        ValidationError: student email outside the configured domain
    """
    role = Role(role)
    if not can_create_role(actor, role):
        raise PermissionDeniedError(f"You cannot create {role.value} accounts.")
    if error := email_domain_error(email, role):
        raise ValidationError(error)

    user = User.objects.create_user(
        email=email,
        password=password or generate_temp_password(),
        **fields,
    )
    user.set_role(role)
    if role is Role.ADMIN:
        user.is_staff = True
        user.save(update_fields=["is_staff"])

    log_action(
        actor,
        AuditAction.USER_CREATED,
        {"user_id": str(user.id), "email": user.email, "role": role.value},
        request=request,
    )
    return user


def change_role(actor, user: User, role: Role | str, request=None) -> User:
    """
    Move ``user`` to ``role``.

    Staff accounts can never be downgraded to student.
    """
    role = Role(role)
    if not is_admin(actor):
        raise PermissionDeniedError("Only administrators can change roles.")
    if role is Role.STUDENT and is_staff_role(user):
        raise BadRequestError("Cannot downgrade staff to student role.")

    previous = user.role
    if previous == role.value:
        return user

    user.set_role(role)
    user.is_staff = role is Role.ADMIN or user.is_superuser
    user.save(update_fields=["is_staff"])

    log_action(
        actor,
        AuditAction.ROLE_CHANGED,
        {"user_id": str(user.id), "email": user.email, "from": previous, "to": role.value},
        request=request,
    )
    return user


def set_active(actor, user: User, is_active: bool, request=None) -> User:
    if user.pk == actor.pk and not is_active:
        raise BadRequestError("You cannot deactivate your own account.")
    if user.is_active == is_active:
        return user

    user.is_active = is_active
    user.save(update_fields=["is_active"])
    log_action(
        actor,
        AuditAction.USER_ACTIVATED if is_active else AuditAction.USER_DEACTIVATED,
        {"user_id": str(user.id), "email": user.email},
        request=request,
    )
    return user


def supervisors_with_load():
    """Active supervisors annotated with their group count in the active session."""
    return (
        User.objects.filter(groups__name=Role.SUPERVISOR.value, is_active=True)
        .annotate(
            current_groups=Count(
                "supervised_groups",
                filter=Q(supervised_groups__session__is_active=True),
                distinct=True,
            ),
        )
        .order_by("first_name", "last_name")
    )
