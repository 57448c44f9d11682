"""
User and role management API controller.
"""

import logging
from uuid import UUID

from allauth.account.internal.flows.email_verification import send_verification_email_for_user
from allauth.account.models import EmailAddress
from django.contrib.auth.models import Group
from django.db.models import Q
from django.http import HttpRequest
from django.shortcuts import get_object_or_404
from ninja_extra import api_controller
from ninja_extra import http_get
from ninja_extra import http_post
from ninja_extra import http_put

from projectsync.audit.models import AuditAction
from projectsync.audit.services import log_action
from projectsync.core.api import BaseAPI
from projectsync.core.api import IsAdmin
from projectsync.core.api import IsAuthenticated
from projectsync.core.api import IsPMOOrAdmin
from projectsync.core.exceptions import AlreadyExistsError
from projectsync.core.exceptions import APIException
from projectsync.core.exceptions import ErrorSchema
from projectsync.core.exceptions import PermissionDeniedError
from projectsync.core.roles import ROLE_DESCRIPTIONS
from projectsync.core.roles import ROLE_LABELS
from projectsync.core.roles import Role
from projectsync.users import services
from projectsync.users.models import User
from projectsync.users.schemas import RoleSchema
from projectsync.users.schemas import SetUserRoleSchema
from projectsync.users.schemas import SupervisorSchema
from projectsync.users.schemas import UserCreateSchema
from projectsync.users.schemas import UserListSchema
from projectsync.users.schemas import UserUpdateSchema

logger = logging.getLogger(__name__)

PROFILE_FIELDS = [
    "first_name",
    "last_name",
    "department",
    "enrollment_number",
    "semester",
    "designation",
    "expertise",
    "max_groups",
]


@api_controller("/users", tags=["Users"], permissions=[IsPMOOrAdmin])
class UserAdminController(BaseAPI):
    """Account management for the PMO and administrators."""

    @http_get(
        "/",
        response={200: list[UserListSchema], 403: ErrorSchema},
        url_name="users_list",
    )
    def list_users(self, request: HttpRequest, role: str | None = None, search: str = ""):
        """List accounts, optionally filtered by role or a name/email search."""
        users = User.objects.prefetch_related("groups")
        if role:
            users = users.filter(groups__name=role)
        if search:
            users = users.filter(
                Q(email__icontains=search)
                | Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
                | Q(enrollment_number__icontains=search)
            )
        users = users.distinct().order_by("first_name", "last_name")
        return 200, [UserListSchema.from_user(user) for user in users]

    @http_get(
        "/roles",
        response={200: list[RoleSchema], 403: ErrorSchema},
        url_name="users_roles",
    )
    def list_roles(self, request: HttpRequest):
        counts = {
            group.name: group.user_set.count()
            for group in Group.objects.filter(name__in=Role.values())
        }
        return 200, [
            RoleSchema(
                name=role.value,
                label=ROLE_LABELS[role],
                description=ROLE_DESCRIPTIONS[role],
                user_count=counts.get(role.value, 0),
            )
            for role in Role
        ]

    @http_get(
        "/supervisors",
        response={200: list[SupervisorSchema]},
        permissions=[IsAuthenticated],
        url_name="users_supervisors",
    )
    def list_supervisors(self, request: HttpRequest):
        """Supervisors with their current load, for students choosing one."""
        return 200, [
            SupervisorSchema(
                id=user.id,
                email=user.email,
                full_name=user.get_full_name(),
                department=user.department,
                designation=user.designation,
                expertise=list(user.expertise or []),
                current_groups=user.current_groups,
                max_groups=user.supervision_capacity,
                has_capacity=user.current_groups < user.supervision_capacity,
            )
            for user in services.supervisors_with_load()
        ]

    @http_post(
        "/",
        response={201: UserListSchema, 400: ErrorSchema, 403: ErrorSchema, 409: ErrorSchema},
        url_name="users_create",
    )
    def create_user(self, request: HttpRequest, data: UserCreateSchema):
        """
        Create an account.

        The PMO may create students, supervisors and external panel members;
        PMO, exam cell and admin accounts need an administrator.
        """
        if User.objects.filter(email__iexact=data.email).exists():
            return AlreadyExistsError("An account with this email already exists.").to_response()

        try:
            user = services.create_account(
                request.user,
                email=data.email,
                role=data.role,
                password=data.password,
                request=request,
                **data.model_dump(include=set(PROFILE_FIELDS)),
            )
        except APIException as exc:
            return exc.to_response()

        try:
            EmailAddress.objects.create(user=user, email=user.email, primary=True, verified=False)
            send_verification_email_for_user(request, user)
        except Exception:
            logger.exception("Failed to send welcome email to %s", user.email)

        return 201, UserListSchema.from_user(user)

    @http_get(
        "/{uuid:user_id}",
        response={200: UserListSchema, 403: ErrorSchema, 404: ErrorSchema},
        url_name="users_detail",
    )
    def get_user(self, request: HttpRequest, user_id: UUID):
        user = get_object_or_404(User.objects.prefetch_related("groups"), id=user_id)
        return 200, UserListSchema.from_user(user)

    @http_put(
        "/{uuid:user_id}",
        response={200: UserListSchema, 400: ErrorSchema, 403: ErrorSchema, 404: ErrorSchema},
        url_name="users_update",
    )
    def update_user(self, request: HttpRequest, user_id: UUID, data: UserUpdateSchema):
        """Update profile fields or (de)activate the account."""
        user = get_object_or_404(User, id=user_id)
        if not services.can_create_role(request.user, user.role or Role.STUDENT):
            return PermissionDeniedError("You cannot modify this account.").to_response()

        changes = data.model_dump(include=set(PROFILE_FIELDS), exclude_unset=True)
        if changes:
            for field, value in changes.items():
                setattr(user, field, value)
            user.save(update_fields=list(changes))
            log_action(
                request.user,
                AuditAction.USER_UPDATED,
                {"user_id": str(user.id), "fields": sorted(changes)},
                request=request,
            )

        if data.is_active is not None:
            try:
                services.set_active(request.user, user, data.is_active, request=request)
            except APIException as exc:
                return exc.to_response()

        return 200, UserListSchema.from_user(user)

    @http_post(
        "/{user_id}/role",
        response={200: UserListSchema, 400: ErrorSchema, 403: ErrorSchema, 404: ErrorSchema},
        permissions=[IsAdmin],
        url_name="users_set_role",
    )
    def set_user_role(self, request: HttpRequest, user_id: UUID, data: SetUserRoleSchema):
        """Change a user's role. Staff accounts cannot become students."""
        user = get_object_or_404(User, id=user_id)
        try:
            services.change_role(request.user, user, data.role, request=request)
        except APIException as exc:
            return exc.to_response()
        return 200, UserListSchema.from_user(user)
