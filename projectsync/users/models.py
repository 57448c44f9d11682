import uuid
from typing import ClassVar

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.contrib.auth.models import Group
from django.db.models import CharField
from django.db.models import EmailField
from django.db.models import JSONField
from django.db.models import PositiveSmallIntegerField
from django.db.models import UUIDField
from django.utils.translation import gettext_lazy as _

from projectsync.core.roles import Role
from projectsync.core.roles import get_user_role

from .managers import UserManager


class User(AbstractUser):
    """
    Custom user model for ProjectSync.

    Uses email as the unique identifier instead of username and UUID as
    primary key. The role is carried by the auth group named after it.
    """

    id = UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    first_name = CharField(_("first name"), max_length=150)
    last_name = CharField(_("last name"), max_length=150, blank=True)
    email = EmailField(_("email address"), unique=True)
    username = None  # type: ignore[assignment]

    department = CharField(_("department"), max_length=150, blank=True)

    # Students
    enrollment_number = CharField(_("enrollment number"), max_length=50, blank=True)
    semester = PositiveSmallIntegerField(_("semester"), null=True, blank=True)

    # Supervisors and external panel
    designation = CharField(_("designation"), max_length=150, blank=True)
    expertise = JSONField(_("expertise"), default=list, blank=True)
    max_groups = PositiveSmallIntegerField(
        _("max supervised groups"),
        null=True,
        blank=True,
        help_text=_("Leave empty to use the default capacity."),
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["first_name"]

    objects: ClassVar[UserManager] = UserManager()

    class Meta:
        verbose_name = _("user")
        verbose_name_plural = _("users")

    def __str__(self) -> str:
        return self.email

    def get_full_name(self) -> str:
        """Return first_name + last_name."""
        full_name = f"{self.first_name} {self.last_name}".strip()
        return full_name or self.email

    @property
    def role(self) -> str | None:
        return get_user_role(self)

    @property
    def supervision_capacity(self) -> int:
        if self.max_groups is not None:
            return self.max_groups
        return settings.SUPERVISOR_DEFAULT_MAX_GROUPS

    def set_role(self, role: Role | str) -> None:
        """Replace the user's role groups with ``role``."""
        role = Role(role)
        group, _ = Group.objects.get_or_create(name=role.value)
        role_groups = Group.objects.filter(name__in=Role.values())
        self.groups.remove(*role_groups)
        self.groups.add(group)
