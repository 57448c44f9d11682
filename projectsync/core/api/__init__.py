from projectsync.core.api.base import BaseAPI
from projectsync.core.api.permissions import AllowAny
from projectsync.core.api.permissions import HasRole
from projectsync.core.api.permissions import IsAdmin
from projectsync.core.api.permissions import IsAuthenticated
from projectsync.core.api.permissions import IsPMOOrAdmin

__all__ = [
    "BaseAPI",
    "AllowAny",
    "HasRole",
    "IsAdmin",
    "IsAuthenticated",
    "IsPMOOrAdmin",
]
