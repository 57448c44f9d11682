"""
Audit trail writes.

``log_action`` never raises: a failed audit write is logged and the calling
workflow carries on.
"""

import logging

from django.db import transaction

from projectsync.audit.models import AuditLog
from projectsync.core.roles import get_user_role

logger = logging.getLogger(__name__)


def get_client_ip(request) -> str | None:
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")


def log_action(actor, action: str, details: dict | None = None, request=None) -> AuditLog | None:
    """Record ``action`` performed by ``actor``."""
    try:
        with transaction.atomic():
            entry = AuditLog.objects.create(
                user=actor if actor is not None and actor.is_authenticated else None,
                user_email=getattr(actor, "email", "") or "",
                user_role=get_user_role(actor) or "",
                action=action,
                details=details or {},
                ip_address=get_client_ip(request) if request is not None else None,
            )
    except Exception:
        logger.exception("AUDIT: failed to record %s by %s", action, actor)
        return None

    logger.info("AUDIT: %s by %s %s", action, getattr(actor, "email", "system"), details or {})
    return entry
