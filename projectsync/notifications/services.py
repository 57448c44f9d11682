"""
In-app notifications.

Every workflow reports to users through ``notify``. Delivery is best-effort:
a failure is logged and never undoes the action that triggered it.
"""

import logging
from collections.abc import Iterable

from django.db import transaction

from projectsync.notifications.models import Notification

logger = logging.getLogger(__name__)


def notify(
    user,
    notification_type: str,
    title: str,
    message: str = "",
    link: str = "",
) -> Notification | None:
    """Create one notification for ``user``."""
    if user is None:
        return None
    try:
        with transaction.atomic():
            notification = Notification.objects.create(
                user=user,
                notification_type=notification_type,
                title=title,
                message=message,
                link=link,
            )
    except Exception:
        logger.exception("NOTIFICATION: failed to notify %s (%s)", user, notification_type)
        return None

    logger.info("NOTIFICATION: %s -> %s: %s", notification_type, user.email, title)
    return notification


def notify_many(
    users: Iterable,
    notification_type: str,
    title: str,
    message: str = "",
    link: str = "",
) -> int:
    """Notify each distinct user once. Returns the number created."""
    recipients = {user.pk: user for user in users if user is not None}
    if not recipients:
        return 0
    try:
        with transaction.atomic():
            Notification.objects.bulk_create(
                [
                    Notification(
                        user=user,
                        notification_type=notification_type,
                        title=title,
                        message=message,
                        link=link,
                    )
                    for user in recipients.values()
                ]
            )
    except Exception:
        logger.exception("NOTIFICATION: failed to notify %d users (%s)", len(recipients), notification_type)
        return 0

    logger.info("NOTIFICATION: %s -> %d users: %s", notification_type, len(recipients), title)
    return len(recipients)
