import logging
from datetime import timedelta

from celery import shared_task
from django.conf import settings
from django.utils import timezone

from projectsync.academics.models import SessionDeadline
from projectsync.core.roles import Role
from projectsync.notifications.models import NotificationType
from projectsync.notifications.services import notify_many
from projectsync.users.models import User

logger = logging.getLogger(__name__)


@shared_task
def send_deadline_reminders() -> int:
    """
    Remind students once of each active-session deadline due within
    DEADLINE_REMINDER_DAYS. Returns the number of notifications sent.
    """
    now = timezone.now()
    horizon = now + timedelta(days=settings.DEADLINE_REMINDER_DAYS)
    deadlines = list(
        SessionDeadline.objects.filter(
            session__is_active=True,
            due_date__gt=now,
            due_date__lte=horizon,
            reminder_sent_at__isnull=True,
        )
    )
    if not deadlines:
        return 0

    students = list(User.objects.filter(groups__name=Role.STUDENT.value, is_active=True))
    sent = 0
    for deadline in deadlines:
        days_left = (deadline.due_date - now).days
        sent += notify_many(
            students,
            NotificationType.DEADLINE_REMINDER,
            f"Upcoming deadline: {deadline.name}",
            f"Due on {deadline.due_date:%Y-%m-%d %H:%M} ({days_left} day(s) left).",
            link="/deadlines",
        )
        deadline.reminder_sent_at = now
        deadline.save(update_fields=["reminder_sent_at", "modified"])

    logger.info("NOTIFICATION: %d deadline reminders sent", sent)
    return sent
