"""
Tests for notification delivery.
"""

import pytest

from projectsync.notifications.models import Notification
from projectsync.notifications.models import NotificationType
from projectsync.notifications.services import notify
from projectsync.notifications.services import notify_many


@pytest.mark.django_db
class TestNotify:
    def test_creates_unread_notification(self, student):
        notification = notify(student, NotificationType.GENERAL, "Welcome", "Hello there", link="/dashboard")

        assert notification.user == student
        assert not notification.is_read
        assert notification.link == "/dashboard"

    def test_ignores_missing_user(self):
        assert notify(None, NotificationType.GENERAL, "Nobody") is None
        assert not Notification.objects.exists()

    def test_notify_many_deduplicates(self, student, student2):
        created = notify_many([student, student2, student, None], NotificationType.ANNOUNCEMENT, "Lab closed")

        assert created == 2
        assert Notification.objects.filter(user=student).count() == 1

    def test_notify_many_without_recipients(self):
        assert notify_many([], NotificationType.GENERAL, "Empty") == 0
