from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    name = "projectsync.notifications"
    verbose_name = "Notifications"
