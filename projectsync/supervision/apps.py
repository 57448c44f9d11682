from django.apps import AppConfig


class SupervisionConfig(AppConfig):
    name = "projectsync.supervision"
    verbose_name = "Supervision"
