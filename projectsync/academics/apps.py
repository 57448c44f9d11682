from django.apps import AppConfig


class AcademicsConfig(AppConfig):
    name = "projectsync.academics"
    verbose_name = "Academics"
