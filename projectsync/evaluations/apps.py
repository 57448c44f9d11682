from django.apps import AppConfig


class EvaluationsConfig(AppConfig):
    name = "projectsync.evaluations"
    verbose_name = "Evaluations"
