from django.apps import AppConfig


class ResultsConfig(AppConfig):
    name = "projectsync.results"
    verbose_name = "Results"
