from django.apps import AppConfig


class SubmissionsConfig(AppConfig):
    name = "projectsync.submissions"
    verbose_name = "Submissions"
