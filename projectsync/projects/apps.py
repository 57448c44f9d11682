from django.apps import AppConfig


class ProjectsConfig(AppConfig):
    name = "projectsync.projects"
    verbose_name = "Projects"
