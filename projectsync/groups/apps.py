from django.apps import AppConfig


class GroupsConfig(AppConfig):
    name = "projectsync.groups"
    label = "groups"
    verbose_name = "Project groups"
