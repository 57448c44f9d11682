from django.apps import AppConfig


class DashboardsConfig(AppConfig):
    name = "projectsync.dashboards"
    verbose_name = "Dashboards"
