from django.apps import AppConfig


class AuditConfig(AppConfig):
    name = "projectsync.audit"
    verbose_name = "Audit"
