"""Celery configuration for the ProjectSync project."""

import os

from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.local")

app = Celery("projectsync")

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
# - namespace='CELERY' means all celery-related configuration keys
#   should have a `CELERY_` prefix.
app.config_from_object("django.conf:settings", namespace="CELERY")

# Load task modules from all registered Django apps.
app.autodiscover_tasks()

app.conf.beat_schedule = {
    "refresh-milestone-statuses": {
        "task": "projectsync.projects.tasks.refresh_milestone_statuses",
        "schedule": crontab(minute=15, hour="*/1"),
    },
    "send-deadline-reminders": {
        "task": "projectsync.academics.tasks.send_deadline_reminders",
        "schedule": crontab(minute=0, hour=8),  # Every morning
    },
}


@app.task(bind=True, ignore_result=True)
def debug_task(self):
    """Debug task for testing Celery configuration."""
    print(f"Request: {self.request!r}")
