import logging

from celery import shared_task

from projectsync.projects.models import Milestone
from projectsync.projects.models import MilestoneStatus

logger = logging.getLogger(__name__)


@shared_task
def refresh_milestone_statuses() -> int:
    """Recompute the status of every open milestone. Returns the number changed."""
    changed = 0
    milestones = Milestone.objects.exclude(status=MilestoneStatus.COMPLETED).select_related("project")
    for milestone in milestones.iterator():
        if milestone.refresh_status():
            changed += 1

    logger.info("MILESTONES: %d statuses refreshed", changed)
    return changed
