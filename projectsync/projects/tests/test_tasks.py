from datetime import timedelta

import pytest
from django.utils import timezone

from projectsync.projects.models import Milestone
from projectsync.projects.models import MilestoneStatus
from projectsync.projects.tasks import refresh_milestone_statuses


@pytest.mark.django_db
class TestRefreshMilestoneStatuses:
    def test_marks_overdue_milestones(self, approved_project):
        overdue = Milestone.objects.create(
            project=approved_project,
            title="Proposal",
            milestone_type="proposal",
            due_date=timezone.now() - timedelta(hours=2),
        )
        Milestone.objects.create(
            project=approved_project,
            title="Final",
            milestone_type="final",
            due_date=timezone.now() + timedelta(days=60),
        )

        assert refresh_milestone_statuses() == 1

        overdue.refresh_from_db()
        assert overdue.status == MilestoneStatus.OVERDUE
