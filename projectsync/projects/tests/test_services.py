"""
Tests for project review and milestone generation.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from projectsync.academics.models import SessionDeadline
from projectsync.audit.models import AuditAction
from projectsync.audit.models import AuditLog
from projectsync.core.exceptions import BadRequestError
from projectsync.core.exceptions import ValidationError
from projectsync.groups.models import GroupStatus
from projectsync.notifications.models import Notification
from projectsync.notifications.models import NotificationType
from projectsync.projects.models import ProjectStatus
from projectsync.projects.services import generate_milestones
from projectsync.projects.services import review_project


@pytest.fixture
def milestone_deadlines(active_session):
    now = timezone.now()
    for days, deadline_type in [(20, "proposal"), (60, "mid_term"), (120, "final")]:
        SessionDeadline.objects.create(
            session=active_session,
            name=f"{deadline_type} report",
            deadline_type=deadline_type,
            due_date=now + timedelta(days=days),
        )
    SessionDeadline.objects.create(
        session=active_session,
        name="Supervisor selection",
        deadline_type="supervisor_selection",
        due_date=now + timedelta(days=10),
    )


@pytest.fixture
def submitted_project(project):
    project.submit()
    project.save()
    return project


@pytest.mark.django_db
class TestGenerateMilestones:
    def test_one_milestone_per_milestone_deadline(self, project, milestone_deadlines):
        created = generate_milestones(project)

        assert len(created) == 3
        assert set(project.milestones.values_list("milestone_type", flat=True)) == {"proposal", "mid_term", "final"}

    def test_idempotent(self, project, milestone_deadlines):
        generate_milestones(project)

        assert generate_milestones(project) == []
        assert project.milestones.count() == 3


@pytest.mark.django_db
class TestReviewProject:
    def test_approval(self, submitted_project, pmo, supervisor, student, student2, milestone_deadlines):
        group = submitted_project.group
        group.supervisor = supervisor
        group.save()

        review_project(submitted_project, True, pmo, similarity_score=Decimal("12.50"))

        submitted_project.refresh_from_db()
        group.refresh_from_db()
        assert submitted_project.status == ProjectStatus.APPROVED
        assert submitted_project.supervisor == supervisor
        assert submitted_project.similarity_score == Decimal("12.50")
        assert group.status == GroupStatus.LOCKED
        assert submitted_project.milestones.count() == 3
        assert Notification.objects.filter(
            notification_type=NotificationType.PROJECT_APPROVED,
            user__in=[student, student2],
        ).count() == 2
        assert AuditLog.objects.filter(action=AuditAction.PROJECT_APPROVED, user=pmo).exists()

    def test_rejection(self, submitted_project, pmo, student):
        review_project(submitted_project, False, pmo, reason="Too similar to last year's project.")

        submitted_project.refresh_from_db()
        assert submitted_project.status == ProjectStatus.REJECTED
        assert submitted_project.group.status == GroupStatus.OPEN
        assert not submitted_project.milestones.exists()
        assert Notification.objects.filter(user=student, notification_type=NotificationType.PROJECT_REJECTED).exists()

    def test_approval_with_note_leaves_rejection_reason_empty(self, submitted_project, pmo, milestone_deadlines):
        review_project(submitted_project, True, pmo, reason="Well scoped, go ahead.")

        submitted_project.refresh_from_db()
        assert submitted_project.status == ProjectStatus.APPROVED
        assert submitted_project.rejection_reason == ""

    def test_rejection_requires_reason(self, submitted_project, pmo):
        with pytest.raises(ValidationError):
            review_project(submitted_project, False, pmo)

    def test_draft_cannot_be_reviewed(self, project, pmo):
        with pytest.raises(BadRequestError):
            review_project(project, True, pmo)

        assert not Notification.objects.exists()
