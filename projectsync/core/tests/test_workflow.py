"""
Tests for reviewer decisions on FSM models.
"""

import pytest

from projectsync.core.exceptions import BadRequestError
from projectsync.core.exceptions import ValidationError
from projectsync.core.workflow import review
from projectsync.projects.models import ProjectStatus
from projectsync.supervision.models import RequestStatus
from projectsync.supervision.models import SupervisionRequest


@pytest.mark.django_db
class TestReview:
    def test_approve_records_reviewer(self, project, pmo):
        project.submit()
        project.save()

        review(project, True, pmo)

        project.refresh_from_db()
        assert project.status == ProjectStatus.APPROVED
        assert project.reviewed_by == pmo
        assert project.approved_at is not None

    def test_reject_requires_reason(self, project, pmo):
        project.submit()
        project.save()

        with pytest.raises(ValidationError):
            review(project, False, pmo, "   ")

        project.refresh_from_db()
        assert project.status == ProjectStatus.SUBMITTED

    def test_reject_stores_reason(self, project, pmo):
        project.submit()
        project.save()

        review(project, False, pmo, "Scope is too broad.")

        project.refresh_from_db()
        assert project.status == ProjectStatus.REJECTED
        assert project.rejection_reason == "Scope is too broad."

    def test_approval_note_is_not_a_rejection_reason(self, project, pmo):
        project.submit()
        project.save()

        review(project, True, pmo, "Well scoped, go ahead.")

        project.refresh_from_db()
        assert project.status == ProjectStatus.APPROVED
        assert project.rejection_reason == ""

    def test_transition_not_allowed(self, project, pmo):
        with pytest.raises(BadRequestError):
            review(project, True, pmo)

        project.refresh_from_db()
        assert project.status == ProjectStatus.DRAFT

    def test_custom_transition_and_fields(self, group, supervisor, student):
        request = SupervisionRequest.objects.create(group=group, supervisor=supervisor, requested_by=student)

        review(request, True, supervisor, "Happy to help.")

        request.refresh_from_db()
        assert request.status == RequestStatus.ACCEPTED
        assert request.responded_at is not None
        assert request.response_message == "Happy to help."
