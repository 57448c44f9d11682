"""
Tests for recording evaluator marks.
"""

import pytest

from projectsync.core.exceptions import BadRequestError
from projectsync.core.exceptions import PermissionDeniedError
from projectsync.evaluations.models import MAX_MARKS
from projectsync.evaluations.models import EvaluationStatus
from projectsync.evaluations.models import EvaluatorRole
from projectsync.evaluations.services import evaluator_role_for
from projectsync.evaluations.services import submit_evaluation
from projectsync.notifications.models import Notification
from projectsync.notifications.models import NotificationType

MARKS = {
    "documentation": 16,
    "presentation": 15,
    "implementation": 18,
    "innovation": 12,
    "teamwork": 19,
}


@pytest.mark.django_db
class TestEvaluatorRole:
    def test_supervisor_of_group(self, approved_project, supervisor):
        assert evaluator_role_for(supervisor, approved_project) == EvaluatorRole.SUPERVISOR

    def test_external_panel(self, approved_project, external):
        assert evaluator_role_for(external, approved_project) == EvaluatorRole.EXTERNAL_PANEL

    def test_student_has_none(self, approved_project, student):
        assert evaluator_role_for(student, approved_project) is None


@pytest.mark.django_db
class TestSubmitEvaluation:
    def test_totals_marks(self, approved_project, supervisor, exam_cell):
        evaluation = submit_evaluation(approved_project, supervisor, MARKS, feedback="Solid work.")

        assert evaluation.status == EvaluationStatus.SUBMITTED
        assert evaluation.total_marks == 80
        assert evaluation.max_marks == MAX_MARKS
        assert evaluation.percentage == 80.0
        assert evaluation.group_id == approved_project.group_id
        assert evaluation.submitted_at is not None
        assert Notification.objects.filter(
            user=exam_cell,
            notification_type=NotificationType.EVALUATION_SUBMITTED,
        ).exists()

    def test_resubmission_updates_same_row(self, approved_project, external):
        first = submit_evaluation(approved_project, external, MARKS)
        second = submit_evaluation(approved_project, external, {**MARKS, "innovation": 20})

        assert first.pk == second.pk
        assert second.total_marks == 88
        assert second.evaluator_role == EvaluatorRole.EXTERNAL_PANEL

    def test_student_cannot_evaluate(self, approved_project, student):
        with pytest.raises(PermissionDeniedError):
            submit_evaluation(approved_project, student, MARKS)

    def test_draft_project_cannot_be_evaluated(self, project, external):
        with pytest.raises(BadRequestError):
            submit_evaluation(project, external, MARKS)

    def test_locked_evaluation_is_final(self, approved_project, supervisor):
        evaluation = submit_evaluation(approved_project, supervisor, MARKS)
        evaluation.lock()
        evaluation.save()

        with pytest.raises(BadRequestError):
            submit_evaluation(approved_project, supervisor, {**MARKS, "teamwork": 20})

        evaluation.refresh_from_db()
        assert evaluation.teamwork == 19
