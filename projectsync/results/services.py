"""
Result compilation and publication.

Scores are Decimal percentages rounded half-up to two places. The total is
the weighted mean of the supervisor, external panel and milestone scores
using RESULT_WEIGHTS; the grade is the first RESULT_GRADE_THRESHOLDS entry
whose floor the total reaches.
"""

import csv
import io
import logging
from decimal import ROUND_HALF_UP
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from projectsync.audit.models import AuditAction
from projectsync.audit.services import log_action
from projectsync.core.exceptions import BadRequestError
from projectsync.evaluations.models import Evaluation
from projectsync.evaluations.models import EvaluationStatus
from projectsync.evaluations.models import EvaluatorRole
from projectsync.notifications.models import NotificationType
from projectsync.notifications.services import notify_many
from projectsync.projects.models import ACTIVE_STATUSES
from projectsync.projects.models import MilestoneStatus
from projectsync.projects.models import Project
from projectsync.results.models import ProjectResult
from projectsync.results.models import ResultPublication
from projectsync.results.models import results_published
from projectsync.users.models import User

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
SCORED_STATUSES = [EvaluationStatus.SUBMITTED, EvaluationStatus.LOCKED]


def q2(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def average_percentage(evaluations) -> Decimal:
    """Mean of total/max as a percentage; 0 without evaluations."""
    percentages = [
        Decimal(e.total_marks) * 100 / Decimal(e.max_marks)
        for e in evaluations
        if e.max_marks
    ]
    if not percentages:
        return q2(0)
    return q2(sum(percentages) / len(percentages))


def milestone_percentage(project: Project) -> Decimal:
    milestones = list(project.milestones.all())
    if not milestones:
        return q2(0)
    completed = sum(1 for m in milestones if m.status == MilestoneStatus.COMPLETED)
    return q2(Decimal(completed) * 100 / len(milestones))


def weighted_total(supervisor_score: Decimal, external_score: Decimal, milestone_score: Decimal) -> Decimal:
    weights = settings.RESULT_WEIGHTS
    total = (
        supervisor_score * weights["supervisor"]
        + external_score * weights["external_panel"]
        + milestone_score * weights["milestones"]
    ) / sum(weights.values())
    return q2(total)


def grade_for(total: Decimal) -> str:
    for floor, grade in settings.RESULT_GRADE_THRESHOLDS:
        if total >= floor:
            return grade
    return settings.RESULT_GRADE_THRESHOLDS[-1][1]


def compile_results(session, actor, request=None) -> list[ProjectResult]:
    """
    Compute the result of every approved project of ``session``.

    Raises:
        BadRequestError: results of the session are already published
    """
    if results_published(session):
        raise BadRequestError("Results for this session are already published.")

    now = timezone.now()
    compiled = []
    projects = Project.objects.filter(
        group__session=session,
        status__in=ACTIVE_STATUSES,
    ).prefetch_related("milestones")

    with transaction.atomic():
        for project in projects:
            evaluations = Evaluation.objects.filter(project=project, status__in=SCORED_STATUSES)
            supervisor_score = average_percentage(
                e for e in evaluations if e.evaluator_role == EvaluatorRole.SUPERVISOR
            )
            external_score = average_percentage(
                e for e in evaluations if e.evaluator_role == EvaluatorRole.EXTERNAL_PANEL
            )
            milestone_score = milestone_percentage(project)
            total = weighted_total(supervisor_score, external_score, milestone_score)

            result, _ = ProjectResult.objects.update_or_create(
                project=project,
                defaults={
                    "session": session,
                    "supervisor_score": supervisor_score,
                    "external_score": external_score,
                    "milestone_score": milestone_score,
                    "total": total,
                    "grade": grade_for(total),
                    "compiled_at": now,
                },
            )
            compiled.append(result)

    logger.info("RESULTS: %d projects compiled for %s", len(compiled), session)
    log_action(
        actor,
        AuditAction.RESULTS_COMPILED,
        {"session_id": str(session.id), "projects": len(compiled)},
        request=request,
    )
    return compiled


def publish_results(session, actor, request=None) -> ResultPublication:
    """
    Publish the session's results: lock every submitted evaluation and
    notify the students.

    Raises:
        BadRequestError: already published, or nothing compiled yet
    """
    with transaction.atomic():
        publication, _ = ResultPublication.objects.select_for_update().get_or_create(session=session)
        if publication.is_published:
            raise BadRequestError("Results for this session are already published.")
        if not ProjectResult.objects.filter(session=session).exists():
            raise BadRequestError("Compile the results before publishing them.")

        locked = 0
        for evaluation in Evaluation.objects.filter(
            group__session=session,
            status=EvaluationStatus.SUBMITTED,
        ):
            evaluation.lock()
            evaluation.save(update_fields=["status", "locked_at", "modified"])
            locked += 1

        publication.is_published = True
        publication.published_at = timezone.now()
        publication.published_by = actor
        publication.save()

    logger.info("RESULTS: %s published, %d evaluations locked", session, locked)
    log_action(
        actor,
        AuditAction.RESULTS_PUBLISHED,
        {"session_id": str(session.id), "locked_evaluations": locked},
        request=request,
    )
    notify_many(
        User.objects.filter(project_groups__session=session).distinct(),
        NotificationType.RESULTS_PUBLISHED,
        "Results published",
        f"Results for {session.name} are now available.",
        link="/results/my",
    )
    return publication


EXPORT_COLUMNS = [
    "Group",
    "Project",
    "Supervisor",
    "Members",
    "Supervisor score",
    "External score",
    "Milestone score",
    "Total",
    "Grade",
]


def export_csv(results) -> str:
    """Master result sheet as CSV text."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(EXPORT_COLUMNS)
    for result in results:
        project = result.project
        group = project.group
        writer.writerow(
            [
                group.name,
                project.title,
                project.supervisor.get_full_name() if project.supervisor else "",
                "; ".join(m.email for m in group.members.all()),
                result.supervisor_score,
                result.external_score,
                result.milestone_score,
                result.total,
                result.grade,
            ]
        )
    return buffer.getvalue()
