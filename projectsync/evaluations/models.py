"""
Marks given to a project by its supervisor and by the external panel.
"""

from django.conf import settings
from django.core.validators import MaxValueValidator
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from django_fsm import FSMField
from django_fsm import transition

from projectsync.core.models import BaseModel
from projectsync.core.roles import Role
from projectsync.core.roles import is_pmo_or_admin
from projectsync.core.roles import user_has_role

MARK_FIELDS = ["documentation", "presentation", "implementation", "innovation", "teamwork"]
MAX_MARK = 20
MAX_MARKS = MAX_MARK * len(MARK_FIELDS)


class EvaluatorRole(models.TextChoices):
    SUPERVISOR = "supervisor", _("Supervisor")
    EXTERNAL_PANEL = "external_panel", _("External panel")


class EvaluationStatus(models.TextChoices):
    PENDING = "pending", _("Pending")
    SUBMITTED = "submitted", _("Submitted")
    LOCKED = "locked", _("Locked")


def mark_field(verbose_name):
    return models.PositiveSmallIntegerField(
        verbose_name,
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(MAX_MARK)],
    )


class EvaluationQuerySet(models.QuerySet):
    def visible_to(self, user):
        """
        Evaluators see their own; PMO, exam cell and admin see all;
        students see their group's once the session's results are published.
        """
        if is_pmo_or_admin(user) or user_has_role(user, Role.EXAM_CELL):
            return self.all()

        visible = models.Q(evaluator=user) | models.Q(
            group__members=user,
            group__session__result_publication__is_published=True,
        )
        return self.filter(visible).distinct()


class Evaluation(BaseModel):
    """
    One evaluator's marks for one project.

    Five categories of MAX_MARK each, totalling MAX_MARKS. Status moves
    pending -> submitted; submitted marks stay editable until result
    publication locks them.
    """

    project = models.ForeignKey(
        "projects.Project",
        on_delete=models.CASCADE,
        related_name="evaluations",
        verbose_name=_("project"),
    )
    group = models.ForeignKey(
        "groups.ProjectGroup",
        on_delete=models.CASCADE,
        related_name="evaluations",
        verbose_name=_("group"),
    )
    evaluator = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="evaluations_given",
        verbose_name=_("evaluator"),
    )
    evaluator_role = models.CharField(
        _("evaluator role"),
        max_length=20,
        choices=EvaluatorRole.choices,
    )

    documentation = mark_field(_("documentation"))
    presentation = mark_field(_("presentation"))
    implementation = mark_field(_("implementation"))
    innovation = mark_field(_("innovation"))
    teamwork = mark_field(_("teamwork"))

    total_marks = models.PositiveSmallIntegerField(_("total marks"), default=0)
    max_marks = models.PositiveSmallIntegerField(_("max marks"), default=MAX_MARKS)
    feedback = models.TextField(_("feedback"), blank=True)

    status = FSMField(
        _("status"),
        default=EvaluationStatus.PENDING,
        choices=EvaluationStatus.choices,
    )
    submitted_at = models.DateTimeField(_("submitted at"), null=True, blank=True)
    locked_at = models.DateTimeField(_("locked at"), null=True, blank=True)

    objects = EvaluationQuerySet.as_manager()

    class Meta:
        verbose_name = _("evaluation")
        verbose_name_plural = _("evaluations")
        ordering = ["-created"]
        constraints = [
            models.UniqueConstraint(
                fields=["project", "evaluator"],
                name="unique_evaluation_per_evaluator",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.project} by {self.evaluator} ({self.total_marks}/{self.max_marks})"

    def save(self, *args, **kwargs):
        self.total_marks = sum(getattr(self, field) for field in MARK_FIELDS)
        if kwargs.get("update_fields") is not None:
            kwargs["update_fields"] = {*kwargs["update_fields"], "total_marks"}
        super().save(*args, **kwargs)

    @transition(
        field=status,
        source=[EvaluationStatus.PENDING, EvaluationStatus.SUBMITTED],
        target=EvaluationStatus.SUBMITTED,
    )
    def submit(self):
        self.submitted_at = timezone.now()

    @transition(field=status, source=EvaluationStatus.SUBMITTED, target=EvaluationStatus.LOCKED)
    def lock(self):
        self.locked_at = timezone.now()

    @property
    def is_locked(self) -> bool:
        return self.status == EvaluationStatus.LOCKED

    @property
    def percentage(self) -> float:
        return self.total_marks * 100 / self.max_marks if self.max_marks else 0.0
