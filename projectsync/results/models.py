"""
Compiled project results and their publication per session.
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from projectsync.core.models import BaseModel


class ProjectResult(BaseModel):
    """
    Weighted result of one project, recomputed on every compilation until
    the session's results are published.

    All scores are percentages with two decimals.
    """

    project = models.OneToOneField(
        "projects.Project",
        on_delete=models.CASCADE,
        related_name="result",
        verbose_name=_("project"),
    )
    session = models.ForeignKey(
        "academics.AcademicSession",
        on_delete=models.CASCADE,
        related_name="results",
        verbose_name=_("academic session"),
    )
    supervisor_score = models.DecimalField(_("supervisor score"), max_digits=5, decimal_places=2)
    external_score = models.DecimalField(_("external panel score"), max_digits=5, decimal_places=2)
    milestone_score = models.DecimalField(_("milestone score"), max_digits=5, decimal_places=2)
    total = models.DecimalField(_("total"), max_digits=5, decimal_places=2)
    grade = models.CharField(_("grade"), max_length=2)
    compiled_at = models.DateTimeField(_("compiled at"))

    class Meta:
        verbose_name = _("project result")
        verbose_name_plural = _("project results")
        ordering = ["-total"]

    def __str__(self) -> str:
        return f"{self.project.title}: {self.total} ({self.grade})"


class ResultPublication(BaseModel):
    """Publication state of a session's results. Publishing is final."""

    session = models.OneToOneField(
        "academics.AcademicSession",
        on_delete=models.CASCADE,
        related_name="result_publication",
        verbose_name=_("academic session"),
    )
    is_published = models.BooleanField(_("published"), default=False)
    published_at = models.DateTimeField(_("published at"), null=True, blank=True)
    published_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name=_("published by"),
    )

    class Meta:
        verbose_name = _("result publication")
        verbose_name_plural = _("result publications")

    def __str__(self) -> str:
        state = "published" if self.is_published else "unpublished"
        return f"{self.session} ({state})"


def results_published(session) -> bool:
    if session is None:
        return False
    return ResultPublication.objects.filter(session=session, is_published=True).exists()
