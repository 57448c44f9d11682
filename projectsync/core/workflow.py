"""
Reviewer decisions shared by projects, submissions and supervision requests.

Each reviewable model declares its own django-fsm transitions and the names
of the fields that record who decided, when, and why. ``review`` runs one
decision against such a model.
"""

import logging

from django.utils import timezone
from django_fsm import TransitionNotAllowed

from projectsync.core.exceptions import BadRequestError
from projectsync.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


class Reviewable:
    """
    Mixin describing how a model takes a reviewer decision.

    approve_transition / reject_transition: names of the FSM transition methods.
    reviewer_field / reviewed_at_field: where the decision is recorded.
    reason_field: free text stored on rejection.
    reason_on_approval: also store a reason given with an approval.
    reason_required: rejection without a reason is refused.
    """

    approve_transition = "approve"
    reject_transition = "reject"
    reviewer_field = "reviewed_by"
    reviewed_at_field = "reviewed_at"
    reason_field = "feedback"
    reason_on_approval = True
    reason_required = False


def review(instance: Reviewable, approve: bool, reviewer, reason: str = ""):
    """
    Apply a reviewer decision to ``instance`` and save it.

    Raises:
        ValidationError: rejection without a reason where one is required
        BadRequestError: the current status does not allow the decision
    """
    reason = (reason or "").strip()
    if not approve and instance.reason_required and not reason:
        raise ValidationError("A reason is required when rejecting.")

    transition_name = instance.approve_transition if approve else instance.reject_transition
    old_status = instance.status
    try:
        getattr(instance, transition_name)()
    except TransitionNotAllowed as exc:
        raise BadRequestError(
            f"Cannot {transition_name} a {instance._meta.verbose_name} "
            f"with status '{old_status}'."
        ) from exc

    if instance.reviewer_field:
        setattr(instance, instance.reviewer_field, reviewer)
    if instance.reviewed_at_field:
        setattr(instance, instance.reviewed_at_field, timezone.now())
    if reason and instance.reason_field and (not approve or instance.reason_on_approval):
        setattr(instance, instance.reason_field, reason)
    instance.save()

    logger.info(
        "TRANSITION: %s %s %s -> %s by %s",
        instance._meta.label,
        instance.pk,
        old_status,
        instance.status,
        reviewer,
    )
    return instance
