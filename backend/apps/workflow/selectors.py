# apps/workflow/selectors.py

from uuid import UUID

from django.core.exceptions import ValidationError
from django.db.models import QuerySet, Count

from apps.common.enums import WorkflowStage
from apps.communications.selectors import with_latest_communication
from .models import StageMembership


def get_stage_entries(stage: str) -> QuerySet[StageMembership]:
    """
    Members of a stage with their contact and latest communication fields.
    One query regardless of how many members the stage has.
    """
    qs = StageMembership.objects.filter(stage=stage).select_related("contact")
    return with_latest_communication(qs, contact_ref="contact_id").order_by("-created_at")


def get_membership(contact_id: UUID | str) -> StageMembership | None:
    try:
        return StageMembership.objects.filter(contact_id=contact_id).first()
    except (ValidationError, ValueError):
        return None


def get_stage(contact_id: UUID | str) -> str | None:
    membership = get_membership(contact_id)
    return membership.stage if membership else None


def get_stage_counts() -> dict[str, int]:
    """Number of contacts per stage; empty stages report 0."""
    counts = dict(
        StageMembership.objects.values_list("stage")
        .annotate(total=Count("contact"))
        .order_by()
    )
    return {stage: counts.get(stage, 0) for stage in WorkflowStage.values}
