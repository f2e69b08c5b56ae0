# apps/workflow/models.py

from django.core.exceptions import ValidationError
from django.db import models

from apps.common.enums import WorkflowStage, WayOfContact
from apps.contacts.models import Contact


# Payload columns each stage is allowed to fill
STAGE_FIELDS: dict[str, tuple[str, ...]] = {
    WorkflowStage.POTENTIALS: (),
    WorkflowStage.INCOMING_REQUESTS: ("date_of_request", "notes"),
    WorkflowStage.CONTACTED_CONTACTS: ("notes", "initial_way_of_contact"),
    WorkflowStage.CLIENTS: ("contract_number", "contract_conditions"),
}

PAYLOAD_FIELDS = (
    "date_of_request",
    "notes",
    "initial_way_of_contact",
    "contract_number",
    "contract_conditions",
)


class StageMembership(models.Model):
    """
    Placement of a contact in exactly one workflow stage.

    The primary key is the contact itself, so a contact can never sit in two
    stages at once. A contact without a row is unassigned. Moving between
    stages replaces the row inside a transaction.
    """
    contact = models.OneToOneField(
        Contact,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="stage_membership",
    )
    stage = models.CharField(
        max_length=32,
        choices=WorkflowStage.choices,
        db_index=True,
    )

    # Incoming request
    date_of_request = models.DateTimeField(null=True, blank=True)

    # Incoming request / contacted contact
    notes = models.TextField(blank=True, default="")

    # Contacted contact
    initial_way_of_contact = models.CharField(
        max_length=20,
        choices=WayOfContact.choices,
        blank=True,
        default="",
    )

    # Client
    contract_number = models.CharField(max_length=100, blank=True, default="")
    contract_conditions = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Stage Membership"
        verbose_name_plural = "Stage Memberships"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["stage", "-created_at"], name="membership_stage_idx"),
        ]

    def __str__(self):
        return f"{self.contact_id} in {self.stage}"

    def clean(self):
        allowed = STAGE_FIELDS.get(self.stage, ())
        errors = {}
        for name in PAYLOAD_FIELDS:
            if name not in allowed and getattr(self, name) not in (None, ""):
                errors[name] = f"Not allowed for stage '{self.stage}'."
        if self.stage == WorkflowStage.CONTACTED_CONTACTS and not self.initial_way_of_contact:
            errors["initial_way_of_contact"] = "Required for contacted contacts."
        if errors:
            raise ValidationError(errors)

    @property
    def payload(self) -> dict:
        """Stage-specific attributes only."""
        return {name: getattr(self, name) for name in STAGE_FIELDS.get(self.stage, ())}
