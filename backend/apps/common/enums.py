# apps/common/enums.py

from django.db import models


class WorkflowStage(models.TextChoices):
    """The four workflow buckets a contact can occupy."""
    POTENTIALS = "potentials", "Potential"
    INCOMING_REQUESTS = "incoming_requests", "Incoming Request"
    CONTACTED_CONTACTS = "contacted_contacts", "Contacted Contact"
    CLIENTS = "clients", "Client"


class WayOfContact(models.TextChoices):
    """How the first contact with a person came about."""
    INCOMING_WARM = "incoming/warm", "Incoming / warm"
    OUTBOUND_COLD = "outbound/cold", "Outbound / cold"


class FollowUpStatus(models.TextChoices):
    """Classification of a contact's latest follow-up due date."""
    OVERDUE = "overdue", "Overdue"
    SCHEDULED = "scheduled", "Scheduled"
    NONE = "none", "No follow-up scheduled"
