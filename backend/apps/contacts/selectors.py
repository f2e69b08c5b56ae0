# apps/contacts/selectors.py

from uuid import UUID

from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.db.models import QuerySet, Q

from apps.communications.followups import current_date
from apps.communications.selectors import with_latest_communication
from .models import Contact


def get_contact_by_id(contact_id: UUID | str) -> Contact | None:
    """Get a single contact by ID, with its stage membership preloaded."""
    try:
        return (
            Contact.objects.select_related("stage_membership")
            .filter(id=contact_id)
            .first()
        )
    except (ValidationError, ValueError):
        return None


def get_contact_stage(contact: Contact) -> str | None:
    """Current workflow stage of a contact, or None if unassigned."""
    try:
        return contact.stage_membership.stage
    except ObjectDoesNotExist:
        return None


def get_contacts_with_latest_communication() -> QuerySet[Contact]:
    """All contacts sorted by name, each with latest communication fields."""
    return with_latest_communication(Contact.objects.all()).order_by("name")


def get_overdue_contacts(today=None) -> QuerySet[Contact]:
    """Contacts whose latest communication's due date has already passed."""
    today = today or current_date()
    return (
        get_contacts_with_latest_communication()
        .filter(latest_contact_again_due_date__lt=today)
        .order_by("latest_contact_again_due_date", "name")
    )


def search_contacts(query: str) -> QuerySet[Contact]:
    return get_contacts_with_latest_communication().filter(
        Q(name__icontains=query) |
        Q(email__icontains=query) |
        Q(company__icontains=query)
    )
