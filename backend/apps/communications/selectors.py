# apps/communications/selectors.py

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable
from uuid import UUID

from django.db.models import QuerySet, OuterRef, Subquery

from apps.contacts.models import Contact
from .models import Communication


# Annotation names carried by querysets passed through ``with_latest_communication``
LATEST_FIELDS = (
    "latest_next_steps",
    "latest_contact_again_due_date",
    "communication_id",
    "communication_date",
)


@dataclass(frozen=True)
class LatestCommunicationDetails:
    """Follow-up fields taken from a contact's most recent communication."""
    latest_next_steps: str | None = None
    latest_contact_again_due_date: date | None = None
    communication_id: UUID | None = None
    communication_date: datetime | None = None


def _latest_for(contact_ref: str) -> QuerySet[Communication]:
    # Most recent occurrence wins; same timestamp falls back to insertion time
    return Communication.objects.filter(contact_id=OuterRef(contact_ref)).order_by(
        "-date", "-created_at"
    )


def with_latest_communication(qs: QuerySet, contact_ref: str = "pk") -> QuerySet:
    """
    Annotate every row of ``qs`` with LatestCommunicationDetails fields.

    ``contact_ref`` is the path from the queryset's model to the contact id
    ("pk" for contacts, "contact_id" for rows pointing at a contact). The
    lookup is done with correlated subqueries, so the whole list is resolved
    in the same single query.
    """
    latest = _latest_for(contact_ref)
    return qs.annotate(
        latest_next_steps=Subquery(latest.values("next_steps")[:1]),
        latest_contact_again_due_date=Subquery(latest.values("contact_again_due_date")[:1]),
        communication_id=Subquery(latest.values("id")[:1]),
        communication_date=Subquery(latest.values("date")[:1]),
    )


def get_latest_communication_map(
    contact_ids: Iterable[UUID | str],
) -> dict[UUID, LatestCommunicationDetails]:
    """Resolve latest communication details for many contacts in one query."""
    ids = list(contact_ids)
    if not ids:
        return {}
    rows = with_latest_communication(Contact.objects.filter(id__in=ids)).values("id", *LATEST_FIELDS)
    return {
        row["id"]: LatestCommunicationDetails(**{name: row[name] for name in LATEST_FIELDS})
        for row in rows
    }


def get_communications_for_contact(contact_id: UUID | str) -> QuerySet[Communication]:
    """All communications of a contact, newest first."""
    return Communication.objects.filter(contact_id=contact_id).order_by("-date", "-created_at")
