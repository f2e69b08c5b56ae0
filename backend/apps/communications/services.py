# apps/communications/services.py

import logging
import datetime
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.utils import timezone

from apps.common.errors import InvalidReference, ValidationError
from apps.contacts.models import Contact
from .models import Communication

logger = logging.getLogger(__name__)


COMMUNICATION_FIELDS = (
    "contact_id",
    "date",
    "notes",
    "contact_again_due_date",
    "next_steps",
)

TEXT_FIELDS = ("notes", "next_steps")
DATE_FIELDS = ("date", "contact_again_due_date")


def clean_communication_data(data: dict) -> dict:
    """Reject unknown keys and values of the wrong type before logging."""
    errors = {}
    for name in sorted(set(data) - set(COMMUNICATION_FIELDS)):
        errors[name] = ["Unknown field."]
    for name in TEXT_FIELDS:
        value = data.get(name)
        if value is not None and not isinstance(value, str):
            errors[name] = ["Must be text."]
    for name in DATE_FIELDS:
        value = data.get(name)
        if value is not None and not isinstance(value, (datetime.date, str)):
            errors[name] = ["Must be a date."]
    if errors:
        raise ValidationError(
            f"Invalid communication fields: {', '.join(errors)}",
            fields=errors,
        )
    return {name: data[name] for name in COMMUNICATION_FIELDS if name in data}


def add_communication(
    contact_id: UUID | str | None = None,
    date: datetime.datetime | None = None,
    notes: str | None = None,
    contact_again_due_date: datetime.date | None = None,
    next_steps: str | None = None,
) -> Communication:
    """
    Append a communication to a contact's history.

    Raises:
        ValidationError: contact_id, date or notes missing
        InvalidReference: contact_id does not point at a contact
    """
    clean_communication_data({
        "date": date,
        "notes": notes,
        "contact_again_due_date": contact_again_due_date,
        "next_steps": next_steps,
    })

    missing = {}
    if contact_id is None:
        missing["contact_id"] = ["Contact is required."]
    if date is None:
        missing["date"] = ["Communication date is required."]
    if not (notes or "").strip():
        missing["notes"] = ["Notes are required."]
    if missing:
        raise ValidationError(
            f"Missing required fields: {', '.join(missing)}",
            fields=missing,
        )

    try:
        contact_exists = Contact.objects.filter(id=contact_id).exists()
    except (DjangoValidationError, ValueError):
        contact_exists = False
    if not contact_exists:
        logger.warning(f"Communication rejected: contact {contact_id} does not exist")
        raise InvalidReference("contact_id", contact_id)

    if isinstance(date, datetime.datetime) and timezone.is_naive(date):
        date = timezone.make_aware(date)

    comm = Communication(
        contact_id=contact_id,
        date=date,
        notes=notes.strip(),
        contact_again_due_date=contact_again_due_date,
        next_steps=(next_steps or "").strip(),
    )
    try:
        comm.full_clean(exclude=["contact"])
    except DjangoValidationError as e:
        raise ValidationError.from_django(e) from e
    comm.save()

    logger.info(
        f"Logged communication {comm.id} for contact {contact_id}"
        f" (due {comm.contact_again_due_date or 'none'})"
    )
    return comm
