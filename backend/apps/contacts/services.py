# apps/contacts/services.py

import logging
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction

from apps.common.errors import DuplicateEmail, NotFound, ValidationError
from .models import Contact

logger = logging.getLogger(__name__)


# Fields a caller may set; id and timestamps are owned by the store
EDITABLE_FIELDS = (
    "name",
    "email",
    "telephone",
    "company",
    "address",
    "product_interest",
    "notes",
    "next_steps",
)


def _clean_values(data: dict) -> dict:
    unknown = set(data) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(
            f"Unknown contact fields: {', '.join(sorted(unknown))}",
            fields={name: ["Unknown field."] for name in sorted(unknown)},
        )
    values = {}
    for key, value in data.items():
        # Optional text columns store "" rather than NULL
        if value is None and key not in ("name", "email"):
            value = ""
        if isinstance(value, str):
            value = value.strip()
        values[key] = value
    return values


def email_taken(email: str, exclude_id: UUID | None = None) -> bool:
    """Case-insensitive check for an existing contact with this email."""
    qs = Contact.objects.filter(email__iexact=email)
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    return qs.exists()


def _save(contact: Contact) -> Contact:
    try:
        contact.full_clean(validate_constraints=False)
    except DjangoValidationError as e:
        raise ValidationError.from_django(e) from e
    try:
        # Savepoint keeps an enclosing transaction usable after a unique clash
        with transaction.atomic():
            contact.save()
    except IntegrityError as e:
        # Lost a race with a concurrent insert of the same email
        raise DuplicateEmail(contact.email) from e
    return contact


def create_contact(**data) -> Contact:
    """Create a contact. Fails with DuplicateEmail if the email is already used."""
    values = _clean_values(data)
    email = values.get("email") or ""
    if email and email_taken(email):
        logger.warning(f"Rejected contact with duplicate email {email}")
        raise DuplicateEmail(email)

    contact = _save(Contact(**values))
    logger.info(f"Created contact {contact.id} ({contact.name})")
    return contact


def get_contact_or_raise(contact_id: UUID | str, for_update: bool = False) -> Contact:
    qs = Contact.objects.all()
    if for_update:
        qs = qs.select_for_update()
    try:
        return qs.get(id=contact_id)
    except (Contact.DoesNotExist, DjangoValidationError, ValueError):
        # A malformed UUID can never match a row
        raise NotFound("Contact", contact_id)


def update_contact(contact_id: UUID | str, **data) -> Contact:
    """Merge the provided fields into an existing contact."""
    contact = get_contact_or_raise(contact_id)
    values = _clean_values(data)

    if "email" in values and values["email"] and email_taken(values["email"], exclude_id=contact.id):
        logger.warning(f"Rejected email change for {contact.id}: {values['email']} already used")
        raise DuplicateEmail(values["email"])

    for key, value in values.items():
        setattr(contact, key, value)
    _save(contact)
    logger.info(f"Updated contact {contact.id}: {sorted(values)}")
    return contact


def delete_contact(contact_id: UUID | str) -> None:
    """Delete a contact; communications and stage membership cascade."""
    contact = get_contact_or_raise(contact_id)
    contact.delete()
    logger.info(f"Deleted contact {contact_id}")
