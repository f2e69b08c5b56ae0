# apps/contacts/models.py

import uuid

from django.core.validators import MinLengthValidator
from django.db import models
from django.db.models.functions import Lower

from apps.common.models import TimestampedModel


class Contact(TimestampedModel):
    """A person tracked through the sales workflow."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Core identity
    name = models.CharField(max_length=255, validators=[MinLengthValidator(2)])
    email = models.EmailField(max_length=254)

    # Profile
    telephone = models.CharField(max_length=64, blank=True, default="")
    company = models.CharField(max_length=255, blank=True, default="")
    address = models.TextField(blank=True, default="")
    product_interest = models.CharField(max_length=255, blank=True, default="")

    # Free text
    notes = models.TextField(blank=True, default="")
    next_steps = models.TextField(blank=True, default="")

    class Meta:
        constraints = [
            models.UniqueConstraint(
                Lower("email"),
                name="unique_contact_email_ci",
            )
        ]
        indexes = [
            models.Index(fields=["name"], name="contact_name_idx"),
        ]
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} <{self.email}>"
