# apps/communications/models.py

import uuid

from django.db import models

from apps.contacts.models import Contact


class Communication(models.Model):
    """
    A single interaction with a contact.
    Append-only: rows are never edited after creation.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    contact = models.ForeignKey(
        Contact,
        on_delete=models.CASCADE,
        related_name="communications",
    )

    # When it happened
    date = models.DateTimeField()

    # Follow-up
    contact_again_due_date = models.DateField(
        null=True,
        blank=True,
        help_text="Date by which the next follow-up should happen",
    )
    next_steps = models.TextField(blank=True, default="")

    notes = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-date", "-created_at"]
        indexes = [
            models.Index(fields=["contact", "-date", "-created_at"], name="communication_latest_idx"),
            models.Index(fields=["contact_again_due_date"], name="communication_due_idx"),
        ]

    def __str__(self):
        return f"{self.contact_id} @ {self.date:%Y-%m-%d %H:%M}"
