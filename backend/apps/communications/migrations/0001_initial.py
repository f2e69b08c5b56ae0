import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("contacts", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Communication",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("date", models.DateTimeField()),
                (
                    "contact_again_due_date",
                    models.DateField(
                        blank=True,
                        help_text="Date by which the next follow-up should happen",
                        null=True,
                    ),
                ),
                ("next_steps", models.TextField(blank=True, default="")),
                ("notes", models.TextField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "contact",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="communications",
                        to="contacts.contact",
                    ),
                ),
            ],
            options={
                "ordering": ["-date", "-created_at"],
                "indexes": [
                    models.Index(fields=["contact", "-date", "-created_at"], name="communication_latest_idx"),
                    models.Index(fields=["contact_again_due_date"], name="communication_due_idx"),
                ],
            },
        ),
    ]
