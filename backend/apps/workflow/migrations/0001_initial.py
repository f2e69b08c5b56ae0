import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("contacts", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="StageMembership",
            fields=[
                (
                    "contact",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        primary_key=True,
                        related_name="stage_membership",
                        serialize=False,
                        to="contacts.contact",
                    ),
                ),
                (
                    "stage",
                    models.CharField(
                        choices=[
                            ("potentials", "Potential"),
                            ("incoming_requests", "Incoming Request"),
                            ("contacted_contacts", "Contacted Contact"),
                            ("clients", "Client"),
                        ],
                        db_index=True,
                        max_length=32,
                    ),
                ),
                ("date_of_request", models.DateTimeField(blank=True, null=True)),
                ("notes", models.TextField(blank=True, default="")),
                (
                    "initial_way_of_contact",
                    models.CharField(
                        blank=True,
                        choices=[("incoming/warm", "Incoming / warm"), ("outbound/cold", "Outbound / cold")],
                        default="",
                        max_length=20,
                    ),
                ),
                ("contract_number", models.CharField(blank=True, default="", max_length=100)),
                ("contract_conditions", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name": "Stage Membership",
                "verbose_name_plural": "Stage Memberships",
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["stage", "-created_at"], name="membership_stage_idx")],
            },
        ),
    ]
