import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("organizations", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="organization",
            name="status",
            field=models.CharField(
                choices=[
                    ("pending_approval", "Pending Approval"),
                    ("active", "Active"),
                    ("rejected", "Rejected"),
                ],
                default="active",
                max_length=32,
            ),
        ),
        migrations.CreateModel(
            name="PartnershipInterest",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "partnership_type",
                    models.CharField(
                        choices=[
                            ("monetary", "Monetary"),
                            ("knowledge", "Knowledge"),
                            ("skilled", "Skilled"),
                            ("volunteering", "Volunteering"),
                        ],
                        max_length=32,
                    ),
                ),
                ("description", models.TextField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="partnership_interests",
                        to="organizations.organization",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
    ]
