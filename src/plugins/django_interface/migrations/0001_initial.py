import uuid

from django.db import migrations, models


def _audit_columns():
    return [
        ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ("tenant_id", models.UUIDField(db_index=True)),
        ("created_on", models.DateTimeField()),
        ("created_by", models.UUIDField()),
        ("updated_on", models.DateTimeField(blank=True, null=True)),
        ("updated_by", models.UUIDField(blank=True, null=True)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="DunningLetter",
            fields=[
                *_audit_columns(),
                ("name", models.CharField(max_length=255)),
                ("reference_number", models.CharField(blank=True, max_length=50, null=True)),
                ("recipient_name", models.CharField(blank=True, max_length=255, null=True)),
                ("amount_due", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("due_date", models.DateField(blank=True, null=True)),
                ("dunning_level", models.PositiveSmallIntegerField(default=1)),
                (
                    "status",
                    models.CharField(
                        choices=[("draft", "Draft"), ("sent", "Sent"), ("paid", "Paid"), ("cancelled", "Cancelled")],
                        default="draft",
                        max_length=20,
                    ),
                ),
                ("sent_on", models.DateTimeField(blank=True, null=True)),
                ("notes", models.TextField(blank=True, null=True)),
            ],
            options={
                "db_table": "dunning_letters",
                "indexes": [
                    models.Index(fields=["tenant_id", "created_on"], name="dunning_tenant_created_idx"),
                    models.Index(fields=["tenant_id", "status"], name="dunning_tenant_status_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Prescription",
            fields=[
                *_audit_columns(),
                ("name", models.CharField(max_length=255)),
                ("patient_name", models.CharField(blank=True, max_length=255, null=True)),
                ("dosage", models.CharField(blank=True, max_length=100, null=True)),
                ("frequency", models.CharField(blank=True, max_length=100, null=True)),
                ("prescribed_on", models.DateField(blank=True, null=True)),
                ("valid_until", models.DateField(blank=True, null=True)),
                ("refills", models.PositiveIntegerField(default=0)),
                ("prescriber", models.CharField(blank=True, max_length=255, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("instructions", models.TextField(blank=True, null=True)),
            ],
            options={
                "db_table": "prescriptions",
                "indexes": [
                    models.Index(fields=["tenant_id", "created_on"], name="rx_tenant_created_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Treatment",
            fields=[
                *_audit_columns(),
                ("name", models.CharField(max_length=255)),
                ("patient_name", models.CharField(blank=True, max_length=255, null=True)),
                ("tooth", models.CharField(blank=True, max_length=10, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("planned", "Planned"),
                            ("in_progress", "In progress"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="planned",
                        max_length=20,
                    ),
                ),
                ("start_date", models.DateField(blank=True, null=True)),
                ("end_date", models.DateField(blank=True, null=True)),
                ("sessions", models.PositiveIntegerField(default=1)),
                ("cost", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("notes", models.TextField(blank=True, null=True)),
            ],
            options={
                "db_table": "treatments",
                "indexes": [
                    models.Index(fields=["tenant_id", "created_on"], name="treatment_tenant_created_idx"),
                    models.Index(fields=["tenant_id", "status"], name="treatment_tenant_status_idx"),
                ],
            },
        ),
    ]
