"""
Domain → ORM mapping for the tenant-scoped clinical records.

⚑ UUID primary keys, generated by the application layer
⚑ `tenant_id` indexed on every table and always the first lookup column
⚑ Audit columns (`created_*`, `updated_*`) stamped server-side
"""

from __future__ import annotations

import uuid

from django.db import models
from django.db.models import Index


# ╭──────────────────────────────────────────────╮
# │ 0. Base                                      │
# ╰──────────────────────────────────────────────╯
class TenantScopedModel(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant_id = models.UUIDField(db_index=True)
    created_on = models.DateTimeField()
    created_by = models.UUIDField()
    updated_on = models.DateTimeField(null=True, blank=True)
    updated_by = models.UUIDField(null=True, blank=True)

    class Meta:
        abstract = True


# ╭──────────────────────────────────────────────╮
# │ 1. Dunning letters                           │
# ╰──────────────────────────────────────────────╯
class DunningLetter(TenantScopedModel):
    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        SENT = "sent", "Sent"
        PAID = "paid", "Paid"
        CANCELLED = "cancelled", "Cancelled"

    name = models.CharField(max_length=255)
    reference_number = models.CharField(max_length=50, null=True, blank=True)
    recipient_name = models.CharField(max_length=255, null=True, blank=True)
    amount_due = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    due_date = models.DateField(null=True, blank=True)
    dunning_level = models.PositiveSmallIntegerField(default=1)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    sent_on = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(null=True, blank=True)

    class Meta:
        db_table = "dunning_letters"
        indexes = [
            Index(fields=["tenant_id", "created_on"], name="dunning_tenant_created_idx"),
            Index(fields=["tenant_id", "status"], name="dunning_tenant_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.status})"


# ╭──────────────────────────────────────────────╮
# │ 2. Prescriptions                             │
# ╰──────────────────────────────────────────────╯
class Prescription(TenantScopedModel):
    name = models.CharField(max_length=255)
    patient_name = models.CharField(max_length=255, null=True, blank=True)
    dosage = models.CharField(max_length=100, null=True, blank=True)
    frequency = models.CharField(max_length=100, null=True, blank=True)
    prescribed_on = models.DateField(null=True, blank=True)
    valid_until = models.DateField(null=True, blank=True)
    refills = models.PositiveIntegerField(default=0)
    prescriber = models.CharField(max_length=255, null=True, blank=True)
    is_active = models.BooleanField(default=True)
    instructions = models.TextField(null=True, blank=True)

    class Meta:
        db_table = "prescriptions"
        indexes = [
            Index(fields=["tenant_id", "created_on"], name="rx_tenant_created_idx"),
        ]

    def __str__(self) -> str:
        return self.name


# ╭──────────────────────────────────────────────╮
# │ 3. Treatments                                │
# ╰──────────────────────────────────────────────╯
class Treatment(TenantScopedModel):
    class Status(models.TextChoices):
        PLANNED = "planned", "Planned"
        IN_PROGRESS = "in_progress", "In progress"
        COMPLETED = "completed", "Completed"
        CANCELLED = "cancelled", "Cancelled"

    name = models.CharField(max_length=255)
    patient_name = models.CharField(max_length=255, null=True, blank=True)
    tooth = models.CharField(max_length=10, null=True, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PLANNED)
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    sessions = models.PositiveIntegerField(default=1)
    cost = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    notes = models.TextField(null=True, blank=True)

    class Meta:
        db_table = "treatments"
        indexes = [
            Index(fields=["tenant_id", "created_on"], name="treatment_tenant_created_idx"),
            Index(fields=["tenant_id", "status"], name="treatment_tenant_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.status})"
