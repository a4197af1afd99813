# =========================================================
# Read serializers built over the *entities* (dataclasses),
# not over the Django models. Writes go through the pydantic
# DTOs in the application layer.
# =========================================================
from rest_framework import serializers


class DynamicFieldsSerializer(serializers.Serializer):
    """
    Accepts `fields=` (canonical attribute names) and drops every other
    field from the representation.
    """

    def __init__(self, *args, fields=None, **kwargs):
        super().__init__(*args, **kwargs)
        if fields is not None:
            for name in set(self.fields) - set(fields):
                self.fields.pop(name)


class TenantScopedSerializer(DynamicFieldsSerializer):
    id         = serializers.UUIDField()
    tenant_id  = serializers.UUIDField()
    created_on = serializers.DateTimeField()
    created_by = serializers.UUIDField()
    updated_on = serializers.DateTimeField(allow_null=True)
    updated_by = serializers.UUIDField(allow_null=True)


# ───────────────────────────────────────────────
# Dunning letters
# ───────────────────────────────────────────────
class DunningLetterSerializer(TenantScopedSerializer):
    name             = serializers.CharField()
    reference_number = serializers.CharField(allow_null=True)
    recipient_name   = serializers.CharField(allow_null=True)
    amount_due       = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
    due_date         = serializers.DateField(allow_null=True)
    dunning_level    = serializers.IntegerField()
    status           = serializers.CharField()
    sent_on          = serializers.DateTimeField(allow_null=True)
    notes            = serializers.CharField(allow_null=True)


# ───────────────────────────────────────────────
# Prescriptions
# ───────────────────────────────────────────────
class PrescriptionSerializer(TenantScopedSerializer):
    name          = serializers.CharField()
    patient_name  = serializers.CharField(allow_null=True)
    dosage        = serializers.CharField(allow_null=True)
    frequency     = serializers.CharField(allow_null=True)
    prescribed_on = serializers.DateField(allow_null=True)
    valid_until   = serializers.DateField(allow_null=True)
    refills       = serializers.IntegerField()
    prescriber    = serializers.CharField(allow_null=True)
    is_active     = serializers.BooleanField()
    instructions  = serializers.CharField(allow_null=True)


# ───────────────────────────────────────────────
# Treatments
# ───────────────────────────────────────────────
class TreatmentSerializer(TenantScopedSerializer):
    name         = serializers.CharField()
    patient_name = serializers.CharField(allow_null=True)
    tooth        = serializers.CharField(allow_null=True)
    status       = serializers.CharField()
    start_date   = serializers.DateField(allow_null=True)
    end_date     = serializers.DateField(allow_null=True)
    sessions     = serializers.IntegerField()
    cost         = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
    notes        = serializers.CharField(allow_null=True)
