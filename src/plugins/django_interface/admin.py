"""
Admin site registry
-------------------
Registers the tenant-scoped record models; audit columns are read-only.
"""

import structlog
from django.contrib import admin as django_admin

from . import models

logger = structlog.get_logger(__name__)

AUDIT_FIELDS = ("id", "tenant_id", "created_on", "created_by", "updated_on", "updated_by")

# ╭──────────────────────────────────────────────╮
# │ ModelAdmin options                           │
# ╰──────────────────────────────────────────────╯
MODEL_ADMIN_REGISTRY: dict[type[models.models.Model], dict] = {
    models.DunningLetter: dict(
        list_display=("name", "reference_number", "status", "dunning_level", "due_date", "tenant_id"),
        list_filter=("status", "dunning_level"),
        search_fields=("name", "reference_number", "recipient_name"),
    ),
    models.Prescription: dict(
        list_display=("name", "patient_name", "prescriber", "is_active", "valid_until", "tenant_id"),
        list_filter=("is_active",),
        search_fields=("name", "patient_name", "prescriber"),
    ),
    models.Treatment: dict(
        list_display=("name", "patient_name", "tooth", "status", "start_date", "tenant_id"),
        list_filter=("status",),
        search_fields=("name", "patient_name"),
    ),
}

# ╭──────────────────────────────────────────────╮
# │ Registration                                 │
# ╰──────────────────────────────────────────────╯
for model, opts in MODEL_ADMIN_REGISTRY.items():
    admin_class = type(f"{model.__name__}Admin", (django_admin.ModelAdmin,), {"readonly_fields": AUDIT_FIELDS, **opts})
    django_admin.site.register(model, admin_class)
    logger.debug("admin.model_registered", model=model.__name__)
